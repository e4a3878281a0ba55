# bell_qsim/experiment.py
"""
The CHSH experiment: four trials of the Bell-pair circuit at different
rotation angles, each reduced to a correlation E, then combined into S.
"""
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .circuit import Circuit
from .correlation import chsh, correlation, violates_classical_bound
from .errors import ConfigurationError
from .gates import is_finite_real
from .probability import agreement_labels, extract, format_probabilities
from .simulator import Simulator

logger = logging.getLogger(__name__)

N_QUBITS = 2
ROLES = ("E(a,b)", "E(a',b)", "E(a,b')", "E(a',b')")


@dataclass(frozen=True)
class AngleSet:
    """Rotation angles (radians) for qubit 0 (a1, a2) and qubit 1 (b1, b2)."""
    a1: float
    b1: float
    a2: float
    b2: float

    def __post_init__(self):
        for name in ("a1", "b1", "a2", "b2"):
            v = getattr(self, name)
            if not is_finite_real(v):
                raise ConfigurationError(f"angle {name} must be a finite real, got {v!r}")

    def settings(self) -> List[Tuple[float, float]]:
        """(theta_a, theta_b) per trial, in the order chsh() expects."""
        return [(self.a1, self.b1), (self.a1, self.b2), (self.a2, self.b1), (self.a2, self.b2)]


PRESETS = {
    "chsh": AngleSet(0.0, math.pi/8, math.pi/4, 3*math.pi/8),
    "chsh-alt": AngleSet(3*math.pi/4, math.pi/2, math.pi/4, 0.0),
}


@dataclass
class TrialResult:
    theta_a: float
    theta_b: float
    probabilities: Dict[str, float]
    correlation: float


@dataclass
class CHSHResult:
    angles: AngleSet
    trials: List[TrialResult]
    s: float

    @property
    def correlations(self) -> Tuple[float, ...]:
        return tuple(t.correlation for t in self.trials)

    @property
    def violates(self) -> bool:
        return violates_classical_bound(self.s)


class Experiment:
    def __init__(self, angles: AngleSet, backend: str = "serial", dtype=np.complex128,
                 workers: Optional[int] = None):
        if workers is not None and workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        self.angles = angles
        self.workers = workers
        self.simulator = Simulator(N_QUBITS, backend=backend, dtype=dtype)
        self.labels = agreement_labels(N_QUBITS)

    def run_trial(self, theta_a: float, theta_b: float) -> TrialResult:
        # each trial gets its own register; nothing is shared between trials
        register = self.simulator.register()
        self.simulator.run_trial(register, Circuit.bell_pair(theta_a, theta_b, n=N_QUBITS))
        pmap = extract(register, self.labels)
        cor = correlation(pmap)
        logger.debug("trial a=%.6f b=%.6f -> %s E=%.6f", theta_a, theta_b, pmap, cor)
        return TrialResult(theta_a, theta_b, pmap, cor)

    def run(self) -> CHSHResult:
        settings = self.angles.settings()
        pooled = bool(self.workers and self.workers > 1)
        if pooled and self.simulator.backend == "numba":
            # numba kernels are already prange-parallel and must not be JIT-compiled
            # or launched from several threads at once
            logger.debug("numba backend: running trials serially, ignoring workers=%d", self.workers)
            pooled = False
        if pooled:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() keeps submission order, so results stay matched to their role
                trials = list(executor.map(lambda ab: self.run_trial(*ab), settings))
        else:
            trials = [self.run_trial(a, b) for a, b in settings]
        s = chsh(*(t.correlation for t in trials))
        logger.info("S=%.6f (%s)", s, "violation" if violates_classical_bound(s) else "no violation")
        return CHSHResult(self.angles, trials, s)


def format_report(result: CHSHResult, show_probabilities: bool = True) -> List[str]:
    lines = []
    if show_probabilities:
        for t in result.trials:
            lines.append(f"theta_a={t.theta_a:.6f}, theta_b={t.theta_b:.6f}")
            lines.extend(format_probabilities(t.probabilities).splitlines())
    c1, c2, c3, c4 = result.correlations
    lines.append(f"{ROLES[0]}={c1:.6g}, {ROLES[1]}={c2:.6g}, {ROLES[2]}={c3:.6g}, {ROLES[3]}={c4:.6g}")
    lines.append("S=E(a,b)-E(a',b)+E(a,b')+E(a',b')")
    lines.append("If |S| > 2, QM predicts violation of Bell's Inequality:")
    lines.append(f"S={result.s:.6g}")
    return lines
