# bell_qsim/simulator.py
import logging
from typing import Iterable

import numpy as np

from .gates import Gate
from .state import StateVector

logger = logging.getLogger(__name__)


class Simulator:
    """
    Runs one trial at a time: reset the register, apply a gate sequence in order.

    Probabilities are read analytically from the final amplitudes afterwards;
    there is no collapse or shot sampling.
    """

    def __init__(self, n: int, backend: str = "serial", dtype=np.complex128, tol: float = None):
        self.n = n
        self.backend = backend
        self.dtype = np.dtype(dtype)
        self.tol = tol
        # fail at construction if the register can't be built
        self.register()

    def register(self) -> StateVector:
        return StateVector.zero(self.n, dtype=self.dtype, backend=self.backend, tol=self.tol)

    def run_trial(self, register: StateVector, sequence: Iterable[Gate]) -> StateVector:
        register.reset()
        count = 0
        for gate in sequence:
            register.apply(gate)
            count += 1
        logger.debug("trial done: %d gates on %d qubits (%s)", count, register.n, register.backend)
        return register
