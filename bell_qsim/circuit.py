# bell_qsim/circuit.py
from dataclasses import dataclass, field
from typing import Iterator, List

import numpy as np

from . import gates as G
from .gates import Gate
from .simulator import Simulator
from .state import StateVector


@dataclass
class Circuit:
    """Gate sequence for one trial. Swapping the op list defines a different experiment."""
    n: int
    ops: List[Gate] = field(default_factory=list)

    @staticmethod
    def empty(n: int) -> "Circuit":
        return Circuit(n, [])

    @staticmethod
    def bell_pair(theta_a: float, theta_b: float, n: int = 2) -> "Circuit":
        """H(q0), CNOT(q0->q1), then RY(theta_a) on q0 and RY(theta_b) on q1."""
        return Circuit.empty(n).h(0).cnot(0, 1).ry(0, theta_a).ry(1, theta_b)

    def h(self, k: int): self.ops.append(G.hadamard(k)); return self
    def x(self, k: int): self.ops.append(G.pauli_x(k)); return self
    def cnot(self, c: int, t: int): self.ops.append(G.cnot(c, t)); return self
    def ry(self, k: int, theta: float): self.ops.append(G.ry(k, theta)); return self

    def __iter__(self) -> Iterator[Gate]:
        return iter(self.ops)

    def run(self, backend: str = "serial", dtype=np.complex128) -> StateVector:
        sim = Simulator(self.n, backend=backend, dtype=dtype)
        return sim.run_trial(sim.register(), self)
