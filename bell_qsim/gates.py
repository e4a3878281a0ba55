# bell_qsim/gates.py
import math
import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import ConfigurationError, DimensionError


def H(dtype=np.complex128) -> np.ndarray:
    s = np.sqrt(0.5)
    return np.array([[s, s],
                     [s, -s]], dtype=dtype)

def X(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, 1],
                     [1, 0]], dtype=dtype)

def RY(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = np.sin(theta/2.0)
    return np.array([[c, -s],
                     [s, c]], dtype=dtype)

def CNOT(dtype=np.complex128) -> np.ndarray:
    # 4x4 in order |control target> = 00,01,10,11
    mat = np.eye(4, dtype=dtype)
    # swap |10> <-> |11>
    mat[2,2] = 0; mat[3,3] = 0
    mat[2,3] = 1; mat[3,2] = 1
    return mat


SINGLE_QUBIT = ("H", "X", "RY")
CONTROLLED = ("CNOT",)


@dataclass(frozen=True)
class Gate:
    """
    Immutable gate description: name, the qubits it acts on and, for RY, the angle.
    For CNOT, qubits is (control, target).
    """
    name: str
    qubits: Tuple[int, ...]
    theta: Optional[float] = None

    def __post_init__(self):
        if self.name not in SINGLE_QUBIT + CONTROLLED:
            raise ValueError(f"Unknown gate {self.name}")
        arity = 2 if self.name in CONTROLLED else 1
        if len(self.qubits) != arity:
            raise ValueError(f"{self.name} acts on {arity} qubit(s), got {self.qubits}")
        for q in self.qubits:
            if isinstance(q, bool) or not isinstance(q, numbers.Integral) or q < 0:
                raise DimensionError(f"qubit index must be a non-negative int, got {q!r}")
        if arity == 2 and self.qubits[0] == self.qubits[1]:
            raise ValueError("control and target must differ")
        if self.name == "RY":
            if self.theta is None or not is_finite_real(self.theta):
                raise ConfigurationError(f"RY angle must be a finite real, got {self.theta!r}")

    @property
    def controlled(self) -> bool:
        return self.name in CONTROLLED

    def operator(self, dtype=np.complex128) -> np.ndarray:
        """2x2 matrix applied to the target qubit (X for CNOT)."""
        if self.name == "H":
            return H(dtype)
        if self.name == "RY":
            return RY(self.theta, dtype)
        return X(dtype)

    def matrix(self, dtype=np.complex128) -> np.ndarray:
        """Full unitary on the qubits the gate touches."""
        if self.name == "CNOT":
            return CNOT(dtype)
        return self.operator(dtype)


def is_finite_real(x) -> bool:
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        return False
    return math.isfinite(x)


def hadamard(k: int) -> Gate:
    return Gate("H", (k,))

def pauli_x(k: int) -> Gate:
    return Gate("X", (k,))

def ry(k: int, theta: float) -> Gate:
    return Gate("RY", (k,), float(theta) if is_finite_real(theta) else theta)

def cnot(control: int, target: int) -> Gate:
    return Gate("CNOT", (control, target))
