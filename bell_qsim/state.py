# bell_qsim/state.py
import logging
import numbers
from dataclasses import dataclass, field
from types import ModuleType

import numpy as np

from .errors import ConfigurationError, DimensionError, NormalizationError

logger = logging.getLogger(__name__)

MAX_QUBITS = 24
BACKENDS = ("serial", "numba")


def default_tolerance(dtype) -> float:
    """Norm tolerance that the given amplitude precision can actually hold."""
    return 1e-5 if np.dtype(dtype) == np.complex64 else 1e-9

def load_kernels(backend: str) -> ModuleType:
    if backend == "serial":
        from . import apply_serial as kernels
    elif backend == "numba":
        try:
            from . import apply_numba as kernels
        except ImportError as e:
            raise ConfigurationError("Numba backend not available. Did you `pip install numba`?") from e
    else:
        raise ConfigurationError(f"Unknown backend: {backend}")
    return kernels


@dataclass
class StateVector:
    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex64/128
    backend: str = "serial"
    tol: float = None
    _kernels: ModuleType = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        _check_size(self.n)
        if self.psi.shape != (1 << self.n,):
            raise ConfigurationError(f"psi has shape {self.psi.shape}, expected ({1 << self.n},)")
        if not np.iscomplexobj(self.psi):
            raise ConfigurationError(f"psi must be complex, got {self.psi.dtype}")
        if self.tol is None:
            self.tol = default_tolerance(self.psi.dtype)
        self._kernels = load_kernels(self.backend)

    @staticmethod
    def zero(n: int, dtype=np.complex128, backend: str = "serial", tol: float = None) -> "StateVector":
        _check_size(n)
        psi = np.zeros(1 << n, dtype=dtype)
        psi[0] = 1.0 + 0.0j
        return StateVector(n=n, psi=psi, backend=backend, tol=tol)

    @property
    def dtype(self):
        return self.psi.dtype

    def reset(self):
        """Back to |0...0>."""
        self.psi[:] = 0
        self.psi[0] = 1.0 + 0.0j

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=None):
        tol = self.tol if tol is None else tol
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise NormalizationError(f"Normalization failed: ||psi||^2={n2}")

    # ---------------------------- gates ----------------------------

    def apply_single_qubit_gate(self, U2: np.ndarray, k: int):
        """Apply a 2x2 unitary to qubit k, then verify the norm."""
        U2 = _as_2x2(U2, self.dtype)
        self._check_qubit(k)
        self._kernels.apply_single_qubit(self.psi, U2, k)
        self.check_normalized()

    def apply_controlled_gate(self, U2: np.ndarray, control: int, target: int):
        """
        Apply U2 to `target` wherever `control` reads 1. With U2 = X this is CNOT:
        amplitudes of each (c=1,t=0)/(c=1,t=1) pair are swapped, c=0 is left alone.
        """
        U2 = _as_2x2(U2, self.dtype)
        self._check_qubit(control)
        self._check_qubit(target)
        if control == target:
            raise ValueError("control and target must differ")
        self._kernels.apply_controlled(self.psi, U2, control, target)
        self.check_normalized()

    def apply(self, gate):
        """Apply a gates.Gate."""
        U2 = gate.operator(self.dtype)
        if gate.controlled:
            c, t = gate.qubits
            self.apply_controlled_gate(U2, c, t)
        else:
            (k,) = gate.qubits
            self.apply_single_qubit_gate(U2, k)

    def _check_qubit(self, k: int):
        if isinstance(k, bool) or not isinstance(k, numbers.Integral) or not (0 <= k < self.n):
            raise DimensionError(f"qubit {k} out of range for {self.n}-qubit register")

    def as_numpy(self) -> np.ndarray:
        return self.psi


def _check_size(n):
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise ConfigurationError(f"register size must be an integer, got {n!r}")
    if not (1 <= n <= MAX_QUBITS):
        raise ConfigurationError(f"register size must be in [1, {MAX_QUBITS}], got {n}")

def _as_2x2(U2, dtype) -> np.ndarray:
    U2 = np.asarray(U2, dtype=dtype)
    if U2.shape != (2, 2):
        raise ValueError(f"expected a 2x2 matrix, got shape {U2.shape}")
    return U2
