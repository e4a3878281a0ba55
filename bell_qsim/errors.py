# bell_qsim/errors.py


class BellSimError(Exception):
    """Base class for simulator errors."""


class DimensionError(BellSimError, IndexError):
    """A gate references a qubit outside the register."""


class NormalizationError(BellSimError, ArithmeticError):
    """State norm drifted away from 1 after a gate (non-unitary operator)."""


class LabelError(BellSimError, ValueError):
    """A basis label is malformed or missing."""


class ConfigurationError(BellSimError, ValueError):
    """Invalid register size, angle or backend."""
