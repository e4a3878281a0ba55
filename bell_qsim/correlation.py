# bell_qsim/correlation.py
import math
from typing import Dict

from .errors import LabelError
from .gates import is_finite_real
from .probability import label_bits

CLASSICAL_BOUND = 2.0
TSIRELSON_BOUND = 2.0 * math.sqrt(2.0)


def correlation(pmap: Dict[str, float]) -> float:
    """
    E = 2 * (P(0...0) + P(1...1)) - 1.

    Only the two agreement outcomes count; any other entries in the map are ignored.
    Both must be present.
    """
    zeros = ones = None
    for label, p in pmap.items():
        bits = label_bits(label)
        if bits == "0" * len(bits):
            if zeros is not None:
                raise LabelError(f"outcome {bits} appears more than once in {list(pmap)}")
            zeros = p
        elif bits == "1" * len(bits):
            if ones is not None:
                raise LabelError(f"outcome {bits} appears more than once in {list(pmap)}")
            ones = p
    if zeros is None or ones is None:
        raise LabelError(f"correlation needs both all-zeros and all-ones labels, got {list(pmap)}")
    return 2.0 * (zeros + ones) - 1.0

def chsh(cor_ab: float, cor_aprime_b: float, cor_a_bprime: float, cor_aprime_bprime: float) -> float:
    """S = E(a,b) - E(a',b) + E(a,b') + E(a',b')."""
    vals = (cor_ab, cor_aprime_b, cor_a_bprime, cor_aprime_bprime)
    for v in vals:
        if not is_finite_real(v):
            raise ValueError(f"CHSH inputs must be finite reals, got {vals}")
    return cor_ab - cor_aprime_b + cor_a_bprime + cor_aprime_bprime

def expected_correlation(theta_a: float, theta_b: float) -> float:
    # H, CNOT, RY(a) x RY(b) on |00>: both agreement amplitudes are cos((a-b)/2)/sqrt(2)
    return math.cos(theta_a - theta_b)

def violates_classical_bound(s: float, tol: float = 1e-9) -> bool:
    # S=2 comes out as 2.000000000000001 for equal angles
    return abs(s) > CLASSICAL_BOUND + tol
