# bell_qsim/probability.py
from typing import Dict, Iterable, Tuple

import numpy as np

from .errors import LabelError
from .state import StateVector


def label_bits(label) -> str:
    if not isinstance(label, str):
        raise LabelError(f"basis label must be a string, got {label!r}")
    bits = label.strip()
    if bits.startswith("|") and bits.endswith(">"):
        bits = bits[1:-1]
    if not bits or any(ch not in "01" for ch in bits):
        raise LabelError(f"malformed basis label {label!r}")
    return bits

def parse_label(label, n: int) -> int:
    """
    Map a basis label such as "01" or "|01>" to its amplitude index.
    Character k is qubit k, so "10" (q0=1, q1=0) is index 1.
    """
    bits = label_bits(label)
    if len(bits) != n:
        raise LabelError(f"label {label!r} has {len(bits)} bits, register has {n}")
    return sum(1 << k for k, ch in enumerate(bits) if ch == "1")

def index_label(i: int, n: int) -> str:
    return "".join("1" if (i >> k) & 1 else "0" for k in range(n))

def agreement_labels(n: int) -> Tuple[str, str]:
    return "0" * n, "1" * n

def probabilities(state: StateVector) -> np.ndarray:
    return np.abs(state.as_numpy())**2

def extract(state: StateVector, labels: Iterable[str]) -> Dict[str, float]:
    """|amplitude|^2 for each requested label. Does not touch the state."""
    psi = state.as_numpy()
    out = {}
    for label in labels:
        i = parse_label(label, state.n)
        out[label] = float(abs(psi[i])**2)
    return out

def format_probabilities(pmap: Dict[str, float]) -> str:
    lines = []
    for label, p in pmap.items():
        lines.append(f"|{label_bits(label)}> : {p:.6f}")
    return "\n".join(lines)
