# bell_qsim/apply_serial.py
import numpy as np


def apply_single_qubit(psi: np.ndarray, U2: np.ndarray, k: int):
    """Apply 2x2 gate U2 to qubit k (little-endian: bit k), in place."""
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    # iterate blocks of size 2^(k+1), update pairs (i0, i1=i0+step)
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i1] = U2[1,0]*a0 + U2[1,1]*a1

def apply_controlled(psi: np.ndarray, U2: np.ndarray, control: int, target: int):
    """Apply U2 to the target qubit on the subspace where the control bit is 1."""
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    # U2 == X is a plain swap of the (c=1,t=0) / (c=1,t=1) pair
    swap = U2[0,0] == 0 and U2[1,1] == 0 and U2[0,1] == 1 and U2[1,0] == 1
    for i10 in range(N):
        if (i10 & mc) == 0 or (i10 & mt) != 0:
            continue
        i11 = i10 | mt
        a0 = psi[i10]
        a1 = psi[i11]
        if swap:
            psi[i10] = a1
            psi[i11] = a0
        else:
            psi[i10] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i11] = U2[1,0]*a0 + U2[1,1]*a1
