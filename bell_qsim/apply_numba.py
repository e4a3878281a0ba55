# bell_qsim/apply_numba.py
import numpy as np
from numba import config, njit, prange, set_num_threads

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True, fastmath=True)
def _single_qubit_kernel(psi, U2, k):
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    nblocks = N // block
    for b in prange(nblocks):
        base = b * block
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i1] = U2[1,0]*a0 + U2[1,1]*a1

@njit(parallel=True, fastmath=True)
def _controlled_kernel(psi, U2, control, target):
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    for i10 in prange(N):
        if (i10 & mc) != 0 and (i10 & mt) == 0:
            i11 = i10 | mt           # control=1, target=1
            a0 = psi[i10]
            a1 = psi[i11]
            psi[i10] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i11] = U2[1,0]*a0 + U2[1,1]*a1

# ---------- user-facing apply helpers ----------

def max_threads() -> int:
    return config.NUMBA_NUM_THREADS

def set_threads(n: int):
    # numba rejects anything above the pool size it was started with
    set_num_threads(max(1, min(int(n), max_threads())))

def apply_single_qubit(psi: np.ndarray, U2: np.ndarray, k: int):
    _single_qubit_kernel(psi, np.ascontiguousarray(U2, dtype=psi.dtype), k)

def apply_controlled(psi: np.ndarray, U2: np.ndarray, control: int, target: int):
    _controlled_kernel(psi, np.ascontiguousarray(U2, dtype=psi.dtype), control, target)
