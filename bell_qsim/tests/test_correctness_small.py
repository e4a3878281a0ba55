# bell_qsim/tests/test_correctness_small.py
import math

import numpy as np
import pytest

from bell_qsim.circuit import Circuit
from bell_qsim import gates as G
from bell_qsim.errors import ConfigurationError, DimensionError, NormalizationError
from bell_qsim.state import StateVector

def almost(p, q, tol=1e-9):
    return np.allclose(p, q, atol=tol, rtol=0)

def probs(psi):
    return np.abs(psi)**2

def test_h_on_zero():
    st = Circuit.empty(1).h(0).run()
    assert almost(probs(st.as_numpy()), [0.5, 0.5])

def test_x_flips():
    # |0> -> X -> |1>
    st = Circuit.empty(1).x(0).run()
    assert almost(probs(st.as_numpy()), [0.0, 1.0])

def test_cnot_control_off_noop():
    # |00> --(CNOT c=1,t=0)--> stays |00>
    st = Circuit.empty(2).cnot(1,0).run()
    expect = np.zeros(4); expect[0]=1.0
    assert almost(probs(st.as_numpy()), expect)

def test_cnot_control_on_flips():
    # X on qubit 1 (control) gives index 2, CNOT(1->0) moves it to index 3
    st = Circuit.empty(2).x(1).cnot(1,0).run()
    expect = np.zeros(4); expect[3]=1.0
    assert almost(probs(st.as_numpy()), expect)

def test_bell_pair_amplitudes():
    st = Circuit.empty(2).h(0).cnot(0,1).run()
    s = math.sqrt(0.5)
    assert almost(st.as_numpy(), [s, 0, 0, s])

def test_normalization_after_every_gate():
    st = StateVector.zero(3)
    for gate in Circuit.empty(3).h(0).ry(1, 0.7).cnot(0,2).ry(2, -5.1).h(1).cnot(2,1):
        st.apply(gate)
        assert abs(1.0 - st.norm2()) < 1e-9

def test_hadamard_twice_is_identity():
    st = Circuit.empty(2).ry(0, 0.3).ry(1, 1.9).cnot(0,1).run()
    before = st.as_numpy().copy()
    st.apply(G.hadamard(1))
    st.apply(G.hadamard(1))
    assert almost(st.as_numpy(), before, tol=1e-12)

def test_cnot_twice_is_identity():
    st = Circuit.empty(3).h(0).ry(1, 0.4).ry(2, 2.2).run()
    before = st.as_numpy().copy()
    st.apply(G.cnot(0, 2))
    st.apply(G.cnot(0, 2))
    assert almost(st.as_numpy(), before, tol=1e-12)

def test_ry_matrix():
    theta = 0.8
    U = G.RY(theta)
    assert almost(U, [[math.cos(0.4), -math.sin(0.4)], [math.sin(0.4), math.cos(0.4)]])
    assert almost(U.conj().T @ U, np.eye(2))

def test_ry_periodic():
    # RY(theta + 4pi) == RY(theta); RY(theta + 2pi) == -RY(theta)
    theta = -1.3
    assert almost(G.RY(theta + 4*math.pi), G.RY(theta))
    assert almost(G.RY(theta + 2*math.pi), -G.RY(theta))

def test_cnot_matrix_is_permutation():
    M = G.CNOT()
    assert almost(M @ M, np.eye(4))
    assert almost(M @ np.array([0, 0, 1, 0]), [0, 0, 0, 1])

def test_gate_matrix():
    assert almost(G.cnot(0, 1).matrix(), G.CNOT())
    assert almost(G.ry(0, 0.6).matrix(), G.RY(0.6))
    assert almost(G.hadamard(0).matrix(), G.H())

def test_reset_returns_to_zero_state():
    st = Circuit.empty(2).h(0).cnot(0,1).run()
    st.reset()
    assert almost(st.as_numpy(), [1, 0, 0, 0])

def test_qubit_out_of_range():
    st = StateVector.zero(2)
    with pytest.raises(DimensionError):
        st.apply(G.hadamard(2))
    with pytest.raises(DimensionError):
        st.apply_controlled_gate(G.X(), 0, 5)
    with pytest.raises(DimensionError):
        Circuit.empty(2).h(0).cnot(0, 2).run()

def test_non_unitary_gate_detected():
    st = StateVector.zero(1)
    with pytest.raises(NormalizationError):
        st.apply_single_qubit_gate(np.array([[2, 0], [0, 1]]), 0)

def test_bad_register_size():
    for n in (0, -1, 2.5, 99):
        with pytest.raises(ConfigurationError):
            StateVector.zero(n)

def test_unknown_backend():
    with pytest.raises(ConfigurationError):
        StateVector.zero(2, backend="gpu")

def test_non_finite_angle():
    for theta in (float("nan"), float("inf"), None, "0.5"):
        with pytest.raises(ConfigurationError):
            G.ry(0, theta)

def test_gate_arity():
    with pytest.raises(ValueError):
        G.cnot(1, 1)
    with pytest.raises(ValueError):
        G.Gate("H", (0, 1))

def test_non_integer_qubit_index():
    for bad in (0.5, -1, True, "0"):
        with pytest.raises(DimensionError):
            G.hadamard(bad)
    with pytest.raises(DimensionError):
        G.cnot(0, 1.5)
    st = StateVector.zero(2)
    with pytest.raises(DimensionError):
        st.apply_single_qubit_gate(G.H(), 0.5)
    with pytest.raises(DimensionError):
        st.apply_controlled_gate(G.X(), 1.0, 0)

def test_complex64_state():
    st = Circuit.empty(2).h(0).cnot(0,1).ry(0, 0.2).run(dtype=np.complex64)
    assert st.dtype == np.complex64
    assert abs(1.0 - st.norm2()) < 1e-5
