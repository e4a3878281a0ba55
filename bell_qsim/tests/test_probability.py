# bell_qsim/tests/test_probability.py
import numpy as np
import pytest

from bell_qsim.circuit import Circuit
from bell_qsim.errors import LabelError
from bell_qsim.probability import (agreement_labels, extract, format_probabilities,
                                   index_label, parse_label, probabilities)

def test_parse_label_bit_order():
    # leftmost character is qubit 0
    assert parse_label("00", 2) == 0
    assert parse_label("10", 2) == 1
    assert parse_label("01", 2) == 2
    assert parse_label("11", 2) == 3
    assert parse_label("|110>", 3) == 3

def test_index_label_inverts_parse():
    for i in range(8):
        assert parse_label(index_label(i, 3), 3) == i

@pytest.mark.parametrize("label", ["", "0", "000", "0a", "|01", "2 1", 3, None])
def test_bad_labels(label):
    with pytest.raises(LabelError):
        parse_label(label, 2)

def test_extract_bell_pair():
    st = Circuit.empty(2).h(0).cnot(0,1).run()
    pmap = extract(st, ["00", "11", "01"])
    assert pmap == pytest.approx({"00": 0.5, "11": 0.5, "01": 0.0})

def test_extract_keeps_requested_notation():
    st = Circuit.empty(2).x(0).run()
    assert extract(st, ["|10>"]) == pytest.approx({"|10>": 1.0})

def test_extract_malformed_label_is_an_error():
    st = Circuit.empty(2).h(0).run()
    with pytest.raises(LabelError):
        extract(st, ["00", "111"])

def test_extract_idempotent_and_read_only():
    st = Circuit.bell_pair(0.3, -1.1).run()
    before = st.as_numpy().copy()
    first = extract(st, agreement_labels(2))
    second = extract(st, agreement_labels(2))
    assert first == second
    assert np.array_equal(st.as_numpy(), before)

def test_full_distribution_sums_to_one():
    st = Circuit.bell_pair(0.7, 2.9).run()
    p = probabilities(st)
    assert abs(p.sum() - 1.0) < 1e-9
    all_labels = [index_label(i, 2) for i in range(4)]
    assert sum(extract(st, all_labels).values()) == pytest.approx(1.0)

def test_agreement_labels():
    assert agreement_labels(2) == ("00", "11")
    assert agreement_labels(3) == ("000", "111")

def test_format_probabilities():
    out = format_probabilities({"00": 0.25, "|11>": 0.5})
    assert out.splitlines() == ["|00> : 0.250000", "|11> : 0.500000"]
