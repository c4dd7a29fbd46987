import math

import pytest

from discretehmm.efun import LOGZERO, eln, elnproduct, elnsum


def test_eln_of_zero_is_logzero():
    assert eln(0) == LOGZERO
    assert LOGZERO == math.inf


def test_eln_of_one_is_zero():
    assert eln(1) == 0.0


def test_eln_matches_log_for_positive():
    assert eln(0.25) == pytest.approx(math.log(0.25))


def test_eln_rejects_negative():
    with pytest.raises(ValueError):
        eln(-0.5)


def test_elnsum_both_zero_probability():
    assert elnsum(LOGZERO, LOGZERO) == LOGZERO


@pytest.mark.parametrize("value", [-3.0, -0.1, 0.0])
def test_elnsum_with_zero_probability_is_identity(value):
    assert elnsum(LOGZERO, value) == value
    assert elnsum(value, LOGZERO) == value


@pytest.mark.parametrize("a,b", [(0.1, 0.2), (0.5, 0.5), (1e-6, 0.3), (0.7, 0.2)])
def test_elnsum_adds_probabilities(a, b):
    assert math.exp(elnsum(eln(a), eln(b))) == pytest.approx(a + b)


@pytest.mark.parametrize("a,b", [(0.1, 0.2), (0.9, 1e-4)])
def test_elnsum_is_commutative(a, b):
    assert elnsum(eln(a), eln(b)) == pytest.approx(elnsum(eln(b), eln(a)))


def test_elnproduct_with_zero_probability():
    assert elnproduct(LOGZERO, -1.0) == LOGZERO
    assert elnproduct(-1.0, LOGZERO) == LOGZERO
    assert elnproduct(LOGZERO, LOGZERO) == LOGZERO


@pytest.mark.parametrize("a,b", [(0.1, 0.2), (0.5, 0.5), (1.0, 0.3)])
def test_elnproduct_multiplies_probabilities(a, b):
    assert math.exp(elnproduct(eln(a), eln(b))) == pytest.approx(a * b)