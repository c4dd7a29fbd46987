import math

import pytest

from discretehmm.backcache import BackCache
from discretehmm.efun import LOGZERO, eln
from discretehmm.gamma import gamma, gamma_m_full, gamma_t_full

OBS = [int(c) for c in "010000000010000100001000000000"]
INITIAL = [eln(0.5), eln(0.5)]
TRANSITION = [[eln(0.9), eln(0.1)], [eln(0.5), eln(0.5)]]
EMISSION = [[eln(0.2), eln(0.3), eln(0.5)], [eln(0.5), eln(0.2), eln(0.3)]]
MODEL = (INITIAL, TRANSITION, EMISSION)


def assert_tables_close(a, b):
    assert len(a) == len(b)
    for row_a, row_b in zip(a, b):
        assert row_a == pytest.approx(row_b)


def test_gamma_m_full_shape_and_normalisation():
    gam = gamma_m_full(OBS, *MODEL)
    assert len(gam) == 2
    assert all(len(row) == len(OBS) for row in gam)
    for column in zip(*gam):
        assert sum(math.exp(v) for v in column) == pytest.approx(1.0)


def test_gamma_t_full_matches_gamma_m_full():
    assert_tables_close(gamma_t_full(OBS, *MODEL), gamma_m_full(OBS, *MODEL))


def test_stepwise_gamma_matches_full_table():
    full = gamma_m_full(OBS, *MODEL)
    cache = BackCache(OBS, *MODEL)
    alpha = None
    columns = []
    for position in range(1, len(OBS) + 1):
        gam, alpha = gamma(OBS, *MODEL, position, cache.next(), alpha)
        columns.append(gam)
    assert_tables_close([list(r) for r in zip(*columns)], full)


def test_single_observation_is_proportional_to_emission():
    gam = gamma_m_full([0], *MODEL)
    g0, g1 = (row[0] for row in gam)
    assert math.exp(g0) / math.exp(g1) == pytest.approx(0.2 / 0.5)


def test_impossible_state_has_log_zero():
    initial = [eln(1.0), eln(0.0)]
    gam = gamma_m_full([1], initial, TRANSITION, EMISSION)
    assert gam == [[0.0], [LOGZERO]]


def test_empty_observations_give_empty_rows():
    assert gamma_m_full([], *MODEL) == [[], []]
    assert gamma_t_full([], *MODEL) == [[], []]


def test_gamma_rejects_wrong_beta_length():
    with pytest.raises(ValueError):
        gamma(OBS, *MODEL, 1, [0.0], None)


def test_gamma_rejects_bad_index():
    with pytest.raises(ValueError):
        gamma(OBS, *MODEL, len(OBS) + 1, [0.0, 0.0], [0.0, 0.0])