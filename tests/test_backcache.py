import pytest

from discretehmm.backcache import BackCache
from discretehmm.backward import backward_full, backward_index
from discretehmm.efun import eln

OBS = [int(c) for c in "010000000010000100001000000000"]
INITIAL = [eln(0.5), eln(0.5)]
TRANSITION = [[eln(0.9), eln(0.1)], [eln(0.5), eln(0.5)]]
EMISSION = [[eln(0.2), eln(0.3), eln(0.5)], [eln(0.5), eln(0.2), eln(0.3)]]
MODEL = (INITIAL, TRANSITION, EMISSION)


def assert_columns(betas, table):
    columns = [list(col) for col in zip(*table)]
    assert len(betas) == len(columns)
    for got, expected in zip(betas, columns):
        assert got == pytest.approx(expected)


def test_betas_come_in_forward_order():
    cache = BackCache(OBS, *MODEL)
    betas = list(cache)
    assert_columns(betas, backward_full(OBS, *MODEL, 1))


def test_first_and_last_beta():
    betas = list(BackCache(OBS, *MODEL))
    assert betas[0] == pytest.approx(backward_index(OBS, *MODEL, 1))
    assert betas[-1] == [0.0, 0.0]


def test_length_shrinks_with_each_call():
    cache = BackCache(OBS, *MODEL)
    assert len(cache) == len(OBS)
    cache.next()
    cache.next()
    assert len(cache) == len(OBS) - 2


def test_exhausted_cache_returns_none():
    cache = BackCache(OBS, *MODEL)
    for _ in OBS:
        assert cache.next() is not None
    assert cache.next() is None
    assert len(cache) == 0


def test_empty_observations():
    cache = BackCache([], *MODEL)
    assert len(cache) == 0
    assert cache.next() is None
    assert list(cache) == []


def test_single_observation():
    betas = list(BackCache([2], *MODEL))
    assert betas == [[0.0, 0.0]]


def test_copy_is_independent():
    cache = BackCache(OBS, *MODEL)
    for _ in range(5):
        cache.next()
    clone = cache.copy()
    original_rest = list(cache)
    assert len(cache) == 0
    assert len(clone) == len(OBS) - 5
    assert list(clone) == original_rest


def test_long_sequence_rebuilds_checkpointed_chunks():
    observed = [(i * 7 + i // 3) % 3 for i in range(10050)]
    cache = BackCache(observed, *MODEL)
    assert len(cache) < len(observed)
    betas = list(cache)
    assert_columns(betas, backward_full(observed, *MODEL, 1))