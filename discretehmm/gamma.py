"""Posterior probability (in log space) of each state at each position."""

from functools import reduce

from .backward import backward_full, backward_index
from .efun import LOGZERO, elnproduct, elnsum
from .forward import forward_full, forward_next


def _normalize(values):
    total = reduce(elnsum, values, LOGZERO)
    return [elnproduct(v, -total) for v in values]


def _posterior(alpha, beta):
    return _normalize([elnproduct(a, b) for a, b in zip(alpha, beta)])


def _by_state(columns, nstates):
    if not columns:
        return [[] for _ in range(nstates)]
    return [list(row) for row in zip(*columns)]


def gamma_t_full(observed, initial, transition, emission):
    """Return log gamma as ``[state][position]``, recomputing beta per position.

    Light in memory, quadratic in time.
    """
    columns = []
    alpha = None
    for position in range(1, len(observed) + 1):
        alpha = forward_next(observed, initial, transition, emission, position, alpha)
        beta = backward_index(observed, initial, transition, emission, position)
        columns.append(_posterior(alpha, beta))
    return _by_state(columns, len(initial))


def gamma_m_full(observed, initial, transition, emission):
    """Return log gamma as ``[state][position]`` from full alpha and beta tables."""
    nobs = len(observed)
    if nobs == 0:
        return [[] for _ in initial]
    alpha = forward_full(observed, initial, transition, emission, nobs)
    beta = backward_full(observed, initial, transition, emission, 1)
    columns = [_posterior(a, b) for a, b in zip(zip(*alpha), zip(*beta))]
    return _by_state(columns, len(initial))


def gamma(observed, initial, transition, emission, index, beta, alpha):
    """Return ``(gamma_values, alpha)`` for position ``index``.

    ``beta`` is beta at ``index`` and ``alpha`` is alpha at ``index - 1``
    (ignored at ``index`` 1). The returned alpha is alpha at ``index``.
    """
    if len(beta) != len(initial):
        raise ValueError("beta must hold one value per state")
    alpha = forward_next(observed, initial, transition, emission, index, alpha)
    return _posterior(alpha, beta), alpha