"""Posterior probability (in log space) of each state pair at consecutive positions."""

from functools import reduce
from itertools import chain

from .backward import backward_full
from .efun import LOGZERO, elnproduct, elnsum
from .forward import forward_full, forward_next


def _xi_matrix(alpha, beta, transition, emission, symbol):
    raw = [
        [
            elnproduct(a, elnproduct(t, elnproduct(emit[symbol], b)))
            for t, emit, b in zip(row, emission, beta)
        ]
        for a, row in zip(alpha, transition)
    ]
    total = reduce(elnsum, chain.from_iterable(raw), LOGZERO)
    return [[elnproduct(v, -total) for v in row] for row in raw]


def xi_full(observed, initial, transition, emission):
    """Return log xi as ``[from_state][to_state][position]``.

    Position ``s`` (0-based) covers the step from observation ``s`` to
    ``s + 1``, so each innermost list has ``len(observed) - 1`` entries.
    """
    nobs = len(observed)
    probs = [[[] for _ in initial] for _ in initial]
    if nobs < 2:
        return probs
    alpha = forward_full(observed, initial, transition, emission, nobs)
    beta = backward_full(observed, initial, transition, emission, 1)
    alpha_columns = list(zip(*alpha))
    beta_columns = list(zip(*beta))
    for s, symbol in enumerate(observed[1:]):
        matrix = _xi_matrix(alpha_columns[s], beta_columns[s + 1], transition, emission, symbol)
        for prow, mrow in zip(probs, matrix):
            for cell, value in zip(prow, mrow):
                cell.append(value)
    return probs


def xi(observed, initial, transition, emission, index, beta, alpha):
    """Return ``(probs, alpha)`` for the step from position ``index`` to ``index + 1``.

    ``beta`` is beta at ``index + 1`` and ``alpha`` is alpha at ``index - 1``
    (ignored at ``index`` 1). ``probs[i][j]`` is the log xi matrix and the
    returned alpha is alpha at ``index``.
    """
    if not 1 <= index < len(observed):
        raise ValueError(f"index {index} outside 1..{len(observed) - 1}")
    if len(beta) != len(initial):
        raise ValueError("beta must hold one value per state")
    alpha = forward_next(observed, initial, transition, emission, index, alpha)
    return _xi_matrix(alpha, beta, transition, emission, observed[index]), alpha