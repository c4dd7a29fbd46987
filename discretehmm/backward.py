"""Backward algorithm over log-space model parameters.

``index`` arguments are 1-based positions in the observation sequence.
Matrices are indexed ``[state][position]``.
"""

from itertools import islice

from .efun import LOGZERO, elnproduct, elnsum


def _check_index(observed, index):
    if not 1 <= index <= len(observed):
        raise ValueError(f"index {index} outside 1..{len(observed)}")


def _back_step(beta, transition, emission, symbol):
    column = []
    for row in transition[: len(beta)]:
        total = LOGZERO
        for t, emit, b in zip(row, emission, beta):
            total = elnsum(total, elnproduct(t, elnproduct(emit[symbol], b)))
        column.append(total)
    return column


def _columns(observed, initial, transition, emission):
    """Yield beta for positions len(observed), ..., 1."""
    beta = [0.0] * len(initial)
    yield beta
    for position in range(len(observed) - 1, 0, -1):
        beta = _back_step(beta, transition, emission, observed[position])
        yield beta


def backward_full(observed, initial, transition, emission, index):
    """Return beta values for positions index..len(observed) as ``[state][position]``.

    Each row spans every position; entries before ``index`` are left at 0.
    """
    _check_index(observed, index)
    nobs = len(observed)
    beta = [[0.0] * nobs for _ in initial]
    positions = range(nobs, index - 1, -1)
    for position, column in zip(positions, _columns(observed, initial, transition, emission)):
        for row, value in zip(beta, column):
            row[position - 1] = value
    return beta


def backward_index(observed, initial, transition, emission, index):
    """Return the beta values of all states at position ``index``."""
    _check_index(observed, index)
    columns = _columns(observed, initial, transition, emission)
    return next(islice(columns, len(observed) - index, None))


def backward_next(observed, initial, transition, emission, index, beta):
    """Return beta at ``index`` given beta at ``index + 1``.

    At the last position the given beta is not needed and may be None.
    """
    _check_index(observed, index)
    if index == len(observed):
        return [0.0] * len(initial)
    if len(beta) != len(initial):
        raise ValueError("beta must hold one value per state")
    return _back_step(list(beta), transition, emission, observed[index])


def backward_enext(observed, initial, transition, emission, index, internals):
    """Return the running sums behind beta at ``index``.

    ``internals[k][j]`` is the partial sum for state ``j`` over destination
    states ``0..k``, so the last row holds beta itself. The last row of the
    given ``internals`` is taken as beta at ``index + 1``.
    """
    _check_index(observed, index)
    nstates = len(initial)
    if len(internals) != nstates:
        raise ValueError("internals must hold one row per state")
    if index == len(observed):
        result = [list(row) for row in internals]
        result[nstates - 1] = [0.0] * nstates
        return result

    previous = list(internals[nstates - 1])
    symbol = observed[index]
    result = [[0.0] * nstates for _ in range(nstates)]
    for j, row in enumerate(transition[:nstates]):
        total = LOGZERO
        for k, (t, emit, b) in enumerate(zip(row, emission, previous)):
            total = elnsum(total, elnproduct(t, elnproduct(emit[symbol], b)))
            result[k][j] = total
    return result