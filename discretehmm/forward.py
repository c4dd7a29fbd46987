"""Forward algorithm over log-space model parameters.

``index`` arguments are 1-based positions in the observation sequence.
Matrices are indexed ``[state][position]``.
"""

from itertools import islice

from .efun import LOGZERO, elnproduct, elnsum


def _check_index(observed, index):
    if not 1 <= index <= len(observed):
        raise ValueError(f"index {index} outside 1..{len(observed)}")


def _first_column(observed, initial, emission):
    symbol = observed[0]
    return [elnproduct(p, row[symbol]) for p, row in zip(initial, emission)]


def _step(previous, transition, emission, symbol):
    column = []
    for j, emit in enumerate(emission[: len(previous)]):
        total = LOGZERO
        for alpha, row in zip(previous, transition):
            total = elnsum(total, elnproduct(alpha, row[j]))
        column.append(elnproduct(total, emit[symbol]))
    return column


def _columns(observed, initial, transition, emission):
    alpha = _first_column(observed, initial, emission)
    yield alpha
    for symbol in islice(observed, 1, None):
        alpha = _step(alpha, transition, emission, symbol)
        yield alpha


def forward_full(observed, initial, transition, emission, index):
    """Return every alpha value for positions 1..index as ``[state][position]``."""
    _check_index(observed, index)
    columns = list(islice(_columns(observed, initial, transition, emission), index))
    return [list(row) for row in zip(*columns)]


def forward_index(observed, initial, transition, emission, index):
    """Return the alpha values of all states at position ``index``."""
    _check_index(observed, index)
    columns = _columns(observed, initial, transition, emission)
    return next(islice(columns, index - 1, None))


def forward_next(observed, initial, transition, emission, index, alpha):
    """Return alpha at ``index`` given alpha at ``index - 1``.

    At ``index`` 1 the previous alpha is not needed and may be None.
    """
    _check_index(observed, index)
    if index == 1:
        return _first_column(observed, initial, emission)
    if len(alpha) != len(initial):
        raise ValueError("alpha must hold one value per state")
    return _step(list(alpha), transition, emission, observed[index - 1])