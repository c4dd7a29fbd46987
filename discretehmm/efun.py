"""Arithmetic on natural-log probabilities.

Positive infinity stands for the logarithm of a zero probability, so that
the extended functions below can combine impossible events without error.
"""

import math

LOGZERO = math.inf


def eln(p):
    """Return the extended natural log of probability ``p`` (``LOGZERO`` for 0)."""
    if p == 0:
        return LOGZERO
    if p < 0:
        raise ValueError(f"probability must not be negative: {p!r}")
    return math.log(p)


def elnsum(x, y):
    """Return the log of the sum of two probabilities given as logs."""
    if x == LOGZERO:
        return y
    if y == LOGZERO:
        return x
    if x > y:
        return x + math.log1p(math.exp(y - x))
    return y + math.log1p(math.exp(x - y))


def elnproduct(x, y):
    """Return the log of the product of two probabilities given as logs."""
    if x == LOGZERO or y == LOGZERO:
        return LOGZERO
    return x + y