"""Probability of an observation sequence under a model."""

import math
from functools import reduce

from .efun import LOGZERO, elnsum
from .forward import forward_index


def evalp(observed, initial, transition, emission):
    """Return P(observed | model), computed from the forward algorithm.

    Sequences shorter than two observations give ``math.inf``.
    """
    nobs = len(observed)
    if nobs < 2:
        return math.inf
    alpha = forward_index(observed, initial, transition, emission, nobs)
    return math.exp(reduce(elnsum, alpha, LOGZERO))