"""Beta values of the backward algorithm, handed out in forward order.

The backward algorithm runs from the last observation to the first, while
training consumes betas from the first observation to the last. The cache
makes one full backward sweep, keeping only the betas of the first chunk of
positions plus one checkpoint beta per later chunk. A later chunk is rebuilt
from its checkpoint when it is reached. No observation is swept more than
twice.
"""

import math
from collections import deque

from .backward import backward_next

_MIN_CHUNK = 10000


class BackCache:
    """Yield beta at positions 1, 2, ..., len(observed), one call at a time."""

    def __init__(self, observed, initial, transition, emission):
        self._observed = observed
        self._initial = initial
        self._transition = transition
        self._emission = emission
        self._chunk = max(_MIN_CHUNK, math.isqrt(len(observed)))
        self._active = deque()
        self._checkpoints = deque()
        if len(observed) > 0:
            self._sweep()

    def _step(self, position, beta):
        return backward_next(
            self._observed, self._initial, self._transition, self._emission, position, beta
        )

    def _sweep(self):
        nobs = len(self._observed)
        beta = None
        for position in range(nobs, 0, -1):
            beta = self._step(position, beta)
            start = ((position - 1) // self._chunk) * self._chunk + 1
            end = min(start + self._chunk - 1, nobs)
            if start == 1:
                self._active.appendleft(beta)
            elif position == end:
                self._checkpoints.appendleft((start, end, beta))

    def _refill(self):
        start, end, beta = self._checkpoints.popleft()
        rebuilt = [beta]
        for position in range(end - 1, start - 1, -1):
            beta = self._step(position, beta)
            rebuilt.append(beta)
        self._active.extend(reversed(rebuilt))

    def next(self):
        """Return the beta of the next position, or None when all are used."""
        if not self._active:
            if not self._checkpoints:
                return None
            self._refill()
        return self._active.popleft()

    def __len__(self):
        """Number of betas and checkpoints currently held."""
        return len(self._active) + len(self._checkpoints)

    def __iter__(self):
        while (beta := self.next()) is not None:
            yield beta

    def copy(self):
        """Return an independent cache at the same position."""
        other = BackCache.__new__(BackCache)
        other._observed = self._observed
        other._initial = self._initial
        other._transition = self._transition
        other._emission = self._emission
        other._chunk = self._chunk
        other._active = deque(list(beta) for beta in self._active)
        other._checkpoints = deque(
            (start, end, list(beta)) for start, end, beta in self._checkpoints
        )
        return other