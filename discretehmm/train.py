"""Baum-Welch re-estimation of a discrete hidden Markov model.

Every function takes the observation sequence and the model's log-space
parameters and returns ``(initial, transition, emission)`` as new lists.
The arguments are left untouched.

Three variants:

``train_full``
    Works from full alpha, beta, gamma and xi tables. Simplest, but its
    memory use grows with the product of states and observations.
``train``
    Walks the observations once in forward order and takes betas from a
    :class:`~discretehmm.backcache.BackCache`. The best choice for most
    discrete models.
``train_mem``
    Keeps as little as possible in memory. It sweeps the observations
    again for every pair of (symbol or state, state).

Transition and emission come back as log probabilities. The new initial
distribution comes back as plain probabilities, not logs. Counts run over
positions ``1 .. len(observed) - 1``, so the last observation adds nothing
to the emission estimates.
"""

import math
from functools import reduce

from .backcache import BackCache
from .efun import LOGZERO, elnproduct, elnsum
from .gamma import gamma, gamma_m_full
from .xi import xi, xi_full


def _dimensions(observed, initial, emission):
    if len(observed) == 0:
        raise ValueError("at least one observation is required")
    if len(initial) == 0:
        raise ValueError("the model has no states")
    return len(initial), len(observed), len(emission[0])


def _copy(initial, transition, emission):
    return list(initial), [list(row) for row in transition], [list(row) for row in emission]


class _Tallies:
    """Running log-space sums behind the re-estimated parameters."""

    def __init__(self, nstates, nsymbols):
        self.occupancy = [LOGZERO] * nstates
        self.emitted = [[LOGZERO] * nsymbols for _ in range(nstates)]
        self.moved = [[LOGZERO] * nstates for _ in range(nstates)]
        self.nsymbols = nsymbols

    def add(self, symbol, gam, probs):
        for state, g in enumerate(gam):
            self.occupancy[state] = elnsum(self.occupancy[state], g)
            if 0 <= symbol < self.nsymbols:
                row = self.emitted[state]
                row[symbol] = elnsum(row[symbol], g)
        for moved_row, prob_row in zip(self.moved, probs):
            for j, p in enumerate(prob_row):
                moved_row[j] = elnsum(moved_row[j], p)

    def transition(self):
        return [
            [elnproduct(n, -d) for n in row]
            for row, d in zip(self.moved, self.occupancy)
        ]

    def emission(self):
        return [
            [elnproduct(n, -d) for n in row]
            for row, d in zip(self.emitted, self.occupancy)
        ]


def train_full(observed, initial, transition, emission):
    """Return one Baum-Welch re-estimate computed from full gamma and xi tables."""
    nstates, nobs, _ = _dimensions(observed, initial, emission)
    gam = gamma_m_full(observed, initial, transition, emission)
    probs = xi_full(observed, initial, transition, emission)

    new_initial = [math.exp(row[0]) for row in gam]

    tallies = _Tallies(nstates, len(emission[0]))
    for s in range(nobs - 1):
        gam_column = [row[s] for row in gam]
        xi_matrix = [[cell[s] for cell in row] for row in probs]
        tallies.add(observed[s], gam_column, xi_matrix)
    return new_initial, tallies.transition(), tallies.emission()


def train(observed, initial, transition, emission):
    """Return one Baum-Welch re-estimate made in a single forward pass.

    With a single observation there is nothing to count and copies of the
    given parameters come back unchanged.
    """
    nstates, nobs, nsymbols = _dimensions(observed, initial, emission)
    betas = iter(BackCache(observed, initial, transition, emission))

    beta = next(betas)
    gam, alpha_g = gamma(observed, initial, transition, emission, 1, beta, None)
    beta = next(betas, None)  # xi's beta stays one position ahead of gamma's
    if beta is None:
        return _copy(initial, transition, emission)
    probs, alpha_x = xi(observed, initial, transition, emission, 1, beta, None)

    new_initial = [math.exp(g) for g in gam]

    tallies = _Tallies(nstates, nsymbols)
    for s in range(nobs - 1):
        if s > 0:
            position = s + 1
            gam, alpha_g = gamma(observed, initial, transition, emission, position, beta, alpha_g)
            beta = next(betas)
            probs, alpha_x = xi(observed, initial, transition, emission, position, beta, alpha_x)
        tallies.add(observed[s], gam, probs)
    return new_initial, tallies.transition(), tallies.emission()


def _gammas(observed, initial, transition, emission, cache):
    """Yield gamma at positions 1 .. len(observed) - 1."""
    alpha = None
    for position in range(1, len(observed)):
        beta = cache.next()
        values, alpha = gamma(observed, initial, transition, emission, position, beta, alpha)
        yield values


def _xis(observed, initial, transition, emission, cache):
    """Yield xi for the steps starting at positions 1 .. len(observed) - 1."""
    alpha = None
    for position in range(1, len(observed)):
        beta = cache.next()
        values, alpha = xi(observed, initial, transition, emission, position, beta, alpha)
        yield values


def train_mem(observed, initial, transition, emission):
    """Return one Baum-Welch re-estimate holding as little as possible in memory.

    Each parameter is accumulated on its own sweep over the observations,
    trading time for memory.
    """
    nstates, nobs, nsymbols = _dimensions(observed, initial, emission)
    init, trans, emis = _copy(initial, transition, emission)
    cache = BackCache(observed, init, trans, emis)

    new_initial, new_transition, new_emission = _copy(initial, transition, emission)

    for i in range(max(nsymbols, nstates)):
        for j in range(nstates):
            emitted = occupied = LOGZERO
            gammas = _gammas(observed, init, trans, emis, cache.copy())

            if i < nstates:
                xcache = cache.copy()
                if xcache.next() is None:
                    return new_initial, new_transition, new_emission
                xis = _xis(observed, init, trans, emis, xcache)
                moved = left = LOGZERO
                for s, (gam, probs) in enumerate(zip(gammas, xis)):
                    if i == 0 and j == 0 and s == 0:
                        new_initial = [math.exp(g) for g in gam]
                    if i < nsymbols:
                        if observed[s] == i:
                            emitted = elnsum(emitted, gam[j])
                        occupied = elnsum(occupied, gam[j])
                    moved = elnsum(moved, probs[i][j])
                    left = elnsum(left, gam[i])
                if i < nsymbols:
                    new_emission[j][i] = elnproduct(emitted, -occupied)
                new_transition[i][j] = elnproduct(moved, -left)
            else:
                for s, gam in enumerate(gammas):
                    if observed[s] == i:
                        emitted = elnsum(emitted, gam[j])
                    occupied = elnsum(occupied, gam[j])
                new_emission[j][i] = elnproduct(emitted, -occupied)

    return new_initial, new_transition, new_emission


def log_likelihood_terms(values):
    """Return the log of the sum of log-space ``values``."""
    return reduce(elnsum, values, LOGZERO)