"""Worked example: run every algorithm on a small two-state model and print the results."""

import argparse
import math
import sys

from .backcache import BackCache
from .backward import backward_enext, backward_full, backward_index, backward_next
from .efun import LOGZERO, eln
from .evalp import evalp
from .forward import forward_full, forward_index, forward_next
from .gamma import gamma, gamma_m_full
from .train import train, train_full
from .viterbi import viterbi
from .xi import xi, xi_full

_OBSERVATIONS = "010000000010000100001000000000"
_INITIAL = [0.5, 0.5]
_TRANSITION = [[0.9, 0.1], [0.5, 0.5]]
_EMISSION = [[0.2, 0.3, 0.5], [0.5, 0.2, 0.3]]
_ITERATIONS = 2


def example_model():
    """Return ``(observed, initial, transition, emission)`` of the example.

    The parameters are natural logs, with log-zero for impossible events.
    """
    observed = [int(ch) for ch in _OBSERVATIONS]
    initial = [eln(p) for p in _INITIAL]
    transition = [[eln(p) for p in row] for row in _TRANSITION]
    emission = [[eln(p) for p in row] for row in _EMISSION]
    return observed, initial, transition, emission


def _fmt(value):
    return f"{value:g}"


def _row(values):
    return "\t".join(_fmt(v) for v in values)


def _matrix(rows):
    return [_row(row) for row in rows]


def _shown_log(value):
    return "0" if value == LOGZERO else _fmt(value)


def _training(step, observed, initial, transition, emission):
    for iteration in range(1, _ITERATIONS + 1):
        initial, transition, emission = step(observed, initial, transition, emission)
        yield f"Iteration {iteration}"
        yield "New Initial"
        yield from (_fmt(v) for v in initial)
        yield "New Transition"
        yield from _matrix(transition)
        yield "New Emission"
        yield from ("\t".join(_shown_log(v) for v in row) for row in emission)


def _report(observed, initial, transition, emission):
    model = (observed, initial, transition, emission)
    nobs = len(observed)
    nstates = len(initial)

    yield " ".join(str(o) for o in observed)
    yield f"Length = {nobs}"

    yield "Full Forward"
    yield from _matrix(forward_full(*model, nobs))
    yield "Indexed Forward"
    yield _row(forward_index(*model, 1))
    alpha = None
    for position in range(1, nobs + 1):
        alpha = forward_next(*model, position, alpha)
        yield f"Next Forward ({position})"
        yield _row(alpha)

    yield "Full Backward"
    yield from _matrix(backward_full(*model, 1))
    yield "Indexed Backward"
    yield _row(backward_index(*model, 1))
    beta = None
    for position in range(nobs, 0, -1):
        beta = backward_next(*model, position, beta)
        yield f"Next Backward ({position})"
        yield _row(beta)

    for count, beta in enumerate(BackCache(*model)):
        yield f"Cheat Backward->Forward ({count})"
        yield _row(beta)

    internals = [[0.0] * nstates for _ in range(nstates)]
    for position in range(nobs, 0, -1):
        internals = backward_enext(*model, position, internals)
        yield f"(Ext) Next Backward ({position})"
        for j in range(nstates):
            yield _row(internals[k][j] for k in range(nstates))
        yield ""

    yield f"Answer to problem 1: {_fmt(evalp(*model))}"

    yield "Viterbi answer to problem 2"
    yield "\t".join(str(state) for state in viterbi(*model))

    yield "Testing Gamma"
    yield from _matrix(gamma_m_full(*model))
    yield "New Gamma"
    alpha = None
    for position, beta in enumerate(BackCache(*model), start=1):
        gam, alpha = gamma(*model, position, beta, alpha)
        yield _row(gam)

    yield "Testing xi"
    for from_state in xi_full(*model):
        yield from _matrix(from_state)
        yield ""
    yield "New Xi"
    betas = iter(BackCache(*model))
    next(betas, None)  # xi needs beta one position ahead
    alpha = None
    for position, beta in zip(range(1, nobs), betas):
        probs, alpha = xi(*model, position, beta, alpha)
        yield from _matrix(probs)
    yield ""

    yield "Problem 3"
    yield "Start Initial"
    yield from (_fmt(v) for v in initial)
    yield from _training(train_full, *model)
    yield "Finale: *********************"
    yield "New Training"
    yield from _training(train, *model)


def main(argv=None):
    """Print the worked example to stdout; return the exit status."""
    parser = argparse.ArgumentParser(
        description="Run every algorithm on a small example model and print the results."
    )
    parser.parse_args(argv)
    for line in _report(*example_model()):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())