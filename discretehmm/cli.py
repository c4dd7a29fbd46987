"""Command line: train a discrete HMM, score observations, or decode hidden states."""

import enum
import os
import random
import sys
import time
from collections import deque
from dataclasses import dataclass

from .evalp import evalp
from .params import (
    MAX_STATES,
    Model,
    ParameterError,
    exp_probabilities,
    format_model,
    initialize_parameters,
    read_observations,
    read_parameters,
)
from .train import train
from .viterbi import viterbi

VERSION = "0.1"
MAX_ITERATIONS = 1000000

_DIGITS = frozenset("0123456789")
_OPTION_CHARS = frozenset("-sedvrbo")


class Operation(enum.Enum):
    TRAIN = "train"
    PROB = "probability"
    DECODE = "decode"
    TRAIN_AND_DECODE = "train-and-decode"


@dataclass
class Options:
    """What the command line asked for."""

    operation: Operation
    observations: str
    nstates: int = 1
    niters: int = 1
    verbose: bool = False
    seed: int = None
    parameters: str = None


class UsageError(Exception):
    """Raised for a bad command line."""


class _Help(Exception):
    pass


class _Version(Exception):
    pass


class _NoInput(Exception):
    pass


def usage(prog):
    """Return the usage message for program name ``prog``."""
    return "\n".join([
        f"{prog}\n\nUSAGE:",
        "0) --help or --version",
        "1) train [--verbose] [--seed=<+integer>] <number-states> <number-iterations> <observations-file>",
        "2) probability <hmm-parameters-file> <observations-file>",
        "3) decode <hmm-parameters-file> <observations-file>",
        "4) train-and-decode [--verbose] [--seed=<+integer>] <number-states> <number-iterations> <observations-file>",
        "",
        "All output is sent to stdout.",
        "You can train a discrete hmm, save its output, and then use it as an <hmm-parameters-file> to",
        "determine the probability of another set of observations, or to decode the hidden states",
        "of another set of observations.",
        "You can also train an hmm on observations and decode the hidden states of that",
        "information using train-and-decode.",
    ])


def _parse_count(token, message):
    if not set(token) <= _DIGITS:
        raise UsageError(message)
    return int(token) if token else 0


def _parse_seed(token):
    parts = token.split("=")
    if len(parts) != 2 or not set(parts[1]) <= _DIGITS:
        raise UsageError(f"Bad number.  Expect a +integer for {token}.  See --help")
    return int(parts[1]) if parts[1] else 0


def parse_args(argv):
    """Parse the arguments (without the program name) into :class:`Options`."""
    args = list(argv)
    if "--help" in args:
        raise _Help
    if "--version" in args:
        raise _Version
    if not args:
        raise _NoInput
    if len(args) < 3:
        raise UsageError("Wrong number of args: see --help")

    todo = args[0]
    rest = deque(args[1:])
    nxt = rest.popleft()

    if todo in ("train", "train-and-decode"):
        if not 4 <= len(args) <= 6:
            raise UsageError(f"Wrong number of args for '{todo}.  See --help")
        verbose = False
        seed = None
        count = len(args) + 1
        while nxt[:1] in _OPTION_CHARS:
            count -= 1
            if nxt == "--verbose":
                verbose = True
            else:
                seed = _parse_seed(nxt)
            if not rest:
                break
            nxt = rest.popleft()
        if count != 5:
            raise UsageError(f"Wrong number (or order) of arguments for {todo}.  See --help")
        nstates = _parse_count(
            nxt, "Bad argument: expect a +integer for <number-states>.  See --help"
        )
        niters = _parse_count(
            rest.popleft(), "Bad argument - expect a +integer for <number-iterations>.  See --help"
        )
        options = Options(
            operation=Operation(todo),
            observations=rest.popleft(),
            nstates=nstates,
            niters=niters,
            verbose=verbose,
            seed=seed,
        )
    elif todo in ("probability", "decode"):
        if len(args) != 3:
            raise UsageError(f"Wrong number of args for '{todo}.  See --help")
        options = Options(
            operation=Operation(todo),
            observations=rest.popleft(),
            parameters=nxt,
        )
    else:
        raise UsageError(f"Unknown operation: '{todo}'.  See --help.")

    if not 0 < options.niters <= MAX_ITERATIONS:
        raise UsageError(f"Bad number of '{todo}' iterations")
    if options.parameters is None and not 0 < options.nstates <= MAX_STATES:
        raise UsageError(f"Bad number of '{todo}' states")
    return options


def _load_trained(options):
    observed, labels = read_observations(options.observations, None)
    if not labels:
        raise ParameterError("Didn't find any data")
    seed = options.seed if options.seed is not None else int(time.time())
    initial, transition, emission = initialize_parameters(
        options.nstates, len(labels), random.Random(seed)
    )
    return observed, Model(options.nstates, len(labels), labels, initial, transition, emission)


def _load_saved(options):
    model = read_parameters(options.parameters)
    observed, _ = read_observations(options.observations, model.labels)
    if model.nsymbols == 0:
        model.nsymbols = len(model.labels)
    elif model.nsymbols < len(model.labels):
        print(
            "Warning!  1 or more labels in the training data were not found in: "
            f"{options.observations}",
            file=sys.stderr,
        )
    return observed, model


def _train(model, observed, options, out):
    last_transition, last_emission = model.transition, model.emission
    likelihood = 0.0
    for iteration in range(1, options.niters + 1):
        model.initial, model.transition, model.emission = train(
            observed, model.initial, model.transition, model.emission
        )
        if model.emission == last_emission:
            if model.transition == last_transition:
                break
        else:
            likelihood = evalp(observed, model.initial, model.transition, model.emission)
        if options.verbose:
            out.write(f"# iteration {iteration}\n")
            out.write(f"# log-likelihood {likelihood:g}\n")
            out.write("# " + "".join(f"{o} " for o in observed) + "\n")
        last_transition, last_emission = model.transition, model.emission


def _write_path(path, out):
    out.write("".join(f"{state} " for state in path) + "\n")


def run(options, out):
    """Carry out ``options`` and write the result to the text stream ``out``."""
    operation = options.operation
    if operation in (Operation.PROB, Operation.DECODE):
        observed, model = _load_saved(options)
    else:
        observed, model = _load_trained(options)
        _train(model, observed, options, out)

    if operation is Operation.TRAIN:
        out.write(format_model(model))
    elif operation is Operation.PROB:
        probability = evalp(observed, model.initial, model.transition, model.emission)
        out.write(f"{probability:g}\n")
    elif operation is Operation.DECODE:
        initial = exp_probabilities(model.initial)
        _write_path(viterbi(observed, initial, model.transition, model.emission), out)
    else:
        _write_path(viterbi(observed, model.initial, model.transition, model.emission), out)


def main(argv=None):
    """Run the command line; return the exit status."""
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "discretehmm"
    if argv is None:
        argv = sys.argv[1:]
    try:
        run(parse_args(argv), sys.stdout)
    except _Help:
        print(usage(prog))
        return 0
    except _Version:
        print(f"{prog} Version: {VERSION}")
        return 0
    except _NoInput:
        print(usage(prog))
        return 1
    except (UsageError, ParameterError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0