"""Model parameter files, observation files and random starting parameters.

A parameter file holds the state and symbol counts, the symbol labels, the
initial probabilities (plain, not logs) and the transition and emission
matrices (natural logs, with a logged zero written as ``0``).
"""

import math
import re
import sys
from dataclasses import dataclass, field

from .efun import LOGZERO, eln

NSTATES_HEADER = "NStates:"
NSYMBOLS_HEADER = "NSymbols:"
LABELS_HEADER = "Labels"
INITIAL_HEADER = "Initial-Probabilities:"
TRANSITION_HEADER = "Transitional-Log-Probabilities:"
EMISSION_HEADER = "Emission-Log-Probabilities:"

MAX_STATES = 10000
TOLERANCE = 1e-4

_INT_CHARS = frozenset("0123456789")
_REAL_CHARS = _INT_CHARS | frozenset("e-+.")
_REAL_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RANDOM_RANGE = 100


class ParameterError(Exception):
    """Raised for bad parameter values, files or observations."""


@dataclass
class Model:
    """A discrete hidden Markov model and the labels of its symbols."""

    nstates: int
    nsymbols: int
    labels: dict = field(default_factory=dict)
    initial: list = field(default_factory=list)
    transition: list = field(default_factory=list)
    emission: list = field(default_factory=list)


def _log(value):
    try:
        return eln(value)
    except ValueError as exc:
        raise ParameterError(str(exc)) from None


def _check_sum(values):
    if abs(math.fsum(values) - 1) > TOLERANCE:
        raise ParameterError("Probabilities do not sum to 1")


def log_probabilities(values):
    """Return the extended logs of a probability vector that sums to 1."""
    values = list(values)
    logs = [_log(v) for v in values]
    _check_sum(values)
    return logs


def log_matrix(rows):
    """Return the extended logs of each row of probabilities; each row must sum to 1."""
    return [log_probabilities(row) for row in rows]


def exp_probabilities(values):
    """Turn a vector of log probabilities back into probabilities summing to 1."""
    probs = [0.0 if v == LOGZERO else math.exp(v) for v in values]
    _check_sum(probs)
    return probs


def _read_text(path):
    try:
        with open(path, encoding="utf-8") as handle:
            return handle.read()
    except OSError:
        raise ParameterError(f"Input file not found: {path}") from None


def _parse_int(token, message):
    if not set(token) <= _INT_CHARS:
        raise ParameterError(message)
    return int(token) if token else 0


def _parse_real(token, message):
    if not set(token) <= _REAL_CHARS:
        raise ParameterError(message)
    match = _REAL_PREFIX.match(token)
    if match is None:
        raise ParameterError(f"Bad number '{token}' in parameters input file")
    return float(match.group())


def _parse_row(fields, header):
    return [
        _parse_real(token, f"Bad parameters input file.  See {token} in {header}")
        for token in fields
    ]


def read_parameters(path):
    """Read a parameter file into a :class:`Model`.

    The initial probabilities are returned as logs.
    """
    text = _read_text(path)
    nstates = -1
    nsymbols = 0
    labels = {}
    initial = []
    transition = []
    emission = []
    section = None

    for line in text.splitlines():
        fields = line.split(" ")
        head = fields[0]
        if head == "#":
            continue
        if head == NSTATES_HEADER:
            if len(fields) != 2:
                raise ParameterError("Bad parameters input file.  See NStates:")
            nstates = _parse_int(fields[1], "Bad parameters input file.  See NStates:")
        elif head == NSYMBOLS_HEADER:
            if len(fields) != 2:
                raise ParameterError("Bad parameters input file.  See NSymbols:")
            nsymbols = _parse_int(fields[1], "Bad parameters input file.  See NSymbols:")
        elif head == LABELS_HEADER:
            section = LABELS_HEADER
        elif head == INITIAL_HEADER:
            values = [
                _parse_real(token, "Bad parameters input file. See Initial:")
                for token in fields[1:]
            ]
            initial = log_probabilities(values)
        elif line == TRANSITION_HEADER:
            section = TRANSITION_HEADER
        elif line == EMISSION_HEADER:
            section = EMISSION_HEADER
        elif section is not None:
            if line == "{":
                continue
            if line == "}":
                section = None
            elif section == LABELS_HEADER:
                if len(fields) != 2:
                    raise ParameterError(
                        f"Bad parameters input file.  Expect 2 columns in {LABELS_HEADER}"
                    )
                labels[fields[1]] = _parse_int(
                    fields[0],
                    f"Bad parameters input file.  Expect integer in first column of {LABELS_HEADER}",
                )
            elif section == TRANSITION_HEADER:
                transition.append(_parse_row(fields, TRANSITION_HEADER))
            else:
                emission.append(_parse_row(fields, EMISSION_HEADER))
        else:
            print(
                f"Unexpected garbage row in (could just be whitespace) in {path}\n"
                f"See: {line}\nContinuing...",
                file=sys.stderr,
            )

    if not initial:
        raise ParameterError(f"Did not find {INITIAL_HEADER} in {path}")
    if not transition:
        raise ParameterError(f"Did not find {TRANSITION_HEADER} in {path}")
    if not emission:
        raise ParameterError(f"Did not find {EMISSION_HEADER} in {path}")
    if not labels:
        raise ParameterError(f"Did not find {LABELS_HEADER} in {path}")
    if not 0 < nstates <= MAX_STATES:
        raise ParameterError(f"Problem with (may be missing) {NSTATES_HEADER} in {path}")
    return Model(nstates, nsymbols, labels, initial, transition, emission)


def read_observations(path, labels):
    """Read whitespace-separated symbols and return ``(observed, labels)``.

    With ``labels`` None, each new symbol gets the next id in order of first
    appearance. With a mapping, unknown symbols are reported on stderr and
    given the id of the alphabetically first known label.
    """
    tokens = _read_text(path).split()
    if labels is None:
        mapping = {}
        observed = [mapping.setdefault(token, len(mapping)) for token in tokens]
        return observed, mapping

    mapping = dict(labels)
    fallback = min(mapping) if mapping else None
    reported = set()
    observed = []
    for token in tokens:
        if token in mapping:
            observed.append(mapping[token])
            continue
        if fallback is None:
            raise ParameterError(f"No labels to map '{token}' to")
        if token not in reported:
            print(
                "Warning! Found a new label that was not in the training set for this HMM\n"
                f"New Label: {token} assigned to {fallback}",
                file=sys.stderr,
            )
            reported.add(token)
        observed.append(mapping[fallback])
    return observed, mapping


def _normalized(counts):
    total = sum(counts)
    if total == 0:
        raise ParameterError("Probabilities do not sum to 1")
    return [c / total for c in counts]


def initialize_parameters(nstates, nsymbols, rng):
    """Return random log-space ``(initial, transition, emission)`` drawn from ``rng``."""
    initial_counts = []
    transition = []
    for _ in range(nstates):
        initial_counts.append(rng.randrange(_RANDOM_RANGE))
        transition.append(_normalized([rng.randrange(_RANDOM_RANGE) for _ in range(nstates)]))
    initial = _normalized(initial_counts)
    emission = [
        _normalized([rng.randrange(_RANDOM_RANGE) for _ in range(nsymbols)])
        for _ in range(nstates)
    ]
    return log_probabilities(initial), log_matrix(transition), log_matrix(emission)


def _log_entry(value):
    return "0" if value == LOGZERO else f"{value:g}"


def format_model(model):
    """Return the parameter-file text of ``model``; initial values are written as given."""
    lines = [
        f"{NSTATES_HEADER} {model.nstates}",
        f"{NSYMBOLS_HEADER} {model.nsymbols}",
        LABELS_HEADER,
        "{",
    ]
    lines.extend(f"{ident} {label}" for label, ident in sorted(model.labels.items()))
    lines.append("}")
    lines.append(INITIAL_HEADER + "".join(f" {v:g}" for v in model.initial))
    for header, matrix in ((TRANSITION_HEADER, model.transition), (EMISSION_HEADER, model.emission)):
        lines.extend([header, "{"])
        lines.extend(" ".join(_log_entry(v) for v in row) for row in matrix)
        lines.append("}")
    return "\n".join(lines) + "\n"