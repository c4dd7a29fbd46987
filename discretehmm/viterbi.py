"""Most likely hidden state at each position, by the Viterbi recursion."""

from .efun import elnproduct


def viterbi(observed, initial, transition, emission):
    """Return the best-scoring state index at each position of ``observed``.

    Each position reports the state with the highest delta value there;
    log-zero (infinity) compares as the largest value.
    """
    observed = list(observed)
    if not observed:
        raise ValueError("at least one observation is required")
    nstates = len(initial)
    if nstates == 0:
        raise ValueError("the model has no states")

    first = observed[0]
    delta = [elnproduct(p, row[first]) for p, row in zip(initial, emission)]
    best = 0
    for i, value in enumerate(delta):
        if value > delta[best]:
            best = i
    path = [best]

    for symbol in observed[1:]:
        column = []
        best, top = 0, 0.0
        for j, emit in enumerate(emission[:nstates]):
            mx = elnproduct(delta[0], transition[0][j])
            for d, row in zip(delta[1:], transition[1:]):
                candidate = elnproduct(d, row[j])
                if candidate > mx:
                    mx = candidate
            value = elnproduct(mx, emit[symbol])
            column.append(value)
            if value > top or j == 0:
                top, best = value, j
        path.append(best)
        delta = column
    return path