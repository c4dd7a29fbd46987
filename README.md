# discretehmm

Hidden Markov models over discrete symbols. Probabilities are kept as
natural logs, and positive infinity (`discretehmm.efun.LOGZERO`) stands for
log(0). The package is plain Python and has no dependencies.

## Command line

```
discretehmm train [--verbose] [--seed=<+integer>] <number-states> <number-iterations> <observations-file>
discretehmm probability <hmm-parameters-file> <observations-file>
discretehmm decode <hmm-parameters-file> <observations-file>
discretehmm train-and-decode [--verbose] [--seed=<+integer>] <number-states> <number-iterations> <observations-file>
discretehmm --help
discretehmm --version
```

An observations file holds labels separated by whitespace. Each distinct
label becomes one emission symbol, numbered in order of first appearance.

- `train` starts from random parameters. It seeds them with `--seed` if you
  give it, and with the current time if you do not. It then runs Baum-Welch
  re-estimation until the transition and emission matrices stop changing or
  the iteration limit is reached. The result goes to stdout as a parameter
  file. With `--verbose`, each iteration also prints comment lines (starting
  with `#`) that give the iteration number, the sequence probability and the
  encoded observations.
- `probability` reads a parameter file and prints the probability of the
  observations under that model.
- `decode` reads a parameter file and prints one hidden state index per
  observation, separated by spaces.
- `train-and-decode` trains on the observations as `train` does, then
  decodes the same observations.

Labels in a decoded or scored file that the parameter file does not know
are reported on stderr. Each is mapped to the alphabetically first known
label. Errors go to stderr, and the exit status is then 1.

A parameter file looks like this:

```
NStates: 2
NSymbols: 3
Labels
{
0 a
1 b
2 c
}
Initial-Probabilities: 0.6 0.4
Transitional-Log-Probabilities:
{
-0.105361 -2.30259
-0.693147 -0.693147
}
Emission-Log-Probabilities:
{
-1.60944 -1.20397 -0.693147
-0.693147 -1.60944 -1.20397
}
```

The initial probabilities are plain values. They must sum to 1 within 1e-4.
The matrices hold natural logs, and a log of zero is written as `0`. Lines
starting with `# ` are ignored.

`discretehmm-demo` runs every algorithm on a small built-in two-state model
and prints the results.

## Library

```python
from discretehmm.efun import eln
from discretehmm.evalp import evalp
from discretehmm.viterbi import viterbi
from discretehmm.train import train

observed = [0, 1, 0, 0, 2, 0]
initial = [eln(p) for p in (0.5, 0.5)]
transition = [[eln(p) for p in row] for row in ((0.9, 0.1), (0.5, 0.5))]
emission = [[eln(p) for p in row] for row in ((0.2, 0.3, 0.5), (0.5, 0.2, 0.3))]

print(evalp(observed, initial, transition, emission))    # P(observations | model)
print(viterbi(observed, initial, transition, emission))  # one state index per observation

new_initial, new_transition, new_emission = train(observed, initial, transition, emission)
```

The training functions leave their arguments untouched. Each returns a new
`(initial, transition, emission)`. The transition and emission matrices are
log probabilities. The new initial distribution is given as plain
probabilities, not logs.

### Modules

- `discretehmm.efun`: `eln`, `elnsum`, `elnproduct` and `LOGZERO`, the
  arithmetic on log probabilities.
- `discretehmm.forward`: `forward_full`, `forward_index` and `forward_next`.
  These give alpha values, either for every position or for one position at
  a time. Positions are 1-based.
- `discretehmm.backward`: `backward_full`, `backward_index`, `backward_next`
  and `backward_enext`, which give the matching beta values.
- `discretehmm.evalp`: `evalp`, the probability of a sequence. A sequence
  with fewer than two observations gives `math.inf`.
- `discretehmm.viterbi`: `viterbi`, which returns the best-scoring state at
  each position.
- `discretehmm.backcache`: `BackCache`, which hands out the backward betas in
  forward order without keeping all of them in memory. You can use it as an
  iterator, call `next()` on it, or take a `copy()`.
- `discretehmm.gamma`: `gamma_t_full`, `gamma_m_full` and `gamma`, which give
  the state posteriors.
- `discretehmm.xi`: `xi_full` and `xi`, which give the posteriors of state
  pairs at consecutive positions.
- `discretehmm.train`: `train_full`, `train` and `train_mem`. All three do
  Baum-Welch re-estimation and differ in how much they hold in memory.
- `discretehmm.params`: `Model` and `ParameterError`. `read_parameters` and
  `format_model` read and write parameter files. `read_observations` reads
  observation files. `initialize_parameters` draws random starting
  parameters. `log_probabilities`, `log_matrix` and `exp_probabilities`
  convert between probabilities and logs.
- `discretehmm.cli`: `parse_args`, `run`, `main` and `usage`, which make up
  the `discretehmm` command.
- `discretehmm.demo`: `example_model` and `main`, which make up the
  `discretehmm-demo` command.

## Limits

Emissions are discrete symbols only. Continuous or multivariate emission
distributions are not supported. Training works on a single observation
sequence.