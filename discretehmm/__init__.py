"""Discrete hidden Markov models in log space: forward, backward, Viterbi and Baum-Welch training."""

__version__ = "0.1.0"