[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "discretehmm"
version = "0.1.0"
description = "Discrete hidden Markov models in log space: forward, backward, Viterbi decoding and Baum-Welch training"
requires-python = ">=3.10"
keywords = ["hmm", "hidden markov model", "viterbi", "baum-welch", "forward-backward"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
discretehmm = "discretehmm.cli:main"
discretehmm-demo = "discretehmm.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["discretehmm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
