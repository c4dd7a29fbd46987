import math
import random

import pytest

from discretehmm.params import (
    Model,
    ParameterError,
    exp_probabilities,
    format_model,
    initialize_parameters,
    log_matrix,
    log_probabilities,
    read_observations,
    read_parameters,
)

MODEL_TEXT = """NStates: 2
NSymbols: 2
Labels
{
0 a
1 b
}
Initial-Probabilities: 0.6 0.4
Transitional-Log-Probabilities:
{
-0.1 -2.3
-1.2 -0.4
}
Emission-Log-Probabilities:
{
-0.5 -0.9
0 -0.7
}
"""


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_log_probabilities_values():
    logs = log_probabilities([0.25, 0.75, 0.0])
    assert logs[0] == pytest.approx(math.log(0.25))
    assert logs[1] == pytest.approx(math.log(0.75))
    assert logs[2] == math.inf


def test_log_probabilities_bad_sum():
    with pytest.raises(ParameterError, match="sum to 1"):
        log_probabilities([0.5, 0.6])


def test_log_matrix_rows():
    rows = log_matrix([[0.5, 0.5], [1.0, 0.0]])
    assert rows[1] == [0.0, math.inf]
    with pytest.raises(ParameterError):
        log_matrix([[0.5, 0.5], [0.2, 0.2]])


def test_exp_round_trip():
    probs = [0.1, 0.2, 0.7, 0.0]
    back = exp_probabilities(log_probabilities(probs))
    assert back == pytest.approx(probs)
    with pytest.raises(ParameterError):
        exp_probabilities([0.0, 0.0])


def test_read_parameters(tmp_path):
    model = read_parameters(write(tmp_path, "m.txt", MODEL_TEXT))
    assert model.nstates == 2
    assert model.nsymbols == 2
    assert model.labels == {"a": 0, "b": 1}
    assert model.initial == pytest.approx([math.log(0.6), math.log(0.4)])
    assert model.transition == [[-0.1, -2.3], [-1.2, -0.4]]
    assert model.emission == [[-0.5, -0.9], [0.0, -0.7]]


def test_format_read_round_trip(tmp_path):
    model = read_parameters(write(tmp_path, "m.txt", MODEL_TEXT))
    model.initial = exp_probabilities(model.initial)
    again = read_parameters(write(tmp_path, "again.txt", format_model(model)))
    assert again.labels == model.labels
    assert again.transition == model.transition
    assert again.emission == model.emission
    assert exp_probabilities(again.initial) == pytest.approx([0.6, 0.4])


def test_comment_and_garbage(tmp_path, capsys):
    text = "# note here\n" + MODEL_TEXT + "junk line\n"
    model = read_parameters(write(tmp_path, "m.txt", text))
    assert model.nstates == 2
    assert "Continuing" in capsys.readouterr().err


@pytest.mark.parametrize(
    "old, new, message",
    [
        ("Labels\n{\n0 a\n1 b\n}\n", "", "Labels"),
        ("NStates: 2\n", "", "NStates:"),
        ("0.6 0.4", "0.6 0.6", "sum to 1"),
        ("-1.2 -0.4", "-1.2 abc", "abc"),
    ],
)
def test_bad_parameter_files(tmp_path, old, new, message):
    path = write(tmp_path, "m.txt", MODEL_TEXT.replace(old, new))
    with pytest.raises(ParameterError, match=message):
        read_parameters(path)


def test_missing_file(tmp_path):
    with pytest.raises(ParameterError, match="Input file not found"):
        read_parameters(tmp_path / "nope.txt")
    with pytest.raises(ParameterError, match="Input file not found"):
        read_observations(tmp_path / "nope.txt", None)


def test_read_observations_new_labels(tmp_path):
    path = write(tmp_path, "obs.txt", "a b\na  c b\n")
    observed, labels = read_observations(path, None)
    assert observed == [0, 1, 0, 2, 1]
    assert labels == {"a": 0, "b": 1, "c": 2}


def test_read_observations_known_labels(tmp_path, capsys):
    path = write(tmp_path, "obs.txt", "a z z b")
    observed, labels = read_observations(path, {"b": 0, "a": 1})
    assert observed == [1, 1, 1, 0]
    assert labels == {"b": 0, "a": 1}
    err = capsys.readouterr().err
    assert err.count("New Label: z assigned to a") == 1


def test_initialize_parameters_normalized():
    initial, transition, emission = initialize_parameters(3, 4, random.Random(3))
    assert len(initial) == 3
    assert [len(row) for row in transition] == [3, 3, 3]
    assert [len(row) for row in emission] == [4, 4, 4]
    assert sum(exp_probabilities(initial)) == pytest.approx(1.0)
    for row in transition + emission:
        assert sum(exp_probabilities(row)) == pytest.approx(1.0)


def test_initialize_parameters_deterministic():
    first = initialize_parameters(2, 3, random.Random(11))
    second = initialize_parameters(2, 3, random.Random(11))
    assert first == second


def test_initialize_parameters_without_symbols():
    with pytest.raises(ParameterError):
        initialize_parameters(2, 0, random.Random(1))


def test_format_model_text():
    model = Model(
        nstates=1,
        nsymbols=2,
        labels={"y": 1, "x": 0},
        initial=[1.0],
        transition=[[0.0]],
        emission=[[math.inf, 0.0]],
    )
    assert format_model(model) == (
        "NStates: 1\nNSymbols: 2\nLabels\n{\n0 x\n1 y\n}\n"
        "Initial-Probabilities: 1\n"
        "Transitional-Log-Probabilities:\n{\n0\n}\n"
        "Emission-Log-Probabilities:\n{\n0 0\n}\n"
    )