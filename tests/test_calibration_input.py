import pytest

from visualizer_to_midi.calibration_input import (
    DEFAULT_NUM_OF_KEYS,
    ask_reuse_settings,
    prompt_calibration,
)
from visualizer_to_midi.errors import ConfigurationError
from visualizer_to_midi.models import Point


class Answers:
    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)


def _positions(*points):
    remaining = [Point(x=x, y=y) for x, y in points]
    return lambda: remaining.pop(0)


@pytest.mark.parametrize(
    "answer, expected", [("", True), ("Y", True), ("y", True), ("n", False), (" N ", False)]
)
def test_ask_reuse_settings(answer, expected):
    assert ask_reuse_settings(Answers([answer])) is expected


def test_prompt_calibration_default_key_count():
    ask = Answers(["", "", "", ""])
    settings = prompt_calibration(ask, _positions((10, 700), (1900, 704), (950, 702)))

    assert settings.left_most_key_position == Point(x=10, y=700)
    assert settings.right_most_key_position == Point(x=1900, y=704)
    assert settings.reference_key_position == Point(x=950, y=702)
    assert settings.num_of_keys == DEFAULT_NUM_OF_KEYS
    assert "left most key" in ask.prompts[0]
    assert "right most key" in ask.prompts[1]


def test_prompt_calibration_typed_key_count():
    settings = prompt_calibration(
        Answers(["", "", "", "88"]), _positions((0, 0), (880, 0), (390, 0))
    )
    assert settings.num_of_keys == 88


def test_prompt_calibration_rejects_reversed_points():
    with pytest.raises(ConfigurationError):
        prompt_calibration(
            Answers(["", "", "", "10"]), _positions((500, 0), (100, 0), (300, 0))
        )


def test_prompt_calibration_rejects_non_integer_count():
    with pytest.raises(ConfigurationError):
        prompt_calibration(
            Answers(["", "", "", "many"]), _positions((0, 0), (100, 0), (50, 0))
        )
