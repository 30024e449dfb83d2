"""Interactive calibration prompts.

The user hovers the mouse over three keys of the visualizer and confirms each
position with enter, then types the number of keys. Prompt and mouse access
are injectable so the flow can run without a terminal or a display.
"""

import logging
from collections.abc import Callable

from pydantic import ValidationError

from visualizer_to_midi.calibration import round_half_up
from visualizer_to_midi.errors import ConfigurationError
from visualizer_to_midi.models import CalibrationSettings, Point

logger = logging.getLogger(__name__)

DEFAULT_NUM_OF_KEYS = 68

_HOVER_PROMPT = (
    "Hover over the [vertical top, horizontal center] of the {key} "
    "with the mouse and press enter"
)


def get_mouse_position() -> Point:
    """Read the current mouse position, rounded to whole pixels."""
    # pynput needs a display at import time
    from pynput import mouse

    x, y = mouse.Controller().position
    return Point(x=round_half_up(x), y=round_half_up(y))


def ask_reuse_settings(ask: Callable[[str], str] = input) -> bool:
    """Ask whether the previous calibration should be reused (default yes)."""
    answer = ask("Use the same settings as last time? Y/n ").strip()
    return answer.lower() != "n"


def _ask_num_of_keys(ask: Callable[[str], str]) -> int:
    answer = ask(
        f"How many keys does the keyboard have in total? [{DEFAULT_NUM_OF_KEYS}] "
    ).strip()
    if not answer:
        return DEFAULT_NUM_OF_KEYS
    try:
        return int(answer)
    except ValueError as e:
        raise ConfigurationError(f"Number of keys must be an integer, got {answer!r}") from e


def prompt_calibration(
    ask: Callable[[str], str] = input,
    get_position: Callable[[], Point] = get_mouse_position,
) -> CalibrationSettings:
    """Collect calibration points from the user.

    Args:
        ask: Prompt function returning the typed answer.
        get_position: Function returning the current mouse position.

    Returns:
        Validated calibration settings.

    Raises:
        ConfigurationError: If the answers do not form a valid calibration.
    """
    positions = {}
    for field_name, key in (
        ("left_most_key_position", "left most key"),
        ("right_most_key_position", "right most key"),
        ("reference_key_position", "C4 (middle C) key"),
    ):
        ask(_HOVER_PROMPT.format(key=key) + " ")
        positions[field_name] = get_position()
        logger.info(f"Recorded {key} at ({positions[field_name].x}, {positions[field_name].y})")

    num_of_keys = _ask_num_of_keys(ask)

    try:
        return CalibrationSettings(num_of_keys=num_of_keys, **positions)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid calibration: {e}") from e
