"""Keyboard calibration geometry.

This module turns the three reference points picked by the user into the
pixel coordinates sampled on every frame. Keys are assumed to be evenly
spaced between the left-most and right-most key, which holds for
visualizers that draw one lane per key.
"""

import logging
import math
from collections.abc import Sequence

from visualizer_to_midi.errors import ConfigurationError
from visualizer_to_midi.models import CalibrationSettings, SampleGeometry

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up.

    Python's ``round`` rounds halves to even, which would shift every other
    sample column on keyboards with an odd pixel spacing.
    """
    return int(math.floor(value + 0.5))


def compute_geometry(settings: CalibrationSettings) -> SampleGeometry:
    """Compute the sampled row and per-key columns from calibration points.

    The row is the average height of the left-most and right-most key. Columns
    are spread linearly between the two keys, the first and last column
    falling exactly on them.

    Args:
        settings: Calibration settings picked by the user.

    Returns:
        SampleGeometry with one column per key, ordered left to right.

    Raises:
        ConfigurationError: If fewer than two keys are configured or the
            right-most key is not to the right of the left-most key.
    """
    left = settings.left_most_key_position
    right = settings.right_most_key_position
    num_of_keys = settings.num_of_keys

    if num_of_keys < 2:
        raise ConfigurationError(
            f"At least two keys are needed for calibration, got {num_of_keys}"
        )
    if right.x <= left.x:
        raise ConfigurationError(
            f"Right-most key (x={right.x}) must be right of left-most key (x={left.x})"
        )

    row_y = round_half_up((left.y + right.y) / 2)
    piano_width = right.x - left.x

    columns_x = [
        round_half_up(left.x + i * piano_width / (num_of_keys - 1))
        for i in range(num_of_keys)
    ]

    logger.debug(
        f"Sampling {num_of_keys} keys on row y={row_y} "
        f"from x={columns_x[0]} to x={columns_x[-1]}"
    )
    return SampleGeometry(row_y=row_y, columns_x=columns_x)


def find_closest_index(target_x: float, columns_x: Sequence[int]) -> int:
    """Find the index of the column closest to a horizontal position.

    Columns are scanned in order and only a strictly smaller distance
    replaces the current best match, so a position exactly between two
    columns resolves to the lower index.

    Args:
        target_x: Horizontal position in pixels.
        columns_x: Column positions to search.

    Returns:
        Index of the closest column.

    Raises:
        ConfigurationError: If no columns are given.
    """
    if not columns_x:
        raise ConfigurationError("Cannot search an empty list of columns")

    minimal_diff = math.inf
    minimal_diff_index = -1
    for index, column_x in enumerate(columns_x):
        diff = abs(column_x - target_x)
        if diff < minimal_diff:
            minimal_diff = diff
            minimal_diff_index = index

    return minimal_diff_index


def reference_key_index(
    settings: CalibrationSettings, geometry: SampleGeometry
) -> int:
    """Return the key index that the reference key position falls on."""
    return find_closest_index(settings.reference_key_position.x, geometry.columns_x)
