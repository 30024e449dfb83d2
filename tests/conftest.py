import numpy as np
import pytest

from visualizer_to_midi.frame_sources import frame_from_array
from visualizer_to_midi.models import CalibrationSettings, Point, SampleGeometry



@pytest.fixture
def three_key_settings():
    # Keys at x=0, 50, 100 on row y=10; reference key in the middle
    return CalibrationSettings(
        left_most_key_position=Point(x=0, y=10),
        right_most_key_position=Point(x=100, y=10),
        reference_key_position=Point(x=52, y=10),
        num_of_keys=3,
    )


@pytest.fixture
def small_geometry():
    # Four keys on row 1 of a 4×3 frame
    return SampleGeometry(row_y=1, columns_x=[0, 1, 2, 3])


@pytest.fixture
def make_frame():
    def _make_frame(rows):
        return frame_from_array(np.array(rows, dtype=np.uint8))

    return _make_frame


@pytest.fixture
def song_matrix():
    # Two silent lines, then key 0 for two lines, key 2 overlapping,
    # key 1 still sounding at the end
    return np.array(
        [
            [False, False, False],
            [False, False, False],
            [True, False, False],
            [True, False, True],
            [False, False, True],
            [False, True, False],
            [False, True, False],
        ],
        dtype=bool,
    )
