import pytest
from visualizer_to_midi.models import MidiEvent, NoteEvent, Point


@pytest.fixture
def valid_note_event():
    return NoteEvent(key_index=3, start_index=10, end_index=12)


@pytest.fixture
def valid_midievent():
    return MidiEvent(note=60, start_tick=0, duration_tick=0)


@pytest.fixture
def settings_json():
    return {
        "leftMostKeyPosition": {"x": 10, "y": 500},
        "rightMostKeyPosition": {"x": 1210, "y": 502},
        "referenceKeyPosition": {"x": 600, "y": 501},
        "numOfKeys": 68,
    }


@pytest.fixture
def origin():
    return Point(x=0, y=0)
