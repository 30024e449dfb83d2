import pytest
from pydantic import ValidationError
from visualizer_to_midi.models import Frame, MidiEvent, NoteEvent, Point


def test_note_event_length(valid_note_event):
    assert valid_note_event.length == 2


def test_note_event_single_line():
    note = NoteEvent(key_index=0, start_index=4, end_index=4)
    assert note.length == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"key_index": -1, "start_index": 0, "end_index": 0},
        {"key_index": 0, "start_index": -1, "end_index": 0},
        {"key_index": 0, "start_index": 5, "end_index": 4},
    ],
)
def test_note_event_validation_raises(kwargs):
    with pytest.raises(ValidationError):
        NoteEvent(**kwargs)


def test_note_event_is_immutable(valid_note_event):
    with pytest.raises(ValidationError):
        valid_note_event.end_index = 20


def test_midievent_valid(valid_midievent):
    assert valid_midievent.note == 60
    assert valid_midievent.start_tick == 0
    assert valid_midievent.duration_tick == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"note": -1, "start_tick": 0, "duration_tick": 1},
        {"note": 128, "start_tick": 0, "duration_tick": 1},
        {"note": 60, "start_tick": -1, "duration_tick": 1},
        {"note": 60, "start_tick": 0, "duration_tick": -3},
    ],
)
def test_midievent_validation_raises(kwargs):
    with pytest.raises(ValidationError):
        MidiEvent(**kwargs)


def test_point_is_immutable(origin):
    with pytest.raises(ValidationError):
        origin.x = 5


def test_frame_height():
    frame = Frame(data=bytes(4 * 2 * 3), width=4)
    assert frame.height == 2


def test_frame_width_must_be_positive():
    with pytest.raises(ValidationError):
        Frame(data=b"", width=0)
