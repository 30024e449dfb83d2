"""Key index to MIDI pitch mapping.

Keys of the visualized keyboard are consecutive semitones, so the whole
keyboard is anchored by a single key whose pitch is known.
"""

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

MIDDLE_C = 60


def left_most_key_note(reference_key_index: int, reference_midi_number: int = MIDDLE_C) -> int:
    """Return the MIDI pitch of key index 0."""
    return reference_midi_number - reference_key_index


def map_pitch(
    key_index: int, reference_key_index: int, reference_midi_number: int = MIDDLE_C
) -> int:
    """Map a key index to a MIDI pitch.

    The result is not clamped to the MIDI range; a poor calibration can
    produce pitches below 0 or above 127.

    Args:
        key_index: Zero-based key position, left to right.
        reference_key_index: Key index of the reference key.
        reference_midi_number: MIDI pitch of the reference key (default 60).

    Returns:
        MIDI note number of the key.
    """
    return left_most_key_note(reference_key_index, reference_midi_number) + key_index


def midi_note_name(note: int) -> str:
    """Convert a MIDI note number to a name like 'C4' or 'F#2'."""
    return f"{NOTE_NAMES[note % 12]}{(note // 12) - 1}"
