"""MIDI generation utilities.

This module converts decoded notes into MIDI events and serializes them as a
standard MIDI file. Capture lines are converted to MIDI ticks with fixed
ratios instead of an inferred tempo: one line always spans the same number
of ticks.
"""

import io
import logging
from collections.abc import Sequence

import mido
from mido import MidiFile, MidiTrack, Message, MetaMessage

from visualizer_to_midi.errors import ConfigurationError
from visualizer_to_midi.models import MidiEvent, MidiParams, NoteEvent
from visualizer_to_midi.pitch_mapping import map_pitch

logger = logging.getLogger(__name__)

NOTE_VELOCITY = 64


def build_note_events(
    notes: Sequence[NoteEvent],
    reference_key_index: int,
    params: MidiParams | None = None,
) -> list[MidiEvent]:
    """Convert decoded notes to MIDI events with pitch and timing.

    Args:
        notes: Notes decoded from the activation matrix.
        reference_key_index: Key index of the calibrated reference key.
        params: MIDI parameters; defaults are used when None.

    Returns:
        List of MidiEvent objects in the same order as ``notes``.

    Raises:
        ConfigurationError: If a note maps outside the MIDI pitch range,
            which means the calibration does not match the keyboard.
    """
    params = params or MidiParams()

    events: list[MidiEvent] = []
    for note in notes:
        pitch = map_pitch(
            note.key_index, reference_key_index, params.reference_midi_note
        )
        if not 0 <= pitch <= 127:
            raise ConfigurationError(
                f"Key {note.key_index} maps to pitch {pitch}, outside the MIDI "
                f"range 0-127; check the reference key calibration"
            )

        events.append(
            MidiEvent(
                note=pitch,
                start_tick=note.start_index * params.start_tick_ratio,
                duration_tick=(note.end_index - note.start_index)
                * params.duration_ratio,
            )
        )

    return events


def write_midi_file(
    events: Sequence[MidiEvent],
    program: int = 1,
    ticks_per_beat: int = 128,
    tempo_bpm: int | None = None,
) -> bytes:
    """Generate a MIDI file from a list of MIDI events.

    Creates a single-track MIDI file that starts with a program change,
    optionally followed by a tempo event, then one note_on/note_off pair per
    event. At equal ticks, note_off messages come before note_on messages so
    that repeated notes retrigger, except for zero-length notes whose note_off
    directly follows their own note_on.

    Args:
        events: List of MidiEvent objects to include in the file.
        program: General MIDI program number (default 1).
        ticks_per_beat: MIDI ticks per quarter note (default 128).
        tempo_bpm: Tempo in beats per minute, or None to omit the tempo event.

    Returns:
        MIDI file data as bytes.
    """
    midi_file = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    midi_file.tracks.append(track)

    track.append(Message("program_change", program=program, time=0))
    if tempo_bpm is not None:
        track.append(MetaMessage("set_tempo", tempo=mido.bpm2tempo(tempo_bpm), time=0))

    # (tick, order, sequence, message type, note)
    timeline: list[tuple[int, int, int, str, int]] = []
    for sequence, event in enumerate(events):
        end_tick = event.start_tick + event.duration_tick
        off_order = 2 if event.duration_tick == 0 else 0
        timeline.append((event.start_tick, 1, sequence, "note_on", event.note))
        timeline.append((end_tick, off_order, sequence, "note_off", event.note))

    timeline.sort()

    previous_tick = 0
    for tick, _, _, message_type, note in timeline:
        track.append(
            Message(
                message_type,
                note=note,
                velocity=NOTE_VELOCITY,
                time=tick - previous_tick,
            )
        )
        previous_tick = tick

    buffer = io.BytesIO()
    midi_file.save(file=buffer)
    logger.debug(f"Serialized {len(events)} notes into {buffer.tell()} bytes")
    return buffer.getvalue()
