"""Models for representing pipeline processing stages.

This module contains Pydantic models that encapsulate the results of each
stage in the visualizer-to-MIDI conversion pipeline. Each model represents the
output data from a specific processing step, enabling clean separation of
concerns and easy testing of individual pipeline components.
"""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from visualizer_to_midi.models.core_models import NoteEvent, MidiEvent


class SampleGeometry(BaseModel):
    """Pixel coordinates sampled on every frame.

    All keys are sampled on one horizontal row. Columns are ordered left to
    right, one per key.

    Attributes:
        row_y: Vertical position of the sampled row in pixels.
        columns_x: Horizontal position of each key's sample point.
    """

    model_config = ConfigDict(frozen=True)

    row_y: int = Field(..., description="Sampled row")
    columns_x: list[int] = Field(..., min_length=1, description="Per-key columns")

    @property
    def num_keys(self) -> int:
        """Number of sampled keys."""
        return len(self.columns_x)


class CaptureResult(BaseModel):
    """Result of the capture stage.

    Attributes:
        matrix: Boolean activation matrix of shape (lines, keys).
        sample_interval_ms: Sampling period the matrix was recorded with.
        from_cache: True when the matrix was loaded from the capture file.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    matrix: np.ndarray = Field(
        default_factory=lambda: np.zeros((0, 0), dtype=bool),
        description="Activation matrix",
    )
    sample_interval_ms: int = Field(50, ge=1, description="Sampling period in ms")
    from_cache: bool = Field(False, description="Loaded from the capture file")

    @property
    def num_lines(self) -> int:
        """Number of captured lines."""
        return int(self.matrix.shape[0])


class ExtractionResult(BaseModel):
    """Result of the note extraction stage.

    Attributes:
        notes: Decoded notes in emission order.
        num_lines: Number of lines in the source matrix.
        first_active_line: First line with any active key, or None when the
            matrix is silent throughout.
        dropped_notes: Number of notes still open on the last line that were
            not emitted.
    """

    notes: list[NoteEvent] = Field(default_factory=list, description="Notes")
    num_lines: int = Field(0, ge=0, description="Lines in the matrix")
    first_active_line: int | None = Field(None, description="First active line")
    dropped_notes: int = Field(0, ge=0, description="Unclosed notes dropped")


class MidiResult(BaseModel):
    """MIDI generation results.

    Attributes:
        events: MIDI note events in emission order.
        midi_bytes: Serialized MIDI file data, or None if nothing was built.
        reference_key_index: Key index matched to the reference key position.
        left_most_key_note: MIDI pitch of key index 0.
        reference_note_name: Human-readable name of the reference pitch.
    """

    events: list[MidiEvent] = Field(
        default_factory=list, description="Generated MIDI note events"
    )
    midi_bytes: bytes | None = Field(None, description="Serialized MIDI file data")
    reference_key_index: int = Field(0, ge=0, description="Reference key index")
    left_most_key_note: int = Field(0, description="Pitch of key index 0")
    reference_note_name: str = Field("", description="Reference pitch name")
