"""Core domain models for visualizer-to-midi conversion."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Point(BaseModel):
    """A screen coordinate in pixels, (0,0) at the top-left corner.

    Attributes:
        x: Horizontal position in pixels.
        y: Vertical position in pixels.
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(..., description="Horizontal position in pixels")
    y: int = Field(..., description="Vertical position in pixels")


class Frame(BaseModel):
    """One captured screen frame as a packed RGB buffer.

    Pixels are stored row by row, three bytes per pixel in R, G, B order,
    so the pixel at (x, y) starts at byte ``(width * y + x) * 3``.

    Attributes:
        data: Raw packed RGB bytes.
        width: Image width in pixels.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., description="Packed RGB pixel data")
    width: int = Field(..., ge=1, description="Image width in pixels")

    @property
    def height(self) -> int:
        """Number of complete pixel rows in the buffer."""
        return len(self.data) // (self.width * 3)


class NoteEvent(BaseModel):
    """A key press decoded from the activation matrix.

    Indices refer to lines of the activation matrix (one line per captured
    frame), not to MIDI ticks. Both ends are inclusive.

    Attributes:
        key_index: Zero-based key position along the keyboard, left to right.
        start_index: First line on which the key was active.
        end_index: Last line on which the key was active.
    """

    model_config = ConfigDict(frozen=True)

    key_index: int = Field(..., ge=0, description="Zero-based key index")
    start_index: int = Field(..., ge=0, description="First active line")
    end_index: int = Field(..., ge=0, description="Last active line")

    @model_validator(mode="after")
    def _check_order(self) -> "NoteEvent":
        if self.end_index < self.start_index:
            raise ValueError("end_index must not precede start_index")
        return self

    @property
    def length(self) -> int:
        """Number of lines between start and end."""
        return self.end_index - self.start_index


class MidiEvent(BaseModel):
    """A single MIDI note event with timing information.

    Time is measured in MIDI ticks. A note decoded from a single active line
    has a duration of zero ticks, matching the line-to-tick conversion.

    Attributes:
        note: MIDI note number (0-127, where 60 is middle C).
        start_tick: Start time in MIDI ticks (non-negative).
        duration_tick: Duration in MIDI ticks (non-negative).
    """

    note: int = Field(..., ge=0, le=127, description="MIDI note number (0-127)")
    start_tick: int = Field(..., ge=0, description="Start time in MIDI ticks")
    duration_tick: int = Field(..., ge=0, description="Duration in MIDI ticks")
