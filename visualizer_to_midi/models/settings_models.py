"""Calibration and parameter models for pipeline configuration.

This module defines Pydantic models that encapsulate the user calibration and
all configurable parameters for each stage of the visualizer-to-MIDI
pipeline. These models provide validation, default values, and clear
interfaces for customizing the behavior of each processing step.
"""

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from visualizer_to_midi.models.core_models import Point


class CalibrationSettings(BaseModel):
    """Reference points picked on screen for one capture run.

    The three points mark the top centre of the left-most key, the right-most
    key and a reference key whose MIDI pitch is known. The JSON form uses
    camelCase keys; the older ``c4KeyPosition`` key is accepted as the
    reference key position.

    Attributes:
        left_most_key_position: Screen position of the left-most key.
        right_most_key_position: Screen position of the right-most key.
        reference_key_position: Screen position of the reference key.
        num_of_keys: Total number of keys on the visualized keyboard (>= 2).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    left_most_key_position: Point = Field(..., alias="leftMostKeyPosition")
    right_most_key_position: Point = Field(..., alias="rightMostKeyPosition")
    reference_key_position: Point = Field(
        ...,
        validation_alias=AliasChoices(
            "reference_key_position", "referenceKeyPosition", "c4KeyPosition"
        ),
        serialization_alias="referenceKeyPosition",
    )
    num_of_keys: int = Field(..., ge=2, alias="numOfKeys")

    @model_validator(mode="after")
    def _check_left_to_right(self) -> "CalibrationSettings":
        if self.right_most_key_position.x <= self.left_most_key_position.x:
            raise ValueError(
                "right-most key must be to the right of the left-most key"
            )
        return self


class ClassifierParams(BaseModel):
    """Configuration for the per-frame key activation classifier.

    Attributes:
        epsilon: Maximum deviation of any channel from the channel average
            for a pixel to still count as gray, black or white (0-255).
    """

    epsilon: int = Field(40, ge=0, le=255, description="Color deviation threshold")


class CaptureParams(BaseModel):
    """Configuration for the timed capture loop.

    The capture length is derived from the song length and the playback speed
    of the visualizer video, plus a safety margin.

    Attributes:
        sample_interval_ms: Period between two frame samples.
        song_duration_minutes: Length of the song at normal speed.
        playback_speed: Playback speed of the video while capturing.
        margin_seconds: Extra capture time added after the song.
    """

    sample_interval_ms: int = Field(50, ge=1, description="Sampling period in ms")
    song_duration_minutes: float = Field(
        5.0, gt=0.0, description="Song length at normal speed"
    )
    playback_speed: float = Field(
        0.25, gt=0.0, le=4.0, description="Video playback speed during capture"
    )
    margin_seconds: float = Field(30.0, ge=0.0, description="Extra capture time")

    @property
    def total_duration_ms(self) -> int:
        """Wall-clock length of the capture run in milliseconds."""
        song_ms = self.song_duration_minutes * 60 * 1000 / self.playback_speed
        return int(round(song_ms + self.margin_seconds * 1000))


class ExtractionParams(BaseModel):
    """Configuration for note extraction.

    Attributes:
        close_open_notes: Close notes still sounding on the last captured line
            instead of dropping them.
    """

    close_open_notes: bool = Field(
        False, description="Close notes still active at capture end"
    )


class MidiParams(BaseModel):
    """Configuration for pitch mapping and MIDI generation.

    Attributes:
        reference_midi_note: MIDI pitch of the calibrated reference key
            (default 60, middle C).
        start_tick_ratio: MIDI ticks per captured line for note starts.
        duration_ratio: MIDI ticks per captured line for note durations.
        program: General MIDI program (instrument) number set at tick 0.
        ticks_per_beat: MIDI file resolution.
        tempo_bpm: Optional tempo; no tempo event is written when None.
    """

    reference_midi_note: int = Field(
        60, ge=0, le=127, description="MIDI pitch of the reference key"
    )
    start_tick_ratio: int = Field(3, ge=1, description="Ticks per line for starts")
    duration_ratio: int = Field(3, ge=1, description="Ticks per line for durations")
    program: int = Field(1, ge=0, le=127, description="MIDI program number")
    ticks_per_beat: int = Field(128, ge=1, description="MIDI ticks per beat")
    tempo_bpm: int | None = Field(
        None, ge=1, le=1000, description="Optional tempo in beats per minute"
    )


class FileParams(BaseModel):
    """Locations of the cache and output files.

    Attributes:
        settings_path: JSON file holding the last calibration settings.
        capture_path: JSON file holding the last activation matrix.
        output_path: Destination of the generated MIDI file.
    """

    settings_path: str = Field("last-settings.json", description="Settings cache")
    capture_path: str = Field("midi-capture.json", description="Capture cache")
    output_path: str = Field("song.mid", description="MIDI output file")


class ProcessingParameters(BaseModel):
    """Complete configuration for the entire visualizer-to-MIDI pipeline.

    Aggregates all parameter sets for every stage of the conversion process,
    providing a single object that can be passed to the pipeline functions.

    Attributes:
        classifier: Parameters for key activation classification.
        capture: Parameters for the capture loop.
        extraction: Parameters for note extraction.
        midi: Parameters for pitch mapping and MIDI generation.
        files: Cache and output file locations.
    """

    classifier: ClassifierParams = Field(
        default_factory=ClassifierParams, description="Classifier parameters"
    )
    capture: CaptureParams = Field(
        default_factory=CaptureParams, description="Capture parameters"
    )
    extraction: ExtractionParams = Field(
        default_factory=ExtractionParams, description="Extraction parameters"
    )
    midi: MidiParams = Field(
        default_factory=MidiParams, description="MIDI generation parameters"
    )
    files: FileParams = Field(default_factory=FileParams, description="File paths")
