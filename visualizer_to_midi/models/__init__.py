"""Domain models for the visualizer-to-midi application.

This module provides a centralized location for all data models used throughout
the visualizer-to-MIDI conversion pipeline. It includes:

- Core domain models (Point, Frame, NoteEvent, MidiEvent)
- Pipeline processing stage results (SampleGeometry, CaptureResult, etc.)
- Calibration settings and configuration parameters for each stage

All models are built using Pydantic for data validation and serialization,
ensuring type safety and clear interfaces between pipeline components.
"""

# Re-export core models
from visualizer_to_midi.models.core_models import Point, Frame, NoteEvent, MidiEvent

# Re-export pipeline models
from visualizer_to_midi.models.pipeline_models import (
    SampleGeometry,
    CaptureResult,
    ExtractionResult,
    MidiResult,
)

# Re-export setting models
from visualizer_to_midi.models.settings_models import (
    CalibrationSettings,
    ClassifierParams,
    CaptureParams,
    ExtractionParams,
    MidiParams,
    FileParams,
    ProcessingParameters,
)
