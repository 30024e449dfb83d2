"""Piano visualizer to MIDI conversion library.

This package converts a falling-note piano visualizer video, played back on
screen, into a MIDI file. Pixel colors are sampled on one keyboard row at a
fixed rate, colored keys are classified as active, and runs of active frames
per key become notes.

The main processing pipeline consists of:
1. Calibration of the sampled row and per-key columns from three points
2. Timed screen capture and per-frame key activation classification
3. Note extraction from the activation matrix
4. Pitch mapping and MIDI file export

Example:
    Converting a previously captured activation matrix:

    >>> from visualizer_to_midi.file_manager import FileManager
    >>> from visualizer_to_midi.pipeline import process_complete_pipeline
    >>> from visualizer_to_midi.models import ProcessingParameters
    >>>
    >>> files = FileManager()
    >>> geometry, extraction, midi = process_complete_pipeline(
    ...     files.load_capture(), files.load_settings(), ProcessingParameters()
    ... )
    >>> files.write_midi(midi.midi_bytes)
"""

__version__ = "0.1.0"
