"""
Pipeline processing functions for visualizer-to-MIDI conversion.

This module contains the stage functions of the conversion pipeline and the
function running them in order, separating business logic from prompts,
screen access and the command line.

Every stage logs a failure and re-raises it. A run either produces a complete
MIDI file or nothing: a partial capture or a misaligned note list is worse
than no output.
"""

import logging
import threading
from collections.abc import Callable

import numpy as np

from visualizer_to_midi.calibration import compute_geometry, reference_key_index
from visualizer_to_midi.errors import PersistenceError, PipelineError
from visualizer_to_midi.file_manager import FileManager
from visualizer_to_midi.midi_utils import build_note_events, write_midi_file
from visualizer_to_midi.models import (
    CalibrationSettings,
    CaptureResult,
    ExtractionParams,
    ExtractionResult,
    MidiParams,
    MidiResult,
    ProcessingParameters,
    SampleGeometry,
)
from visualizer_to_midi.note_extraction import (
    as_activation_matrix,
    extract_notes_with_stats,
)
from visualizer_to_midi.pitch_mapping import left_most_key_note, midi_note_name
from visualizer_to_midi.recorder import FrameSource, record

logger = logging.getLogger(__name__)


def calibrate(settings: CalibrationSettings) -> SampleGeometry:
    """Compute the sample geometry for a calibration.

    Args:
        settings: Calibration settings.

    Returns:
        SampleGeometry with one column per key.
    """
    try:
        return compute_geometry(settings)
    except PipelineError as e:
        logger.error(f"Error in calibration: {e}")
        raise


def capture_activations(
    geometry: SampleGeometry,
    frame_source: FrameSource,
    params: ProcessingParameters,
    stop_event: threading.Event | None = None,
) -> CaptureResult:
    """Record the activation matrix from a frame source.

    Args:
        geometry: Sample geometry.
        frame_source: Callable returning one frame per call.
        params: Pipeline parameters (capture and classifier are used).
        stop_event: Optional event ending the capture early.

    Returns:
        CaptureResult containing the recorded matrix.
    """
    try:
        matrix = record(
            geometry,
            frame_source,
            sample_interval_ms=params.capture.sample_interval_ms,
            total_duration_ms=params.capture.total_duration_ms,
            epsilon=params.classifier.epsilon,
            stop_event=stop_event,
        )
    except PipelineError as e:
        logger.error(f"Error in capture: {e}")
        raise

    return CaptureResult(
        matrix=matrix, sample_interval_ms=params.capture.sample_interval_ms
    )


def extract(capture_result: CaptureResult, params: ExtractionParams) -> ExtractionResult:
    """Decode the captured matrix into notes.

    Args:
        capture_result: Captured or cached activation matrix.
        params: Note extraction parameters.

    Returns:
        ExtractionResult with the notes in emission order.
    """
    try:
        result = extract_notes_with_stats(
            capture_result.matrix, close_open_notes=params.close_open_notes
        )
    except PipelineError as e:
        logger.error(f"Error in note extraction: {e}")
        raise

    if result.first_active_line is None:
        logger.warning("No key was ever active in the capture")
    else:
        logger.info(
            f"Extracted {len(result.notes)} notes from {result.num_lines} lines "
            f"(first active line {result.first_active_line})"
        )
    return result


def generate_midi(
    extraction_result: ExtractionResult,
    settings: CalibrationSettings,
    geometry: SampleGeometry,
    params: MidiParams,
) -> MidiResult:
    """Generate MIDI from decoded notes.

    Args:
        extraction_result: Decoded notes.
        settings: Calibration settings holding the reference key position.
        geometry: Sample geometry computed from the same settings.
        params: MIDI generation parameters.

    Returns:
        MidiResult with MIDI events and file data.
    """
    try:
        ref_index = reference_key_index(settings, geometry)
        events = build_note_events(extraction_result.notes, ref_index, params)
        midi_bytes = write_midi_file(
            events,
            program=params.program,
            ticks_per_beat=params.ticks_per_beat,
            tempo_bpm=params.tempo_bpm,
        )
    except PipelineError as e:
        logger.error(f"Error in MIDI generation: {e}")
        raise

    base_note = left_most_key_note(ref_index, params.reference_midi_note)
    logger.info(
        f"Reference key is key {ref_index} ({midi_note_name(params.reference_midi_note)}), "
        f"left-most key is MIDI note {base_note}"
    )
    return MidiResult(
        events=events,
        midi_bytes=midi_bytes,
        reference_key_index=ref_index,
        left_most_key_note=base_note,
        reference_note_name=midi_note_name(params.reference_midi_note),
    )


def load_or_capture(
    file_manager: FileManager,
    get_settings: Callable[[], CalibrationSettings],
    frame_source: FrameSource,
    params: ProcessingParameters,
    stop_event: threading.Event | None = None,
) -> tuple[CalibrationSettings, SampleGeometry, CaptureResult]:
    """Reuse the cached capture if present, otherwise calibrate and record.

    Args:
        file_manager: Access to the cache files.
        get_settings: Called for the calibration when a new capture is needed.
        frame_source: Callable returning one frame per call.
        params: Pipeline parameters.
        stop_event: Optional event ending the capture early.

    Returns:
        Tuple of (settings, geometry, capture_result).
    """
    if file_manager.has_capture():
        logger.info(f"Found {file_manager.capture_path}, skipping capture")
        settings = file_manager.load_settings()
        geometry = calibrate(settings)
        matrix = file_manager.load_capture()
        if matrix.shape[0] and matrix.shape[1] != geometry.num_keys:
            message = (
                f"Capture holds {matrix.shape[1]} keys but the settings describe "
                f"{geometry.num_keys}"
            )
            logger.error(message)
            raise PersistenceError(message)
        capture_result = CaptureResult(
            matrix=matrix,
            sample_interval_ms=params.capture.sample_interval_ms,
            from_cache=True,
        )
        return settings, geometry, capture_result

    settings = get_settings()
    geometry = calibrate(settings)
    logger.info("Ready to play the video...")
    capture_result = capture_activations(geometry, frame_source, params, stop_event)
    file_manager.save_capture(capture_result.matrix)
    return settings, geometry, capture_result


def process_complete_pipeline(
    matrix: np.ndarray,
    settings: CalibrationSettings,
    params: ProcessingParameters,
) -> tuple[SampleGeometry, ExtractionResult, MidiResult]:
    """Process an activation matrix into MIDI.

    Args:
        matrix: Activation matrix of shape (lines, keys).
        settings: Calibration settings the matrix was recorded with.
        params: Pipeline parameters.

    Returns:
        Tuple of (geometry, extraction_result, midi_result).
    """
    geometry = calibrate(settings)
    capture_result = CaptureResult(
        matrix=as_activation_matrix(matrix),
        sample_interval_ms=params.capture.sample_interval_ms,
    )
    extraction_result = extract(capture_result, params.extraction)
    midi_result = generate_midi(extraction_result, settings, geometry, params.midi)
    return geometry, extraction_result, midi_result
