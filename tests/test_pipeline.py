import numpy as np
import pytest

from visualizer_to_midi.errors import ConfigurationError, InputError, PersistenceError
from visualizer_to_midi.file_manager import FileManager
from visualizer_to_midi.frame_sources import frame_from_array
from visualizer_to_midi.models import (
    CalibrationSettings,
    CaptureParams,
    CaptureResult,
    ExtractionParams,
    FileParams,
    MidiParams,
    Point,
    ProcessingParameters,
)
from visualizer_to_midi.pipeline import (
    calibrate,
    extract,
    generate_midi,
    load_or_capture,
    process_complete_pipeline,
)


@pytest.fixture
def file_manager(tmp_path):
    return FileManager(
        FileParams(
            settings_path=str(tmp_path / "settings.json"),
            capture_path=str(tmp_path / "capture.json"),
            output_path=str(tmp_path / "song.mid"),
        )
    )


def test_calibrate(three_key_settings):
    geometry = calibrate(three_key_settings)
    assert geometry.columns_x == [0, 50, 100]
    assert geometry.row_y == 10


def test_calibrate_invalid_settings():
    settings = CalibrationSettings.model_construct(
        left_most_key_position=Point(x=0, y=0),
        right_most_key_position=Point(x=100, y=0),
        reference_key_position=Point(x=0, y=0),
        num_of_keys=1,
    )
    with pytest.raises(ConfigurationError):
        calibrate(settings)


def test_extract_empty():
    result = extract(CaptureResult(), ExtractionParams())
    assert result.notes == []
    assert result.first_active_line is None


def test_generate_midi(three_key_settings, song_matrix):
    geometry = calibrate(three_key_settings)
    extraction = extract(CaptureResult(matrix=song_matrix), ExtractionParams())
    midi = generate_midi(extraction, three_key_settings, geometry, MidiParams())

    # reference x=52 is closest to key 1, so key 0 is B3
    assert midi.reference_key_index == 1
    assert midi.left_most_key_note == 59
    assert midi.reference_note_name == "C4"
    assert [(e.note, e.start_tick, e.duration_tick) for e in midi.events] == [
        (59, 6, 3),
        (61, 9, 3),
    ]
    assert midi.midi_bytes.startswith(b"MThd")


def test_generate_midi_pitch_out_of_range(three_key_settings, song_matrix):
    geometry = calibrate(three_key_settings)
    extraction = extract(CaptureResult(matrix=song_matrix), ExtractionParams())
    with pytest.raises(ConfigurationError):
        generate_midi(
            extraction, three_key_settings, geometry, MidiParams(reference_midi_note=127)
        )


def test_process_complete_pipeline_is_deterministic(three_key_settings, song_matrix):
    params = ProcessingParameters()
    runs = [
        process_complete_pipeline(song_matrix, three_key_settings, params)
        for _ in range(3)
    ]
    assert all(r[1].notes == runs[0][1].notes for r in runs)
    assert all(r[2].midi_bytes == runs[0][2].midi_bytes for r in runs)


def test_process_complete_pipeline_ragged_matrix(three_key_settings):
    with pytest.raises(InputError):
        process_complete_pipeline(
            [[True, False, False], [True]], three_key_settings, ProcessingParameters()
        )


def test_load_or_capture_uses_cache(file_manager, three_key_settings, song_matrix):
    file_manager.save_settings(three_key_settings)
    file_manager.save_capture(song_matrix)

    def no_calibration():
        raise AssertionError("calibration must not be requested")

    def no_frames():
        raise AssertionError("capture must be skipped")

    settings, geometry, capture = load_or_capture(
        file_manager, no_calibration, no_frames, ProcessingParameters()
    )
    assert settings == three_key_settings
    assert geometry.num_keys == 3
    assert capture.from_cache
    np.testing.assert_array_equal(capture.matrix, song_matrix)


def test_load_or_capture_cache_without_settings(file_manager, song_matrix):
    file_manager.save_capture(song_matrix)
    with pytest.raises(PersistenceError):
        load_or_capture(file_manager, None, None, ProcessingParameters())


def test_load_or_capture_rejects_keyless_lines(file_manager, three_key_settings):
    file_manager.save_settings(three_key_settings)
    file_manager.save_capture(np.zeros((4, 0), dtype=bool))
    with pytest.raises(PersistenceError):
        load_or_capture(file_manager, None, None, ProcessingParameters())


def test_load_or_capture_key_count_mismatch(file_manager, three_key_settings):
    file_manager.save_settings(three_key_settings)
    file_manager.save_capture(np.zeros((3, 5), dtype=bool))
    with pytest.raises(PersistenceError):
        load_or_capture(file_manager, None, None, ProcessingParameters())


def test_load_or_capture_records_and_saves(file_manager, three_key_settings):
    image = np.zeros((20, 101, 3), dtype=np.uint8)
    image[10, 50] = (255, 0, 255)
    frame = frame_from_array(image)
    params = ProcessingParameters(
        capture=CaptureParams(
            sample_interval_ms=10,
            song_duration_minutes=0.001,
            playback_speed=1.0,
            margin_seconds=0,
        )
    )

    settings, geometry, capture = load_or_capture(
        file_manager, lambda: three_key_settings, lambda: frame, params
    )
    assert settings == three_key_settings
    assert not capture.from_cache
    assert capture.num_lines >= 1
    assert capture.matrix[0].tolist() == [False, True, False]
    assert file_manager.has_capture()
    np.testing.assert_array_equal(file_manager.load_capture(), capture.matrix)
