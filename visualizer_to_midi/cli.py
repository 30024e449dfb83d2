"""Command line entry point.

A run calibrates the keyboard (or reuses the last calibration), captures the
screen while the visualizer video plays, and writes the MIDI file. When a
capture file from an earlier run exists, calibration and capture are skipped
and the cached matrix is converted directly.
"""

import argparse
import logging
import sys

from visualizer_to_midi.calibration_input import ask_reuse_settings, prompt_calibration
from visualizer_to_midi.errors import PipelineError
from visualizer_to_midi.file_manager import FileManager
from visualizer_to_midi.frame_sources import ScreenFrameSource
from visualizer_to_midi.models import (
    CalibrationSettings,
    CaptureParams,
    ClassifierParams,
    ExtractionParams,
    FileParams,
    MidiParams,
    ProcessingParameters,
)
from visualizer_to_midi.pipeline import calibrate, extract, generate_midi, load_or_capture
from visualizer_to_midi.visualization import save_piano_roll, save_sample_points_image

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = ProcessingParameters()
    ap = argparse.ArgumentParser(
        prog="visualizer-to-midi",
        description="Convert a falling-note piano visualizer playing on screen into a MIDI file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    ap.add_argument('--settings', default=defaults.files.settings_path,
                    help='Calibration settings cache file')
    ap.add_argument('--capture', default=defaults.files.capture_path,
                    help='Capture cache file; if present, recording is skipped')
    ap.add_argument('--output', default=defaults.files.output_path,
                    help='MIDI output file')
    ap.add_argument('--interval-ms', type=int, default=defaults.capture.sample_interval_ms,
                    help='Sampling period in milliseconds')
    ap.add_argument('--duration-minutes', type=float,
                    default=defaults.capture.song_duration_minutes,
                    help='Song length at normal speed')
    ap.add_argument('--playback-speed', type=float, default=defaults.capture.playback_speed,
                    help='Video playback speed during capture')
    ap.add_argument('--epsilon', type=int, default=defaults.classifier.epsilon,
                    help='Color deviation above which a key counts as active')
    ap.add_argument('--reference-note', type=int, default=defaults.midi.reference_midi_note,
                    help='MIDI pitch of the calibrated reference key')
    ap.add_argument('--close-open-notes', action='store_true',
                    help='Close notes still sounding when the capture ends instead of dropping them')
    ap.add_argument('--piano-roll', metavar='PATH',
                    help='Also save a piano roll image of the result')
    ap.add_argument('--sample-points', metavar='PATH',
                    help='Save a screenshot with the sample points marked before capturing')
    ap.add_argument('-v', '--verbose', action='store_true',
                    help='Log every captured line')
    return ap


def params_from_args(args: argparse.Namespace) -> ProcessingParameters:
    """Build validated pipeline parameters from parsed arguments."""
    return ProcessingParameters(
        classifier=ClassifierParams(epsilon=args.epsilon),
        capture=CaptureParams(
            sample_interval_ms=args.interval_ms,
            song_duration_minutes=args.duration_minutes,
            playback_speed=args.playback_speed,
        ),
        extraction=ExtractionParams(close_open_notes=args.close_open_notes),
        midi=MidiParams(reference_midi_note=args.reference_note),
        files=FileParams(
            settings_path=args.settings,
            capture_path=args.capture,
            output_path=args.output,
        ),
    )


def calibrate_keyboard(file_manager: FileManager) -> CalibrationSettings:
    """Reuse the last calibration if the user agrees, otherwise ask for a new one."""
    if file_manager.has_settings() and ask_reuse_settings():
        logger.info("Loading previous settings...")
        return file_manager.load_settings()

    settings = prompt_calibration()
    file_manager.save_settings(settings)
    return settings


def run(params: ProcessingParameters, sample_points_path: str | None = None,
        piano_roll_path: str | None = None) -> str:
    """Run one conversion and return the path of the written MIDI file."""
    file_manager = FileManager(params.files)
    frame_source = ScreenFrameSource()

    def get_settings() -> CalibrationSettings:
        settings = calibrate_keyboard(file_manager)
        if sample_points_path:
            save_sample_points_image(frame_source(), calibrate(settings), sample_points_path)
        return settings

    settings, geometry, capture_result = load_or_capture(
        file_manager, get_settings, frame_source, params)
    extraction_result = extract(capture_result, params.extraction)
    midi_result = generate_midi(extraction_result, settings, geometry, params.midi)

    midi_path = file_manager.write_midi(midi_result.midi_bytes)
    if piano_roll_path:
        save_piano_roll(midi_result.events, piano_roll_path)
    return midi_path


def main(argv: list[str] | None = None) -> int:
    """Main entry point for visualizer to MIDI conversion."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = params_from_args(args)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        logger.error(f"Invalid arguments: {e}")
        return 2

    try:
        run(params, args.sample_points, args.piano_roll)
    except PipelineError as e:
        logger.error(f"Conversion failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
