"""File management for the visualizer-to-MIDI pipeline.

This module provides a file manager for the three files a run touches: the
last calibration settings, the last captured activation matrix and the MIDI
output. The two JSON files act as caches: a present capture file skips the
recording entirely, which allows replaying and debugging a capture without
playing the video again.
"""

import json
import logging
import os
from pathlib import Path

import numpy as np
from pydantic import ValidationError

from visualizer_to_midi.errors import PersistenceError
from visualizer_to_midi.models import CalibrationSettings, FileParams

logger = logging.getLogger(__name__)


class FileManager:
    """Reads and writes the settings, capture and output files.

    All writes go to a temporary file first and are moved into place, so an
    interrupted run never leaves a half-written cache behind.

    Attributes:
        settings_path: JSON file holding the last calibration settings.
        capture_path: JSON file holding the last activation matrix.
        output_path: Destination of the generated MIDI file.
    """

    def __init__(self, params: FileParams | None = None):
        """Initialize the file manager with optional file locations.

        Args:
            params: File locations; the defaults in the working directory are
                used when None.
        """
        params = params or FileParams()
        self.settings_path = Path(params.settings_path)
        self.capture_path = Path(params.capture_path)
        self.output_path = Path(params.output_path)

    @staticmethod
    def _write_atomic(path: Path, content: bytes) -> str:
        path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = path.with_name(path.name + ".tmp")
        with open(temp_path, "wb") as f:
            f.write(content)

        os.replace(temp_path, path)
        return str(path)

    @staticmethod
    def _read_json(path: Path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise PersistenceError(f"{path} does not exist") from e
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def has_settings(self) -> bool:
        """Whether a settings file from a previous run exists."""
        return self.settings_path.exists()

    def has_capture(self) -> bool:
        """Whether a capture file from a previous run exists."""
        return self.capture_path.exists()

    def load_settings(self) -> CalibrationSettings:
        """Load the last calibration settings.

        Raises:
            PersistenceError: If the file is missing, malformed or invalid.
        """
        data = self._read_json(self.settings_path)
        try:
            settings = CalibrationSettings.model_validate(data)
        except ValidationError as e:
            raise PersistenceError(f"Invalid settings in {self.settings_path}: {e}") from e

        logger.info(f"Loaded calibration settings from {self.settings_path}")
        return settings

    def save_settings(self, settings: CalibrationSettings) -> str:
        """Write calibration settings, replacing any previous file."""
        content = json.dumps(settings.model_dump(by_alias=True), indent=2)
        path = self._write_atomic(self.settings_path, content.encode("utf-8"))
        logger.info(f"Saved calibration settings to {path}")
        return path

    def load_capture(self) -> np.ndarray:
        """Load the last activation matrix.

        Returns:
            Boolean array of shape (lines, keys).

        Raises:
            PersistenceError: If the file is missing, malformed, ragged or
                holds anything but booleans.
        """
        data = self._read_json(self.capture_path)
        if not isinstance(data, list) or not all(isinstance(line, list) for line in data):
            raise PersistenceError(
                f"{self.capture_path} must hold a list of lines of booleans"
            )
        if not data:
            return np.zeros((0, 0), dtype=bool)

        num_keys = len(data[0])
        for line_index, line in enumerate(data):
            if len(line) != num_keys:
                raise PersistenceError(
                    f"Line {line_index} of {self.capture_path} has {len(line)} "
                    f"keys, expected {num_keys}"
                )
            if not all(isinstance(entry, bool) for entry in line):
                raise PersistenceError(
                    f"Line {line_index} of {self.capture_path} holds non-boolean values"
                )

        logger.info(f"Loaded {len(data)} captured lines from {self.capture_path}")
        return np.array(data, dtype=bool).reshape(len(data), num_keys)

    def save_capture(self, matrix: np.ndarray) -> str:
        """Write an activation matrix as a JSON list of lines."""
        content = json.dumps(np.asarray(matrix, dtype=bool).tolist())
        path = self._write_atomic(self.capture_path, content.encode("utf-8"))
        logger.info(f"Finished capture, wrote results to {path}")
        return path

    def write_midi(self, midi_bytes: bytes) -> str:
        """Write the MIDI output file."""
        path = self._write_atomic(self.output_path, midi_bytes)
        logger.info(f"File {path} written to disk")
        return path
