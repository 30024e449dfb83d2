"""Note extraction from a key activation matrix.

Each line of the matrix holds one captured frame, each column one key. Notes
are the runs of consecutive active lines per key: a note opens on the line
where its key turns active and closes on the last line before the key turns
idle again.

Lines before the first line with any active key are skipped. The video
usually starts with an empty keyboard while the first notes are still
falling, and nothing there can start a note.
"""

import enum
import logging

import numpy as np

from visualizer_to_midi.errors import InputError
from visualizer_to_midi.models import ExtractionResult, NoteEvent

logger = logging.getLogger(__name__)


class ExtractorState(enum.Enum):
    """Scanning mode of the extractor; moves to RECORDING once and stays."""

    SKIPPING_LEADING_SILENCE = "skipping_leading_silence"
    RECORDING = "recording"


def as_activation_matrix(matrix) -> np.ndarray:
    """Convert a nested sequence of booleans to a 2D boolean array.

    Args:
        matrix: Array or list of lines, each line one boolean per key.

    Returns:
        Boolean array of shape (lines, keys). An empty input gives an array
        of shape (0, 0).

    Raises:
        InputError: If lines differ in length or the input is not 2D.
    """
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2 and matrix.size == 0:
            return np.zeros((0, 0), dtype=bool)
        if matrix.ndim != 2:
            raise InputError(
                f"Activation matrix must be 2D, got {matrix.ndim} dimensions"
            )
        return matrix.astype(bool, copy=False)

    lines = list(matrix)
    if not lines:
        return np.zeros((0, 0), dtype=bool)

    num_keys = len(lines[0])
    for line_index, line in enumerate(lines):
        if len(line) != num_keys:
            raise InputError(
                f"Line {line_index} has {len(line)} keys, expected {num_keys}"
            )
    return np.array(lines, dtype=bool).reshape(len(lines), num_keys)


def extract_notes_with_stats(
    matrix, close_open_notes: bool = False
) -> ExtractionResult:
    """Decode an activation matrix into notes and report scan statistics.

    Args:
        matrix: Activation matrix of shape (lines, keys).
        close_open_notes: Close notes still active on the last line at that
            line instead of dropping them.

    Returns:
        ExtractionResult with the notes in emission order.

    Raises:
        InputError: If the matrix is malformed.
    """
    activations = as_activation_matrix(matrix)
    num_lines, num_keys = activations.shape

    state = ExtractorState.SKIPPING_LEADING_SILENCE
    first_active_line: int | None = None
    active_since: list[int | None] = [None] * num_keys
    notes: list[NoteEvent] = []

    for line_index, line in enumerate(activations):
        if state is ExtractorState.SKIPPING_LEADING_SILENCE:
            if not line.any():
                continue
            state = ExtractorState.RECORDING
            first_active_line = line_index

        for key_index, is_active in enumerate(line):
            start_index = active_since[key_index]
            if is_active and start_index is None:
                active_since[key_index] = line_index
            elif not is_active and start_index is not None:
                notes.append(
                    NoteEvent(
                        key_index=key_index,
                        start_index=start_index,
                        end_index=line_index - 1,
                    )
                )
                active_since[key_index] = None

    still_open = [
        (key_index, start_index)
        for key_index, start_index in enumerate(active_since)
        if start_index is not None
    ]
    dropped_notes = 0
    if still_open and close_open_notes:
        for key_index, start_index in still_open:
            notes.append(
                NoteEvent(
                    key_index=key_index,
                    start_index=start_index,
                    end_index=num_lines - 1,
                )
            )
    elif still_open:
        dropped_notes = len(still_open)
        logger.warning(
            f"Dropping {dropped_notes} note(s) still sounding on the last line"
        )

    return ExtractionResult(
        notes=notes,
        num_lines=num_lines,
        first_active_line=first_active_line,
        dropped_notes=dropped_notes,
    )


def extract_notes(matrix, close_open_notes: bool = False) -> list[NoteEvent]:
    """Decode an activation matrix into notes.

    Notes are returned in the order their end was observed: by end line,
    then by ascending key index within a line.

    Args:
        matrix: Activation matrix of shape (lines, keys).
        close_open_notes: Close notes still active on the last line at that
            line instead of dropping them.

    Returns:
        List of NoteEvent objects.
    """
    return extract_notes_with_stats(matrix, close_open_notes).notes
