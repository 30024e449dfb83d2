"""
Visualization functions for the visualizer-to-MIDI pipeline.

This module produces the diagnostic images of a run: the captured screen with
every sample point marked, to check a calibration before a long capture, and
a piano roll of the generated MIDI events.
"""

import logging
from collections.abc import Sequence

import cv2
import numpy as np
from matplotlib.figure import Figure

from visualizer_to_midi.frame_sources import frame_to_array
from visualizer_to_midi.models import Frame, MidiEvent, SampleGeometry
from visualizer_to_midi.pitch_mapping import midi_note_name

logger = logging.getLogger(__name__)

SAMPLE_POINT_COLOR = (255, 0, 255)  # RGB magenta


def draw_sample_points(
    image: np.ndarray, geometry: SampleGeometry, radius: int = 3
) -> np.ndarray:
    """Mark every sample point of a geometry on an RGB image.

    Points outside the image are skipped so that a bad calibration can still
    be inspected.

    Args:
        image: RGB image as an H×W×3 array.
        geometry: Sample row and per-key columns.
        radius: Marker radius in pixels.

    Returns:
        A marked copy of the image.
    """
    marked = image.copy()
    height, width = marked.shape[:2]
    row_y = geometry.row_y

    for x in geometry.columns_x:
        if 0 <= x < width and 0 <= row_y < height:
            cv2.circle(marked, (x, row_y), radius, SAMPLE_POINT_COLOR, 1)
            marked[row_y, x] = SAMPLE_POINT_COLOR

    return marked


def save_sample_points_image(
    frame: Frame, geometry: SampleGeometry, output_path: str
) -> bool:
    """Save a frame with all sample points marked.

    Args:
        frame: Captured frame.
        geometry: Sample row and per-key columns.
        output_path: Destination image path (format from the extension).

    Returns:
        True if the image was written, False otherwise.
    """
    marked = draw_sample_points(frame_to_array(frame), geometry)

    # OpenCV writes BGR
    try:
        success = cv2.imwrite(output_path, cv2.cvtColor(marked, cv2.COLOR_RGB2BGR))
    except cv2.error as e:
        logger.debug(f"cv2.imwrite failed: {e}")
        success = False

    if success:
        logger.info(f"Sample point visualization saved as '{output_path}'")
    else:
        logger.warning(f"Failed to save sample point visualization to '{output_path}'")
    return success


def create_piano_roll_visualization(
    events: Sequence[MidiEvent],
    *,
    width_in: float = 8.0,
    row_height_in: float = 0.25,
    min_height_in: float = 2.0,
    max_height_in: float = 12.0,
    dpi: int = 150,
) -> Figure:
    """Draw MIDI events as a piano roll.

    Each pitch between the lowest and the highest note gets one labelled row;
    bars are colored by pitch class.

    Args:
        events: MIDI events to draw.
        width_in: Figure width in inches.
        row_height_in: Height of one pitch row in inches.
        min_height_in: Lower bound of the figure height.
        max_height_in: Upper bound of the figure height.
        dpi: Raster resolution.

    Returns:
        Figure holding one bar per event, or a "No MIDI events" notice.
    """
    from matplotlib.colors import hsv_to_rgb

    if not events:
        fig = Figure(figsize=(width_in, min_height_in), dpi=dpi)
        ax = fig.subplots()
        ax.text(
            0.5, 0.5, "No MIDI events", ha="center", va="center", transform=ax.transAxes
        )
        ax.set_axis_off()
        return fig

    pitches = range(min(e.note for e in events), max(e.note for e in events) + 1)
    end_tick = max(e.start_tick + e.duration_tick for e in events)
    height_in = min(max_height_in, max(min_height_in, len(pitches) * row_height_in))

    fig = Figure(figsize=(width_in, height_in), dpi=dpi)
    ax = fig.subplots()
    ax.barh(
        [e.note for e in events],
        # zero-length notes still get a visible sliver
        [max(e.duration_tick, 1) for e in events],
        left=[e.start_tick for e in events],
        height=0.9,
        color=[tuple(hsv_to_rgb((e.note % 12 / 12.0, 0.8, 0.85))) for e in events],
        edgecolor="black",
        linewidth=0.8,
    )

    ax.set_xlim(0, max(end_tick, 1))
    ax.set_ylim(pitches.start - 0.5, pitches.stop - 0.5)
    ax.set_yticks(list(pitches), [midi_note_name(n) for n in pitches], fontsize=8)
    ax.set_yticks([n - 0.5 for n in pitches], minor=True)
    ax.grid(axis="y", which="minor", color="lightgray")
    ax.tick_params(axis="y", which="minor", length=0)
    ax.set_xlabel("Time (ticks)")
    fig.tight_layout()
    return fig


def save_piano_roll(events: Sequence[MidiEvent], output_path: str) -> bool:
    """Render the piano roll of ``events`` to an image file.

    Returns:
        True if the image was written, False otherwise.
    """
    fig = create_piano_roll_visualization(events)
    try:
        fig.savefig(output_path)
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to save piano roll to '{output_path}': {e}")
        return False

    logger.info(f"Piano roll saved as '{output_path}'")
    return True
