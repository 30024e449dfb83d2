"""Key activation classification on a single frame.

Falling-note visualizers color a key while it sounds and leave it black,
white or gray otherwise. A pixel is gray-ish when its three channels are
close to their average, so a key counts as active as soon as any channel
strays from the average by more than ``epsilon``.
"""

import numpy as np

from visualizer_to_midi.errors import CaptureError, OutOfBoundsError
from visualizer_to_midi.models import SampleGeometry

ACTIVE_SYMBOL = "#"
IDLE_SYMBOL = "_"


def _as_pixel_rows(buffer, width: int) -> np.ndarray:
    """View a packed RGB buffer as an H×W×3 uint8 array without copying."""
    if width < 1:
        raise CaptureError(f"Frame width must be positive, got {width}")

    if isinstance(buffer, np.ndarray):
        flat = buffer.reshape(-1)
        if flat.dtype != np.uint8:
            raise CaptureError(f"Expected uint8 pixel data, got {flat.dtype}")
    else:
        flat = np.frombuffer(buffer, dtype=np.uint8)

    row_bytes = width * 3
    if flat.size == 0 or flat.size % row_bytes:
        raise CaptureError(
            f"Buffer of {flat.size} bytes does not hold whole RGB rows "
            f"of width {width}"
        )
    return flat.reshape(flat.size // row_bytes, width, 3)


def _check_bounds(x: int, y: int, width: int, height: int) -> None:
    if not (0 <= x < width and 0 <= y < height):
        raise OutOfBoundsError(
            f"Sample point ({x}, {y}) lies outside the {width}x{height} frame"
        )


def get_pixel(buffer, x: int, y: int, width: int) -> tuple[int, int, int]:
    """Read one pixel from a packed RGB buffer.

    Args:
        buffer: Packed RGB bytes, three bytes per pixel, row by row.
        x: Horizontal position in pixels.
        y: Vertical position in pixels.
        width: Image width in pixels.

    Returns:
        The (r, g, b) channel values.

    Raises:
        CaptureError: If the buffer does not hold whole rows.
        OutOfBoundsError: If (x, y) lies outside the image.
    """
    pixels = _as_pixel_rows(buffer, width)
    _check_bounds(x, y, width, pixels.shape[0])
    r, g, b = pixels[y, x]
    return int(r), int(g), int(b)


def classify_frame(
    buffer, width: int, geometry: SampleGeometry, epsilon: int = 40
) -> np.ndarray:
    """Classify every calibrated key of one frame as active or idle.

    Args:
        buffer: Packed RGB bytes of the frame.
        width: Frame width in pixels.
        geometry: Sample row and per-key columns.
        epsilon: Maximum channel deviation from the average for a gray pixel.

    Returns:
        1D boolean array with one entry per key, True for colored keys.

    Raises:
        CaptureError: If the buffer is empty or does not hold whole rows.
        OutOfBoundsError: If any sample point lies outside the frame.
    """
    pixels = _as_pixel_rows(buffer, width)
    height = pixels.shape[0]
    for x in geometry.columns_x:
        _check_bounds(x, geometry.row_y, width, height)

    samples = pixels[geometry.row_y, geometry.columns_x].astype(np.int16)
    average = samples.sum(axis=1) / 3.0
    deviation = np.abs(samples - average[:, np.newaxis])
    return np.any(deviation > epsilon, axis=1)


def format_activation(vector) -> str:
    """Render an activation vector as one character per key."""
    return "".join(ACTIVE_SYMBOL if active else IDLE_SYMBOL for active in vector)
