"""Frame sources feeding the capture loop.

A frame source is any callable returning a Frame. The screen source grabs the
full screen with Pillow; the array helpers convert between frames and the
H×W×3 arrays used by OpenCV and the tests.
"""

import logging

import numpy as np
from PIL import Image, ImageGrab

from visualizer_to_midi.errors import CaptureError
from visualizer_to_midi.models import Frame

logger = logging.getLogger(__name__)


def frame_from_image(image: Image.Image) -> Frame:
    """Pack a Pillow image into an RGB frame."""
    rgb = image.convert("RGB")
    return Frame(data=rgb.tobytes(), width=rgb.width)


def frame_from_array(rgb: np.ndarray) -> Frame:
    """Pack an H×W×3 RGB uint8 array into a frame.

    Raises:
        CaptureError: If the array is not an H×W×3 image.
    """
    if rgb.ndim != 3 or rgb.shape[2] != 3:
        raise CaptureError(f"Expected an H×W×3 RGB array, got shape {rgb.shape}")
    return Frame(data=np.ascontiguousarray(rgb, dtype=np.uint8).tobytes(), width=rgb.shape[1])


def frame_to_array(frame: Frame) -> np.ndarray:
    """Unpack a frame into an H×W×3 RGB uint8 array.

    Raises:
        CaptureError: If the buffer does not hold whole rows.
    """
    row_bytes = frame.width * 3
    if not frame.data or len(frame.data) % row_bytes:
        raise CaptureError(
            f"Frame of {len(frame.data)} bytes does not hold whole rows of width {frame.width}"
        )
    return np.frombuffer(frame.data, dtype=np.uint8).reshape(-1, frame.width, 3)


class ScreenFrameSource:
    """Captures the full screen on every call.

    Attributes:
        all_screens: Grab every attached screen instead of the primary one.
    """

    def __init__(self, all_screens: bool = False):
        self.all_screens = all_screens

    def __call__(self) -> Frame:
        try:
            image = ImageGrab.grab(all_screens=self.all_screens)
        except OSError as e:
            raise CaptureError(f"Screen capture failed: {e}") from e
        return frame_from_image(image)
