"""Timed capture of key activations.

The recorder samples a frame source at a fixed period for a fixed wall-clock
duration and classifies every frame. Timing is best effort: a tick that takes
longer than the period delays the following ticks instead of triggering a
burst of catch-up samples, so every line of the matrix is one real frame.
"""

import logging
import threading
import time
from collections.abc import Callable

import numpy as np

from visualizer_to_midi.errors import CaptureError, PipelineError
from visualizer_to_midi.frame_classifier import classify_frame, format_activation
from visualizer_to_midi.models import CaptureParams, Frame, SampleGeometry

logger = logging.getLogger(__name__)

FrameSource = Callable[[], Frame]

DEFAULT_SAMPLE_INTERVAL_MS = CaptureParams().sample_interval_ms
DEFAULT_TOTAL_DURATION_MS = CaptureParams().total_duration_ms


def _next_frame(frame_source: FrameSource, line_index: int) -> Frame:
    try:
        return frame_source()
    except PipelineError:
        raise
    except Exception as e:
        raise CaptureError(f"Frame source failed on line {line_index}: {e}") from e


def record(
    geometry: SampleGeometry,
    frame_source: FrameSource,
    sample_interval_ms: int = DEFAULT_SAMPLE_INTERVAL_MS,
    total_duration_ms: int = DEFAULT_TOTAL_DURATION_MS,
    epsilon: int = 40,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
    stop_event: threading.Event | None = None,
) -> np.ndarray:
    """Capture key activations until the duration has elapsed.

    Args:
        geometry: Sample row and per-key columns.
        frame_source: Callable returning the current frame on every call.
        sample_interval_ms: Period between two samples in milliseconds.
        total_duration_ms: Length of the capture in milliseconds.
        epsilon: Classifier color deviation threshold.
        clock: Monotonic clock in seconds.
        sleep: Function sleeping for a number of seconds.
        stop_event: Optional event that ends the capture early when set.

    Returns:
        Boolean activation matrix of shape (lines, keys).

    Raises:
        CaptureError: If the frame source fails or returns a malformed frame.
        OutOfBoundsError: If the calibration points lie outside the frame.
    """
    interval = sample_interval_ms / 1000.0
    start = clock()
    deadline = start + total_duration_ms / 1000.0
    next_tick = start
    lines: list[np.ndarray] = []

    logger.info(
        f"Capturing {geometry.num_keys} keys every {sample_interval_ms} ms "
        f"for {total_duration_ms / 1000:.0f} s"
    )

    try:
        while True:
            now = clock()
            if now >= deadline:
                break
            if stop_event is not None and stop_event.is_set():
                logger.warning(f"Capture stopped early after {len(lines)} lines")
                break
            if next_tick > now:
                sleep(min(next_tick, deadline) - now)
                continue

            frame = _next_frame(frame_source, len(lines))
            activation = classify_frame(frame.data, frame.width, geometry, epsilon)
            lines.append(activation)
            logger.debug(format_activation(activation))

            # A slow tick shifts the schedule instead of queueing extra samples
            next_tick = max(next_tick + interval, clock())
    except KeyboardInterrupt:
        logger.warning(f"Capture interrupted after {len(lines)} lines")

    logger.info(f"Finished capture with {len(lines)} lines")
    if not lines:
        return np.zeros((0, geometry.num_keys), dtype=bool)
    return np.vstack(lines)
