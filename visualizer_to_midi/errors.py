"""Exceptions raised by the visualizer-to-MIDI pipeline.

Every error is fatal for a run: stages log and re-raise, and the command line
entry point reports the message and exits without writing a MIDI file.
"""


class PipelineError(Exception):
    """Base exception for pipeline processing errors."""

    pass


class ConfigurationError(PipelineError):
    """Exception raised when calibration or parameters are unusable."""

    pass


class CaptureError(PipelineError):
    """Exception raised when a frame cannot be acquired or is malformed."""

    pass


class OutOfBoundsError(PipelineError):
    """Exception raised when a sample coordinate lies outside the frame."""

    pass


class PersistenceError(PipelineError):
    """Exception raised when a cached settings or capture file is invalid."""

    pass


class InputError(PipelineError):
    """Exception raised when an activation matrix is malformed."""

    pass
