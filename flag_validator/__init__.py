"""Indian flag image validator."""

from .buffer import PixelBuffer
from .config import DEFAULT_SPEC, TargetSpec
from .errors import (
    FlagValidatorError,
    InsufficientChakraSignalError,
    InvalidBufferError,
    UpstreamDecodeError,
)
from .report import ValidationReport
from .validator import validate, validate_buffer

__version__ = "0.2.0"

__all__ = [
    "DEFAULT_SPEC",
    "FlagValidatorError",
    "InsufficientChakraSignalError",
    "InvalidBufferError",
    "PixelBuffer",
    "TargetSpec",
    "UpstreamDecodeError",
    "ValidationReport",
    "validate",
    "validate_buffer",
]
