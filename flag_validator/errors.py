"""Error taxonomy for the flag validator."""


class FlagValidatorError(Exception):
    """Base class for every error raised by this package."""


class InvalidBufferError(FlagValidatorError, ValueError):
    """Pixel buffer is missing, zero-sized or its sample count does not match W x H."""


class InsufficientChakraSignalError(FlagValidatorError):
    """Too few chakra-colored pixels in the white band to measure the emblem.

    Never escapes ``chakra.detect``: it is converted into an absent
    ``ChakraMetrics`` so the rest of the report is still produced.
    """

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__("insufficient chakra-colored pixels")


class UpstreamDecodeError(FlagValidatorError):
    """The input file could not be accepted or decoded into pixels."""
