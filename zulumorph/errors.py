"""
Error types raised around the analyser.

The segmenter itself never raises on string input; these errors belong to the
request, extraction and export layers.
"""


class ZulumorphError(Exception):
    """Base class for all zulumorph errors."""


class InputValidationError(ZulumorphError, ValueError):
    """A request payload is missing or has the wrong type."""


class ExtractionError(ZulumorphError):
    """A file's bytes could not be turned into text."""

    def __init__(self, message: str, filename: str = None):
        super().__init__(message)
        self.filename = filename


class ExportFormatError(ZulumorphError, ValueError):
    """An unsupported export format was requested."""
