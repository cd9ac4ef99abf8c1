"""Conversion error hierarchy."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every failure raised by the conversion pipeline."""

    pass


class ValidationError(ConversionError):
    """Raised when a Component Model is malformed.

    Carries every problem found, not just the first one.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid component model: " + "; ".join(self.problems))


class ComponentLoadError(ConversionError):
    """Raised when raw input cannot be loaded into a Component Model."""

    pass


class ExtractionError(ConversionError):
    """Raised when no component can be extracted from source markup."""

    pass
