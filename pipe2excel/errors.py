"""Exception types raised by the conversion pipeline."""

from __future__ import annotations

from typing import Optional


class ConversionError(ValueError):
    """Base class for every fatal conversion failure."""


class NoInputError(ConversionError):
    """Raised when a conversion is requested without any documents."""

    def __init__(self, message: str = "No files provided for conversion.") -> None:
        super().__init__(message)


class EmptyInputError(ConversionError):
    """Raised when a document has no content after trimming blank lines."""

    def __init__(self, document_name: Optional[str] = None, message: Optional[str] = None) -> None:
        self.document_name = document_name
        if message is None:
            if document_name:
                message = f"File '{document_name}' is empty or has no content."
            else:
                message = "File is empty or has no content."
        super().__init__(message)


class InvalidDocumentError(ConversionError):
    """Raised when a supplied document is not a name/content pair."""


class NoValidDataError(ConversionError):
    """Raised when every document of a batch was skipped."""

    def __init__(
        self,
        message: str = "No valid data found in any of the provided files to create an Excel sheet.",
    ) -> None:
        super().__init__(message)


class EncodingError(ConversionError):
    """Raised when serialising the workbook fails.

    The message of the underlying fault is kept as-is; the original exception is
    chained as ``__cause__``.
    """


__all__ = [
    "ConversionError",
    "EmptyInputError",
    "EncodingError",
    "InvalidDocumentError",
    "NoInputError",
    "NoValidDataError",
]
