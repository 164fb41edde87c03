"""Errors raised by the PDF import stages."""

from enum import Enum


class PDFImportErrorCode(str, Enum):
    INVALID_PDF = "INVALID_PDF"
    ENCRYPTED_PDF = "ENCRYPTED_PDF"
    PASSWORD_REQUIRED = "PASSWORD_REQUIRED"
    INCORRECT_PASSWORD = "INCORRECT_PASSWORD"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    IMAGE_EXTRACTION_FAILED = "IMAGE_EXTRACTION_FAILED"
    PARSING_ERROR = "PARSING_ERROR"
    UNSUPPORTED_FEATURE = "UNSUPPORTED_FEATURE"


class PDFImportError(Exception):
    """Raised when a PDF cannot be imported.

    Attributes:
        code: Machine-readable failure category.
        details: The underlying cause, if any.
    """

    def __init__(self, message: str, code: PDFImportErrorCode, details: object = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
