"""
import_engine.errors - File-level failures.

Anything raised from here stops the whole call before a single row is
looked at.  Per-row problems are never raised; they are collected as
ValidationError values (see import_engine.report).
"""

from __future__ import annotations


class ImportFormatError(Exception):
    """Base for failures that make the upload unusable as a whole."""

    code = "FormatError"
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class UnsupportedFormat(ImportFormatError):
    code = "UnsupportedFormat"
    http_status = 415


class FileTooLarge(ImportFormatError):
    code = "FileTooLarge"
    http_status = 413


class UnreadableFile(ImportFormatError):
    code = "UnreadableFile"


class EmptyFile(ImportFormatError):
    code = "EmptyFile"


class TooManyRows(ImportFormatError):
    code = "TooManyRows"
