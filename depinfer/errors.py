"""Exceptions raised by the depinfer pipeline."""

from __future__ import annotations


class DepInferError(RuntimeError):
    """Base class for whole-run failures."""


class InvalidRootError(DepInferError):
    """Raised when the analysis root is missing, not a directory, or unreadable."""


class NoCodeFilesFoundError(DepInferError):
    """Raised when no file passes the extension, size and readability filters."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "No code files found. Check file permissions and that the path "
            "contains recognised source files."
        )
