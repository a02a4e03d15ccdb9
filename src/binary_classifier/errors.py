"""Exceptions raised while building datasets and evaluating classifiers."""

from __future__ import annotations

from pathlib import Path


class DatasetConfigError(ValueError):
    """Dataset layout is unusable: missing, not a directory, unreadable or empty."""


class ImageDecodeError(OSError):
    """An image file could not be opened, decoded or resized.

    Attributes:
        path: The offending file, when known.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
