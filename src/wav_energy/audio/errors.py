"""Errors raised while reading WAV input."""

from pathlib import Path
from typing import Optional, Union


class AudioError(Exception):
    """Base class for decode failures. ``kind`` tells I/O and format apart."""

    kind = "audio"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        self.message = message
        super().__init__(f"{self.path}: {message}" if self.path else message)


class AudioIOError(AudioError):
    """File missing, unreadable, or truncated before the header is complete."""

    kind = "io"


class AudioFormatError(AudioError):
    """Header or sample data outside the supported encodings."""

    kind = "format"

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        encoding: Optional[str] = None,
    ):
        self.encoding = encoding
        super().__init__(message, path)
