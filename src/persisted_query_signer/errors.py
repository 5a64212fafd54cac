"""Exception hierarchy for the signer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SignerError(Exception):
    """Base class for all errors raised by persisted-query-signer."""


class MissingInputError(SignerError):
    """A required input (root directory or signing key) is absent."""


class ExtractionError(SignerError):
    """A descriptor file could not be parsed or deserialized."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)

    def with_path(self, path: Path) -> ExtractionError:
        """Return a copy of this error bound to the file it came from."""
        return ExtractionError(self.message, path)


class OutputWriteError(SignerError):
    """The signature file could not be written."""
