"""Configuration models for the Persisted Query Signer."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .errors import MissingInputError

SIGNING_KEY_ENV = "SIGNING_KEY"
DEFAULT_OUTPUT = "signatures.json"
GRAPHQL_SUFFIX = ".graphql.ts"
CONCRETE_REQUEST = "ConcreteRequest"


class ExtractionStrategy(str, Enum):
    """How descriptors are pulled out of generated files."""

    STRUCTURAL = "structural"
    TEXTUAL = "textual"


class TextualScan(str, Enum):
    """How the textual extractor finds the end of the params object."""

    BALANCED = "balanced"
    INDENTED = "indented"


class SignerConfig(BaseModel):
    """Main configuration for a signing run."""

    root: Path = Field(..., description="Directory to scan for descriptor files")
    output: Path = Field(Path(DEFAULT_OUTPUT), description="Signature file to write")
    strategy: ExtractionStrategy = Field(
        ExtractionStrategy.STRUCTURAL, description="Extraction strategy"
    )
    textual_scan: TextualScan = Field(
        TextualScan.BALANCED, description="Params scan mode for the textual strategy"
    )
    workers: Optional[int] = Field(
        None, ge=1, description="Worker pool size (defaults to the CPU count)"
    )
    allow_failures: bool = Field(
        False, description="Write the signature file even when some files failed"
    )

    def validate_root(self) -> None:
        """Raise MissingInputError unless root is an existing directory."""
        if not self.root.is_dir():
            raise MissingInputError(f"Directory not found: {self.root}")


def resolve_signing_key(argument: Optional[str] = None) -> bytes:
    """
    Resolve the signing key.

    The SIGNING_KEY environment variable takes precedence; the command-line
    argument is the fallback.

    Args:
        argument: Key passed on the command line, if any

    Returns:
        The key as UTF-8 bytes
    """
    key = os.environ.get(SIGNING_KEY_ENV) or argument
    if not key:
        raise MissingInputError(
            f"No signing key: set {SIGNING_KEY_ENV} or pass it as an argument"
        )
    return key.encode("utf-8")
