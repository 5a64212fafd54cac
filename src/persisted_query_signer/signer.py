"""HMAC signing of query text."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from pathlib import Path

from .errors import MissingInputError
from .extractors import Descriptor


@dataclass(frozen=True)
class SignatureEntry:
    """A signed operation."""

    name: str
    """Operation name, used as the key of the signature map."""

    digest: str
    """Lowercase hex HMAC-SHA256 of the query text."""

    source: Path
    """File the descriptor was extracted from."""


class Signer:
    """Computes HMAC-SHA256 signatures with a fixed key."""

    def __init__(self, key: bytes) -> None:
        if not key:
            raise MissingInputError("Signing key must not be empty")
        self._key = bytes(key)

    def sign(self, text: str) -> str:
        """Return the lowercase hex HMAC-SHA256 of the UTF-8 encoded text."""
        return hmac.new(self._key, text.encode("utf-8"), hashlib.sha256).hexdigest()

    def sign_descriptor(self, descriptor: Descriptor, source: Path) -> SignatureEntry:
        """Sign a descriptor's text."""
        return SignatureEntry(name=descriptor.name, digest=self.sign(descriptor.text), source=source)
