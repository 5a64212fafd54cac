"""Aggregator - collects per-file results into a deterministic signature map."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .signer import SignatureEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileFailure:
    """A file whose descriptor could not be extracted or signed."""

    path: Path
    message: str


@dataclass(frozen=True)
class Collision:
    """Two files declaring the same operation name."""

    name: str
    kept: Path
    dropped: Path


@dataclass
class RunResult:
    """Outcome of signing a directory."""

    signatures: dict[str, str] = field(default_factory=dict)
    """Operation name to hex digest, sorted by name."""

    failures: list[FileFailure] = field(default_factory=list)
    collisions: list[Collision] = field(default_factory=list)
    files_scanned: int = 0
    files_without_descriptor: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_json(self) -> str:
        return signatures_to_json(self.signatures)


def signatures_to_json(signatures: dict[str, str]) -> str:
    """Serialize a signature map with sorted keys and tab indentation."""
    return json.dumps(signatures, indent="\t", sort_keys=True, ensure_ascii=False)


def _path_key(path: Path) -> str:
    return path.as_posix()


class Aggregator:
    """
    Accumulates signature entries from concurrent workers.

    Not thread-safe: only the collecting thread may call ``add``. When two
    files declare the same operation name, the entry from the file whose
    path sorts first wins, so the result does not depend on the order in
    which workers finish.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SignatureEntry] = {}
        self._collisions: list[Collision] = []
        self._failures: list[FileFailure] = []
        self.files_scanned = 0
        self.files_without_descriptor = 0

    def add(self, entry: SignatureEntry) -> None:
        self.files_scanned += 1
        current = self._entries.get(entry.name)
        if current is None:
            self._entries[entry.name] = entry
            return

        if _path_key(entry.source) < _path_key(current.source):
            kept, dropped = entry, current
            self._entries[entry.name] = entry
        else:
            kept, dropped = current, entry

        logger.warning(
            "Operation %s is declared in both %s and %s; keeping %s",
            entry.name,
            kept.source,
            dropped.source,
            kept.source,
        )
        self._collisions.append(Collision(entry.name, kept.source, dropped.source))

    def add_empty(self) -> None:
        """Record a file that contained no descriptor."""
        self.files_scanned += 1
        self.files_without_descriptor += 1

    def add_failure(self, failure: FileFailure) -> None:
        self.files_scanned += 1
        self._failures.append(failure)

    def mapping(self) -> dict[str, str]:
        """Return the name to digest map, sorted by name."""
        return {name: self._entries[name].digest for name in sorted(self._entries)}

    def result(self) -> RunResult:
        return RunResult(
            signatures=self.mapping(),
            failures=sorted(self._failures, key=lambda f: _path_key(f.path)),
            collisions=sorted(self._collisions, key=lambda c: (c.name, _path_key(c.dropped))),
            files_scanned=self.files_scanned,
            files_without_descriptor=self.files_without_descriptor,
        )
