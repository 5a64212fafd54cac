"""Base extractor interface for pulling request descriptors out of files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ExtractionError


class Descriptor(BaseModel):
    """The operation name and query text of one generated request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    name: str = Field(..., min_length=1)
    """Operation name, e.g. ``FooQuery``."""

    text: str
    """Query text that gets signed. May be empty."""

    id: Optional[str] = None
    cache_id: Optional[str] = Field(None, alias="cacheID")
    operation_kind: Optional[str] = Field(None, alias="operationKind")
    metadata: Any = None

    @classmethod
    def parse(cls, data: Any) -> Descriptor:
        """
        Build a descriptor from a decoded params object.

        Raises:
            ExtractionError: If data is not an object or misses required fields
        """
        if not isinstance(data, dict):
            raise ExtractionError(f"params is not an object (got {type(data).__name__})")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ExtractionError(f"invalid params ({fields})") from e


class BaseExtractor(ABC):
    """Abstract base class for descriptor extractors."""

    @abstractmethod
    def extract(self, content: str) -> Optional[Descriptor]:
        """
        Extract the request descriptor from file content.

        Args:
            content: Raw content of a generated file

        Returns:
            The descriptor, or None if the content holds no descriptor

        Raises:
            ExtractionError: If the content cannot be parsed
        """
        ...

    def extract_file(self, file_path: Path) -> Optional[Descriptor]:
        """
        Read a file and extract its descriptor.

        Args:
            file_path: Path to the generated file

        Returns:
            The descriptor, or None if the file holds no descriptor

        Raises:
            ExtractionError: If the file cannot be read or parsed
        """
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(f"could not read file: {e}", file_path) from e

        try:
            return self.extract(content)
        except ExtractionError as e:
            raise e.with_path(file_path) from e
