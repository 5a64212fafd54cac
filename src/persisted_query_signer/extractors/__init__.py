"""Descriptor extractors for generated request files."""

from ..config import ExtractionStrategy, TextualScan
from .base import BaseExtractor, Descriptor
from .structural import StructuralExtractor
from .textual import TextualExtractor


def get_extractor(
    strategy: ExtractionStrategy,
    textual_scan: TextualScan = TextualScan.BALANCED,
) -> BaseExtractor:
    """Get the extractor for the given strategy."""
    if strategy == ExtractionStrategy.TEXTUAL:
        return TextualExtractor(textual_scan)
    return StructuralExtractor()


__all__ = [
    "BaseExtractor",
    "Descriptor",
    "StructuralExtractor",
    "TextualExtractor",
    "get_extractor",
]
