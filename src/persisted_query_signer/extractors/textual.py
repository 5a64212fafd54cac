"""Textual extractor - scans the pretty-printed params object line by line."""

from __future__ import annotations

import json
import re
from typing import Optional

from ..config import CONCRETE_REQUEST, TextualScan
from ..errors import ExtractionError
from .base import BaseExtractor, Descriptor


class TextualExtractor(BaseExtractor):
    """
    Extractor that locates the ``"params"`` object literal in generated
    request files without parsing TypeScript.

    Expects the layout the Relay compiler emits:

        const node: ConcreteRequest = {
          ...
          "params": {
            "cacheID": "...",
            "name": "FooQuery",
            "text": "query Foo { ... }"
          }
        };

    The params object is cut out of the text and decoded as JSON.
    """

    # A line whose stripped form starts with the params key
    PARAMS_LINE_PATTERN = re.compile(r'^([^\S\r\n]*)"params": \{', re.MULTILINE)

    def __init__(self, scan: TextualScan = TextualScan.BALANCED) -> None:
        self.scan = scan

    def extract(self, content: str) -> Optional[Descriptor]:
        """
        Extract the descriptor from the params block following ``ConcreteRequest``.

        Args:
            content: Generated file content

        Returns:
            The descriptor, or None when the marker, the params block or its
            closing brace is missing
        """
        marker = content.find(CONCRETE_REQUEST)
        if marker < 0:
            return None

        match = self.PARAMS_LINE_PATTERN.search(content, marker)
        if not match:
            return None

        if self.scan == TextualScan.INDENTED:
            fragment = self._slice_indented(content, match)
        else:
            fragment = self._slice_balanced(content, match.end() - 1)

        if fragment is None:
            return None

        try:
            data = json.loads(fragment)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"params block is not valid JSON: {e}") from e

        return Descriptor.parse(data)

    def _slice_balanced(self, content: str, start: int) -> Optional[str]:
        """
        Return the object literal opening at ``start`` up to its matching brace.

        Braces inside JSON string literals are ignored.
        """
        depth = 0
        in_string = False
        escaped = False

        for index in range(start, len(content)):
            char = content[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return content[start : index + 1]

        return None

    def _slice_indented(self, content: str, match: re.Match) -> Optional[str]:
        """
        Return the params object by matching the closing brace's indentation.

        The closing line is expected to carry the same leading whitespace as
        the ``"params": {`` line. Only works on consistently pretty-printed
        input.
        """
        closing = " " * len(match.group(1)) + "}"
        # The "params": key is dropped, only the object literal remains
        parts = ["{"]

        # First element is the remainder of the params line itself
        for line in content[match.end() :].splitlines()[1:]:
            parts.append(line)
            if line.startswith(closing):
                return "".join(parts)

        return None
