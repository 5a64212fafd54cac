"""Structural extractor - walks the TypeScript syntax tree with tree-sitter."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Optional

from tree_sitter_language_pack import get_parser

from ..errors import ExtractionError
from .base import BaseExtractor, Descriptor

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


class _State(Enum):
    NOT_IN_PARAMS = "not_in_params"
    IN_PARAMS = "in_params"
    DONE = "done"


def _decode_escape(sequence: str) -> str:
    """Decode one JavaScript escape sequence such as ``\\n`` or ``\\u00e9``."""
    body = sequence[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body.startswith(("u", "x")) and len(body) > 1:
        return chr(int(body[1:], 16))
    if all(c in "01234567" for c in body):
        return chr(int(body, 8))
    # Line continuation
    if body[0] in "\r\n\u2028\u2029":
        return ""
    return body


def string_value(node: Any) -> str:
    """
    Return the decoded value of a tree-sitter ``string`` node.

    Raises:
        ExtractionError: If escapes decode to an invalid code point sequence
    """
    chunks: list[str] = []
    for child in node.named_children:
        text = child.text.decode("utf-8")
        if child.type != "escape_sequence":
            chunks.append(text)
            continue
        try:
            chunks.append(_decode_escape(text))
        except (ValueError, OverflowError) as e:
            # Code point beyond U+10FFFF
            raise ExtractionError(f"invalid string literal {node.text!r}") from e

    value = "".join(chunks)
    try:
        # Join UTF-16 surrogate pairs written as two \u escapes
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as e:
        raise ExtractionError(f"invalid string literal {node.text!r}") from e


class _ParamsCollector:
    """Depth-first state machine collecting ``name`` and ``text`` inside params."""

    def __init__(self) -> None:
        self.state = _State.NOT_IN_PARAMS
        self.fields: dict[str, str] = {}

    def visit_pair(self, node: Any) -> None:
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is None or value is None or key.type != "string":
            return

        key_name = string_value(key)

        if self.state == _State.NOT_IN_PARAMS:
            if key_name == "params" and value.type == "object":
                self.state = _State.IN_PARAMS
            return

        if key_name in ("name", "text") and key_name not in self.fields:
            if value.type == "string":
                self.fields[key_name] = string_value(value)
                if len(self.fields) == 2:
                    self.state = _State.DONE


class StructuralExtractor(BaseExtractor):
    """
    Extractor that parses generated files as TypeScript and reads the
    ``"params"`` object from the syntax tree.

    Tolerates any formatting, but the whole file must parse.
    """

    def __init__(self) -> None:
        # tree-sitter parsers must not be shared between threads
        self._local = threading.local()

    @property
    def parser(self) -> Any:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = get_parser("typescript")
            self._local.parser = parser
        return parser

    def parse(self, content: str) -> Any:
        """
        Parse content into a tree-sitter tree.

        Raises:
            ExtractionError: If the tree contains syntax errors
        """
        tree = self.parser.parse(content.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise ExtractionError(f"TypeScript syntax error near line {line}")
        return tree

    def extract(self, content: str) -> Optional[Descriptor]:
        """
        Extract the descriptor from the first ``"params"`` object in the tree.

        Args:
            content: Generated file content

        Returns:
            The descriptor, or None if no params object with both a string
            ``name`` and a string ``text`` exists
        """
        tree = self.parse(content)
        collector = _ParamsCollector()

        stack = [tree.root_node]
        while stack and collector.state != _State.DONE:
            node = stack.pop()
            if node.type == "pair":
                collector.visit_pair(node)
            stack.extend(reversed(node.named_children))

        if collector.state != _State.DONE:
            return None

        return Descriptor.parse(collector.fields)

    @staticmethod
    def _first_error_line(root: Any) -> int:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
            stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
        return root.start_point[0] + 1
