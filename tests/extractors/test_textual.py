"""Tests for the textual (line scanning) extractor."""

from __future__ import annotations

from pathlib import Path

import pytest

from persisted_query_signer.config import TextualScan
from persisted_query_signer.errors import ExtractionError
from persisted_query_signer.extractors import TextualExtractor

from tests._fixtures.relay import relay_source

REINDENTED = """import { ConcreteRequest } from 'relay-runtime';
const node: ConcreteRequest = {
  "kind": "Request",
  "params": {
      "cacheID": "c1",
      "name": "FooQuery",
      "text": "query Foo{x}"
},
};
export default node;
"""


@pytest.mark.parametrize("scan", list(TextualScan))
def test_extracts_params_from_generated_file(scan: TextualScan) -> None:
    descriptor = TextualExtractor(scan).extract(relay_source("FooQuery", "query Foo{x}"))

    assert descriptor is not None
    assert descriptor.name == "FooQuery"
    assert descriptor.text == "query Foo{x}"
    assert descriptor.cache_id == "c1"
    assert descriptor.operation_kind == "query"
    assert descriptor.id is None
    assert descriptor.metadata == {}


@pytest.mark.parametrize("scan", list(TextualScan))
def test_missing_marker_yields_nothing(scan: TextualScan) -> None:
    content = relay_source().replace("ConcreteRequest", "Request")
    assert TextualExtractor(scan).extract(content) is None


@pytest.mark.parametrize("scan", list(TextualScan))
def test_missing_params_yields_nothing(scan: TextualScan) -> None:
    content = "import { ConcreteRequest } from 'relay-runtime';\nconst node = {};\n"
    assert TextualExtractor(scan).extract(content) is None


def test_params_before_marker_is_ignored() -> None:
    content = '{\n  "params": {\n    "name": "A",\n    "text": "a"\n  }\n}\n// ConcreteRequest\n'
    assert TextualExtractor().extract(content) is None


def test_balanced_scan_ignores_braces_inside_strings() -> None:
    content = relay_source("FooQuery", "query Foo { a } } {")
    descriptor = TextualExtractor(TextualScan.BALANCED).extract(content)

    assert descriptor is not None
    assert descriptor.text == "query Foo { a } } {"


def test_balanced_scan_handles_reindented_input() -> None:
    descriptor = TextualExtractor(TextualScan.BALANCED).extract(REINDENTED)

    assert descriptor is not None
    assert descriptor.name == "FooQuery"


def test_indented_scan_needs_matching_closing_indent() -> None:
    assert TextualExtractor(TextualScan.INDENTED).extract(REINDENTED) is None


def test_unterminated_params_yields_nothing() -> None:
    content = 'const node: ConcreteRequest = {\n  "params": {\n    "name": "A",\n'
    for scan in TextualScan:
        assert TextualExtractor(scan).extract(content) is None


def test_malformed_fragment_raises() -> None:
    content = relay_source().replace('"text": "query Foo{x}"', '"text": "query Foo{x}",')

    with pytest.raises(ExtractionError, match="not valid JSON"):
        TextualExtractor().extract(content)


def test_missing_required_field_raises() -> None:
    content = relay_source().replace('"text": "query Foo{x}"', '"other": "query Foo{x}"')

    with pytest.raises(ExtractionError, match="text"):
        TextualExtractor().extract(content)


def test_empty_name_raises() -> None:
    with pytest.raises(ExtractionError, match="name"):
        TextualExtractor().extract(relay_source(name=""))


def test_empty_text_is_allowed() -> None:
    descriptor = TextualExtractor().extract(relay_source(text=""))

    assert descriptor is not None
    assert descriptor.text == ""


def test_extract_file_binds_path_to_errors(tmp_path: Path) -> None:
    path = tmp_path / "Broken.graphql.ts"
    path.write_text(relay_source().replace('"id": null', '"id": nul'), encoding="utf-8")

    with pytest.raises(ExtractionError) as exc_info:
        TextualExtractor().extract_file(path)

    assert exc_info.value.path == path
    assert str(path) in str(exc_info.value)


def test_extract_file_reports_undecodable_files(tmp_path: Path) -> None:
    path = tmp_path / "Binary.graphql.ts"
    path.write_bytes(b"\xff\xfe\x00ConcreteRequest")

    with pytest.raises(ExtractionError, match="could not read"):
        TextualExtractor().extract_file(path)
