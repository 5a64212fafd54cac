"""Tests for result aggregation and serialization."""

from __future__ import annotations

import json
from pathlib import Path

from persisted_query_signer.aggregator import Aggregator, FileFailure, signatures_to_json
from persisted_query_signer.signer import SignatureEntry


def _entry(name: str, digest: str, source: str) -> SignatureEntry:
    return SignatureEntry(name=name, digest=digest, source=Path(source))


def test_mapping_is_sorted_by_name() -> None:
    aggregator = Aggregator()
    for name in ["b", "C", "a", "aa"]:
        aggregator.add(_entry(name, name * 2, f"{name}.graphql.ts"))

    assert list(aggregator.mapping()) == ["C", "a", "aa", "b"]


def test_collision_keeps_first_source_path_regardless_of_order() -> None:
    first = _entry("FooQuery", "aaaa", "a/Foo.graphql.ts")
    second = _entry("FooQuery", "bbbb", "b/Foo.graphql.ts")

    forward = Aggregator()
    forward.add(first)
    forward.add(second)
    backward = Aggregator()
    backward.add(second)
    backward.add(first)

    assert forward.mapping() == backward.mapping() == {"FooQuery": "aaaa"}

    collisions = backward.result().collisions
    assert len(collisions) == 1
    assert collisions[0].kept == Path("a/Foo.graphql.ts")
    assert collisions[0].dropped == Path("b/Foo.graphql.ts")


def test_result_counts_every_outcome() -> None:
    aggregator = Aggregator()
    aggregator.add(_entry("FooQuery", "aaaa", "Foo.graphql.ts"))
    aggregator.add_empty()
    aggregator.add_failure(FileFailure(Path("z/Bad.graphql.ts"), "boom"))
    aggregator.add_failure(FileFailure(Path("a/Bad.graphql.ts"), "boom"))

    result = aggregator.result()

    assert result.files_scanned == 4
    assert result.files_without_descriptor == 1
    assert [f.path.as_posix() for f in result.failures] == ["a/Bad.graphql.ts", "z/Bad.graphql.ts"]
    assert not result.ok


def test_json_uses_tabs_and_sorted_keys() -> None:
    data = signatures_to_json({"b": "02", "a": "01"})

    assert data == '{\n\t"a": "01",\n\t"b": "02"\n}'
    assert json.loads(data) == {"a": "01", "b": "02"}


def test_empty_map_serializes_to_empty_object() -> None:
    assert signatures_to_json({}) == "{}"
