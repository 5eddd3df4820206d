# tests/unit/core/test_canonical.py
"""Tests for canonical JSON serialization and hashing."""

import hashlib
import math
from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pipewright.core.canonical import canonical_json, definition_hash, stable_hash
from tests.fixtures.graphs import loader_workflow


class TestCanonicalJson:
    def test_keys_sorted_without_whitespace(self) -> None:
        assert canonical_json({"b": 1, "a": [1, 2], "c": {"z": None, "y": True}}) == '{"a":[1,2],"b":1,"c":{"y":true,"z":null}}'

    def test_key_order_does_not_matter(self) -> None:
        assert canonical_json({"x": 1, "y": 2}) == canonical_json({"y": 2, "x": 1})

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_float_rejected(self, value: float) -> None:
        with pytest.raises(ValueError, match="non-finite float"):
            canonical_json({"v": value})

    def test_non_finite_decimal_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-finite Decimal"):
            canonical_json([Decimal("NaN")])

    def test_decimal_as_string(self) -> None:
        assert canonical_json({"amount": Decimal("1.50")}) == '{"amount":"1.50"}'

    def test_datetime_normalized_to_utc(self) -> None:
        aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert canonical_json(aware) == '"2024-01-01T10:00:00+00:00"'

    def test_naive_datetime_assumed_utc(self) -> None:
        assert canonical_json(datetime(2024, 1, 1)) == canonical_json(datetime(2024, 1, 1, tzinfo=UTC))

    def test_bytes_wrapped(self) -> None:
        assert canonical_json(b"hi") == '{"__bytes__":"aGk="}'

    def test_tuples_and_sets(self) -> None:
        assert canonical_json({"t": (1, 2), "s": {"b", "a"}}) == '{"s":["a","b"],"t":[1,2]}'


class TestHashing:
    def test_stable_hash_is_sha256_of_canonical_json(self) -> None:
        data = {"b": 2, "a": 1}
        expected = hashlib.sha256(b'{"a":1,"b":2}').hexdigest()
        assert stable_hash(data) == expected

    def test_definition_hash_stable_across_compilations(self, compile_graph) -> None:
        first = compile_graph(loader_workflow()).definition
        second = compile_graph(loader_workflow()).definition

        assert definition_hash(first) == definition_hash(second)

    def test_definition_hash_changes_with_content(self, compile_graph) -> None:
        raw = loader_workflow()
        baseline = definition_hash(compile_graph(raw).definition)
        raw["name"] = "Renamed"

        assert definition_hash(compile_graph(raw).definition) != baseline
