# src/pipewright/compiler/metadata.py
"""Node metadata compilation.

Scheduling settings (join strategy, stream/group ids, concurrency, mode,
tool config) belong to the execution engine, not to the component. They are
lifted out of node config into NodeMetadata, and removed from the params an
action receives.

Invalid values never fail compilation: each is dropped and reported as a
warning, so a stale canvas setting cannot block a workflow.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pipewright.compiler.models import ValidationIssue
from pipewright.contracts.definition import NodeMetadata
from pipewright.contracts.enums import JoinStrategy, Severity
from pipewright.contracts.graph import SCHEDULING_KEYS, GraphNode

# camelCase wire key -> NodeConfig attribute
_CONFIG_ATTRIBUTES: dict[str, str] = {
    "joinStrategy": "join_strategy",
    "streamId": "stream_id",
    "groupId": "group_id",
    "maxConcurrency": "max_concurrency",
    "mode": "mode",
    "toolConfig": "tool_config",
}


@dataclass(frozen=True, slots=True)
class CompiledNodeMetadata:
    """Node metadata plus the params left for the component."""

    metadata: NodeMetadata
    params: dict[str, Any]
    warnings: tuple[ValidationIssue, ...] = ()


def _normalize_join_strategy(value: Any) -> JoinStrategy | None:
    if not isinstance(value, str):
        return None
    try:
        return JoinStrategy(value)
    except ValueError:
        return None


def _normalize_identifier(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _normalize_concurrency(value: Any) -> int | float | None:
    # bool is an int subclass but never a concurrency limit
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
    return value


def compile_node_metadata(node: GraphNode, params: Mapping[str, Any]) -> CompiledNodeMetadata:
    """Extract scheduling settings for ``node`` and strip them from ``params``.

    Values set on the node config take precedence; a key found only in
    ``params`` is used as a fallback.
    """
    remaining = dict(params)
    raw: dict[str, Any] = {}
    for key in SCHEDULING_KEYS:
        fallback = remaining.pop(key, None)
        value = getattr(node.config, _CONFIG_ATTRIBUTES[key])
        raw[key] = fallback if value is None else value

    warnings: list[ValidationIssue] = []

    def dropped(key: str, expectation: str) -> None:
        warnings.append(
            ValidationIssue(
                node=node.id,
                field=key,
                message=f"Ignoring invalid {key} {raw[key]!r}: expected {expectation}",
                severity=Severity.WARNING,
            )
        )

    join_strategy = _normalize_join_strategy(raw["joinStrategy"])
    if raw["joinStrategy"] is not None and join_strategy is None:
        dropped("joinStrategy", "one of " + ", ".join(strategy.value for strategy in JoinStrategy))

    stream_id = _normalize_identifier(raw["streamId"])
    if raw["streamId"] is not None and stream_id is None:
        dropped("streamId", "a non-empty string")

    group_id = _normalize_identifier(raw["groupId"])
    if raw["groupId"] is not None and group_id is None:
        dropped("groupId", "a non-empty string")

    max_concurrency = _normalize_concurrency(raw["maxConcurrency"])
    if raw["maxConcurrency"] is not None and max_concurrency is None:
        dropped("maxConcurrency", "a finite number")

    metadata = NodeMetadata(
        ref=node.id,
        label=node.label,
        join_strategy=join_strategy,
        stream_id=stream_id,
        group_id=group_id,
        max_concurrency=max_concurrency,
        mode=raw["mode"],
        tool_config=raw["toolConfig"],
    )
    return CompiledNodeMetadata(metadata=metadata, params=remaining, warnings=tuple(warnings))
