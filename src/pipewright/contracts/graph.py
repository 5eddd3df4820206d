# src/pipewright/contracts/graph.py
"""User-authored workflow graph (compiler input).

Pydantic models at the trust boundary: the canvas sends camelCase JSON, which
is validated here before any compiler stage runs. Canvas-only keys (position,
viewport, measured sizes) are accepted and ignored.

Models are frozen. The compiler treats the graph as read-only and copies any
dict it hands on to the compiled definition.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pipewright.contracts.enums import EdgeKind

# Node-level keys that configure scheduling rather than the component.
SCHEDULING_KEYS: tuple[str, ...] = (
    "joinStrategy",
    "streamId",
    "groupId",
    "maxConcurrency",
    "mode",
    "toolConfig",
)


class _GraphModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class NodeConfig(_GraphModel):
    """Per-node configuration from the config panel.

    Scheduling fields are typed Any on purpose: invalid values are dropped
    with a warning by the metadata compiler instead of rejecting the graph.

    Older canvases stored component params flat on the config object. Those
    extra keys are kept (``extra="allow"``) and read as params by
    ``effective_params``; explicit ``params`` entries win on conflict.
    """

    model_config = ConfigDict(extra="allow")

    params: dict[str, Any] = Field(default_factory=dict)
    input_overrides: dict[str, Any] = Field(default_factory=dict)
    join_strategy: Any = None
    stream_id: Any = None
    group_id: Any = None
    max_concurrency: Any = None
    mode: Any = None
    tool_config: Any = None

    @property
    def legacy_params(self) -> dict[str, Any]:
        """Component params stored flat on the config object (older canvases)."""
        return dict(self.model_extra or {})

    def effective_params(self) -> dict[str, Any]:
        """Flat legacy params overlaid with explicit ``params``."""
        return {**self.legacy_params, **self.params}


class NodeData(_GraphModel):
    label: str | None = None
    config: NodeConfig = Field(default_factory=NodeConfig)


class GraphNode(_GraphModel):
    """A component instance on the canvas."""

    id: str = Field(min_length=1)
    type: str = Field(min_length=1, description="Component type id")
    data: NodeData = Field(default_factory=NodeData)

    @property
    def label(self) -> str | None:
        return self.data.label

    @property
    def config(self) -> NodeConfig:
        return self.data.config


class GraphEdge(_GraphModel):
    """A connection between two nodes, optionally port-to-port."""

    id: str = Field(min_length=1)
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    kind: EdgeKind = EdgeKind.SUCCESS

    @field_validator("source_handle", "target_handle")
    @classmethod
    def _blank_handle_is_absent(cls, v: str | None) -> str | None:
        """The canvas sends "" for an unset handle; treat it as absent."""
        if v is None or not v.strip():
            return None
        return v


class WorkflowGraph(_GraphModel):
    """A complete user-authored graph."""

    name: str
    description: str | None = None
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def _node_ids_unique(self) -> WorkflowGraph:
        counts = Counter(node.id for node in self.nodes)
        duplicates = sorted(node_id for node_id, count in counts.items() if count > 1)
        if duplicates:
            raise ValueError(f"Duplicate node ids: {duplicates}. Node ids must be unique within a graph.")
        return self

    def node_by_id(self) -> dict[str, GraphNode]:
        return {node.id: node for node in self.nodes}
