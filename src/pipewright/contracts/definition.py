# src/pipewright/contracts/definition.py
"""Compiled workflow definition (compiler output, engine input).

The camelCase JSON produced by WorkflowDefinition.to_wire() is the contract
consumed by the execution engine. Shape changes that break consumers require
bumping DEFINITION_VERSION.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from pipewright.contracts.enums import EdgeKind, JoinStrategy

DEFINITION_VERSION = 2

# Source handle recorded when an edge maps a node's whole output.
SELF_HANDLE = "__self__"

# Component type that marks the workflow entry point unless configured otherwise.
DEFAULT_ENTRY_COMPONENT_ID = "core.workflow.entrypoint"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class InputMapping(_WireModel):
    source_ref: str
    source_handle: str


class WorkflowAction(_WireModel):
    """One schedulable node in the compiled definition."""

    ref: str
    component_id: str
    params: dict[str, Any] = Field(default_factory=dict)
    input_overrides: dict[str, Any] = Field(default_factory=dict)
    depends_on: list[str] = Field(default_factory=list)
    input_mappings: dict[str, InputMapping] = Field(default_factory=dict)


class CompiledEdge(_WireModel):
    id: str
    source_ref: str
    target_ref: str
    source_handle: str | None = None
    target_handle: str | None = None
    kind: EdgeKind = EdgeKind.SUCCESS


class NodeMetadata(_WireModel):
    """Scheduling-only settings for a node, kept apart from component params."""

    ref: str
    label: str | None = None
    join_strategy: JoinStrategy | None = None
    max_concurrency: int | float | None = None
    group_id: str | None = None
    stream_id: str | None = None
    mode: Any = None
    tool_config: Any = None


class EntrypointRef(_WireModel):
    ref: str


class DefinitionConfig(_WireModel):
    environment: str = "default"
    timeout_seconds: float = Field(default=0, ge=0)


class WorkflowDefinition(_WireModel):
    """Validated, topologically ordered workflow handed to the execution engine.

    Invariants (checked on construction):
    - every ref in an action's depends_on appears strictly earlier in actions
    - dependency_counts[ref] == len(depends_on) for every action
    - entrypoint.ref names an action
    """

    version: int = Field(default=DEFINITION_VERSION, gt=0)
    title: str
    description: str | None = None
    entrypoint: EntrypointRef
    nodes: dict[str, NodeMetadata] = Field(default_factory=dict)
    edges: list[CompiledEdge] = Field(default_factory=list)
    dependency_counts: dict[str, int] = Field(default_factory=dict)
    actions: list[WorkflowAction]
    config: DefinitionConfig = Field(default_factory=DefinitionConfig)

    @model_validator(mode="after")
    def _check_ordering_invariants(self) -> WorkflowDefinition:
        seen: set[str] = set()
        for action in self.actions:
            if action.ref in seen:
                raise ValueError(f"Duplicate action ref '{action.ref}'")
            not_yet_scheduled = [dep for dep in action.depends_on if dep not in seen]
            if not_yet_scheduled:
                raise ValueError(
                    f"Action '{action.ref}' depends on {not_yet_scheduled}, which do not appear earlier in actions. "
                    "Actions must be topologically ordered."
                )
            count = self.dependency_counts.get(action.ref)
            if count is not None and count != len(action.depends_on):
                raise ValueError(
                    f"dependencyCounts['{action.ref}'] is {count} but the action has {len(action.depends_on)} dependencies"
                )
            seen.add(action.ref)

        if self.entrypoint.ref not in seen:
            raise ValueError(f"Entrypoint '{self.entrypoint.ref}' does not name an action")
        return self

    def get_action(self, ref: str) -> WorkflowAction:
        """Get an action by ref.

        Raises:
            KeyError: If no action has this ref
        """
        for action in self.actions:
            if action.ref == ref:
                return action
        raise KeyError(f"Action not found: {ref}")

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape consumed by the execution engine."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
