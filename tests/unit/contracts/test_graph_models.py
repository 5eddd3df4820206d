# tests/unit/contracts/test_graph_models.py
"""Tests for graph input models and the compiled definition model."""

import pytest
from pydantic import ValidationError

from pipewright.contracts.definition import (
    CompiledEdge,
    EntrypointRef,
    InputMapping,
    WorkflowAction,
    WorkflowDefinition,
)
from pipewright.contracts.enums import EdgeKind
from pipewright.contracts.graph import GraphEdge, WorkflowGraph
from tests.fixtures.graphs import edge, entry_node, graph, node


class TestWorkflowGraph:
    def test_parses_camel_case_canvas_json(self) -> None:
        """Canvas JSON parses; presentation keys like position are ignored."""
        raw = graph(
            [entry_node(), node("log", "core.console.log", input_overrides={"data": "hi"}, label="Log")],
            [edge("e1", "entry", "log", "fileId", "data")],
        )
        raw["viewport"] = {"zoom": 1}

        parsed = WorkflowGraph.model_validate(raw)

        assert parsed.node_by_id()["log"].config.input_overrides == {"data": "hi"}
        assert parsed.node_by_id()["log"].label == "Log"
        assert parsed.edges[0].source_handle == "fileId"
        assert parsed.edges[0].kind == EdgeKind.SUCCESS

    def test_duplicate_node_ids_rejected(self) -> None:
        raw = graph([entry_node("a"), node("a", "core.console.log")])

        with pytest.raises(ValidationError, match="Duplicate node ids"):
            WorkflowGraph.model_validate(raw)

    def test_blank_handles_are_absent(self) -> None:
        parsed = GraphEdge.model_validate({"id": "e", "source": "a", "target": "b", "sourceHandle": "", "targetHandle": " "})
        assert parsed.source_handle is None
        assert parsed.target_handle is None

    def test_error_edge_kind(self) -> None:
        parsed = GraphEdge.model_validate({"id": "e", "source": "a", "target": "b", "kind": "error"})
        assert parsed.kind == EdgeKind.ERROR

    def test_legacy_flat_params(self) -> None:
        """Params stored flat on config are read as params; explicit params win."""
        raw = graph([node("n", "core.text.splitter", separator=",", text="flat", params={"text": "explicit"})])

        parsed = WorkflowGraph.model_validate(raw)
        config = parsed.nodes[0].config

        assert config.effective_params() == {"separator": ",", "text": "explicit"}

    def test_scheduling_fields_not_treated_as_params(self) -> None:
        raw = graph([node("n", "core.console.log", joinStrategy="any", maxConcurrency=2)])

        config = WorkflowGraph.model_validate(raw).nodes[0].config

        assert config.join_strategy == "any"
        assert config.max_concurrency == 2
        assert config.effective_params() == {}

    def test_graph_is_frozen(self) -> None:
        parsed = WorkflowGraph.model_validate(graph([entry_node()]))
        with pytest.raises(ValidationError):
            parsed.name = "changed"  # type: ignore[misc]


def _action(ref: str, depends_on: list[str] | None = None) -> WorkflowAction:
    return WorkflowAction(ref=ref, component_id="core.console.log", depends_on=depends_on or [])


class TestWorkflowDefinition:
    def test_wire_form_is_camel_case(self) -> None:
        definition = WorkflowDefinition(
            title="wf",
            entrypoint=EntrypointRef(ref="a"),
            actions=[
                _action("a"),
                WorkflowAction(
                    ref="b",
                    component_id="core.console.log",
                    depends_on=["a"],
                    input_mappings={"data": InputMapping(source_ref="a", source_handle="__self__")},
                ),
            ],
            edges=[CompiledEdge(id="e1", source_ref="a", target_ref="b")],
            dependency_counts={"a": 0, "b": 1},
        )

        wire = definition.to_wire()

        assert wire["version"] == 2
        assert wire["entrypoint"] == {"ref": "a"}
        assert wire["actions"][1]["dependsOn"] == ["a"]
        assert wire["actions"][1]["inputMappings"] == {"data": {"sourceRef": "a", "sourceHandle": "__self__"}}
        assert wire["edges"][0] == {"id": "e1", "sourceRef": "a", "targetRef": "b", "kind": "success"}
        assert wire["config"] == {"environment": "default", "timeoutSeconds": 0}

    def test_rejects_out_of_order_actions(self) -> None:
        with pytest.raises(ValidationError, match="topologically ordered"):
            WorkflowDefinition(
                title="wf",
                entrypoint=EntrypointRef(ref="a"),
                actions=[_action("b", ["a"]), _action("a")],
            )

    def test_rejects_mismatched_dependency_counts(self) -> None:
        with pytest.raises(ValidationError, match="dependencyCounts"):
            WorkflowDefinition(
                title="wf",
                entrypoint=EntrypointRef(ref="a"),
                actions=[_action("a"), _action("b", ["a"])],
                dependency_counts={"a": 0, "b": 2},
            )

    def test_rejects_unknown_entrypoint(self) -> None:
        with pytest.raises(ValidationError, match="does not name an action"):
            WorkflowDefinition(title="wf", entrypoint=EntrypointRef(ref="zzz"), actions=[_action("a")])

    def test_get_action(self) -> None:
        definition = WorkflowDefinition(title="wf", entrypoint=EntrypointRef(ref="a"), actions=[_action("a")])

        assert definition.get_action("a").component_id == "core.console.log"
        with pytest.raises(KeyError, match="Action not found: b"):
            definition.get_action("b")
