# tests/unit/plugins/test_component_registry.py
"""Tests for component registration and lookup."""

from typing import Any

import pytest

from pipewright.contracts.components import CapabilityRegistry, ComponentSpec
from pipewright.contracts.ports import PortMetadata, Ports
from pipewright.plugins import hookimpl
from pipewright.plugins.builtin import BUILTIN_COMPONENTS, resolve_entrypoint_ports
from pipewright.plugins.manager import ComponentRegistry


class AcmeComponents:
    """Provider contributing one component through the hook."""

    @hookimpl
    def pipewright_get_components(self) -> list[ComponentSpec]:
        return [ComponentSpec(id="acme.trigger", label="Acme Trigger")]


class TestComponentRegistry:
    def test_builtin_components_registered(self, registry: ComponentRegistry) -> None:
        assert registry.component_ids() == sorted(spec.id for spec in BUILTIN_COMPONENTS)
        assert registry.has("core.workflow.entrypoint")
        assert registry.get("core.file.loader") is not None

    def test_unknown_component_is_none(self, registry: ComponentRegistry) -> None:
        assert registry.get("core.nope") is None
        assert not registry.has("core.nope")

    def test_satisfies_capability_protocol(self, registry: ComponentRegistry) -> None:
        assert isinstance(registry, CapabilityRegistry)

    def test_list_components_sorted(self, registry: ComponentRegistry) -> None:
        ids = [spec.id for spec in registry.list_components()]
        assert ids == sorted(ids)

    def test_hookimpl_provider(self, registry: ComponentRegistry) -> None:
        registry.register(AcmeComponents())

        assert registry.get("acme.trigger").label == "Acme Trigger"  # type: ignore[union-attr]

    def test_register_components(self) -> None:
        registry = ComponentRegistry()
        registry.register_components([ComponentSpec(id="acme.a", label="A")], name="acme")

        assert registry.component_ids() == ["acme.a"]

    def test_duplicate_id_rejected_and_registry_intact(self, registry: ComponentRegistry) -> None:
        duplicate = ComponentSpec(id="core.file.loader", label="Impostor")

        with pytest.raises(ValueError, match="Duplicate component id: 'core.file.loader'"):
            registry.register_components([duplicate], name="impostor")

        assert registry.get("core.file.loader").label == "File Loader"  # type: ignore[union-attr]
        # The rejected provider is gone, so later registrations still work
        registry.register(AcmeComponents())
        assert registry.has("acme.trigger")

    def test_non_spec_rejected(self) -> None:
        class BadProvider:
            @hookimpl
            def pipewright_get_components(self) -> list[Any]:
                return [{"id": "bad"}]

        registry = ComponentRegistry()
        with pytest.raises(TypeError, match="got dict"):
            registry.register(BadProvider())

        registry.register(AcmeComponents())
        assert registry.component_ids() == ["acme.trigger"]


class TestComponentSpec:
    def test_duplicate_port_ids_rejected(self) -> None:
        port = Ports.text()

        with pytest.raises(ValueError, match="duplicate input port 'a'"):
            ComponentSpec(
                id="x",
                label="X",
                inputs=(PortMetadata(id="a", label="A", data_type=port), PortMetadata(id="a", label="A2", data_type=port)),
            )

    def test_secret_parameters(self, registry: ComponentRegistry) -> None:
        slack = registry.get("core.notify.slack")
        assert [p.id for p in slack.secret_parameters()] == ["token"]  # type: ignore[union-attr]


class TestEntrypointPorts:
    def test_one_output_per_runtime_input(self) -> None:
        ports = resolve_entrypoint_ports(
            {"runtimeInputs": [{"id": "fileId", "label": "File", "type": "file"}, {"id": "count", "type": "number"}]}
        )

        assert [port.id for port in ports.outputs] == ["fileId", "count"]
        assert ports.output("fileId").data_type == Ports.file()  # type: ignore[union-attr]
        assert ports.output("count").label == "count"  # type: ignore[union-attr]
        assert ports.inputs == ()

    def test_malformed_entries_skipped(self) -> None:
        ports = resolve_entrypoint_ports({"runtimeInputs": ["junk", {"label": "no id"}, {"id": "ok"}]})
        assert [port.id for port in ports.outputs] == ["ok"]

    def test_not_a_list(self) -> None:
        assert resolve_entrypoint_ports({"runtimeInputs": "oops"}).outputs == ()
