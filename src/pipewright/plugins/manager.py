# src/pipewright/plugins/manager.py
"""Component registry for discovery, registration, and lookup.

Uses pluggy for hook-based provider registration. The registry satisfies the
compiler's CapabilityRegistry protocol.
"""

from collections.abc import Iterable
from typing import Any

import pluggy

from pipewright.contracts.components import ComponentSpec
from pipewright.plugins.hookspecs import PROJECT_NAME, PipewrightComponentSpec, hookimpl


def create_static_hookimpl(components: Iterable[ComponentSpec], name: str = "static") -> object:
    """Create a pluggy hookimpl object that contributes a fixed list of components.

    Args:
        components: Component specs to contribute
        name: Provider name shown in duplicate-id errors

    Returns:
        Object instance with the decorated hook method
    """
    specs = list(components)

    class StaticComponents:
        """Hook implementer returning a fixed component list."""

        provider_name = name

        @hookimpl
        def pipewright_get_components(self) -> list[ComponentSpec]:
            return specs

    return StaticComponents()


class ComponentRegistry:
    """Manages component providers and lookup by component id.

    Usage:
        registry = ComponentRegistry()
        registry.register_builtin_components()
        registry.register(MyComponents())

        spec = registry.get("core.file.loader")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PipewrightComponentSpec)

        # Cache - component id to spec, rebuilt on every registration
        self._components: dict[str, ComponentSpec] = {}

    def register_builtin_components(self) -> None:
        """Register the built-in component catalog.

        Call this once at startup to make the core components resolvable.
        """
        from pipewright.plugins.builtin import BuiltinComponents

        self.register(BuiltinComponents())

    def register(self, plugin: Any) -> None:
        """Register a component provider.

        Args:
            plugin: Provider instance implementing pipewright_get_components

        Raises:
            ValueError: If the provider contributes an already-registered component id
            TypeError: If the provider returns something other than ComponentSpec records

        A rejected provider is unregistered again before raising.
        """
        self._pm.register(plugin)
        try:
            self._refresh_cache()
        except (TypeError, ValueError):
            self._pm.unregister(plugin)
            raise

    def register_components(self, components: Iterable[ComponentSpec], name: str = "static") -> None:
        """Register a fixed list of components (e.g. loaded from a catalog file)."""
        self.register(create_static_hookimpl(components, name))

    def _refresh_cache(self) -> None:
        """Refresh the component cache from hooks.

        Raises:
            ValueError: If two providers contribute the same component id
            TypeError: If a provider returns a non-ComponentSpec record
        """
        new_components: dict[str, ComponentSpec] = {}

        for components in self._pm.hook.pipewright_get_components():
            for spec in components:
                if not isinstance(spec, ComponentSpec):
                    raise TypeError(f"Component providers must return ComponentSpec records, got {type(spec).__name__}")
                if spec.id in new_components:
                    raise ValueError(f"Duplicate component id: '{spec.id}'. Already registered as '{new_components[spec.id].label}'")
                new_components[spec.id] = spec

        # All validated, update cache
        self._components = new_components

    # === Lookup ===

    def get(self, component_id: str) -> ComponentSpec | None:
        """Get a component by id, or None if it is not registered."""
        return self._components.get(component_id)

    def has(self, component_id: str) -> bool:
        return component_id in self._components

    def list_components(self) -> list[ComponentSpec]:
        """Get all registered components, sorted by id."""
        return sorted(self._components.values(), key=lambda spec: spec.id)

    def component_ids(self) -> list[str]:
        return sorted(self._components)
