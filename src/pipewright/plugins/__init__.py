# src/pipewright/plugins/__init__.py
"""Component registry and providers.

This module provides the infrastructure for component providers:
- ComponentRegistry: pluggy-backed registry satisfying CapabilityRegistry
- hookimpl / hookspec: markers for provider implementations
- Built-in catalog and YAML catalog loading
"""

from pipewright.plugins.builtin import BUILTIN_COMPONENTS, BuiltinComponents
from pipewright.plugins.catalog import load_component_catalog
from pipewright.plugins.hookspecs import PROJECT_NAME, hookimpl, hookspec
from pipewright.plugins.manager import ComponentRegistry, create_static_hookimpl

__all__ = [
    "BUILTIN_COMPONENTS",
    "PROJECT_NAME",
    "BuiltinComponents",
    "ComponentRegistry",
    "create_static_hookimpl",
    "hookimpl",
    "hookspec",
    "load_component_catalog",
]
