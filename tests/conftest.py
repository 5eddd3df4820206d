# tests/conftest.py
"""Shared test fixtures and helpers.

Registry fixtures:
- registry: ComponentRegistry with the built-in catalog registered
- compile_graph: compile a raw graph mapping against that registry

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Callable, Iterator
from typing import Any

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from pipewright.compiler import CompilationResult, compile_workflow
from pipewright.core.config import CompilerSettings
from pipewright.plugins.manager import ComponentRegistry

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo structlog configuration made by a test (CLI runs configure logging)."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers = []


@pytest.fixture
def registry() -> ComponentRegistry:
    """Registry with the built-in component catalog."""
    manager = ComponentRegistry()
    manager.register_builtin_components()
    return manager


@pytest.fixture
def compile_graph(registry: ComponentRegistry) -> Callable[..., CompilationResult]:
    """Compile a raw graph mapping against the built-in registry."""

    def _compile(graph: dict[str, Any], settings: CompilerSettings | None = None) -> CompilationResult:
        return compile_workflow(graph, registry, settings=settings)

    return _compile
