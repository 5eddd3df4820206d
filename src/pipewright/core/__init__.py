# src/pipewright/core/__init__.py
"""Core infrastructure: Canonical JSON, Configuration, Logging."""

from pipewright.core.canonical import (
    CANONICAL_VERSION,
    canonical_json,
    definition_hash,
    stable_hash,
)
from pipewright.core.config import (
    CompilerSettings,
    load_settings,
)
from pipewright.core.logging import (
    configure_logging,
    get_logger,
)

__all__ = [
    "CANONICAL_VERSION",
    "CompilerSettings",
    "canonical_json",
    "configure_logging",
    "definition_hash",
    "get_logger",
    "load_settings",
    "stable_hash",
]
