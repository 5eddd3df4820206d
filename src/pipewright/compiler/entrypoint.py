# src/pipewright/compiler/entrypoint.py
"""Entry point selection.

A workflow is invoked through exactly one node of the designated entry
component type. That node must also be a root of the dependency graph:
nothing can run before the workflow has been invoked.
"""

from __future__ import annotations

from collections.abc import Sequence

from pipewright.compiler.models import InvalidEntrypointError, MissingEntrypointError
from pipewright.contracts.definition import DEFAULT_ENTRY_COMPONENT_ID, EntrypointRef, WorkflowAction


def select_entrypoint(
    actions: Sequence[WorkflowAction],
    entry_component_id: str = DEFAULT_ENTRY_COMPONENT_ID,
) -> EntrypointRef:
    """Pick the entry action from topologically ordered ``actions``.

    Raises:
        MissingEntrypointError: If no action uses the entry component
        InvalidEntrypointError: If several do, or the entry is not a root
    """
    candidates = [action for action in actions if action.component_id == entry_component_id]
    if not candidates:
        raise MissingEntrypointError(entry_component_id)
    if len(candidates) > 1:
        refs = ", ".join(action.ref for action in candidates)
        raise InvalidEntrypointError(
            f"Workflow must have exactly one entry point, found {len(candidates)} ({refs})",
            expected_component_id=entry_component_id,
            found_component_id=entry_component_id,
        )

    ref = candidates[0].ref
    action = next((candidate for candidate in actions if candidate.ref == ref), None)
    if action is None or action.component_id != entry_component_id:
        raise InvalidEntrypointError(
            f"Entry point '{ref}' does not map to an entry action",
            expected_component_id=entry_component_id,
            found_component_id=action.component_id if action is not None else None,
        )
    if action.depends_on:
        raise InvalidEntrypointError(
            f"Entry point '{ref}' must not depend on other nodes (depends on {', '.join(action.depends_on)})",
            expected_component_id=entry_component_id,
            found_component_id=action.component_id,
        )
    return EntrypointRef(ref=ref)
