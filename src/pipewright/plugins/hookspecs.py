# src/pipewright/plugins/hookspecs.py
"""pluggy hook specifications for Pipewright component providers.

Providers implement these hooks to contribute component capabilities to the
registry the compiler resolves nodes against.

Usage (implementing a provider):
    from pipewright.plugins.hookspecs import hookimpl

    class MyComponents:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def pipewright_get_components(self):
            return [MY_COMPONENT_SPEC]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks provider implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pipewright.contracts.components import ComponentSpec

# Project name for pluggy
PROJECT_NAME = "pipewright"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for providers to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class PipewrightComponentSpec:
    """Hook specifications for component providers."""

    @hookspec
    def pipewright_get_components(self) -> list["ComponentSpec"]:  # type: ignore[empty-body]
        """Return component capability records.

        Returns:
            List of ComponentSpec records (ids must be unique across providers)
        """
