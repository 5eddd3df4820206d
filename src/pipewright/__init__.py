"""
Pipewright: compile visually-authored security automation graphs into
validated, topologically ordered workflow definitions.

The compiler is a pure function from (graph, component registry) to a
compiled definition or a structured error. It never executes anything.
"""

__version__ = "0.4.0"
