# src/pipewright/contracts/enums.py
"""Status codes, modes, and kinds used across subsystem boundaries.

Values are part of the compiled definition wire format. Renaming a member's
value is a breaking change and requires a definition version bump.
"""

from enum import StrEnum


class PrimitiveName(StrEnum):
    """Names of primitive port types."""

    ANY = "any"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SECRET = "secret"
    FILE = "file"
    JSON = "json"


class PortKind(StrEnum):
    """Discriminator for the port type union (used in serialized form)."""

    PRIMITIVE = "primitive"
    LIST = "list"
    MAP = "map"
    CONTRACT = "contract"


class ValuePriority(StrEnum):
    """Which value wins when a port has both a manual value and a connection.

    CONNECTION_FIRST is the default: a connected port discards its manual value.
    MANUAL_FIRST keeps the manual value alongside the mapping so the executor
    can prefer it at runtime.
    """

    MANUAL_FIRST = "manual-first"
    CONNECTION_FIRST = "connection-first"


class JoinStrategy(StrEnum):
    """How the execution engine treats multiple converging inputs.

    Consumed by the scheduler, never interpreted by the compiler.
    """

    ALL = "all"
    ANY = "any"
    FIRST = "first"


class EdgeKind(StrEnum):
    """Edge semantics in the compiled definition."""

    SUCCESS = "success"
    ERROR = "error"


class Severity(StrEnum):
    """Severity of a semantic validation issue."""

    ERROR = "error"
    WARNING = "warning"
