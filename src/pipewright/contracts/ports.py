# src/pipewright/contracts/ports.py
"""Port type algebra and port metadata.

PortType is a closed union of four frozen variants:

    PrimitivePort(name, coerce_from)  - text, number, boolean, secret, file, json, any
    ListPort(element)                 - homogeneous list of another port type
    MapPort(value)                    - string-keyed map of another port type
    ContractPort(name)                - component-family structural type, opaque
                                        beyond its name

Compatibility is anchored on the TARGET port: a target declares which
primitive sources it accepts through coercion, so is_compatible(a, b) and
is_compatible(b, a) can differ.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pipewright.contracts.enums import PortKind, PrimitiveName, ValuePriority

# Primitive sources that may never be coerced into another primitive.
_NON_COERCIBLE_SOURCES = frozenset({PrimitiveName.SECRET, PrimitiveName.FILE})


@dataclass(frozen=True, slots=True)
class PrimitivePort:
    """Primitive port type with an optional one-way coercion set."""

    name: PrimitiveName
    coerce_from: frozenset[PrimitiveName] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        illegal = self.coerce_from & _NON_COERCIBLE_SOURCES
        if illegal:
            raise ValueError(f"Primitive '{self.name}' cannot declare coercion from {sorted(illegal)}")


@dataclass(frozen=True, slots=True)
class ListPort:
    """List of another port type."""

    element: PortType


@dataclass(frozen=True, slots=True)
class MapPort:
    """String-keyed map of another port type."""

    value: PortType


@dataclass(frozen=True, slots=True)
class ContractPort:
    """Named contract type (credential marks secret-bearing contracts)."""

    name: str
    credential: bool = False


type PortType = PrimitivePort | ListPort | MapPort | ContractPort


def _is_any(port_type: PortType) -> bool:
    return isinstance(port_type, PrimitivePort) and port_type.name == PrimitiveName.ANY


def is_compatible(source: PortType, target: PortType) -> bool:
    """Check whether a value of ``source`` type may flow into a ``target`` port.

    Rules:
    - ``any`` on either side is compatible with everything
    - primitives: equal names, or source name in the target's coercion set
    - contracts: equal names
    - lists / maps: recursive on element / value type
    - any other pairing is incompatible
    """
    if _is_any(source) or _is_any(target):
        return True

    match source, target:
        case PrimitivePort(name=source_name), PrimitivePort(name=target_name, coerce_from=allowed):
            return source_name == target_name or source_name in allowed
        case ContractPort(name=source_name), ContractPort(name=target_name):
            return source_name == target_name
        case ListPort(element=source_element), ListPort(element=target_element):
            return is_compatible(source_element, target_element)
        case MapPort(value=source_value), MapPort(value=target_value):
            return is_compatible(source_value, target_value)
    return False


def describe_port_type(port_type: PortType) -> str:
    """Render a port type in its short textual form (e.g. ``list<text>``)."""
    match port_type:
        case PrimitivePort(name=name):
            return str(name)
        case ContractPort(name=name):
            return f"contract:{name}"
        case ListPort(element=element):
            return f"list<{describe_port_type(element)}>"
        case MapPort(value=value):
            return f"map<{describe_port_type(value)}>"
    raise TypeError(f"Not a port type: {port_type!r}")


class Ports:
    """Constructors for port types with the component SDK's default coercions.

    text accepts number and boolean, number and boolean accept text. Other
    primitives accept nothing unless a coercion set is passed explicitly.
    Textual port types (``"text"``, ``"list<number>"``) parse to these same
    constructors, so they carry the default coercions too.
    """

    @staticmethod
    def primitive(name: PrimitiveName | str, coerce_from: Iterable[PrimitiveName | str] = ()) -> PrimitivePort:
        return PrimitivePort(
            name=PrimitiveName(name),
            coerce_from=frozenset(PrimitiveName(source) for source in coerce_from),
        )

    @staticmethod
    def text(coerce_from: Iterable[PrimitiveName | str] | None = None) -> PrimitivePort:
        default = (PrimitiveName.NUMBER, PrimitiveName.BOOLEAN)
        return Ports.primitive(PrimitiveName.TEXT, default if coerce_from is None else coerce_from)

    @staticmethod
    def number(coerce_from: Iterable[PrimitiveName | str] | None = None) -> PrimitivePort:
        default = (PrimitiveName.TEXT,)
        return Ports.primitive(PrimitiveName.NUMBER, default if coerce_from is None else coerce_from)

    @staticmethod
    def boolean(coerce_from: Iterable[PrimitiveName | str] | None = None) -> PrimitivePort:
        default = (PrimitiveName.TEXT,)
        return Ports.primitive(PrimitiveName.BOOLEAN, default if coerce_from is None else coerce_from)

    @staticmethod
    def secret() -> PrimitivePort:
        return Ports.primitive(PrimitiveName.SECRET)

    @staticmethod
    def file() -> PrimitivePort:
        return Ports.primitive(PrimitiveName.FILE)

    @staticmethod
    def json(coerce_from: Iterable[PrimitiveName | str] = ()) -> PrimitivePort:
        return Ports.primitive(PrimitiveName.JSON, coerce_from)

    @staticmethod
    def any() -> PrimitivePort:
        return Ports.primitive(PrimitiveName.ANY)

    @staticmethod
    def list_of(element: PortType) -> ListPort:
        return ListPort(element=element)

    @staticmethod
    def map_of(value: PortType) -> MapPort:
        return MapPort(value=value)

    @staticmethod
    def contract(name: str, *, credential: bool = False) -> ContractPort:
        if not name:
            raise ValueError("Contract port name must be non-empty")
        return ContractPort(name=name, credential=credential)


_WRAPPED_PATTERN = re.compile(r"^(list|map)<(.+)>$")


def parse_port_type(value: str | Mapping[str, Any]) -> PortType:
    """Parse a port type from its textual form or its serialized mapping.

    Textual primitives get the default coercion set for their name, so
    ``"number"`` here equals ``Ports.number()``.

    Raises:
        ValueError: If the value is not a recognised port type.
    """
    if isinstance(value, str):
        return _parse_port_type_text(value.strip())
    return _parse_port_type_mapping(value)


def _parse_port_type_text(text: str) -> PortType:
    wrapped = _WRAPPED_PATTERN.match(text)
    if wrapped is not None:
        inner = _parse_port_type_text(wrapped.group(2).strip())
        return ListPort(element=inner) if wrapped.group(1) == "list" else MapPort(value=inner)
    if text.startswith("contract:"):
        return Ports.contract(text.removeprefix("contract:"))
    try:
        name = PrimitiveName(text)
    except ValueError:
        raise ValueError(f"Unknown port type '{text}'") from None
    return _default_primitive(name)


def _default_primitive(name: PrimitiveName) -> PrimitivePort:
    match name:
        case PrimitiveName.TEXT:
            return Ports.text()
        case PrimitiveName.NUMBER:
            return Ports.number()
        case PrimitiveName.BOOLEAN:
            return Ports.boolean()
    return Ports.primitive(name)


def _parse_port_type_mapping(data: Mapping[str, Any]) -> PortType:
    try:
        return _port_type_from_mapping(data)
    except KeyError as exc:
        raise ValueError(f"Port type mapping is missing {exc}: {dict(data)!r}") from None


def _port_type_from_mapping(data: Mapping[str, Any]) -> PortType:
    kind = PortKind(data["kind"])
    match kind:
        case PortKind.PRIMITIVE:
            name = PrimitiveName(data["name"])
            coercion = data.get("coercion") or {}
            if "from" in coercion:
                return Ports.primitive(name, coercion["from"])
            return _default_primitive(name)
        case PortKind.LIST:
            return ListPort(element=parse_port_type(data["element"]))
        case PortKind.MAP:
            return MapPort(value=parse_port_type(data["value"]))
        case PortKind.CONTRACT:
            return Ports.contract(data["name"], credential=bool(data.get("credential", False)))


def port_type_to_dict(port_type: PortType) -> dict[str, Any]:
    """Serialize a port type to its ``{kind: ...}`` mapping form."""
    match port_type:
        case PrimitivePort(name=name, coerce_from=allowed):
            result: dict[str, Any] = {"kind": PortKind.PRIMITIVE.value, "name": name.value}
            if allowed:
                result["coercion"] = {"from": sorted(source.value for source in allowed)}
            return result
        case ListPort(element=element):
            return {"kind": PortKind.LIST.value, "element": port_type_to_dict(element)}
        case MapPort(value=value):
            return {"kind": PortKind.MAP.value, "value": port_type_to_dict(value)}
        case ContractPort(name=name, credential=credential):
            result = {"kind": PortKind.CONTRACT.value, "name": name}
            if credential:
                result["credential"] = True
            return result
    raise TypeError(f"Not a port type: {port_type!r}")


def runtime_input_type_to_port_type(runtime_type: str) -> PortType:
    """Map a workflow runtime input type (as declared on an entry point) to a port type.

    Unknown types fall back to text, matching how the entry form renders them.
    """
    match runtime_type.lower():
        case "any":
            return Ports.any()
        case "text" | "string":
            return Ports.text()
        case "number":
            return Ports.number()
        case "boolean":
            return Ports.boolean()
        case "secret":
            return Ports.secret()
        case "file":
            return Ports.file()
        case "json":
            return Ports.json()
        case "array":
            return Ports.list_of(Ports.text())
    return Ports.text()


@dataclass(frozen=True, slots=True)
class PortMetadata:
    """A named, typed input or output slot on a component."""

    id: str
    label: str
    data_type: PortType
    required: bool = False
    description: str | None = None
    value_priority: ValuePriority | None = None

    @property
    def manual_first(self) -> bool:
        """Whether a manual value survives alongside a connection on this port."""
        return self.value_priority == ValuePriority.MANUAL_FIRST


@dataclass(frozen=True, slots=True)
class ParameterMetadata:
    """A component parameter shown in the node configuration panel."""

    id: str
    label: str
    type: str
    required: bool = False
    description: str | None = None

    @property
    def is_secret(self) -> bool:
        return self.type == "secret"
