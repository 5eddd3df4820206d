# src/pipewright/plugins/catalog.py
"""Component catalogs loaded from YAML.

Lets a workspace describe extra components without writing a provider:

    components:
      - id: acme.http.get
        label: HTTP GET
        inputs:
          - {id: url, label: URL, type: text, required: true}
        outputs:
          - {id: body, label: Body, type: json}
          - {id: headers, label: Headers, type: "map<text>"}
        parameters:
          - {id: apiKey, label: API Key, type: secret, required: true}

Port types use the textual form (``list<text>``, ``contract:github``) or the
``{kind: ...}`` mapping form. Catalog components have static ports only.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pipewright.contracts.components import ComponentSpec
from pipewright.contracts.enums import ValuePriority
from pipewright.contracts.ports import ParameterMetadata, PortMetadata, parse_port_type


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class CatalogPort(_CatalogModel):
    id: str = Field(min_length=1)
    label: str | None = None
    type: str | dict[str, Any] = "any"
    required: bool = False
    description: str | None = None
    value_priority: ValuePriority | None = None

    @field_validator("type")
    @classmethod
    def validate_port_type(cls, v: str | dict[str, Any]) -> str | dict[str, Any]:
        parse_port_type(v)
        return v

    def to_metadata(self) -> PortMetadata:
        return PortMetadata(
            id=self.id,
            label=self.label or self.id,
            data_type=parse_port_type(self.type),
            required=self.required,
            description=self.description,
            value_priority=self.value_priority,
        )


class CatalogParameter(_CatalogModel):
    id: str = Field(min_length=1)
    label: str | None = None
    type: str = "text"
    required: bool = False
    description: str | None = None

    def to_metadata(self) -> ParameterMetadata:
        return ParameterMetadata(
            id=self.id,
            label=self.label or self.id,
            type=self.type,
            required=self.required,
            description=self.description,
        )


class CatalogComponent(_CatalogModel):
    id: str = Field(min_length=1)
    label: str | None = None
    description: str = ""
    presentation_only: bool = False
    inputs: list[CatalogPort] = Field(default_factory=list)
    outputs: list[CatalogPort] = Field(default_factory=list)
    parameters: list[CatalogParameter] = Field(default_factory=list)

    def to_spec(self) -> ComponentSpec:
        return ComponentSpec(
            id=self.id,
            label=self.label or self.id,
            inputs=tuple(port.to_metadata() for port in self.inputs),
            outputs=tuple(port.to_metadata() for port in self.outputs),
            parameters=tuple(parameter.to_metadata() for parameter in self.parameters),
            presentation_only=self.presentation_only,
            description=self.description,
        )


class ComponentCatalog(_CatalogModel):
    components: list[CatalogComponent] = Field(default_factory=list)


def load_component_catalog(path: Path) -> list[ComponentSpec]:
    """Load component specs from a YAML catalog file.

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        ValidationError: If the catalog fails Pydantic validation
        ValueError: If a component declares duplicate port ids
    """
    if not path.exists():
        raise FileNotFoundError(f"Component catalog not found: {path}")

    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    catalog = ComponentCatalog.model_validate(raw)
    return [component.to_spec() for component in catalog.components]
