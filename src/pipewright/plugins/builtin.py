# src/pipewright/plugins/builtin.py
"""Built-in component catalog.

The core components every workspace can use: the workflow entry point, a
canvas text annotation, and a handful of common actions.
"""

from collections.abc import Mapping
from typing import Any

from pipewright.contracts.components import ComponentSpec, ResolvedPorts
from pipewright.contracts.definition import DEFAULT_ENTRY_COMPONENT_ID
from pipewright.contracts.enums import ValuePriority
from pipewright.contracts.ports import (
    ParameterMetadata,
    PortMetadata,
    Ports,
    runtime_input_type_to_port_type,
)
from pipewright.plugins.hookspecs import hookimpl


def resolve_entrypoint_ports(params: Mapping[str, Any]) -> ResolvedPorts:
    """Expose one output port per configured runtime input.

    Malformed definitions are skipped here; the validator reports them.
    """
    runtime_inputs = params.get("runtimeInputs")
    if not isinstance(runtime_inputs, list):
        return ResolvedPorts()

    outputs: list[PortMetadata] = []
    for runtime_input in runtime_inputs:
        if not isinstance(runtime_input, Mapping) or not runtime_input.get("id"):
            continue
        input_id = str(runtime_input["id"])
        runtime_type = runtime_input.get("type")
        outputs.append(
            PortMetadata(
                id=input_id,
                label=str(runtime_input.get("label") or input_id),
                data_type=runtime_input_type_to_port_type(runtime_type if isinstance(runtime_type, str) else "text"),
                description=runtime_input.get("description"),
            )
        )
    return ResolvedPorts(outputs=tuple(outputs))


ENTRYPOINT = ComponentSpec(
    id=DEFAULT_ENTRY_COMPONENT_ID,
    label="Entry Point",
    parameters=(ParameterMetadata(id="runtimeInputs", label="Runtime Inputs", type="json", required=True),),
    resolve_ports=resolve_entrypoint_ports,
    description="Starts the workflow and exposes its runtime inputs",
)

TEXT_BLOCK = ComponentSpec(
    id="core.ui.text",
    label="Text",
    presentation_only=True,
    description="Canvas annotation; never executed",
)

FILE_LOADER = ComponentSpec(
    id="core.file.loader",
    label="File Loader",
    inputs=(PortMetadata(id="fileId", label="File ID", data_type=Ports.text(), required=True),),
    outputs=(
        PortMetadata(id="file", label="File", data_type=Ports.file()),
        PortMetadata(id="fileName", label="File Name", data_type=Ports.text()),
    ),
    description="Loads an uploaded file by id",
)

WEBHOOK_POST = ComponentSpec(
    id="core.webhook.post",
    label="Webhook",
    inputs=(
        PortMetadata(id="url", label="URL", data_type=Ports.text(), required=True),
        PortMetadata(
            id="payload",
            label="Payload",
            data_type=Ports.json(),
            value_priority=ValuePriority.MANUAL_FIRST,
        ),
    ),
    outputs=(PortMetadata(id="status", label="Status Code", data_type=Ports.number()),),
    description="POSTs a JSON payload to a URL",
)

TEXT_SPLITTER = ComponentSpec(
    id="core.text.splitter",
    label="Text Splitter",
    inputs=(
        PortMetadata(id="text", label="Text", data_type=Ports.text(), required=True),
        PortMetadata(
            id="separator",
            label="Separator",
            data_type=Ports.text(),
            value_priority=ValuePriority.MANUAL_FIRST,
        ),
    ),
    outputs=(
        PortMetadata(id="items", label="Items", data_type=Ports.list_of(Ports.text())),
        PortMetadata(id="count", label="Count", data_type=Ports.number()),
    ),
    description="Splits text into a list of lines or tokens",
)

CONSOLE_LOG = ComponentSpec(
    id="core.console.log",
    label="Console Log",
    inputs=(
        PortMetadata(id="data", label="Data", data_type=Ports.any(), required=True),
        PortMetadata(id="label", label="Label", data_type=Ports.text()),
    ),
    description="Writes its input to the run log",
)

SLACK_NOTIFY = ComponentSpec(
    id="core.notify.slack",
    label="Slack Message",
    inputs=(PortMetadata(id="message", label="Message", data_type=Ports.text(), required=True),),
    parameters=(
        ParameterMetadata(id="token", label="Bot Token", type="secret", required=True),
        ParameterMetadata(id="channel", label="Channel", type="text"),
    ),
    description="Posts a message to a Slack channel",
)

BUILTIN_COMPONENTS: tuple[ComponentSpec, ...] = (
    ENTRYPOINT,
    TEXT_BLOCK,
    FILE_LOADER,
    WEBHOOK_POST,
    TEXT_SPLITTER,
    CONSOLE_LOG,
    SLACK_NOTIFY,
)


class BuiltinComponents:
    """Hook implementer for the built-in catalog."""

    provider_name = "builtin"

    @hookimpl
    def pipewright_get_components(self) -> list[ComponentSpec]:
        return list(BUILTIN_COMPONENTS)
