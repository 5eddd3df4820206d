# src/pipewright/core/config.py
"""
Compiler settings and loading.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from pipewright.contracts.definition import DEFAULT_ENTRY_COMPONENT_ID, DEFINITION_VERSION

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


class CompilerSettings(BaseModel):
    """Settings that shape every compiled definition.

    Example YAML:
        entry_component_id: core.workflow.entrypoint
        environment: staging
        timeout_seconds: 900
        fail_on_warnings: true
    """

    model_config = {"frozen": True}

    entry_component_id: str = Field(
        default=DEFAULT_ENTRY_COMPONENT_ID,
        description="Component type id that marks the workflow entry point",
    )
    definition_version: int = Field(
        default=DEFINITION_VERSION,
        gt=0,
        description="Version stamped on compiled definitions",
    )
    environment: str = Field(
        default="default",
        description="Execution environment recorded in the definition config",
    )
    timeout_seconds: float = Field(
        default=0,
        ge=0,
        description="Workflow timeout recorded in the definition config (0 = engine default)",
    )
    fail_on_warnings: bool = Field(
        default=False,
        description="Promote validation warnings to errors",
    )

    @field_validator("entry_component_id", "environment")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""
    import os

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # Unset and no default: keep the original so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        if isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_expand_value(item) for item in value]
        return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path) -> CompilerSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (PIPEWRIGHT_*) - highest priority
    2. Config file (YAML)
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated CompilerSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="PIPEWRIGHT",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys and includes its own bookkeeping keys
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    raw_config = _expand_env_vars(raw_config)

    return CompilerSettings(**raw_config)
