"""Shared validation helpers for the built-in contributors."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from debug_host.core import ConfigurationRejected, DebugConfiguration


def require_string(config: DebugConfiguration, key: str) -> str:
    value = config.get(key)
    if not isinstance(value, str) or not value:
        msg = f"'{config.name}': '{key}' must be a non-empty string"
        raise ConfigurationRejected(msg)
    return value


def string_list(config: DebugConfiguration, key: str) -> list[str]:
    value = config.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = f"'{config.name}': '{key}' must be a list of strings"
        raise ConfigurationRejected(msg)
    return list(value)


def string_mapping(config: DebugConfiguration, key: str) -> dict[str, str]:
    value = config.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        msg = f"'{config.name}': '{key}' must be a mapping"
        raise ConfigurationRejected(msg)
    return {str(k): str(v) for k, v in value.items()}


def working_directory(config: DebugConfiguration) -> str:
    """Return the configured ``cwd``, defaulting to the host's working directory."""

    value = config.get("cwd")
    if value is None:
        return str(Path.cwd())
    if not isinstance(value, str) or not value:
        msg = f"'{config.name}': 'cwd' must be a non-empty string"
        raise ConfigurationRejected(msg)
    return value


def adapter_cwd(config: DebugConfiguration) -> Path | None:
    value = config.get("cwd")
    return Path(value) if isinstance(value, str) and value else None


def template(debug_type: str, name: str, **attributes: Any) -> DebugConfiguration:
    return DebugConfiguration(type=debug_type, name=name, attributes=attributes)


__all__ = [
    "adapter_cwd",
    "require_string",
    "string_list",
    "string_mapping",
    "template",
    "working_directory",
]
