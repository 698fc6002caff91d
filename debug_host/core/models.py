"""Value types passed between contributors, the registry, and session factories."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import ConfigurationRejected

_RESERVED_KEYS = frozenset({"type", "name"})


@dataclass(frozen=True, slots=True)
class DebugConfiguration:
    """A named, typed debug launch description.

    ``type`` routes the configuration to a contributor; ``attributes`` holds
    the contributor-specific fields. Instances are never mutated: every
    helper that changes a field returns a new configuration.
    """

    type: str
    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        reserved = _RESERVED_KEYS.intersection(self.attributes)
        if reserved:
            msg = f"Attributes may not redefine {', '.join(sorted(reserved))}"
            raise ConfigurationRejected(msg)
        attributes = copy.deepcopy(dict(self.attributes))
        object.__setattr__(self, "attributes", MappingProxyType(attributes))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DebugConfiguration:
        debug_type = data.get("type")
        name = data.get("name")
        if not isinstance(debug_type, str) or not debug_type:
            raise ConfigurationRejected("Debug configuration requires a string 'type'")
        if not isinstance(name, str) or not name:
            raise ConfigurationRejected("Debug configuration requires a string 'name'")
        attributes = {key: value for key, value in data.items() if key not in _RESERVED_KEYS}
        return cls(type=debug_type, name=name, attributes=attributes)

    def to_mapping(self) -> dict[str, Any]:
        return {"type": self.type, "name": self.name, **copy.deepcopy(dict(self.attributes))}

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def with_attributes(self, **updates: Any) -> DebugConfiguration:
        """Return a copy with ``updates`` applied over the current attributes."""

        return DebugConfiguration(
            type=self.type, name=self.name, attributes={**self.attributes, **updates}
        )

    def with_defaults(self, **defaults: Any) -> DebugConfiguration:
        """Return a copy where missing (or ``None``) attributes take ``defaults``."""

        merged = dict(self.attributes)
        for key, value in defaults.items():
            if merged.get(key) is None:
                merged[key] = value
        return DebugConfiguration(type=self.type, name=self.name, attributes=merged)


@dataclass(frozen=True, slots=True)
class DebugAdapterExecutable:
    """How to spawn a debug adapter backend."""

    command: str
    args: Sequence[str] = ()
    env: Mapping[str, str] | None = None
    cwd: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(str(arg) for arg in self.args))
        if self.env is not None:
            object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    def to_payload(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "args": list(self.args),
            "env": dict(self.env) if self.env is not None else None,
            "cwd": str(self.cwd) if self.cwd is not None else None,
        }


__all__ = ["DebugAdapterExecutable", "DebugConfiguration"]
