"""Contributor registry keyed by debug type."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .errors import ConfigurationRejected, DuplicateAdapterType, UnknownAdapterType
from .models import DebugAdapterExecutable, DebugConfiguration

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .sessions import SessionFactory


@runtime_checkable
class DebugAdapterContributor(Protocol):
    """Capabilities a plugin registers for exactly one debug type."""

    debug_type: str
    session_factory: SessionFactory | None

    def initial_configurations(self) -> list[DebugConfiguration]: ...

    def resolve(self, config: DebugConfiguration) -> DebugConfiguration: ...

    def executable_for(self, config: DebugConfiguration) -> DebugAdapterExecutable: ...


class AdapterRegistry:
    """Index contributors by debug type.

    The registry is built once and never mutated afterwards, so concurrent
    sessions can share it without coordination.
    """

    def __init__(self, contributors: Iterable[DebugAdapterContributor]) -> None:
        self._contributors: dict[str, DebugAdapterContributor] = {}
        for contributor in contributors:
            if contributor.debug_type in self._contributors:
                raise DuplicateAdapterType(contributor.debug_type)
            self._contributors[contributor.debug_type] = contributor

    def __contains__(self, debug_type: object) -> bool:
        return debug_type in self._contributors

    def list_types(self) -> list[str]:
        return list(self._contributors)

    def initial_configurations(self, debug_type: str) -> list[DebugConfiguration]:
        return list(self._get(debug_type).initial_configurations())

    def resolve(self, config: DebugConfiguration) -> DebugConfiguration:
        resolved = self._get(config.type).resolve(config)
        if resolved.type != config.type:
            msg = (
                f"Debug adapter '{config.type}' resolved the configuration "
                f"to type '{resolved.type}'"
            )
            raise ConfigurationRejected(msg)
        return resolved

    def executable_for(self, config: DebugConfiguration) -> DebugAdapterExecutable:
        return self._get(config.type).executable_for(config)

    def session_factory_for(self, debug_type: str) -> SessionFactory | None:
        contributor = self._contributors.get(debug_type)
        if contributor is None:
            return None
        return contributor.session_factory

    def _get(self, debug_type: str) -> DebugAdapterContributor:
        contributor = self._contributors.get(debug_type)
        if contributor is None:
            raise UnknownAdapterType(debug_type)
        return contributor


__all__ = ["AdapterRegistry", "DebugAdapterContributor"]
