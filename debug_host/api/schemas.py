"""Pydantic schemas shared across API routers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from debug_host.core import DebugConfiguration, Session


class APIMessage(BaseModel):
    """Simple message envelope."""

    message: str


class DebugConfigurationModel(BaseModel):
    """A debug configuration; contributor-specific fields pass through untouched."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1, description="Debug type routing the configuration")
    name: str = Field(min_length=1)

    def to_configuration(self) -> DebugConfiguration:
        return DebugConfiguration.from_mapping(self.model_dump())

    @classmethod
    def from_configuration(cls, config: DebugConfiguration) -> DebugConfigurationModel:
        return cls.model_validate(config.to_mapping())


class DebugTypesResponse(BaseModel):
    types: list[str]


class SessionStartResponse(BaseModel):
    session_id: str


class SessionResponse(BaseModel):
    id: str
    type: str
    name: str
    state: str
    executable: dict[str, Any]


class SessionOutputResponse(BaseModel):
    session_id: str
    lines: list[str]


def session_to_response(session: Session) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        type=session.configuration.type,
        name=session.configuration.name,
        state=session.state.value,
        executable=session.executable.to_payload(),
    )


__all__ = [
    "APIMessage",
    "DebugConfigurationModel",
    "DebugTypesResponse",
    "SessionOutputResponse",
    "SessionResponse",
    "SessionStartResponse",
    "session_to_response",
]
