# ruff: noqa: B008
"""Debug type, configuration, and session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from debug_host.api.context import AppContext, get_app_context
from debug_host.api.schemas import (
    APIMessage,
    DebugConfigurationModel,
    DebugTypesResponse,
    SessionOutputResponse,
    SessionResponse,
    SessionStartResponse,
    session_to_response,
)
from debug_host.core import (
    ConfigurationRejected,
    DebugHostError,
    LaunchFailed,
    UnknownAdapterType,
)
from debug_host.runner import AdapterLog

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/types", response_model=DebugTypesResponse)
async def list_types(context: AppContext = Depends(get_app_context)) -> DebugTypesResponse:
    return DebugTypesResponse(types=await context.service.list_types())


@router.get("/types/{debug_type}/configurations", response_model=list[DebugConfigurationModel])
async def initial_configurations(
    debug_type: str,
    context: AppContext = Depends(get_app_context),
) -> list[DebugConfigurationModel]:
    try:
        configurations = await context.service.initial_configurations(debug_type)
    except DebugHostError as exc:
        raise _http_error(exc) from exc
    return [DebugConfigurationModel.from_configuration(item) for item in configurations]


@router.post("/configurations/resolve", response_model=DebugConfigurationModel)
async def resolve_configuration(
    payload: DebugConfigurationModel,
    context: AppContext = Depends(get_app_context),
) -> DebugConfigurationModel:
    try:
        resolved = await context.service.resolve(payload.to_configuration())
    except DebugHostError as exc:
        raise _http_error(exc) from exc
    return DebugConfigurationModel.from_configuration(resolved)


@router.post(
    "/sessions",
    response_model=SessionStartResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session(
    payload: DebugConfigurationModel,
    context: AppContext = Depends(get_app_context),
) -> SessionStartResponse:
    try:
        session_id = await context.service.start(payload.to_configuration())
    except DebugHostError as exc:
        raise _http_error(exc) from exc
    return SessionStartResponse(session_id=session_id)


@router.get("/sessions", response_model=list[SessionResponse])
async def list_sessions(context: AppContext = Depends(get_app_context)) -> list[SessionResponse]:
    return [session_to_response(item) for item in context.service.list_sessions()]


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    context: AppContext = Depends(get_app_context),
) -> SessionResponse:
    session = context.service.find(session_id)
    if session is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session_to_response(session)


@router.delete("/sessions/{session_id}", response_model=APIMessage)
async def stop_session(
    session_id: str,
    context: AppContext = Depends(get_app_context),
) -> APIMessage:
    await context.service.stop(session_id)
    return APIMessage(message="stop requested")


@router.delete("/sessions", response_model=APIMessage)
async def stop_all_sessions(context: AppContext = Depends(get_app_context)) -> APIMessage:
    await context.service.stop()
    return APIMessage(message="stop requested")


@router.get("/sessions/{session_id}/output", response_model=SessionOutputResponse)
def session_output(
    session_id: str,
    tail: int | None = Query(None, ge=1, description="Return only the last N lines"),
    context: AppContext = Depends(get_app_context),
) -> SessionOutputResponse:
    path = context.settings.logs_dir / session_id / "adapter.log"
    if not session_id.isalnum() or not path.exists():
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="No adapter output recorded")
    lines = list(AdapterLog.replay(path, limit=tail))
    return SessionOutputResponse(session_id=session_id, lines=lines)


def _http_error(exc: DebugHostError) -> HTTPException:
    if isinstance(exc, UnknownAdapterType):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConfigurationRejected):
        return HTTPException(422, detail=str(exc))
    if isinstance(exc, LaunchFailed):
        return HTTPException(status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


__all__ = ["router"]
