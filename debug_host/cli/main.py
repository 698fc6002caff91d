"""Click-based CLI for the debug host."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click
import uvicorn

from debug_host.api.context import build_context
from debug_host.api.main import create_app
from debug_host.config import HostSettings, load_settings
from debug_host.container import build_service
from debug_host.core import (
    DebugConfiguration,
    DebugHostError,
    DebugService,
    Session,
    SessionState,
)


@dataclass
class CLIState:
    settings: HostSettings
    service: DebugService | None = None

    def ensure_service(self) -> DebugService:
        if self.service is None:
            self.service = build_service(self.settings)
        return self.service


def _load_configuration(path: Path, name: str | None) -> DebugConfiguration:
    try:
        data: Any = json.loads(path.read_text("utf-8"))
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("configurations"), list):
        candidates = [item for item in data["configurations"] if isinstance(item, dict)]
        if name is not None:
            candidates = [item for item in candidates if item.get("name") == name]
        if len(candidates) != 1:
            names = ", ".join(str(item.get("name")) for item in data["configurations"])
            raise click.UsageError(f"Select one configuration with --name (available: {names}).")
        data = candidates[0]
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path} does not contain a debug configuration.")
    try:
        return DebugConfiguration.from_mapping(data)
    except DebugHostError as exc:
        raise click.BadParameter(str(exc)) from exc


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file (defaults to ~/.debug-host/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.pass_context
def app(ctx: click.Context, config_file: Path | None, log_level: str) -> None:
    """Resolve debug configurations and run debug adapter sessions."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    ctx.obj = CLIState(settings=load_settings(config_file))


@app.command("types")
@click.pass_obj
def list_types(state: CLIState) -> None:
    """List registered debug types."""

    for debug_type in asyncio.run(state.ensure_service().list_types()):
        click.echo(debug_type)


@app.command("configurations")
@click.argument("debug_type")
@click.pass_obj
def configurations(state: CLIState, debug_type: str) -> None:
    """Print the configuration templates offered for DEBUG_TYPE."""

    service = state.ensure_service()
    try:
        templates = asyncio.run(service.initial_configurations(debug_type))
    except DebugHostError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json([item.to_mapping() for item in templates])


@app.command("resolve")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="Configuration name when the file holds several.")
@click.pass_obj
def resolve(state: CLIState, path: Path, name: str | None) -> None:
    """Print the resolved form of a configuration file."""

    config = _load_configuration(path, name)
    try:
        resolved = asyncio.run(state.ensure_service().resolve(config))
    except DebugHostError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(resolved.to_mapping())


@app.command("launch")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="Configuration name when the file holds several.")
@click.pass_obj
def launch(state: CLIState, path: Path, name: str | None) -> None:
    """Start a debug adapter session and wait until it terminates."""

    config = _load_configuration(path, name)
    service = state.ensure_service()
    try:
        exit_code = asyncio.run(_run_session(service, config, state.settings.shutdown_timeout))
    except DebugHostError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        raise click.Abort() from None
    click.echo(f"Debug adapter exited with code {exit_code}.")
    if exit_code:
        raise SystemExit(exit_code)


async def _run_session(
    service: DebugService, config: DebugConfiguration, shutdown_timeout: float
) -> int | None:
    session_id = await service.start(config)
    session = service.find(session_id)
    click.echo(f"Session {session_id} started ({config.type}: {config.name}).")
    if session is None:
        return None
    try:
        await _wait_terminated(session)
    finally:
        await service.stop_and_wait(session_id, timeout=shutdown_timeout)
    return getattr(session, "exit_code", None)


async def _wait_terminated(session: Session) -> None:
    finished: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    def _done(_: Session) -> None:
        if not finished.done():
            finished.set_result(None)

    session.on_terminated(_done)
    if session.state is not SessionState.TERMINATED:
        await finished


@app.command("serve")
@click.option("--host", help="Bind address (defaults to the configured host).")
@click.option("--port", type=int, help="Bind port (defaults to the configured port).")
@click.pass_obj
def serve(state: CLIState, host: str | None, port: int | None) -> None:
    """Serve the debug API over HTTP."""

    settings = state.settings
    application = create_app(build_context(settings))
    uvicorn.run(application, host=host or settings.host, port=port or settings.port)


def main() -> None:  # pragma: no cover - console entry point
    app()


__all__ = ["app", "main"]
