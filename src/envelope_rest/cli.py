"""envelope-rest CLI — run CRUD operations against an enveloped REST API from the shell."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer

from envelope_rest import operations
from envelope_rest.config import ACCESS_TOKEN_ENV, BASE_URL_ENV, DEFAULT_CONFIG_PATH, ClientConfig
from envelope_rest.descriptor import ResourceDescriptor
from envelope_rest.errors import DecodeError, RestError
from envelope_rest.identifiers import wrap
from envelope_rest.transport import HttpxTransport, Transport

T = TypeVar("T")

app = typer.Typer(name="envelope-rest", help="CRUD operations against a REST API using the {\"data\": [...]} envelope.")

BaseUrlOption = typer.Option(None, "--base-url", "-u", envvar=BASE_URL_ENV, help="API root URL.")
TokenOption = typer.Option(None, "--token", "-t", envvar=ACCESS_TOKEN_ENV, help="Access token.")
ParamOption = typer.Option(None, "--param", "-p", help="Query parameter as key=value (repeatable).")
ConfigOption = typer.Option(Path(DEFAULT_CONFIG_PATH), "--config", "-c", help="Client config JSON file.")
DataOption = typer.Option(..., "--data", "-d", help="JSON request body.")


def _raw_object(obj: Any) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise DecodeError(f"expected a JSON object, got {type(obj).__name__}")
    return obj


def _pairs(params: list[tuple[str, str]] | None) -> list[tuple[str, str]]:
    return list(params or [])


def _raw_resource(path: str) -> ResourceDescriptor[Any, dict[str, Any], list[tuple[str, str]]]:
    """Descriptor passing JSON objects through untouched."""
    return ResourceDescriptor(
        path=path, decode_value=_raw_object, encode_value=lambda value: value, encode_params=_pairs
    )


def _parse_params(raw: list[str] | None) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got '{item}'", param_hint="--param")
        pairs.append((key, value))
    return pairs


def _parse_data(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc.msg}", param_hint="--data") from exc


def _load_config(base_url: str | None, token: str | None, config_path: Path) -> ClientConfig:
    """Read the config file when present; --base-url and --token override its values."""
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["base_url"] = base_url
    if token is not None:
        overrides["access_token"] = token
    try:
        if not base_url or config_path.exists():
            config = ClientConfig.from_file(config_path)
            if not overrides:
                return config
            return ClientConfig.model_validate({**config.model_dump(), **overrides})
        return ClientConfig.model_validate(overrides)
    except ValueError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _build_transport(config: ClientConfig) -> Transport:
    return HttpxTransport.from_config(config)


def _run(config: ClientConfig, call: Callable[[Transport], Awaitable[T]]) -> T:
    async def runner() -> T:
        transport = _build_transport(config)
        try:
            return await call(transport)
        finally:
            if isinstance(transport, HttpxTransport):
                await transport.aclose()

    try:
        return asyncio.run(runner())
    except RestError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, sort_keys=True))


@app.command("list")
def list_(
    path: str = typer.Argument(..., help="Collection path, e.g. 'users'."),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """List every entity in a collection."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    entities = _run(
        cfg,
        lambda t: operations.select(t, cfg.base_url, cfg.access_token, _raw_resource(path), params),
    )
    _echo_json([entity.value for entity in entities])


@app.command()
def get(
    path: str = typer.Argument(..., help="Collection path."),
    entity_id: int = typer.Argument(..., metavar="ID", help="Entity id."),
    require: bool = typer.Option(False, "--require", help="Fail when the entity does not exist."),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """Fetch one entity. Prints null when absent unless --require is given."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    op = operations.get_404 if require else operations.get
    entity = _run(
        cfg,
        lambda t: op(t, cfg.base_url, cfg.access_token, _raw_resource(path), wrap(entity_id), params),
    )
    _echo_json(entity.value if entity is not None else None)


@app.command()
def create(
    path: str = typer.Argument(..., help="Collection path."),
    data: str = DataOption,
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """Create an entity from a JSON object."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    body = _parse_data(data)
    entity = _run(
        cfg,
        lambda t: operations.create(t, cfg.base_url, cfg.access_token, _raw_resource(path), body, params),
    )
    _echo_json(entity.value)


@app.command()
def replace(
    path: str = typer.Argument(..., help="Collection path."),
    entity_id: int = typer.Argument(..., metavar="ID", help="Entity id."),
    data: str = DataOption,
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """Replace an entity with a full JSON object."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    body = _parse_data(data)
    value = _run(
        cfg,
        lambda t: operations.replace(
            t, cfg.base_url, cfg.access_token, _raw_resource(path), wrap(entity_id), body, params
        ),
    )
    _echo_json(value)


@app.command()
def patch(
    path: str = typer.Argument(..., help="Collection path."),
    entity_id: int = typer.Argument(..., metavar="ID", help="Entity id."),
    data: str = DataOption,
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """Apply a partial JSON update to an entity."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    body = _parse_data(data)
    value = _run(
        cfg,
        lambda t: operations.patch(
            t, cfg.base_url, cfg.access_token, _raw_resource(path), wrap(entity_id), body, params
        ),
    )
    _echo_json(value)


@app.command()
def delete(
    path: str = typer.Argument(..., help="Collection path."),
    entity_id: int = typer.Argument(..., metavar="ID", help="Entity id."),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
    param: list[str] | None = ParamOption,
    config: Path = ConfigOption,
) -> None:
    """Delete an entity."""
    cfg = _load_config(base_url, token, config)
    params = _parse_params(param)
    _run(
        cfg,
        lambda t: operations.delete(t, cfg.base_url, cfg.access_token, _raw_resource(path), wrap(entity_id), params),
    )
    typer.echo(f"Deleted {path.strip('/')}/{entity_id}")
