"""Typer-based CLI for inspecting and re-packing captured BlazorPack bodies."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from blazor_pack import __version__
from blazor_pack.codec import decode_to_json, encode_from_json, locate_payload_offset
from blazor_pack.config import CodecConfig, load_config
from blazor_pack.exceptions import BlazorPackError
from blazor_pack.http.editor import rebuild_from_edit, render_request, render_response
from blazor_pack.http.filters import is_blazor_body, is_negotiation_probe
from blazor_pack.http.message import parse_http_message
from blazor_pack.logging import init_logging
from blazor_pack.result import CodecResult

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="BlazorPack traffic codec CLI", no_args_is_help=True, pretty_exceptions_enable=False)


def _config(ctx: typer.Context) -> CodecConfig:
    return ctx.obj if isinstance(ctx.obj, CodecConfig) else CodecConfig()


def _fail(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _unwrap(result: CodecResult, source: Path):
    if not result.is_success:
        logger.error("{} failed for {}: {}", result.error_type, source, result.error)
        _fail(f"{result.error_type}: {result.error}")
    return result.value


def _write_or_print(data: bytes, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(data.decode("utf-8", errors="replace"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    logger.info("Wrote {} bytes to {}", len(data), output)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Optional log file path."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML file with codec limits."
    ),
) -> None:
    """Initialize logging and load the codec config before any subcommand."""

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    target = log_file.expanduser().resolve() if log_file else None
    init_logging(target, log_level)
    try:
        ctx.obj = load_config(config_path)
    except ValueError as exc:
        _fail(f"Invalid config: {exc}")


@app.command("version")
def version() -> None:
    """Print the CLI version."""

    console.print(f"blazor-pack {__version__}")


@app.command("decode")
def decode(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured body (or HTTP message with --http)."),
    indent: Optional[int] = typer.Option(None, "--indent", min=0, max=8, help="Pretty-print JSON with this indent."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result here instead of stdout."),
    http: bool = typer.Option(False, "--http", help="Treat the file as a raw HTTP request or response."),
    url: Optional[str] = typer.Option(None, "--url", help="Request URL, used with --http for requests."),
) -> None:
    """Render a BlazorPack body as a JSON array of messages."""

    config = _config(ctx)
    if indent is not None:
        config = config.model_copy(update={"json_indent": indent})
    data = source.read_bytes()

    if http:
        try:
            message = parse_http_message(data)
        except BlazorPackError as exc:
            _fail(str(exc))
        if message.start_line.startswith("HTTP/"):
            rendered = render_response(message, config)
        else:
            rendered = render_request(url, message, config)
        _write_or_print(rendered, output)
        return

    if is_negotiation_probe(data):
        logger.info("{} is the negotiation probe; passing it through", source)
        _write_or_print(data, output)
        return

    text = _unwrap(decode_to_json(data, config), source)
    logger.info("Decoded {} bytes from {}", len(data), source)
    _write_or_print(text.encode("utf-8"), output)


@app.command("encode")
def encode(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON array of messages (or edited HTTP view with --http)."),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the BlazorPack bytes."),
    http: bool = typer.Option(False, "--http", help="Treat the file as an edited HTTP view."),
) -> None:
    """Pack a JSON array of messages into a BlazorPack body."""

    config = _config(ctx)
    data = source.read_bytes()

    if http:
        try:
            original = parse_http_message(data)
            rebuilt = rebuild_from_edit(original, data, config)
        except BlazorPackError as exc:
            logger.error("Failed to rebuild {}: {}", source, exc)
            _fail(f"{type(exc).__name__}: {exc}")
        _write_or_print(rebuilt.to_bytes(), output)
        return

    body = _unwrap(encode_from_json(data, config), source)
    _write_or_print(body, output)


@app.command("offset")
def offset(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured body."),
) -> None:
    """Print the offset of the first payload byte, past the length prefix."""

    value = _unwrap(locate_payload_offset(source.read_bytes()), source)
    console.print(value)


@app.command("check")
def check(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured body."),
    content_type: str = typer.Option("application/octet-stream", "--content-type", help="Declared Content-Type."),
) -> None:
    """Report whether a body would be handled as BlazorPack."""

    data = source.read_bytes()
    if is_blazor_body(data, content_type):
        console.print("blazorpack")
        return

    if not data:
        reason = "empty body"
    elif is_negotiation_probe(data):
        reason = "negotiation probe"
    else:
        reason = f"content type {content_type!r} is not an octet stream"
    console.print(f"skipped: {reason}")
