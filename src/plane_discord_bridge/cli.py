"""CLI entry point for the Plane to Discord bridge."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from . import __version__
from .core.config import BridgeConfig, get_config
from .core.engine import TransformationEngine
from .core.exceptions import ConfigurationError
from .core.extractor import EventPayload
from .webhooks.client import build_message
from .webhooks.signature import generate_signature

app = typer.Typer(
    name="plane-bridge",
    help="""Forward Plane issue webhooks to Discord.

Quick start:
  export DISCORD_WEBHOOK_URL=https://discord.com/api/webhooks/...
  export WEBHOOK_SECRET=...
  plane-bridge serve
""",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _load_config() -> BridgeConfig:
    try:
        return get_config()
    except ConfigurationError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        if e.details:
            console.print(f"[dim]{escape(e.details)}[/dim]")
        raise typer.Exit(1) from None


def _read_payload(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        console.print(f"[red]❌ Cannot read {escape(str(path))}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Host to bind to (default: WEB_HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind to (default: WEB_PORT)"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Log level (default: LOG_LEVEL)"),
) -> None:
    """🚀 Run the webhook bridge server."""
    from .server import run_server

    run_server(host=host, port=port, log_level=log_level, config=_load_config())


@app.command(name="config")
def show_config(
    raw: bool = typer.Option(False, "--raw", "-r", help="Print JSON without formatting"),
) -> None:
    """📋 Show the effective configuration (secrets masked)."""
    config = _load_config()
    safe = config.to_safe_dict()

    if raw:
        print(json.dumps(safe, indent=2))
        return

    table = Table(title="Plane Discord Bridge Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in safe.items():
        table.add_row(key, str(value) if value != "" else "[dim](not set)[/dim]")
    console.print(table)

    if not config.verification_enabled:
        console.print("[yellow]⚠️  Signature verification is disabled (WEBHOOK_SECRET not set)[/yellow]")
    if not config.delivery_enabled:
        console.print("[yellow]⚠️  Delivery is disabled (DISCORD_WEBHOOK_URL not set)[/yellow]")


@app.command()
def sign(
    payload_file: Path = typer.Argument(..., help="File containing the raw webhook body"),
    secret: str | None = typer.Option(None, "--secret", "-s", help="Secret (default: WEBHOOK_SECRET)"),
) -> None:
    """🔏 Print the X-Plane-Signature value for a webhook body."""
    body = _read_payload(payload_file)
    effective_secret = secret if secret is not None else _load_config().webhook_secret

    if not effective_secret:
        console.print("[red]❌ No secret given and WEBHOOK_SECRET is not set[/red]")
        raise typer.Exit(1)

    print(generate_signature(body, effective_secret))


@app.command()
def render(
    payload_file: Path = typer.Argument(..., help="File containing a webhook JSON body"),
) -> None:
    """🔍 Render a webhook body without verifying or delivering it."""
    config = _load_config()
    engine = TransformationEngine(config)
    result = engine.transform(EventPayload.from_bytes(_read_payload(payload_file)))

    console.print(f"[bold]Outcome:[/bold] {result.outcome} [dim]({escape(result.reason)})[/dim]")
    if result.document is None:
        return

    message = build_message(result.document, avatar_url=config.icon_url)
    payload_json = json.dumps(message, indent=2, ensure_ascii=False)
    console.print(Syntax(payload_json, "json", theme="monokai"))


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"plane-discord-bridge {__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
