"""CLI commands for linerelay."""

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from linerelay import __logo__, __version__

app = typer.Typer(
    name="linerelay",
    help=f"{__logo__} linerelay - LINE bot relaying messages to an LLM",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} linerelay v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """linerelay - LINE bot relaying messages to an LLM."""
    pass


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


# ============================================================================
# Server
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address"),
    port: int = typer.Option(None, "--port", "-p", help="Listen port"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Start the webhook server."""
    import uvicorn

    from linerelay.config.loader import load_config
    from linerelay.errors import ConfigurationError
    from linerelay.server.main import create_app

    config = load_config()
    _configure_logging("DEBUG" if verbose else config.log_level)

    try:
        config.require_credentials()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Set CHANNEL_ACCESS_TOKEN, CHANNEL_SECRET and GEMINI_API_KEY (or LINERELAY_* equivalents).")
        raise typer.Exit(1)

    host = host or config.server.host
    port = port or config.server.port

    console.print(f"{__logo__} Starting linerelay on {host}:{port}{config.server.webhook_path}...")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )


# ============================================================================
# Backend
# ============================================================================


@app.command()
def ask(
    message: str = typer.Option(..., "--message", "-m", help="Text to send to the backend"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Send one message through the backend session and print the reply."""
    from linerelay.config.loader import load_config
    from linerelay.relay.builder import build_session
    from linerelay.relay.generator import NO_ANSWER_MESSAGE, UNAVAILABLE_MESSAGE

    config = load_config()
    _configure_logging("DEBUG" if verbose else "WARNING")

    if "provider.api_key" in config.missing_credentials():
        console.print("[red]Error: No API key configured.[/red]")
        console.print("Set GEMINI_API_KEY or LINERELAY_PROVIDER__API_KEY")
        raise typer.Exit(1)

    session = build_session(config)

    async def run() -> tuple[str, bool]:
        try:
            reply = await session.complete(message)
        except Exception as e:
            logger.error(f"Backend call failed: {e}")
            return UNAVAILABLE_MESSAGE, False
        return (reply if reply.strip() else NO_ANSWER_MESSAGE), True

    reply, ok = asyncio.run(run())
    color = "green" if ok else "yellow"
    console.print(f"[{color}]{session.model}[/{color}]")
    console.print(reply)
    if not ok:
        raise typer.Exit(1)


# ============================================================================
# Status
# ============================================================================


@app.command()
def status():
    """Show linerelay configuration status."""
    from linerelay.config.loader import load_config

    config = load_config()
    missing = config.missing_credentials()

    if config.agent.persona is not None:
        persona_source = "inline" if config.agent.persona else "disabled"
    elif config.agent.persona_file:
        persona_source = config.agent.persona_file
    else:
        persona_source = "built-in"

    def mark(present: bool) -> str:
        return "[green]✓[/green]" if present else "[red]✗[/red]"

    table = Table(title=f"{__logo__} linerelay v{__version__}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Model", config.agent.model)
    table.add_row("Persona", persona_source)
    table.add_row("History turns", str(config.agent.history_turns))
    table.add_row("Channel access token", mark("line.channel_access_token" not in missing))
    table.add_row("Channel secret", mark("line.channel_secret" not in missing))
    table.add_row("API key", mark("provider.api_key" not in missing))
    table.add_row("Webhook", f"{config.server.host}:{config.server.port}{config.server.webhook_path}")

    console.print(table)

    if missing:
        console.print(f"\n[yellow]Missing: {', '.join(missing)}[/yellow]")
