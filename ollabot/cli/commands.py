"""ollabot CLI: Typer-based command-line interface."""

from __future__ import annotations

import asyncio
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from ollabot import __version__
from ollabot.agent.errors import DispatchError

app = typer.Typer(
    name="ollabot",
    help="ollabot - twelve-factor agent loop over local Ollama models",
    no_args_is_help=True,
)

console = Console()

_HELP_TEXT = """\
[bold]Available commands:[/bold]
  • Ask math questions: "add 5 and 3", "multiply 10 by 7"
  • List models: "list models" or "show available models"
  • Select model: "use llama3.1:8b" or "select mistral:7b"
  • Help: "help"
  • Exit: "exit" or "quit"
"""


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ollabot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=_version_callback, is_eager=True
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", "-l", help="Log level for stderr (DEBUG, INFO, ...)"
    ),
) -> None:
    """ollabot - twelve-factor agent loop over local Ollama models."""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())


# ════════════════════════════════════════════════════════════
# run: start API server
# ════════════════════════════════════════════════════════════


@app.command()
def run(
    port: int | None = typer.Option(None, "--port", "-p", help="Port number"),
    host: str | None = typer.Option(None, "--host", "-h", help="Host address"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the API server (uvicorn)."""
    import uvicorn

    from ollabot.core.config.loader import load_config

    config = load_config()
    host = host or config.server.host
    port = port or config.server.port
    console.print(f"[green]Starting ollabot API on {host}:{port}[/green]")
    console.print(f"[dim]Ollama base URL: {config.base_url}[/dim]")
    uvicorn.run("ollabot.api.app:app", host=host, port=port, reload=reload)


# ════════════════════════════════════════════════════════════
# chat: terminal chat
# ════════════════════════════════════════════════════════════


@app.command()
def chat(
    message: str | None = typer.Option(None, "--message", "-m", help="Single message to send"),
    model: str | None = typer.Option(None, "--model", help="Model to start with"),
    base_url: str | None = typer.Option(None, "--base-url", help="Ollama server URL"),
) -> None:
    """Chat with the agent from the terminal."""
    from ollabot.agent.reducer import create_reducer
    from ollabot.core.config.loader import load_config

    config = load_config(
        overrides={"ollama": {"base_url": base_url}, "agent": {"default_model": model}}
    )
    reducer = create_reducer(config)

    async def _process(text: str) -> None:
        from ollabot.cli.output import render_result

        try:
            with console.status("Processing..."):
                intent, result = await reducer.step(text)
        except DispatchError as e:
            console.print(f"[red]Error:[/red] {e}\n")
            return
        console.print(f"[dim]Next step: {intent.intent}[/dim]")
        render_result(console, result)
        console.print()

    async def _session() -> int:
        if not await reducer.check_health():
            console.print("[red]Cannot connect to Ollama. Please make sure Ollama is running.[/red]")
            console.print(f"   Expected URL: {reducer.state.service_endpoint}")
            console.print("   Start Ollama with: ollama serve")
            return 1

        if message:
            # Single message mode
            console.print(f"Processing command: [bold]{message}[/bold]")
            await _process(message)
            return 0

        # Interactive mode
        console.print("[bold]ollabot interactive mode[/bold] (type 'exit' or 'quit' to leave)")
        console.print(f"Current model: [cyan]{reducer.state.current_model}[/cyan]\n")
        console.print(_HELP_TEXT)
        while True:
            try:
                user_input = console.input("[bold blue]You:[/bold blue] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\nBye!")
                break

            text = user_input.strip()
            if not text:
                continue
            if text.lower() in ("exit", "quit"):
                console.print("Bye!")
                break
            if text.lower() == "help":
                console.print(_HELP_TEXT)
                continue

            await _process(text)
        return 0

    code = asyncio.run(_session())
    if code:
        raise typer.Exit(code=code)


# ════════════════════════════════════════════════════════════
# models: list installed models
# ════════════════════════════════════════════════════════════


@app.command()
def models(
    base_url: str | None = typer.Option(None, "--base-url", help="Ollama server URL"),
) -> None:
    """List installed Ollama models and recommendations."""
    from ollabot.cli.output import render_models_table, render_recommendations
    from ollabot.core.config.loader import load_config
    from ollabot.core.ollama.catalog import ModelCatalog

    config = load_config(overrides={"ollama": {"base_url": base_url}})
    catalog = ModelCatalog(config.base_url, timeout=config.ollama.timeout)
    try:
        installed = asyncio.run(catalog.list())
    except DispatchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    render_models_table(console, installed, current=config.agent.default_model)
    render_recommendations(console, catalog.recommendations())


# ════════════════════════════════════════════════════════════
# status: config + Ollama reachability
# ════════════════════════════════════════════════════════════


@app.command()
def status() -> None:
    """Show configuration and Ollama status."""
    from ollabot.core.config.loader import load_config
    from ollabot.core.ollama.catalog import ModelCatalog

    config = load_config()
    catalog = ModelCatalog(config.base_url, timeout=config.ollama.timeout)
    healthy = asyncio.run(catalog.check_health())

    table = Table(title="ollabot status")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Version", __version__)
    table.add_row("Ollama URL", config.base_url)
    table.add_row("Ollama", "connected" if healthy else "[red]disconnected[/red]")
    table.add_row("Default Model", config.agent.default_model)
    table.add_row(
        "Context Window",
        f"{config.agent.context.retain_entries}/{config.agent.context.max_entries} entries",
    )

    console.print(table)
