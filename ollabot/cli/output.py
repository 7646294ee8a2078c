"""Rich output formatters for the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ollabot.agent.models import (
    CalculationResult,
    ClarificationResult,
    FinalResponse,
    ModelListResult,
    ModelSelectedResult,
    Result,
)
from ollabot.core.ollama.catalog import OllamaModel


def render_result(console: Console, result: Result) -> None:
    """Print one dispatch result according to its type."""
    if isinstance(result, CalculationResult):
        console.print(f"[bold green]{result.message}[/bold green]")
        console.print(f"   Operation: {result.operation}")
        console.print(f"   Inputs: {result.inputs.a}, {result.inputs.b}")
        console.print(f"   Result: {result.result}")
    elif isinstance(result, ModelListResult):
        table = Table(title="Available Ollama Models")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Model", style="cyan")
        table.add_column("", style="green")
        for i, model in enumerate(result.models, start=1):
            marker = "(current)" if model.name == result.current_model else ""
            table.add_row(str(i), model.display or model.name, marker)
        console.print(table)
        render_recommendations(console, result.recommendations)
    elif isinstance(result, ModelSelectedResult):
        console.print("[bold green]Model switched successfully![/bold green]")
        console.print(f"   Previous: {result.previous_model}")
        console.print(f"   Current: {result.new_model}")
    elif isinstance(result, ClarificationResult):
        console.print(f"[bold yellow]?[/bold yellow] {result.message}")
    elif isinstance(result, FinalResponse):
        console.print(f"[bold cyan]ollabot:[/bold cyan] {result.message}")
    else:
        console.print_json(result.model_dump_json())


def render_recommendations(console: Console, recommendations: dict[str, list[str]]) -> None:
    console.print("\n[bold]Recommended by Category:[/bold]")
    for category, names in recommendations.items():
        console.print(f"  [cyan]{category}:[/cyan] {', '.join(names)}")


def render_models_table(
    console: Console,
    models: list[OllamaModel],
    current: str | None = None,
) -> None:
    """Installed models straight from the catalog."""
    if not models:
        console.print("[dim]No models installed. Pull one with: ollama pull llama3.1:8b[/dim]")
        return
    table = Table(title="Ollama Models")
    table.add_column("Name", style="cyan")
    table.add_column("Family", style="blue")
    table.add_column("Params", style="yellow")
    table.add_column("Size", justify="right")
    table.add_column("", style="green")
    for m in models:
        table.add_row(
            m.name,
            m.family,
            m.details.parameter_size or "-",
            f"{m.size_gb:.1f}GB",
            "(current)" if m.name == current else "",
        )
    console.print(table)
