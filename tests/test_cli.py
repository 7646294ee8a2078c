"""Tests for ollabot.cli."""

from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from ollabot import __version__
from ollabot.agent.errors import CatalogUnavailable, UnknownModel
from ollabot.agent.models import (
    AddIntent,
    CalculationInputs,
    CalculationResult,
    MultiplyIntent,
)
from ollabot.cli.commands import app
from ollabot.core.config import Config
from ollabot.core.ollama.catalog import OllamaModel, OllamaModelDetails

runner = CliRunner()

_PATCH_CONFIG = "ollabot.core.config.loader.load_config"
_PATCH_REDUCER = "ollabot.agent.reducer.create_reducer"
_PATCH_HEALTH = "ollabot.core.ollama.catalog.ModelCatalog.check_health"
_PATCH_LIST = "ollabot.core.ollama.catalog.ModelCatalog.list"


def _mock_reducer(healthy=True):
    reducer = MagicMock()
    reducer.check_health = AsyncMock(return_value=healthy)
    reducer.state.service_endpoint = "http://localhost:11434"
    reducer.state.current_model = "llama3.1:8b"
    return reducer


def test_cli_help():
    """--help works and shows command names."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("run", "chat", "models", "status"):
        assert name in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_main_module_exposes_app():
    from ollabot.__main__ import app as main_app

    assert main_app is app


def test_chat_single_message():
    """chat -m runs one step and prints the result."""
    reducer = _mock_reducer()
    reducer.step = AsyncMock(return_value=(
        AddIntent(a=2, b=3),
        CalculationResult(
            operation="addition",
            inputs=CalculationInputs(a=2, b=3),
            result=5,
            message="The addition of 2 and 3 is 5.",
        ),
    ))

    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_REDUCER, return_value=reducer),
    ):
        result = runner.invoke(app, ["chat", "-m", "add 2 and 3"])

    assert result.exit_code == 0
    assert "Processing command" in result.output
    assert "Next step: add" in result.output
    assert "The addition of 2 and 3 is 5." in result.output
    reducer.step.assert_called_once_with("add 2 and 3")


def test_chat_passes_cli_overrides():
    reducer = _mock_reducer()
    reducer.step = AsyncMock(side_effect=UnknownModel("nope", ["llama3.1:8b"]))

    with (
        patch(_PATCH_CONFIG, return_value=Config()) as mock_load,
        patch(_PATCH_REDUCER, return_value=reducer),
    ):
        result = runner.invoke(
            app,
            ["chat", "-m", "use nope", "--model", "mistral:7b", "--base-url", "http://gpu:11434"],
        )

    assert result.exit_code == 0
    assert "Error:" in result.output
    assert "Model 'nope' not found" in result.output
    overrides = mock_load.call_args.kwargs["overrides"]
    assert overrides["ollama"]["base_url"] == "http://gpu:11434"
    assert overrides["agent"]["default_model"] == "mistral:7b"


def test_chat_ollama_down():
    reducer = _mock_reducer(healthy=False)
    reducer.step = AsyncMock()

    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_REDUCER, return_value=reducer),
    ):
        result = runner.invoke(app, ["chat", "-m", "hi"])

    assert result.exit_code == 1
    assert "Cannot connect to Ollama" in result.output
    reducer.step.assert_not_called()


def test_chat_interactive_exit():
    reducer = _mock_reducer()
    reducer.step = AsyncMock(return_value=(
        MultiplyIntent(a=4, b=5),
        CalculationResult(
            operation="multiplication",
            inputs=CalculationInputs(a=4, b=5),
            result=20,
            message="The multiplication of 4 and 5 is 20.",
        ),
    ))

    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_REDUCER, return_value=reducer),
    ):
        result = runner.invoke(app, ["chat"], input="help\nmultiply 4 by 5\nexit\n")

    assert result.exit_code == 0
    assert "Available commands" in result.output
    assert "The multiplication of 4 and 5 is 20." in result.output
    assert "Bye!" in result.output
    reducer.step.assert_called_once_with("multiply 4 by 5")


def test_models_table():
    installed = [
        OllamaModel(name="llama3.1:8b", size=4_920_000_000, details=OllamaModelDetails(family="llama")),
        OllamaModel(name="mistral:7b", size=4_100_000_000),
    ]
    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_LIST, new_callable=AsyncMock, return_value=installed),
    ):
        result = runner.invoke(app, ["models"])

    assert result.exit_code == 0
    assert "llama3.1:8b" in result.output
    assert "mistral:7b" in result.output
    assert "Recommended by Category" in result.output


def test_models_ollama_down():
    error = CatalogUnavailable("http://localhost:11434", "connection refused")
    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_LIST, new_callable=AsyncMock, side_effect=error),
    ):
        result = runner.invoke(app, ["models"])

    assert result.exit_code == 1
    assert "Failed to connect to Ollama" in result.output


def test_status_output():
    """status shows the Ollama URL, default model and reachability."""
    with (
        patch(_PATCH_CONFIG, return_value=Config()),
        patch(_PATCH_HEALTH, new_callable=AsyncMock, return_value=False),
    ):
        result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "http://localhost:11434" in result.output
    assert "llama3.1:8b" in result.output
    assert "disconnected" in result.output
