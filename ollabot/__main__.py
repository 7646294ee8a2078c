"""Entry point for ``python -m ollabot``."""

from ollabot.cli.commands import app

if __name__ == "__main__":
    app()
