"""Entry point for running linerelay as a module."""

from linerelay.cli.commands import app

if __name__ == "__main__":
    app()
