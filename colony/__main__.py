"""Entry point for running colony as a module."""

from colony.cli import app

if __name__ == "__main__":
    app()
