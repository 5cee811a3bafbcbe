"""Command-line interface for the guitar tuner."""

# Import the CLI entry point for easier access
from .main import main as cli_main

__all__ = ["cli_main"]
