# src/svcwatch/__main__.py
"""Allows `python -m svcwatch`, which is how the scheduled task invokes us."""

from .cli import run_cli

if __name__ == "__main__":
    run_cli()
