"""terrax: browse Terragrunt stacks in columns and run a command on the selection."""

from __future__ import annotations

__version__ = "0.4.0"

__all__ = ["__version__", "main"]


def main(argv=None, cwd=None):
    """Run the CLI; ``terrax.cli`` is only imported on first call."""
    from .cli import main as cli_main

    return cli_main(argv, cwd)
