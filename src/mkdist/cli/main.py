"""mkdist CLI — main entry point and shared utilities."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.group()
@click.version_option(package_name="mkdist")
def main():
    """mkdist — transform a source tree into a dist tree, file by file."""
    pass


def cli():
    """Entrypoint that loads .env before running the CLI."""
    from dotenv import load_dotenv

    load_dotenv()
    main()


# Import subcommand modules to register commands
from mkdist.cli.build_commands import build  # noqa: E402, F401
from mkdist.cli.info_commands import loaders  # noqa: E402, F401

# Register commands
main.add_command(build)
main.add_command(loaders)
