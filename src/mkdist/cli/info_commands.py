"""Info commands — mkdist loaders."""

from __future__ import annotations

import click
from rich import box
from rich.table import Table

from mkdist.cli.main import console


@click.command()
def loaders():
    """List registered loaders and external tool availability."""
    from mkdist.build.chain import Toolchain
    from mkdist.build.tools import Unavailable
    from mkdist.core.config import DEFAULT_LOADERS
    from mkdist.loaders import available_loaders

    table = Table(title="Loaders", box=box.ROUNDED)
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Default", justify="center")
    table.add_column("Description")

    for name, cls in available_loaders().items():
        doc = (cls.__doc__ or "").strip().splitlines()
        table.add_row(
            name,
            "[green]yes[/green]" if name in DEFAULT_LOADERS else "[dim]no[/dim]",
            doc[0] if doc else "",
        )
    console.print(table)

    toolchain = Toolchain()
    tools = [
        toolchain.transformer.tool,
        toolchain.declarations.tool,
        toolchain.stylesheets.tool,
    ]
    tool_table = Table(title="External tools", box=box.ROUNDED)
    tool_table.add_column("Tool", style="bold")
    tool_table.add_column("Command")
    tool_table.add_column("Status")
    for tool in tools:
        status = tool.resolve()
        if isinstance(status, Unavailable):
            label = f"[yellow]missing[/yellow] ({status.reason})"
        else:
            label = f"[green]found[/green] {' '.join(status.command)}"
        tool_table.add_row(tool.name, tool.command, label)
    console.print(tool_table)
