"""Build command — mkdist build."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mkdist.cli.main import console
from mkdist.config import get_settings
from mkdist.core.config import DEFAULT_LOADERS, FORMATS


def _parse_alias(ctx: click.Context, param: click.Parameter, value: str | None) -> dict | None:
    """Click callback: decode the --alias JSON object."""
    if value is None:
        return None
    try:
        alias = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON ({e})") from e
    if not isinstance(alias, dict):
        raise click.BadParameter("expected a JSON object mapping source prefixes to dist prefixes")
    return {str(k): str(v) for k, v in alias.items()}


def _split_csv(ctx: click.Context, param: click.Parameter, value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [v.strip() for v in value.split(",") if v.strip()]


@click.command()
@click.argument("dir", default=".", required=False)
@click.option("--cwd", default=None, help="Current working directory")
@click.option("--src", default="src", show_default=True, help="Source directory relative to project root directory")
@click.option("--dist", default="dist", show_default=True, help="Destination directory relative to project root directory")
@click.option("--pattern", multiple=True, help="Pattern includes or excludes (prefix with !) files; repeatable")
@click.option("--alias", default=None, callback=_parse_alias, help='Dist path alias map as JSON, e.g. \'{"components": "ui"}\'')
@click.option("--format", "fmt", type=click.Choice(FORMATS), default="esm", show_default=True, help="Module format")
@click.option("--declaration", "-d", is_flag=True, default=False, help="Generate type declaration files")
@click.option(
    "--declaration-dialect",
    multiple=True,
    help="Only emit declarations for these dialects (ts, js) or extensions; implies -d",
)
@click.option("--ext", default=None, help="File extension (mjs|js|ts)")
@click.option("--jsx", default=None, help="JSX runtime (transform|preserve|automatic)")
@click.option("--jsx-factory", default=None, help="JSX factory (h|React.createElement)")
@click.option("--jsx-fragment", default=None, help="JSX fragment (Fragment|React.Fragment)")
@click.option(
    "--loaders",
    "loader_names",
    default=None,
    callback=_split_csv,
    help=f"Comma-separated loaders, in order (default: {','.join(DEFAULT_LOADERS)})",
)
@click.option("--minify", is_flag=True, default=False, help="Minify output files")
@click.option("--target", default=None, help="Target environment (esbuild)")
@click.option("--concurrency", "-j", default=None, type=int, help="Number of files processed in parallel")
@click.option("--no-clean", is_flag=True, default=False, help="Keep existing files in the dist directory")
@click.option("--log-dir", default=None, type=click.Path(file_okay=False), help="Write a JSONL run log here")
@click.option("--verbose", "-v", count=True, help="Verbosity level: -v per-file, -vv debug details")
def build(
    dir: str,
    cwd: str | None,
    src: str,
    dist: str,
    pattern: tuple[str, ...],
    alias: dict | None,
    fmt: str,
    declaration: bool,
    declaration_dialect: tuple[str, ...],
    ext: str | None,
    jsx: str | None,
    jsx_factory: str | None,
    jsx_fragment: str | None,
    loader_names: list[str] | None,
    minify: bool,
    target: str | None,
    concurrency: int | None,
    no_clean: bool,
    log_dir: str | None,
    verbose: int,
):
    """Transform DIR/src into DIR/dist.

    DIR defaults to the current directory.
    """
    from mkdist.build.runner import make
    from mkdist.core.config import BuildOptions, EsbuildOptions
    from mkdist.core.logging import BuildLogger, Verbosity

    root_dir = (Path(cwd or os.getcwd()) / dir).resolve()
    declaration_setting = list(declaration_dialect) if declaration_dialect else declaration

    try:
        options = BuildOptions.from_dict({
            "root_dir": root_dir,
            "src_dir": src,
            "dist_dir": dist,
            "pattern": list(pattern) or None,
            "alias": alias,
            "format": fmt,
            "ext": ext,
            "declaration": declaration_setting,
            "loaders": loader_names,
            "esbuild": EsbuildOptions(
                jsx=jsx,
                jsx_factory=jsx_factory,
                jsx_fragment=jsx_fragment,
                minify=minify,
                target=target,
            ),
            "clean": not no_clean,
            "concurrency": concurrency or get_settings().concurrency,
        })
    except Exception as e:
        console.print(f"[red]Invalid options:[/red] {escape(str(e))}")
        sys.exit(1)

    if verbose:
        console.print(
            Panel(
                f"[bold]Source:[/bold] {options.src_path}\n"
                f"[bold]Dist:[/bold] {options.dist_path}\n"
                f"[bold]Format:[/bold] {options.format}\n"
                f"[bold]Declarations:[/bold] {_declaration_label(options)}\n"
                f"[bold]Loaders:[/bold] {', '.join(str(ld) for ld in options.loaders)}",
                title="[bold cyan]mkdist[/bold cyan]",
                border_style="cyan",
            )
        )

    build_logger = BuildLogger(
        verbosity=Verbosity(min(verbose, Verbosity.DEBUG)),
        log_dir=Path(log_dir) if log_dir else None,
        console=console,
    )
    try:
        result = make(options, build_logger=build_logger)
    except Exception as e:
        build_logger.close()
        console.print(f"[red]Build failed:[/red] {escape(str(e))}")
        sys.exit(1)

    for path in result.written_files:
        console.print(f"- {path}", markup=False, highlight=False, soft_wrap=True)

    if result.failures:
        table = Table(title="Failed files", box=box.ROUNDED)
        table.add_column("File", style="bold", no_wrap=True)
        table.add_column("Error", style="red")
        for failure in result.failures:
            table.add_row(escape(failure.path), escape(failure.message))
        console.print()
        console.print(table)
        sys.exit(1)


def _declaration_label(options) -> str:
    if not options.emits_declarations:
        return "off"
    if options.declaration is True:
        return "on"
    return ", ".join(sorted(options.declaration_extensions))
