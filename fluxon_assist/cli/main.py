#!/usr/bin/env python3
"""Command line entry point for Fluxon Assist."""

import sys
from pathlib import Path

import click
from rich.console import Console

from ..core.config import Settings, configure_logging
from ..core.types import DocumentKind, rank
from ..core.user_functions import split_lines
from ..main import build_services
from .console_app import ConsoleApp, candidates_table


def _settings(catalog: str | None, trace: str | None) -> Settings:
    overrides: dict[str, str] = {}
    if catalog is not None:
        overrides["catalog_path"] = catalog
    if trace is not None:
        overrides["trace"] = trace
    return Settings(**overrides)  # type: ignore[arg-type]


@click.group()
@click.option("--catalog", help="Catalog file path (overrides FLUXON_CATALOG_PATH)")
@click.option("--trace", type=click.Choice(["off", "basic", "verbose"]), help="Log verbosity")
@click.pass_context
def main(ctx: click.Context, catalog: str | None, trace: str | None):
    """Fluxon Assist - completion engine for the Fluxon scripting language."""
    cfg = _settings(catalog, trace)
    configure_logging(cfg)
    ctx.obj = cfg


@main.command()
@click.option("--host", help="Bind address")
@click.option("--port", type=int, help="Bind port")
@click.pass_obj
def serve(cfg: Settings, host: str | None, port: int | None):
    """Run the HTTP completion service."""
    from ..main import run

    if host is not None:
        cfg.host = host
    if port is not None:
        cfg.port = port
    run(cfg)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=int)
@click.argument("column", type=int)
@click.option("--language", type=click.Choice([k.value for k in DocumentKind]), default=None)
@click.pass_obj
def complete(cfg: Settings, file: Path, line: int, column: int, language: str | None):
    """Print completions for FILE at 1-based LINE and 0-based COLUMN."""
    console = Console()
    store, extractor, provider = build_services(cfg)
    if not store.is_loaded():
        console.print("[red]No function catalog could be loaded.[/red]")
        sys.exit(1)

    text = file.read_text(encoding="utf-8")
    lines = split_lines(text)
    if not 1 <= line <= max(len(lines), 1):
        console.print(f"[red]Line {line} is outside the file ({len(lines)} lines).[/red]")
        sys.exit(1)

    kind = language or (DocumentKind.YAML.value if file.suffix in (".yml", ".yaml") else DocumentKind.FLUXON.value)
    document_id = str(file.resolve())
    if kind == DocumentKind.FLUXON:
        extractor.update_cache(document_id, text)

    current = lines[line - 1] if lines else ""
    candidates = rank(provider.provide(document_id, current, column, kind))
    if not candidates:
        console.print("[dim]No completions.[/dim]")
        return
    console.print(candidates_table(candidates))


@main.command()
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def repl(cfg: Settings, file: Path | None):
    """Interactive scratchpad with live completion."""
    try:
        store, extractor, provider = build_services(cfg)
        ConsoleApp(cfg, store, extractor, provider, initial_file=file).run()
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        print(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
