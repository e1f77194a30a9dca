import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from reqcat._concat import concatenate, display_key, format_cycle, relative_name
from reqcat._dependencies import read_dependency_map
from reqcat._errors import InvalidArgumentError
from reqcat._extract import REQUIRE_PATTERN, PatternExtractor
from reqcat._graph import Cycle, DirectedGraph, Order, TopologicalSorter, find_cycle

from .config import ConfigError, ReqcatConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

RootArgument = Annotated[
    Path | None,
    typer.Argument(help="Root directory to scan (defaults to tool.reqcat.root in pyproject.toml)"),
]
PatternOption = Annotated[
    str | None,
    typer.Option("--pattern", help="Regular expression whose first group is a required path"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Order files by their require declarations and concatenate them."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]✗ {escape(message)}[/red]", soft_wrap=True)
    return typer.Exit(code=1)


def _load_config() -> ReqcatConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _resolve_root(root: Path | None, config: ReqcatConfig) -> Path:
    if root is not None:
        return root.resolve()
    if config.root is None:
        msg = "No root directory specified. Provide a ROOT argument or configure [tool.reqcat].root in pyproject.toml."
        raise typer.BadParameter(msg)
    return config.root.resolve()


def _make_extractor(pattern: str | None, config: ReqcatConfig) -> PatternExtractor:
    try:
        return PatternExtractor(
            pattern or config.pattern or REQUIRE_PATTERN,
            encoding=config.encoding or "utf-8",
        )
    except InvalidArgumentError as e:
        raise _fail(str(e)) from e


def _read_map(root: Path, extractor: PatternExtractor, *, invert: bool) -> dict[str, set[str]]:
    try:
        return read_dependency_map(root, invert=invert, extractor=extractor)
    except InvalidArgumentError as e:
        raise _fail(str(e)) from e


def _load_graph(root: Path | None, pattern: str | None, config: ReqcatConfig) -> tuple[Path, DirectedGraph]:
    """Scan the root directory and build a graph whose arcs run from required file to requiring file."""
    resolved_root = _resolve_root(root, config)
    extractor = _make_extractor(pattern, config)

    err_console.print(f"[cyan]Scanning:[/cyan] {escape(str(resolved_root))}", soft_wrap=True)
    dependency_map = _read_map(resolved_root, extractor, invert=True)
    graph = DirectedGraph.from_adjacency(dependency_map)
    logger.debug(f"Built {graph!r}")
    return resolved_root, graph


def _report_cycle(ids: Sequence[str], root: Path) -> None:
    chain = format_cycle([relative_name(file_id, root) for file_id in ids])
    err_console.print("[red]✗ Dependency cycle detected:[/red]")
    err_console.print(f"  {escape(chain)}", soft_wrap=True)


@app.command()
def deps(
    root: RootArgument = None,
    *,
    invert: Annotated[
        bool,
        typer.Option("--invert", help="List the files requiring each file instead of the files it requires"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the dependency map as JSON with absolute paths"),
    ] = False,
    pattern: PatternOption = None,
) -> None:
    """Show the dependency map of a directory."""
    config = _load_config()
    resolved_root = _resolve_root(root, config)
    extractor = _make_extractor(pattern, config)
    dependency_map = _read_map(resolved_root, extractor, invert=invert)

    if as_json:
        data = {file_id: sorted(targets) for file_id, targets in sorted(dependency_map.items())}
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("File", style="bold")
    table.add_column("Required by" if invert else "Requires")

    for file_id, targets in sorted(dependency_map.items()):
        names = sorted(relative_name(target, resolved_root) for target in targets)
        table.add_row(
            escape(relative_name(file_id, resolved_root)),
            escape(", ".join(names)) if names else "[dim]-[/dim]",
        )

    out_console.print(table)
    err_console.print(f"\n[dim]Total: {len(dependency_map)} files[/dim]")


@app.command()
def order(
    root: RootArgument = None,
    *,
    pattern: PatternOption = None,
) -> None:
    """Print the files in processing order, required files first."""
    resolved_root, graph = _load_graph(root, pattern, _load_config())
    sorter = TopologicalSorter(display_key(resolved_root))

    match sorter.sort(graph):
        case Order(ids=ids):
            for file_id in ids:
                out_console.print(escape(relative_name(file_id, resolved_root)), soft_wrap=True)
        case Cycle(ids=ids):
            _report_cycle(ids, resolved_root)
            raise typer.Exit(code=1)


@app.command()
def cycle(
    root: RootArgument = None,
    *,
    pattern: PatternOption = None,
) -> None:
    """Report one dependency cycle, exiting non-zero if there is one."""
    resolved_root, graph = _load_graph(root, pattern, _load_config())
    found = find_cycle(graph)

    if found:
        _report_cycle(found, resolved_root)
        raise typer.Exit(code=1)

    err_console.print("[green]✓ No dependency cycle found[/green]")


@app.command()
def build(
    root: RootArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option(
            "-o",
            "--output",
            help="Path to the concatenated output file (defaults to tool.reqcat.output in pyproject.toml)",
        ),
    ] = None,
    pattern: PatternOption = None,
) -> None:
    """Concatenate the files in processing order into a single output file."""
    config = _load_config()
    if output is None:
        output = config.output
    if output is None:
        msg = "No output file specified. Provide --output or configure [tool.reqcat].output in pyproject.toml."
        raise typer.BadParameter(msg)

    resolved_root, graph = _load_graph(root, pattern, config)
    sorter = TopologicalSorter(display_key(resolved_root))

    match sorter.sort(graph):
        case Order(ids=ids):
            # The output may live under the scanned root; skip a previous build of it
            output_id = str(output.resolve())
            sources = [file_id for file_id in ids if file_id != output_id]
            err_console.print(f"[cyan]Writing {len(sources)} file(s) to:[/cyan] {escape(str(output))}", soft_wrap=True)
            written = concatenate(sources, output)
            err_console.print(f"[green]✓ Wrote {written} bytes[/green]")
        case Cycle(ids=ids):
            _report_cycle(ids, resolved_root)
            raise typer.Exit(code=1)


def main() -> None:
    app()
