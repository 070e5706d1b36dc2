"""CLI entrypoints for Outliner."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from outliner.config import Settings, load_settings
from outliner.editor.engine import OutlineEditor
from outliner.logging import configure_logging, get_logger
from outliner.models.snapshot import EditorSnapshot
from outliner.snapshot_io import load_document, write_snapshot

app = typer.Typer(add_completion=False, help="Outline document inspection and search CLI")
logger = get_logger(__name__)
console = Console()


def _settings(timeout_ms: float | None) -> Settings:
    settings = load_settings()
    if timeout_ms is not None:
        settings.search_regex_timeout_ms = timeout_ms
    configure_logging(settings.log_level)
    return settings


def _open_document(path: Path, settings: Settings) -> OutlineEditor:
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}")
    try:
        snapshot = load_document(path)
    except ValidationError as e:
        raise typer.BadParameter(f"Invalid snapshot file {path}: {e.error_count()} error(s)") from e
    editor = OutlineEditor(settings=settings)
    editor.apply_snapshot(snapshot)
    return editor


def _run_search(
    editor: OutlineEditor,
    query: str,
    *,
    regex: bool,
    case_sensitive: bool,
    replacement: str = "",
) -> None:
    search = editor.search
    search.set_options(use_regex=regex, case_sensitive=case_sensitive)
    search.set_replacement(replacement)
    search.open(prefill_selection=False)
    search.set_query(query)
    error = search.state.regex_error
    if error is not None:
        typer.echo(f"{error.kind}: {error.message}", err=True)
        raise typer.Exit(code=1)


@app.command()
def show(
    path: Path = typer.Argument(..., help="Snapshot JSON or indented outline text file"),
    all_lines: bool = typer.Option(False, "--all", help="Include lines hidden under collapsed parents"),
) -> None:
    """Print the outline, honouring collapsed blocks."""

    settings = _settings(None)
    editor = _open_document(path, settings)
    indices = range(editor.line_count()) if all_lines else editor.visible_lines()
    for index in indices:
        line = editor.lines[index]
        if editor.has_children(index):
            marker = "+" if line.collapsed else "-"
        else:
            marker = " "
        body = f"[image {line.attachment.name or line.attachment.src}]" if line.attachment else line.text
        typer.echo(f"{'  ' * line.indent}{marker} {body}")


@app.command()
def search(
    path: Path = typer.Argument(..., help="Snapshot JSON or indented outline text file"),
    query: str = typer.Argument(..., help="Text or regular expression to look for"),
    regex: bool = typer.Option(False, "--regex", "-r", help="Treat QUERY as a regular expression"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", "-c", help="Match case exactly"),
    timeout_ms: float | None = typer.Option(
        None,
        "--timeout-ms",
        help="Regex scan budget in milliseconds (overrides OUTLINER_SEARCH_REGEX_TIMEOUT_MS)",
    ),
) -> None:
    """List every match of QUERY."""

    settings = _settings(timeout_ms)
    editor = _open_document(path, settings)
    _run_search(editor, query, regex=regex, case_sensitive=case_sensitive)

    matches = editor.search.state.matches
    typer.echo(f"{len(matches)} match(es) for {query!r}")
    if not matches:
        return
    table = Table()
    table.add_column("line", justify="right")
    table.add_column("span")
    table.add_column("text")
    table.add_column("groups")
    for match in matches:
        groups = ", ".join("" if g is None else g for g in match.group_values or [])
        table.add_row(str(match.line_index + 1), f"{match.start}-{match.end}", match.text, groups)
    console.print(table)


@app.command()
def replace(
    path: Path = typer.Argument(..., help="Snapshot JSON or indented outline text file"),
    query: str = typer.Argument(..., help="Text or regular expression to replace"),
    replacement: str = typer.Argument(..., help="Replacement; supports $&, $1, $<name> in regex mode"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Snapshot JSON to write (defaults to PATH with a .json suffix)",
    ),
    regex: bool = typer.Option(False, "--regex", "-r", help="Treat QUERY as a regular expression"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", "-c", help="Match case exactly"),
    timeout_ms: float | None = typer.Option(None, "--timeout-ms", help="Regex scan budget in milliseconds"),
) -> None:
    """Replace every match of QUERY and write the resulting snapshot."""

    settings = _settings(timeout_ms)
    editor = _open_document(path, settings)
    _run_search(editor, query, regex=regex, case_sensitive=case_sensitive, replacement=replacement)

    count = editor.search.replace_all()
    editor.search.close()
    target = output or path.with_suffix(".json")
    snapshot: EditorSnapshot = editor.to_snapshot()
    write_snapshot(target, snapshot)
    logger.info("Replace finished: %d replacement(s) -> %s", count, target)
    typer.echo(f"{count} replacement(s) written to {target}")


if __name__ == "__main__":
    app()
