"""
hkanno.cli - Typer CLI entry point.

Command-line access to the hkanno text tools: canonical formatting,
checking, XML preview rendering and preview line lookup.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hkanno import __version__
from hkanno.config import CONFIG_FILENAME, create_default_config, resolve_config, write_config
from hkanno.io import read_text, write_text
from hkanno.logging import configure_logging
from hkanno.model import encode_nullable
from hkanno.parser import find_invalid_times, parse_document
from hkanno.serializer import hkanno_to_text

app = typer.Typer(
    name="hkanno",
    help="Havok animation annotation text tools.\n\n"
    "Formats hkanno text, renders the matching hkx XML preview, and maps "
    "text lines to preview lines.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"hkanno {__version__}")
        raise typer.Exit()


def load_text_or_exit(file: str) -> str:
    path = Path(file)
    if not path.is_file():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)
    return read_text(path)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """hkanno - Havok animation annotation text tools."""
    configure_logging(verbose)


@app.command("fmt")
def format_text(
    file: str = typer.Argument(..., help="hkanno text file"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write here instead of in place"),
    check: bool = typer.Option(
        False, "--check", "-c", help="Only report whether the file is already canonical"
    ),
) -> None:
    """Rewrite an hkanno text file in canonical form.

    Header comments are regenerated, times get six decimals and spacing is
    normalized. Track and annotation order is kept.
    """
    text = load_text_or_exit(file)

    config = resolve_config()
    invalid = find_invalid_times(text)
    if config.time_policy == "strict" and invalid:
        lines = ", ".join(str(i.line_number) for i in invalid)
        console.print(f"[red]Error: Invalid annotation time on line(s): {lines}[/red]")
        raise typer.Exit(1)

    canonical = hkanno_to_text(parse_document(text))

    if check:
        if text.rstrip("\n") == canonical:
            console.print(f"[green]✓[/green] Already canonical: {file}")
            return
        console.print(f"[yellow]Would reformat: {file}[/yellow]")
        raise typer.Exit(1)

    output_path = Path(output) if output else Path(file)
    write_text(output_path, canonical + "\n")
    console.print(f"[green]✓[/green] Formatted {output_path}")


@app.command("check")
def check_text(
    file: str = typer.Argument(..., help="hkanno text file"),
) -> None:
    """Show tracks and annotation counts, and report malformed times."""
    text = load_text_or_exit(file)
    hkanno = parse_document(text)

    table = Table(title=f"Annotation Tracks ({Path(file).name})")
    table.add_column("#", style="dim")
    table.add_column("Track", style="cyan")
    table.add_column("Annotations", style="green")

    for i, track in enumerate(hkanno.tracks, 1):
        if track.name is None:
            name = f"[dim]{encode_nullable(None)}[/dim]"
        else:
            name = escape(track.name)
        table.add_row(str(i), name, str(len(track.annotations)))

    console.print(table)
    console.print(
        f"[dim]  frames: {hkanno.num_original_frames}, duration: {hkanno.duration}s, "
        f"annotations: {hkanno.annotation_count}[/dim]"
    )

    invalid = find_invalid_times(text)
    if invalid:
        for item in invalid:
            console.print(
                f"[red]✗[/red] line {item.line_number}: invalid time '{escape(item.token)}'"
            )
        raise typer.Exit(1)

    console.print("\n[green]✓ All annotation times are valid[/green]")


@app.command("preview")
def preview_xml(
    file: str = typer.Argument(..., help="hkanno text file"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write XML to this file"),
    ptr: str = typer.Option("#0001", "--ptr", help="XML index of the animation object"),
) -> None:
    """Render the hkx XML preview of an hkanno text file."""
    from hkanno.backend import MarkupRenderer

    text = load_text_or_exit(file)
    xml = MarkupRenderer().render(parse_document(text, ptr=ptr))

    if output:
        write_text(Path(output), xml + "\n")
        console.print(f"[green]✓[/green] Preview written to {output}")
        return
    print(xml)


@app.command("jump")
def jump_to_preview(
    file: str = typer.Argument(..., help="hkanno text file"),
    line: int = typer.Argument(..., help="1-based line in the text file"),
    markup: str | None = typer.Option(
        None, "--markup", "-m", help="Preview XML (rendered from the text if omitted)"
    ),
) -> None:
    """Show which preview XML line a cursor on LINE would reveal."""
    from hkanno.backend import MarkupRenderer
    from hkanno.lines import split_lines
    from hkanno.sync import SyncController

    text = load_text_or_exit(file)
    xml = load_text_or_exit(markup) if markup else MarkupRenderer().render(parse_document(text))

    lines = split_lines(text)
    if not 1 <= line <= len(lines):
        console.print(f"[red]Error: Line {line} is outside the file (1-{len(lines)})[/red]")
        raise typer.Exit(1)

    config = resolve_config()
    controller = SyncController(strict=config.strict_correlation)
    maps = controller.update_baseline(text, xml)
    if maps.time_status == "diverged" and not maps.time_map:
        console.print("[yellow]Annotations per track diverge; no time line sync[/yellow]")

    target = controller.target_for(line, lines[line - 1])
    if target is None:
        console.print(f"[dim]Line {line} has no matching preview line[/dim]")
        raise typer.Exit(1)

    xml_lines = split_lines(xml)
    console.print(f"{line} → {target}")
    console.print(f"[dim]  {escape(xml_lines[target - 1].strip())}[/dim]")


@app.command("init-config")
def init_config(
    path: str = typer.Option(".", "--path", "-d", help="Directory to write hkanno.yaml in"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default hkanno.yaml."""
    config_path = Path(path) / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[red]Error: {CONFIG_FILENAME} already exists in {path}[/red]")
        raise typer.Exit(1)

    write_config(create_default_config(), config_path)
    console.print(f"[green]✓[/green] Created {config_path}")


if __name__ == "__main__":
    app()
