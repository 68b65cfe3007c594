#!/usr/bin/env python3
"""Command-line entry point: photos in, GPX track out.

Orchestration layer over the pure extraction modules:

- **geotag.py / track.py**: extract and sort points, return data
- **gpx_writer.py**: render and write the document
- **cli.py** (this file): argument parsing, config loading, diagnostics

Diagnostics go to stderr through a rich console so the GPX payload on
stdout stays clean and can be piped.

Usage
-----
    phototrack IMG_0001.jpg IMG_0002.jpg --name "Sunday walk" -o walk.gpx

Examples
--------
    # Every photo in a folder, written to stdout
    phototrack ~/Pictures/trip --name Trip > trip.gpx

    # Use GPS satellite time (UTC) instead of camera time
    phototrack ~/Pictures/trip --name Trip --timestamp-source gps -o trip.gpx
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from phototrack.config import load_config
from phototrack.geotag import TIMESTAMP_SOURCES, ExtractionFailure
from phototrack.gpx_writer import render_gpx, write_gpx
from phototrack.track import collect_track, expand_inputs

app = typer.Typer(add_completion=False)
err_console = Console(stderr=True, soft_wrap=True)


def report_failure(failure: ExtractionFailure) -> None:
    err_console.print(f"[red]❌ {escape(str(failure))}[/red]")


@app.command()
def main(
    files: list[Path] = typer.Argument(
        ...,
        help="Image files or directories to read geotags from",
    ),
    name: str = typer.Option(
        ...,
        "--name",
        "-n",
        help="Track name written into the GPX document",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the GPX document to this file instead of stdout",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    timestamp_source: str | None = typer.Option(
        None,
        "--timestamp-source",
        "-t",
        help="Capture time to sort by: exif_original (camera) or gps (UTC)",
    ),
    recursive: bool | None = typer.Option(
        None,
        "--recursive/--no-recursive",
        help="Descend into subdirectories of directory arguments (overrides config)",
    ),
):
    """Build a GPX track from the geotags embedded in photos.

    Files that cannot be read, are not images, or carry no GPS position or
    capture time are reported on stderr and skipped. The track is still
    written when no file succeeds.
    """
    if not name.strip():
        typer.echo("❌ --name must not be empty", err=True)
        raise typer.Exit(1)

    try:
        config_data = load_config(config)
    except FileNotFoundError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from None
    except Exception as e:
        typer.echo(f"❌ Error loading config: {e}", err=True)
        raise typer.Exit(1) from None

    extraction = config_data["extraction"]

    # CLI flags override config
    source = timestamp_source or extraction["timestamp_source"]
    if source not in TIMESTAMP_SOURCES:
        typer.echo(
            f"❌ Invalid --timestamp-source {source!r}; expected one of {', '.join(TIMESTAMP_SOURCES)}",
            err=True,
        )
        raise typer.Exit(1)
    if recursive is None:
        recursive = extraction["recursive"]

    image_paths = expand_inputs(files, extraction["extensions"], recursive)
    track, failures = collect_track(image_paths, source, on_failure=report_failure)

    document = render_gpx(name, track, creator=config_data["output"]["creator"])
    try:
        write_gpx(document, output)
    except OSError as e:
        typer.echo(f"❌ Cannot write GPX output {output}: {e}", err=True)
        raise typer.Exit(1) from None

    summary = f"[green]✅ {len(track)} point(s) written[/green]"
    if output is not None:
        summary += f" [cyan]→ {escape(str(output))}[/cyan]"
    err_console.print(summary)
    if failures:
        err_console.print(f"[yellow]⏭️  Skipped {len(failures)} file(s)[/yellow]")


if __name__ == "__main__":
    app()
