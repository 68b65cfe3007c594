"""Track assembly: turn per-file GeoPoints into a time-ordered track.

This module handles:
- Expanding directory arguments into image files
- Extracting one GeoPoint per input file, in input order
- Sorting points by capture time (stable, so ties keep input order)

Separation of concerns:
- No user-facing output - failures go to the caller's on_failure callback
- Serialization lives in gpx_writer.py
"""

from pathlib import Path
from typing import Callable, Iterable

from phototrack.geotag import ExtractionFailure, GeoPoint, extract_geopoint

Track = tuple[GeoPoint, ...]


def assemble_track(points: Iterable[GeoPoint]) -> Track:
    """Sort points ascending by timestamp.

    sorted() is stable, so points with equal timestamps stay in the order
    they were supplied (input-file order).

    Args:
        points: GeoPoints in any order

    Returns:
        Track: Tuple of GeoPoints sorted by timestamp (empty for no points)
    """
    return tuple(sorted(points, key=lambda point: point.timestamp))


def expand_inputs(paths: Iterable, extensions: Iterable[str], recursive: bool = False) -> list[Path]:
    """Expand directory arguments into the image files they contain.

    File arguments pass through untouched (even with an unknown suffix, so
    the extractor can report them). Directory contents are filtered by
    extension and sorted by name.

    Args:
        paths: File and directory paths, in command-line order
        extensions: Lowercase suffixes to keep, e.g. ['.jpg', '.heic']
        recursive: Descend into subdirectories

    Returns:
        list[Path]: Files to process, preserving argument order
    """
    suffixes = {ext.lower() for ext in extensions}
    files = []
    for path in map(Path, paths):
        if path.is_dir():
            pattern = "**/*" if recursive else "*"
            files.extend(
                sorted(
                    f for f in path.glob(pattern)
                    if f.is_file() and f.suffix.lower() in suffixes
                )
            )
        else:
            files.append(path)
    return files


def collect_track(
    image_paths: Iterable,
    timestamp_source: str = "exif_original",
    on_failure: Callable[[ExtractionFailure], None] | None = None,
) -> tuple[Track, list[ExtractionFailure]]:
    """Extract every image and assemble the successes into a track.

    Files are processed one at a time; each is closed before the next is
    opened. A failing file is reported through on_failure and skipped.

    Args:
        image_paths: Image files, in input order
        timestamp_source: 'exif_original' or 'gps' (see geotag.read_geopoint)
        on_failure: Called once per failed file, as soon as it fails

    Returns:
        tuple: (track, failures) - the sorted track and every failure in
        input order
    """
    points = []
    failures = []

    for image_path in image_paths:
        result = extract_geopoint(image_path, timestamp_source)
        if isinstance(result, ExtractionFailure):
            failures.append(result)
            if on_failure is not None:
                on_failure(result)
        else:
            points.append(result)

    return assemble_track(points), failures
