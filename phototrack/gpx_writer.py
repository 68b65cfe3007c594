"""GPX 1.1 serialization of an assembled track.

The document holds one <trk> named after the track, with a single <trkseg>
whose <trkpt> elements appear in the order the track already has. Points
are never re-sorted here.
"""

import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable

from phototrack.geotag import GeoPoint

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
GPX_SCHEMA_LOCATION = f"{GPX_NAMESPACE} http://www.topografix.com/GPX/1/1/gpx.xsd"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def format_time(timestamp: datetime) -> str:
    """ISO 8601 text for <time>.

    UTC timestamps end in 'Z'; naive timestamps are written without an
    offset, which xsd:dateTime allows.
    """
    if timestamp.tzinfo is not None and timestamp.utcoffset() == timedelta(0):
        return timestamp.replace(tzinfo=None).isoformat() + "Z"
    return timestamp.isoformat()


def format_degrees(value: float) -> str:
    # 7 decimal places is about 1 cm at the equator
    return f"{value:.7f}"


def build_gpx(track_name: str, track: Iterable[GeoPoint], creator: str = "phototrack") -> ET.Element:
    """Build the <gpx> element tree for a track.

    Args:
        track_name: Name for <metadata>/<name> and <trk>/<name>
        track: GeoPoints, already in the desired order
        creator: Value of the root creator attribute

    Returns:
        ET.Element: Root <gpx> element
    """
    gpx = ET.Element(
        "gpx",
        {
            "xmlns": GPX_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": GPX_SCHEMA_LOCATION,
            "version": "1.1",
            "creator": creator,
        },
    )

    metadata = ET.SubElement(gpx, "metadata")
    ET.SubElement(metadata, "name").text = track_name

    trk = ET.SubElement(gpx, "trk")
    ET.SubElement(trk, "name").text = track_name
    trkseg = ET.SubElement(trk, "trkseg")

    # GPX 1.1 fixes child order: ele, time, ..., name
    for point in track:
        trkpt = ET.SubElement(
            trkseg,
            "trkpt",
            {"lat": format_degrees(point.latitude), "lon": format_degrees(point.longitude)},
        )
        if point.altitude is not None:
            ET.SubElement(trkpt, "ele").text = f"{point.altitude:.2f}"
        ET.SubElement(trkpt, "time").text = format_time(point.timestamp)
        if point.source is not None:
            ET.SubElement(trkpt, "name").text = Path(point.source).name

    return gpx


def render_gpx(track_name: str, track: Iterable[GeoPoint], creator: str = "phototrack") -> str:
    """Render a track as GPX 1.1 text.

    Args:
        track_name: Track name (required, non-empty)
        track: GeoPoints, already sorted
        creator: Value of the root creator attribute

    Returns:
        str: Complete GPX document, XML declaration included. An empty
        track gives a well-formed document with an empty <trkseg/>.

    Example:
        >>> print(render_gpx("Walk", []))
        <?xml version="1.0" encoding="UTF-8"?>
        <gpx xmlns="http://www.topografix.com/GPX/1/1" ...>
        ...
    """
    gpx = build_gpx(track_name, track, creator)
    ET.indent(gpx, space="  ")
    return XML_DECLARATION + ET.tostring(gpx, encoding="unicode") + "\n"


def write_gpx(text: str, output: Path | str | None = None) -> None:
    """Write a rendered GPX document to a file, or to stdout.

    Args:
        text: Document from render_gpx()
        output: Destination file; None means stdout

    Raises:
        OSError: If the destination cannot be written
    """
    if output is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    Path(output).expanduser().write_text(text, encoding="utf-8")
