"""Geotag extraction: one image file in, one GeoPoint (or a failure) out.

This module handles:
- Reading latitude, longitude, altitude and capture time from EXIF
- Converting DMS coordinates to signed decimal degrees
- Turning every per-file error into an ExtractionFailure value

Separation of concerns:
- Pure extraction logic - no track assembly, no output
- extract_geopoint() never raises for unreadable, unrecognized or
  untagged files; orchestration decides how to report them
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from phototrack.coordinates import RawCoordinate, to_decimal_degrees
from phototrack.errors import FailureReason, GeotagError, MissingGeotagError
from phototrack.exif_reader import MetadataReader

# GPS IFD tags
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_ALTITUDE_REF = 5
GPS_ALTITUDE = 6
GPS_TIMESTAMP = 7
GPS_DATESTAMP = 29

# Exif IFD tags
DATETIME_ORIGINAL = 36867
SUBSEC_TIME_ORIGINAL = 37521

TIMESTAMP_SOURCES = ("exif_original", "gps")


@dataclass(frozen=True)
class GeoPoint:
    """A geotagged capture: where and when one photo was taken."""

    latitude: float
    longitude: float
    timestamp: datetime
    altitude: float | None = None
    source: Path | None = None


@dataclass(frozen=True)
class ExtractionFailure:
    """Why one file did not produce a GeoPoint."""

    path: Path
    reason: FailureReason
    detail: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason.value} ({self.detail})"


def _read_coordinate(reader: MetadataReader, value_tag: int, ref_tag: int, axis: str) -> float:
    dms = reader.gps(value_tag)
    ref = reader.gps(ref_tag)
    try:
        raw = RawCoordinate.from_exif(dms, ref)
    except ValueError as e:
        raise MissingGeotagError(f"unusable {axis}: {e}") from e
    return to_decimal_degrees(raw)


def _parse_exif_datetime(value: str) -> datetime:
    # "YYYY:MM:DD HH:MM:SS", sometimes NUL-terminated
    return datetime.strptime(str(value).strip("\x00 "), "%Y:%m:%d %H:%M:%S")


def _read_exif_original_time(reader: MetadataReader) -> datetime:
    """DateTimeOriginal plus SubSecTimeOriginal, as naive camera-local time."""
    try:
        dt = _parse_exif_datetime(reader.exif(DATETIME_ORIGINAL))
    except ValueError as e:
        raise MissingGeotagError(f"unusable DateTimeOriginal: {e}") from e

    subsec = reader.exif_optional(SUBSEC_TIME_ORIGINAL)
    if subsec:
        digits = str(subsec).strip("\x00 ")
        if digits.isdigit():
            dt = dt.replace(microsecond=int(digits[:6].ljust(6, "0")))
    return dt


def _read_gps_time(reader: MetadataReader) -> datetime:
    """GPSDateStamp + GPSTimeStamp, as UTC."""
    datestamp = reader.gps(GPS_DATESTAMP)
    timestamp = reader.gps(GPS_TIMESTAMP)
    try:
        date = datetime.strptime(str(datestamp).strip("\x00 "), "%Y:%m:%d")
        hours, minutes, seconds = (float(part) for part in timestamp)
        return date.replace(tzinfo=timezone.utc) + timedelta(
            hours=hours, minutes=minutes, seconds=seconds
        )
    except (TypeError, ValueError, ZeroDivisionError, OverflowError) as e:
        raise MissingGeotagError(f"unusable GPS date/time stamp: {e}") from e


def _read_altitude(reader: MetadataReader) -> float | None:
    """Altitude in metres, or None if absent or unusable."""
    altitude = reader.gps_optional(GPS_ALTITUDE)
    if altitude is None:
        return None
    try:
        altitude = float(altitude)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if not math.isfinite(altitude):  # nan from a zero denominator
        return None

    # Ref 1 = below sea level; Pillow returns either int or bytes
    ref = reader.gps_optional(GPS_ALTITUDE_REF)
    if isinstance(ref, bytes):
        ref = ref[0] if ref else 0
    if ref == 1:
        altitude = -altitude
    return altitude


def read_geopoint(image_path, timestamp_source: str = "exif_original") -> GeoPoint:
    """Extract a GeoPoint from image EXIF data.

    Args:
        image_path: Path to image file (str or Path)
        timestamp_source: 'exif_original' (DateTimeOriginal, naive local
            time) or 'gps' (GPSDateStamp/GPSTimeStamp, UTC)

    Returns:
        GeoPoint: Coordinates, capture time and optional altitude

    Raises:
        UnreadableFileError: File could not be opened
        UnrecognizedFormatError: Not an image Pillow can decode
        MissingGeotagError: Latitude, longitude or timestamp absent or unusable
        ValueError: Unknown timestamp_source
    """
    if timestamp_source not in TIMESTAMP_SOURCES:
        raise ValueError(
            f"timestamp_source must be one of {TIMESTAMP_SOURCES}, got {timestamp_source!r}"
        )

    path = Path(image_path)
    with MetadataReader.open(path) as reader:
        if not reader.has_gps:
            raise MissingGeotagError("no GPS data in EXIF")

        lat = _read_coordinate(reader, GPS_LATITUDE, GPS_LATITUDE_REF, "latitude")
        lon = _read_coordinate(reader, GPS_LONGITUDE, GPS_LONGITUDE_REF, "longitude")

        if not -90 <= lat <= 90:
            raise MissingGeotagError(f"latitude out of range: {lat}")
        if not -180 <= lon <= 180:
            raise MissingGeotagError(f"longitude out of range: {lon}")

        if timestamp_source == "gps":
            timestamp = _read_gps_time(reader)
        else:
            timestamp = _read_exif_original_time(reader)

        altitude = _read_altitude(reader)

    return GeoPoint(lat, lon, timestamp, altitude=altitude, source=path)


def extract_geopoint(image_path, timestamp_source: str = "exif_original") -> GeoPoint | ExtractionFailure:
    """Extract a GeoPoint, converting per-file errors into a failure value.

    Args:
        image_path: Path to image file (str or Path)
        timestamp_source: See read_geopoint()

    Returns:
        GeoPoint on success, ExtractionFailure (path + reason + detail) if
        the file is unreadable, unrecognized, or lacks geotag data
    """
    try:
        return read_geopoint(image_path, timestamp_source)
    except GeotagError as e:
        return ExtractionFailure(Path(image_path), e.reason, str(e))
