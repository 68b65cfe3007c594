"""Exception hierarchy for geotag extraction.

Every exception raised while reading one image derives from GeotagError and
maps onto a FailureReason. The extractor catches them at the per-file
boundary and turns them into ExtractionFailure values, so none of them ends
a run.
"""

from enum import Enum


class FailureReason(Enum):
    """Why a single file produced no track point."""

    UNREADABLE_FILE = "unreadable file"
    UNRECOGNIZED_FORMAT = "unrecognized format"
    MISSING_GEOTAG = "missing geotag data"


class GeotagError(Exception):
    """Base class for per-file extraction errors."""

    reason: FailureReason = FailureReason.MISSING_GEOTAG


class UnreadableFileError(GeotagError):
    """File could not be opened or read."""

    reason = FailureReason.UNREADABLE_FILE


class UnrecognizedFormatError(GeotagError):
    """Content is not an image/metadata container we can decode."""

    reason = FailureReason.UNRECOGNIZED_FORMAT


class MissingGeotagError(GeotagError):
    """Container parsed, but required geotag fields are absent or unusable."""

    reason = FailureReason.MISSING_GEOTAG


class FieldAbsentError(MissingGeotagError):
    """A specific EXIF tag is not present in the container."""

    def __init__(self, field: str):
        super().__init__(f"{field} not present")
        self.field = field
