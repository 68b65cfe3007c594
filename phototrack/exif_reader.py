"""Read-only access to the EXIF container of one image.

This module handles:
- Opening JPEG, TIFF, PNG, WebP and HEIC files through Pillow
- Locating the Exif sub-IFD and the GPS sub-IFD
- Typed tag lookups that fail with FieldAbsentError when a tag is missing

Separation of concerns:
- Pure extraction logic - no user-facing output
- Raises GeotagError subclasses; the extractor decides what they mean
"""

import struct
import warnings
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from PIL import ExifTags, Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from phototrack.errors import (
    FieldAbsentError,
    MissingGeotagError,
    UnreadableFileError,
    UnrecognizedFormatError,
)

# Register HEIC support
register_heif_opener()


class MetadataReader:
    """Tag lookups over an already-decoded EXIF block.

    Use MetadataReader.open() rather than constructing directly; it owns the
    file handle and closes it when the block exits.
    """

    def __init__(self, exif: Image.Exif):
        self._exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        self._gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
        self.warnings: tuple[str, ...] = ()

    @staticmethod
    def _open_image(path: Path) -> Image.Image:
        # Only metadata is read, pixel data is never decoded, so the
        # decompression bomb limit does not apply here
        limit = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            return Image.open(path)
        except UnidentifiedImageError as e:
            raise UnrecognizedFormatError(f"not a recognized image format ({path.name})") from e
        except OSError as e:
            # FileNotFoundError, IsADirectoryError, PermissionError, ...
            raise UnreadableFileError(e.strerror or str(e)) from e
        finally:
            Image.MAX_IMAGE_PIXELS = limit

    @classmethod
    @contextmanager
    def open(cls, image_path) -> Iterator["MetadataReader"]:
        """Open an image and yield a reader over its EXIF block.

        Warnings Pillow raises while decoding EXIF ("Corrupt EXIF data",
        "Metadata Warning, ...") are captured on reader.warnings and, if
        the geotag turns out to be missing, folded into the error message.

        Args:
            image_path: Path to image file (str or Path)

        Raises:
            UnreadableFileError: File missing, a directory, or not readable
            UnrecognizedFormatError: Pillow cannot identify the content, or
                the EXIF block cannot be decoded
        """
        path = Path(image_path)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            img = cls._open_image(path)
            try:
                exif = img.getexif()
                reader = cls(exif)
            except (SyntaxError, ValueError, struct.error, OSError) as e:
                img.close()
                raise UnrecognizedFormatError(f"corrupt EXIF block: {e}") from e

        reader.warnings = tuple(dict.fromkeys(str(w.message) for w in caught))

        with img:
            try:
                yield reader
            except MissingGeotagError as e:
                if not reader.warnings:
                    raise
                raise MissingGeotagError(
                    f"{e}; EXIF warning: {'; '.join(reader.warnings)}"
                ) from e

    @property
    def has_gps(self) -> bool:
        return bool(self._gps_ifd)

    def exif(self, tag: int) -> Any:
        """Look up a tag in the Exif sub-IFD (DateTimeOriginal, ...)."""
        return self._lookup(self._exif_ifd, tag, ExifTags.TAGS)

    def gps(self, tag: int) -> Any:
        """Look up a tag in the GPS sub-IFD."""
        return self._lookup(self._gps_ifd, tag, ExifTags.GPSTAGS)

    def exif_optional(self, tag: int) -> Any:
        return self._exif_ifd.get(tag)

    def gps_optional(self, tag: int) -> Any:
        return self._gps_ifd.get(tag)

    @staticmethod
    def _lookup(ifd, tag: int, names: dict) -> Any:
        value = ifd.get(tag)
        if value is None or value == "" or value == b"":
            raise FieldAbsentError(names.get(tag, f"tag 0x{tag:04x}"))
        return value
