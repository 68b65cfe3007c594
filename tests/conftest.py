"""Pytest fixtures and configuration for phototrack tests.

This module provides shared test fixtures for:
- Temporary directories (auto-cleanup)
- Synthetic JPEG files carrying real EXIF/GPS blocks, written with Pillow
- Isolation from any user-level phototrack config

Fixtures are automatically discovered by pytest and available to all test files.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from PIL import ExifTags, Image

# GPS IFD tags
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_ALTITUDE = 6
GPS_TIMESTAMP = 7
GPS_DATESTAMP = 29

# Exif IFD tags
DATETIME_ORIGINAL = 36867
SUBSEC_TIME_ORIGINAL = 37521


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for file operations.

    Yields:
        Path: Path to temporary directory

    Cleanup:
        Automatically removes directory and all contents
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path

    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def make_image(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a small JPEG with the requested EXIF fields.

    Any field passed as None is left out of the file, which is how tests
    build images with partial or missing geotags.

    Returns:
        Callable: make_image(name, lat=..., lon=..., taken=..., ...) -> Path

    Example:
        def test_something(make_image):
            path = make_image("a.jpg", taken="2024:05:01 10:00:00")
            no_gps = make_image("b.jpg", lat=None, lon=None)
    """

    def _make_image(
        name: str,
        lat=(45, 30, 0),
        lat_ref="N",
        lon=(73, 34, 0),
        lon_ref="W",
        taken="2024:05:01 10:00:00",
        subsec=None,
        altitude=None,
        gps_date=None,
        gps_time=None,
    ) -> Path:
        gps = {}
        if lat is not None:
            gps[GPS_LATITUDE] = lat
        if lat_ref is not None and lat is not None:
            gps[GPS_LATITUDE_REF] = lat_ref
        if lon is not None:
            gps[GPS_LONGITUDE] = lon
        if lon_ref is not None and lon is not None:
            gps[GPS_LONGITUDE_REF] = lon_ref
        if altitude is not None:
            gps[GPS_ALTITUDE] = altitude
        if gps_date is not None:
            gps[GPS_DATESTAMP] = gps_date
        if gps_time is not None:
            gps[GPS_TIMESTAMP] = gps_time

        exif_ifd = {}
        if taken is not None:
            exif_ifd[DATETIME_ORIGINAL] = taken
        if subsec is not None:
            exif_ifd[SUBSEC_TIME_ORIGINAL] = subsec

        exif = Image.Exif()
        if gps:
            exif[ExifTags.IFD.GPSInfo] = gps
        if exif_ifd:
            exif[ExifTags.IFD.Exif] = exif_ifd

        path = temp_dir / name
        image = Image.new("RGB", (8, 8), "white")
        if gps or exif_ifd:
            image.save(path, "JPEG", exif=exif)
        else:
            image.save(path, "JPEG")
        return path

    return _make_image


@pytest.fixture
def isolated_config(temp_dir: Path, monkeypatch) -> Path:
    """Run from an empty directory with no user-level config visible.

    Returns:
        Path: The working directory the test now runs in
    """
    monkeypatch.chdir(temp_dir)
    monkeypatch.setattr(
        "phototrack.config.get_default_config_path",
        lambda: temp_dir / "no-such-dir" / "config.yaml",
    )
    return temp_dir


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests that write real image files"
    )
