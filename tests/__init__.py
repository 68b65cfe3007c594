"""Test suite for phototrack.

Test Structure:
    - test_coordinates.py: DMS to decimal degree conversion
    - test_geotag.py: EXIF geotag extraction and failure categories
    - test_track.py: Input expansion, extraction loop and time ordering
    - test_gpx_writer.py: GPX rendering and output
    - test_config.py: Configuration loading and validation
    - test_cli.py: End-to-end runs through the typer command

Fixtures defined in conftest.py provide:
    - Synthetic JPEGs with real EXIF/GPS blocks
    - Temporary directories
    - Isolation from user-level config files

Run tests:
    pytest                                    # Run all tests
    pytest tests/test_geotag.py               # Run specific test file
    pytest --cov=phototrack --cov-report=term-missing  # With coverage
    pytest -k "gpx"                           # Run tests matching pattern
"""
