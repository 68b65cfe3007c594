"""Configuration management for phototrack.

This module handles loading optional settings from YAML files, using
platformdirs to find the per-user config location. Configuration is
optional; sensible defaults are provided so the command works with no
file at all.

Design Principles:
    - Optional configuration: Works out-of-the-box with built-in defaults
    - Cross-platform: Uses platformdirs for XDG/macOS/Windows compatibility
    - Flexible: Partial configs merge with defaults
    - CLI flags override whatever is loaded here
"""

from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_dir

from phototrack.geotag import TIMESTAMP_SOURCES

APP_NAME = "phototrack"
LOCAL_CONFIG_NAME = "phototrack.yaml"

DEFAULT_EXTENSIONS = [".jpg", ".jpeg", ".tif", ".tiff", ".heic", ".heif", ".png", ".webp"]


def get_default_config_path() -> Path:
    """Get platform-appropriate config file location.

    Returns default config file path using platformdirs:
    - Linux: ~/.config/phototrack/config.yaml
    - macOS: ~/Library/Application Support/phototrack/config.yaml
    - Windows: %APPDATA%/phototrack/config.yaml

    Returns:
        Path: Platform-specific config file location.
    """
    config_dir = Path(user_config_dir(APP_NAME, appauthor=False))
    return config_dir / "config.yaml"


def get_default_settings() -> dict[str, dict[str, Any]]:
    """Built-in defaults, one dict per config section."""
    return {
        "extraction": {
            "timestamp_source": "exif_original",
            "recursive": False,
            "extensions": list(DEFAULT_EXTENSIONS),
        },
        "output": {
            "creator": APP_NAME,
        },
    }


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file, merged over built-in defaults.

    Args:
        config_path (Optional[str]): Path to YAML config file. If None, attempts:
            1. ./phototrack.yaml (current directory)
            2. Platform-specific config directory via platformdirs
            If neither exists, built-in defaults are used.

    Returns:
        Dict[str, Any]: Configuration dictionary with structure:
            {
                'extraction': {
                    'timestamp_source': 'exif_original' | 'gps',
                    'recursive': bool,
                    'extensions': list[str]
                },
                'output': {
                    'creator': str
                }
            }

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
        yaml.YAMLError: If config file is malformed.
        ValueError: If a setting has an invalid value.

    Example:
        >>> config = load_config()  # Auto-detects config location
        >>> config['extraction']['timestamp_source']
        'exif_original'
    """
    # Determine which config file to use
    if config_path:
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Specified config path does not exist."
            )
    else:
        local_config = Path(LOCAL_CONFIG_NAME)
        system_config = get_default_config_path()

        if local_config.exists():
            config_file = local_config
        elif system_config.exists():
            config_file = system_config
        else:
            config_file = None

    if config_file:
        try:
            with open(config_file) as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(
                f"Error parsing config file {config_file}:\n{e}\n\n"
                f"Check YAML syntax - common issues:\n"
                f"- Incorrect indentation (use 2 spaces)\n"
                f"- Missing colons after keys\n"
                f"- Unquoted special characters"
            ) from e
    else:
        config = {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping at the top level")

    # Merge with defaults (user config takes precedence)
    for section, defaults in get_default_settings().items():
        if config.get(section) is None:
            config[section] = {}
        elif not isinstance(config[section], dict):
            raise ValueError(
                f"Config section '{section}' must be a mapping, got {config[section]!r}"
            )
        for key, default_value in defaults.items():
            config[section].setdefault(key, default_value)

    validate_config(config)
    return config


def validate_config(config: dict[str, Any]) -> None:
    """Check setting values, normalizing extensions in place.

    Raises:
        ValueError: If timestamp_source is unknown or extensions is not a list.
    """
    extraction = config["extraction"]

    source = extraction["timestamp_source"]
    if source not in TIMESTAMP_SOURCES:
        raise ValueError(
            f"Invalid extraction.timestamp_source: {source!r}\n"
            f"Expected one of: {', '.join(TIMESTAMP_SOURCES)}"
        )

    extensions = extraction["extensions"]
    if not isinstance(extensions, list):
        raise ValueError(f"extraction.extensions must be a list, got {extensions!r}")
    extraction["extensions"] = [
        ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in map(str, extensions)
    ]
