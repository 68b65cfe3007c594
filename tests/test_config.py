"""Tests for configuration loading and validation.

Tests cover:
- Built-in defaults when no config file exists
- YAML loading from explicit and local paths
- Partial configs merging with defaults
- Missing and malformed config handling
- Setting validation
"""

from pathlib import Path

import pytest
import yaml

from phototrack.config import (
    DEFAULT_EXTENSIONS,
    get_default_config_path,
    get_default_settings,
    load_config,
)


class TestDefaults:
    """Test built-in defaults and platform paths."""

    def test_default_settings_structure(self):
        defaults = get_default_settings()

        assert defaults["extraction"]["timestamp_source"] == "exif_original"
        assert defaults["extraction"]["recursive"] is False
        assert defaults["extraction"]["extensions"] == DEFAULT_EXTENSIONS
        assert defaults["output"]["creator"] == "phototrack"

    def test_default_config_path(self):
        config_path = get_default_config_path()

        assert isinstance(config_path, Path)
        assert config_path.name == "config.yaml"
        assert "phototrack" in config_path.parts

    def test_defaults_are_copies(self):
        """Mutating one defaults dict must not leak into the next."""
        get_default_settings()["extraction"]["extensions"].append(".raw")
        assert ".raw" not in get_default_settings()["extraction"]["extensions"]


class TestConfigLoading:
    """Test configuration loading from various sources."""

    def test_load_without_file(self, isolated_config):
        config = load_config()
        assert config == get_default_settings()

    def test_load_local_file(self, isolated_config):
        (isolated_config / "phototrack.yaml").write_text(
            yaml.dump({"extraction": {"timestamp_source": "gps"}})
        )

        config = load_config()

        assert config["extraction"]["timestamp_source"] == "gps"
        # Unspecified keys fall back to defaults
        assert config["extraction"]["recursive"] is False
        assert config["output"]["creator"] == "phototrack"

    def test_explicit_path(self, temp_dir):
        config_file = temp_dir / "custom.yaml"
        config_file.write_text(
            yaml.dump({"extraction": {"recursive": True}, "output": {"creator": "trip-log"}})
        )

        config = load_config(str(config_file))

        assert config["extraction"]["recursive"] is True
        assert config["output"]["creator"] == "trip-log"

    def test_explicit_path_missing(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            load_config(str(temp_dir / "nope.yaml"))

    def test_empty_file(self, temp_dir):
        config_file = temp_dir / "empty.yaml"
        config_file.write_text("")

        assert load_config(config_file) == get_default_settings()

    def test_null_section(self, temp_dir):
        config_file = temp_dir / "null.yaml"
        config_file.write_text("extraction:\noutput:\n")

        assert load_config(config_file) == get_default_settings()

    def test_malformed_yaml(self, temp_dir):
        config_file = temp_dir / "bad.yaml"
        config_file.write_text("extraction: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(config_file)


class TestValidation:
    """Test setting validation."""

    def test_invalid_timestamp_source(self, temp_dir):
        config_file = temp_dir / "bad_source.yaml"
        config_file.write_text(yaml.dump({"extraction": {"timestamp_source": "filesystem"}}))

        with pytest.raises(ValueError, match="timestamp_source"):
            load_config(config_file)

    def test_extensions_normalized(self, temp_dir):
        config_file = temp_dir / "ext.yaml"
        config_file.write_text(yaml.dump({"extraction": {"extensions": ["JPG", ".HEIC"]}}))

        config = load_config(config_file)

        assert config["extraction"]["extensions"] == [".jpg", ".heic"]

    def test_extensions_must_be_list(self, temp_dir):
        config_file = temp_dir / "ext.yaml"
        config_file.write_text(yaml.dump({"extraction": {"extensions": ".jpg"}}))

        with pytest.raises(ValueError):
            load_config(config_file)

    @pytest.mark.parametrize(
        "content,section",
        [("extraction:\n  - .jpg\n", "extraction"), ("output: x\n", "output")],
    )
    def test_section_must_be_mapping(self, temp_dir, content, section):
        config_file = temp_dir / "section.yaml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=f"'{section}' must be a mapping"):
            load_config(config_file)

    def test_top_level_must_be_mapping(self, temp_dir):
        config_file = temp_dir / "list.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ValueError):
            load_config(config_file)
