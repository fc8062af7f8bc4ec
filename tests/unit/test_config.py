#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for configuration file discovery and loading."""

import argparse
import json
import logging

import pytest

from rfcxml.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    options_from_config,
)
from rfcxml.options import Xml2RfcRendererOptions


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at an empty folder."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.mark.unit
class TestLoadConfigFile:
    """Test loading each supported format."""

    def test_toml(self, tmp_path):
        """Test a TOML config file."""
        path = tmp_path / ".rfcxml.toml"
        path.write_text('citation_order = "sorted"\n\n[xml2rfc]\nstandalone = false\n', encoding="utf-8")

        assert load_config_file(path) == {"citation_order": "sorted", "xml2rfc": {"standalone": False}}

    def test_yaml(self, tmp_path):
        """Test a YAML config file."""
        path = tmp_path / ".rfcxml.yaml"
        path.write_text("citation-conflict: first\nvalidate_output: true\n", encoding="utf-8")

        assert load_config_file(path) == {"citation-conflict": "first", "validate_output": True}

    def test_empty_yaml(self, tmp_path):
        """Test that an empty YAML file is an empty config."""
        path = tmp_path / "config.yml"
        path.write_text("", encoding="utf-8")

        assert load_config_file(path) == {}

    def test_json(self, tmp_path):
        """Test a JSON config file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"reference_prefix": "ref."}), encoding="utf-8")

        assert load_config_file(str(path)) == {"reference_prefix": "ref."}

    def test_pyproject_section(self, tmp_path):
        """Test the [tool.rfcxml] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.rfcxml]\ncitation_order = "sorted"\n', encoding="utf-8")

        assert load_config_file(path) == {"citation_order": "sorted"}

    def test_pyproject_without_section(self, tmp_path):
        """Test a pyproject.toml that does not configure rfcxml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n', encoding="utf-8")

        assert load_config_file(path) == {}

    @pytest.mark.parametrize(
        "filename,content,message",
        [
            ("bad.toml", "citation_order = ", "Invalid TOML"),
            ("bad.yaml", "key: [unclosed", "Invalid YAML"),
            ("list.yaml", "- a\n- b\n", "must contain a mapping"),
            ("bad.json", "{", "Invalid JSON"),
            ("list.json", "[1, 2]", "must contain an object"),
            ("config.ini", "[rfcxml]\n", "Unsupported config file format"),
        ],
    )
    def test_invalid_files(self, tmp_path, filename, content, message):
        """Test that unreadable files raise ArgumentTypeError."""
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError, match=message):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        """Test a path that does not exist."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory(self, tmp_path):
        """Test a path that is a directory."""
        with pytest.raises(argparse.ArgumentTypeError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
class TestDiscovery:
    """Test config file discovery."""

    def test_found_in_parent(self, tmp_path):
        """Test that a config in a parent directory is found."""
        config = tmp_path / ".rfcxml.json"
        config.write_text("{}", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config.resolve()

    def test_dedicated_file_preferred_over_pyproject(self, tmp_path):
        """Test precedence within one directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.rfcxml]\nstandalone = false\n", encoding="utf-8")
        config = tmp_path / ".rfcxml.toml"
        config.write_text("", encoding="utf-8")

        assert find_config_in_parents(tmp_path) == config.resolve()

    def test_pyproject_without_section_skipped(self, tmp_path):
        """Test that pyproject.toml only counts with a [tool.rfcxml] table."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        nested = tmp_path / "pkg"
        nested.mkdir()

        found = find_config_in_parents(nested)

        assert found is None or not str(found).startswith(str(tmp_path.resolve()))

    def test_home_directory_fallback(self, tmp_path, isolated_home, monkeypatch):
        """Test the home directory is searched last."""
        config = isolated_home / ".rfcxml.yaml"
        config.write_text("standalone: false\n", encoding="utf-8")
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.setattr("rfcxml.config.find_config_in_parents", lambda start_dir=None: None)

        assert discover_config_file(work) == config


@pytest.mark.unit
class TestLoadConfigWithPriority:
    """Test the order in which config sources are used."""

    def test_explicit_path_wins(self, tmp_path):
        """Test that --config beats the environment variable."""
        explicit = tmp_path / "explicit.json"
        explicit.write_text('{"citation_order": "sorted"}', encoding="utf-8")
        env = tmp_path / "env.json"
        env.write_text('{"citation_order": "insertion"}', encoding="utf-8")

        assert load_config_with_priority(str(explicit), str(env)) == {"citation_order": "sorted"}

    def test_env_path(self, tmp_path):
        """Test the environment variable path."""
        env = tmp_path / "env.json"
        env.write_text('{"standalone": false}', encoding="utf-8")

        assert load_config_with_priority(None, str(env)) == {"standalone": False}

    def test_discovered(self, tmp_path, monkeypatch):
        """Test auto-discovery from the working directory."""
        (tmp_path / ".rfcxml.toml").write_text('reference_prefix = "bib."\n', encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_config_with_priority() == {"reference_prefix": "bib."}

    def test_nothing_found(self, monkeypatch):
        """Test that no config gives an empty dict."""
        monkeypatch.setattr("rfcxml.config.discover_config_file", lambda start_dir=None: None)

        assert load_config_with_priority() == {}


@pytest.mark.unit
class TestOptionsFromConfig:
    """Test building options from config dictionaries."""

    def test_empty(self):
        """Test that an empty config gives the defaults."""
        assert options_from_config({}) == Xml2RfcRendererOptions()

    def test_hyphenated_keys(self):
        """Test that hyphens and underscores are interchangeable."""
        options = options_from_config({"citation-order": "sorted", "reference_prefix": "ref."})

        assert options.citation_order == "sorted"
        assert options.reference_prefix == "ref."

    def test_nested_table_overrides(self):
        """Test that the xml2rfc table wins over top-level keys."""
        options = options_from_config({"citation_conflict": "first", "xml2rfc": {"citation_conflict": "last"}})

        assert options.citation_conflict == "last"

    def test_base_options(self):
        """Test that config is applied on top of given options."""
        base = Xml2RfcRendererOptions(standalone=False)

        assert options_from_config({"citation_order": "sorted"}, base=base).standalone is False

    def test_unknown_keys_warn(self, caplog):
        """Test that unknown keys are skipped with a warning."""
        with caplog.at_level(logging.WARNING, logger="rfcxml.config"):
            options = options_from_config({"page_width": 72})

        assert options == Xml2RfcRendererOptions()
        assert "page_width" in caplog.text

    def test_invalid_value(self):
        """Test that invalid values raise ArgumentTypeError."""
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid configuration"):
            options_from_config({"citation_order": "random"})
