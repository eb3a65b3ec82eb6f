#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options_config.py
"""Unit tests for option dataclasses and configuration loading.

Tests cover:
- Option validation and cloning
- Config file discovery and parsing (TOML, YAML, JSON, pyproject.toml)
- Environment variable overrides
- Priority between sources

"""

import dataclasses
import json

import pytest

from richmark.config import (
    env_overrides,
    find_config_in_parents,
    load_config_file,
    load_options,
    merge_configs,
    options_from_config,
)
from richmark.exceptions import ValidationError
from richmark.options import MarkdownParserOptions, MarkdownRendererOptions


@pytest.mark.unit
class TestOptions:
    """Tests for option dataclasses."""

    def test_defaults(self):
        """Test default option values."""
        options = MarkdownRendererOptions()
        assert options.bullet_symbol == "*"
        assert options.emphasis_symbol == "*"
        assert options.strong_symbol == "**"
        assert options.thematic_break == "***"
        assert MarkdownParserOptions().parse_underline is True

    def test_frozen(self):
        """Test options cannot be mutated in place."""
        options = MarkdownRendererOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.bullet_symbol = "-"  # type: ignore[misc]

    def test_create_updated(self):
        """Test cloning with changes leaves the original untouched."""
        options = MarkdownRendererOptions()
        updated = options.create_updated(bullet_symbol="-")
        assert updated.bullet_symbol == "-"
        assert options.bullet_symbol == "*"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"bullet_symbol": "x"},
            {"emphasis_symbol": "**"},
            {"strong_symbol": "*"},
            {"thematic_break": "==="},
            {"code_fence_char": "'"},
            {"code_fence_min": 2},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test out-of-range values are rejected."""
        with pytest.raises(ValueError):
            MarkdownRendererOptions(**kwargs)

    def test_to_dict(self):
        """Test options export their field values."""
        assert MarkdownParserOptions().to_dict() == {"parse_underline": True, "hard_wrap": False}


@pytest.mark.unit
class TestConfigFiles:
    """Tests for configuration file loading."""

    def test_toml(self, tmp_path):
        """Test a TOML config file."""
        path = tmp_path / ".richmark.toml"
        path.write_text('[renderer]\nbullet_symbol = "-"\n', encoding="utf-8")
        assert load_config_file(path) == {"renderer": {"bullet_symbol": "-"}}

    def test_yaml(self, tmp_path):
        """Test a YAML config file."""
        path = tmp_path / ".richmark.yaml"
        path.write_text("parser:\n  parse_underline: false\n", encoding="utf-8")
        assert load_config_file(path) == {"parser": {"parse_underline": False}}

    def test_empty_yaml(self, tmp_path):
        """Test an empty YAML file is an empty config."""
        path = tmp_path / ".richmark.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_json(self, tmp_path):
        """Test a JSON config file."""
        path = tmp_path / ".richmark.json"
        path.write_text(json.dumps({"renderer": {"code_fence_min": 4}}), encoding="utf-8")
        assert load_config_file(path) == {"renderer": {"code_fence_min": 4}}

    def test_pyproject(self, tmp_path):
        """Test the [tool.richmark] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.richmark.renderer]\nemphasis_symbol = "_"\n', encoding="utf-8")
        assert load_config_file(path) == {"renderer": {"emphasis_symbol": "_"}}

    def test_invalid_files(self, tmp_path):
        """Test unparsable, missing and unsupported files raise ValidationError."""
        bad_toml = tmp_path / "bad.toml"
        bad_toml.write_text("[renderer\n", encoding="utf-8")
        bad_json = tmp_path / "bad.json"
        bad_json.write_text("[1, 2]", encoding="utf-8")
        other = tmp_path / "config.ini"
        other.write_text("", encoding="utf-8")

        for path in (bad_toml, bad_json, other, tmp_path / "missing.toml"):
            with pytest.raises(ValidationError):
                load_config_file(path)

    def test_discovery_walks_parents(self, tmp_path):
        """Test discovery finds a config file in a parent directory."""
        config = tmp_path / ".richmark.toml"
        config.write_text("[renderer]\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_in_parents(nested) == config.resolve()

    def test_discovery_skips_pyproject_without_table(self, tmp_path):
        """Test a pyproject.toml without [tool.richmark] is not a config file."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        found = find_config_in_parents(tmp_path)
        assert found is None or found.parent != tmp_path.resolve()


@pytest.mark.unit
class TestConfigResolution:
    """Tests for building options from configuration sources."""

    def test_merge_configs(self):
        """Test nested dictionaries merge with the override winning."""
        merged = merge_configs(
            {"renderer": {"bullet_symbol": "-", "emphasis_symbol": "_"}},
            {"renderer": {"bullet_symbol": "+"}},
        )
        assert merged == {"renderer": {"bullet_symbol": "+", "emphasis_symbol": "_"}}

    def test_options_from_config(self):
        """Test sections map onto option fields."""
        parser_options, renderer_options = options_from_config(
            {"parser": {"hard_wrap": True}, "renderer": {"bullet_symbol": "-"}}
        )
        assert parser_options.hard_wrap is True
        assert renderer_options.bullet_symbol == "-"

    def test_unknown_keys(self):
        """Test unknown sections and fields are rejected."""
        with pytest.raises(ValidationError):
            options_from_config({"renderer": {"bullet": "-"}})
        with pytest.raises(ValidationError):
            options_from_config({"writer": {}})

    def test_invalid_value(self):
        """Test invalid values surface as ValidationError."""
        with pytest.raises(ValidationError):
            options_from_config({"renderer": {"bullet_symbol": "x"}})

    def test_env_overrides(self):
        """Test environment variables are coerced to the field type."""
        environ = {
            "RICHMARK_RENDERER_BULLET_SYMBOL": "-",
            "RICHMARK_RENDERER_CODE_FENCE_MIN": "5",
            "RICHMARK_PARSER_PARSE_UNDERLINE": "no",
            "RICHMARK_CONFIG": "ignored.toml",
            "RICHMARK_OTHER_THING": "ignored",
            "PATH": "/bin",
        }
        assert env_overrides(environ) == {
            "renderer": {"bullet_symbol": "-", "code_fence_min": 5},
            "parser": {"parse_underline": False},
        }

    def test_env_override_errors(self):
        """Test unknown fields and bad values in the environment are rejected."""
        with pytest.raises(ValidationError):
            env_overrides({"RICHMARK_RENDERER_NOPE": "1"})
        with pytest.raises(ValidationError):
            env_overrides({"RICHMARK_PARSER_HARD_WRAP": "maybe"})
        with pytest.raises(ValidationError):
            env_overrides({"RICHMARK_RENDERER_CODE_FENCE_MIN": "four"})

    def test_load_options_priority(self, tmp_path):
        """Test environment overrides beat the config file, which beats defaults."""
        path = tmp_path / "custom.yaml"
        path.write_text("renderer:\n  bullet_symbol: '-'\n  emphasis_symbol: _\n", encoding="utf-8")

        parser_options, renderer_options = load_options(
            path, environ={"RICHMARK_RENDERER_BULLET_SYMBOL": "+"}
        )
        assert renderer_options.bullet_symbol == "+"
        assert renderer_options.emphasis_symbol == "_"
        assert parser_options == MarkdownParserOptions()

    def test_load_options_from_env_path(self, tmp_path):
        """Test RICHMARK_CONFIG names the config file."""
        path = tmp_path / "settings.json"
        path.write_text('{"renderer": {"thematic_break": "---"}}', encoding="utf-8")

        _, renderer_options = load_options(environ={"RICHMARK_CONFIG": str(path)})
        assert renderer_options.thematic_break == "---"

    def test_load_options_discovery(self, tmp_path):
        """Test discovery from a start directory."""
        (tmp_path / ".richmark.toml").write_text('[renderer]\nstrong_symbol = "__"\n', encoding="utf-8")

        _, renderer_options = load_options(start_dir=tmp_path, environ={})
        assert renderer_options.strong_symbol == "__"
