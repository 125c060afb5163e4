"""Tests for configuration loading."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from mr.changelog.generator import generate
from mr.core.config import (
    EXAMPLE_CONFIG,
    MAX_CONFIG_BYTES,
    ChangelogGroup,
    Config,
    load_config,
)
from mr.core.result import Err, Ok


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / ".macreleaser.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        config = Config.from_dict({})
        assert config.project.name == ""
        assert config.archive.formats == ()
        assert config.changelog.groups == ()
        assert config.notarize.configured is False
        assert config.homebrew.tap.configured is False

    def test_full_sections(self) -> None:
        config = Config.from_dict(
            {
                "project": {"name": "MyApp", "scheme": "MyApp", "workspace": "MyApp.xcworkspace"},
                "build": {"configuration": "Release"},
                "archive": {"formats": ["dmg", "zip"], "dmg": {"icon_size": 128}},
                "changelog": {
                    "sort": "asc",
                    "filters": {"exclude": ["^docs:"]},
                    "groups": [{"title": "Features", "regexp": "^feat", "order": 1}],
                },
                "release": {"github": {"owner": "me", "repo": "myapp", "draft": True}},
                "homebrew": {"tap": {"owner": "me"}},
            }
        )
        assert config.project.workspace == "MyApp.xcworkspace"
        assert config.build.configuration == "Release"
        assert config.archive.formats == ("dmg", "zip")
        assert config.archive.dmg.icon_size == 128
        assert config.changelog.filters.exclude == ("^docs:",)
        assert config.changelog.groups == (ChangelogGroup("Features", "^feat", 1),)
        assert config.release.github.slug == "me/myapp"
        assert config.release.github.draft is True
        assert config.homebrew.tap.configured is True

    def test_unknown_top_level_table_rejected(self) -> None:
        with pytest.raises(ValueError, match="unknown field signing"):
            Config.from_dict({"signing": {}})

    def test_unknown_nested_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="unknown field release.github.token"):
            Config.from_dict({"release": {"github": {"token": "x"}}})

    def test_unknown_group_key_rejected(self) -> None:
        with pytest.raises(ValueError, match=r"changelog.groups\[0\].pattern"):
            Config.from_dict({"changelog": {"groups": [{"title": "x", "pattern": "y"}]}})

    def test_wrong_type_rejected(self) -> None:
        with pytest.raises(TypeError, match="formats must be a list of strings"):
            Config.from_dict({"archive": {"formats": "zip"}})

    def test_catch_all_group(self) -> None:
        assert ChangelogGroup(title="Other").is_catch_all
        assert not ChangelogGroup(title="Fixes", regexp="^fix").is_catch_all

    def test_whitespace_regexp_is_kept_verbatim(self) -> None:
        config = Config.from_dict(
            {
                "changelog": {
                    "groups": [
                        {"title": "Spaced", "regexp": " ", "order": 0},
                        {"title": "Fixes", "regexp": "fix ", "order": 1},
                    ]
                }
            }
        )
        spaced, fixes = config.changelog.groups
        assert spaced.regexp == " "
        assert not spaced.is_catch_all
        assert fixes.regexp == "fix "

    def test_whitespace_regexp_does_not_absorb_commits(self) -> None:
        config = Config.from_dict(
            {"changelog": {"groups": [{"title": "Spaced", "regexp": " ", "order": 0}]}}
        )
        assert generate("v1", ["nospace", "has space"], config.changelog) == Ok(
            "## v1\n\n### Spaced\n\n- has space\n"
        )

    def test_sort_is_not_stripped(self) -> None:
        config = Config.from_dict({"changelog": {"sort": " asc"}})
        assert config.changelog.sort == " asc"

    def test_plain_fields_are_stripped(self) -> None:
        config = Config.from_dict({"project": {"name": "  MyApp "}})
        assert config.project.name == "MyApp"


class TestLoadConfig:
    def test_loads_example(self, tmp_path: Path) -> None:
        path = _write(tmp_path, EXAMPLE_CONFIG)
        result = load_config(path, environ={})
        assert isinstance(result, Ok)
        config = result.value
        assert config.project.name == "MyApp"
        assert config.archive.formats == ("dmg", "zip")
        assert [g.title for g in config.changelog.groups] == ["Features", "Bug Fixes", "Other"]
        # unset variables stay as references for the validation stage
        assert config.notarize.password == "env(APPLE_APP_SPECIFIC_PASSWORD)"

    def test_substitutes_environment(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[notarize]\napple_id = "env(APPLE_ID)"\n')
        result = load_config(path, environ={"APPLE_ID": "dev@example.com"})
        assert isinstance(result, Ok)
        assert result.value.notarize.apple_id == "dev@example.com"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message
        assert result.error.hint == "Run: macreleaser init"

    def test_directory_is_not_a_config(self, tmp_path: Path) -> None:
        result = load_config(tmp_path)
        assert isinstance(result, Err)
        assert "not a regular file" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[project\nname=")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML syntax" in result.error.message

    def test_too_large(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "# " + "x" * MAX_CONFIG_BYTES + "\n")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "too large" in result.error.message

    def test_unknown_field_is_structure_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[project]\nnme = 'typo'\n")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message
        assert "project.nme" in result.error.message

    def test_control_characters_in_env_rejected(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[sign]\nidentity = "env(ID)"\n')
        result = load_config(path, environ={"ID": "bad\x1bvalue"})
        assert isinstance(result, Err)
        assert "substitution failed" in result.error.message


def test_example_config_is_valid_toml() -> None:
    data = tomllib.loads(EXAMPLE_CONFIG)
    assert data["project"]["name"] == "MyApp"
