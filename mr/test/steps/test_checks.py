"""Tests for the validation-stage checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from mr.core.result import Err, Ok, Skip
from mr.steps import (
    ArchiveCheck,
    BuildCheck,
    ChangelogCheck,
    HomebrewCheck,
    NotarizeCheck,
    ProjectCheck,
    ReleaseCheck,
    SignCheck,
    default_pipeline,
)
from mr.test.steps.support import VALID_CONFIG, console_of, make_context, with_section


def _error(result: object) -> str:
    assert isinstance(result, Err)
    return result.error.message


class TestProjectCheck:
    def test_valid(self, tmp_path: Path) -> None:
        assert ProjectCheck().execute(make_context(tmp_path)) == Ok(None)

    def test_name_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "project", {"scheme": "MyApp"})
        assert _error(ProjectCheck().execute(make_context(tmp_path, data))) == "project.name is required"

    def test_scheme_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "project", {"name": "MyApp"})
        assert _error(ProjectCheck().execute(make_context(tmp_path, data))) == "project.scheme is required"

    def test_unresolved_env_reported_first(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "project", {"name": "env(APP_NAME)"})
        message = _error(ProjectCheck().execute(make_context(tmp_path, data)))
        assert message == "project.name: environment variable APP_NAME is not set"

    @pytest.mark.parametrize("name", ["../MyApp", "/abs/MyApp"])
    def test_path_traversal_rejected(self, tmp_path: Path, name: str) -> None:
        data = with_section(VALID_CONFIG, "project", {"name": name, "scheme": "MyApp"})
        assert "path traversal" in _error(ProjectCheck().execute(make_context(tmp_path, data)))


def test_build_check(tmp_path: Path) -> None:
    assert BuildCheck().execute(make_context(tmp_path)) == Ok(None)
    data = with_section(VALID_CONFIG, "build", {})
    assert _error(BuildCheck().execute(make_context(tmp_path, data))) == "build.configuration is required"


def test_sign_check(tmp_path: Path) -> None:
    assert SignCheck().execute(make_context(tmp_path)) == Ok(None)
    data = with_section(VALID_CONFIG, "sign", {})
    assert _error(SignCheck().execute(make_context(tmp_path, data))) == "sign.identity is required"


class TestNotarizeCheck:
    def test_valid(self, tmp_path: Path) -> None:
        assert NotarizeCheck().execute(make_context(tmp_path)) == Ok(None)

    def test_skipped(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "notarize", {})
        result = NotarizeCheck().execute(make_context(tmp_path, data, skip_notarize=True))
        assert result == Skip("notarization skipped via --skip-notarize")

    def test_unresolved_password(self, tmp_path: Path) -> None:
        data = with_section(
            VALID_CONFIG,
            "notarize",
            {"apple_id": "a", "team_id": "t", "password": "env(APPLE_APP_SPECIFIC_PASSWORD)"},
        )
        result = NotarizeCheck().execute(make_context(tmp_path, data))
        assert isinstance(result, Err)
        assert "APPLE_APP_SPECIFIC_PASSWORD" in result.error.message
        assert result.error.hint == "export APPLE_APP_SPECIFIC_PASSWORD=..."

    def test_team_id_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "notarize", {"apple_id": "a", "password": "p"})
        assert _error(NotarizeCheck().execute(make_context(tmp_path, data))) == "notarize.team_id is required"


class TestArchiveCheck:
    def test_valid(self, tmp_path: Path) -> None:
        assert ArchiveCheck().execute(make_context(tmp_path)) == Ok(None)

    def test_formats_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "archive", {"formats": []})
        assert "archive.formats" in _error(ArchiveCheck().execute(make_context(tmp_path, data)))

    def test_unknown_format(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "archive", {"formats": ["zip", "pkg"]})
        assert _error(ArchiveCheck().execute(make_context(tmp_path, data))) == "invalid archive.formats: pkg"


class TestChangelogCheck:
    def test_valid_has_no_warning(self, tmp_path: Path) -> None:
        ctx = make_context(tmp_path)
        assert ChangelogCheck().execute(ctx) == Ok(None)
        assert not console_of(ctx).has_warning()

    def test_disabled_skips(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "changelog", {"disable": True, "sort": "sideways"})
        assert ChangelogCheck().execute(make_context(tmp_path, data)) == Skip("changelog disabled")

    def test_invalid_sort(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "changelog", {"sort": "newest"})
        assert "changelog.sort" in _error(ChangelogCheck().execute(make_context(tmp_path, data)))

    def test_group_title_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "changelog", {"groups": [{"regexp": "^feat"}]})
        message = _error(ChangelogCheck().execute(make_context(tmp_path, data)))
        assert message == "changelog.groups[0]: title is required"

    def test_invalid_pattern_names_source(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "changelog", {"filters": {"exclude": ["(docs"]}})
        message = _error(ChangelogCheck().execute(make_context(tmp_path, data)))
        assert message.startswith("changelog.filters.exclude: invalid regexp '(docs'")

    def test_warns_without_catch_all(self, tmp_path: Path) -> None:
        data = with_section(
            VALID_CONFIG, "changelog", {"groups": [{"title": "Features", "regexp": "^feat"}]}
        )
        ctx = make_context(tmp_path, data)
        assert ChangelogCheck().execute(ctx) == Ok(None)
        assert console_of(ctx).find("no catch-all group")


class TestReleaseCheck:
    def test_valid(self, tmp_path: Path) -> None:
        assert ReleaseCheck().execute(make_context(tmp_path)) == Ok(None)

    def test_skipped(self, tmp_path: Path) -> None:
        result = ReleaseCheck().execute(make_context(tmp_path, skip_publish=True))
        assert result == Skip("publishing skipped")

    def test_owner_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "release", {"github": {"repo": "myapp"}})
        assert _error(ReleaseCheck().execute(make_context(tmp_path, data))) == "release.github.owner is required"


class TestHomebrewCheck:
    def test_valid_without_tap(self, tmp_path: Path) -> None:
        assert HomebrewCheck().execute(make_context(tmp_path)) == Ok(None)

    def test_skipped(self, tmp_path: Path) -> None:
        result = HomebrewCheck().execute(make_context(tmp_path, skip_publish=True))
        assert result == Skip("homebrew publishing skipped")

    def test_cask_desc_required(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "homebrew", {"cask": {"name": "myapp", "homepage": "x"}})
        assert _error(HomebrewCheck().execute(make_context(tmp_path, data))) == "homebrew.cask.desc is required"

    def test_partial_tap_requires_all_fields(self, tmp_path: Path) -> None:
        data = with_section(
            VALID_CONFIG,
            "homebrew",
            {
                "cask": {"name": "myapp", "desc": "d", "homepage": "h"},
                "tap": {"owner": "jane", "name": "homebrew-tap"},
            },
        )
        assert _error(HomebrewCheck().execute(make_context(tmp_path, data))) == "homebrew.tap.token is required"


class TestDefaultPipeline:
    def test_validation_order(self) -> None:
        names = [s.name for s in default_pipeline().validation]
        assert names == [
            "validating project configuration",
            "validating build configuration",
            "validating signing configuration",
            "validating notarization configuration",
            "validating archive configuration",
            "validating changelog configuration",
            "validating release configuration",
            "validating homebrew configuration",
        ]

    def test_execution_order(self) -> None:
        names = [s.name for s in default_pipeline().execution]
        assert names == [
            "building project",
            "signing application",
            "notarizing application",
            "packaging archives",
            "generating changelog",
            "publishing GitHub release",
            "generating Homebrew cask",
        ]

    def test_valid_config_passes_validation(self, tmp_path: Path) -> None:
        ctx = make_context(tmp_path)
        assert default_pipeline().run_validation(ctx) == Ok(None)
        assert len(console_of(ctx).actions()) == 8

    def test_invalid_config_never_builds(self, tmp_path: Path) -> None:
        data = with_section(VALID_CONFIG, "sign", {})
        ctx = make_context(tmp_path, data)
        result = default_pipeline().run_all(ctx)
        assert isinstance(result, Err)
        assert str(result.error) == "validating signing configuration: sign.identity is required"
        assert "building project" not in console_of(ctx).actions()
        assert not (tmp_path / "dist").exists()
