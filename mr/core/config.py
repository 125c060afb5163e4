"""Typed configuration loading.

The configuration file (``.macreleaser.toml``) is parsed once, before the
pipeline starts, into frozen dataclasses. Steps never re-read the file.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .env import substitute_tree
from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_list,
    get_table,
    get_table_list,
)

__all__ = [
    "CONFIG_FILENAME",
    "MAX_CONFIG_BYTES",
    "ArchiveConfig",
    "BuildConfig",
    "CaskConfig",
    "ChangelogConfig",
    "ChangelogFilters",
    "ChangelogGroup",
    "Config",
    "ConfigError",
    "DmgConfig",
    "GitHubConfig",
    "HomebrewConfig",
    "NotarizeConfig",
    "OfficialTapConfig",
    "ProjectConfig",
    "ReleaseConfig",
    "SignConfig",
    "TapConfig",
    "ZipConfig",
    "EXAMPLE_CONFIG",
    "load_config",
]

CONFIG_FILENAME = ".macreleaser.toml"
MAX_CONFIG_BYTES = 1024 * 1024


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    name: str = ""
    scheme: str = ""
    workspace: str = ""


@dataclass(frozen=True, slots=True)
class BuildConfig:
    configuration: str = ""


@dataclass(frozen=True, slots=True)
class SignConfig:
    identity: str = ""


@dataclass(frozen=True, slots=True)
class NotarizeConfig:
    """Apple notary credentials.

    ``password`` is an app-specific password; keep it out of the file and use
    ``env(APPLE_APP_SPECIFIC_PASSWORD)`` instead.
    """

    apple_id: str = ""
    team_id: str = ""
    password: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.apple_id)


@dataclass(frozen=True, slots=True)
class DmgConfig:
    background: str = ""
    icon_size: int = 0


@dataclass(frozen=True, slots=True)
class ZipConfig:
    compression_level: int = 0


@dataclass(frozen=True, slots=True)
class ArchiveConfig:
    formats: tuple[str, ...] = ()
    dmg: DmgConfig = field(default_factory=DmgConfig)
    zip: ZipConfig = field(default_factory=ZipConfig)


@dataclass(frozen=True, slots=True)
class ChangelogFilters:
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ChangelogGroup:
    """A titled changelog section. An empty ``regexp`` makes it a catch-all."""

    title: str
    regexp: str = ""
    order: int = 0

    @property
    def is_catch_all(self) -> bool:
        return self.regexp == ""


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    disable: bool = False
    sort: str = ""
    filters: ChangelogFilters = field(default_factory=ChangelogFilters)
    groups: tuple[ChangelogGroup, ...] = ()


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    owner: str = ""
    repo: str = ""
    draft: bool = False

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    github: GitHubConfig = field(default_factory=GitHubConfig)


@dataclass(frozen=True, slots=True)
class TapConfig:
    owner: str = ""
    name: str = ""
    token: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.owner or self.name or self.token)


@dataclass(frozen=True, slots=True)
class OfficialTapConfig:
    enabled: bool = False
    token: str = ""
    auto_merge: bool = False
    assignees: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CaskConfig:
    name: str = ""
    desc: str = ""
    homepage: str = ""
    license: str = ""


@dataclass(frozen=True, slots=True)
class HomebrewConfig:
    tap: TapConfig = field(default_factory=TapConfig)
    official: OfficialTapConfig = field(default_factory=OfficialTapConfig)
    cask: CaskConfig = field(default_factory=CaskConfig)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    sign: SignConfig = field(default_factory=SignConfig)
    notarize: NotarizeConfig = field(default_factory=NotarizeConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    homebrew: HomebrewConfig = field(default_factory=HomebrewConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a parsed TOML mapping.

        Raises:
            ValueError: Unknown keys are present.
            TypeError: A value has the wrong type.
        """
        _reject_unknown(
            data,
            ("project", "build", "sign", "notarize", "archive", "changelog", "release", "homebrew"),
            "",
        )

        project = _section(data, "project", ("name", "scheme", "workspace"))
        build = _section(data, "build", ("configuration",))
        sign = _section(data, "sign", ("identity",))
        notarize = _section(data, "notarize", ("apple_id", "team_id", "password"))
        archive = _section(data, "archive", ("formats", "dmg", "zip"))
        dmg = _section(archive, "dmg", ("background", "icon_size"), "archive.")
        zip_ = _section(archive, "zip", ("compression_level",), "archive.")
        changelog = _section(data, "changelog", ("disable", "sort", "filters", "groups"))
        filters = _section(changelog, "filters", ("include", "exclude"), "changelog.")
        release = _section(data, "release", ("github",))
        github = _section(release, "github", ("owner", "repo", "draft"), "release.")
        homebrew = _section(data, "homebrew", ("tap", "official", "cask"))
        tap = _section(homebrew, "tap", ("owner", "name", "token"), "homebrew.")
        official = _section(
            homebrew, "official", ("enabled", "token", "auto_merge", "assignees"), "homebrew."
        )
        cask = _section(homebrew, "cask", ("name", "desc", "homepage", "license"), "homebrew.")

        groups: list[ChangelogGroup] = []
        for i, g in enumerate(get_table_list(changelog, "groups")):
            _reject_unknown(g, ("title", "regexp", "order"), f"changelog.groups[{i}].")
            groups.append(
                ChangelogGroup(
                    title=get_str(g, "title"),
                    regexp=get_str(g, "regexp", strip=False),
                    order=get_int(g, "order"),
                )
            )

        return cls(
            project=ProjectConfig(
                name=get_str(project, "name"),
                scheme=get_str(project, "scheme"),
                workspace=get_str(project, "workspace"),
            ),
            build=BuildConfig(configuration=get_str(build, "configuration")),
            sign=SignConfig(identity=get_str(sign, "identity")),
            notarize=NotarizeConfig(
                apple_id=get_str(notarize, "apple_id"),
                team_id=get_str(notarize, "team_id"),
                password=get_str(notarize, "password"),
            ),
            archive=ArchiveConfig(
                formats=get_str_list(archive, "formats"),
                dmg=DmgConfig(
                    background=get_str(dmg, "background"),
                    icon_size=get_int(dmg, "icon_size"),
                ),
                zip=ZipConfig(compression_level=get_int(zip_, "compression_level")),
            ),
            changelog=ChangelogConfig(
                disable=get_bool(changelog, "disable"),
                sort=get_str(changelog, "sort", strip=False),
                filters=ChangelogFilters(
                    include=get_str_list(filters, "include"),
                    exclude=get_str_list(filters, "exclude"),
                ),
                groups=tuple(groups),
            ),
            release=ReleaseConfig(
                github=GitHubConfig(
                    owner=get_str(github, "owner"),
                    repo=get_str(github, "repo"),
                    draft=get_bool(github, "draft"),
                )
            ),
            homebrew=HomebrewConfig(
                tap=TapConfig(
                    owner=get_str(tap, "owner"),
                    name=get_str(tap, "name"),
                    token=get_str(tap, "token"),
                ),
                official=OfficialTapConfig(
                    enabled=get_bool(official, "enabled"),
                    token=get_str(official, "token"),
                    auto_merge=get_bool(official, "auto_merge"),
                    assignees=get_str_list(official, "assignees"),
                ),
                cask=CaskConfig(
                    name=get_str(cask, "name"),
                    desc=get_str(cask, "desc"),
                    homepage=get_str(cask, "homepage"),
                    license=get_str(cask, "license"),
                ),
            ),
        )


def _section(
    parent: Mapping[str, object], key: str, allowed: tuple[str, ...], prefix: str = ""
) -> StrDict:
    table = get_table(parent, key)
    _reject_unknown(table, allowed, f"{prefix}{key}.")
    return table


def _reject_unknown(table: Mapping[str, object], allowed: tuple[str, ...], prefix: str) -> None:
    for key in table:
        if key not in allowed:
            raise ValueError(f"unknown field {prefix}{key}")


def _read_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        if not path.is_file():
            if not path.exists():
                return Err(
                    ConfigError(
                        f"Config file not found: {path}",
                        path=path,
                        hint="Run: macreleaser init",
                    )
                )
            return Err(ConfigError(f"Config path is not a regular file: {path}", path=path))
        if path.stat().st_size > MAX_CONFIG_BYTES:
            return Err(ConfigError("Config file too large: maximum size is 1MB", path=path))
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path, environ: Mapping[str, str] | None = None) -> Result[Config, ConfigError]:
    """Load, substitute ``env(...)`` references and parse the config file.

    Args:
        path: Path to the TOML file.
        environ: Environment used for substitution (defaults to ``os.environ``).

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure.
    """
    raw = _read_toml(path)
    if isinstance(raw, Err):
        return raw

    substituted = substitute_tree(raw.value, environ)
    if isinstance(substituted, Err):
        return Err(
            ConfigError(f"Environment variable substitution failed: {substituted.error}", path=path)
        )

    data = as_str_dict(substituted.value) or {}
    try:
        return Ok(Config.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


EXAMPLE_CONFIG = """\
# macreleaser configuration.
# Values of the form env(NAME) are read from the environment at load time.

[project]
name = "MyApp"
scheme = "MyApp"
# workspace = "MyApp.xcworkspace"

[build]
configuration = "Release"

[sign]
identity = "Developer ID Application: Your Name (TEAM_ID)"

[notarize]
apple_id = "env(APPLE_ID)"
team_id = "env(TEAM_ID)"
password = "env(APPLE_APP_SPECIFIC_PASSWORD)"

[archive]
formats = ["dmg", "zip"]

[archive.dmg]
background = "background.png"
icon_size = 128

[changelog]
sort = "asc"

[changelog.filters]
exclude = ["^docs:", "^test:", "^chore:"]

[[changelog.groups]]
title = "Features"
regexp = "^feat"
order = 0

[[changelog.groups]]
title = "Bug Fixes"
regexp = "^fix"
order = 1

[[changelog.groups]]
title = "Other"
order = 999

[release.github]
owner = "yourname"
repo = "myapp"
draft = false

[homebrew.tap]
owner = "yourname"
name = "homebrew-tap"
token = "env(HOMEBREW_TAP_TOKEN)"

[homebrew.cask]
name = "myapp"
desc = "My awesome macOS application"
homepage = "https://github.com/yourname/myapp"
license = "MIT"
"""
