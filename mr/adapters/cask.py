"""Homebrew cask rendering."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath
from urllib.parse import quote

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result

__all__ = [
    "CaskData",
    "asset_url",
    "render_cask",
    "select_package",
    "sha256_file",
]


@dataclass(frozen=True, slots=True)
class CaskData:
    """Values interpolated into the cask file.

    Attributes:
        token: cask identifier (e.g. "myapp")
        version: bare version without a leading "v"
        sha256: hex digest of the downloaded archive
        url: direct download URL
        name: human-readable app name
        desc: short description
        homepage: homepage URL
        app_name: ``.app`` bundle name
        license: optional SPDX identifier
    """

    token: str
    version: str
    sha256: str
    url: str
    name: str
    desc: str
    homepage: str
    app_name: str
    license: str = ""


def _check_field(name: str, value: str) -> Result[None, ToolError]:
    # The values land inside Ruby double-quoted strings.
    if any(ch in value for ch in ('"', "\\", "\n", "\r")):
        return Err(
            ToolError(f"invalid {name}: must not contain double quotes, backslashes, or newlines")
        )
    if "#{" in value:
        return Err(ToolError(f"invalid {name}: must not contain Ruby interpolation sequences"))
    return Ok(None)


def render_cask(data: CaskData) -> Result[str, ToolError]:
    fields = {
        "token": data.token,
        "version": data.version,
        "sha256": data.sha256,
        "url": data.url,
        "name": data.name,
        "desc": data.desc,
        "homepage": data.homepage,
        "app_name": data.app_name,
        "license": data.license,
    }
    for name, value in fields.items():
        checked = _check_field(name, value)
        if isinstance(checked, Err):
            return checked

    lines = [
        f'cask "{data.token}" do',
        f'  version "{data.version}"',
        f'  sha256 "{data.sha256}"',
        f'  url "{data.url}"',
        f'  name "{data.name}"',
        f'  desc "{data.desc}"',
        f'  homepage "{data.homepage}"',
    ]
    if data.license:
        lines.append(f'  license "{data.license}"')
    lines += [f'  app "{data.app_name}"', "end"]
    return Ok("\n".join(lines) + "\n")


def asset_url(owner: str, repo: str, tag: str, filename: str) -> str:
    return f"https://github.com/{owner}/{repo}/releases/download/{tag}/{quote(filename, safe='')}"


def select_package(packages: Sequence[str]) -> Result[str, ToolError]:
    """Pick the archive referenced by the cask: ``.zip`` first, then ``.dmg``."""
    for ext in (".zip", ".dmg"):
        for p in packages:
            if PurePath(p).suffix == ext:
                return Ok(p)
    return Err(
        ToolError(
            "no .zip or .dmg package found for Homebrew cask",
            hint="Add zip or dmg to archive.formats",
        )
    )


def sha256_file(path: Path) -> Result[str, ToolError]:
    digest = hashlib.sha256()
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                digest.update(chunk)
    except OSError as e:
        return Err(ToolError(f"failed to compute SHA256 for {path.name}: {e}"))
    return Ok(digest.hexdigest())
