from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from mr.core.config import CONFIG_FILENAME, Config, load_config
from mr.core.errors import ErrorCode
from mr.core.result import Err
from mr.output.console import ConsoleProtocol, RichConsole, Style

CONFIG_ENV = "MACRELEASER_CONFIG"
DEBUG_ENV = "MACRELEASER_DEBUG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    workdir: Path
    config_path: Path
    config: Config
    console: ConsoleProtocol


def config_path(workdir: Path) -> Path:
    """Config file chosen with ``--config``, else ``.macreleaser.toml`` in ``workdir``."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return workdir / CONFIG_FILENAME


def build_console() -> ConsoleProtocol:
    return RichConsole(debug=os.environ.get(DEBUG_ENV) == "1")


def build_context() -> CLIContext:
    workdir = Path.cwd()
    console = build_console()
    path = config_path(workdir)

    console.action("loading configuration")
    result = load_config(path)
    if isinstance(result, Err):
        error = result.error
        console.error(f"Failed to load configuration: {error.message}")
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        code = ErrorCode.USER_ERROR if path.is_file() else ErrorCode.ENV_ERROR
        raise typer.Exit(code=int(code))

    return CLIContext(workdir=workdir, config_path=path, config=result.value, console=console)
