"""``xcodebuild archive`` invocation and workspace/project detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result
from mr.platform.process import require_tool
from mr.platform.process import run as run_process

__all__ = [
    "ArchiveArgs",
    "DetectedProject",
    "ProjectKind",
    "archive_args",
    "detect_project",
    "project_kind_for",
    "run_archive",
]

_XCODE_HINT = "Install Xcode Command Line Tools with: xcode-select --install"


class ProjectKind(Enum):
    WORKSPACE = ".xcworkspace"
    PROJECT = ".xcodeproj"

    @property
    def flag(self) -> str:
        return "-workspace" if self is ProjectKind.WORKSPACE else "-project"


@dataclass(frozen=True, slots=True)
class DetectedProject:
    path: str
    kind: ProjectKind


@dataclass(frozen=True, slots=True)
class ArchiveArgs:
    scheme: str
    configuration: str
    archive_path: str
    project: DetectedProject | None = None
    marketing_version: str = ""
    build_number: str = ""


def archive_args(args: ArchiveArgs) -> list[str]:
    """Build the argument list for ``xcodebuild`` (without the executable)."""
    out: list[str] = []
    if args.project is not None:
        out += [args.project.kind.flag, args.project.path]
    if args.scheme:
        out += ["-scheme", args.scheme]
    if args.configuration:
        out += ["-configuration", args.configuration]
    if args.archive_path:
        out += ["-archivePath", args.archive_path]
    out.append("archive")
    # Signing happens in its own step with the configured identity.
    out.append("CODE_SIGN_IDENTITY=-")
    if args.marketing_version:
        out.append(f"MARKETING_VERSION={args.marketing_version}")
    if args.build_number:
        out.append(f"CURRENT_PROJECT_VERSION={args.build_number}")
    return out


def run_archive(args: ArchiveArgs, cwd: Path) -> Result[str, ToolError]:
    tool = require_tool("xcodebuild", _XCODE_HINT)
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(["xcodebuild", *archive_args(args)], cwd=cwd)
    if isinstance(result, Ok):
        return Ok(result.value)

    output = result.error.output
    if "xcodebuild: error: The workspace" in output:
        return Err(
            ToolError(
                "workspace not found",
                hint="Check project.workspace in your config",
                output=output,
            )
        )
    if "xcodebuild: error: The project" in output:
        return Err(
            ToolError(
                "project not found", hint="Check project.workspace in your config", output=output
            )
        )
    if "Scheme" in output and "is not currently configured" in output:
        return Err(
            ToolError(
                f"scheme {args.scheme!r} not found",
                hint="Check project.scheme in your config",
                output=output,
            )
        )
    return Err(ToolError(f"xcodebuild archive failed: {result.error}", output=output))


def project_kind_for(path: str) -> ProjectKind | None:
    for kind in ProjectKind:
        if path.endswith(kind.value):
            return kind
    return None


def detect_project(directory: Path) -> Result[DetectedProject, ToolError]:
    """Find the single workspace (preferred) or project in ``directory``.

    ``Pods.xcworkspace`` is ignored when another workspace exists.
    """
    try:
        names = sorted(p.name for p in directory.iterdir())
    except OSError as e:
        return Err(ToolError(f"failed to scan {directory}: {e}"))

    workspaces = [n for n in names if n.endswith(ProjectKind.WORKSPACE.value)]
    if len(workspaces) > 1:
        without_pods = [w for w in workspaces if w != "Pods.xcworkspace"]
        workspaces = without_pods or workspaces

    if len(workspaces) == 1:
        return Ok(DetectedProject(path=workspaces[0], kind=ProjectKind.WORKSPACE))
    if len(workspaces) > 1:
        return Err(
            ToolError(
                f"multiple .xcworkspace files found: {', '.join(workspaces)}",
                hint="Set project.workspace in your config to pick one",
            )
        )

    projects = [n for n in names if n.endswith(ProjectKind.PROJECT.value)]
    if len(projects) == 1:
        return Ok(DetectedProject(path=projects[0], kind=ProjectKind.PROJECT))
    if len(projects) > 1:
        return Err(
            ToolError(
                f"multiple .xcodeproj files found: {', '.join(projects)}",
                hint="Set project.workspace in your config to pick one",
            )
        )

    return Err(
        ToolError(
            f"no .xcworkspace or .xcodeproj found in {directory}",
            hint="Run from the project directory or set project.workspace in your config",
        )
    )
