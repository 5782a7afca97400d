"""Read-only probes of the local machine, shown before installing.

Nothing here influences what gets installed: the report is display-only.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

ASSISTANT_CLI = "claude"
PACKAGE_MANAGERS: tuple[str, ...] = ("bun", "npm", "yarn", "pnpm")
PREFERRED_MANAGERS: tuple[str, ...] = ("bun", "npm")
KNOWN_COMPANIONS: tuple[str, ...] = ("ralph", "maniac", "sentinel", "bmad")
PROJECT_DIR_NAMES: tuple[str, ...] = ("projects", "work", "clients", "VibeCoding", "code", "dev")

VERSION_TIMEOUT_SECONDS = 5


@dataclass(frozen=True, slots=True)
class ToolStatus:
    name: str
    found: bool
    version: str = ""


@dataclass(frozen=True, slots=True)
class ProjectDir:
    path: Path
    project_count: int


@dataclass(slots=True)
class EnvironmentReport:
    assistant: ToolStatus
    package_managers: list[ToolStatus] = field(default_factory=list)
    config_dir: Path = Path("~/.claude")
    config_dir_exists: bool = False
    agent_count: int = 0
    command_count: int = 0
    templates_exist: bool = False
    companions: list[str] = field(default_factory=list)
    project_dirs: list[ProjectDir] = field(default_factory=list)

    @property
    def preferred_package_manager(self) -> str | None:
        found = {t.name for t in self.package_managers if t.found}
        for name in PREFERRED_MANAGERS:
            if name in found:
                return name
        return None


def _tool_version(name: str) -> str:
    try:
        proc = subprocess.run(
            [name, "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    lines = proc.stdout.strip().splitlines()
    if proc.returncode != 0 or not lines:
        return "unknown"
    return lines[0].strip()


def detect_tool(name: str, *, with_version: bool = True) -> ToolStatus:
    if shutil.which(name) is None:
        return ToolStatus(name=name, found=False)
    version = _tool_version(name) if with_version else ""
    return ToolStatus(name=name, found=True, version=version)


def count_markdown(directory: Path) -> int:
    if not directory.is_dir():
        return 0
    return sum(1 for p in directory.glob("*.md") if p.is_file())


def installed_companions(config_dir: Path) -> list[str]:
    """Companion agents present as either an agent or a command file."""
    found: list[str] = []
    for name in KNOWN_COMPANIONS:
        if (config_dir / "agents" / f"{name}.md").exists() or (
            config_dir / "commands" / f"{name}.md"
        ).exists():
            found.append(name)
    return found


def find_project_dirs(home: Path) -> list[ProjectDir]:
    dirs: list[ProjectDir] = []
    for name in PROJECT_DIR_NAMES:
        candidate = home / name
        if not candidate.is_dir():
            continue
        try:
            count = sum(1 for p in candidate.iterdir() if p.is_dir())
        except OSError:
            count = 0
        dirs.append(ProjectDir(path=candidate, project_count=count))
    return dirs


def detect_environment(config_dir: Path, home: Path | None = None) -> EnvironmentReport:
    home = home if home is not None else Path.home()
    return EnvironmentReport(
        assistant=detect_tool(ASSISTANT_CLI, with_version=False),
        package_managers=[detect_tool(name) for name in PACKAGE_MANAGERS],
        config_dir=config_dir,
        config_dir_exists=config_dir.is_dir(),
        agent_count=count_markdown(config_dir / "agents"),
        command_count=count_markdown(config_dir / "commands"),
        templates_exist=(config_dir / "templates").is_dir(),
        companions=installed_companions(config_dir),
        project_dirs=find_project_dirs(home),
    )
