"""Terminal output for the installer: banner, environment, menu, summary."""

from __future__ import annotations

from pathlib import Path

import click

from forge_installer.catalog import (
    COMPANIONS,
    CUSTOM_CHOICE,
    PRESETS,
    SKIP_CHOICE,
    Bundle,
)
from forge_installer.environment import EnvironmentReport
from forge_installer.installer import InstallResult, InstallSummary, Outcome

RULE = "═" * 79

BANNER = r"""
 _____ ___  ____   ____ _____
|  ___/ _ \|  _ \ / ___| ____|
| |_ | | | | |_) | |  _|  _|
|  _|| |_| |  _ <| |_| | |___
|_|   \___/|_| \_\\____|_____|
"""


def _green(text: str) -> str:
    return f"\033[32m{text}\033[0m"


def _red(text: str) -> str:
    return f"\033[31m{text}\033[0m"


def _yellow(text: str) -> str:
    return f"\033[33m{text}\033[0m"


def _cyan(text: str) -> str:
    return f"\033[36m{text}\033[0m"


def _bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def _ok(text: str) -> None:
    click.echo(f"  {_green(chr(0x2713))} {text}")


def _warn(text: str) -> None:
    click.echo(f"  {_yellow('!')} {text}")


def _section(title: str) -> None:
    click.echo(f"\n{_bold(title)}")


def tilde(path: Path) -> str:
    """Render ``path`` with the home directory collapsed to ``~``."""
    try:
        return "~/" + str(path.relative_to(Path.home()))
    except ValueError:
        return str(path)


def print_banner() -> None:
    click.echo(_cyan(BANNER))
    click.echo(_bold("FORGE v3.0 - Complete Product Companion"))
    click.echo(_yellow('"From idea to production. Every step matters."'))


def print_environment(report: EnvironmentReport) -> None:
    _section("Detecting Environment")
    if report.assistant.found:
        _ok("Claude Code detected")
    else:
        _warn("Claude Code not found - install from claude.ai/code")

    _section("Package Managers")
    preferred = report.preferred_package_manager
    for tool in report.package_managers:
        if tool.found:
            label = f"{tool.name} {tool.version}".strip()
            if tool.name == preferred:
                label += " (Recommended)"
            _ok(label)
        elif tool.name in ("bun", "npm"):
            _warn(f"{tool.name} not found")

    _section("Existing Claude Code Setup")
    config = tilde(report.config_dir)
    if report.config_dir_exists:
        _ok(f"{config}/ directory exists")
        click.echo(f"  Found {report.agent_count} agent(s) in {config}/agents/")
        click.echo(f"  Found {report.command_count} command(s) in {config}/commands/")
        for name in report.companions:
            _ok(f"  -> {name}")
        if report.templates_exist:
            _ok("Templates directory exists")
    else:
        _warn(f"{config}/ not found - will create")

    if report.project_dirs:
        _section("Project Directories")
        for entry in report.project_dirs:
            _ok(f"{entry.path} ({entry.project_count} projects)")


def describe_bundle(bundle: Bundle) -> str:
    parts: list[str] = []
    if bundle.agents:
        parts.append("agents: " + ", ".join(bundle.agents))
    if bundle.commands:
        parts.append("commands: " + ", ".join(bundle.commands))
    if bundle.themes:
        parts.append("themes: " + ", ".join(bundle.themes))
    return "; ".join(parts)


def print_menu(*, verbose: bool = False) -> None:
    _section("Choose what to install")
    for number, bundle in enumerate(PRESETS, start=1):
        click.echo(f"  {number}) {_bold(bundle.title)} - {bundle.description} ({bundle.size} files)")
        if verbose:
            click.echo(f"       {describe_bundle(bundle)}")
    click.echo(f"  {CUSTOM_CHOICE}) {_bold('Custom')} - type the agents and commands you want")
    click.echo(f"  {SKIP_CHOICE}) {_bold('Skip')} - install nothing")


def print_result(result: InstallResult) -> None:
    name = tilde(result.path)
    if result.outcome is Outcome.INSTALLED:
        _ok(f"installed {name}")
    elif result.outcome is Outcome.SKIPPED:
        click.echo(f"  {_cyan('=')} {name} already present, skipped")
    else:
        click.echo(f"  {_red(chr(0x2717))} {result.item} failed: {result.error}")
        if result.hint:
            click.echo(f"    {_yellow('Hint:')} {result.hint}")


def print_summary(summary: InstallSummary, companions: list[str]) -> None:
    click.echo()
    color = _green if summary.ok else _yellow
    click.echo(color(RULE))
    if summary.ok:
        click.echo(color(f"  FORGE install complete: {summary.line()}"))
    else:
        click.echo(color(f"  FORGE install finished with warnings: {summary.line()}"))
    click.echo(color(RULE))

    _section("Agent Integration")
    for name, line in COMPANIONS.items():
        if name in companions:
            click.echo(f"   {_green(chr(0x2713))} {line}")
        else:
            label = line.split(" - ", 1)[0]
            click.echo(f"   {_yellow('o')} {label} - Not installed (optional)")

    _section("Next steps")
    click.echo("   1. Start Claude Code:")
    click.echo(f"      {_cyan('claude')}")
    click.echo("   2. Run FORGE:")
    click.echo(f"      {_cyan('/forge')}")
    click.echo("   3. Re-run this installer any time; files already present are skipped.")
    click.echo()
    click.echo(_yellow("Tip: FORGE asks EVERY question - nothing is assumed!"))


def print_heading(text: str) -> None:
    click.echo(_bold(text))
