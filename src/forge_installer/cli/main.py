"""Click CLI group: install (default), bundles, and status commands."""

from __future__ import annotations

import uuid
from pathlib import Path

import click

from forge_installer.catalog import (
    CUSTOM_CHOICE,
    PRESETS,
    SKIP_CHOICE,
    Bundle,
    custom_bundle,
    get_bundle,
)
from forge_installer.cli import render
from forge_installer.config import Settings, get_settings, validate_settings
from forge_installer.environment import detect_environment, installed_companions
from forge_installer.errors import CatalogError, ConfigError
from forge_installer.fetch import Fetcher
from forge_installer.installer import create_directories, install_items, is_installed
from forge_installer.logging import bind_context, clear_context, configure_logging


def _load_settings(claude_dir: str | None = None, base_url: str | None = None) -> Settings:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if claude_dir:
        overrides["claude_dir"] = claude_dir
    if base_url:
        overrides["repo_url"] = base_url
    if overrides:
        settings = settings.model_copy(update=overrides)
    try:
        validate_settings(settings)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    return settings


def _prompt_bundle() -> Bundle | None:
    render.print_menu()
    choice = click.prompt(
        "\nSelect an option",
        type=click.IntRange(1, SKIP_CHOICE),
        default=1,
    )
    if choice == SKIP_CHOICE:
        return None
    if choice == CUSTOM_CHOICE:
        while True:
            agents = click.prompt(
                "Agents to install (space-separated, blank for none)",
                default="",
                show_default=False,
            )
            commands = click.prompt(
                "Commands to install (space-separated, blank for none)",
                default="",
                show_default=False,
            )
            try:
                return custom_bundle(agents, commands)
            except CatalogError as exc:
                click.echo(f"  {exc}; try again.")
    return PRESETS[choice - 1]


def _bundle_from_options(
    bundle_key: str | None, agents: str | None, commands: str | None
) -> Bundle | None:
    if bundle_key and (agents or commands):
        raise click.UsageError("--bundle cannot be combined with --agents/--commands")
    try:
        if bundle_key:
            return get_bundle(bundle_key)
        if agents or commands:
            return custom_bundle(agents or "", commands or "")
    except CatalogError as exc:
        raise click.BadParameter(str(exc)) from exc
    return None


def run_install(
    *,
    bundle_key: str | None = None,
    agents: str | None = None,
    commands: str | None = None,
    assume_yes: bool = False,
    claude_dir: str | None = None,
    base_url: str | None = None,
) -> None:
    settings = _load_settings(claude_dir, base_url)
    configure_logging(settings)
    preselected = _bundle_from_options(bundle_key, agents, commands)
    base_dir = settings.claude_path

    render.print_banner()
    render.print_environment(detect_environment(base_dir))

    if not assume_yes:
        click.echo()
        render.print_heading("Ready to install FORGE v3.0?")
        click.prompt(
            "Press Enter to continue or Ctrl+C to cancel",
            default="",
            show_default=False,
            prompt_suffix="...",
        )

    bundle = preselected if preselected is not None else _prompt_bundle()
    if bundle is None:
        click.echo("Nothing selected; no files were installed.")
        return
    items = bundle.items()
    if not items:
        click.echo("No agents or commands given; no files were installed.")
        return

    bind_context(run_id=uuid.uuid4().hex[:12], bundle=bundle.key)
    try:
        click.echo(f"\nInstalling {bundle.title} into {render.tilde(base_dir)}/ ...")
        create_directories(base_dir)
        with Fetcher(
            settings.repo_url,
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
        ) as fetcher:
            summary = install_items(items, base_dir, fetcher, on_result=render.print_result)
    finally:
        clear_context()

    render.print_summary(summary, installed_companions(base_dir))


_install_options = [
    click.option("--bundle", "bundle_key", default=None, help="Preset bundle key or menu number."),
    click.option("--agents", default=None, help="Custom mode: space-separated agent ids."),
    click.option("--commands", default=None, help="Custom mode: space-separated command ids."),
    click.option("--yes", "-y", "assume_yes", is_flag=True, help="Skip the confirmation prompt."),
    click.option(
        "--claude-dir",
        type=click.Path(file_okay=False, path_type=str),
        default=None,
        help="Override FORGE_CLAUDE_DIR (default: ~/.claude).",
    ),
    click.option("--base-url", default=None, help="Override FORGE_REPO_URL."),
]


def _with_install_options(fn):
    for option in reversed(_install_options):
        fn = option(fn)
    return fn


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """FORGE installer: fetch agents, commands and themes into ~/.claude."""
    if ctx.invoked_subcommand is None:
        run_install()


@cli.command()
@_with_install_options
def install(
    bundle_key: str | None,
    agents: str | None,
    commands: str | None,
    assume_yes: bool,
    claude_dir: str | None,
    base_url: str | None,
) -> None:
    """Interactively pick a bundle and install its files."""
    run_install(
        bundle_key=bundle_key,
        agents=agents,
        commands=commands,
        assume_yes=assume_yes,
        claude_dir=claude_dir,
        base_url=base_url,
    )


@cli.command()
def bundles() -> None:
    """List the preset bundles and their contents."""
    render.print_menu(verbose=True)


@cli.command()
@click.option(
    "--claude-dir",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    help="Override FORGE_CLAUDE_DIR (default: ~/.claude).",
)
def status(claude_dir: str | None) -> None:
    """Show the environment and which preset items are already installed."""
    settings = _load_settings(claude_dir)
    base_dir: Path = settings.claude_path
    render.print_environment(detect_environment(base_dir))
    click.echo()
    render.print_heading("Preset Bundles")
    for bundle in PRESETS:
        items = bundle.items()
        present = [item for item in items if is_installed(base_dir, item)]
        click.echo(f"  {bundle.key}: {len(present)}/{len(items)} installed")
        missing = [str(item) for item in items if item not in present]
        if missing and present:
            click.echo(f"    missing: {', '.join(missing)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
