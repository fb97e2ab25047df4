"""CLI entry point for monorepo-helper."""

from __future__ import annotations

from pathlib import Path

import click

from .config import PluginConfiguration, read_root_settings
from .errors import ConfigurationError, ManifestParseError
from .logger import configure_logging
from .models import Determined, DiscoveryConfig
from .plugin import build_repository, detect_monorepo_root
from .repository import MonorepoRepository
from .shell import ProcessExecutor, step


def _load_repository(
    root: str | None,
    offline: bool,
    max_depth: int | None,
    exclude: tuple[str, ...],
) -> MonorepoRepository:
    process = ProcessExecutor()
    start = Path(root).resolve() if root else Path.cwd()
    monorepo_root = detect_monorepo_root(process, start)
    if monorepo_root is None:
        raise click.ClickException(f"Not a git repository: {start}")

    try:
        configuration = PluginConfiguration.from_settings(
            read_root_settings(monorepo_root)
        )
    except (ConfigurationError, ManifestParseError) as exc:
        raise click.ClickException(str(exc)) from exc

    config = configuration.discovery_config(monorepo_root)
    overrides: dict[str, object] = {}
    if offline:
        overrides["offline_mode"] = True
    if max_depth is not None:
        overrides["max_depth"] = max_depth
    if exclude:
        overrides["excluded_directory_names"] = (
            config.excluded_directory_names | frozenset(exclude)
        )
    if overrides:
        config = DiscoveryConfig(**{**config.model_dump(), **overrides})
    return build_repository(config, process)


def _common_options(func):
    func = click.option(
        "-v", "--verbose", count=True, help="Show diagnostics (-vv for debug)."
    )(func)
    func = click.option(
        "--offline", is_flag=True, help="Only use local tags, never fetch."
    )(func)
    func = click.option(
        "--root",
        type=click.Path(exists=True, file_okay=False),
        default=None,
        help="Directory inside the monorepo (default: current directory).",
    )(func)
    return func


@click.group()
@click.version_option(package_name="monorepo-helper")
def cli() -> None:
    """Offer monorepo sub-projects as installable packages."""


@cli.command()
@_common_options
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Deepest directory level searched for packages.",
)
@click.option(
    "--exclude", multiple=True, help="Directory name to skip (repeatable)."
)
def discover(
    root: str | None,
    offline: bool,
    verbose: int,
    max_depth: int | None,
    exclude: tuple[str, ...],
) -> None:
    """List the packages discovered in the monorepo."""
    configure_logging(verbose)
    repository = _load_repository(root, offline, max_depth, exclude)

    click.echo(step(f"Discovering packages in {repository.monorepo_root}"))
    try:
        repository.get_packages()
    except ManifestParseError as exc:
        raise click.ClickException(str(exc)) from exc

    if not repository.discovered:
        click.echo("  <no packages found>")
    for found in repository.discovered:
        name = found.manifest_data.get("name", found.path.name)
        path = found.path.relative_to(repository.monorepo_root)
        click.echo(
            f"  {name} {found.assigned_version} ({path}) {found.dist_reference}"
        )


@cli.command("next-version")
@_common_options
def next_version(root: str | None, offline: bool, verbose: int) -> None:
    """Print the next semantic version shared by all packages."""
    configure_logging(verbose)
    repository = _load_repository(root, offline, None, ())

    result = repository.version_guesser.next_semantic_version()
    if isinstance(result, Determined):
        click.echo(str(result.version))
    else:
        click.echo("<none>")
