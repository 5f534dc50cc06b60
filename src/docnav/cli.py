"""CLI interface for Docnav.

Command-line tool for validating documentation navigation and exporting
the site manifest for the renderer.

Exit status: 0 when validation passes, 1 when broken links, overlapping
prefixes or duplicate content are found, 2 on configuration errors.
"""

import logging
import sys
from pathlib import Path

import click

from docnav.config import Config, ConfigError
from docnav.core.errors import (
    BrokenLinkError,
    DocnavError,
    NavigationError,
)
from docnav.core.manifest import build_manifest, write_manifest
from docnav.core.navigation import ValidationReport
from docnav.core.site import SiteLoader, SiteModel

EXIT_VALIDATION_FAILED = 1
EXIT_CONFIG_ERROR = 2


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)

source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def cli(verbose: bool) -> None:
    """Docnav - navigation and content registry for documentation sites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--watch",
    "-w",
    is_flag=True,
    help="Re-run validation when content or configuration changes",
)
def check(config_path: Path | None, source_dir: Path | None, watch: bool) -> None:
    """Validate content registry and navigation links."""
    config = _load_config(config_path, source_dir)
    passed = _run_check(config)

    if not watch:
        sys.exit(0 if passed else EXIT_VALIDATION_FAILED)

    from watchfiles import watch as watch_changes

    watch_paths = [config.docs.source_dir]
    if config.config_path is not None:
        watch_paths.append(config.config_path)

    click.echo(f"Watching {', '.join(str(p) for p in watch_paths)} for changes...")
    for _changes in watch_changes(*watch_paths, raise_interrupt=False):
        click.echo("\nChange detected, re-validating...")
        try:
            config = _reload_config(config_path, source_dir)
        except (FileNotFoundError, ConfigError) as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            continue
        _run_check(config)


@cli.command()
@config_option
@source_dir_option
def tree(config_path: Path | None, source_dir: Path | None) -> None:
    """Print the validated navigation bar and sidebars."""
    config = _load_config(config_path, source_dir)
    model = _load_model(config)

    if model.tree.nav:
        click.echo("Navigation bar:")
        for item in model.tree.nav:
            if item.target is not None:
                click.echo(f"  {item.label} -> {item.target.href}")
            else:
                click.echo(f"  {item.label}")
            for child in item.items:
                click.echo(f"    {child.label} -> {child.target.href}")

    for sidebar in model.tree.sidebars:
        click.echo(click.style(sidebar.prefix, bold=True))
        for section in sidebar.sections:
            click.echo(f"  {section.label} [{section.section_id}]")
            for entry in section.entries:
                click.echo(f"    {entry.label} -> {entry.target.href}")


@cli.command()
@click.argument("path")
@config_option
@source_dir_option
def resolve(path: str, config_path: Path | None, source_dir: Path | None) -> None:
    """Show the sidebar used when rendering PATH."""
    config = _load_config(config_path, source_dir)
    model = _load_model(config)

    sidebar = model.tree.resolve_active_section(path)
    if sidebar is None:
        click.echo(f"No section for {path}")
        return

    click.echo(f"Prefix: {sidebar.prefix}")
    for section in sidebar.sections:
        click.echo(f"  {section.label} [{section.section_id}]")

    unit = model.registry.resolve(path)
    if unit is not None:
        click.echo(f"Page: {unit.title}")


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Manifest output file (overrides config)",
)
def export(
    config_path: Path | None,
    source_dir: Path | None,
    output: Path | None,
) -> None:
    """Validate and write the site manifest for the renderer."""
    config = _load_config(config_path, source_dir).with_overrides(manifest=output)
    model = _load_model(config)

    manifest = build_manifest(model)
    write_manifest(config.docs.manifest, manifest)
    click.echo(
        click.style(
            f"Wrote {config.docs.manifest} ({len(manifest['pages'])} pages)",
            fg="green",
        )
    )


def _reload_config(config_path: Path | None, source_dir: Path | None) -> Config:
    return Config.load(config_path).with_overrides(source_dir=source_dir)


def _load_config(config_path: Path | None, source_dir: Path | None) -> Config:
    try:
        return _reload_config(config_path, source_dir)
    except (FileNotFoundError, ConfigError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(EXIT_CONFIG_ERROR)


def _load_model(config: Config) -> SiteModel:
    """Load the validated model, printing every problem on failure."""
    loader = SiteLoader(config)
    try:
        return loader.load()
    except NavigationError:
        _, report = loader.validate()
        _print_report(report)
        sys.exit(EXIT_VALIDATION_FAILED)
    except DocnavError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(EXIT_VALIDATION_FAILED)


def _run_check(config: Config) -> bool:
    """Validate once and print the outcome."""
    click.echo(f"Source directory: {config.docs.source_dir}")
    loader = SiteLoader(config)
    try:
        registry, report = loader.validate()
    except DocnavError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        return False

    click.echo(f"Content units: {len(registry)}")
    click.echo(f"Navigation links: {report.link_count}")
    if not report.ok:
        _print_report(report)
        return False

    click.echo(click.style("Navigation is valid.", fg="green", bold=True))
    return True


def _print_report(report: ValidationReport) -> None:
    """Print every validation problem to stderr."""
    errors = report.errors()
    click.echo(
        click.style(f"\nFound {len(errors)} problem(s):", fg="red", bold=True),
        err=True,
    )
    for error in errors:
        if isinstance(error, BrokenLinkError):
            click.echo(
                f"  {len(error.offending_entries)} broken link(s):",
                err=True,
            )
            for entry in error.offending_entries:
                click.echo(f"    - {entry.describe()}", err=True)
        else:
            click.echo(f"  {error}", err=True)
