"""CLI entry point for workspace-manifests."""

from __future__ import annotations

from pathlib import Path

import click

from workspace_manifests.errors import WorkspaceManifestsError
from workspace_manifests.pipeline import generate as run_generate
from workspace_manifests.pipeline import show_project

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="workspace.toml",
    show_default=True,
    help="Path to the workspace configuration file.",
)


@click.group()
@click.version_option(package_name="workspace-manifests")
def cli() -> None:
    """Generate synthetic manifests for a monorepo workspace."""


@cli.command()
@_config_option
@click.option(
    "--common-folder",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Folder receiving the aggregate manifest. [default: common/ next to the config]",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of projects to synthesize concurrently.",
)
def generate(config_path: Path, common_folder: Path | None, jobs: int) -> None:
    """Synthesize temp manifests and the aggregate manifest."""
    if common_folder is None:
        common_folder = config_path.parent / "common"
    try:
        result = run_generate(config_path, common_folder, max_workers=jobs)
    except WorkspaceManifestsError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo()
    click.echo(
        f"✓ Generated {len(result.manifests)} temp manifests"
        + (f" with {len(result.warnings)} warning(s)" if result.warnings else "")
    )
    click.echo()
    click.echo("Next steps:")
    click.echo(f"  1. Run the package manager install in {common_folder}")
    click.echo("  2. Link local dependencies")


@cli.command()
@_config_option
@click.argument("project")
def show(config_path: Path, project: str) -> None:
    """Show how PROJECT's dependencies are classified."""
    try:
        show_project(config_path, project)
    except WorkspaceManifestsError as exc:
        raise click.ClickException(str(exc)) from exc


if __name__ == "__main__":
    cli()
