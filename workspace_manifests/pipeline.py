"""Generate pipeline: load → synthesize → write.

This module orchestrates a generate run:
1. Load workspace.toml and every project's package.json
2. Synthesize one temp manifest per project plus the aggregate manifest
3. Write common/package.json and common/temp_modules/<name>/package.json
4. Optionally write the package review file listing registry dependencies

Running the installer afterwards, and linking the local dependencies
recorded under localDependencies, are separate steps.
"""

from __future__ import annotations

from pathlib import Path

from .classify import build_workspace_index, classify_all
from .config import WorkspaceSettings, load_workspace_config, load_workspace_projects
from .console import info, step, warn
from .deps import merge_manifest
from .errors import ConfigurationError
from .manifest import (
    aggregate_manifest_document,
    package_review_document,
    save_manifest,
    synthetic_manifest_document,
)
from .models import ClassifiedDependency, SynthesisResult, WorkspaceProject
from .synthesize import TEMP_MODULES_FOLDER, synthesize


def load_projects(config_path: Path) -> tuple[list[WorkspaceProject], WorkspaceSettings]:
    """Load workspace projects relative to the config file's directory.

    Returns:
        The projects and the [workspace] settings.
    """
    step("Loading workspace")
    config = load_workspace_config(config_path)
    projects = load_workspace_projects(config, config_path.parent)
    for project in projects:
        exempt = (
            f" (cyclic: {', '.join(sorted(project.cyclic_exemptions))})"
            if project.cyclic_exemptions
            else ""
        )
        info(f"{project.name} {project.version} → {project.synthetic_name}{exempt}")
    return projects, config.workspace


def write_manifests(
    result: SynthesisResult,
    common_folder: Path,
    temp_modules_folder: str = TEMP_MODULES_FOLDER,
) -> list[Path]:
    """Write all synthesized manifests under common_folder.

    Returns:
        Paths of every file written, aggregate manifest last.
    """
    written: list[Path] = []
    for generated in result.manifests:
        manifest = generated.manifest
        path = common_folder / temp_modules_folder / manifest.name / "package.json"
        save_manifest(path, synthetic_manifest_document(manifest))
        written.append(path)

    aggregate_path = common_folder / "package.json"
    save_manifest(aggregate_path, aggregate_manifest_document(result.aggregate))
    written.append(aggregate_path)
    return written


def write_package_review(result: SynthesisResult, path: Path) -> None:
    """Snapshot the workspace's registry dependencies for package review."""
    save_manifest(path, package_review_document(result))


def report_warnings(result: SynthesisResult) -> None:
    for warning in result.warnings:
        warn(str(warning))


def generate(
    config_path: Path,
    common_folder: Path,
    max_workers: int | None = None,
) -> SynthesisResult:
    """Run a full generate: load, synthesize and write manifests.

    Nothing is written unless synthesis succeeds for every project.

    Args:
        config_path: Path to workspace.toml.
        common_folder: Folder receiving the aggregate manifest.
        max_workers: Thread pool size for synthesis; sequential if None.
    """
    projects, settings = load_projects(config_path)
    temp_modules_folder = settings.temp_modules_folder

    step("Synthesizing temp manifests")
    result = synthesize(
        projects, max_workers=max_workers, temp_modules_folder=temp_modules_folder
    )
    for generated in result.manifests:
        manifest = generated.manifest
        info(
            f"{generated.project_name}: {len(manifest.external_dependencies)} external, "
            f"{len(manifest.local_dependencies)} local"
        )
    report_warnings(result)

    step("Writing manifests")
    for path in write_manifests(result, common_folder, temp_modules_folder):
        info(str(path))

    if settings.package_review_file:
        review_path = config_path.parent / settings.package_review_file
        write_package_review(result, review_path)
        info(f"{review_path} (package review)")

    return result


def show_project(config_path: Path, project_name: str) -> list[ClassifiedDependency]:
    """Classify a single project's dependencies without writing anything.

    Raises:
        ConfigurationError: If the project is not part of the workspace.
    """
    projects, _ = load_projects(config_path)
    index = build_workspace_index(projects)
    project = index.get(project_name)
    if project is None:
        raise ConfigurationError(
            f"Unknown project {project_name!r}", projects=[project_name]
        )

    step(f"Dependencies of {project_name}")
    classified = classify_all(project, merge_manifest(project.manifest), index)
    for dep in classified:
        suffix = " (optional)" if dep.optional else ""
        info(f"{dep.package_name}@{dep.specifier}: {dep.kind.value}{suffix}")
        if dep.warning is not None:
            warn(str(dep.warning))
    return classified
