"""Temp manifest synthesis.

Builds one synthetic manifest per workspace project plus the aggregate root
manifest that references all of them, so a single installer run can
materialize every external dependency in one shared location.

Each project is processed independently against the same read-only
workspace index, then the per-project results are reduced into the
aggregate manifest in input order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from .classify import WorkspaceIndex, build_workspace_index, classify_all
from .deps import merge_manifest
from .errors import NamespaceCollisionError
from .models import (
    AggregateManifest,
    DependencyKind,
    GeneratedManifest,
    SynthesisResult,
    SynthesisWarning,
    SyntheticManifest,
    WorkspaceProject,
    derive_synthetic_name,
)

TEMP_MODULES_FOLDER = "temp_modules"

__all__ = [
    "TEMP_MODULES_FOLDER",
    "derive_synthetic_name",
    "synthesize",
    "synthesize_project",
    "temp_project_reference",
]


def temp_project_reference(synthetic_name: str, temp_modules_folder: str = TEMP_MODULES_FOLDER) -> str:
    """File-path specifier pointing at a synthetic manifest's folder.

    Example:
        "ws-utils" → "file:./temp_modules/ws-utils"
    """
    return f"file:./{temp_modules_folder}/{synthetic_name}"


def _check_synthetic_names(projects: Sequence[WorkspaceProject]) -> dict[str, str]:
    """Map synthetic name → project name, rejecting collisions.

    A synthetic name may not be shared by two projects, nor equal the real
    name of any workspace project.
    """
    owners: dict[str, list[str]] = defaultdict(list)
    for project in projects:
        owners[project.synthetic_name].append(project.name)

    collisions = {name: owned for name, owned in owners.items() if len(owned) > 1}
    if collisions:
        details = "; ".join(
            f"{name!r} is derived by {', '.join(owned)}" for name, owned in collisions.items()
        )
        raise NamespaceCollisionError(
            f"Synthetic name collision: {details}",
            projects=[p for owned in collisions.values() for p in owned],
            package_names=list(collisions),
        )

    project_names = {p.name for p in projects}
    shadowed = [name for name in owners if name in project_names]
    if shadowed:
        details = "; ".join(
            f"{name!r} is derived by {owners[name][0]} and is also a project name"
            for name in shadowed
        )
        involved: list[str] = []
        for name in shadowed:
            for project_name in (owners[name][0], name):
                if project_name not in involved:
                    involved.append(project_name)
        raise NamespaceCollisionError(
            f"Synthetic name collision: {details}",
            projects=involved,
            package_names=shadowed,
        )
    return {name: owned[0] for name, owned in owners.items()}


def synthesize_project(
    project: WorkspaceProject,
    index: WorkspaceIndex,
    synthetic_names: Mapping[str, str],
) -> tuple[SyntheticManifest, list[SynthesisWarning]]:
    """Build the synthetic manifest for one project.

    Args:
        project: The project to synthesize.
        index: Read-only map of project name → WorkspaceProject.
        synthetic_names: Map of every synthetic name → owning project name.

    Returns:
        The synthetic manifest and any warnings raised while classifying.

    Raises:
        NamespaceCollisionError: If the project depends on a package whose
            name is a synthetic identity.
    """
    pairs = merge_manifest(project.manifest)

    colliding = [p.package_name for p in pairs if p.package_name in synthetic_names]
    if colliding:
        owners = ", ".join(f"{n} (synthetic name of {synthetic_names[n]})" for n in colliding)
        raise NamespaceCollisionError(
            f"Project {project.name} depends on {owners}",
            projects=[project.name],
            package_names=colliding,
        )

    manifest = SyntheticManifest(
        name=project.synthetic_name,
        optional_dependencies=dict(project.manifest.optional_deps),
    )
    warnings: list[SynthesisWarning] = []
    for dep in classify_all(project, pairs, index):
        if dep.warning is not None:
            warnings.append(dep.warning)
        if dep.kind is DependencyKind.LOCAL_LINK:
            manifest.local_dependencies[dep.package_name] = dep.specifier
        elif not dep.optional:
            # Optional-only external deps are already carried verbatim
            # under optionalDependencies
            manifest.external_dependencies[dep.package_name] = dep.specifier
    return manifest, warnings


def synthesize(
    projects: Iterable[WorkspaceProject],
    *,
    max_workers: int | None = None,
    temp_modules_folder: str = TEMP_MODULES_FOLDER,
) -> SynthesisResult:
    """Synthesize manifests for every project in the workspace.

    Validation happens before any classification: duplicate project names
    and synthetic name collisions fail fast. Any fatal error aborts the run
    and no partial result is returned.

    Args:
        projects: All workspace projects, in the order output should follow.
        max_workers: If greater than 1, projects are processed on a thread
            pool of that size. Output order is always the input order.
        temp_modules_folder: Folder (relative to the aggregate manifest)
            holding the synthetic manifests.

    Returns:
        SynthesisResult with per-project manifests, the aggregate manifest
        and any warnings collected along the way.

    Raises:
        ConfigurationError: On duplicate project names.
        NamespaceCollisionError: On synthetic name collisions.
    """
    projects = list(projects)
    index = build_workspace_index(projects)
    synthetic_names = _check_synthetic_names(projects)

    def work(project: WorkspaceProject) -> tuple[SyntheticManifest, list[SynthesisWarning]]:
        return synthesize_project(project, index, synthetic_names)

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            # map() yields in submission order and re-raises the first failure
            outcomes = list(pool.map(work, projects))
    else:
        outcomes = [work(p) for p in projects]

    manifests: list[GeneratedManifest] = []
    warnings: list[SynthesisWarning] = []
    aggregate = AggregateManifest()
    for project, (manifest, project_warnings) in zip(projects, outcomes):
        manifests.append(GeneratedManifest(project_name=project.name, manifest=manifest))
        warnings.extend(project_warnings)
        aggregate.dependencies[manifest.name] = temp_project_reference(
            manifest.name, temp_modules_folder
        )

    return SynthesisResult(manifests=manifests, aggregate=aggregate, warnings=warnings)
