"""Local-link classification.

Decides, for each dependency of a project, whether another project in the
same workspace can satisfy it (a local link) or whether it has to come from
the package registry.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .errors import ConfigurationError, MalformedSpecifierError
from .models import (
    ClassifiedDependency,
    DependencyKind,
    DependencyPair,
    SynthesisWarning,
    WorkspaceProject,
)
from .versions import satisfies

WorkspaceIndex = Mapping[str, WorkspaceProject]


def build_workspace_index(projects: Iterable[WorkspaceProject]) -> WorkspaceIndex:
    """Build the read-only name → project lookup shared by all classifications.

    Raises:
        ConfigurationError: If two projects share a name.
    """
    projects = list(projects)
    counts = Counter(p.name for p in projects)
    duplicates = sorted(name for name, n in counts.items() if n > 1)
    if duplicates:
        raise ConfigurationError(
            f"Duplicate project names in workspace: {', '.join(duplicates)}",
            projects=duplicates,
        )
    return MappingProxyType({p.name: p for p in projects})


def classify(
    project: WorkspaceProject,
    pair: DependencyPair,
    index: WorkspaceIndex,
) -> ClassifiedDependency:
    """Classify one dependency pair of a project.

    A pair is a local link when:
    1. a workspace project with that name exists,
    2. the name is not in the project's cyclic exemptions, and
    3. the workspace project's version satisfies the specifier.

    Otherwise it is an external registry dependency. A malformed specifier
    also falls back to the registry, with a warning attached to the result.
    A project depending on itself is classified by the same rules.

    Args:
        project: The project declaring the dependency.
        pair: The merged (name, specifier) pair.
        index: Map of workspace project name → WorkspaceProject.
    """
    external = ClassifiedDependency(
        package_name=pair.package_name,
        specifier=pair.specifier,
        kind=DependencyKind.EXTERNAL_REGISTRY,
        optional=pair.optional,
    )

    candidate = index.get(pair.package_name)
    if candidate is None:
        return external

    # Cycle-breaking override takes priority over version matching
    if pair.package_name in project.cyclic_exemptions:
        return external

    try:
        compatible = satisfies(candidate.version, pair.specifier)
    except MalformedSpecifierError as exc:
        warning = SynthesisWarning(
            project=project.name,
            package_name=pair.package_name,
            specifier=pair.specifier,
            message=f"{exc}; using the registry instead of local project "
            f"{candidate.name}@{candidate.version}",
        )
        return external.model_copy(update={"warning": warning})

    if not compatible:
        return external
    return external.model_copy(update={"kind": DependencyKind.LOCAL_LINK})


def classify_all(
    project: WorkspaceProject,
    pairs: Iterable[DependencyPair],
    index: WorkspaceIndex,
) -> list[ClassifiedDependency]:
    """Classify every pair of a project, preserving order."""
    return [classify(project, pair, index) for pair in pairs]
