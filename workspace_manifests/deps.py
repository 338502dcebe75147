"""Dependency field merging.

Combines a project's devDependencies, dependencies and optionalDependencies
into a single list of (name, specifier) pairs with one entry per package.
"""

from __future__ import annotations

from collections.abc import Mapping

from .models import DependencyManifest, DependencyPair


def merge_dependencies(
    runtime_deps: Mapping[str, str],
    dev_deps: Mapping[str, str],
    optional_deps: Mapping[str, str],
) -> list[DependencyPair]:
    """Merge the three dependency mappings of a manifest.

    Precedence when a name appears in more than one mapping:
    runtime wins over dev, which wins over optional. Dev entries are
    inserted first and runtime entries overwrite them by name; optional
    entries are only added for names not seen yet. Duplicates are not an
    error; the installer is lax about them and so is this merge.

    The result is in order of first appearance, so repeated runs produce
    identical output.

    Args:
        runtime_deps: Map of package name → specifier ("dependencies").
        dev_deps: Map of package name → specifier ("devDependencies").
        optional_deps: Map of package name → specifier ("optionalDependencies").

    Returns:
        One DependencyPair per distinct package name. Pairs that came only
        from optional_deps have ``optional=True``.
    """
    merged: dict[str, DependencyPair] = {}
    for name, specifier in dev_deps.items():
        merged[name] = DependencyPair(package_name=name, specifier=specifier)
    # Overwriting an existing key keeps its original position
    for name, specifier in runtime_deps.items():
        merged[name] = DependencyPair(package_name=name, specifier=specifier)
    for name, specifier in optional_deps.items():
        if name not in merged:
            merged[name] = DependencyPair(
                package_name=name, specifier=specifier, optional=True
            )
    return list(merged.values())


def merge_manifest(manifest: DependencyManifest) -> list[DependencyPair]:
    """Merge all dependency fields of a DependencyManifest."""
    return merge_dependencies(
        manifest.runtime_deps, manifest.dev_deps, manifest.optional_deps
    )
