"""Manifest document reading and writing.

Synthetic and aggregate manifests are written as package.json documents
with a fixed key order, so regenerating an unchanged workspace produces
byte-identical, diff-friendly files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .models import AggregateManifest, DependencyManifest, SynthesisResult, SyntheticManifest

# Key under which local links are recorded; the installer ignores it and
# the link step reads it
LOCAL_DEPENDENCIES_KEY = "localDependencies"


def synthetic_manifest_document(manifest: SyntheticManifest) -> dict[str, Any]:
    """Convert a SyntheticManifest into a package.json-shaped dict.

    Key order: name, version, private, dependencies, optionalDependencies
    (only if non-empty), localDependencies (only if non-empty).
    """
    doc: dict[str, Any] = {
        "name": manifest.name,
        "version": manifest.version,
        "private": True,
        "dependencies": dict(manifest.external_dependencies),
    }
    if manifest.optional_dependencies:
        doc["optionalDependencies"] = dict(manifest.optional_dependencies)
    if manifest.local_dependencies:
        doc[LOCAL_DEPENDENCIES_KEY] = dict(manifest.local_dependencies)
    return doc


def aggregate_manifest_document(manifest: AggregateManifest) -> dict[str, Any]:
    """Convert the AggregateManifest into a package.json-shaped dict."""
    return {
        "name": manifest.name,
        "version": manifest.version,
        "private": True,
        "dependencies": dict(manifest.dependencies),
    }


def dumps_manifest(doc: dict[str, Any]) -> str:
    """Serialize a manifest document, preserving key order."""
    return json.dumps(doc, indent=2) + "\n"


def loads_synthetic_manifest(text: str) -> SyntheticManifest:
    """Parse a serialized synthetic manifest back into a SyntheticManifest."""
    doc = json.loads(text)
    return SyntheticManifest(
        name=doc["name"],
        version=doc.get("version", "0.0.0"),
        external_dependencies=doc.get("dependencies", {}),
        local_dependencies=doc.get(LOCAL_DEPENDENCIES_KEY, {}),
        optional_dependencies=doc.get("optionalDependencies", {}),
    )


def save_manifest(path: Path, doc: dict[str, Any]) -> None:
    """Write a manifest document, creating parent folders as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_manifest(doc))


def load_package_json(path: Path) -> dict[str, Any]:
    """Load a project's package.json.

    Raises:
        ConfigurationError: If the file is missing or is not a JSON object.
    """
    try:
        doc = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Missing package.json: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(doc, dict):
        raise ConfigurationError(f"Expected a JSON object in {path}")
    return doc


def _dependency_field(doc: dict[str, Any], key: str, origin: str) -> dict[str, str]:
    value = doc.get(key, {})
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigurationError(f"{origin}: {key} must map package names to specifiers")
    return dict(value)


def project_manifest_from_package_json(doc: dict[str, Any], origin: str = "package.json") -> DependencyManifest:
    """Extract the three dependency fields of a package.json document.

    Args:
        doc: Parsed package.json.
        origin: Description used in error messages (usually the file path).
    """
    return DependencyManifest(
        runtime_deps=_dependency_field(doc, "dependencies", origin),
        dev_deps=_dependency_field(doc, "devDependencies", origin),
        optional_deps=_dependency_field(doc, "optionalDependencies", origin),
    )


def package_review_document(result: SynthesisResult) -> dict[str, dict[str, list[str]]]:
    """List every registry dependency of the workspace for package review.

    Maps package name → specifier → names of the projects requesting it.
    Optional dependencies count unless they were linked locally. All levels
    are sorted, so an unchanged workspace yields an identical document.
    """
    requests: dict[str, dict[str, set[str]]] = {}
    for generated in result.manifests:
        manifest = generated.manifest
        external = dict(manifest.optional_dependencies)
        for name in manifest.local_dependencies:
            external.pop(name, None)
        external.update(manifest.external_dependencies)
        for name, specifier in external.items():
            requests.setdefault(name, {}).setdefault(specifier, set()).add(
                generated.project_name
            )

    return {
        name: {spec: sorted(requests[name][spec]) for spec in sorted(requests[name])}
        for name in sorted(requests)
    }
