"""Data models for workspace-manifests.

These Pydantic models represent the inputs and outputs of manifest
synthesis. Every model is rebuilt from scratch on each run; none of them
persist beyond the manifest files written by the pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .versions import parse_version

SYNTHETIC_PREFIX = "ws-"
SYNTHETIC_VERSION = "0.0.0"
AGGREGATE_NAME = "workspace-root"


def derive_synthetic_name(name: str, prefix: str = SYNTHETIC_PREFIX) -> str:
    """Derive the synthetic package name for a workspace project.

    The npm scope is dropped, so two projects that differ only by scope
    derive the same name and are rejected later as a collision.

    Examples:
        "utils" → "ws-utils"
        "@acme/utils" → "ws-utils"
    """
    unscoped = name.split("/", 1)[1] if name.startswith("@") and "/" in name else name
    return f"{prefix}{unscoped}"


class DependencyManifest(BaseModel):
    """A project's own dependency declarations.

    Attributes:
        runtime_deps: package name → specifier, from "dependencies".
        dev_deps: package name → specifier, from "devDependencies".
        optional_deps: package name → specifier, from "optionalDependencies".
    """

    model_config = ConfigDict(frozen=True)

    runtime_deps: dict[str, str] = Field(default_factory=dict)
    dev_deps: dict[str, str] = Field(default_factory=dict)
    optional_deps: dict[str, str] = Field(default_factory=dict)


class WorkspaceProject(BaseModel):
    """One project in the monorepo workspace.

    Attributes:
        name: Unique project (package) name.
        version: Concrete semantic version of the project.
        synthetic_name: Name used for the project's synthetic manifest.
            Derived from ``name`` when not given.
        manifest: The project's dependency declarations.
        cyclic_exemptions: Package names that must never be linked locally,
            even when a workspace project of that name exists.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    version: str
    synthetic_name: str = ""
    manifest: DependencyManifest = Field(default_factory=DependencyManifest)
    cyclic_exemptions: frozenset[str] = frozenset()

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        parse_version(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_synthetic_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("synthetic_name") and data.get("name"):
            data = {**data, "synthetic_name": derive_synthetic_name(data["name"])}
        return data


class DependencyKind(str, Enum):
    """How a dependency will be satisfied."""

    LOCAL_LINK = "local"
    EXTERNAL_REGISTRY = "external"


class DependencyPair(BaseModel):
    """A (package name, specifier) pair produced by merging a manifest.

    ``optional`` is True when the pair came only from optionalDependencies.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str
    specifier: str
    optional: bool = False


class SynthesisWarning(BaseModel):
    """A non-fatal problem found while classifying one dependency."""

    model_config = ConfigDict(frozen=True)

    project: str
    package_name: str
    specifier: str
    message: str

    def __str__(self) -> str:
        return f"{self.project}: {self.package_name}@{self.specifier!r}: {self.message}"


class ClassifiedDependency(BaseModel):
    """The classification decision for one dependency pair."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    specifier: str
    kind: DependencyKind
    optional: bool = False
    warning: SynthesisWarning | None = None


class SyntheticManifest(BaseModel):
    """Generated manifest describing a project's dependency footprint.

    Attributes:
        name: The project's synthetic name.
        version: Always "0.0.0".
        external_dependencies: Dependencies the installer fetches from the
            registry. Serialized as "dependencies".
        local_dependencies: Dependencies satisfied by a workspace project,
            left for the link step. Serialized as "localDependencies".
        optional_dependencies: Copied verbatim from the source project.
    """

    name: str
    version: str = SYNTHETIC_VERSION
    external_dependencies: dict[str, str] = Field(default_factory=dict)
    local_dependencies: dict[str, str] = Field(default_factory=dict)
    optional_dependencies: dict[str, str] = Field(default_factory=dict)


class AggregateManifest(BaseModel):
    """Root manifest referencing every synthetic manifest by file path."""

    name: str = AGGREGATE_NAME
    version: str = SYNTHETIC_VERSION
    dependencies: dict[str, str] = Field(default_factory=dict)


class GeneratedManifest(BaseModel):
    """A synthetic manifest tagged with the project it was built from."""

    project_name: str
    manifest: SyntheticManifest


class SynthesisResult(BaseModel):
    """Everything produced by one synthesis run."""

    manifests: list[GeneratedManifest]
    aggregate: AggregateManifest
    warnings: list[SynthesisWarning] = Field(default_factory=list)

    def as_tuple(self) -> tuple[list[SyntheticManifest], AggregateManifest]:
        return [m.manifest for m in self.manifests], self.aggregate
