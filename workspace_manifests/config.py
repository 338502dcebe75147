"""Workspace configuration loading.

Reads workspace.toml with tomlkit and each project's package.json, and
turns them into validated WorkspaceProject records. This is the only place
that checks manifest shape; everything downstream trusts its output.

Example workspace.toml:

    [workspace]
    synthetic-prefix = "ws-"
    package-review-file = "common/package-review.json"

    [[projects]]
    name = "web"
    folder = "apps/web"
    cyclic-exemptions = ["utils"]
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigurationError
from .manifest import load_package_json, project_manifest_from_package_json
from .models import SYNTHETIC_PREFIX, WorkspaceProject, derive_synthetic_name
from .synthesize import TEMP_MODULES_FOLDER


class ProjectEntry(BaseModel):
    """One [[projects]] entry of workspace.toml."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(min_length=1)
    folder: str
    cyclic_exemptions: list[str] = Field(default_factory=list, alias="cyclic-exemptions")


class WorkspaceSettings(BaseModel):
    """The [workspace] table of workspace.toml."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    synthetic_prefix: str = Field(default=SYNTHETIC_PREFIX, alias="synthetic-prefix")
    temp_modules_folder: str = Field(default=TEMP_MODULES_FOLDER, alias="temp-modules-folder")
    package_review_file: str | None = Field(default=None, alias="package-review-file")


class WorkspaceConfig(BaseModel):
    """Parsed workspace.toml."""

    model_config = ConfigDict(extra="forbid")

    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)
    projects: list[ProjectEntry] = Field(default_factory=list)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and validate a workspace.toml file.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or invalid.
    """
    try:
        doc = tomlkit.parse(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Workspace config not found: {path}") from exc
    except TOMLKitError as exc:
        raise ConfigurationError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        config = WorkspaceConfig.model_validate(doc.unwrap())
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid workspace config {path}:\n{exc}") from exc

    if not config.projects:
        raise ConfigurationError(f"No [[projects]] defined in {path}")
    return config


def load_workspace_projects(config: WorkspaceConfig, root: Path) -> list[WorkspaceProject]:
    """Read every project's package.json and build WorkspaceProject records.

    Args:
        config: Parsed workspace configuration.
        root: Directory that project folders are relative to.

    Raises:
        ConfigurationError: If a package.json is missing, has no valid
            version, or declares a name different from the config entry.
    """
    projects: list[WorkspaceProject] = []
    for entry in config.projects:
        package_json = root / entry.folder / "package.json"
        doc = load_package_json(package_json)

        declared = doc.get("name")
        if declared != entry.name:
            raise ConfigurationError(
                f"Project {entry.name}: {package_json} declares name {declared!r}",
                projects=[entry.name],
            )
        if "version" not in doc:
            raise ConfigurationError(
                f"Project {entry.name}: {package_json} has no version",
                projects=[entry.name],
            )

        try:
            project = WorkspaceProject(
                name=entry.name,
                version=doc["version"],
                synthetic_name=derive_synthetic_name(
                    entry.name, config.workspace.synthetic_prefix
                ),
                manifest=project_manifest_from_package_json(doc, str(package_json)),
                cyclic_exemptions=frozenset(entry.cyclic_exemptions),
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Project {entry.name}: invalid package.json {package_json}:\n{exc}",
                projects=[entry.name],
            ) from exc
        projects.append(project)
    return projects
