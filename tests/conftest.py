"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from workspace_manifests.models import DependencyManifest, WorkspaceProject

WORKSPACE_TOML = """\
[workspace]
synthetic-prefix = "ws-"

[[projects]]
name = "web"
folder = "apps/web"

[[projects]]
name = "utils"
folder = "libs/utils"

[[projects]]
name = "logger"
folder = "libs/logger"
cyclic-exemptions = ["utils"]
"""

PACKAGE_JSONS = {
    "apps/web": {
        "name": "web",
        "version": "0.5.0",
        "dependencies": {"utils": "^1.0.0", "react": "^18.2.0"},
        "devDependencies": {"utils": "^0.9.0", "jest": "^29.0.0"},
        "optionalDependencies": {"fsevents": "^2.3.0"},
    },
    "libs/utils": {
        "name": "utils",
        "version": "1.2.0",
        "dependencies": {"logger": "^2.0.0", "lodash": "^4.17.21"},
    },
    "libs/logger": {
        "name": "logger",
        "version": "1.0.0",
        "devDependencies": {"utils": "^1.0.0"},
    },
}


def write_package_json(root: Path, folder: str, doc: dict) -> Path:
    path = root / folder / "package.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc, indent=2))
    return path


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Create a three-project workspace on disk."""
    (tmp_path / "workspace.toml").write_text(WORKSPACE_TOML)
    for folder, doc in PACKAGE_JSONS.items():
        write_package_json(tmp_path, folder, doc)
    return tmp_path


@pytest.fixture
def make_project() -> Callable[..., WorkspaceProject]:
    """Factory for WorkspaceProject with terse dependency arguments."""

    def factory(
        name: str,
        version: str = "1.0.0",
        *,
        deps: dict[str, str] | None = None,
        dev: dict[str, str] | None = None,
        optional: dict[str, str] | None = None,
        exempt: set[str] | None = None,
        synthetic_name: str = "",
    ) -> WorkspaceProject:
        return WorkspaceProject(
            name=name,
            version=version,
            synthetic_name=synthetic_name,
            manifest=DependencyManifest(
                runtime_deps=deps or {},
                dev_deps=dev or {},
                optional_deps=optional or {},
            ),
            cyclic_exemptions=frozenset(exempt or ()),
        )

    return factory


@pytest.fixture
def write_package() -> Callable[[Path, str, dict], Path]:
    """Write (or overwrite) a project's package.json."""
    return write_package_json
