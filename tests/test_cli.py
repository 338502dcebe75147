"""Tests for workspace_manifests.cli."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from workspace_manifests.cli import cli

WritePackage = Callable[[Path, str, dict], Path]


class TestGenerate:
    """Tests for the generate command."""

    def test_writes_to_common_next_to_config(self, workspace_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["generate", "--config", str(workspace_root / "workspace.toml")]
        )

        assert result.exit_code == 0, result.output
        assert "Generated 3 temp manifests" in result.output
        assert (workspace_root / "common" / "package.json").exists()
        assert (workspace_root / "common" / "temp_modules" / "ws-web" / "package.json").exists()

    def test_custom_common_folder_and_jobs(self, workspace_root: Path, tmp_path: Path) -> None:
        common = tmp_path / "out"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "generate",
                "--config",
                str(workspace_root / "workspace.toml"),
                "--common-folder",
                str(common),
                "-j",
                "2",
            ],
        )

        assert result.exit_code == 0, result.output
        assert (common / "package.json").exists()

    def test_collision_is_user_error(
        self, workspace_root: Path, write_package: WritePackage
    ) -> None:
        write_package(
            workspace_root,
            "apps/web",
            {"name": "web", "version": "0.5.0", "dependencies": {"ws-web": "*"}},
        )
        runner = CliRunner()
        result = runner.invoke(
            cli, ["generate", "--config", str(workspace_root / "workspace.toml")]
        )

        assert result.exit_code == 1
        assert "Error: Project web depends on ws-web" in result.output
        assert not (workspace_root / "common").exists()

    def test_missing_config(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["generate", "--config", str(tmp_path / "nope.toml")])

        assert result.exit_code == 1
        assert "Workspace config not found" in result.output


class TestShow:
    def test_lists_classification(self, workspace_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["show", "web", "--config", str(workspace_root / "workspace.toml")]
        )

        assert result.exit_code == 0, result.output
        assert "utils@^1.0.0: local" in result.output
        assert "react@^18.2.0: external" in result.output
        assert "fsevents@^2.3.0: external (optional)" in result.output
