"""Tests for the godotpilot CLI."""

import json

from typer.testing import CliRunner

from godotpilot.checkpoint import BuildLock, BuildStateStore
from godotpilot.cli import app

runner = CliRunner()


class TestStopGuardCommand:
    """Test the stop-guard hook command."""

    def test_no_output_without_build(self, tmp_path):
        """Test stopping is allowed silently."""
        hook_input = json.dumps({"stop_hook_active": False, "cwd": str(tmp_path)})
        result = runner.invoke(app, ["stop-guard"], input=hook_input)
        assert result.exit_code == 0
        assert result.stdout.strip() == ""

    def test_blocks_during_build(self, tmp_path):
        """Test a block decision is printed while the lock exists."""
        BuildLock(tmp_path).acquire("Phase 4: Polish")
        hook_input = json.dumps({"stop_hook_active": False, "cwd": str(tmp_path)})
        result = runner.invoke(app, ["stop-guard"], input=hook_input)
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["decision"] == "block"
        assert "Phase 4: Polish" in payload["reason"]


class TestBuildCommands:
    """Test checkpoint and lock commands."""

    def test_cancel_build(self, project):
        """Test cancel-build removes the lock and optionally the checkpoint."""
        BuildLock(project).acquire("Phase 2: Core Mechanics")
        BuildStateStore(project).save({"game_name": "Neon Drift"})
        result = runner.invoke(app, ["--project", str(project), "cancel-build", "--clear-state"])
        assert result.exit_code == 0
        assert BuildLock(project).is_active() is False
        assert BuildStateStore(project).get() is None

    def test_build_state_json(self, project):
        """Test the raw checkpoint output."""
        BuildStateStore(project).save({"game_name": "Neon Drift"})
        result = runner.invoke(app, ["--project", str(project), "build-state", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["state"] == {"game_name": "Neon Drift"}


class TestToolCommands:
    """Test tool invocation from the CLI."""

    def test_tools_lists_registry(self):
        """Test the tool table."""
        result = runner.invoke(app, ["tools"])
        assert result.exit_code == 0
        assert "godot_update_phase" in result.stdout

    def test_call_invalid_json(self, project):
        """Test malformed --args exits 1."""
        result = runner.invoke(app, ["--project", str(project), "call", "godot_log", "--args", "{bad"])
        assert result.exit_code == 1

    def test_call_unknown_tool(self, project):
        """Test unknown tools exit 1."""
        result = runner.invoke(app, ["--project", str(project), "call", "godot_teleport"])
        assert result.exit_code == 1

    def test_version(self):
        """Test --version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "godotpilot version" in result.stdout
