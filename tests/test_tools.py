"""Unit tests for tool handlers."""

from godotpilot.checkpoint import BuildLock
from godotpilot.exceptions import BridgeUnavailableError
from godotpilot.tools import assets, build, editor
from godotpilot.tools import project as project_tools
from godotpilot.tools.dispatcher import ToolCall
from godotpilot.tools.schemas import (
    AddNodeArgs,
    GenerateAssetArgs,
    GetErrorsArgs,
    LogArgs,
    NoArgs,
    ReadProjectSettingArgs,
    SaveBuildStateArgs,
    ScanProjectFilesArgs,
    SceneTreeArgs,
    UpdatePhaseArgs,
)


def phase(number, name, status):
    return UpdatePhaseArgs(phase_number=number, phase_name=name, status=status)


class TestProjectTools:
    """Test filesystem-backed tools."""

    def test_project_state_offline(self, offline_session, project):
        """Test project state works with the editor closed."""
        (project / "scripts").mkdir()
        (project / "scripts" / "player.gd").write_text("extends Node", encoding="utf-8")
        result = project_tools.get_project_state(offline_session, NoArgs())
        assert result["editor_connected"] is False
        assert result["project_name"] == "Neon Drift"
        assert result["files"]["scripts"] == ["res://scripts/player.gd"]
        assert "editor_status" not in result

    def test_project_state_online(self, session, bridge):
        """Test editor status is included when connected."""
        bridge.responses["/status"] = {"connected": True, "godot_version": "4.3"}
        result = project_tools.get_project_state(session, NoArgs())
        assert result["editor_connected"] is True
        assert result["editor_status"]["godot_version"] == "4.3"

    def test_read_setting(self, session):
        """Test found and missing settings."""
        found = project_tools.read_setting(session, ReadProjectSettingArgs(key="application/run/main_scene"))
        assert found == {"key": "application/run/main_scene", "found": True, "value": "res://scenes/main.tscn"}
        missing = project_tools.read_setting(session, ReadProjectSettingArgs(key="physics/2d/gravity"))
        assert missing["found"] is False

    def test_scan_defaults(self, session, project):
        """Test the default extension list."""
        (project / "music.ogg").write_text("", encoding="utf-8")
        result = project_tools.scan_files(session, ScanProjectFilesArgs())
        assert result["files"] == ["res://music.ogg"]
        assert result["total"] == 1


class TestEditorTools:
    """Test bridge-backed tools."""

    def test_detailed_errors_fall_back(self, session, bridge):
        """Test detailed check falls back to the fast list."""
        bridge.responses["/detailed_errors"] = BridgeUnavailableError("127.0.0.1", 6100, "timed out")
        bridge.set_errors(1)
        result = editor.get_errors(session, GetErrorsArgs())
        assert len(result["errors"]) == 1
        assert "/errors" in bridge.paths()

    def test_reload_reports_errors(self, session, bridge):
        """Test reload attaches the post-reload error summary."""
        bridge.set_errors(2)
        result = editor.reload_filesystem(session, NoArgs())
        assert result["_error_count"] == 2
        assert result["_error_files"] == ["res://scripts/s0.gd", "res://scripts/s1.gd"]
        assert result["_action_required"].startswith("STOP: 2 script errors")

    def test_reload_clean(self, session):
        """Test a clean reload has no directive."""
        result = editor.reload_filesystem(session, NoArgs())
        assert result["_error_count"] == 0
        assert result["_action_required"] is None

    def test_scene_tree_depth(self, session, bridge):
        """Test max depth is forwarded."""
        bridge.responses["/scene_tree"] = {"name": "Main", "children": [{"name": "Player", "children": []}]}
        editor.get_scene_tree(session, SceneTreeArgs(max_depth=3))
        assert bridge.requests[-2][3] == {"max_depth": 3}
        assert "[MCP] Scene tree: 2 nodes" in bridge.logged()

    def test_add_node_logs_outcome(self, session, bridge):
        """Test node mutations mirror the outcome to the dock."""
        bridge.responses["/add_node"] = {"success": True, "path": "Main/Player"}
        editor.add_node(session, AddNodeArgs(node_name="Player", node_type="CharacterBody2D"))
        assert "[MCP] Node added: Main/Player" in bridge.logged()


class TestBuildTools:
    """Test checkpoint and phase tools."""

    def test_log(self, session, bridge):
        """Test log forwards to the dock."""
        assert build.log_message(session, LogArgs(message="Phase 1 started")) == {
            "ok": True, "message": "Phase 1 started",
        }
        assert bridge.logged() == ["Phase 1 started"]

    def test_log_offline(self, offline_session):
        """Test log succeeds with the editor closed."""
        assert build.log_message(offline_session, LogArgs(message="hi"))["ok"] is True

    def test_build_state_round_trip(self, session):
        """Test save then get with resume summary."""
        state = {"game_name": "Neon Drift", "current_phase": {"number": 1, "name": "Foundation"}}
        build.save_build_state(session, SaveBuildStateArgs(state=state))
        result = build.get_build_state(session, NoArgs())
        assert result["found"] is True
        assert result["state"] == state
        assert result["resume"]["current_phase"] == 1

    def test_build_state_absent(self, session):
        """Test a missing checkpoint."""
        assert build.get_build_state(session, NoArgs()) == {"found": False, "state": None}

    def test_build_state_corrupt(self, session):
        """Test a corrupt checkpoint is reported, not raised."""
        session.store.path.parent.mkdir(parents=True)
        session.store.path.write_text("{oops", encoding="utf-8")
        result = build.get_build_state(session, NoArgs())
        assert result["found"] is False
        assert "error" in result

    def test_in_progress_writes_lock(self, session, project):
        """Test starting a phase writes the build lock."""
        result = build.update_phase(session, phase(2, "Core Mechanics", "in_progress"))
        assert result["ok"] is True
        assert result["build_in_progress"] is True
        assert BuildLock(project).label() == "Phase 2: Core Mechanics"

    def test_completion_rejected_with_errors(self, session, bridge):
        """Test completion is refused while errors exist."""
        bridge.set_errors(2)
        result = build.update_phase(session, phase(1, "Foundation", "completed"))
        assert result["ok"] is False
        assert result["rejected"] is True
        assert result["actual_status"] == "in_progress"
        assert result["error_count"] == 2
        phase_pushes = [body for m, path, body, _ in bridge.requests if path == "/phase"]
        assert phase_pushes[-1]["status"] == "in_progress"

    def test_completion_allowed_offline(self, offline_session):
        """Test the error gate is skipped when the editor is unreachable."""
        result = build.update_phase(offline_session, phase(1, "Foundation", "completed"))
        assert result["ok"] is True
        assert result["status"] == "completed"

    def test_final_phase_clears_build(self, session, polished_project):
        """Test completing the final phase removes lock and checkpoint."""
        build.update_phase(session, phase(6, "Final QA", "in_progress"))
        session.store.save({"game_name": "Neon Drift"})
        result = build.update_phase(session, phase(6, "Final QA", "completed"))
        assert result["ok"] is True
        assert result["build_in_progress"] is False
        assert result["quality_gates"]["auto_no_stub_pass_methods"] is True
        assert result["quality_report_path"].endswith("-phase6-phase_completion_check.json")
        assert session.store.get() is None

    def test_late_phase_rejected_on_quality_gates(self, session, bridge, project):
        """Test completing a polish phase is refused when computed gates fail."""
        build.update_phase(session, phase(5, "Polish & Game Feel", "in_progress"))
        args = UpdatePhaseArgs(
            phase_number=5, phase_name="Polish & Game Feel", status="completed",
            quality_gates={"juice_added": True},
        )
        result = build.update_phase(session, args)
        assert result["ok"] is False
        assert result["rejected"] is True
        assert result["actual_status"] == "in_progress"
        assert "auto_visual_assets_coverage" in result["failed_quality_gates"]
        assert result["gate_details"]["auto_visual_assets_coverage"]["actual"] == 0
        assert (project / result["quality_report_path"][len("res://"):]).is_file()
        phase_pushes = [body for m, path, body, _ in bridge.requests if path == "/phase"]
        assert phase_pushes[-1]["status"] == "in_progress"
        assert phase_pushes[-1]["quality_gates"]["juice_added"] is True
        assert phase_pushes[-1]["quality_gates"]["auto_visual_assets_coverage"] is False
        assert BuildLock(project).is_active() is True

    def test_early_phase_skips_quality_gates(self, session, project):
        """Test phases before polish complete without the computed gates."""
        result = build.update_phase(session, phase(4, "UI & Game Flow", "completed"))
        assert result["ok"] is True
        assert result["quality_report_path"] == ""
        assert not (project / ".claude" / "quality_reports").exists()

    def test_intermediate_completion_keeps_lock(self, session):
        """Test completing an earlier phase keeps the lock."""
        build.update_phase(session, phase(3, "Enemies", "in_progress"))
        result = build.update_phase(session, phase(3, "Enemies", "completed"))
        assert result["build_in_progress"] is True


class TestAssetTools:
    """Test placeholder asset generation."""

    def test_generate_svg(self, session, project):
        """Test an SVG is written under the output directory."""
        result = assets.generate_asset(session, GenerateAssetArgs(name="hero", type="character", width=64, height=48))
        assert result["path"] == "res://assets/sprites/hero.svg"
        assert result["color"] == "#4FC3F7"
        content = (project / "assets" / "sprites" / "hero.svg").read_text(encoding="utf-8")
        assert content.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="64" height="48"')

    def test_custom_color_and_dir(self, session, project):
        """Test custom color and output directory."""
        result = assets.generate_asset(session, GenerateAssetArgs(
            name="orb", type="pickup", color="#00FF00", output_dir="res://art/",
        ))
        assert result["path"] == "res://art/orb.svg"
        assert 'fill="#00FF00"' in (project / "art" / "orb.svg").read_text(encoding="utf-8")

    def test_escape_rejected(self, dispatcher):
        """Test writing outside the project fails the call."""
        response = dispatcher.handle(ToolCall(
            "godot_generate_asset", {"name": "x", "type": "tile", "output_dir": "res://../../tmp"},
        ))
        assert response.is_error is True
