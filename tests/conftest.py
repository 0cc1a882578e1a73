"""Shared fixtures: a scripted editor bridge and a throwaway Godot project."""

from typing import Any, Dict, List, Optional

import pytest

from godotpilot.bridge import BridgeClient
from godotpilot.config import Settings
from godotpilot.exceptions import BridgeUnavailableError
from godotpilot.session import ToolSession
from godotpilot.tools.dispatcher import ToolDispatcher

PROJECT_GODOT = """; Engine configuration file.
config_version=5

[application]

config/name="Neon Drift"
run/main_scene="res://scenes/main.tscn"

[display]

window/size/viewport_width=1280
"""


class FakeBridge(BridgeClient):
    """Bridge client that answers from a path -> payload table instead of HTTP."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, offline: bool = False):
        super().__init__()
        self.responses = dict(responses or {})
        self.offline = offline
        self.requests: List[tuple] = []

    def _request(self, method, path, body=None, params=None, timeout=None):
        self.requests.append((method, path, body, params))
        if self.offline:
            raise BridgeUnavailableError(self.host, self.port, "connection refused")
        response = self.responses.get(path, {"ok": True})
        if isinstance(response, Exception):
            raise response
        return dict(response)

    def set_errors(self, count: int):
        self.responses["/errors"] = {
            "errors": [
                {"message": f"Parse error {i}", "file": f"res://scripts/s{i}.gd", "line": i + 1}
                for i in range(count)
            ],
            "warnings": [],
        }

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [path for m, path, _, _ in self.requests if method is None or m == method]

    def logged(self) -> List[str]:
        return [body["message"] for m, path, body, _ in self.requests if path == "/log"]


@pytest.fixture
def project(tmp_path):
    (tmp_path / "project.godot").write_text(PROJECT_GODOT, encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(project):
    return Settings(project_root=project)


@pytest.fixture
def bridge():
    fake = FakeBridge()
    fake.set_errors(0)
    return fake


@pytest.fixture
def offline_bridge():
    return FakeBridge(offline=True)


@pytest.fixture
def session(settings, bridge):
    return ToolSession.from_settings(settings, bridge=bridge)


@pytest.fixture
def offline_session(settings, offline_bridge):
    return ToolSession.from_settings(settings, bridge=offline_bridge)


@pytest.fixture
def dispatcher(session):
    return ToolDispatcher(session)


GAME_SCRIPT = """extends Node2D

var health = 3
var score = 0


func take_damage(amount):
\thealth -= amount
\tscreen_shake(4.0)
\tif health <= 0:
\t\tdie()


func die():
\tcreate_tween().tween_property(self, "modulate:a", 0.0, 0.3)
\tgame_over()


func add_score(points):
\tscore += points
\t$HUD/Score.add_theme_color_override("font_color", Color.GOLD)


func game_over():
\tget_tree().change_scene_to_file("res://scenes/main_menu.tscn")


func restart():
\tget_tree().reload_current_scene()
"""

MAIN_SCENE = """[gd_scene load_steps=3 format=3 uid="uid://b8main"]

[sub_resource type="StyleBoxFlat" id="1"]

[node name="Main" type="Node2D"]

[node name="Background" type="ParallaxBackground" parent="."]

[node name="Sparks" type="GPUParticles2D" parent="."]

[node name="HUD" type="CanvasLayer" parent="."]
"""


@pytest.fixture
def polished_project(project):
    """A project that clears every computed quality gate."""
    (project / "scripts").mkdir()
    (project / "scripts" / "game.gd").write_text(GAME_SCRIPT, encoding="utf-8")
    (project / "scenes").mkdir()
    (project / "scenes" / "main.tscn").write_text(MAIN_SCENE, encoding="utf-8")
    (project / "scenes" / "main_menu.tscn").write_text(
        '[gd_scene format=3]\n\n[node name="MainMenu" type="Control"]\n', encoding="utf-8"
    )
    sprites = project / "assets" / "sprites"
    sprites.mkdir(parents=True)
    for name in ("player", "enemy", "bullet", "coin", "tile", "boss"):
        (sprites / f"{name}.svg").write_text("<svg/>", encoding="utf-8")
    return project
