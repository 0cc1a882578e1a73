"""Unit tests for filesystem project readers."""

import pytest

from godotpilot.context import (
    collect_project_files,
    parse_scene,
    parse_tscn,
    read_project_settings,
    res_to_absolute,
    resolve_project_path,
    scan_project_files,
)
from godotpilot.exceptions import ProjectPathError

MAIN_SCENE = """[gd_scene load_steps=3 format=3 uid="uid://b4k2"]

[ext_resource type="Script" path="res://scripts/player.gd" id="1_abc"]

[sub_resource type="CircleShape2D" id="CircleShape2D_1"]
radius = 12.0

[node name="Main" type="Node2D"]

[node name="Player" type="CharacterBody2D" parent="."]
position = Vector2(640, 360)
script = ExtResource("1_abc")

[node name="Shape" type="CollisionShape2D" parent="Player"]
shape = SubResource("CircleShape2D_1")
"""


def touch(root, rel):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


class TestProjectPaths:
    """Test res:// path handling."""

    def test_res_to_absolute(self, tmp_path):
        """Test res:// and relative paths map under the root."""
        assert res_to_absolute(tmp_path, "res://scenes/main.tscn") == tmp_path / "scenes" / "main.tscn"
        assert res_to_absolute(tmp_path, "scenes/main.tscn") == tmp_path / "scenes" / "main.tscn"

    def test_resolve_inside(self, tmp_path):
        """Test paths inside the project resolve."""
        resolved = resolve_project_path(tmp_path, "res://assets/hero.svg")
        assert resolved == (tmp_path / "assets" / "hero.svg").resolve()

    def test_resolve_escape_rejected(self, tmp_path):
        """Test traversal outside the project is refused."""
        with pytest.raises(ProjectPathError):
            resolve_project_path(tmp_path, "res://../outside.txt")

    def test_resolve_root_rejected(self, tmp_path):
        """Test the project root itself is refused."""
        with pytest.raises(ProjectPathError):
            resolve_project_path(tmp_path, "res://")


class TestScanProjectFiles:
    """Test project file scanning."""

    def test_scan_filters_and_skips(self, tmp_path):
        """Test extension filter plus hidden and addons directories skipped."""
        touch(tmp_path, "scripts/player.gd")
        touch(tmp_path, "scenes/main.tscn")
        touch(tmp_path, "README.md")
        touch(tmp_path, ".godot/imported/x.gd")
        touch(tmp_path, "addons/beehave/plugin.gd")

        files = scan_project_files(tmp_path, ["gd", ".tscn"])
        assert files == ["res://scenes/main.tscn", "res://scripts/player.gd"]

    def test_collect_groups(self, tmp_path):
        """Test grouping by kind."""
        touch(tmp_path, "scripts/enemy.gd")
        touch(tmp_path, "assets/enemy.svg")
        touch(tmp_path, "resources/theme.tres")
        groups = collect_project_files(tmp_path, ["gd", "tscn", "tres", "svg", "png"])
        assert groups == {
            "scripts": ["res://scripts/enemy.gd"],
            "scenes": [],
            "resources": ["res://resources/theme.tres"],
            "assets": ["res://assets/enemy.svg"],
        }


class TestProjectSettings:
    """Test project.godot parsing."""

    def test_reads_sections(self, project):
        """Test section/key flattening with quotes stripped."""
        settings = read_project_settings(project)
        assert settings["application/config/name"] == "Neon Drift"
        assert settings["application/run/main_scene"] == "res://scenes/main.tscn"
        assert settings["display/window/size/viewport_width"] == "1280"
        assert settings["config_version"] == "5"

    def test_missing_file(self, tmp_path):
        """Test a missing project.godot yields an empty mapping."""
        assert read_project_settings(tmp_path) == {}


class TestSceneParser:
    """Test .tscn parsing."""

    def test_parse_tscn(self):
        """Test header, resources and nodes."""
        scene = parse_tscn(MAIN_SCENE)
        assert scene["format"] == 3
        assert scene["load_steps"] == 3
        assert scene["ext_resources"] == [
            {"type": "Script", "path": "res://scripts/player.gd", "id": "1_abc"}
        ]
        assert scene["sub_resources"][0]["radius"] == "12.0"
        assert [n["name"] for n in scene["nodes"]] == ["Main", "Player", "Shape"]
        player = scene["nodes"][1]
        assert player["parent"] == "."
        assert player["position"] == "Vector2(640, 360)"

    def test_parse_scene_from_res_path(self, tmp_path):
        """Test reading a scene from the project."""
        path = tmp_path / "scenes" / "main.tscn"
        path.parent.mkdir()
        path.write_text(MAIN_SCENE, encoding="utf-8")
        scene = parse_scene(tmp_path, "res://scenes/main.tscn")
        assert len(scene["nodes"]) == 3
