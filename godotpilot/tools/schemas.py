"""Argument models for every tool. Unknown keys are ignored."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from godotpilot.constants import (
    DEFAULT_ASSET_DIR,
    DEFAULT_ASSET_SIZE,
    DEFAULT_SCENE_TREE_DEPTH,
)
from godotpilot.state import PhaseStatus

AssetType = Literal[
    "character", "enemy", "projectile", "tile", "icon", "background",
    "npc", "item", "ui", "boss", "pickup",
]


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NoArgs(ToolArgs):
    pass


class RunSceneArgs(ToolArgs):
    scene_path: str = Field("", description="Optional res:// path to a scene. Runs the main scene if empty.")


class GetErrorsArgs(ToolArgs):
    detailed: bool = Field(
        True,
        description="Run headless validation for messages with file and line (slower). "
                    "Set to false for a fast check.",
    )


class ParseSceneArgs(ToolArgs):
    scene_path: str = Field(..., description="Path to the .tscn file (res:// or absolute)")


class ScanProjectFilesArgs(ToolArgs):
    extensions: Optional[List[str]] = Field(
        None, description='File extensions to include (default: ["gd","tscn","tres","svg","png","ogg","wav"])'
    )


class ReadProjectSettingArgs(ToolArgs):
    key: str = Field(..., description="Setting key path, e.g. application/run/main_scene")


class GenerateAssetArgs(ToolArgs):
    name: str = Field(..., description="Asset filename without extension")
    type: AssetType = Field(..., description="Asset type; determines shape and default color")
    width: int = Field(DEFAULT_ASSET_SIZE, gt=0, le=4096)
    height: int = Field(DEFAULT_ASSET_SIZE, gt=0, le=4096)
    color: Optional[str] = Field(None, description="Primary hex color (picked from the type if omitted)")
    output_dir: str = Field(DEFAULT_ASSET_DIR, description="Output directory inside the project")


class ListAddonsArgs(ToolArgs):
    category: str = Field("", description="Optional category filter (e.g. polish_camera)")


class AddonArgs(ToolArgs):
    addon_id: str = Field(..., description="Catalog add-on ID (e.g. phantom_camera)")


class InstallAddonArgs(AddonArgs):
    force: bool = Field(False, description="Reinstall even when the add-on already verifies")


class ScorePocQualityArgs(ToolArgs):
    benchmark_id: Optional[str] = None
    run_id: Optional[str] = None
    iteration_count: int = Field(..., description="Current quality iteration number (1..N)")
    max_iterations: Optional[int] = Field(None, description="Maximum allowed quality iterations (default: 3)")
    hard_gates: Dict[str, Any] = Field(..., description="Hard gate boolean map")
    anti_tutorial_visual_checks: Dict[str, Any] = Field(..., description="Visual check boolean map")
    scores: Dict[str, Any] = Field(..., description="Category scores (1-5) keyed by rubric category")
    signature_moments: List[str] = Field(default_factory=list)
    notes: str = ""


class LatestQualityReportArgs(ToolArgs):
    phase_number: Optional[int] = Field(None, description="Optional phase filter")
    limit: int = Field(1, description="Maximum reports to return (max: 10)")


class EvaluateQualityGatesArgs(ToolArgs):
    phase_number: int = Field(..., ge=0, description="Phase number to evaluate (0-6)")
    phase_name: str = Field("", description="Optional phase name for logs and reports")
    quality_gates: Dict[str, bool] = Field(
        default_factory=dict,
        description="Gates already reported by the agent; merged with the computed gates",
    )


class LogArgs(ToolArgs):
    message: str = Field(..., description="Message to display in the Godot dock panel")


class SaveBuildStateArgs(ToolArgs):
    state: Dict[str, Any] = Field(..., description="The complete build state object to save")


class UpdatePhaseArgs(ToolArgs):
    phase_number: int = Field(..., ge=0, description="Phase number (0-6)")
    phase_name: str = Field(..., description="Phase name, e.g. 'Foundation'")
    status: PhaseStatus
    quality_gates: Dict[str, bool] = Field(default_factory=dict)


class SceneTreeArgs(ToolArgs):
    max_depth: int = Field(DEFAULT_SCENE_TREE_DEPTH, gt=0, description="Maximum tree depth to return")


class ClassInfoArgs(ToolArgs):
    class_name: str = Field(..., description='Godot class name, e.g. "CharacterBody2D"')
    include_inherited: bool = False


class AddNodeArgs(ToolArgs):
    parent_path: str = Field(".", description='NodePath of the parent ("." for scene root)')
    node_name: str
    node_type: str = Field(..., description='Godot node class, e.g. "Sprite2D"')
    properties: Dict[str, Any] = Field(default_factory=dict)


class UpdateNodeArgs(ToolArgs):
    node_path: str
    properties: Dict[str, Any]


class DeleteNodeArgs(ToolArgs):
    node_path: str


class ScreenshotArgs(ToolArgs):
    viewport: Literal["2d", "3d"] = "2d"
