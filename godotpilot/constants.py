"""Centralized constants and configuration values for godotpilot."""

# Version
VERSION = "0.1.0"

# Bridge connection
BRIDGE_DEFAULT_HOST = "127.0.0.1"
BRIDGE_DEFAULT_PORT = 6100

# Timeouts (in seconds)
BRIDGE_TIMEOUT = 5
BRIDGE_DETAILED_TIMEOUT = 8
ADDON_CLONE_TIMEOUT = 120

# Stall guard thresholds
STALL_INITIAL_LIMIT = 4  # before the first progress-making call
STALL_STEADY_LIMIT = 6  # after at least one progress-making call
STALL_HARD_MARGIN = 2  # streak >= limit + margin escalates the directive

# Durable state (relative to the project root)
BUILD_STATE_FILE = ".claude/build_state.json"
BUILD_LOCK_FILE = ".claude/.build_in_progress"
QUALITY_REPORTS_DIR = ".claude/quality_reports"
TMP_DIR = ".claude/tmp"

# Build phases
FINAL_PHASE = 6
PHASE_NAMES = {
    0: "Discovery & PRD",
    1: "Foundation",
    2: "Player Abilities",
    3: "Enemies & Challenges",
    4: "UI & Game Flow",
    5: "Polish & Game Feel",
    6: "Final QA",
}

# Project scanning
DEFAULT_SCAN_EXTENSIONS = ["gd", "tscn", "tres", "svg", "png", "ogg", "wav"]
PROJECT_STATE_EXTENSIONS = ["gd", "tscn", "tres", "svg", "png"]
SCAN_SKIP_DIRS = {"addons"}

# Truncation limits
ERROR_SUMMARY_LIMIT = 5
PHASE_ERROR_SUMMARY_LIMIT = 10
MAX_QUALITY_REPORTS = 10
POC_MAX_NEXT_ACTIONS = 8

# Editor defaults
DEFAULT_SCENE_TREE_DEPTH = 10

# Asset placeholders
DEFAULT_ASSET_SIZE = 32
DEFAULT_ASSET_DIR = "res://assets/sprites"
ASSET_COLORS = {
    "character": "#4FC3F7",
    "enemy": "#EF5350",
    "projectile": "#FFEE58",
    "tile": "#8D6E63",
    "icon": "#AB47BC",
    "background": "#263238",
    "npc": "#66BB6A",
    "item": "#FFA726",
    "ui": "#78909C",
    "boss": "#B71C1C",
    "pickup": "#26C6DA",
}

# PoC quality rubric
POC_SCORE_WEIGHTS = {
    "core_loop_fun": 20,
    "controls_game_feel": 20,
    "progression_variety": 20,
    "encounter_depth": 15,
    "visual_polish_cohesion": 15,
    "ux_onboarding_feedback": 10,
}
POC_PASS_SCORE = 80
POC_VERY_GOOD_SCORE = 85
POC_DEFAULT_MAX_ITERATIONS = 3

POC_HARD_GATE_HINTS = {
    "zero_script_errors": "Fix all remaining script errors before attempting completion.",
    "no_critical_warnings": "Resolve critical warnings that impact runtime correctness.",
    "play_loop_complete": "Wire complete flow: menu -> gameplay -> win/lose -> restart/menu.",
    "controls_clear": "Improve control responsiveness and add in-game control guidance.",
    "no_soft_lock": "Remove dead-end states and verify at least 10 minutes of continuous play.",
    "quality_gates_passed": "Re-run objective quality gates and fix every failed gate hint.",
}

POC_VISUAL_CHECK_HINTS = {
    "named_art_direction": "Define and apply one explicit art direction pillar across scenes and UI.",
    "palette_discipline": "Constrain palette and use accent colors intentionally.",
    "silhouette_readability": "Improve player/enemy/hazard silhouettes for fast gameplay readability.",
    "layering_depth": "Add stronger background/midground/foreground layering and depth cues.",
    "feedback_clarity": "Add distinct visual feedback for hit/death/pickup/ability events.",
    "ui_theme_consistency": "Style HUD/menu to match gameplay art direction.",
    "no_raw_placeholder_feel": "Replace or stylize placeholder visuals and default-looking UI elements.",
}

# Objective quality gates (checked when completing late phases)
QUALITY_GATE_MIN_PHASE = 5
QUALITY_SIGNAL_EXTENSIONS = ["gd", "tscn", "tres", "svg", "png", "jpg", "jpeg", "webp", "ogg", "wav"]
IMAGE_EXTENSIONS = (".svg", ".png", ".jpg", ".jpeg", ".webp")
AUDIO_EXTENSIONS = (".ogg", ".wav")

UI_STYLE_MARKERS = [
    "styleboxflat",
    "theme_override_styles",
    "theme_override_colors",
    "theme_override_font_sizes",
    "add_theme_stylebox_override",
    "add_theme_color_override",
    "add_theme_font_size_override",
    "theme =",
    "theme_type_variation",
]
POLISH_FX_MARKERS = [
    "gpuparticles2d",
    "cpuparticles2d",
    "shadermaterial",
    "shader",
    "create_tween",
    "tween",
    "screen_shake",
    "hit_flash",
    "dissolve",
    "vignette",
    "trail",
    "animationplayer",
]
DEPTH_LAYER_MARKERS = [
    "parallaxbackground",
    "parallax2d",
    "canvaslayer",
    "midground",
    "foreground",
    "vignette",
    "gradient",
    "background",
]
FEEDBACK_CATEGORIES = {
    "damage": ["take_damage", "damage", "hurt", "hit_flash", "on_hit"],
    "death": ["die", "death", "explode", "dissolve", "destroyed"],
    "pickup_score": ["pickup", "collect", "score", "combo", "pop_score"],
    "ability": ["shoot", "dash", "jump", "ability", "cast", "fire"],
}
FLOW_CATEGORIES = {
    "menu": ["main_menu", "mainmenu", "menu"],
    "game_over": ["game_over", "gameover", "defeat", "you lose"],
    "restart_retry": ["restart", "retry", "new_game"],
    "pause": ["pause", "paused", "get_tree().paused", "esc"],
}

# Directives attached to tool responses
DOCK_REMINDER = (
    "Keep the user informed: call godot_log() with what you just did and what "
    "comes next, and keep godot_update_phase() current for the active phase."
)
