"""godotpilot: MCP tool server for AI-driven Godot game builds."""

from godotpilot.constants import VERSION

__version__ = VERSION
