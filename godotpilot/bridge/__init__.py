"""Client side of the Godot editor bridge."""

from godotpilot.bridge.client import BridgeClient, parse_error_report
from godotpilot.bridge.models import BridgeResult, ErrorEntry, ErrorReport

__all__ = ["BridgeClient", "BridgeResult", "ErrorEntry", "ErrorReport", "parse_error_report"]
