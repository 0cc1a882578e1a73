"""Environment-backed runtime settings."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from godotpilot.constants import (
    BRIDGE_DEFAULT_HOST,
    BRIDGE_DEFAULT_PORT,
    BRIDGE_TIMEOUT,
    BRIDGE_DETAILED_TIMEOUT,
    STALL_INITIAL_LIMIT,
    STALL_STEADY_LIMIT,
)


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Convert common env var truthy/falsy values into booleans."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _to_positive_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _to_positive_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass
class Settings:
    """Runtime settings loaded from environment variables."""

    project_root: Path
    bridge_host: str = BRIDGE_DEFAULT_HOST
    bridge_port: int = BRIDGE_DEFAULT_PORT
    bridge_timeout: float = BRIDGE_TIMEOUT
    bridge_detailed_timeout: float = BRIDGE_DETAILED_TIMEOUT
    stall_initial_limit: int = STALL_INITIAL_LIMIT
    stall_steady_limit: int = STALL_STEADY_LIMIT
    log_file: Optional[str] = None
    debug: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from an environment mapping.

        Invalid or non-positive numeric values fall back to the defaults
        in godotpilot.constants.

        Args:
            env: Mapping to read from (default: os.environ)

        Returns:
            Populated Settings
        """
        env = os.environ if env is None else env
        return cls(
            project_root=Path(env.get("GODOT_PROJECT_PATH") or ".").resolve(),
            bridge_host=env.get("GODOT_BRIDGE_HOST") or BRIDGE_DEFAULT_HOST,
            bridge_port=_to_positive_int(env.get("GODOT_BRIDGE_PORT"), BRIDGE_DEFAULT_PORT),
            bridge_timeout=_to_positive_float(env.get("GODOT_BRIDGE_TIMEOUT"), BRIDGE_TIMEOUT),
            bridge_detailed_timeout=_to_positive_float(
                env.get("GODOT_BRIDGE_DETAILED_TIMEOUT"), BRIDGE_DETAILED_TIMEOUT
            ),
            stall_initial_limit=_to_positive_int(
                env.get("GODOT_STALL_INITIAL_LIMIT"), STALL_INITIAL_LIMIT
            ),
            stall_steady_limit=_to_positive_int(
                env.get("GODOT_STALL_STEADY_LIMIT"), STALL_STEADY_LIMIT
            ),
            log_file=env.get("GODOTPILOT_LOG_FILE") or None,
            debug=_to_bool(env.get("GODOTPILOT_DEBUG"), default=False),
        )


def load_settings() -> Settings:
    """Load .env (without overriding the real environment) and read settings."""
    load_dotenv(verbose=False, override=False)
    return Settings.from_env()
