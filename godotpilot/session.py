"""Per-session context handed to every tool handler."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from godotpilot.bridge import BridgeClient, BridgeResult
from godotpilot.checkpoint import BuildLock, BuildStateStore
from godotpilot.config import Settings
from godotpilot.logger import get_logger
from godotpilot.state import SessionGuardState

logger = get_logger()


@dataclass
class ToolSession:
    """Everything one agent session shares across tool calls."""

    settings: Settings
    bridge: BridgeClient
    store: BuildStateStore
    lock: BuildLock
    guard_state: SessionGuardState = field(default_factory=SessionGuardState)

    @classmethod
    def from_settings(cls, settings: Settings, bridge: Optional[BridgeClient] = None) -> "ToolSession":
        return cls(
            settings=settings,
            bridge=bridge or BridgeClient.from_settings(settings),
            store=BuildStateStore(settings.project_root),
            lock=BuildLock(settings.project_root),
        )

    @property
    def project_root(self) -> Path:
        return self.settings.project_root

    def best_effort(self, action: str, call: Callable[..., Any], *args, **kwargs) -> BridgeResult:
        """
        Run a bridge call whose failure must not affect the tool result.

        This is the one place where bridge errors are dropped on purpose.
        """
        outcome = self.bridge.attempt(call, *args, **kwargs)
        if not outcome.ok:
            logger.debug(f"{action} skipped: {outcome.error}")
        return outcome

    def dock_log(self, message: str) -> None:
        """Mirror a progress line to the editor dock."""
        self.best_effort("dock log", self.bridge.send_log, message)
