"""Payload types exchanged with the editor bridge."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from godotpilot.exceptions import BridgeError


class ErrorEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: Optional[str] = ""
    file: Optional[str] = None
    line: Optional[Union[int, str]] = None

    def label(self) -> str:
        return self.file or self.message or "unknown"


class ErrorReport(BaseModel):
    """Merged error/warning list produced by the editor's error collector."""

    model_config = ConfigDict(extra="allow")

    errors: List[ErrorEntry] = Field(default_factory=list)
    warnings: List[Any] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]]) -> "ErrorReport":
        payload = payload or {}
        errors = [
            entry if isinstance(entry, dict) else {"message": str(entry)}
            for entry in payload.get("errors") or []
        ]
        return cls(
            errors=errors,
            warnings=payload.get("warnings") or [],
        )

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def error_files(self, limit: int) -> List[str]:
        return [entry.label() for entry in self.errors[:limit]]


@dataclass(frozen=True)
class BridgeResult:
    """Outcome of a best-effort bridge call: a payload or the error that prevented it."""

    payload: Any = None
    error: Optional[BridgeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
