"""Durable build checkpoint and build-in-progress marker.

Both files live under the project's .claude directory and are the only
channel between the tool server and the stop hook, which runs as a separate
process.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from godotpilot.constants import BUILD_LOCK_FILE, BUILD_STATE_FILE
from godotpilot.exceptions import CheckpointCorruptError, CheckpointWriteError


def atomic_write_text(path: Path, data: str) -> None:
    """Write data to path via a temp file in the same directory and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_file = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    temp_name = temp_file.name
    try:
        with temp_file:
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_name, path)
    finally:
        if os.path.exists(temp_name):
            os.remove(temp_name)


class BuildStateStore:
    """Persists the agent's build state verbatim."""

    def __init__(self, project_root: Union[str, Path]):
        self.path = Path(project_root) / BUILD_STATE_FILE

    def save(self, state: Dict[str, Any]) -> Path:
        """
        Replace the checkpoint with state.

        Raises:
            CheckpointWriteError: If the state is not serializable or the write fails
        """
        try:
            payload = json.dumps(state, indent=2)
        except (TypeError, ValueError) as e:
            raise CheckpointWriteError(str(self.path), str(e))
        try:
            atomic_write_text(self.path, payload)
        except OSError as e:
            raise CheckpointWriteError(str(self.path), str(e))
        return self.path

    def get(self) -> Optional[Dict[str, Any]]:
        """
        Read the checkpoint.

        Returns:
            The saved state, or None when no checkpoint exists

        Raises:
            CheckpointCorruptError: If the file is not a JSON object
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CheckpointCorruptError(str(self.path), str(e))

        try:
            state = json.loads(content)
        except json.JSONDecodeError as e:
            raise CheckpointCorruptError(str(self.path), str(e))
        if not isinstance(state, dict):
            raise CheckpointCorruptError(str(self.path), "expected a JSON object")
        return state

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True


class BuildLock:
    """The build-in-progress marker read by the stop hook."""

    def __init__(self, project_root: Union[str, Path]):
        self.path = Path(project_root) / BUILD_LOCK_FILE

    def is_active(self) -> bool:
        return self.path.is_file()

    def label(self) -> Optional[str]:
        if not self.path.is_file():
            return None
        try:
            return self.path.read_text(encoding="utf-8").strip() or "unknown"
        except FileNotFoundError:
            return None
        except OSError:
            return "unknown"

    def acquire(self, label: str) -> None:
        atomic_write_text(self.path, label + "\n")

    def release(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        return True
