"""Custom exceptions for godotpilot."""


class GodotPilotError(Exception):
    """Base exception for all godotpilot errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


# Tool dispatch exceptions
class ToolError(GodotPilotError):
    """Base exception for tool dispatch errors."""
    pass


class UnknownToolError(ToolError):
    """Raised when a tool name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentsError(ToolError):
    """Raised when tool arguments do not match the declared schema."""

    def __init__(self, tool: str, reason: str):
        self.tool = tool
        self.reason = reason
        super().__init__(f"Invalid arguments for {tool}", reason)


class ToolExecutionError(ToolError):
    """Raised when a tool handler fails."""

    def __init__(self, tool: str, reason: str):
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool} failed", reason)


# Bridge exceptions
class BridgeError(GodotPilotError):
    """Base exception for editor bridge errors."""
    pass


class BridgeUnavailableError(BridgeError):
    """Raised when the editor bridge cannot be reached."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(
            f"Cannot connect to Godot editor at {host}:{port}",
            reason
        )


class BridgeTimeoutError(BridgeUnavailableError):
    """Raised when the editor bridge does not answer in time."""

    def __init__(self, host: str, port: int, timeout: float):
        self.timeout = timeout
        super().__init__(
            host,
            port,
            f"no response within {timeout}s. Is the AI Game Builder plugin enabled?"
        )


class BridgeResponseError(BridgeError):
    """Raised when the editor bridge answers with an error or invalid payload."""

    def __init__(self, method: str, path: str, reason: str):
        self.method = method
        self.path = path
        self.reason = reason
        super().__init__(f"Godot bridge {method} {path} failed", reason)


# Checkpoint exceptions
class CheckpointError(GodotPilotError):
    """Base exception for build checkpoint errors."""
    pass


class CheckpointCorruptError(CheckpointError):
    """Raised when the checkpoint file exists but cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Build checkpoint is corrupted: {path}", reason)


class CheckpointWriteError(CheckpointError):
    """Raised when the checkpoint file cannot be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save build state to {path}", reason)


# Project exceptions
class ProjectPathError(GodotPilotError):
    """Raised when a path resolves outside the project root."""

    def __init__(self, path: str):
        self.path = path
        super().__init__("Path escapes project root", path)
