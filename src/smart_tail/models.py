"""
Data model for session transcripts and post-compaction tails.

Plain dataclasses that any agent runtime can map its session onto,
plus tolerant loaders for the JSON shape those runtimes emit.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, get_args

MessageRole = Literal["user", "assistant", "system"]
ToolStatus = Literal["running", "completed", "error"]
TodoStatus = Literal["pending", "in_progress", "completed", "cancelled"]
TailClassification = Literal["clean-end", "active-work", "mid-tool"]

ACTIVE_TODO_STATUSES: tuple[TodoStatus, ...] = ("pending", "in_progress")


def _require(data: dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"{kind} must be a JSON object, got {type(data).__name__}")
    value = data.get(key)
    if value is None:
        raise ValueError(f"{kind} is missing required field '{key}'")
    return value


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass
class ToolCall:
    """One tool invocation in its current or final state."""

    name: str
    status: ToolStatus | None = None
    input: str | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCall":
        name = _require(data, "name", "Tool call")
        status = data.get("status")
        # Statuses this package does not know about are treated as absent
        if status not in get_args(ToolStatus):
            status = None
        return cls(
            name=str(name),
            status=status,
            input=_optional_str(data.get("input")),
            error=_optional_str(data.get("error")),
        )


@dataclass
class Message:
    """A single message in a session."""

    role: MessageRole
    content: str
    agent: str | None = None
    model: str | None = None
    tools: list[ToolCall] = field(default_factory=list)
    timestamp: int | None = None  # epoch milliseconds

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        role = _require(data, "role", "Message")
        if role not in get_args(MessageRole):
            raise ValueError(f"Unknown message role: {role!r}")

        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            timestamp = None

        return cls(
            role=role,
            content=str(_require(data, "content", "Message")),
            agent=_optional_str(data.get("agent")),
            model=_optional_str(data.get("model")),
            tools=[ToolCall.from_dict(t) for t in data.get("tools") or []],
            timestamp=int(timestamp) if timestamp is not None else None,
        )


@dataclass
class Todo:
    """A tracked unit of work owned by the agent's planner."""

    content: str
    status: TodoStatus
    priority: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_TODO_STATUSES

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Todo":
        status = _require(data, "status", "Todo")
        if status not in get_args(TodoStatus):
            raise ValueError(f"Unknown todo status: {status!r}")
        return cls(
            content=str(_require(data, "content", "Todo")),
            status=status,
            priority=_optional_str(data.get("priority")),
        )


@dataclass
class SessionState:
    """Everything the formatter and tail generator know about a session."""

    session_id: str
    messages: list[Message] = field(default_factory=list)
    todos: list[Todo] = field(default_factory=list)

    @property
    def active_todos(self) -> list[Todo]:
        """Todos that are still pending or in progress, in original order."""
        return [t for t in self.todos if t.is_active]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionState":
        """Build a session from runtime JSON.

        Accepts both ``sessionID`` (runtime shape) and ``session_id``.
        """
        if not isinstance(data, dict):
            raise ValueError("Session data must be a JSON object")

        session_id = data.get("sessionID", data.get("session_id"))
        if not session_id:
            raise ValueError("Session is missing required field 'sessionID'")

        return cls(
            session_id=str(session_id),
            messages=[Message.from_dict(m) for m in data.get("messages") or []],
            todos=[Todo.from_dict(t) for t in data.get("todos") or []],
        )


@dataclass
class SmartTailResult:
    """Outcome of tail generation for one compaction event."""

    inject: bool
    content: str
    estimated_tokens: int
    classification: TailClassification
    transcript_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "inject": self.inject,
            "content": self.content,
            "estimatedTokens": self.estimated_tokens,
            "classification": self.classification,
            "transcriptPath": self.transcript_path,
        }


def load_session(path: str | Path) -> SessionState:
    """Read a session state from a UTF-8 JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return SessionState.from_dict(data)
