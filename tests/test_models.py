"""
Tests for the session data model and loaders.
"""

import json

import pytest

from smart_tail.models import (
    Message,
    SessionState,
    SmartTailResult,
    Todo,
    ToolCall,
    load_session,
)


def _runtime_session() -> dict:
    return {
        "sessionID": "ses_abc",
        "messages": [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "Refactor the db layer", "timestamp": 1709000000000},
            {
                "role": "assistant",
                "content": "On it.",
                "agent": "builder",
                "model": "claude-sonnet-4",
                "tools": [
                    {"name": "Read", "status": "completed", "input": "db.py"},
                    {"name": "Edit", "status": "running"},
                ],
            },
        ],
        "todos": [
            {"content": "Refactor db", "status": "in_progress", "priority": "high"},
            {"content": "Write notes", "status": "completed"},
        ],
    }


def test_session_from_dict():
    """Test loading the runtime JSON shape."""
    state = SessionState.from_dict(_runtime_session())

    assert state.session_id == "ses_abc"
    assert len(state.messages) == 3
    assert state.messages[1].timestamp == 1709000000000
    assert state.messages[2].agent == "builder"
    assert state.messages[2].tools == [
        ToolCall(name="Read", status="completed", input="db.py"),
        ToolCall(name="Edit", status="running"),
    ]
    assert [t.content for t in state.todos] == ["Refactor db", "Write notes"]


def test_session_from_dict_snake_case_id():
    """Test that session_id is accepted too."""
    state = SessionState.from_dict({"session_id": "ses_snake"})

    assert state.session_id == "ses_snake"
    assert state.messages == []
    assert state.todos == []


def test_session_from_dict_missing_id():
    """Test that a session id is required."""
    with pytest.raises(ValueError, match="sessionID"):
        SessionState.from_dict({"messages": []})


def test_session_from_dict_not_an_object():
    """Test that non-object input is rejected."""
    with pytest.raises(ValueError):
        SessionState.from_dict(["not", "a", "session"])  # type: ignore[arg-type]


def test_message_missing_optional_fields():
    """Test that optional message fields default to empty."""
    msg = Message.from_dict({"role": "user", "content": "hi"})

    assert msg.agent is None
    assert msg.model is None
    assert msg.tools == []
    assert msg.timestamp is None


def test_message_unknown_role():
    """Test that an unknown role is rejected."""
    with pytest.raises(ValueError, match="role"):
        Message.from_dict({"role": "tool", "content": "result"})


def test_message_missing_content():
    """Test that content is required."""
    with pytest.raises(ValueError, match="content"):
        Message.from_dict({"role": "user"})


def test_message_bad_timestamp_degrades():
    """Test that a non-numeric timestamp is dropped."""
    msg = Message.from_dict({"role": "user", "content": "hi", "timestamp": "yesterday"})

    assert msg.timestamp is None


def test_tool_call_unknown_status_degrades():
    """Test that unknown tool statuses become None."""
    tool = ToolCall.from_dict({"name": "Bash", "status": "queued"})

    assert tool.status is None


def test_tool_call_requires_name():
    """Test that a tool call needs a name."""
    with pytest.raises(ValueError, match="name"):
        ToolCall.from_dict({"status": "running"})


def test_todo_unknown_status():
    """Test that an unknown todo status is rejected."""
    with pytest.raises(ValueError, match="status"):
        Todo.from_dict({"content": "x", "status": "blocked"})


def test_active_todos_preserve_order():
    """Test active todo filtering."""
    state = SessionState(
        session_id="s",
        todos=[
            Todo(content="a", status="in_progress"),
            Todo(content="b", status="completed"),
            Todo(content="c", status="pending"),
            Todo(content="d", status="cancelled"),
        ],
    )

    assert [t.content for t in state.active_todos] == ["a", "c"]


def test_load_session(tmp_path):
    """Test reading a session from a JSON file."""
    path = tmp_path / "session.json"
    path.write_text(json.dumps(_runtime_session()), encoding="utf-8")

    state = load_session(path)

    assert state.session_id == "ses_abc"
    assert state.todos[0].priority == "high"


def test_smart_tail_result_to_dict():
    """Test the JSON shape of a result."""
    result = SmartTailResult(
        inject=True,
        content="### COMPACTION INTERRUPTED ACTIVE WORK",
        estimated_tokens=10,
        classification="active-work",
        transcript_path="t/s.md",
    )

    assert result.to_dict() == {
        "inject": True,
        "content": "### COMPACTION INTERRUPTED ACTIVE WORK",
        "estimatedTokens": 10,
        "classification": "active-work",
        "transcriptPath": "t/s.md",
    }
