"""
Smart Tail - post-compaction resume directive.

After the agent runtime compacts a conversation, the agent loses the
detail of what it was doing. This module looks at session state alone
(no LLM calls) and decides whether work was interrupted, then builds a
short directive telling the agent how to pick up again.

Classification:
- clean-end: No active todos, nothing is injected
- active-work: Active todos, inject directive + last user/assistant + todo list
- mid-tool: Active todos and the last assistant turn has tools still running,
  inject the above plus the tools in flight
"""

import math
from dataclasses import dataclass

import structlog

from ..models import Message, MessageRole, SessionState, SmartTailResult, TailClassification, Todo
from ..transcript.retention import transcript_path

logger = structlog.get_logger()

# Approximate characters per token (no tokenizer, exactness is not needed)
CHARS_PER_TOKEN = 4

DEFAULT_MAX_TOKENS = 1200
MAX_USER_CHARS = 800
MAX_ASSISTANT_CHARS = 1600

ELLIPSIS = "..."

# The resuming agent acts on what it reads, so each directive states the action outright
CLASSIFICATION_HEADERS: dict[TailClassification, tuple[str, str]] = {
    "active-work": (
        "COMPACTION INTERRUPTED ACTIVE WORK",
        "You were mid-task when compaction hit. Resume from where you left off. "
        "If you had findings ready, present them to the user NOW.",
    ),
    "mid-tool": (
        "COMPACTION INTERRUPTED MID-EXECUTION",
        "You were in the middle of executing tools when compaction hit. "
        "Review what was in flight and resume or re-run as needed.",
    ),
}


@dataclass
class SmartTailOptions:
    """Configuration for tail generation."""

    transcript_dir: str | None = None
    max_tokens: int = DEFAULT_MAX_TOKENS


def estimate_tokens(text: str) -> int:
    """Estimate token count for a piece of text."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """Hard-cut text so its token estimate fits within ``max_tokens``."""
    max_chars = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_chars:
        return text
    if max_chars < len(ELLIPSIS):
        return text[:max(max_chars, 0)]
    return text[:max_chars - len(ELLIPSIS)] + ELLIPSIS


def _find_last(messages: list[Message], role: MessageRole) -> Message | None:
    for msg in reversed(messages):
        if msg.role == role:
            return msg
    return None


def _running_tool_names(message: Message | None) -> list[str]:
    if message is None:
        return []
    return [t.name for t in message.tools if t.status == "running"]


def classify_state(state: SessionState) -> TailClassification:
    """Classify where the agent was when compaction hit.

    Sequence order is authoritative for "last"; timestamps are ignored.
    """
    if not state.active_todos:
        return "clean-end"

    if _running_tool_names(_find_last(state.messages, "assistant")):
        return "mid-tool"

    return "active-work"


def format_todos(todos: list[Todo]) -> str:
    """Render todos as ``- [status priority] content`` lines."""
    lines = []
    for todo in todos:
        label = f"{todo.status} {todo.priority}" if todo.priority else todo.status
        lines.append(f"- [{label}] {todo.content}")
    return "\n".join(lines)


def generate_smart_tail(
    state: SessionState,
    options: SmartTailOptions | None = None,
) -> SmartTailResult:
    """Classify session state and generate the tail to inject after compaction.

    Sections are only added when their source data exists. The token budget
    is enforced on the fully assembled text, so when the budget is tight the
    trailing sections (the transcript pointer first) are cut off rather than
    dropped whole.

    Args:
        state: Session messages, todos and id
        options: Transcript directory and token budget

    Returns:
        SmartTailResult; ``inject`` is False for a clean end
    """
    options = options or SmartTailOptions()
    classification = classify_state(state)
    path = transcript_path(options.transcript_dir, state.session_id)

    if classification == "clean-end":
        logger.debug("Session ended cleanly, no tail", session_id=state.session_id)
        return SmartTailResult(
            inject=False,
            content="",
            estimated_tokens=0,
            classification=classification,
            transcript_path=path,
        )

    title, instruction = CLASSIFICATION_HEADERS[classification]
    lines: list[str] = [
        f"### {title}",
        f"**Action required:** {instruction}",
        "",
    ]

    last_user = _find_last(state.messages, "user")
    if last_user:
        lines.append(f"**Last user request:** {last_user.content.strip()[:MAX_USER_CHARS]}")
        lines.append("")

    last_assistant = _find_last(state.messages, "assistant")
    if last_assistant:
        condensed = last_assistant.content.strip()[:MAX_ASSISTANT_CHARS]
        lines.append(f"**Your prepared response (present this):** {condensed}")
        lines.append("")

    active_todos = state.active_todos
    if active_todos:
        lines.append("**Active todos:**")
        lines.append(format_todos(active_todos))
        lines.append("")

    if classification == "mid-tool":
        running = _running_tool_names(last_assistant)
        if running:
            lines.append(f"**Tools in flight:** {', '.join(running)}")
            lines.append("")

    if path:
        lines.append(f"**Full transcript:** {path}")
        lines.append("")

    content = truncate_to_tokens("\n".join(lines), options.max_tokens)
    estimated = estimate_tokens(content)

    logger.info(
        "Generated smart tail",
        session_id=state.session_id,
        classification=classification,
        estimated_tokens=estimated,
        active_todos=len(active_todos),
    )

    return SmartTailResult(
        inject=True,
        content=content,
        estimated_tokens=estimated,
        classification=classification,
        transcript_path=path,
    )
