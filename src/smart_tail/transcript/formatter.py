"""
Transcript Formatter - condensed markdown rendering of a session.

Captures the conversational flow (who said what, which tools ran) without
the full tool outputs that bloat context, so a transcript can be read back
after compaction.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog

from ..models import Message, ToolCall

logger = structlog.get_logger()

ELLIPSIS = "..."
UNKNOWN_TIME = "--:--"


@dataclass
class TranscriptOptions:
    """Configuration for transcript formatting."""

    include_tools: bool = True
    include_metadata: bool = True
    max_user_chars: int = 500
    max_assistant_chars: int = 1000


def truncate(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` characters, marker included."""
    if len(text) <= limit:
        return text
    return text[:max(limit - len(ELLIPSIS), 0)] + ELLIPSIS


def format_timestamp(ts: int) -> str:
    """Render epoch milliseconds as 24-hour local ``HH:MM``.

    Timestamps the platform cannot represent render as ``--:--``.
    """
    try:
        return datetime.fromtimestamp(ts / 1000).strftime("%H:%M")
    except (ValueError, OverflowError, OSError):
        return UNKNOWN_TIME


def _format_tool_calls(tools: list[ToolCall]) -> str:
    names = [f"{t.name} (error)" if t.status == "error" else t.name for t in tools]
    return f"> Tools: {', '.join(names)}"


def _assistant_meta(message: Message, options: TranscriptOptions) -> str:
    if not (options.include_metadata and message.agent):
        return ""
    if message.model:
        return f" ({message.agent} · {message.model})"
    return f" ({message.agent})"


def format_transcript(
    session_id: str,
    messages: list[Message],
    options: TranscriptOptions | None = None,
) -> str:
    """Format messages into a condensed markdown transcript.

    System messages are skipped. User and assistant content is trimmed and
    truncated to the configured limits.

    Args:
        session_id: Session identifier shown in the header
        messages: Messages in conversation order
        options: Formatting options

    Returns:
        Markdown text
    """
    options = options or TranscriptOptions()
    lines: list[str] = []

    lines.append("# Session Transcript")
    lines.append("")
    lines.append(f"**Session:** {session_id}")
    lines.append(f"**Messages:** {len(messages)}")
    if messages:
        first, last = messages[0], messages[-1]
        if first.timestamp and last.timestamp:
            lines.append(
                f"**Time:** {format_timestamp(first.timestamp)} → {format_timestamp(last.timestamp)}"
            )
    lines.append("")
    lines.append("---")
    lines.append("")

    for msg in messages:
        if msg.role == "system":
            continue

        time = f"[{format_timestamp(msg.timestamp)}] " if msg.timestamp else ""

        if msg.role == "user":
            lines.append(f"### {time}User")
            lines.append("")
            lines.append(truncate(msg.content.strip(), options.max_user_chars))
        elif msg.role == "assistant":
            lines.append(f"### {time}Assistant{_assistant_meta(msg, options)}")
            lines.append("")
            lines.append(truncate(msg.content.strip(), options.max_assistant_chars))

            if options.include_tools and msg.tools:
                lines.append("")
                lines.append(_format_tool_calls(msg.tools))

        lines.append("")

    logger.debug("Formatted transcript", session_id=session_id, message_count=len(messages))
    return "\n".join(lines)
