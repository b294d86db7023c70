"""
Compaction hook - what a session runtime calls when it compacts.

Persists the full transcript, applies retention, and returns the tail
that should be injected back into the agent's context.
"""

import structlog

from ..config import Settings, get_settings
from ..models import SessionState, SmartTailResult
from ..transcript import format_transcript, prune_transcripts, write_transcript
from .tail import generate_smart_tail

logger = structlog.get_logger()


def handle_compaction(
    state: SessionState,
    settings: Settings | None = None,
) -> SmartTailResult:
    """Save the transcript for a session and build its post-compaction tail.

    Strategy:
    1. Render and write the full transcript (overwriting any previous one)
    2. Prune the transcript directory by count and age
    3. Generate the smart tail pointing at the written transcript

    Errors writing the transcript propagate; pruning never raises.

    Args:
        state: Session state at the moment of compaction
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        The smart tail result
    """
    settings = settings or get_settings()

    logger.info(
        "Handling compaction",
        session_id=state.session_id,
        message_count=len(state.messages),
        todo_count=len(state.todos),
    )

    markdown = format_transcript(state.session_id, state.messages, settings.transcript_options())
    path = write_transcript(settings.transcript_dir, state.session_id, markdown)

    removed = prune_transcripts(settings.transcript_dir, settings.prune_options())

    result = generate_smart_tail(state, settings.tail_options())

    logger.info(
        "Compaction handled",
        session_id=state.session_id,
        transcript=str(path),
        pruned=removed,
        classification=result.classification,
        inject=result.inject,
    )
    return result
