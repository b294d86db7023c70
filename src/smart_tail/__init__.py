"""
smart-tail - session transcripts and post-compaction resume tails.

Renders agent session state into condensed markdown transcripts, keeps a
bounded set of them on disk, and builds the short directive injected back
into the agent's context after compaction.
"""

from .models import (
    Message,
    SessionState,
    SmartTailResult,
    Todo,
    ToolCall,
    load_session,
)
from .transcript import (
    PruneOptions,
    TranscriptOptions,
    format_transcript,
    prune_transcripts,
    transcript_path,
    write_transcript,
)
from .compaction import SmartTailOptions, classify_state, estimate_tokens, generate_smart_tail
from .config import Settings, get_settings
from .compaction.hook import handle_compaction

__version__ = "0.1.0"

__all__ = [
    "Message",
    "SessionState",
    "SmartTailResult",
    "Todo",
    "ToolCall",
    "load_session",
    "PruneOptions",
    "TranscriptOptions",
    "format_transcript",
    "prune_transcripts",
    "transcript_path",
    "write_transcript",
    "SmartTailOptions",
    "classify_state",
    "estimate_tokens",
    "generate_smart_tail",
    "Settings",
    "get_settings",
    "handle_compaction",
]
