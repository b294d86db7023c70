"""
Transcript module - markdown rendering and on-disk retention.

Includes:
- format_transcript: Session messages to condensed markdown
- write_transcript / prune_transcripts: One file per session, count and age limits
"""

from .formatter import TranscriptOptions, format_transcript
from .retention import PruneOptions, prune_transcripts, transcript_path, write_transcript

__all__ = [
    "TranscriptOptions",
    "format_transcript",
    "PruneOptions",
    "prune_transcripts",
    "transcript_path",
    "write_transcript",
]
