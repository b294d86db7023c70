"""
Compaction module - what to reinject after the context is compacted.

Includes:
- generate_smart_tail: Rule-based classification + bounded resume directive
- hook.handle_compaction: Transcript write + retention + tail, in one call
"""

from .tail import (
    SmartTailOptions,
    classify_state,
    estimate_tokens,
    generate_smart_tail,
)

__all__ = [
    "SmartTailOptions",
    "classify_state",
    "estimate_tokens",
    "generate_smart_tail",
]
