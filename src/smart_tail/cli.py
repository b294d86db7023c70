"""
Command-line interface for smart-tail.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import structlog

from .compaction import SmartTailOptions, generate_smart_tail
from .compaction.hook import handle_compaction
from .config import Settings, get_settings
from .models import SessionState, load_session
from .transcript import PruneOptions, TranscriptOptions, format_transcript, prune_transcripts

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Send structured logs to stderr so stdout only carries command output."""
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart-tail",
        description="smart-tail - session transcripts and post-compaction resume tails",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    format_parser = subparsers.add_parser("format", help="Render a session as a markdown transcript")
    format_parser.add_argument("session", help="Session state JSON file")
    format_parser.add_argument("--no-tools", action="store_true", help="Omit tool call lines")
    format_parser.add_argument("--no-metadata", action="store_true", help="Omit agent/model annotations")
    format_parser.add_argument("--max-user-chars", type=int, help="Max characters per user message")
    format_parser.add_argument("--max-assistant-chars", type=int, help="Max characters per assistant message")

    tail_parser = subparsers.add_parser("tail", help="Build the post-compaction tail for a session")
    tail_parser.add_argument("session", help="Session state JSON file")
    tail_parser.add_argument("--transcript-dir", help="Transcript directory for the pointer line")
    tail_parser.add_argument("--max-tokens", type=int, help="Token budget for the tail")
    tail_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")

    compact_parser = subparsers.add_parser("compact", help="Save the transcript, prune, and print the tail")
    compact_parser.add_argument("session", help="Session state JSON file")
    compact_parser.add_argument("--transcript-dir", help="Where to write the transcript")

    prune_parser = subparsers.add_parser("prune", help="Remove old transcripts")
    prune_parser.add_argument("--transcript-dir", help="Transcript directory to prune")
    prune_parser.add_argument("--max-count", type=int, help="Max transcript files to keep")
    prune_parser.add_argument("--max-age-days", type=float, help="Max transcript age in days")

    subparsers.add_parser("config", help="Show configuration")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        # pydantic's ValidationError is a ValueError
        configure_logging("INFO")
        logger.error("Invalid configuration", error=str(e))
        return 1

    configure_logging(settings.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "format":
            run_format(args, settings)
        elif args.command == "tail":
            run_tail(args, settings)
        elif args.command == "compact":
            run_compact(args, settings)
        elif args.command == "prune":
            run_prune(args, settings)
        elif args.command == "config":
            show_config(settings)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error("Command failed", command=args.command, error=str(e))
        return 1

    return 0


def _load(path: str) -> SessionState:
    state = load_session(path)
    logger.debug("Loaded session", path=path, session_id=state.session_id)
    return state


def _pick(value, default):
    return default if value is None else value


def run_format(args: argparse.Namespace, settings: Settings) -> None:
    """Print the transcript for a session file."""
    state = _load(args.session)
    options = TranscriptOptions(
        include_tools=settings.include_tools and not args.no_tools,
        include_metadata=settings.include_metadata and not args.no_metadata,
        max_user_chars=_pick(args.max_user_chars, settings.max_user_chars),
        max_assistant_chars=_pick(args.max_assistant_chars, settings.max_assistant_chars),
    )
    print(format_transcript(state.session_id, state.messages, options))


def run_tail(args: argparse.Namespace, settings: Settings) -> None:
    """Print the smart tail for a session file."""
    state = _load(args.session)
    options = SmartTailOptions(
        transcript_dir=_pick(args.transcript_dir, settings.transcript_dir),
        max_tokens=_pick(args.max_tokens, settings.tail_max_tokens),
    )
    result = generate_smart_tail(state, options)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.inject:
        print(result.content)


def run_compact(args: argparse.Namespace, settings: Settings) -> None:
    """Run the full compaction hook for a session file."""
    state = _load(args.session)
    if args.transcript_dir:
        settings = settings.model_copy(
            update={"transcript_dir": str(Path(args.transcript_dir).expanduser())}
        )

    result = handle_compaction(state, settings)
    if result.inject:
        print(result.content)


def run_prune(args: argparse.Namespace, settings: Settings) -> None:
    """Prune a transcript directory and print how many files were removed."""
    directory = _pick(args.transcript_dir, settings.transcript_dir)
    options = PruneOptions(
        max_count=_pick(args.max_count, settings.prune_max_count),
        max_age_days=_pick(args.max_age_days, settings.prune_max_age_days),
    )
    removed = prune_transcripts(directory, options)
    print(removed)


def show_config(settings: Settings) -> None:
    """Show current configuration."""
    print("\n=== smart-tail Configuration ===\n")

    print("Transcripts:")
    print(f"  Directory: {settings.transcript_dir}")
    print(f"  Include Tools: {settings.include_tools}")
    print(f"  Include Metadata: {settings.include_metadata}")
    print(f"  Max User Chars: {settings.max_user_chars}")
    print(f"  Max Assistant Chars: {settings.max_assistant_chars}")

    print("\nSmart Tail:")
    print(f"  Max Tokens: {settings.tail_max_tokens}")

    print("\nRetention:")
    print(f"  Max Count: {settings.prune_max_count}")
    print(f"  Max Age (days): {settings.prune_max_age_days}")

    print("\nLogging:")
    print(f"  Level: {settings.log_level}")


if __name__ == "__main__":
    sys.exit(main())
