"""pipy-transcript CLI - truncate and summarize stored transcripts."""

import argparse
import asyncio
import logging
import sys

from .errors import TruncationError
from .provider import LiteLLMSummarizer
from .settings import SettingsManager
from .storage import JsonlTranscriptStore
from .truncation import format_tool_response, format_tool_results, run_truncation, total_tokens


def _create_store(args, manager: SettingsManager) -> JsonlTranscriptStore:
    return JsonlTranscriptStore(args.root or manager.get_storage_root())


def cmd_truncate(args, manager: SettingsManager) -> int:
    """Truncate a transcript and summarize what was removed."""
    summarizer_settings = manager.get_summarizer_settings()
    summarizer = LiteLLMSummarizer(
        model=args.model or summarizer_settings.model,
        max_tokens=summarizer_settings.max_tokens,
        temperature=summarizer_settings.temperature,
        api_key=summarizer_settings.api_key,
    )
    store = _create_store(args, manager)

    try:
        request = manager.build_request({
            "max_tokens_to_keep": args.max_tokens,
            "summary_length": args.summary_length,
            "request_source": args.request_source,
        })
        report = asyncio.run(
            run_truncation(args.transcript_id, request.model_dump(), summarizer, store)
        )
    except (TruncationError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_tool_results(report))
        print()
        print(format_tool_response(report))
    return 0


def cmd_tokens(args, manager: SettingsManager) -> int:
    """Show token usage of a transcript."""
    store = _create_store(args, manager)
    try:
        messages = store.load_transcript(args.transcript_id)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Messages: {len(messages)}")
    print(f"Tokens: {total_tokens(messages):,}")
    return 0


def cmd_list(args, manager: SettingsManager) -> int:
    """List stored transcripts."""
    store = _create_store(args, manager)
    ids = store.list_transcripts()
    for transcript_id in ids:
        print(transcript_id)
    print(f"\n{len(ids)} transcripts found")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipy-transcript",
        description="Truncate long transcripts and summarize the removed context",
    )
    parser.add_argument("--root", metavar="DIR", help="Transcript storage directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # truncate
    p = sub.add_parser("truncate", help="Truncate a transcript to a token budget")
    p.add_argument("transcript_id", help="Transcript id")
    p.add_argument("--max-tokens", type=int, help="Tokens to keep (1000-128000, default: 64000)")
    p.add_argument(
        "--summary-length",
        choices=["short", "medium", "long"],
        help="Summary verbosity (default: long)",
    )
    p.add_argument(
        "--request-source",
        choices=["user", "tool"],
        help="Who requested the truncation (default: tool)",
    )
    p.add_argument("-m", "--model", help="Summarization model")
    p.add_argument("--json", action="store_true", help="Print the report as JSON")

    # tokens
    p = sub.add_parser("tokens", help="Show token usage of a transcript")
    p.add_argument("transcript_id", help="Transcript id")

    # list
    sub.add_parser("list", help="List stored transcripts")

    return parser


COMMANDS = {
    "truncate": cmd_truncate,
    "tokens": cmd_tokens,
    "list": cmd_list,
}


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    manager = SettingsManager()
    return COMMANDS[args.command](args, manager)


if __name__ == "__main__":
    sys.exit(main())
