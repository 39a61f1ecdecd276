"""CLI harness: summarize a text file, show model status, browse and export history."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from page_summariser.factory import build_history, build_orchestrator, build_tracker
from page_summariser.settings import SummariserSettings
from page_summariser.state.history import export_filename, format_export
from page_summariser.summarize.types import PageContent, SummarizeRequest, SummarizeSuccess


def _read_content(args: argparse.Namespace) -> PageContent:
    if args.file == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.file).read_text(encoding="utf-8")
    return PageContent(text=text, title=args.title or "", url=args.url or "")


def _cmd_summarize(args: argparse.Namespace, settings: SummariserSettings) -> int:
    api_key = args.api_key or settings.api_key
    if not api_key:
        print("Error: API key is required (--api-key or SUMMARISER_API_KEY)", file=sys.stderr)
        return 1
    try:
        page = _read_content(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    tracker = build_tracker(settings)
    orch = build_orchestrator(settings, tracker)
    outcome = asyncio.run(
        orch.summarize(SummarizeRequest(text=page.text, api_key=api_key, explicit_model=args.model))
    )
    if not isinstance(outcome, SummarizeSuccess):
        print(f"Error: {outcome.reason}", file=sys.stderr)
        return 1

    print(outcome.summary)
    info = outcome.model_info
    print(
        f"\nmodel={info.display_name} ({outcome.model_used}) provider={info.provider_name} "
        f"chunks={outcome.chunk_count} fallback={'yes' if outcome.fallback_used else 'no'}",
        file=sys.stderr,
    )
    if not args.no_history:
        entry = build_history(settings).add(
            summary=outcome.summary,
            text=page.text,
            title=page.title,
            url=page.url,
            model_info=info,
        )
        print(f"saved history entry {entry.id}", file=sys.stderr)
    return 0


def _cmd_status(args: argparse.Namespace, settings: SummariserSettings) -> int:
    tracker = build_tracker(settings)
    status = build_orchestrator(settings, tracker).model_status()
    available = len(status.available_models)
    if available == 0:
        print(f"All {status.total_models} free models exhausted - resets at midnight UTC")
    else:
        print(f"{available}/{status.total_models} free models available (day {tracker.day_stamp} UTC)")
    for model in settings.free_models:
        mark = "exhausted" if model in status.exhausted_models else "available"
        print(f"  {mark:<10} {model}")
    return 0


def _cmd_history(args: argparse.Namespace, settings: SummariserSettings) -> int:
    history = build_history(settings)
    if args.action == "list":
        entries = history.list_entries()
        if not entries:
            print("No summaries yet")
        for e in entries:
            print(f"{e.id}  {e.created_at:%Y-%m-%d %H:%M}  {e.hostname or '-'}  {e.title}")
        return 0
    if args.action == "show":
        entry = history.get(args.id)
        if entry is None:
            print(f"Error: history entry not found: {args.id}", file=sys.stderr)
            return 1
        print(f"{entry.title}\n{entry.url}\n")
        print(entry.summary)
        return 0
    if args.action == "export":
        entry = history.get(args.id)
        if entry is None:
            print(f"Error: history entry not found: {args.id}", file=sys.stderr)
            return 1
        out = Path(args.out) if args.out else Path(export_filename(entry.title))
        try:
            out.write_text(format_export(entry), encoding="utf-8")
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"exported {entry.id} to {out}")
        return 0
    if args.action == "delete":
        if not history.delete(args.id):
            print(f"Error: history entry not found: {args.id}", file=sys.stderr)
            return 1
        print(f"deleted {args.id}")
        return 0
    removed = history.clear()
    print(f"cleared {removed} entries")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Page Summariser CLI")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_sum = sub.add_parser("summarize", help="Summarize page text from a file (or - for stdin)")
    p_sum.add_argument("file", help="Path to a text file, or - for stdin")
    p_sum.add_argument("--api-key", "-k", default=None, help="OpenRouter API key (default: SUMMARISER_API_KEY)")
    p_sum.add_argument("--model", "-m", default=None, help="Pin a model; disables free-model cycling if not free")
    p_sum.add_argument("--title", default=None, help="Page title for history")
    p_sum.add_argument("--url", default=None, help="Page URL for history")
    p_sum.add_argument("--no-history", action="store_true", help="Do not save the summary to history")
    p_sum.set_defaults(func=_cmd_summarize)

    p_status = sub.add_parser("status", help="Show free model availability for today (UTC)")
    p_status.set_defaults(func=_cmd_status)

    p_hist = sub.add_parser("history", help="Browse saved summaries")
    hist_sub = p_hist.add_subparsers(dest="action", required=True)
    hist_sub.add_parser("list", help="List saved summaries (newest first)")
    for name, help_text in (("show", "Print one summary"), ("delete", "Delete one summary")):
        p = hist_sub.add_parser(name, help=help_text)
        p.add_argument("id", help="History entry ID")
    p_export = hist_sub.add_parser("export", help="Write one summary to a .txt file")
    p_export.add_argument("id", help="History entry ID")
    p_export.add_argument("--out", "-o", default=None, help="Output path (default: <sanitised title>.txt)")
    hist_sub.add_parser("clear", help="Delete all summaries")
    p_hist.set_defaults(func=_cmd_history)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args, SummariserSettings())


if __name__ == "__main__":
    sys.exit(main())
