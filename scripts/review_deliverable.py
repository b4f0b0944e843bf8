#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from app.backend import config  # noqa: E402
from app.backend.review.errors import DeliverableError  # noqa: E402
from app.backend.services import review_service  # noqa: E402


EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_BAD_DELIVERABLE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Review an agent deliverable folder.")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Build the status matrix and run the C1-C7 rules.")
    analyze.add_argument("folder", help="Deliverable folder holding <instance>.json and logs/.")
    analyze.add_argument("--output", default="", help="Write the JSON analysis here instead of stdout.")

    search = sub.add_parser("search", help="Show every log line mentioning a test.")
    search.add_argument("folder", help="Deliverable folder holding <instance>.json and logs/.")
    search.add_argument("test_name", help="Exact, case-sensitive test name.")
    search.add_argument("--context", type=int, default=None, help="Lines of context around each match.")
    return parser


def _print_search(test_name: str, results: dict) -> None:
    for key, matches in results.items():
        stage = key.replace("_results", "")
        print(f"== {stage}: {len(matches)} match(es) for {test_name}")
        for match in matches:
            for line in match["context_before"]:
                print(f"   {line}")
            print(f"{match['line_number']:>5}> {match['line_content']}")
            for line in match["context_after"]:
                print(f"   {line}")
            print("")


def main(argv: Optional[List[str]] = None) -> int:
    config.configure_logging()
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "analyze":
            analysis = review_service.analyze_deliverable(args.folder)
            rendered = json.dumps(analysis, indent=2)
            if args.output:
                Path(args.output).write_text(rendered + "\n", encoding="utf-8")
            else:
                print(rendered)
            return EXIT_VIOLATIONS if analysis["status"] == "fail" else EXIT_OK
        results = review_service.search_deliverable(args.folder, args.test_name, args.context)
        _print_search(args.test_name, results)
        return EXIT_OK
    except DeliverableError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if exc.found:
            print(f"found files: {', '.join(exc.found)}", file=sys.stderr)
        return EXIT_BAD_DELIVERABLE


if __name__ == "__main__":
    raise SystemExit(main())
