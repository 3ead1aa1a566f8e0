from __future__ import annotations

import argparse
import io
import json
import logging
import sys

from safe_commit_hook import __version__
from safe_commit_hook.config import (
    CHECK_ALL_COMMITS_ENV,
    PATTERNS_ENV,
    ConfigurationError,
    load_settings,
)
from safe_commit_hook.git import GitError
from safe_commit_hook.pipeline import run_check


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safe-commit-hook",
        description="Block commits that stage files matching risky name, extension or path patterns",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--repo-path", default=None, help="Repository root (default: current directory)")
    parser.add_argument(
        "--patterns",
        default=None,
        help=f"Rules JSON path (default: ${PATTERNS_ENV} or .git/hooks/git-deny-patterns.json)",
    )
    parser.add_argument(
        "--all-commits",
        action="store_true",
        default=None,
        help=f"Also check every commit in history (default: ${CHECK_ALL_COMMITS_ENV})",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON instead of the text report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = load_settings(
        args.repo_path,
        patterns_path=args.patterns,
        check_all_commits=args.all_commits,
    )
    out = io.StringIO() if args.json else sys.stdout

    try:
        result = run_check(settings, out)
    except (ConfigurationError, GitError) as exc:
        parser.error(str(exc))
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=True))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
