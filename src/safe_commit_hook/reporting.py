from __future__ import annotations

from typing import Sequence, TextIO

from safe_commit_hook.models import Finding
from safe_commit_hook.whitelist import WHITELIST_NAME

PREAMBLE = (
    "[ERROR] Unable to complete git commit.",
    "See .git/hooks/pre-commit or https://github.com/compwron/safe-commit-hook-rb for details",
    f"Add full filepath to {WHITELIST_NAME} to ignore",
)


def render_report(findings: Sequence[Finding], out: TextIO) -> None:
    """Write the outcome of a run to ``out``; ``CheckResult.exit_code`` decides the status."""
    if findings:
        lines = [*PREAMBLE, *(item.message for item in findings)]
        out.write("\n".join(lines) + "\n")
        return

    out.write(f"safe-commit-hook check looks clean. See ignored files in {WHITELIST_NAME}\n")
