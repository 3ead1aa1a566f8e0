from __future__ import annotations

import logging
from typing import TextIO

from safe_commit_hook.checks import RuleEvaluator
from safe_commit_hook.config import HookSettings, load_rules
from safe_commit_hook.files import classify_files
from safe_commit_hook.git import ChangeSetSource, GitChangeSetSource, iter_change_sets
from safe_commit_hook.models import CheckResult, Finding
from safe_commit_hook.reporting import render_report
from safe_commit_hook.whitelist import load_whitelist

logger = logging.getLogger(__name__)


def run_check(
    settings: HookSettings,
    out: TextIO,
    *,
    source: ChangeSetSource | None = None,
) -> CheckResult:
    """Check every change-set selected by ``settings`` and report to ``out``.

    Raises ``ConfigurationError`` before anything is written when the rule
    file cannot be loaded.
    """
    rules = load_rules(settings.patterns_path)
    whitelist = load_whitelist(settings.repo_path)
    evaluator = RuleEvaluator(rules)
    source = source or GitChangeSetSource()

    findings: list[Finding] = []
    for change_set in iter_change_sets(
        source,
        settings.repo_path,
        check_all_commits=settings.check_all_commits,
    ):
        files = classify_files(change_set.paths, whitelist)
        matched = evaluator.evaluate(files, change_set.id)
        logger.debug(
            "%s: %d paths, %d checked, %d findings",
            change_set.id,
            len(change_set.paths),
            len(files),
            len(matched),
        )
        findings.extend(matched)

    result = CheckResult(findings=tuple(findings))
    render_report(result.findings, out)
    return result
