from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from safe_commit_hook.checks import UnknownRulePart, build_matcher
from safe_commit_hook.models import Rule

DEFAULT_PATTERNS_PATH = ".git/hooks/git-deny-patterns.json"
PATTERNS_ENV = "GIT_DENY_PATTERNS"
CHECK_ALL_COMMITS_ENV = "CHECK_ALL_COMMITS"

REQUIRED_RULE_KEYS = ("part", "pattern", "caption", "description")


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class HookSettings:
    repo_path: Path
    patterns_path: Path
    check_all_commits: bool = False


def load_settings(
    repo_path: str | Path | None = None,
    *,
    patterns_path: str | Path | None = None,
    check_all_commits: bool | None = None,
    environ: Mapping[str, str] | None = None,
) -> HookSettings:
    env = os.environ if environ is None else environ
    repo = Path(repo_path or os.getcwd()).resolve()

    patterns = Path(patterns_path or env.get(PATTERNS_ENV) or DEFAULT_PATTERNS_PATH)
    if not patterns.is_absolute():
        patterns = repo / patterns

    if check_all_commits is None:
        check_all_commits = _env_true(env, CHECK_ALL_COMMITS_ENV)

    return HookSettings(
        repo_path=repo,
        patterns_path=patterns,
        check_all_commits=bool(check_all_commits),
    )


def load_rules(path: str | Path) -> list[Rule]:
    rules_path = Path(path)
    if not rules_path.is_file():
        raise ConfigurationError(f"Rules file not found: {rules_path}")

    try:
        with rules_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Rules file is not readable: {rules_path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Rules file is not valid JSON: {rules_path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ConfigurationError("Rules file must contain a list")

    rules: list[Rule] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigurationError(f"Rule #{index} must be an object")

        missing = [key for key in REQUIRED_RULE_KEYS if key not in item]
        if missing:
            raise ConfigurationError(f"Rule #{index} is missing keys: {', '.join(missing)}")

        values = {key: item[key] for key in REQUIRED_RULE_KEYS}
        values["type"] = item.get("type") or "regex"
        if values["description"] is None:
            values["description"] = ""
        for key, value in values.items():
            if not isinstance(value, str):
                raise ConfigurationError(f"Rule #{index} field '{key}' must be a string")

        rule = Rule(**values)
        try:
            build_matcher(rule)
        except UnknownRulePart:
            # reported and skipped at evaluation time
            pass
        except re.error as exc:
            raise ConfigurationError(
                f"Rule #{index} ({rule.caption}) has an invalid pattern {rule.pattern!r}: {exc}"
            ) from exc
        rules.append(rule)

    return rules


def _env_true(env: Mapping[str, str], name: str) -> bool:
    value = (env.get(name) or "").strip().lower()
    return value in {"1", "true", "yes", "on"}
