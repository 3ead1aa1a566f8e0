"""Rule evaluation: one matcher per rule part, applied to classified files."""

from __future__ import annotations

import logging
import posixpath
import re
from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from safe_commit_hook.models import Finding, Rule

logger = logging.getLogger(__name__)

# Letters that start an escape sequence understood by the `re` module.
_REGEX_ESCAPE_LETTERS = frozenset("AbBdDsSwWZzafnrtvxuUN")


class UnknownRulePart(ValueError):
    pass


class Matcher(ABC):
    @abstractmethod
    def matches(self, file_path: str, basename: str) -> bool:
        raise NotImplementedError


class FilenameMatcher(Matcher):
    """Regex searched anywhere in the base name; anchors come from the pattern."""

    def __init__(self, pattern: str):
        self.regex = re.compile(pattern)

    def matches(self, file_path: str, basename: str) -> bool:
        return self.regex.search(basename) is not None


class ExtensionMatcher(Matcher):
    """Exact, case-sensitive comparison against the text after the last dot."""

    def __init__(self, pattern: str):
        self.extension = pattern

    def matches(self, file_path: str, basename: str) -> bool:
        return file_extension(basename) == self.extension


class PathMatcher(Matcher):
    """Regex that must match at the start of the file's directory."""

    def __init__(self, pattern: str):
        self.regex = re.compile(escape_backslashes(pattern))

    def matches(self, file_path: str, basename: str) -> bool:
        return self.regex.match(directory_of(file_path)) is not None


_MATCHERS: dict[str, type[Matcher]] = {
    "filename": FilenameMatcher,
    "extension": ExtensionMatcher,
    "path": PathMatcher,
}


def build_matcher(rule: Rule) -> Matcher:
    matcher_cls = _MATCHERS.get(rule.part)
    if matcher_cls is None:
        raise UnknownRulePart(f"invalid part of check pattern: {rule.part!r}")
    return matcher_cls(rule.pattern)


def file_extension(basename: str) -> str:
    _, dot, extension = basename.rpartition(".")
    return extension if dot else ""


def directory_of(file_path: str) -> str:
    return posixpath.dirname(file_path) or "."


def escape_backslashes(pattern: str) -> str:
    """Double every backslash that does not begin a regex escape.

    ``\\A``, ``\\.`` and ``\\\\`` keep their regex meaning; a backslash in
    front of anything else (``config\\keys``, a trailing ``\\``) matches a
    literal backslash.
    """
    return re.sub(r"\\(.?)", _escape_backslash, pattern, flags=re.DOTALL)


def _escape_backslash(match: re.Match) -> str:
    follower = match.group(1)
    if follower and (follower in _REGEX_ESCAPE_LETTERS or not (follower.isascii() and follower.isalpha())):
        return match.group(0)
    return "\\\\" + follower


class RuleEvaluator:
    def __init__(self, rules: Iterable[Rule]):
        self.rules = list(rules)
        self._matchers: list[tuple[Rule, Matcher]] = []
        for rule in self.rules:
            try:
                self._matchers.append((rule, build_matcher(rule)))
            except UnknownRulePart:
                logger.warning("invalid part of check pattern, skipping rule: %s", rule)

    def evaluate(self, files: Mapping[str, str], change_set_id: str) -> list[Finding]:
        findings: list[Finding] = []
        for rule, matcher in self._matchers:
            for file_path, basename in files.items():
                if matcher.matches(file_path, basename):
                    findings.append(
                        Finding(
                            caption=rule.caption,
                            change_set_id=change_set_id,
                            file_path=file_path,
                        )
                    )
        return findings
