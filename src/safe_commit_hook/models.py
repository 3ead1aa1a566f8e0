from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

STAGED_CHANGE_SET_ID = "currently staged files"


@dataclass(frozen=True)
class Rule:
    part: str
    pattern: str
    caption: str
    description: str
    type: str = "regex"


@dataclass(frozen=True)
class ChangeSet:
    id: str
    paths: tuple[str, ...]


@dataclass(frozen=True)
class Finding:
    caption: str
    change_set_id: str
    file_path: str

    @property
    def message(self) -> str:
        return f"{self.caption} in commit {self.change_set_id} in file {self.file_path}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CheckResult:
    findings: tuple[Finding, ...]

    @property
    def exit_code(self) -> int:
        return 1 if self.findings else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "findings": [item.to_dict() for item in self.findings],
        }
