from __future__ import annotations

import posixpath
from typing import AbstractSet, Iterable

VCS_DIR = ".git"


def is_vcs_path(file_path: str) -> bool:
    return file_path.split("/")[0] == VCS_DIR


def classify_files(paths: Iterable[str], whitelist: AbstractSet[str]) -> dict[str, str]:
    """Map each checkable path to its base name, in input order.

    Paths inside the git metadata directory and whitelisted paths are dropped.
    """
    classified: dict[str, str] = {}
    for file_path in paths:
        if is_vcs_path(file_path) or file_path in whitelist:
            continue
        classified[file_path] = posixpath.basename(file_path)
    return classified
