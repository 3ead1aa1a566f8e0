from __future__ import annotations

import logging
from pathlib import Path

from safe_commit_hook.files import VCS_DIR

logger = logging.getLogger(__name__)

WHITELIST_NAME = ".ignored_security_risks"


def find_whitelists(root: str | Path) -> list[Path]:
    root_path = Path(root)
    markers: list[Path] = []
    for path in sorted(root_path.rglob(WHITELIST_NAME)):
        if VCS_DIR in path.relative_to(root_path).parts:
            continue
        if path.is_file():
            markers.append(path)
    return markers


def load_whitelist(root: str | Path) -> frozenset[str]:
    """Union of the stripped, non-empty lines of every marker file under ``root``.

    An empty marker is created at ``root`` when none exists yet.
    """
    root_path = Path(root)
    markers = find_whitelists(root_path)
    if not markers:
        marker = root_path / WHITELIST_NAME
        marker.touch(exist_ok=True)
        logger.debug("created empty whitelist %s", marker)
        markers = [marker]

    entries: set[str] = set()
    for marker in markers:
        lines = marker.read_text(encoding="utf-8", errors="replace").splitlines()
        stripped = {line.strip() for line in lines}
        entries.update(line for line in stripped if line)
        logger.debug("loaded whitelist %s", marker)

    return frozenset(entries)
