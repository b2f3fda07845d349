"""Walk a source tree and collect environment variable references per file.

The walk itself is deliberately thin: candidate files are picked with glob
patterns, excluded directories are filtered by name, and every file's text
is handed to :mod:`env_scan.extractor`. Files that cannot be read or decoded
are recorded on the report and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from .extractor import find_env_vars

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE: tuple[str, ...] = (
    "**/*.js",
    "**/*.ts",
    "**/*.jsx",
    "**/*.tsx",
    "**/*.prisma",
    "**/*.env*",
)

DEFAULT_EXCLUDE: tuple[str, ...] = (
    "node_modules",
    "dist",
    "build",
    ".git",
    ".next",
    "coverage",
)


@dataclass
class ScanReport:
    """Per-file references plus the bookkeeping of one scan."""

    root: str = "."
    files: Dict[str, List[str]] = field(default_factory=dict)
    files_scanned: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def all_env_vars(self) -> List[str]:
        names = set()
        for found in self.files.values():
            names.update(found)
        return sorted(names)

    def add(self, relative_path: str, names: Sequence[str]) -> None:
        if names:
            self.files[relative_path] = list(names)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "files_scanned": self.files_scanned,
            "files": {path: list(names) for path, names in self.files.items()},
            "env_vars": self.all_env_vars,
            "errors": list(self.errors),
        }


def _is_excluded(relative: Path, exclude: Iterable[str]) -> bool:
    excluded = set(exclude)
    return any(part in excluded for part in relative.parts[:-1])


def iter_candidate_files(
    root: str | Path,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> List[Path]:
    root = Path(root)
    patterns = include or DEFAULT_INCLUDE
    skip = DEFAULT_EXCLUDE if exclude is None else exclude
    seen: Dict[Path, None] = {}
    for pattern in patterns:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            if _is_excluded(path.relative_to(root), skip):
                continue
            seen.setdefault(path, None)
    return sorted(seen)


def scan_text(relative_path: str, text: str) -> List[str]:
    names = find_env_vars(text)
    if names:
        logger.debug("%s: %s", relative_path, ", ".join(names))
    return names


def scan_files(
    root: str | Path,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> ScanReport:
    """Scan every candidate file under ``root``.

    Args:
        root: Directory to walk.
        include: Glob patterns relative to ``root`` (defaults to ``DEFAULT_INCLUDE``).
        exclude: Directory names to skip (defaults to ``DEFAULT_EXCLUDE``).

    Returns:
        ScanReport keyed by POSIX paths relative to ``root``; files without
        references are left out.
    """
    root = Path(root)
    report = ScanReport(root=str(root))
    candidates = iter_candidate_files(root, include, exclude)
    logger.info("Found %d files to scan in %s", len(candidates), root)

    for path in candidates:
        relative = path.relative_to(root).as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable file %s: %s", relative, exc)
            report.errors.append(f"Could not read {relative}: {exc}")
            continue
        report.files_scanned += 1
        report.add(relative, scan_text(relative, text))

    return report
