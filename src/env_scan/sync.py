from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .env_file import EnvFile, ReconcileResult
from .scanner import ScanReport, scan_files

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncOutcome:
    env_file: EnvFile
    created: bool
    existing_count: int
    report: ScanReport
    result: ReconcileResult
    create_error: str | None = None


def sync_env(
    root: str | Path,
    env_path: str | Path | None = None,
    *,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
    dry_run: bool = False,
) -> SyncOutcome:
    """Scan ``root`` and append undeclared names to its ``.env`` file.

    The store is read once before scanning and written at most once after
    every file has been scanned. With ``dry_run`` a missing store is not
    created and nothing is written.
    """
    root = Path(root)
    env_file = EnvFile(env_path) if env_path else EnvFile.in_directory(root)
    create_error = None
    if dry_run:
        created = not env_file.exists()
    else:
        try:
            created = not env_file.ensure()
        except OSError as exc:
            logger.warning("Could not create %s: %s", env_file.path, exc)
            created = False
            create_error = str(exc)
    existing = env_file.load()
    logger.debug("Loaded %d existing variables from %s", len(existing), env_file.path)

    report = scan_files(root, include=include, exclude=exclude)
    result = env_file.reconcile(report.all_env_vars, existing, dry_run=dry_run)
    return SyncOutcome(
        env_file=env_file,
        created=created,
        existing_count=len(existing),
        report=report,
        result=result,
        create_error=create_error,
    )
