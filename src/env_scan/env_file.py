from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

ENV_FILENAME = ".env"
ENV_HEADER = "# Environment Variables\n"


@dataclass(slots=True)
class ReconcileResult:
    added: List[str] = field(default_factory=list)
    written: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_env_text(text: str) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` text; keys declared without a value map to ``""``."""

    parsed = dotenv_values(stream=io.StringIO(text), interpolate=False)
    return {key: value or "" for key, value in parsed.items()}


def missing_names(discovered: Iterable[str], existing: Mapping[str, str]) -> List[str]:
    return sorted(set(discovered) - set(existing))


def format_additions(names: Iterable[str], tail: bytes = b"") -> str:
    """Render the appended block: one blank line, then ``NAME=`` lines.

    ``tail`` is the last byte of the file so far; a missing final newline is
    supplied first.
    """

    lines = "".join(f"{name}=\n" for name in names)
    if not lines:
        return ""
    if tail and tail != b"\n":
        return "\n\n" + lines
    return "\n" + lines


class EnvFile:
    """The persisted ``.env`` declaration file; only ever appended to."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def in_directory(cls, directory: str | Path) -> "EnvFile":
        return cls(Path(directory) / ENV_FILENAME)

    def exists(self) -> bool:
        return self.path.is_file()

    def ensure(self) -> bool:
        """Create the file with a header comment when missing.

        Returns True when the file was already there.
        """
        if self.exists():
            return True
        logger.info("%s not found, creating it", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(ENV_HEADER, encoding="utf-8")
        return False

    def read_text(self) -> str:
        if not self.exists():
            return ""
        return self.path.read_text(encoding="utf-8")

    def tail(self) -> bytes:
        if not self.exists():
            return b""
        return self.path.read_bytes()[-1:]

    def load(self) -> Dict[str, str]:
        try:
            text = self.read_text()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s, treating it as empty: %s", self.path, exc)
            return {}
        try:
            return parse_env_text(text)
        except ValueError as exc:
            logger.warning("Could not parse %s, treating it as empty: %s", self.path, exc)
            return {}

    def missing(self, discovered: Iterable[str], existing: Mapping[str, str] | None = None) -> List[str]:
        if existing is None:
            existing = self.load()
        return missing_names(discovered, existing)

    def reconcile(
        self,
        discovered: Iterable[str],
        existing: Mapping[str, str] | None = None,
        *,
        dry_run: bool = False,
    ) -> ReconcileResult:
        """Append ``NAME=`` for every discovered name the file does not declare yet.

        Existing lines are left untouched. Nothing is written when there is
        nothing to add or when ``dry_run`` is set. A failed write is reported
        on the result instead of raised.
        """
        result = ReconcileResult(added=self.missing(discovered, existing))
        if not result.added:
            logger.info("No new environment variables to add to %s", self.path)
            return result
        if dry_run:
            return result

        try:
            block = format_additions(result.added, self.tail())
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(block)
        except OSError as exc:
            logger.warning("Could not update %s: %s", self.path, exc)
            result.error = str(exc)
            return result

        result.written = True
        logger.info("Added %d new environment variables to %s", len(result.added), self.path)
        return result
