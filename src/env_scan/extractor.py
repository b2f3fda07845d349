from __future__ import annotations

import re
from typing import Iterator, List, Set

_NAME = r"[A-Za-z0-9_]+"

# Namespaces: process.env, import.meta.env and a whole-word ``env``.
# Access shapes: .NAME, ['NAME'] / ["NAME"], ('NAME') / ("NAME").
ENV_REFERENCE = re.compile(
    r"(?:process\.env|import\.meta\.env|\benv\b)"
    rf"(?:\.({_NAME})\b"
    rf"|\[['\"]({_NAME})['\"]\]"
    rf"|\(['\"]({_NAME})['\"]\))"
)


def iter_env_references(text: str) -> Iterator[str]:
    """Yield every environment variable reference in ``text``, repeats included."""

    for match in ENV_REFERENCE.finditer(text):
        name = match.group(1) or match.group(2) or match.group(3)
        if not name:
            continue
        yield name


def find_env_vars(text: str) -> List[str]:
    """Return referenced names in first-seen order without duplicates."""

    return list(dict.fromkeys(iter_env_references(text)))


def extract_env_vars(text: str) -> List[str]:
    """Return referenced names sorted lexicographically without duplicates."""

    return sorted(extract(text))


def extract(text: str) -> Set[str]:
    return set(iter_env_references(text))
