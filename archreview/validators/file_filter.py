"""File filter — glob matching that decides how a file is treated.

Patterns use shell-style wildcards. Inputs are file names rather than
directory trees, so ``**`` carries no recursive meaning and is folded to ``*``.
A pattern matches when it matches either the full name or its last path
component.
"""

import fnmatch
import posixpath
import re
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from archreview.validators.policy import Policy

_DOUBLE_STAR = re.compile(r"\*{2,}")


def normalize_glob(pattern: str) -> str:
    """Fold ``**`` runs into a single ``*``."""
    return _DOUBLE_STAR.sub("*", pattern.strip())


def check_glob(pattern: str) -> str:
    """Return the normalized pattern, or raise ValueError if it is malformed.

    Malformed means empty, or a character class ``[`` that is never closed.
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise ValueError("glob pattern must be a non-empty string")

    normalized = normalize_glob(pattern)
    index = 0
    while index < len(normalized):
        if normalized[index] == "[":
            close = normalized.find("]", index + 2)
            if close == -1:
                raise ValueError(f"glob pattern '{pattern}' has an unclosed '['")
            index = close
        index += 1
    return normalized


def matches_any(file_name: str, patterns: Iterable[str]) -> bool:
    """Check if the file name matches any of the glob patterns."""
    name = file_name.replace("\\", "/")
    base = posixpath.basename(name)
    for pattern in patterns:
        glob = normalize_glob(pattern)
        if fnmatch.fnmatchcase(name, glob) or fnmatch.fnmatchcase(base, glob):
            return True
    return False


def should_ignore(file_name: str, policy: "Policy") -> bool:
    return matches_any(file_name, policy.patterns.ignore_files)


def is_critical(file_name: str, policy: "Policy") -> bool:
    return matches_any(file_name, policy.patterns.critical_files)


def is_security_skipped(file_name: str, policy: "Policy") -> bool:
    return matches_any(file_name, policy.patterns.whitelist.skip_security_checks)


def matching_groups(file_name: str, policy: "Policy") -> list[str]:
    """Names of the custom pattern groups the file belongs to, sorted."""
    return sorted(
        name
        for name, patterns in policy.patterns.custom_patterns.items()
        if matches_any(file_name, patterns)
    )
