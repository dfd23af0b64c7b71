"""Base extractor — abstract class implementing the Strategy Pattern.

Each extractor is a standalone, independently testable unit.
New extractors are added without modifying the engine.
"""

from abc import ABC, abstractmethod
from typing import Optional

from archreview.validators.models import SNIPPET_MAX_LENGTH, Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.source import SourceFile


class BaseExtractor(ABC):
    """Abstract base for all signal extractors.

    Contract:
        - extract() is deterministic: same input → same output
        - extract() reads only the source view and the thresholds
        - extract() never consults gates, overrides or whitelists
        - extract() returns a list of Candidate signals (empty = nothing found)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @abstractmethod
    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        """Scan one file for raw signals.

        Args:
            source: Masked, structure-scanned view of the file
            thresholds: Effective numeric limits

        Returns:
            List of Candidate signals keyed by rule table entries
        """
        ...

    # ── Helper Methods ──

    def _candidate(
        self,
        rule: str,
        line_number: Optional[int],
        snippet: Optional[str] = None,
        column: int = 0,
        literal: Optional[str] = None,
        **values,
    ) -> Candidate:
        """Convenience method to create a Candidate."""
        if snippet is not None and len(snippet) > SNIPPET_MAX_LENGTH:
            snippet = _truncate(snippet, literal)
        return Candidate(
            rule=rule,
            line_number=line_number,
            column=column,
            snippet=snippet,
            values=values,
            literal=literal,
        )

    def _code_lines(self, source: SourceFile):
        """Yield (line number, masked line) for every line with code on it."""
        for number, line in enumerate(source.masked_lines, start=1):
            if line.strip():
                yield number, line


def _truncate(snippet: str, literal: Optional[str] = None) -> str:
    """Cut a long snippet to SNIPPET_MAX_LENGTH, never through the literal.

    The window is moved to end at the literal when it lies past the cut, and a
    literal longer than the limit is kept whole with only the ellipses around it.
    """
    room = SNIPPET_MAX_LENGTH - 3
    position = snippet.find(literal) if literal else -1
    if position == -1 or position + len(literal) <= room:
        return snippet[:room] + "..."

    end = position + len(literal)
    start = min(position, end - (room - 3))
    head = "..." if start > 0 else ""
    tail = "..." if end < len(snippet) else ""
    return head + snippet[start:end] + tail
