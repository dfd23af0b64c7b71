"""Performance Extractor — wide queries, unbounded reads, loop concatenation and eager collections."""

import re

from archreview.validators.base import BaseExtractor
from archreview.validators.models import Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.reference_data import (
    BULK_READ_CALLS,
    COLLECTION_RELATIONS,
    IMMUTABLE_STRING_TYPES,
)
from archreview.validators.source import SourceFile

LOOP_KEYWORDS = {"for", "foreach", "while", "do"}

_SELECT_ALL = re.compile(r"\bselect\s+\*\s+from\b", re.IGNORECASE)
_BULK_READ = re.compile(r"\.\s*(" + "|".join(BULK_READ_CALLS) + r")\s*\(\s*\)")
_RELATION = re.compile(r"@(" + "|".join(COLLECTION_RELATIONS) + r")\b(\s*\([^()]*\))?")
_STRING_DECLARATION = re.compile(
    r"\b(?:" + "|".join(sorted(IMMUTABLE_STRING_TYPES)) + r")\s+([A-Za-z_$][\w$]*)\s*[=;,)]"
)
_CONCATENATION = re.compile(r"\b([A-Za-z_$][\w$]*)\s*(?:\+=|=\s*\1\s*\+)")


class PerformanceExtractor(BaseExtractor):
    """Detects query and collection patterns that degrade with data volume."""

    @property
    def name(self) -> str:
        return "PerformanceExtractor"

    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []
        string_names = set(_STRING_DECLARATION.findall(source.masked))

        for number, line in self._code_lines(source):
            # ── 1. SELECT * ──
            for column, literal in source.string_literals(number):
                if _SELECT_ALL.search(literal):
                    candidates.append(self._candidate(
                        "select_all",
                        number,
                        snippet=source.line(number),
                        column=column,
                        query=literal.strip(),
                    ))

            # ── 2. Unbounded Reads ──
            for match in _BULK_READ.finditer(line):
                candidates.append(self._candidate(
                    "unbounded_read",
                    number,
                    snippet=source.line(number),
                    column=match.start(1),
                    call=match.group(1),
                ))

            # ── 3. String Concatenation In Loops ──
            if string_names:
                candidates.extend(self._check_loop_concatenation(source, number, line, string_names))

            # ── 4. Eager Collection Mappings ──
            for match in _RELATION.finditer(line):
                arguments = match.group(2) or ""
                if "LAZY" in arguments:
                    continue
                candidates.append(self._candidate(
                    "eager_collection",
                    number,
                    snippet=source.line(number),
                    column=match.start(),
                    annotation=f"@{match.group(1)}",
                ))

        return candidates

    def _check_loop_concatenation(
        self, source: SourceFile, number: int, line: str, string_names: set[str]
    ) -> list[Candidate]:
        candidates = []
        line_start = source.line_offset(number)
        for match in _CONCATENATION.finditer(line):
            name = match.group(1)
            if name not in string_names:
                continue
            enclosing = source.enclosing(line_start + match.start())
            if not any(block.kind == "control" and block.name in LOOP_KEYWORDS for block in enclosing):
                continue
            candidates.append(self._candidate(
                "string_concat_loop",
                number,
                snippet=source.line(number),
                column=match.start(),
                name=name,
            ))
        return candidates
