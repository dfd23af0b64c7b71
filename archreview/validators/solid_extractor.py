"""SOLID Extractor — field injection and oversized types."""

import re
from typing import Optional

from archreview.validators.base import BaseExtractor
from archreview.validators.models import Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.reference_data import INJECTION_ANNOTATIONS
from archreview.validators.source import SourceFile

_INJECTION = re.compile(r"@(" + "|".join(INJECTION_ANNOTATIONS) + r")\b(?:\s*\([^()]*\))?")
_OTHER_ANNOTATIONS = re.compile(r"@[\w.$]+(?:\s*\([^()]*\))?")
_FIELD_NAME = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:=[^;]*)?;\s*$")


class SolidExtractor(BaseExtractor):
    """Detects field injection and types that outgrow a single responsibility."""

    @property
    def name(self) -> str:
        return "SolidExtractor"

    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []

        # ── 1. Field Injection ──
        candidates.extend(self._check_field_injection(source))

        # ── 2. Class Length ──
        candidates.extend(self._check_class_length(source, thresholds))

        return candidates

    def _check_field_injection(self, source: SourceFile) -> list[Candidate]:
        """Flag injection annotations that sit on a field rather than a constructor."""
        candidates = []
        for number, line in self._code_lines(source):
            match = _INJECTION.search(line)
            if match is None:
                continue

            field_line = number
            rest = _OTHER_ANNOTATIONS.sub(" ", line[match.end():]).strip()
            # Annotation on its own line: skip any further annotation lines to the declaration
            while not rest and field_line is not None:
                field_line = self._next_code_line(source, field_line)
                if field_line is not None:
                    rest = _OTHER_ANNOTATIONS.sub(" ", source.code_line(field_line)).strip()
            if field_line is None:
                continue

            field = self._field_name(rest)
            if field is None:
                continue

            snippet = source.line(number)
            if field_line != number:
                snippet = f"{snippet} {source.line(field_line)}"
            candidates.append(self._candidate(
                "field_injection",
                number,
                snippet=snippet,
                column=match.start(),
                field=field,
                annotation=f"@{match.group(1)}",
            ))
        return candidates

    @staticmethod
    def _next_code_line(source: SourceFile, number: int) -> Optional[int]:
        for candidate in range(number + 1, len(source.masked_lines) + 1):
            if source.is_code(candidate):
                return candidate
        return None

    @staticmethod
    def _field_name(declaration: str) -> Optional[str]:
        """Name of the declared field, or None when this is not a field declaration."""
        if "(" in declaration.split("=", 1)[0]:
            return None
        match = _FIELD_NAME.search(declaration)
        if match is None:
            return None
        # A field needs at least a type before its name
        if len(declaration[: match.start()].split()) < 1:
            return None
        return match.group(1)

    def _check_class_length(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []
        for block in source.types:
            if not block.closed:
                continue
            length = block.span_length
            if length > thresholds.max_class_length:
                candidates.append(self._candidate(
                    "class_length",
                    block.header_line,
                    snippet=source.line(block.header_line),
                    name=block.name,
                    length=length,
                    limit=thresholds.max_class_length,
                ))
        return candidates
