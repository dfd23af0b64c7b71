"""Security Extractor — hardcoded secrets, injectable SQL, weak randomness and crypto, input validation."""

import re
from typing import Optional

from archreview.validators.base import BaseExtractor
from archreview.validators.models import Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.reference_data import (
    NON_SECRET_NAMES,
    SENSITIVE_NAME_TERMS,
    SQL_VERBS,
    WEAK_ALGORITHMS,
)
from archreview.validators.source import SourceFile

_ASSIGNED_LITERAL = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:(?<![=!<>])=(?!=)|:)\s*([\"'])")
_SQL_STATEMENT = re.compile(
    r"\b(SELECT)\b.*\bFROM\b|\b(INSERT)\s+INTO\b|\b(UPDATE)\s+[\w.`\"]+\s+SET\b|\b(DELETE)\s+FROM\b",
    re.IGNORECASE,
)
_INSECURE_RANDOM = re.compile(r"\bnew\s+Random\s*\(\s*\)|\bMath\s*\.\s*random\s*\(\s*\)")
_REQUEST_BODY = re.compile(r"@RequestBody\b")
_VALIDATION = re.compile(r"@(?:Valid|Validated)\b")
_EXCEPTION_DETAIL = re.compile(r"\.\s*(printStackTrace|getMessage)\s*\(\s*\)")
_LAST_IDENTIFIER = re.compile(r"([A-Za-z_$][\w$]*)\s*$")
_KEY_SEPARATOR = re.compile(r"^\s*(?::|=>|=)\s*$")


class SecurityExtractor(BaseExtractor):
    """Detects credentials in source, injectable queries and unsafe API usage."""

    @property
    def name(self) -> str:
        return "SecurityExtractor"

    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []

        for number, line in self._code_lines(source):
            # ── 1. Hardcoded Secrets ──
            candidates.extend(self._check_secrets(source, number, line))

            # ── 2. SQL Injection ──
            candidates.extend(self._check_sql_injection(source, number, line))

            # ── 3. Insecure Random ──
            for match in _INSECURE_RANDOM.finditer(line):
                candidates.append(self._candidate(
                    "insecure_random",
                    number,
                    snippet=source.line(number),
                    column=match.start(),
                    expression=" ".join(match.group(0).split()),
                ))

            # ── 4. Weak Cryptography ──
            candidates.extend(self._check_weak_crypto(source, number))

            # ── 5. Missing Input Validation ──
            candidates.extend(self._check_request_body(source, number, line))

            # ── 6. Exception Detail Exposure ──
            for match in _EXCEPTION_DETAIL.finditer(line):
                candidates.append(self._candidate(
                    "exception_exposure",
                    number,
                    snippet=source.line(number),
                    column=match.start(1),
                    call=match.group(1),
                ))

        return candidates

    def _check_secrets(self, source: SourceFile, number: int, line: str) -> list[Candidate]:
        """String literals assigned to names that look like credentials."""
        ordered = source.string_literals(number)
        literals = dict(ordered)
        candidates = []
        for match in _ASSIGNED_LITERAL.finditer(line):
            name = match.group(1)
            if not self._is_sensitive(name):
                continue
            literal = literals.get(match.start(2))
            if not literal:
                continue
            candidates.append(self._candidate(
                "hardcoded_secret",
                number,
                snippet=source.line(number),
                column=match.start(1),
                literal=literal,
                name=name,
            ))
        # Quoted keys, as in JSON or map literals: "password": "abc"
        for (key_column, key), (value_column, value) in zip(ordered, ordered[1:]):
            between = line[key_column + len(key) + 2 : value_column]
            if not value or not _KEY_SEPARATOR.match(between) or not self._is_sensitive(key):
                continue
            candidates.append(self._candidate(
                "hardcoded_secret",
                number,
                snippet=source.line(number),
                column=key_column,
                literal=value,
                name=key,
            ))
        return candidates

    @staticmethod
    def _is_sensitive(name: str) -> bool:
        lowered = name.lower()
        if any(term in lowered for term in NON_SECRET_NAMES):
            return False
        return any(term in lowered for term in SENSITIVE_NAME_TERMS)

    def _check_sql_injection(self, source: SourceFile, number: int, line: str) -> list[Candidate]:
        """SQL statements built by joining literals with '+'."""
        if "+" not in line:
            return []
        for column, literal in source.string_literals(number):
            verb = self._sql_verb(literal)
            if verb is None:
                continue
            return [self._candidate(
                "sql_injection",
                number,
                snippet=source.line(number),
                column=column,
                verb=verb,
            )]
        return []

    @staticmethod
    def _sql_verb(literal: str) -> Optional[str]:
        match = _SQL_STATEMENT.search(literal)
        if match is None:
            return None
        verb = next(group for group in match.groups() if group).upper()
        return verb if verb in SQL_VERBS else None

    def _check_weak_crypto(self, source: SourceFile, number: int) -> list[Candidate]:
        candidates = []
        for column, literal in source.string_literals(number):
            algorithm = literal.strip().upper()
            for weak in WEAK_ALGORITHMS:
                if algorithm == weak or algorithm.startswith(weak + "/"):
                    candidates.append(self._candidate(
                        "weak_crypto",
                        number,
                        snippet=source.line(number),
                        column=column,
                        algorithm=weak,
                    ))
                    break
        return candidates

    def _check_request_body(self, source: SourceFile, number: int, line: str) -> list[Candidate]:
        """Request bodies bound without a validation annotation on the same parameter."""
        candidates = []
        for match in _REQUEST_BODY.finditer(line):
            start = max(line.rfind("(", 0, match.start()), line.rfind(",", 0, match.start())) + 1
            ends = [pos for pos in (line.find(",", match.end()), line.find(")", match.end())) if pos != -1]
            end = min(ends) if ends else len(line)
            parameter = line[start:end]
            if _VALIDATION.search(parameter):
                continue
            name = _LAST_IDENTIFIER.search(parameter)
            candidates.append(self._candidate(
                "missing_validation",
                number,
                snippet=source.line(number),
                column=match.start(),
                name=name.group(1) if name else "body",
            ))
        return candidates
