"""Clean Code Extractor — method size, parameter lists, nesting, magic numbers and naming."""

import re

from archreview.validators.base import BaseExtractor
from archreview.validators.models import Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.reference_data import (
    ACCEPTED_SHORT_NAMES,
    PRIMITIVE_TYPES,
    VAGUE_METHOD_NAMES,
)
from archreview.validators.source import Block, SourceFile

# Nesting at or beyond this depth is always reported
MAX_NESTING_DEPTH = 4

# Consecutive statement lines that make up a duplicated block
DUPLICATE_WINDOW = 5

_INTEGER = re.compile(r"(?<![\w$.])(-?)(\d+)[lL]?(?![\w$.])")
_CONSTANT_DECLARATION = re.compile(r"\bstatic\s+final\b|\bfinal\s+static\b|\bconst\b")
_NON_CODE_STATEMENT = re.compile(r"^\s*(?:import|package|#include|using)\b")
_SHORT_DECLARATION = re.compile(
    r"(?:\b(?:" + "|".join(sorted(PRIMITIVE_TYPES)) + r")|\b[A-Z][\w$]*(?:<[^<>]*>)?(?:\[\])*)"
    r"\s+([A-Za-z_$])\s*(?=[=;,):])"
)
_TRAILING_DIGITS = re.compile(r"\d+$")
_BRACE_ONLY = re.compile(r"^[{}();,\s]*$")


class CleanCodeExtractor(BaseExtractor):
    """Detects long methods, long parameter lists, deep nesting, magic numbers and poor names."""

    @property
    def name(self) -> str:
        return "CleanCodeExtractor"

    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []

        # ── 1. Method Length & Parameter Count ──
        for method in source.methods:
            candidates.extend(self._check_method(source, method, thresholds))

        # ── 2. Deep Nesting ──
        candidates.extend(self._check_nesting(source))

        # ── 3. Magic Numbers ──
        candidates.extend(self._check_magic_numbers(source))

        # ── 4. Naming ──
        candidates.extend(self._check_method_names(source))
        candidates.extend(self._check_short_identifiers(source))

        # ── 5. Empty Catch Blocks ──
        candidates.extend(self._check_empty_catch(source))

        # ── 6. Duplicate Blocks ──
        candidates.extend(self._check_duplicates(source))

        return candidates

    def _check_method(self, source: SourceFile, method: Block, thresholds: Thresholds) -> list[Candidate]:
        candidates = []
        snippet = source.line(method.header_line)

        length = source.body_length(method)
        if method.closed and length > thresholds.max_method_length:
            candidates.append(self._candidate(
                "method_length",
                method.header_line,
                snippet=snippet,
                name=method.name,
                length=length,
                limit=thresholds.max_method_length,
            ))

        count = len(method.parameters)
        if count > thresholds.max_parameters:
            candidates.append(self._candidate(
                "parameter_count",
                method.header_line,
                snippet=snippet,
                name=method.name,
                count=count,
                limit=thresholds.max_parameters,
            ))

        return candidates

    def _check_nesting(self, source: SourceFile) -> list[Candidate]:
        """One finding per outermost control-flow region that nests too deep."""
        deepest: dict[int, int] = {}

        for index, block in enumerate(source.blocks):
            if block.kind != "control":
                continue
            depth, root = 1, index
            parent = block.parent
            while parent is not None:
                ancestor = source.blocks[parent]
                if ancestor.kind in ("method", "type"):
                    break
                if ancestor.kind == "control":
                    depth += 1
                    root = parent
                parent = ancestor.parent
            deepest[root] = max(deepest.get(root, 0), depth)

        candidates = []
        for root, depth in sorted(deepest.items()):
            if depth >= MAX_NESTING_DEPTH:
                block = source.blocks[root]
                candidates.append(self._candidate(
                    "deep_nesting",
                    block.header_line,
                    snippet=source.line(block.header_line),
                    depth=depth,
                ))
        return candidates

    def _check_magic_numbers(self, source: SourceFile) -> list[Candidate]:
        candidates = []
        for number, line in self._code_lines(source):
            if _CONSTANT_DECLARATION.search(line) or _NON_CODE_STATEMENT.match(line):
                continue
            for match in _INTEGER.finditer(line):
                sign = match.group(1)
                if sign and self._is_binary_minus(line, match.start()):
                    sign = ""
                literal = sign + match.group(2)
                candidates.append(self._candidate(
                    "magic_number",
                    number,
                    snippet=source.line(number),
                    column=match.start(2) - len(sign),
                    literal=literal,
                    number=literal,
                ))
        return candidates

    @staticmethod
    def _is_binary_minus(line: str, minus_at: int) -> bool:
        """A '-' after an operand subtracts rather than negates."""
        before = line[:minus_at].rstrip()
        return bool(before) and (before[-1].isalnum() or before[-1] in "_$)]\"'")

    def _check_method_names(self, source: SourceFile) -> list[Candidate]:
        candidates = []
        for method in source.methods:
            base = _TRAILING_DIGITS.sub("", method.name)
            if base in VAGUE_METHOD_NAMES:
                candidates.append(self._candidate(
                    "poor_method_name",
                    method.header_line,
                    snippet=source.line(method.header_line),
                    name=method.name,
                ))
        return candidates

    def _check_short_identifiers(self, source: SourceFile) -> list[Candidate]:
        candidates = []
        for number, line in self._code_lines(source):
            for match in _SHORT_DECLARATION.finditer(line):
                name = match.group(1)
                if name in ACCEPTED_SHORT_NAMES:
                    continue
                candidates.append(self._candidate(
                    "short_identifier",
                    number,
                    snippet=source.line(number),
                    column=match.start(1),
                    name=name,
                ))
        return candidates

    def _check_empty_catch(self, source: SourceFile) -> list[Candidate]:
        candidates = []
        for block in source.blocks:
            if block.name != "catch" or not block.closed:
                continue
            if source.masked[block.open_offset + 1 : block.close_offset].strip():
                continue
            header = source.masked[: block.open_offset]
            paren_open = header.rfind("(")
            paren_close = header.rfind(")")
            declared = header[paren_open + 1 : paren_close].split() if 0 <= paren_open < paren_close else []
            exception = declared[0] if declared else "exception"
            candidates.append(self._candidate(
                "empty_catch",
                block.header_line,
                snippet=source.line(block.header_line),
                exception=exception,
            ))
        return candidates

    def _check_duplicates(self, source: SourceFile) -> list[Candidate]:
        """Report each run of statement lines already seen earlier in the file."""
        statements = [
            (number, source.line(number))
            for number, line in self._code_lines(source)
            if not _BRACE_ONLY.match(line)
        ]

        candidates = []
        first_seen: dict[tuple[str, ...], int] = {}
        index = 0
        while index + DUPLICATE_WINDOW <= len(statements):
            window = statements[index : index + DUPLICATE_WINDOW]
            key = tuple(text for _, text in window)
            earlier = first_seen.get(key)
            if earlier is not None and earlier + DUPLICATE_WINDOW <= index:
                first = statements[earlier][0]
                candidates.append(self._candidate(
                    "duplicate_block",
                    window[0][0],
                    snippet="\n".join(key),
                    first=first,
                    first_end=statements[earlier + DUPLICATE_WINDOW - 1][0],
                    second=window[0][0],
                ))
                index += DUPLICATE_WINDOW
                continue
            first_seen.setdefault(key, index)
            index += 1
        return candidates
