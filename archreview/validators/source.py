"""Source view — masked text and brace structure shared by all extractors.

The engine never parses a language. It masks comments and string contents
(same length, newlines kept) so that braces, keywords and digits inside them
become invisible, then pairs braces and labels each block by the text that
precedes it: a type, a method, a control-flow statement, or anything else.

Everything here is total: unbalanced braces, unterminated strings and binary
noise only produce fewer blocks, never an exception.
"""

import bisect
import posixpath
import re
from dataclasses import dataclass, field
from typing import Optional

from archreview.validators.reference_data import (
    CONTROL_KEYWORDS,
    HASH_COMMENT_EXTENSIONS,
    NESTING_KEYWORDS,
    NON_DECLARATION_TOKENS,
    NON_METHOD_NAMES,
    TYPE_KEYWORDS,
)

_ANNOTATION = re.compile(r"@[\w.$]+(?:\s*\([^()]*\))?")
_TYPE_HEADER = re.compile(r"\b(" + "|".join(sorted(TYPE_KEYWORDS)) + r")\s+([A-Za-z_$][\w$]*)")
_CONTROL_HEADER = re.compile(r"^(?:[A-Za-z_]\w*\s*:\s*)?(?:else\s+)?(\w+)\b")
_TRAILER = re.compile(r"\)\s*(?:throws\s+[\w.$,\s]+|:\s*[\w.$<>?,\[\]\s]+)?\s*(?:=>)?\s*$")
_IDENTIFIER_BEFORE = re.compile(r"([A-Za-z_$][\w$]*)\s*$")
_DECLARATION_PREFIX = re.compile(r"^[\w$<>\[\],.?\s]*$")
_STRING_LITERAL = re.compile(r"(\"|')((?:\\.|(?!\1)[^\\\n])*)\1")


@dataclass(frozen=True)
class Block:
    """A brace pair and what opened it."""

    kind: str                  # "type", "method", "control" or "other"
    open_offset: int
    close_offset: int
    open_line: int
    close_line: int
    header_line: int           # Line where the declaration or keyword starts
    parent: Optional[int]      # Index of the enclosing block
    name: Optional[str] = None # Type or method name, control keyword
    parameters: tuple[str, ...] = ()
    signature: str = ""
    closed: bool = True

    @property
    def span_length(self) -> int:
        """Lines from the declaration to the closing brace, inclusive."""
        return self.close_line - self.header_line + 1


@dataclass(frozen=True)
class SourceFile:
    """Immutable view over one file's text."""

    file_name: str
    text: str
    masked: str
    lines: tuple[str, ...]
    masked_lines: tuple[str, ...]
    blocks: tuple[Block, ...]
    _newlines: tuple[int, ...] = field(repr=False, default=())

    @classmethod
    def parse(cls, file_name: str, text: str) -> "SourceFile":
        extension = posixpath.splitext(file_name.lower())[1]
        masked = mask_source(text, hash_comments=extension in HASH_COMMENT_EXTENSIONS)
        newlines = tuple(i for i, ch in enumerate(text) if ch == "\n")
        lines = tuple(line.rstrip("\r") for line in text.split("\n"))
        masked_lines = tuple(line.rstrip("\r") for line in masked.split("\n"))
        source = cls(
            file_name=file_name,
            text=text,
            masked=masked,
            lines=lines,
            masked_lines=masked_lines,
            blocks=(),
            _newlines=newlines,
        )
        object.__setattr__(source, "blocks", tuple(_scan_blocks(source)))
        return source

    # ── Positions ──

    def line_of(self, offset: int) -> int:
        """1-based line number of a character offset."""
        return bisect.bisect_left(self._newlines, offset) + 1

    def line_offset(self, number: int) -> int:
        """Character offset where a 1-based line starts."""
        if number <= 1:
            return 0
        return self._newlines[min(number, len(self._newlines) + 1) - 2] + 1

    def line(self, number: int) -> str:
        """Raw text of a 1-based line, stripped."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1].strip()
        return ""

    def code_line(self, number: int) -> str:
        """Masked text of a 1-based line."""
        if 1 <= number <= len(self.masked_lines):
            return self.masked_lines[number - 1]
        return ""

    def is_code(self, number: int) -> bool:
        """True when the line has anything left after masking comments."""
        return bool(self.code_line(number).strip())

    # ── Structure ──

    @property
    def methods(self) -> list[Block]:
        return [b for b in self.blocks if b.kind == "method"]

    @property
    def types(self) -> list[Block]:
        return [b for b in self.blocks if b.kind == "type"]

    def body_length(self, block: Block) -> int:
        """Lines of a block's body.

        Counts every line strictly between the opening and closing brace, plus
        the closing line when code precedes the brace. A block opened and
        closed on one line has length 1 if anything sits between the braces.
        """
        if block.close_line == block.open_line:
            return 1 if self.masked[block.open_offset + 1 : block.close_offset].strip() else 0
        length = block.close_line - block.open_line - 1
        close_start = self.masked.rfind("\n", 0, block.close_offset) + 1
        if self.masked[close_start : block.close_offset].strip():
            length += 1
        return length

    def enclosing(self, offset: int) -> list[Block]:
        """Blocks whose braces contain the offset, outermost first."""
        return [b for b in self.blocks if b.open_offset < offset <= b.close_offset]

    def string_literals(self, number: int) -> list[tuple[int, str]]:
        """String literals of a line as (column, content), skipping commented-out text."""
        raw = self.lines[number - 1] if 1 <= number <= len(self.lines) else ""
        code = self.code_line(number)
        literals = []
        for match in _STRING_LITERAL.finditer(raw):
            start = match.start()
            if start < len(code) and code[start] == match.group(1):
                literals.append((start, match.group(2)))
        return literals


def mask_source(text: str, hash_comments: bool = False) -> str:
    """Blank out comments and string contents, keeping length and newlines.

    Quote characters stay in place so literals can still be located.
    """
    chars = list(text)
    n = len(text)

    def blank(start: int, end: int) -> None:
        for k in range(start, min(end, n)):
            if chars[k] != "\n":
                chars[k] = " "

    i = 0
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if (ch == "/" and nxt == "/") or (hash_comments and ch == "#"):
            end = text.find("\n", i)
            end = n if end == -1 else end
            blank(i, end)
            i = end
            continue

        if ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            blank(i, end)
            i = end
            continue

        if ch in "\"'" and text.startswith(ch * 3, i):
            end = text.find(ch * 3, i + 3)
            end = n if end == -1 else end
            blank(i + 3, end)
            i = end + 3
            continue

        if ch in "\"'`":
            j = i + 1
            while j < n and text[j] != ch and text[j] != "\n":
                j += 2 if text[j] == "\\" else 1
            j = min(j, n)
            blank(i + 1, j)
            i = j + 1 if j < n and text[j] == ch else j
            continue

        i += 1

    return "".join(chars)


def split_parameters(params: str) -> list[str]:
    """Split a parameter list at top-level commas."""
    if not params.strip():
        return []
    parts, depth, current = [], 0, []
    for ch in params:
        if ch in "<([{":
            depth += 1
        elif ch in ">)]}":
            depth = max(0, depth - 1)
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _scan_blocks(source: SourceFile) -> list[Block]:
    masked = source.masked
    boundary = 0

    # First pass: pair braces. Entries are (open, close, parent index, header start).
    # Semicolons end a statement only outside parentheses, so the header of
    # ``for (init; cond; step)`` stays whole. Each brace level tracks its own depth.
    pairs: list[tuple[int, int, Optional[int], int]] = []
    open_stack: list[int] = []
    paren_stack: list[int] = []
    paren_depth = 0
    for offset, ch in enumerate(masked):
        if ch == "(":
            paren_depth += 1
        elif ch == ")":
            paren_depth = max(0, paren_depth - 1)
        elif ch == "{":
            parent = open_stack[-1] if open_stack else None
            pairs.append((offset, -1, parent, boundary))
            open_stack.append(len(pairs) - 1)
            paren_stack.append(paren_depth)
            paren_depth = 0
            boundary = offset + 1
        elif ch == "}":
            if open_stack:
                index = open_stack.pop()
                open_offset, _, parent, header_start = pairs[index]
                pairs[index] = (open_offset, offset, parent, header_start)
                paren_depth = paren_stack.pop()
            else:
                paren_depth = 0
            boundary = offset + 1
        elif ch == ";" and paren_depth == 0:
            boundary = offset + 1

    # Second pass: label each pair by its header. Parents always precede children.
    blocks: list[Block] = []
    for open_offset, close_offset, parent, header_start in pairs:
        closed = close_offset != -1
        if not closed:
            close_offset = max(len(masked) - 1, open_offset)
        parent_kind = blocks[parent].kind if parent is not None else None
        header = masked[header_start:open_offset]
        blocks.append(
            _label_block(source, header, header_start, open_offset, close_offset, parent, parent_kind, closed)
        )
    return blocks


def _label_block(
    source: SourceFile,
    header: str,
    header_start: int,
    open_offset: int,
    close_offset: int,
    parent: Optional[int],
    parent_kind: Optional[str],
    closed: bool,
) -> Block:
    stripped = header.strip()
    lead = len(header) - len(header.lstrip())
    header_line = source.line_of(header_start + lead) if stripped else source.line_of(open_offset)
    common = dict(
        open_offset=open_offset,
        close_offset=close_offset,
        open_line=source.line_of(open_offset),
        close_line=source.line_of(close_offset),
        header_line=header_line,
        parent=parent,
        closed=closed,
    )

    without_annotations = _ANNOTATION.sub(" ", stripped).strip()

    control = _CONTROL_HEADER.match(without_annotations)
    if control and control.group(1) in CONTROL_KEYWORDS:
        keyword = control.group(1)
        kind = "control" if keyword in NESTING_KEYWORDS else "other"
        return Block(kind=kind, name=keyword, **common)

    type_match = _TYPE_HEADER.search(without_annotations)
    if type_match and "(" not in without_annotations[: type_match.start()] and not re.search(
        r"\bnew\b", without_annotations
    ):
        name_line = source.line_of(header_start + lead + max(0, stripped.find(type_match.group(0))))
        common["header_line"] = name_line
        return Block(kind="type", name=type_match.group(2), signature=" ".join(stripped.split()), **common)

    method = _parse_method_header(without_annotations, parent_kind)
    if method is not None:
        name, params = method
        name_pos = stripped.rfind(name + "(")
        if name_pos == -1:
            name_pos = stripped.rfind(name)
        name_line = source.line_of(header_start + lead + max(0, name_pos))
        common["header_line"] = name_line
        signature = " ".join(stripped.split())
        return Block(
            kind="method",
            name=name,
            parameters=tuple(split_parameters(params)),
            signature=signature,
            **common,
        )

    return Block(kind="other", **common)


def _parse_method_header(header: str, parent_kind: Optional[str]) -> Optional[tuple[str, str]]:
    """Return (name, raw parameters) when the header declares a method or function."""
    trailer = _TRAILER.search(header)
    if trailer is None:
        return None
    close = trailer.start()

    depth = 0
    open_paren = -1
    for k in range(close, -1, -1):
        if header[k] == ")":
            depth += 1
        elif header[k] == "(":
            depth -= 1
            if depth == 0:
                open_paren = k
                break
    if open_paren <= 0:
        return None

    ident = _IDENTIFIER_BEFORE.search(header[:open_paren])
    if ident is None:
        return None
    name = ident.group(1)
    if name in NON_METHOD_NAMES:
        return None

    prefix = header[: ident.start()].strip()
    if prefix:
        if not _DECLARATION_PREFIX.match(prefix):
            return None
        if set(prefix.split()) & NON_DECLARATION_TOKENS:
            return None
    elif parent_kind != "type":
        # A bare call followed by a block only declares something inside a type body
        return None

    return name, header[open_paren + 1 : close]
