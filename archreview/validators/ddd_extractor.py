"""DDD Extractor — entity identity and anemic domain models."""

import re

from archreview.validators.base import BaseExtractor
from archreview.validators.models import Candidate
from archreview.validators.policy import Thresholds
from archreview.validators.source import Block, SourceFile

_ENTITY = re.compile(r"@(?:[\w.]+\.)?Entity\b")
_IDENTITY = re.compile(r"@(?:[\w.]+\.)?(?:Id|EmbeddedId)\b")
_ACCESSOR = re.compile(r"^(?:get|set|is)[A-Z_]")

# Methods that carry no domain behaviour
_OBJECT_METHODS = {"equals", "hashCode", "toString"}


class DddExtractor(BaseExtractor):
    """Checks JPA-style entities for identity and for behaviour beyond accessors."""

    @property
    def name(self) -> str:
        return "DddExtractor"

    def extract(self, source: SourceFile, thresholds: Thresholds) -> list[Candidate]:
        candidates = []

        for block in source.types:
            if not _ENTITY.search(block.signature):
                continue
            body = source.masked[block.open_offset + 1 : block.close_offset]

            # ── 1. Entity Without Identity ──
            # Subclasses usually inherit the identifier from a mapped superclass
            if not _IDENTITY.search(body) and " extends " not in f" {block.signature} ":
                candidates.append(self._candidate(
                    "entity_without_id",
                    block.header_line,
                    snippet=source.line(block.header_line),
                    name=block.name,
                ))

            # ── 2. Anemic Entity ──
            candidates.extend(self._check_anemic(source, block))

        return candidates

    def _check_anemic(self, source: SourceFile, entity: Block) -> list[Candidate]:
        entity_index = source.blocks.index(entity)
        methods = [
            block for block in source.methods
            if block.parent == entity_index and block.name != entity.name
        ]
        accessors = [method for method in methods if _ACCESSOR.match(method.name)]
        behaviour = [
            method for method in methods
            if method not in accessors and method.name not in _OBJECT_METHODS
        ]
        if not accessors or behaviour:
            return []
        return [self._candidate(
            "anemic_entity",
            entity.header_line,
            snippet=source.line(entity.header_line),
            name=entity.name,
            count=len(accessors),
        )]
