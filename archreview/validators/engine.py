"""Validation Engine — orchestrates extractors, evaluation and policy, produces ordered findings.

This is the main entry point for architectural-principle validation. It runs
all registered extractors against one file and turns their signals into the
findings the effective policy allows.

Usage:
    engine = ValidationEngine()
    findings = engine.validate("UserService.java", source_text, policy)
    for finding in findings:
        print(finding.rule_id, finding.severity, finding.description)
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Union

import structlog

from archreview.validators.base import BaseExtractor
from archreview.validators.evaluator import Evaluation, evaluate
from archreview.validators.file_filter import is_critical, should_ignore
from archreview.validators.models import Candidate, Finding
from archreview.validators.policy import DEFAULT_POLICY, Policy, TeamOverride
from archreview.validators.resolver import resolve
from archreview.validators.rules import RULE_ORDER
from archreview.validators.source import SourceFile
from archreview.validators.suppression import apply_policy

# Import all extractors
from archreview.validators.clean_code_extractor import CleanCodeExtractor
from archreview.validators.solid_extractor import SolidExtractor
from archreview.validators.ddd_extractor import DddExtractor
from archreview.validators.security_extractor import SecurityExtractor
from archreview.validators.performance_extractor import PerformanceExtractor

logger = structlog.get_logger()


class ValidationEngine:
    """Runs extractors, evaluates their candidates and applies the policy.

    Design principles:
        - Deterministic: same input → byte-identical ordered output
        - Stateless: the policy is passed into every call, never stored
        - Extensible: add extractors without modifying the engine
        - Observable: logs every validation run with timing
    """

    def __init__(self, extractors: Optional[list[BaseExtractor]] = None, max_workers: int = 1):
        """Initialize with default extractors or custom list.

        Args:
            extractors: Optional list of extractors. If None, uses all defaults.
            max_workers: Threads used to run the extractors of one file (1 = inline)
        """
        self.extractors = extractors or self._default_extractors()
        self.max_workers = max(1, max_workers)

    @staticmethod
    def _default_extractors() -> list[BaseExtractor]:
        """Create the default extractor chain. Order only affects tie-breaking."""
        return [
            CleanCodeExtractor(),     # Method size, nesting, magic numbers, naming
            SolidExtractor(),         # Field injection, class size
            DddExtractor(),           # Entity identity, anemic entities
            SecurityExtractor(),      # Secrets, SQL injection, unsafe APIs
            PerformanceExtractor(),   # SELECT *, bulk reads, loop concatenation
        ]

    def validate(
        self,
        file_name: str,
        source_text: Union[str, bytes],
        policy: Optional[Policy] = None,
        team: Optional[TeamOverride] = None,
    ) -> list[Finding]:
        """Validate one file against the effective policy.

        Args:
            file_name: Name or path of the file, matched against policy globs
            source_text: Raw file contents
            policy: Global policy; None means the default policy
            team: Optional team override, resolved before extraction

        Returns:
            Findings sorted by line, rule order and column
        """
        start_time = time.perf_counter()
        policy = policy or DEFAULT_POLICY

        if should_ignore(file_name, policy):
            logger.debug("file_ignored", file_name=file_name)
            return []

        effective = resolve(policy, team)

        if isinstance(source_text, bytes):
            source_text = source_text.decode("utf-8", errors="replace")
        source = SourceFile.parse(file_name, source_text or "")

        candidates, extractor_timings = self._run_extractors(source, effective)

        evaluations = evaluate(file_name, candidates, critical=is_critical(file_name, effective))
        kept = apply_policy(evaluations, effective, file_name)
        findings = [evaluation.finding for evaluation in sorted(kept, key=_sort_key)]

        total_duration = (time.perf_counter() - start_time) * 1000

        logger.info(
            "validation_complete",
            file_name=file_name,
            total_candidates=len(candidates),
            total_findings=len(findings),
            suppressed=len(evaluations) - len(kept),
            duration_ms=round(total_duration, 2),
            extractor_timings=extractor_timings,
        )

        return findings

    def validate_many(
        self,
        items: Iterable[tuple[str, Union[str, bytes]]],
        policy: Optional[Policy] = None,
        team: Optional[TeamOverride] = None,
        max_workers: int = 4,
    ) -> list[list[Finding]]:
        """Validate many (file name, source text) pairs, results in input order."""
        items = list(items)
        if max_workers <= 1 or len(items) <= 1:
            return [self.validate(name, text, policy, team) for name, text in items]

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda item: self.validate(item[0], item[1], policy, team), items))

    def _run_extractors(self, source: SourceFile, policy: Policy) -> tuple[list[Candidate], dict[str, float]]:
        """Run every extractor; merge results in extractor order."""
        if self.max_workers > 1 and len(self.extractors) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(lambda e: self._run_one(e, source, policy), self.extractors))
        else:
            results = [self._run_one(e, source, policy) for e in self.extractors]

        candidates: list[Candidate] = []
        timings: dict[str, float] = {}
        for extractor, (found, duration) in zip(self.extractors, results):
            candidates.extend(found)
            timings[extractor.name] = duration
        return candidates, timings

    @staticmethod
    def _run_one(extractor: BaseExtractor, source: SourceFile, policy: Policy) -> tuple[list[Candidate], float]:
        e_start = time.perf_counter()
        try:
            found = extractor.extract(source, policy.thresholds)
        except Exception as e:
            logger.error(
                "extractor_failed",
                extractor=extractor.name,
                file_name=source.file_name,
                error=str(e),
            )
            # Don't let one broken extractor kill the whole pipeline
            found = []
        duration = (time.perf_counter() - e_start) * 1000
        return found, round(duration, 2)

    def add_extractor(self, extractor: BaseExtractor) -> None:
        """Add a custom extractor to the chain."""
        self.extractors.append(extractor)

    def remove_extractor(self, extractor_name: str) -> None:
        """Remove an extractor by name."""
        self.extractors = [e for e in self.extractors if e.name != extractor_name]


def _sort_key(evaluation: Evaluation) -> tuple:
    line_number = evaluation.finding.line_number
    return (
        line_number is not None,
        line_number or 0,
        RULE_ORDER[evaluation.rule.key],
        evaluation.candidate.column,
    )


# Module-level singleton
validation_engine = ValidationEngine()


def validate(
    file_name: str,
    source_text: Union[str, bytes],
    policy: Optional[Policy] = None,
    team: Optional[TeamOverride] = None,
) -> list[Finding]:
    """Validate one file with the default engine."""
    return validation_engine.validate(file_name, source_text, policy, team)
