"""Rule evaluator — turns extractor candidates into findings using the rule table.

The evaluator knows nothing about policy switches. It only decides the base
severity (critical files may start one level higher for some rules) and
renders the message template with the candidate's values.
"""

from typing import NamedTuple

import structlog

from archreview.validators.models import Candidate, Finding
from archreview.validators.rules import RULE_TABLE, RuleSpec

logger = structlog.get_logger()


class Evaluation(NamedTuple):
    """A finding together with the rule and candidate that produced it."""

    rule: RuleSpec
    candidate: Candidate
    finding: Finding


class _TemplateValues(dict):
    # Leave unknown placeholders visible instead of failing the whole file
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def evaluate(file_name: str, candidates: list[Candidate], critical: bool = False) -> list[Evaluation]:
    """Build one finding per candidate whose rule key is in the table.

    Args:
        file_name: Name reported on every finding
        candidates: Raw signals from all extractors
        critical: Whether the file matched a critical-file pattern

    Returns:
        Evaluations in candidate order
    """
    evaluations = []
    for candidate in candidates:
        rule = RULE_TABLE.get(candidate.rule)
        if rule is None:
            logger.warning("unknown_rule_key", rule=candidate.rule, file_name=file_name)
            continue

        severity = rule.severity
        if critical and rule.critical_severity is not None:
            severity = rule.critical_severity

        finding = Finding(
            file_name=file_name,
            line_number=candidate.line_number,
            type=rule.type,
            severity=severity,
            description=rule.template.format_map(_TemplateValues(candidate.values)),
            suggestion=rule.suggestion,
            code_snippet=candidate.snippet,
            rule_id=rule.rule_id,
        )
        evaluations.append(Evaluation(rule, candidate, finding))

    return evaluations
