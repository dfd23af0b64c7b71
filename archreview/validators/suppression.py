"""Severity & suppression pass — applies the effective policy to evaluated findings.

Steps run in a fixed order for every finding:

    1. Category gate          → drop
    2. Rule disabled          → drop (also opt-in rules that were never enabled)
    3. Whitelisted literal    → drop
    4. Security-skipped file  → drop SECURITY findings
    5. Severity override      → replace severity
    6. Critical file          → force CRITICAL on structural rules

The order is what makes disablement beat overrides and gates beat everything.
"""

from archreview.validators.evaluator import Evaluation
from archreview.validators.file_filter import is_critical, is_security_skipped
from archreview.validators.models import CATEGORY_GATE_MAP, FindingType, Severity
from archreview.validators.policy import Policy


def apply_policy(evaluations: list[Evaluation], policy: Policy, file_name: str) -> list[Evaluation]:
    """Drop or adjust evaluated findings according to the policy.

    Args:
        evaluations: Output of the rule evaluator for one file
        policy: Effective (resolved) policy
        file_name: File the findings belong to

    Returns:
        Surviving evaluations, each carrying its final finding
    """
    rules = policy.rules
    whitelist = policy.patterns.whitelist
    skip_security = is_security_skipped(file_name, policy)
    critical = is_critical(file_name, policy)

    kept = []
    for evaluation in evaluations:
        rule, candidate, finding = evaluation

        # ── 1. Category gate ──
        gate = CATEGORY_GATE_MAP.get(finding.type)
        if gate is not None and not rules.gate_enabled(gate):
            continue

        # ── 2. Disabled and opt-in rules ──
        if rules.is_disabled(finding.rule_id, finding.type):
            continue
        if rule.opt_in and finding.rule_id not in rules.enabled and finding.type.value not in rules.enabled:
            continue

        # ── 3. Whitelists ──
        if _is_whitelisted(rule.key, candidate.literal, whitelist):
            continue

        # ── 4. Security-skipped files ──
        if skip_security and finding.type == FindingType.SECURITY:
            continue

        # ── 5. Severity override ──
        override = rules.severity.get(finding.rule_id) or rules.severity.get(finding.type.value)
        if override is not None and override != finding.severity:
            finding = finding.model_copy(update={"severity": override})

        # ── 6. Critical-file escalation ──
        if critical and rule.structural and finding.severity != Severity.CRITICAL:
            finding = finding.model_copy(update={"severity": Severity.CRITICAL})

        kept.append(evaluation._replace(finding=finding))

    return kept


def _is_whitelisted(rule_key: str, literal, whitelist) -> bool:
    if literal is None:
        return False
    if rule_key == "magic_number":
        return literal in whitelist.magic_numbers
    if rule_key == "hardcoded_secret":
        lowered = literal.lower()
        return any(allowed.lower() in lowered for allowed in whitelist.allowed_secrets)
    return False
