"""Architectural-principle validator — deterministic, policy-driven findings for one source file.

Usage:
    from archreview.validators import validate, load_policy

    policy = load_policy("review-policy.json")
    findings = validate("UserService.java", source_text, policy)
"""

from archreview.validators.engine import ValidationEngine, validate, validation_engine
from archreview.validators.models import Finding, FindingType, Severity
from archreview.validators.policy import DEFAULT_POLICY, Policy, PolicyError, TeamOverride
from archreview.validators.policy_loader import load_policy, parse_policy
from archreview.validators.resolver import resolve, resolve_for_member

__all__ = [
    "ValidationEngine",
    "validation_engine",
    "validate",
    "Finding",
    "FindingType",
    "Severity",
    "Policy",
    "PolicyError",
    "TeamOverride",
    "DEFAULT_POLICY",
    "load_policy",
    "parse_policy",
    "resolve",
    "resolve_for_member",
]
