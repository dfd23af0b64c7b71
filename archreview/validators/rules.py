"""Rule table — static mapping from rule keys to category, severity and message.

Extractors emit candidates keyed by the rule keys below. The evaluator looks
each key up here to build the final finding. Declaration order is also the
secondary sort key of the aggregated result, so keep related rules together.
"""

from typing import Optional

from pydantic import BaseModel

from archreview.validators.models import FindingType, Severity


class RuleSpec(BaseModel):
    """One entry of the rule table."""

    key: str
    type: FindingType
    severity: Severity
    template: str
    suggestion: str
    critical_severity: Optional[Severity] = None  # Base severity on critical files
    structural: bool = False                      # Forced to CRITICAL on critical files
    opt_in: bool = False                          # Reports only when enabled explicitly

    model_config = {"frozen": True}

    @property
    def rule_id(self) -> str:
        return self.type.rule_id


_RULES = [
    # ── Clean code ──
    RuleSpec(
        key="method_length",
        type=FindingType.KISS_VIOLATION,
        severity=Severity.MEDIUM,
        critical_severity=Severity.HIGH,
        template="Method '{name}' is {length} lines long and exceeds {limit} lines",
        suggestion="Break down long methods into smaller, focused methods.",
    ),
    RuleSpec(
        key="parameter_count",
        type=FindingType.BEST_PRACTICE,
        severity=Severity.MEDIUM,
        template="Method '{name}' has {count} parameters, more than {limit} parameters",
        suggestion="Consider using a parameter object or builder pattern.",
    ),
    RuleSpec(
        key="deep_nesting",
        type=FindingType.KISS_VIOLATION,
        severity=Severity.HIGH,
        critical_severity=Severity.CRITICAL,
        structural=True,
        template="Deep nesting detected ({depth} levels)",
        suggestion="Use guard clauses, early returns, or extract methods.",
    ),
    RuleSpec(
        key="magic_number",
        type=FindingType.BEST_PRACTICE,
        severity=Severity.MEDIUM,
        template="Magic number detected: {number}",
        suggestion="Extract magic numbers to named constants.",
    ),
    RuleSpec(
        key="poor_method_name",
        type=FindingType.BEST_PRACTICE,
        severity=Severity.MEDIUM,
        template="Poor naming convention detected: method '{name}' does not describe its purpose",
        suggestion="Use descriptive method names that clearly indicate their purpose.",
    ),
    RuleSpec(
        key="short_identifier",
        type=FindingType.BEST_PRACTICE,
        severity=Severity.LOW,
        template="Non-descriptive identifier '{name}'",
        suggestion="Name variables and parameters after what they hold.",
    ),
    RuleSpec(
        key="empty_catch",
        type=FindingType.BEST_PRACTICE,
        severity=Severity.MEDIUM,
        critical_severity=Severity.HIGH,
        template="Empty catch block detected for {exception}",
        suggestion="Handle exceptions properly or at least log them.",
    ),
    RuleSpec(
        key="duplicate_block",
        type=FindingType.DRY_VIOLATION,
        severity=Severity.HIGH,
        opt_in=True,
        template="Duplicate code block detected: lines {first}-{first_end} repeated at line {second}",
        suggestion="Extract duplicate code into a reusable method.",
    ),

    # ── SOLID ──
    RuleSpec(
        key="field_injection",
        type=FindingType.DEPENDENCY_INJECTION,
        severity=Severity.MEDIUM,
        template="Field injection detected on '{field}' via {annotation}",
        suggestion="Use constructor injection for better testability.",
    ),
    RuleSpec(
        key="class_length",
        type=FindingType.SOLID_PRINCIPLES,
        severity=Severity.HIGH,
        critical_severity=Severity.CRITICAL,
        template="Class '{name}' is too large ({length} lines, max: {limit} lines)",
        suggestion="Large classes violate Single Responsibility Principle. Break into smaller classes.",
    ),

    # ── DDD ──
    RuleSpec(
        key="entity_without_id",
        type=FindingType.DDD_AGGREGATE,
        severity=Severity.HIGH,
        template="Entity '{name}' missing @Id annotation",
        suggestion="Domain entities must have identity. Add @Id annotation.",
    ),
    RuleSpec(
        key="anemic_entity",
        type=FindingType.DDD_DOMAIN_SERVICE,
        severity=Severity.MEDIUM,
        opt_in=True,
        template="Potential anemic domain model: entity '{name}' has only getters/setters ({count} accessors)",
        suggestion="Domain entities should contain business logic, not just getters/setters.",
    ),

    # ── Security ──
    RuleSpec(
        key="hardcoded_secret",
        type=FindingType.SECURITY,
        severity=Severity.HIGH,
        critical_severity=Severity.CRITICAL,
        template="Hardcoded secret detected in '{name}'",
        suggestion="Use configuration properties or environment variables.",
    ),
    RuleSpec(
        key="sql_injection",
        type=FindingType.SECURITY,
        severity=Severity.CRITICAL,
        template="Potential SQL injection: {verb} query built by string concatenation",
        suggestion="Use parameterized queries instead of string concatenation.",
    ),
    RuleSpec(
        key="insecure_random",
        type=FindingType.SECURITY,
        severity=Severity.HIGH,
        critical_severity=Severity.CRITICAL,
        template="Insecure random number generation: {expression}",
        suggestion="Use SecureRandom for security-sensitive operations.",
    ),
    RuleSpec(
        key="weak_crypto",
        type=FindingType.SECURITY,
        severity=Severity.HIGH,
        template="Weak cryptographic algorithm detected: {algorithm}",
        suggestion="Use strong algorithms like AES, SHA-256, or SHA-3.",
    ),
    RuleSpec(
        key="missing_validation",
        type=FindingType.SECURITY,
        severity=Severity.MEDIUM,
        template="Missing input validation on request body '{name}'",
        suggestion="Add @Valid annotation to validate input data.",
    ),
    RuleSpec(
        key="exception_exposure",
        type=FindingType.SECURITY,
        severity=Severity.MEDIUM,
        template="Exception information exposure via {call}()",
        suggestion="Avoid exposing internal exception details to clients.",
    ),

    # ── Performance ──
    RuleSpec(
        key="select_all",
        type=FindingType.PERFORMANCE,
        severity=Severity.MEDIUM,
        template="SELECT * query detected: {query}",
        suggestion="Specify only required columns for better performance.",
    ),
    RuleSpec(
        key="unbounded_read",
        type=FindingType.PERFORMANCE,
        severity=Severity.LOW,
        template="Unbounded bulk read via {call}()",
        suggestion="Page or filter bulk reads instead of loading every row.",
    ),
    RuleSpec(
        key="string_concat_loop",
        type=FindingType.PERFORMANCE,
        severity=Severity.MEDIUM,
        template="String concatenation in loop detected on '{name}'",
        suggestion="Use StringBuilder for efficient string concatenation.",
    ),
    RuleSpec(
        key="eager_collection",
        type=FindingType.PERFORMANCE,
        severity=Severity.MEDIUM,
        template="Potential N+1 query problem: {annotation} without LAZY loading",
        suggestion="Use LAZY loading for collection relationships.",
    ),
]

RULE_TABLE: dict[str, RuleSpec] = {rule.key: rule for rule in _RULES}

# Position of each rule key, used as the secondary sort key.
RULE_ORDER: dict[str, int] = {key: index for index, key in enumerate(RULE_TABLE)}

# Every identifier accepted in rule lists: rule ids plus bare finding type names.
KNOWN_RULE_IDS: frozenset[str] = frozenset(
    {t.rule_id for t in FindingType} | {t.value for t in FindingType}
)

OPT_IN_RULE_IDS: frozenset[str] = frozenset(r.rule_id for r in _RULES if r.opt_in)
