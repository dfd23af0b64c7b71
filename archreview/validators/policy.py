"""Policy models — thresholds, rule switches, file patterns, whitelists and team overrides.

A Policy is an immutable value passed explicitly into every validation call.
Field names are snake_case in Python and camelCase in configuration files
(``maxMethodLength``, ``enableSecurity``, ``ignoreFiles`` ...).

Semantic checks (glob syntax, known rule ids, severity names) run when the
model is built, so a bad configuration fails at load time and never inside
the validation pipeline.
"""

from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from archreview.validators.file_filter import check_glob
from archreview.validators.models import CategoryGate, FindingType, Severity
from archreview.validators.rules import KNOWN_RULE_IDS


class PolicyError(ValueError):
    """Invalid configuration, raised before any validation runs."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid configuration at '{field}': {message}")

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "PolicyError":
        """Collapse a pydantic error into a single failure naming the first bad field."""
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "policy"
        message = str(first.get("msg", "invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        return cls(field, message)


_MODEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "forbid",
}


def _check_globs(patterns: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(check_glob(pattern) for pattern in patterns)


def _check_rule_ids(rule_ids: tuple[str, ...]) -> tuple[str, ...]:
    unknown = [rule_id for rule_id in rule_ids if rule_id not in KNOWN_RULE_IDS]
    if unknown:
        raise ValueError(f"unknown rule id(s): {', '.join(unknown)}")
    return rule_ids


# ── Thresholds ──

class Thresholds(BaseModel):
    """Numeric limits. Scores and finding counts are read by the caller's report."""

    auto_approve_score: int = Field(default=80, ge=0, le=100)
    auto_reject_score: int = Field(default=30, ge=0, le=100)
    max_method_length: int = Field(default=25, ge=0)
    max_class_length: int = Field(default=300, ge=0)
    max_parameters: int = Field(default=5, ge=0)
    critical_findings_threshold: int = Field(default=0, ge=0)
    high_findings_threshold: int = Field(default=3, ge=0)

    model_config = _MODEL_CONFIG


# ── Rules ──

class Rules(BaseModel):
    """Per-rule switches, severity overrides and category gates."""

    disabled: tuple[str, ...] = ()
    enabled: tuple[str, ...] = ()
    severity: dict[str, Severity] = Field(default_factory=dict)
    enable_clean_code: bool = True
    enable_solid: bool = True
    enable_ddd: bool = True
    enable_security: bool = True
    enable_performance: bool = True

    model_config = _MODEL_CONFIG

    @field_validator("disabled", "enabled")
    @classmethod
    def _known_rules(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_rule_ids(value)

    @field_validator("severity", mode="before")
    @classmethod
    def _known_overrides(cls, value):
        if not isinstance(value, dict):
            return value
        overrides = {}
        for rule_id, level in value.items():
            if rule_id not in KNOWN_RULE_IDS:
                raise ValueError(f"unknown rule id: {rule_id}")
            try:
                overrides[rule_id] = Severity.parse(level.value if isinstance(level, Severity) else level)
            except ValueError:
                raise ValueError(f"unknown severity '{level}' for rule {rule_id}") from None
        return overrides

    def gate_enabled(self, gate: CategoryGate) -> bool:
        return getattr(self, gate.value)

    def is_disabled(self, rule_id: str, finding_type: FindingType) -> bool:
        return rule_id in self.disabled or finding_type.value in self.disabled


# ── Patterns ──

class Whitelist(BaseModel):
    """Explicit exemptions checked per occurrence."""

    magic_numbers: tuple[str, ...] = ("0", "1", "-1")
    allowed_secrets: tuple[str, ...] = ("test", "localhost", "example")
    skip_security_checks: tuple[str, ...] = ()

    model_config = _MODEL_CONFIG

    @field_validator("magic_numbers", "allowed_secrets", mode="before")
    @classmethod
    def _as_strings(cls, value):
        # JSON configs often list magic numbers as numbers rather than strings
        if isinstance(value, (list, tuple)):
            return tuple(str(item).strip() for item in value if str(item).strip())
        return value

    @field_validator("skip_security_checks")
    @classmethod
    def _valid_globs(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_globs(value)


class Patterns(BaseModel):
    """File glob lists and whitelists."""

    ignore_files: tuple[str, ...] = ("*.test.js", "*Test.java", "*.spec.ts")
    critical_files: tuple[str, ...] = ("*Security*.java", "*Auth*.java", "*Payment*.java")
    custom_patterns: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    whitelist: Whitelist = Field(default_factory=Whitelist)

    model_config = _MODEL_CONFIG

    @field_validator("ignore_files", "critical_files")
    @classmethod
    def _valid_globs(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_globs(value)

    @field_validator("custom_patterns")
    @classmethod
    def _valid_groups(cls, value: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        return {name: _check_globs(patterns) for name, patterns in value.items()}


# ── Teams ──

class TeamOverride(BaseModel):
    """Per-team adjustments, applied by the resolver before validation."""

    name: Optional[str] = None
    members: tuple[str, ...] = ()
    custom_thresholds: Optional[Thresholds] = None
    additional_rules: tuple[str, ...] = ()
    strict_mode: bool = False

    model_config = _MODEL_CONFIG

    @field_validator("additional_rules")
    @classmethod
    def _known_rules(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _check_rule_ids(value)


# ── Policy ──

class Policy(BaseModel):
    """Complete configuration for validation.

    ``teams`` holds the overrides as configured; a resolved policy has none.
    """

    thresholds: Thresholds = Field(default_factory=Thresholds)
    rules: Rules = Field(default_factory=Rules)
    patterns: Patterns = Field(default_factory=Patterns)
    teams: dict[str, TeamOverride] = Field(default_factory=dict)

    model_config = _MODEL_CONFIG


DEFAULT_POLICY = Policy()
