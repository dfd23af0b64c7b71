"""Finding models — finding types, severity levels, and the candidate signal structure.

All validation is deterministic: same input → same output, no randomness, no LLM calls.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

SNIPPET_MAX_LENGTH = 500


class Severity(str, Enum):
    """Finding severity levels, declared from least to most severe."""

    INFO = "INFO"          # Informational only
    LOW = "LOW"            # Suggestion for improvement
    MEDIUM = "MEDIUM"      # Should be addressed but not blocking
    HIGH = "HIGH"          # Serious gap that will cause production issues
    CRITICAL = "CRITICAL"  # Must be fixed before merge

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a case-insensitive severity name ('high', 'CRITICAL', ...)."""
        return cls(str(value).strip().upper())


class FindingType(str, Enum):
    """Closed set of finding categories.

    Naming convention: the rule id of a finding is ``ARCH_<TYPE>``.
    """

    # Quality & style
    CODE_STYLE = "CODE_STYLE"
    DOCUMENTATION = "DOCUMENTATION"
    BEST_PRACTICE = "BEST_PRACTICE"

    # Issues
    SECURITY = "SECURITY"
    PERFORMANCE = "PERFORMANCE"
    BUG = "BUG"
    MAINTAINABILITY = "MAINTAINABILITY"

    # Architecture & design
    ARCHITECTURE = "ARCHITECTURE"
    DESIGN_PATTERN = "DESIGN_PATTERN"
    SOLID_PRINCIPLES = "SOLID_PRINCIPLES"
    DEPENDENCY_INJECTION = "DEPENDENCY_INJECTION"
    SEPARATION_OF_CONCERNS = "SEPARATION_OF_CONCERNS"

    # Clean code
    DRY_VIOLATION = "DRY_VIOLATION"
    KISS_VIOLATION = "KISS_VIOLATION"
    YAGNI_VIOLATION = "YAGNI_VIOLATION"

    # Domain-driven design
    DDD_BOUNDED_CONTEXT = "DDD_BOUNDED_CONTEXT"
    DDD_AGGREGATE = "DDD_AGGREGATE"
    DDD_VALUE_OBJECT = "DDD_VALUE_OBJECT"
    DDD_DOMAIN_SERVICE = "DDD_DOMAIN_SERVICE"

    # Functional programming
    IMMUTABILITY = "IMMUTABILITY"
    PURE_FUNCTION = "PURE_FUNCTION"
    SIDE_EFFECTS = "SIDE_EFFECTS"

    # Testing
    TEST_COVERAGE = "TEST_COVERAGE"
    TEST_QUALITY = "TEST_QUALITY"
    TDD_VIOLATION = "TDD_VIOLATION"

    # API design
    API_DESIGN = "API_DESIGN"
    REST_COMPLIANCE = "REST_COMPLIANCE"
    ERROR_HANDLING = "ERROR_HANDLING"

    # Scalability
    SCALABILITY = "SCALABILITY"
    ASYNC_PROCESSING = "ASYNC_PROCESSING"
    CACHING = "CACHING"

    # Observability
    LOGGING = "LOGGING"
    MONITORING = "MONITORING"
    TRACING = "TRACING"

    @property
    def rule_id(self) -> str:
        return f"ARCH_{self.value}"


class CategoryGate(str, Enum):
    """Category kill-switches of the rules policy."""

    CLEAN_CODE = "enable_clean_code"
    SOLID = "enable_solid"
    DDD = "enable_ddd"
    SECURITY = "enable_security"
    PERFORMANCE = "enable_performance"


# Finding types owned by each category gate. Types not listed are ungated.
CATEGORY_GATE_MAP: dict[FindingType, CategoryGate] = {
    # Clean code
    FindingType.CODE_STYLE: CategoryGate.CLEAN_CODE,
    FindingType.DOCUMENTATION: CategoryGate.CLEAN_CODE,
    FindingType.BEST_PRACTICE: CategoryGate.CLEAN_CODE,
    FindingType.MAINTAINABILITY: CategoryGate.CLEAN_CODE,
    FindingType.DRY_VIOLATION: CategoryGate.CLEAN_CODE,
    FindingType.KISS_VIOLATION: CategoryGate.CLEAN_CODE,
    FindingType.YAGNI_VIOLATION: CategoryGate.CLEAN_CODE,
    FindingType.IMMUTABILITY: CategoryGate.CLEAN_CODE,
    FindingType.PURE_FUNCTION: CategoryGate.CLEAN_CODE,
    FindingType.SIDE_EFFECTS: CategoryGate.CLEAN_CODE,

    # SOLID
    FindingType.SOLID_PRINCIPLES: CategoryGate.SOLID,
    FindingType.DEPENDENCY_INJECTION: CategoryGate.SOLID,
    FindingType.SEPARATION_OF_CONCERNS: CategoryGate.SOLID,
    FindingType.DESIGN_PATTERN: CategoryGate.SOLID,
    FindingType.ARCHITECTURE: CategoryGate.SOLID,

    # DDD
    FindingType.DDD_BOUNDED_CONTEXT: CategoryGate.DDD,
    FindingType.DDD_AGGREGATE: CategoryGate.DDD,
    FindingType.DDD_VALUE_OBJECT: CategoryGate.DDD,
    FindingType.DDD_DOMAIN_SERVICE: CategoryGate.DDD,

    # Security
    FindingType.SECURITY: CategoryGate.SECURITY,

    # Performance
    FindingType.PERFORMANCE: CategoryGate.PERFORMANCE,
    FindingType.SCALABILITY: CategoryGate.PERFORMANCE,
    FindingType.ASYNC_PROCESSING: CategoryGate.PERFORMANCE,
    FindingType.CACHING: CategoryGate.PERFORMANCE,
}


class Finding(BaseModel):
    """A single reported issue. Immutable once created."""

    file_name: str
    line_number: Optional[int] = None  # 1-based, None for file-level issues
    type: FindingType
    severity: Severity
    description: str                   # Always embeds the offending value
    suggestion: Optional[str] = None   # How to fix it
    code_snippet: Optional[str] = None # Excerpt containing the offending token
    rule_id: str

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Candidate(BaseModel):
    """A raw signal emitted by an extractor, before evaluation.

    ``rule`` is a key of the rule table; ``values`` fill the rule's message
    template; ``literal`` is the value whitelists are checked against.
    """

    rule: str
    line_number: Optional[int] = None
    column: int = 0
    snippet: Optional[str] = None
    values: dict = Field(default_factory=dict)
    literal: Optional[str] = None

    model_config = {"frozen": True}
