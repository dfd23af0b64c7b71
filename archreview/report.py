"""Review report — caller-side score and decision computed from validator findings.

The validator never scores. Callers that want an approve/reject decision
build a ReviewReport from the findings and the thresholds of the policy.
"""

from enum import Enum

from pydantic import BaseModel, Field

from archreview.validators.models import Finding, Severity
from archreview.validators.policy import Thresholds

# Score penalty per finding, by severity
PENALTY_WEIGHTS = {
    Severity.CRITICAL: 15,
    Severity.HIGH: 8,
    Severity.MEDIUM: 3,
    Severity.LOW: 1,
    Severity.INFO: 0,
}


class ReviewDecision(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    MANUAL_REVIEW = "MANUAL_REVIEW"


def _empty_summary() -> dict:
    return {severity.value.lower(): 0 for severity in reversed(Severity)}


class ReviewReport(BaseModel):
    """Aggregate verdict over the findings of one or more files."""

    decision: ReviewDecision
    score: float = Field(description="Quality score 0-100")
    summary: dict = Field(default_factory=_empty_summary, description="Count of findings by severity")
    total_findings: int = 0
    verdict: str = Field(default="", description="Human-readable verdict")

    @classmethod
    def build(cls, findings: list[Finding], thresholds: Thresholds) -> "ReviewReport":
        """Build a report from findings using the policy thresholds."""
        # Count by severity
        summary = _empty_summary()
        for finding in findings:
            summary[finding.severity.value.lower()] += 1

        # Compute score
        penalty = sum(PENALTY_WEIGHTS[finding.severity] for finding in findings)
        score = float(max(0, 100 - penalty))

        critical = summary["critical"]
        high = summary["high"]

        # Determine decision
        if critical > thresholds.critical_findings_threshold:
            decision = ReviewDecision.REJECT
            verdict = f"REJECT — {critical} critical finding(s) must be resolved. Score: {score:.0f}/100."
        elif score < thresholds.auto_reject_score:
            decision = ReviewDecision.REJECT
            verdict = (
                f"REJECT — Score {score:.0f}/100 is below the auto-reject threshold "
                f"({thresholds.auto_reject_score})."
            )
        elif score >= thresholds.auto_approve_score and high <= thresholds.high_findings_threshold:
            decision = ReviewDecision.APPROVE
            verdict = f"APPROVE — Score {score:.0f}/100 with {high} high-severity finding(s)."
        else:
            decision = ReviewDecision.MANUAL_REVIEW
            verdict = f"MANUAL REVIEW — Score {score:.0f}/100 with {high} high-severity finding(s) to assess."

        return cls(
            decision=decision,
            score=round(score, 1),
            summary=summary,
            total_findings=len(findings),
            verdict=verdict,
        )
