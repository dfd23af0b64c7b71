"""Tests for the caller-side review report."""

from archreview.report import ReviewDecision, ReviewReport
from archreview.validators.models import Finding, FindingType, Severity
from archreview.validators.policy import Thresholds


def _findings(*severities: Severity) -> list[Finding]:
    return [
        Finding(
            file_name="A.java",
            line_number=index + 1,
            type=FindingType.BEST_PRACTICE,
            severity=severity,
            description="Magic number detected: 7",
            rule_id="ARCH_BEST_PRACTICE",
        )
        for index, severity in enumerate(severities)
    ]


class TestReviewReport:
    def test_no_findings_approves(self) -> None:
        report = ReviewReport.build([], Thresholds())
        assert report.decision == ReviewDecision.APPROVE
        assert report.score == 100.0
        assert report.total_findings == 0
        assert report.summary == {"critical": 0, "high": 0, "medium": 0, "low": 0, "info": 0}

    def test_critical_finding_rejects(self) -> None:
        report = ReviewReport.build(_findings(Severity.CRITICAL), Thresholds())
        assert report.decision == ReviewDecision.REJECT
        assert report.score == 85.0
        assert report.summary["critical"] == 1

    def test_critical_threshold_allows_some(self) -> None:
        report = ReviewReport.build(_findings(Severity.CRITICAL), Thresholds(critical_findings_threshold=1))
        assert report.decision == ReviewDecision.APPROVE

    def test_low_score_rejects(self) -> None:
        report = ReviewReport.build(_findings(*[Severity.HIGH] * 9), Thresholds(high_findings_threshold=20))
        assert report.score == 28.0
        assert report.decision == ReviewDecision.REJECT

    def test_too_many_high_findings_needs_manual_review(self) -> None:
        report = ReviewReport.build(_findings(*[Severity.HIGH] * 2), Thresholds(high_findings_threshold=1))
        assert report.score == 84.0
        assert report.decision == ReviewDecision.MANUAL_REVIEW

    def test_score_never_negative(self) -> None:
        report = ReviewReport.build(_findings(*[Severity.CRITICAL] * 10), Thresholds())
        assert report.score == 0.0
        assert report.total_findings == 10

    def test_info_findings_do_not_cost_points(self) -> None:
        report = ReviewReport.build(_findings(Severity.INFO, Severity.INFO), Thresholds())
        assert report.score == 100.0
        assert report.summary["info"] == 2
