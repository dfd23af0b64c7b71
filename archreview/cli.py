"""Command line front end — validate files, check policy files, list rules."""

import argparse
import json
from pathlib import Path
from typing import Optional

import structlog

from archreview.config import get_settings
from archreview.logging import configure_logging
from archreview.report import ReviewDecision, ReviewReport
from archreview.validators import DEFAULT_POLICY, PolicyError, ValidationEngine, load_policy
from archreview.validators.file_filter import matching_groups
from archreview.validators.resolver import resolve, team_for_member
from archreview.validators.rules import RULE_TABLE

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archreview",
        description="Deterministic, policy-driven architectural-principle validation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate source files")
    validate_parser.add_argument("paths", nargs="+", help="Files or directories to validate")
    validate_parser.add_argument("--policy", default=None, help="JSON policy file")
    validate_parser.add_argument("--member", default=None, help="Team member whose team override applies")
    validate_parser.add_argument("--workers", type=int, default=None)

    check_parser = subparsers.add_parser("check-policy", help="Validate a policy file")
    check_parser.add_argument("policy")

    subparsers.add_parser("rules", help="List the rule table")

    return parser


def collect_files(paths: list[str]) -> list[Path]:
    """Expand directories into their files, sorted, skipping hidden entries."""
    files = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(
                sorted(
                    p for p in path.rglob("*")
                    if p.is_file() and not any(part.startswith(".") for part in p.relative_to(path).parts)
                )
            )
        else:
            files.append(path)
    return files


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, settings.DEBUG)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "validate":
        policy_path = args.policy or settings.POLICY_PATH
        try:
            policy = load_policy(policy_path) if policy_path else DEFAULT_POLICY
        except PolicyError as exc:
            parser.error(str(exc))
            return 2

        team = team_for_member(policy, args.member) if args.member else None
        effective = resolve(policy, team)

        items = []
        for path in collect_files(args.paths):
            try:
                items.append((path.as_posix(), path.read_text(encoding="utf-8", errors="replace")))
            except OSError as exc:
                parser.error(f"cannot read {path}: {exc}")
                return 2

        workers = args.workers if args.workers is not None else settings.MAX_WORKERS
        engine = ValidationEngine()
        results = engine.validate_many(items, effective, max_workers=workers)

        all_findings = [finding for findings in results for finding in findings]
        report = ReviewReport.build(all_findings, effective.thresholds)

        output = {
            "files": [
                {
                    "fileName": name,
                    "groups": matching_groups(name, effective),
                    "findings": [finding.to_dict() for finding in findings],
                }
                for (name, _), findings in zip(items, results)
            ],
            "report": report.model_dump(mode="json"),
        }
        print(json.dumps(output, indent=2, ensure_ascii=True))

        logger.info(
            "review_complete",
            files=len(items),
            findings=len(all_findings),
            decision=report.decision.value,
            team=team.name if team else None,
        )
        return 1 if report.decision == ReviewDecision.REJECT else 0

    if args.command == "check-policy":
        try:
            policy = load_policy(args.policy)
        except PolicyError as exc:
            parser.error(str(exc))
            return 2

        summary = {
            "policy": args.policy,
            "status": "valid",
            "disabledRules": list(policy.rules.disabled),
            "enabledRules": list(policy.rules.enabled),
            "severityOverrides": {rule_id: level.value for rule_id, level in sorted(policy.rules.severity.items())},
            "teams": sorted(policy.teams),
        }
        print(json.dumps(summary, indent=2, ensure_ascii=True))
        return 0

    if args.command == "rules":
        rules = [
            {
                "key": rule.key,
                "ruleId": rule.rule_id,
                "type": rule.type.value,
                "severity": rule.severity.value,
                "criticalSeverity": rule.critical_severity.value if rule.critical_severity else None,
                "structural": rule.structural,
                "optIn": rule.opt_in,
            }
            for rule in RULE_TABLE.values()
        ]
        print(json.dumps(rules, indent=2, ensure_ascii=True))
        return 0

    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
