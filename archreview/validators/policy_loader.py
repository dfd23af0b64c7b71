"""Policy loader — reads a JSON policy file and validates it up front.

Every configuration problem surfaces here as a single PolicyError naming the
offending field, before any file is validated.
"""

import json
from pathlib import Path
from typing import Any, Union

import structlog
from pydantic import ValidationError

from archreview.validators.policy import DEFAULT_POLICY, Policy, PolicyError

logger = structlog.get_logger()


def parse_policy(raw: Any) -> Policy:
    """Build a Policy from a parsed configuration mapping.

    Accepts either the bare policy or one nested under a top-level ``review``
    key. An empty mapping yields the default policy.
    """
    if raw is None:
        return DEFAULT_POLICY
    if not isinstance(raw, dict):
        raise PolicyError("policy", "configuration must be an object")

    if "review" in raw:
        raw = raw["review"]
        if not isinstance(raw, dict):
            raise PolicyError("review", "configuration must be an object")

    try:
        return Policy.model_validate(raw)
    except ValidationError as exc:
        raise PolicyError.from_validation_error(exc) from exc


def load_policy(path: Union[str, Path]) -> Policy:
    """Load and validate a policy file."""
    policy_path = Path(path)
    try:
        text = policy_path.read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyError("path", f"cannot read policy file {policy_path}: {e}") from e

    try:
        raw = json.loads(text) if text.strip() else {}
    except json.JSONDecodeError as e:
        raise PolicyError("path", f"policy file {policy_path} is not valid JSON: {e}") from e

    policy = parse_policy(raw)
    logger.info(
        "policy_loaded",
        path=str(policy_path),
        disabled_rules=len(policy.rules.disabled),
        severity_overrides=len(policy.rules.severity),
        teams=len(policy.teams),
    )
    return policy
