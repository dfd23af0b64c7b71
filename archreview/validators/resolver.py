"""Config resolver — flattens global policy and a team override into one effective policy.

Resolution is a pure function: the same inputs always produce the same
policy, and neither input is modified. Extractors and the suppression pass
never see teams; they only receive the flattened result.
"""

from typing import Optional

from archreview.validators.policy import Policy, TeamOverride
from archreview.validators.rules import OPT_IN_RULE_IDS


def resolve(policy: Policy, team: Optional[TeamOverride] = None) -> Policy:
    """Build the effective policy for one validation call.

    Args:
        policy: Global policy as loaded from configuration
        team: Optional team override

    Returns:
        Policy with team thresholds and rules applied and no ``teams``
    """
    if team is None:
        return policy.model_copy(update={"teams": {}})

    thresholds = policy.thresholds
    if team.custom_thresholds is not None:
        # Replace, never merge: unspecified team fields keep their defaults
        thresholds = team.custom_thresholds

    extra_rules = set(team.additional_rules)
    if team.strict_mode:
        extra_rules |= OPT_IN_RULE_IDS

    enabled = tuple(policy.rules.enabled) + tuple(
        sorted(rule_id for rule_id in extra_rules if rule_id not in policy.rules.enabled)
    )
    rules = policy.rules.model_copy(update={"enabled": enabled})

    return policy.model_copy(update={"thresholds": thresholds, "rules": rules, "teams": {}})


def team_for_member(policy: Policy, member: str) -> Optional[TeamOverride]:
    """Find the team listing ``member``. Teams are visited in sorted id order."""
    for team_id in sorted(policy.teams):
        team = policy.teams[team_id]
        if member in team.members:
            return team
    return None


def resolve_for_member(policy: Policy, member: Optional[str]) -> Policy:
    """Resolve the policy for a team member; unknown members get the global policy."""
    team = team_for_member(policy, member) if member else None
    return resolve(policy, team)
