from collections.abc import Sequence

from evalservice.models.policy import EvaluationPolicy
from evalservice.schemas.system import EvaluationGroupCreate

TOTAL_WEIGHT = 100.0
WEIGHT_TOLERANCE = 0.001


def check_groups(
    policy: EvaluationPolicy | None, groups: Sequence[EvaluationGroupCreate]
) -> list[dict]:
    """
    Compare the weights of an evaluation system with its subject policy.

    Returns a list of violations, empty when the groups are acceptable:
    - ``noRule``: the policy has no rule for the group's evaluation type
    - ``belowMin`` / ``aboveMax``: weight outside the rule's range
    - ``totalWeightNot100``: the weights do not add up to 100

    Without a policy only the total is checked.
    """
    violations: list[dict] = []
    rules = {}
    if policy is not None:
        # First rule wins when a policy repeats an evaluation type
        for rule in policy.policy_rules:
            rules.setdefault(rule.evaluation_type_id, rule)

    for index, group in enumerate(groups):
        if policy is None:
            continue
        rule = rules.get(group.evaluation_type_id)
        reason = None
        if rule is None:
            reason = "noRule"
        elif group.total_weight < rule.min_percentage:
            reason = "belowMin"
        elif group.total_weight > rule.max_percentage:
            reason = "aboveMax"
        if reason:
            violations.append(
                {
                    "index": index,
                    "evaluationTypeId": str(group.evaluation_type_id),
                    "reason": reason,
                }
            )

    total = sum(group.total_weight for group in groups)
    if abs(total - TOTAL_WEIGHT) > WEIGHT_TOLERANCE:
        violations.append({"reason": "totalWeightNot100", "total": total})

    return violations
