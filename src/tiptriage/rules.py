from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .models import AutomatedAction, PriorityBucket, RuleCondition, VerificationRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleContext:
    credibility_score: float
    spam_score: float
    is_anonymous: bool
    case_priority: str
    has_photo: bool
    has_location: bool
    tipster_reliability_tier: str | None
    hoax_indicator_count: int

    def value_of(self, field_name: str) -> Any:
        return getattr(self, field_name, None) if field_name in self.__dataclass_fields__ else None


@dataclass
class RuleOutcome:
    priority_override: PriorityBucket | None = None
    review_priority_override: int | None = None
    force_review: bool = False
    actions: list[AutomatedAction] = field(default_factory=list)


def _numeric(compare: Callable[[float, float], bool]) -> Callable[[Any, Any], bool]:
    def check(left: Any, right: Any) -> bool:
        if isinstance(left, bool) or not isinstance(left, (int, float)):
            return False
        if isinstance(right, bool) or not isinstance(right, (int, float)):
            return False
        return compare(left, right)

    return check


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    ">": _numeric(operator.gt),
    "<": _numeric(operator.lt),
    ">=": _numeric(operator.ge),
    "<=": _numeric(operator.le),
    "in": lambda left, right: isinstance(right, (list, tuple)) and left in right,
    "not_in": lambda left, right: isinstance(right, (list, tuple)) and left not in right,
}


def evaluate_condition(condition: RuleCondition, context: RuleContext) -> bool:
    if condition.all_of is not None:
        return all(evaluate_condition(child, context) for child in condition.all_of)
    if condition.any_of is not None:
        return any(evaluate_condition(child, context) for child in condition.any_of)
    if not condition.field or not condition.operator:
        return False
    return OPERATORS[condition.operator](context.value_of(condition.field), condition.value)


def apply_verification_rules(
    rules: Sequence[VerificationRule],
    context: RuleContext,
    *,
    executed_at: datetime,
) -> RuleOutcome:
    """Evaluate active rules in order; later priority overrides win, review priority keeps the minimum."""
    outcome = RuleOutcome()
    for rule in rules:
        if not rule.is_active or not evaluate_condition(rule.conditions, context):
            continue
        actions = rule.actions
        if actions.set_priority is not None:
            outcome.priority_override = actions.set_priority
        if actions.require_review is not None:
            outcome.force_review = outcome.force_review or actions.require_review
        if actions.review_priority is not None:
            current = outcome.review_priority_override if outcome.review_priority_override is not None else 10
            outcome.review_priority_override = min(current, actions.review_priority)
        outcome.actions.append(
            AutomatedAction(
                action=f"rule_applied_{rule.rule_type}",
                description=f'Rule "{rule.name}" applied',
                executed_at=executed_at,
                triggered_by_rule=rule.id,
            )
        )
        logger.debug("Verification rule %s applied", rule.id)
    return outcome
