from datetime import datetime, timezone

from tiptriage.models import RuleAction, RuleCondition, VerificationRule
from tiptriage.rules import RuleContext, apply_verification_rules, evaluate_condition

EXECUTED_AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _context(**overrides):
    fields = {
        "credibility_score": 72.0,
        "spam_score": 0.0,
        "is_anonymous": True,
        "case_priority": "p0_critical",
        "has_photo": False,
        "has_location": True,
        "tipster_reliability_tier": None,
        "hoax_indicator_count": 0,
    }
    fields.update(overrides)
    return RuleContext(**fields)


def _rule(rule_id, conditions, actions, **overrides):
    return VerificationRule(
        id=rule_id,
        name=rule_id.replace("-", " "),
        conditions=RuleCondition.model_validate(conditions),
        actions=RuleAction(**actions),
        **overrides,
    )


def test_simple_operators():
    context = _context()
    assert evaluate_condition(RuleCondition(field="credibility_score", operator=">=", value=70), context)
    assert not evaluate_condition(RuleCondition(field="credibility_score", operator="<", value=70), context)
    assert evaluate_condition(RuleCondition(field="case_priority", operator="in", value=["p0_critical"]), context)
    assert evaluate_condition(RuleCondition(field="tipster_reliability_tier", operator="=", value=None), context)


def test_numeric_operators_reject_booleans_and_unknown_fields():
    context = _context()
    assert not evaluate_condition(RuleCondition(field="is_anonymous", operator=">", value=0), context)
    assert not evaluate_condition(RuleCondition(field="no_such_field", operator=">", value=0), context)


def test_nested_and_or_aliases():
    condition = RuleCondition.model_validate(
        {
            "and": [
                {"field": "is_anonymous", "operator": "=", "value": True},
                {"or": [
                    {"field": "has_photo", "operator": "=", "value": True},
                    {"field": "has_location", "operator": "=", "value": True},
                ]},
            ]
        }
    )
    assert evaluate_condition(condition, _context())
    assert not evaluate_condition(condition, _context(is_anonymous=False))


def test_overrides_combine_in_order():
    rules = [
        _rule("first", {"field": "is_anonymous", "operator": "=", "value": True},
              {"set_priority": "medium", "review_priority": 4}),
        _rule("second", {"field": "has_location", "operator": "=", "value": True},
              {"set_priority": "high", "require_review": True, "review_priority": 6}),
        _rule("disabled", {"field": "has_location", "operator": "=", "value": True},
              {"set_priority": "spam"}, is_active=False),
    ]
    outcome = apply_verification_rules(rules, _context(), executed_at=EXECUTED_AT)
    assert outcome.priority_override == "high"
    assert outcome.force_review
    assert outcome.review_priority_override == 4
    assert [action.triggered_by_rule for action in outcome.actions] == ["first", "second"]
    assert outcome.actions[0].executed_at == EXECUTED_AT


def test_no_matching_rules():
    rule = _rule("never", {"field": "spam_score", "operator": ">", "value": 90}, {"set_priority": "spam"})
    outcome = apply_verification_rules([rule], _context(), executed_at=EXECUTED_AT)
    assert outcome.priority_override is None
    assert outcome.actions == []
