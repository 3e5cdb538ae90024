from collections.abc import Mapping
from typing import Any

from labtrack.schemas.reference_standard import ConditionType
from labtrack.services.rule_evaluator import as_rule, resolve_conditional

ABSENCE_LABEL = "Ausência"
COMPLIANT_LABEL = "Conforme"
NO_REFERENCE = "-"
OUT_OF_CONDITIONS = "Fora das faixas condicionais"


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_display_reference(rule: Any) -> str:
    """Short label of a rule's acceptance criterion, e.g. "≤ 5" or "6 to 9.5"."""
    rule = as_rule(rule)
    condition_type = rule.condition_type

    if condition_type == ConditionType.ABSENCE:
        return ABSENCE_LABEL
    if condition_type == ConditionType.EXACT_TEXT:
        return rule.expected_text or COMPLIANT_LABEL
    if condition_type == ConditionType.MAX and rule.max_value is not None:
        return f"≤ {format_number(rule.max_value)}"
    if condition_type == ConditionType.MIN and rule.min_value is not None:
        return f"≥ {format_number(rule.min_value)}"
    if condition_type == ConditionType.RANGE and rule.min_value is not None and rule.max_value is not None:
        return f"{format_number(rule.min_value)} to {format_number(rule.max_value)}"
    return NO_REFERENCE


def display_reference_for(rule: Any, sample_values: Mapping[str, Any] | None = None) -> str:
    """Label shown on reports: the cached one when present, else derived.

    CONDITIONAL rules resolve against the sample's values and show the matching
    clause's VREF label.
    """
    rule = as_rule(rule)
    if rule.condition_type != ConditionType.CONDITIONAL:
        return rule.display_reference or format_display_reference(rule)

    clause = resolve_conditional(rule.expected_text, sample_values)
    if clause is None:
        return rule.display_reference or OUT_OF_CONDITIONS
    if clause.vref:
        return clause.vref
    return f"{clause.condition_type} {clause.argument}".strip()
