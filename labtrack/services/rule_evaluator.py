"""Decide whether one analyst entry complies with one reference rule.

Every function here is total: malformed entries or incomplete rules give
``None`` (indeterminate) instead of raising.
"""
import operator
import re
from collections.abc import Mapping
from typing import Any, NamedTuple

from labtrack.config import settings
from labtrack.schemas.reference_standard import ConditionType, ReferenceRule
from labtrack.services.value_parser import get_operator, parse_numeric_value

_CLAUSE_RE = re.compile(
    r"\bTHEN\s+(MAX|MIN|RANGE|EXACT_TEXT|ABSENCE)\b\s*(.*?)(?:\s+VREF\s+(.*))?$",
    flags=re.IGNORECASE,
)
_TERM_RE = re.compile(r"^(\S+)\s*(<=|>=|==|!=|<|>)\s*(\S+)$")
_RANGE_SPLIT_RE = re.compile(r"\s+(?:a|to|-)\s+", flags=re.IGNORECASE)

_COMPARATORS = {
    "<=": operator.le,
    ">=": operator.ge,
    "<": operator.lt,
    ">": operator.gt,
    "==": operator.eq,
    "!=": operator.ne,
}


class ConditionalClause(NamedTuple):
    condition_type: str
    argument: str
    vref: str | None

    def to_rule(self, parameter_key: str) -> ReferenceRule:
        fields: dict[str, Any] = {}
        if self.condition_type == ConditionType.MAX:
            fields["max_value"] = parse_numeric_value(self.argument)
        elif self.condition_type == ConditionType.MIN:
            fields["min_value"] = parse_numeric_value(self.argument)
        elif self.condition_type == ConditionType.RANGE:
            bounds = _RANGE_SPLIT_RE.split(self.argument)
            if len(bounds) == 2:
                fields["min_value"] = parse_numeric_value(bounds[0])
                fields["max_value"] = parse_numeric_value(bounds[1])
        else:
            fields["expected_text"] = self.argument
        return ReferenceRule(parameter_key=parameter_key, condition_type=self.condition_type, **fields)


def as_rule(rule: Any) -> ReferenceRule:
    if isinstance(rule, ReferenceRule):
        return rule
    return ReferenceRule.model_validate(rule)


def _is_blank(raw) -> bool:
    return raw is None or (isinstance(raw, str) and raw == "")


def _condition_holds(condition: str, sample_values: Mapping[str, Any]) -> bool:
    terms = re.split(r"\s+AND\s+", condition.strip(), flags=re.IGNORECASE)
    for term in terms:
        match = _TERM_RE.match(term.strip())
        if not match:
            return False
        param, op, target_raw = match.groups()
        actual = parse_numeric_value(sample_values.get(param))
        target = parse_numeric_value(target_raw)
        if actual is None or target is None:
            return False
        if not _COMPARATORS[op](actual, target):
            return False
    return True


def resolve_conditional(expected_text: str | None, sample_values: Mapping[str, Any] | None) -> ConditionalClause | None:
    """First ``IF <cond> THEN <TYPE> <arg> [VREF <label>]`` line whose condition holds."""
    if not expected_text or sample_values is None:
        return None
    for line in expected_text.splitlines():
        line = line.strip()
        if not line.upper().startswith("IF "):
            continue
        then_at = line.upper().find(" THEN ")
        clause = _CLAUSE_RE.search(line)
        if then_at < 0 or not clause:
            continue
        if _condition_holds(line[3:then_at], sample_values):
            vref = clause.group(3).strip() if clause.group(3) else None
            return ConditionalClause(clause.group(1).upper(), clause.group(2).strip(), vref)
    return None


def _evaluate_max(magnitude: float, op: str | None, rule: ReferenceRule) -> bool | None:
    if rule.max_value is None:
        return None
    # A ">" reading at or above the ceiling can never be compliant.
    if op == ">" and magnitude >= rule.max_value:
        return False
    return magnitude <= rule.max_value


def _evaluate_min(magnitude: float, op: str | None, rule: ReferenceRule) -> bool | None:
    if rule.min_value is None:
        return None
    if op == "<" and magnitude <= rule.min_value:
        return False
    return magnitude >= rule.min_value


def _evaluate_range(magnitude: float, op: str | None, rule: ReferenceRule) -> bool | None:
    if rule.min_value is None or rule.max_value is None:
        return None
    if op == "<" and magnitude <= rule.min_value:
        return False
    if op == ">" and magnitude >= rule.max_value:
        return False
    return rule.min_value <= magnitude <= rule.max_value


def _is_absence(text: str, rule: ReferenceRule) -> bool:
    target = text.lower()
    if rule.expected_text and rule.expected_text.lower() in target:
        return True
    return any(term in target for term in settings.absence_terms)


_NUMERIC_EVALUATORS = {
    ConditionType.MAX.value: _evaluate_max,
    ConditionType.MIN.value: _evaluate_min,
    ConditionType.RANGE.value: _evaluate_range,
}


def evaluate_rule(raw, rule: Any, sample_values: Mapping[str, Any] | None = None) -> bool | None:
    """True when ``raw`` complies with ``rule``, False when it does not, None when undecidable.

    ``sample_values`` holds the sample's other measurements and is only read by
    CONDITIONAL rules.
    """
    if _is_blank(raw):
        return None

    rule = as_rule(rule)
    text = str(raw).strip()
    condition_type = rule.condition_type

    numeric = _NUMERIC_EVALUATORS.get(condition_type)
    if numeric is not None:
        magnitude = parse_numeric_value(raw)
        if magnitude is None:
            return None
        return numeric(magnitude, get_operator(text), rule)

    if condition_type == ConditionType.EXACT_TEXT:
        return text.lower() == (rule.expected_text or "").strip().lower()

    if condition_type == ConditionType.ABSENCE:
        return _is_absence(text, rule)

    if condition_type == ConditionType.CONDITIONAL:
        clause = resolve_conditional(rule.expected_text, sample_values)
        if clause is None:
            return None
        return evaluate_rule(text, clause.to_rule(rule.parameter_key), sample_values)

    return None
