"""Roll rule verdicts up into sample and batch conformity reports."""
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from labtrack.schemas.conformity import (
    BatchFailure,
    BatchReport,
    CategoryGroup,
    Failure,
    ReportLine,
    SampleConformity,
    SampleReport,
    Verdict,
)
from labtrack.schemas.reference_standard import ReferenceRule
from labtrack.services.reference_formatter import display_reference_for
from labtrack.services.rule_evaluator import as_rule, evaluate_rule

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Outros"


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def load_params(payload: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse a structured-text parameter bag; anything malformed becomes ``{}``."""
    if not payload:
        return {}
    if isinstance(payload, Mapping):
        return dict(payload)
    try:
        parsed = json.loads(payload)
    except (TypeError, json.JSONDecodeError):
        logger.warning("Ignoring malformed parameter payload: %.80r", payload)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring parameter payload that is not an object: %.80r", payload)
        return {}
    return parsed


def merge_measurements(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge measurement sources left to right; later layers win on shared keys."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def measurements_for(sample: Any) -> dict[str, Any]:
    """Direct columns, then the dynamic ``params`` bag, then the ``results`` override."""
    return merge_measurements(
        sample.direct_measurements(),
        load_params(sample.params),
        load_params(sample.results),
    )


def evaluate_sample(merged_values: Mapping[str, Any], rules: Iterable[Any]) -> SampleConformity:
    failures: list[Failure] = []
    for rule in rules:
        rule = as_rule(rule)
        value = merged_values.get(rule.parameter_key)
        # Not measured yet: neither passes nor fails.
        if _is_blank(value):
            continue
        if evaluate_rule(value, rule, merged_values) is False:
            failures.append(Failure(parameter_key=rule.parameter_key, value=value, rule=rule))
    return SampleConformity(failures=failures)


def _rules_per_key(rules: Iterable[Any]) -> dict[str, list[ReferenceRule]]:
    by_key: dict[str, list[ReferenceRule]] = {}
    for rule in rules:
        rule = as_rule(rule)
        by_key.setdefault(rule.parameter_key, []).append(rule)
    return by_key


def _line_result(results: list[bool | None]) -> bool | None:
    """A line fails if any of its rules fails and is indeterminate only when none decided."""
    if any(result is False for result in results):
        return False
    if any(result is True for result in results):
        return True
    return None


def build_sample_report(
    merged_values: Mapping[str, Any],
    rules: Iterable[Any],
    catalog: Mapping[str, Any] | None = None,
    planned: Sequence[str] | None = None,
    sample_code: str | None = None,
    standard_name: str | None = None,
) -> SampleReport:
    """Panel report of one sample, lines grouped by parameter category.

    ``planned`` lists the parameters on the panel (defaults to the rule keys);
    ``catalog`` maps parameter keys to objects with ``label``, ``category`` and
    ``unit``. Every rule of a parameter counts toward the totals, so the
    declaration always agrees with :func:`evaluate_sample`.
    """
    catalog = catalog or {}
    rules_by_key = _rules_per_key(rules)
    keys = list(planned) if planned is not None else list(rules_by_key)

    groups: dict[str, list[ReportLine]] = {}
    failures: list[Failure] = []
    evaluated_count = 0
    total_rules = 0

    for key in keys:
        info = catalog.get(key)
        key_rules = rules_by_key.get(key, [])
        value = merged_values.get(key)
        results: list[bool | None] = []
        for rule in key_rules:
            total_rules += 1
            result = None if _is_blank(value) else evaluate_rule(value, rule, merged_values)
            results.append(result)
            if result is not None:
                evaluated_count += 1
            if result is False:
                failures.append(Failure(parameter_key=key, value=value, rule=rule))

        line_result = _line_result(results)
        references = [display_reference_for(rule, merged_values) for rule in key_rules]
        category = getattr(info, "category", None) or UNCATEGORIZED
        groups.setdefault(category, []).append(
            ReportLine(
                parameter_key=key,
                label=getattr(info, "label", None) or key,
                unit=getattr(info, "unit", None),
                value=None if _is_blank(value) else value,
                reference="; ".join(references) if references else None,
                result=line_result,
                verdict=Verdict.of(line_result),
            )
        )

    return SampleReport(
        sample_code=sample_code,
        standard_name=standard_name,
        categories=[CategoryGroup(category=name, lines=lines) for name, lines in groups.items()],
        failures=failures,
        evaluated_count=evaluated_count,
        fail_count=len(failures),
        total_rules=total_rules,
    )


def build_batch_report(batch_code: str, sample_reports: Iterable[SampleReport]) -> BatchReport:
    report = BatchReport(batch_code=batch_code)
    for sample_report in sample_reports:
        report.samples.append(sample_report)
        report.evaluated_count += sample_report.evaluated_count
        report.fail_count += sample_report.fail_count
        report.total_rules += sample_report.total_rules
        report.failures.extend(
            BatchFailure(
                sample_code=sample_report.sample_code,
                parameter_key=failure.parameter_key,
                value=failure.value,
                rule=failure.rule,
            )
            for failure in sample_report.failures
        )
    return report
