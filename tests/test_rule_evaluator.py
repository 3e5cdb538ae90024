import pytest

from labtrack.config import settings
from labtrack.schemas.reference_standard import ReferenceRule
from labtrack.services.rule_evaluator import evaluate_rule, resolve_conditional


@pytest.mark.parametrize("condition_type", ["MAX", "MIN", "RANGE", "EXACT_TEXT", "ABSENCE", "CONDITIONAL", "BOGUS"])
@pytest.mark.parametrize("raw", [None, ""])
def test_empty_entry_is_indeterminate_for_every_condition(raw, condition_type):
    rule = ReferenceRule(
        parameter_key="x",
        condition_type=condition_type,
        min_value=1,
        max_value=2,
        expected_text="IF ph > 1 THEN MAX 3",
    )
    assert evaluate_rule(raw, rule, {"ph": 7}) is None


def test_max_rule(max_rule):
    assert evaluate_rule(4, max_rule) is True
    assert evaluate_rule(5, max_rule) is True
    assert evaluate_rule(6, max_rule) is False
    assert evaluate_rule("< 0.01", max_rule) is True
    assert evaluate_rule("< 0,01", max_rule) is True
    assert evaluate_rule("> 6", max_rule) is False


def test_max_rule_greater_than_reading_at_ceiling_fails(max_rule):
    assert evaluate_rule("> 5", max_rule) is False
    assert evaluate_rule("> 4", max_rule) is True


def test_max_rule_indeterminate_cases(max_rule):
    assert evaluate_rule("N.D.", max_rule) is None
    assert evaluate_rule("7", ReferenceRule(parameter_key="x", condition_type="MAX")) is None


def test_min_rule(min_rule):
    assert evaluate_rule(6, min_rule) is True
    assert evaluate_rule("5,0", min_rule) is True
    assert evaluate_rule(4.9, min_rule) is False
    assert evaluate_rule("< 5", min_rule) is False
    assert evaluate_rule("< 6", min_rule) is True
    assert evaluate_rule("> 8", min_rule) is True
    assert evaluate_rule("Ausente", min_rule) is None
    assert evaluate_rule("7", ReferenceRule(parameter_key="x", condition_type="MIN")) is None


def test_range_rule(range_rule):
    assert evaluate_rule(7, range_rule) is True
    assert evaluate_rule("7,5", range_rule) is True
    assert evaluate_rule(5, range_rule) is False
    assert evaluate_rule("10", range_rule) is False
    assert evaluate_rule("6,0", range_rule) is True
    assert evaluate_rule("9.5", range_rule) is True


def test_range_rule_operator_prefixes(range_rule):
    # "< 5.0" fails the floor even though 5.0 alone is compared plainly.
    assert evaluate_rule("< 5.0", range_rule) is False
    assert evaluate_rule("< 6", range_rule) is False
    assert evaluate_rule("> 9.5", range_rule) is False
    assert evaluate_rule("> 7", range_rule) is True


def test_range_rule_missing_bound_is_indeterminate():
    rule = ReferenceRule(parameter_key="ph", condition_type="RANGE", min_value=6.0)
    assert evaluate_rule(7, rule) is None
    assert evaluate_rule("texto", ReferenceRule(parameter_key="ph", condition_type="RANGE", min_value=6, max_value=9)) is None


def test_exact_text_rule(exact_rule):
    assert evaluate_rule("sim", exact_rule) is True
    assert evaluate_rule("  SIM ", exact_rule) is True
    assert evaluate_rule("não", exact_rule) is False


def test_exact_text_without_expected_text_never_indeterminate():
    rule = ReferenceRule(parameter_key="x", condition_type="EXACT_TEXT")
    assert evaluate_rule("qualquer", rule) is False
    assert evaluate_rule("   ", rule) is True


def test_absence_rule_default_lexicon(absence_rule):
    assert evaluate_rule("Ausência em 100 ml", absence_rule) is True
    assert evaluate_rule("Ausencia", absence_rule) is True
    assert evaluate_rule("AUSENTE", absence_rule) is True
    assert evaluate_rule("N.D.", absence_rule) is True
    assert evaluate_rule("Não detectado", absence_rule) is True
    assert evaluate_rule("Presença", absence_rule) is False
    assert evaluate_rule("1000 UFC", absence_rule) is False


def test_absence_rule_expected_text_override():
    rule = ReferenceRule(parameter_key="x", condition_type="ABSENCE", expected_text="Negativo")
    assert evaluate_rule("negativo para E. coli", rule) is True
    assert evaluate_rule("Ausente", rule) is True
    assert evaluate_rule("Positivo", rule) is False


def test_absence_lexicon_comes_from_settings(monkeypatch, absence_rule):
    monkeypatch.setattr(settings, "absence_terms", ("absent", "not detected"))
    assert evaluate_rule("Not detected", absence_rule) is True
    assert evaluate_rule("Ausente", absence_rule) is False


def test_unknown_condition_type_is_indeterminate():
    rule = ReferenceRule(parameter_key="x", condition_type="LOG_REDUCTION", max_value=5)
    assert evaluate_rule("3", rule) is None


def test_rule_may_be_given_as_mapping():
    assert evaluate_rule("4", {"parameter_key": "turbidez", "condition_type": "MAX", "max_value": 5}) is True


def test_evaluation_does_not_mutate_rule(range_rule):
    before = range_rule.model_dump()
    evaluate_rule("< 5.0", range_rule)
    assert range_rule.model_dump() == before


CONDITIONAL_TEXT = "\n".join(
    [
        "IF ph <= 7.5 THEN MAX 3.7 VREF ≤ 3,7 mg/L",
        "IF ph > 7.5 AND ph <= 8 THEN MAX 2.0",
        "IF ph > 8 THEN RANGE 0,5 a 1,0",
    ]
)


@pytest.fixture()
def conditional_rule():
    return ReferenceRule(parameter_key="n_amoniacal", condition_type="CONDITIONAL", expected_text=CONDITIONAL_TEXT)


def test_conditional_rule_picks_first_matching_clause(conditional_rule):
    assert evaluate_rule("3,5", conditional_rule, {"ph": "7,0"}) is True
    assert evaluate_rule("3,5", conditional_rule, {"ph": "7,8"}) is False
    assert evaluate_rule("0,8", conditional_rule, {"ph": 8.5}) is True
    assert evaluate_rule("1,5", conditional_rule, {"ph": 8.5}) is False


def test_conditional_rule_without_context_is_indeterminate(conditional_rule):
    assert evaluate_rule("3,5", conditional_rule) is None
    assert evaluate_rule("3,5", conditional_rule, {}) is None
    assert evaluate_rule("3,5", conditional_rule, {"ph": "N.D."}) is None


def test_resolve_conditional_returns_vref():
    clause = resolve_conditional(CONDITIONAL_TEXT, {"ph": 7})
    assert clause is not None
    assert clause.condition_type == "MAX"
    assert clause.argument == "3.7"
    assert clause.vref == "≤ 3,7 mg/L"
    assert resolve_conditional(CONDITIONAL_TEXT, {"ph": 7.9}).vref is None
    assert resolve_conditional("not a clause", {"ph": 7}) is None
