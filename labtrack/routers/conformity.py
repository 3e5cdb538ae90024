from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from labtrack.database import get_db
from labtrack.routers.deps import get_catalog, rules_of
from labtrack.routers.reference_standards import get_standard_or_404
from labtrack.schemas.conformity import EvaluateRequest, EvaluateRuleRequest, Verdict
from labtrack.schemas.parameter import ParameterOut
from labtrack.services.conformity import build_sample_report, evaluate_sample, load_params, merge_measurements
from labtrack.services.reference_formatter import display_reference_for
from labtrack.services.rule_evaluator import evaluate_rule

router = APIRouter(prefix="/api/conformity", tags=["conformity"])


@router.post("/evaluate")
def evaluate(
    payload: EvaluateRequest,
    db: Session = Depends(get_db),
    catalog: dict[str, ParameterOut] = Depends(get_catalog),
):
    standard_name = None
    if payload.rules is not None:
        rules = payload.rules
    elif payload.standard_id is not None:
        standard = get_standard_or_404(db, payload.standard_id)
        rules = rules_of(standard)
        standard_name = standard.name
    else:
        raise HTTPException(status_code=400, detail="Provide either standard_id or rules")

    values = merge_measurements(payload.values, load_params(payload.params), load_params(payload.results))
    outcome = evaluate_sample(values, rules)
    report = build_sample_report(
        values,
        rules,
        catalog=catalog,
        sample_code=payload.sample_code,
        standard_name=standard_name,
    )
    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "is_conformant": outcome.is_conformant,
            "failures": [failure.model_dump(mode="json") for failure in outcome.failures],
            "report": report.model_dump(mode="json"),
        },
    }


@router.post("/evaluate-rule")
def evaluate_single_rule(payload: EvaluateRuleRequest):
    result = evaluate_rule(payload.value, payload.rule, payload.sample_values)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "result": result,
            "verdict": Verdict.of(result).value,
            "reference": display_reference_for(payload.rule, payload.sample_values),
        },
    }
