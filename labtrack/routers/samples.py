import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from labtrack.database import get_db
from labtrack.models.reference_standard import ReferenceStandard
from labtrack.models.sample import DIRECT_MEASUREMENT_FIELDS, Sample
from labtrack.routers.deps import get_catalog, rules_of
from labtrack.routers.reference_standards import get_standard_or_404
from labtrack.schemas.parameter import ParameterOut
from labtrack.schemas.sample import SampleCreate, SampleOut, SampleUpdate
from labtrack.services.conformity import build_batch_report, build_sample_report, measurements_for

router = APIRouter(prefix="/api/samples", tags=["samples"])


def _entry_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _bag_text(value: str | dict | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _apply(sample: Sample, fields: dict[str, Any]) -> None:
    for field, value in fields.items():
        if field in DIRECT_MEASUREMENT_FIELDS:
            value = _entry_text(value)
        elif field in ("params", "results"):
            value = _bag_text(value)
        setattr(sample, field, value)


def _get_sample_or_404(db: Session, sample_id: int) -> Sample:
    sample = db.query(Sample).filter(Sample.id == sample_id).first()
    if not sample:
        raise HTTPException(status_code=404, detail="Sample not found")
    return sample


def _sample_report(sample: Sample, standard: ReferenceStandard | None, catalog: dict[str, ParameterOut]):
    values = measurements_for(sample)
    rules = rules_of(standard)
    measured = [key for key, value in values.items() if value is not None and value != ""]
    planned = list(dict.fromkeys([rule.parameter_key for rule in rules] + measured))
    return build_sample_report(
        values,
        rules,
        catalog=catalog,
        planned=planned,
        sample_code=sample.code,
        standard_name=standard.name if standard else None,
    )


@router.post("", status_code=201)
def create_sample(payload: SampleCreate, db: Session = Depends(get_db)):
    if db.query(Sample).filter(Sample.code == payload.code).first():
        raise HTTPException(status_code=400, detail="A sample with this code already exists")
    if payload.reference_standard_id is not None:
        get_standard_or_404(db, payload.reference_standard_id)

    sample = Sample(code=payload.code)
    _apply(sample, payload.model_dump(exclude={"code"}))
    db.add(sample)
    db.commit()
    db.refresh(sample)
    return {
        "statusCode": 201,
        "message": "Sample created",
        "data": SampleOut.model_validate(sample).model_dump(mode="json"),
    }


@router.get("/batches/{batch_code}/conformity")
def batch_conformity(
    batch_code: str,
    standard_id: int | None = None,
    db: Session = Depends(get_db),
    catalog: dict[str, ParameterOut] = Depends(get_catalog),
):
    samples = db.query(Sample).filter(Sample.batch_code == batch_code).order_by(Sample.code.asc()).all()
    if not samples:
        raise HTTPException(status_code=404, detail="No samples found for this batch")

    override = get_standard_or_404(db, standard_id) if standard_id is not None else None
    report = build_batch_report(
        batch_code,
        (_sample_report(sample, override or sample.reference_standard, catalog) for sample in samples),
    )
    return {
        "statusCode": 200,
        "message": "Success",
        "data": report.model_dump(mode="json"),
    }


@router.get("/{sample_id}")
def get_sample(sample_id: int, db: Session = Depends(get_db)):
    sample = _get_sample_or_404(db, sample_id)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": SampleOut.model_validate(sample).model_dump(mode="json"),
    }


@router.patch("/{sample_id}")
def update_sample(sample_id: int, payload: SampleUpdate, db: Session = Depends(get_db)):
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    sample = _get_sample_or_404(db, sample_id)
    if updates.get("reference_standard_id") is not None:
        get_standard_or_404(db, updates["reference_standard_id"])
    _apply(sample, updates)
    db.commit()
    db.refresh(sample)
    return {
        "statusCode": 200,
        "message": "Sample updated",
        "data": SampleOut.model_validate(sample).model_dump(mode="json"),
    }


@router.get("/{sample_id}/conformity")
def sample_conformity(
    sample_id: int,
    standard_id: int | None = None,
    db: Session = Depends(get_db),
    catalog: dict[str, ParameterOut] = Depends(get_catalog),
):
    sample = _get_sample_or_404(db, sample_id)
    if standard_id is not None:
        standard = get_standard_or_404(db, standard_id)
    else:
        standard = sample.reference_standard
    if standard is None:
        raise HTTPException(status_code=400, detail="Sample has no reference standard")

    report = _sample_report(sample, standard, catalog)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": report.model_dump(mode="json"),
    }
