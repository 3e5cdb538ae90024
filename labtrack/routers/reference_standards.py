import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from labtrack.database import get_db
from labtrack.models.reference_standard import ReferenceStandard, ReferenceStandardRule
from labtrack.schemas.reference_standard import (
    RulesReplaceRequest,
    StandardCreate,
    StandardDetailOut,
    StandardOut,
    StandardUpdate,
)
from labtrack.services.reference_formatter import NO_REFERENCE, format_display_reference

router = APIRouter(prefix="/api/reference-standards", tags=["reference-standards"])
logger = logging.getLogger(__name__)


def get_standard_or_404(db: Session, standard_id: int) -> ReferenceStandard:
    standard = db.query(ReferenceStandard).filter(ReferenceStandard.id == standard_id).first()
    if not standard:
        raise HTTPException(status_code=404, detail="Reference standard not found")
    return standard


@router.get("")
def list_standards(active_only: bool = False, db: Session = Depends(get_db)):
    query = db.query(ReferenceStandard)
    if active_only:
        query = query.filter(ReferenceStandard.is_active.is_(True))
    standards = query.order_by(ReferenceStandard.name.asc()).all()
    return {
        "statusCode": 200,
        "message": "Success",
        "data": [StandardOut.model_validate(s).model_dump() for s in standards],
    }


@router.get("/{standard_id}")
def get_standard(standard_id: int, db: Session = Depends(get_db)):
    standard = get_standard_or_404(db, standard_id)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": StandardDetailOut.model_validate(standard).model_dump(),
    }


@router.post("", status_code=201)
def create_standard(payload: StandardCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Standard name is required")
    if db.query(ReferenceStandard).filter(ReferenceStandard.name == name).first():
        raise HTTPException(status_code=400, detail="A standard with this name already exists")

    standard = ReferenceStandard(
        name=name,
        description=payload.description,
        category=payload.category,
        is_active=payload.is_active,
    )
    db.add(standard)
    db.commit()
    db.refresh(standard)
    logger.info("Created reference standard %s (%s)", standard.id, standard.name)
    return {
        "statusCode": 201,
        "message": "Reference standard created",
        "data": StandardOut.model_validate(standard).model_dump(),
    }


@router.patch("/{standard_id}")
def update_standard(standard_id: int, payload: StandardUpdate, db: Session = Depends(get_db)):
    # Header fields only; rules are replaced through PUT /{id}/rules.
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    standard = get_standard_or_404(db, standard_id)
    for field, value in updates.items():
        setattr(standard, field, value)
    db.commit()
    db.refresh(standard)
    return {
        "statusCode": 200,
        "message": "Reference standard updated",
        "data": StandardOut.model_validate(standard).model_dump(),
    }


@router.delete("/{standard_id}")
def delete_standard(standard_id: int, db: Session = Depends(get_db)):
    standard = get_standard_or_404(db, standard_id)
    db.delete(standard)
    db.commit()
    logger.info("Deleted reference standard %s", standard_id)
    return {
        "statusCode": 200,
        "message": "Reference standard deleted",
        "data": None,
    }


@router.put("/{standard_id}/rules")
def replace_rules(standard_id: int, payload: RulesReplaceRequest, db: Session = Depends(get_db)):
    standard = get_standard_or_404(db, standard_id)

    new_rules = []
    for item in payload.rules:
        display_reference = item.display_reference
        if not display_reference:
            derived = format_display_reference(item.model_dump())
            display_reference = derived if derived != NO_REFERENCE else None
        new_rules.append(
            ReferenceStandardRule(
                parameter_key=item.parameter_key,
                condition_type=item.condition_type,
                min_value=item.min_value,
                max_value=item.max_value,
                expected_text=item.expected_text or None,
                display_reference=display_reference,
            )
        )

    standard.rules = new_rules
    db.commit()
    db.refresh(standard)
    logger.info("Replaced rules of reference standard %s (%d rules)", standard_id, len(new_rules))
    return {
        "statusCode": 200,
        "message": "Rules saved",
        "data": StandardDetailOut.model_validate(standard).model_dump(),
    }
