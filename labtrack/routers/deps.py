from fastapi import Depends
from sqlalchemy.orm import Session

from labtrack.database import get_db
from labtrack.models.parameter import ParameterDefinition
from labtrack.models.reference_standard import ReferenceStandard
from labtrack.schemas.parameter import ParameterOut
from labtrack.schemas.reference_standard import ReferenceRule


def get_catalog(db: Session = Depends(get_db)) -> dict[str, ParameterOut]:
    rows = db.query(ParameterDefinition).order_by(ParameterDefinition.id.asc()).all()
    return {row.key: ParameterOut.model_validate(row) for row in rows}


def rules_of(standard: ReferenceStandard | None) -> list[ReferenceRule]:
    if standard is None:
        return []
    return [ReferenceRule.model_validate(rule) for rule in standard.rules]
