from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ConditionType(str, Enum):
    MAX = "MAX"
    MIN = "MIN"
    RANGE = "RANGE"
    EXACT_TEXT = "EXACT_TEXT"
    ABSENCE = "ABSENCE"
    CONDITIONAL = "CONDITIONAL"


class ReferenceRule(BaseModel):
    """Read-only view of one acceptance rule, as the conformity engine sees it.

    ``condition_type`` stays a plain string: rules written by a newer schema must
    still load, and simply evaluate to indeterminate.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    parameter_key: str
    condition_type: str
    min_value: float | None = None
    max_value: float | None = None
    expected_text: str | None = None
    display_reference: str | None = None


class RuleIn(BaseModel):
    parameter_key: str = Field(min_length=1, description="Key of the measured parameter, e.g. 'ph'")
    condition_type: str = Field(description="MAX, MIN, RANGE, EXACT_TEXT, ABSENCE or CONDITIONAL")
    min_value: float | None = None
    max_value: float | None = None
    expected_text: str | None = None
    display_reference: str | None = None


class RulesReplaceRequest(BaseModel):
    rules: list[RuleIn]


class StandardCreate(BaseModel):
    name: str = ""
    description: str | None = None
    category: str | None = None
    is_active: bool = True


class StandardUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    is_active: bool | None = None


class StandardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    category: str | None
    is_active: bool


class StandardDetailOut(StandardOut):
    rules: list[ReferenceRule]
