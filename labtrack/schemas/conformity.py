from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field

from labtrack.schemas.reference_standard import ReferenceRule

# Entries arrive as typed by the analyst or as decoded from JSON bags.
RawValue = Any


class Verdict(str, Enum):
    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"
    INDETERMINATE = "INDETERMINATE"

    @classmethod
    def of(cls, result: bool | None) -> "Verdict":
        if result is None:
            return cls.INDETERMINATE
        return cls.COMPLIANT if result else cls.NON_COMPLIANT


class Declaration(str, Enum):
    NOT_EVALUATED = "NOT_EVALUATED"
    NON_COMPLIANT = "NON_COMPLIANT"
    COMPLIANT = "COMPLIANT"


def declare(evaluated_count: int, fail_count: int) -> Declaration:
    if evaluated_count == 0:
        return Declaration.NOT_EVALUATED
    if fail_count > 0:
        return Declaration.NON_COMPLIANT
    return Declaration.COMPLIANT


class Failure(BaseModel):
    parameter_key: str
    value: RawValue
    rule: ReferenceRule


class SampleConformity(BaseModel):
    failures: list[Failure] = Field(default_factory=list)

    @computed_field
    @property
    def is_conformant(self) -> bool:
        # Vacuously true when nothing was evaluated; reports use Declaration instead.
        return not self.failures


class ReportLine(BaseModel):
    parameter_key: str
    label: str
    unit: str | None = None
    value: RawValue = None
    reference: str | None = None
    result: bool | None = None
    verdict: Verdict = Verdict.INDETERMINATE


class CategoryGroup(BaseModel):
    category: str
    lines: list[ReportLine]


class SampleReport(BaseModel):
    sample_code: str | None = None
    standard_name: str | None = None
    categories: list[CategoryGroup] = Field(default_factory=list)
    failures: list[Failure] = Field(default_factory=list)
    evaluated_count: int = 0
    fail_count: int = 0
    total_rules: int = 0

    @computed_field
    @property
    def declaration(self) -> Declaration:
        return declare(self.evaluated_count, self.fail_count)


class BatchFailure(Failure):
    sample_code: str | None = None


class BatchReport(BaseModel):
    batch_code: str
    samples: list[SampleReport] = Field(default_factory=list)
    failures: list[BatchFailure] = Field(default_factory=list)
    evaluated_count: int = 0
    fail_count: int = 0
    total_rules: int = 0

    @computed_field
    @property
    def declaration(self) -> Declaration:
        return declare(self.evaluated_count, self.fail_count)


class EvaluateRequest(BaseModel):
    """Values to check, against a stored standard or against inline rules."""

    values: dict[str, RawValue] = Field(default_factory=dict)
    params: str | dict | None = Field(default=None, description="Dynamic parameter bag, JSON text or object")
    results: str | dict | None = Field(default=None, description="Results override bag, JSON text or object")
    standard_id: int | None = None
    rules: list[ReferenceRule] | None = None
    sample_code: str | None = None


class EvaluateRuleRequest(BaseModel):
    value: RawValue = None
    rule: ReferenceRule
    sample_values: dict[str, RawValue] | None = None
