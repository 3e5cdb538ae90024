from datetime import date

from pydantic import BaseModel, ConfigDict, Field

# Numbers are accepted and stored as text, the way analysts type them.
Entry = str | int | float | None


class SampleMeasurements(BaseModel):
    """Direct measurement columns plus the two JSON bags."""

    temperatura: Entry = None
    ph: Entry = None
    turbidez: Entry = None
    condutividade: Entry = None
    cor_aparente: Entry = None
    cloro_residual: Entry = None
    params: str | dict | None = Field(default=None, description="Dynamic parameters, JSON text or object")
    results: str | dict | None = Field(default=None, description="Results that override every other source")


class SampleCreate(SampleMeasurements):
    code: str = Field(min_length=1)
    batch_code: str | None = None
    reference_standard_id: int | None = None
    collection_date: date | None = None


class SampleUpdate(SampleMeasurements):
    batch_code: str | None = None
    reference_standard_id: int | None = None
    collection_date: date | None = None


class SampleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    batch_code: str | None
    reference_standard_id: int | None
    collection_date: date | None
    temperatura: str | None
    ph: str | None
    turbidez: str | None
    condutividade: str | None
    cor_aparente: str | None
    cloro_residual: str | None
    params: str | None
    results: str | None
