from pydantic import BaseModel, ConfigDict


class ParameterOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    category: str
    unit: str | None = None
    method: str | None = None


class CategorySummary(BaseModel):
    category: str
    total: int
    keys: list[str]
