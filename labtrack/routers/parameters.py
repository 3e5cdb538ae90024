from collections import defaultdict

from fastapi import APIRouter, Depends

from labtrack.routers.deps import get_catalog
from labtrack.schemas.parameter import CategorySummary, ParameterOut

router = APIRouter(prefix="/api/parameters", tags=["parameters"])


@router.get("", response_model=list[ParameterOut])
def list_parameters(catalog: dict[str, ParameterOut] = Depends(get_catalog)):
    return list(catalog.values())


@router.get("/categories", response_model=list[CategorySummary])
def categories(catalog: dict[str, ParameterOut] = Depends(get_catalog)):
    grouped: dict[str, list[str]] = defaultdict(list)
    for parameter in catalog.values():
        grouped[parameter.category].append(parameter.key)

    return [
        CategorySummary(category=category, total=len(keys), keys=keys)
        for category, keys in sorted(grouped.items(), key=lambda kv: kv[0])
    ]
