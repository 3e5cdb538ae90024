from labtrack.models.parameter import ParameterDefinition
from labtrack.models.reference_standard import ReferenceStandard, ReferenceStandardRule
from labtrack.models.sample import Sample

__all__ = [
    "ParameterDefinition",
    "ReferenceStandard",
    "ReferenceStandardRule",
    "Sample",
]
