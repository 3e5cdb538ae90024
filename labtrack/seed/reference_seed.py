import logging

from labtrack.database import session_scope
from labtrack.models.parameter import ParameterDefinition
from labtrack.models.reference_standard import ReferenceStandard, ReferenceStandardRule
from labtrack.services.reference_formatter import format_display_reference

logger = logging.getLogger(__name__)

PHYSICOCHEMICAL = "Físico-Químicos"
MICROBIOLOGICAL = "Microbiológicos"
METALS = "Metais"
BTEX = "BTEX"

PARAMETERS = [
    {"key": "temperatura", "label": "Temperatura", "category": PHYSICOCHEMICAL, "unit": "°C"},
    {"key": "ph", "label": "pH", "category": PHYSICOCHEMICAL, "unit": None},
    {"key": "turbidez", "label": "Turbidez", "category": PHYSICOCHEMICAL, "unit": "uT"},
    {"key": "condutividade", "label": "Condutividade Elétrica", "category": PHYSICOCHEMICAL, "unit": "µS/cm"},
    {"key": "std", "label": "Sólidos Totais Dissolvidos", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "cloreto", "label": "Cloreto", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "cloro_residual", "label": "Cloro Residual Livre", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "cor_aparente", "label": "Cor Aparente", "category": PHYSICOCHEMICAL, "unit": "uH"},
    {"key": "ferro_total", "label": "Ferro", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "trihalometanos", "label": "Trihalometanos Totais", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "od", "label": "OD", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "dbo", "label": "DBO", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "dqo", "label": "DQO", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "n_nitrato", "label": "N-Nitrato", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "n_amoniacal", "label": "N-Amoniacal", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "sulfato", "label": "Sulfato", "category": PHYSICOCHEMICAL, "unit": "mg/L"},
    {"key": "coliformes_totais", "label": "Coliformes Totais", "category": MICROBIOLOGICAL, "unit": None},
    {"key": "coliformes_termotolerantes", "label": "Coliformes Termotolerantes", "category": MICROBIOLOGICAL, "unit": None},
    {"key": "escherichia_coli", "label": "E. coli", "category": MICROBIOLOGICAL, "unit": None},
    {"key": "bacterias_heterotroficas", "label": "Bactérias Heterotróficas", "category": MICROBIOLOGICAL, "unit": "UFC/mL"},
    {"key": "aluminio", "label": "Alumínio", "category": METALS, "unit": "mg/L"},
    {"key": "chumbo", "label": "Chumbo", "category": METALS, "unit": "mg/L"},
    {"key": "cobre", "label": "Cobre", "category": METALS, "unit": "mg/L"},
    {"key": "manganes", "label": "Manganês", "category": METALS, "unit": "mg/L"},
    {"key": "zinco", "label": "Zinco", "category": METALS, "unit": "mg/L"},
    {"key": "benzeno", "label": "Benzeno", "category": BTEX, "unit": "µg/L"},
    {"key": "tolueno", "label": "Tolueno", "category": BTEX, "unit": "µg/L"},
    {"key": "etilbenzeno", "label": "Etilbenzeno", "category": BTEX, "unit": "µg/L"},
    {"key": "xilenos_totais", "label": "Xilenos Totais", "category": BTEX, "unit": "µg/L"},
]

DEFAULT_STANDARD = {
    "name": "Potabilidade - Rede de Distribuição",
    "category": "Água para consumo humano",
    "description": "Padrão de potabilidade para água tratada na rede de distribuição.",
    "rules": [
        {"parameter_key": "ph", "condition_type": "RANGE", "min_value": 6.0, "max_value": 9.0},
        {"parameter_key": "turbidez", "condition_type": "MAX", "max_value": 5.0},
        {"parameter_key": "cor_aparente", "condition_type": "MAX", "max_value": 15.0},
        {"parameter_key": "cloro_residual", "condition_type": "RANGE", "min_value": 0.2, "max_value": 5.0},
        {"parameter_key": "std", "condition_type": "MAX", "max_value": 500.0},
        {"parameter_key": "cloreto", "condition_type": "MAX", "max_value": 250.0},
        {"parameter_key": "ferro_total", "condition_type": "MAX", "max_value": 0.3},
        {"parameter_key": "trihalometanos", "condition_type": "MAX", "max_value": 0.1},
        {"parameter_key": "coliformes_totais", "condition_type": "ABSENCE"},
        {"parameter_key": "escherichia_coli", "condition_type": "ABSENCE"},
    ],
}


def seed_parameters(db) -> None:
    existing = {row.key: row for row in db.query(ParameterDefinition).all()}
    for item in PARAMETERS:
        match = existing.get(item["key"])
        if match:
            match.label = item["label"]
            match.category = item["category"]
            match.unit = item["unit"]
            continue
        db.add(ParameterDefinition(**item))


def seed_default_standard(db) -> None:
    if db.query(ReferenceStandard).filter(ReferenceStandard.name == DEFAULT_STANDARD["name"]).first():
        return
    standard = ReferenceStandard(
        name=DEFAULT_STANDARD["name"],
        category=DEFAULT_STANDARD["category"],
        description=DEFAULT_STANDARD["description"],
    )
    for item in DEFAULT_STANDARD["rules"]:
        rule = ReferenceStandardRule(**item)
        rule.display_reference = format_display_reference(item)
        standard.rules.append(rule)
    db.add(standard)
    logger.info("Seeded reference standard %r with %d rules", standard.name, len(standard.rules))


def seed_reference_data() -> None:
    with session_scope() as db:
        seed_parameters(db)
        seed_default_standard(db)
