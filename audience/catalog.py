"""Static catalog of the survey fields an audience can be filtered on."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .state import FieldDefinition

EQUALITY_OPERATORS = ("==", "!=")
ORDINAL_OPERATORS = (">=", "<=", "==", "!=")

FIELD_CATALOG: Tuple[FieldDefinition, ...] = (
    FieldDefinition(
        name="gender",
        category="demographic",
        values=("Male", "Female", "Non-binary", "Prefer not to say"),
        operators=EQUALITY_OPERATORS,
        description="Gender identity",
    ),
    FieldDefinition(
        name="age",
        category="demographic",
        values=("18-24", "25-34", "35-44", "45-54", "55-64"),
        operators=ORDINAL_OPERATORS,
        description="Age range",
    ),
    # Job levels are ordered, so range comparisons are allowed.
    FieldDefinition(
        name="job_level",
        category="demographic",
        values=("Entry Level", "Mid Level", "Senior Level", "Manager", "Director", "Executive"),
        operators=ORDINAL_OPERATORS,
        description="Professional job level",
    ),
    FieldDefinition(
        name="industry",
        category="demographic",
        values=("Technology", "Healthcare", "Finance", "Education", "Retail", "Manufacturing"),
        operators=EQUALITY_OPERATORS,
        description="Industry sector",
    ),
    FieldDefinition(
        name="education_level",
        category="demographic",
        values=("High School", "Some College", "Bachelor's", "Master's", "PhD"),
        operators=ORDINAL_OPERATORS,
        description="Education level",
    ),
    FieldDefinition(
        name="education_status",
        category="demographic",
        values=("Currently studying", "Completed", "Not applicable"),
        operators=EQUALITY_OPERATORS,
        description="Current education status",
    ),
    FieldDefinition(
        name="linkedin_usage",
        category="behavioral",
        values=("Active", "Occasional", "Rarely", "Never"),
        operators=EQUALITY_OPERATORS,
        description="LinkedIn platform usage",
    ),
    FieldDefinition(
        name="attitude_sustainability",
        category="psychographic",
        values=("Very Important", "Important", "Somewhat Important", "Not Important"),
        operators=EQUALITY_OPERATORS,
        description="Attitude toward sustainability",
    ),
    FieldDefinition(
        name="interest_environment",
        category="psychographic",
        values=("1", "0"),
        operators=EQUALITY_OPERATORS,
        description="Interest in environmental issues",
    ),
    FieldDefinition(
        name="product_purchase_organic",
        category="behavioral",
        values=("1", "0"),
        operators=EQUALITY_OPERATORS,
        description="Purchase organic products",
    ),
    FieldDefinition(
        name="country_residence",
        category="geographic",
        values=("USA", "UK", "Canada", "Australia", "Germany", "France"),
        operators=EQUALITY_OPERATORS,
        description="Country of residence",
    ),
)

_FIELDS_BY_NAME: Dict[str, FieldDefinition] = {definition.name: definition for definition in FIELD_CATALOG}


def get_field_info(name: str) -> Optional[FieldDefinition]:
    return _FIELDS_BY_NAME.get(name)


def get_all_fields(category: Optional[str] = None) -> List[FieldDefinition]:
    """Return catalog fields in declaration order, optionally for one category."""
    if category is None:
        return list(FIELD_CATALOG)
    return [definition for definition in FIELD_CATALOG if definition.category == category]


def field_category(name: str, default: str = "demographic") -> str:
    definition = _FIELDS_BY_NAME.get(name)
    return definition.category if definition else default


def validate_field_names(names: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split candidate field names into (known, unknown), preserving order and dropping repeats."""
    known: List[str] = []
    unknown: List[str] = []
    for name in dict.fromkeys(names):
        if name in _FIELDS_BY_NAME:
            known.append(name)
        else:
            unknown.append(name)
    return known, unknown
