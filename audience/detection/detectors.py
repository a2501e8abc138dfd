"""Detection functions for audience signals and catalog requests."""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple
from uuid import uuid4

from .text_match import _contains_patterns, _contains_keywords, _contains_every
from ..catalog import field_category, get_field_info
from ..inference import (
    FIELD_LISTING_PATTERNS,
    VALIDATION_REQUEST_PATTERNS,
    CATEGORY_PATTERN,
    FIELD_NAME_PATTERN,
    WORD_PATTERN,
)
from ..state import AudienceSegment
from ..constants import (
    DEFAULT_CONFIDENCE,
    SEGMENT_ID_SUFFIX_LENGTH,
    MALE_KEYWORDS,
    FEMALE_KEYWORDS,
    MEN_KEYWORDS,
    MILLENNIAL_KEYWORDS,
    MANAGER_KEYWORDS,
    PROFESSIONAL_KEYWORDS,
    STUDENT_KEYWORDS,
    TECHNOLOGY_KEYWORDS,
    LINKEDIN_KEYWORDS,
    SUSTAINABILITY_KEYWORDS,
    ORGANIC_KEYWORDS,
    ENVIRONMENT_KEYWORDS,
    USA_KEYWORDS,
)


@dataclass(frozen=True)
class SegmentTemplate:
    """Fixed label and boolean clause emitted when a detector fires."""

    field: str
    value: str
    label: str
    boolean_logic: str


Predicate = Callable[[str], bool]
DetectorRule = Tuple[Predicate, SegmentTemplate]


def _any_of(*keywords: str) -> Predicate:
    return lambda text: _contains_keywords(text, keywords)


def _all_of(*keywords: str) -> Predicate:
    return lambda text: _contains_every(text, keywords)


def _male_only(text: str) -> bool:
    # "female" contains "male", so the female words have to be ruled out explicitly.
    return _contains_keywords(text, MALE_KEYWORDS) and not _contains_keywords(text, FEMALE_KEYWORDS)


def _men_and_women(text: str) -> bool:
    return _contains_keywords(text, MEN_KEYWORDS) and _contains_keywords(text, ["women"])


GENDER_RULES: List[DetectorRule] = [
    (_male_only, SegmentTemplate("gender", "Male", "Male professionals", "gender == 'Male'")),
    (_any_of(*FEMALE_KEYWORDS), SegmentTemplate("gender", "Female", "Female professionals", "gender == 'Female'")),
    (
        _men_and_women,
        SegmentTemplate("gender", "All", "All genders", "(gender == 'Male' OR gender == 'Female')"),
    ),
]

AGE_RULES: List[DetectorRule] = [
    (_all_of("30", "45"), SegmentTemplate("age", "30-45", "Ages 30-45", "age >= 30 AND age <= 45")),
    (_all_of("25", "40"), SegmentTemplate("age", "25-40", "Ages 25-40", "age >= 25 AND age <= 40")),
    (_all_of("18", "25"), SegmentTemplate("age", "18-25", "Ages 18-25", "age >= 18 AND age <= 25")),
    (
        _any_of(*MILLENNIAL_KEYWORDS),
        SegmentTemplate("age", "Millennial", "Millennial generation", "age >= 25 AND age <= 40"),
    ),
]

JOB_RULES: List[DetectorRule] = [
    (_any_of(*MANAGER_KEYWORDS), SegmentTemplate("job_level", "Manager", "Management level", "job_level == 'Manager'")),
    (
        _any_of(*PROFESSIONAL_KEYWORDS),
        SegmentTemplate("job_level", "Professional", "Professional level", "job_level >= 'Mid Level'"),
    ),
    (
        _any_of(*STUDENT_KEYWORDS),
        SegmentTemplate(
            "education_status", "Student", "Currently studying", "education_status == 'Currently studying'"
        ),
    ),
]

INDUSTRY_RULES: List[DetectorRule] = [
    (
        _any_of(*TECHNOLOGY_KEYWORDS),
        SegmentTemplate("industry", "Technology", "Technology industry", "industry == 'Technology'"),
    ),
]

PLATFORM_RULES: List[DetectorRule] = [
    (
        _any_of(*LINKEDIN_KEYWORDS),
        SegmentTemplate("linkedin_usage", "Active", "Active LinkedIn users", "linkedin_usage == 'Active'"),
    ),
]

SUSTAINABILITY_RULES: List[DetectorRule] = [
    (
        _any_of(*SUSTAINABILITY_KEYWORDS),
        SegmentTemplate(
            "attitude_sustainability", "Important", "Values sustainability", "attitude_sustainability == 'Important'"
        ),
    ),
]

ORGANIC_RULES: List[DetectorRule] = [
    (
        _any_of(*ORGANIC_KEYWORDS),
        SegmentTemplate("product_purchase_organic", "Yes", "Buys organic products", "product_purchase_organic == 1"),
    ),
]

ENVIRONMENT_RULES: List[DetectorRule] = [
    (
        _any_of(*ENVIRONMENT_KEYWORDS),
        SegmentTemplate("interest_environment", "Yes", "Interested in environment", "interest_environment == 1"),
    ),
]

GEOGRAPHY_RULES: List[DetectorRule] = [
    (
        _any_of(*USA_KEYWORDS),
        SegmentTemplate("country_residence", "USA", "United States residents", "country_residence == 'USA'"),
    ),
]

# Families run in this order and never suppress one another.
DETECTOR_FAMILIES: List[Tuple[str, List[DetectorRule]]] = [
    ("gender", GENDER_RULES),
    ("age", AGE_RULES),
    ("job", JOB_RULES),
    ("industry", INDUSTRY_RULES),
    ("platform", PLATFORM_RULES),
    ("sustainability", SUSTAINABILITY_RULES),
    ("organic", ORGANIC_RULES),
    ("environment", ENVIRONMENT_RULES),
    ("geography", GEOGRAPHY_RULES),
]


def new_segment_id(field_name: str) -> str:
    timestamp_ms = int(time.time() * 1000)
    suffix = uuid4().hex[:SEGMENT_ID_SUFFIX_LENGTH]
    return f"{field_name}_{timestamp_ms}_{suffix}"


def build_segment(template: SegmentTemplate, confidence: float = DEFAULT_CONFIDENCE) -> AudienceSegment:
    """Instantiate a segment with a fresh id from a detector template."""
    return AudienceSegment(
        id=new_segment_id(template.field),
        field=template.field,
        category=field_category(template.field),
        label=template.label,
        criteria=f"{template.field}: {template.value}",
        boolean_logic=template.boolean_logic,
        confidence=confidence,
    )


def detect_family(text: str, rules: Sequence[DetectorRule]) -> Optional[AudienceSegment]:
    """Return a segment for the first rule in the family that fires."""
    lowered = text.lower()
    for predicate, template in rules:
        if predicate(lowered):
            return build_segment(template)
    return None


def detect_gender(text: str) -> Optional[AudienceSegment]:
    return detect_family(text, GENDER_RULES)


def detect_age(text: str) -> Optional[AudienceSegment]:
    return detect_family(text, AGE_RULES)


def extract_segments(text: str) -> List[AudienceSegment]:
    """Run every detector family over the utterance and collect what fires."""
    segments: List[AudienceSegment] = []
    for _family, rules in DETECTOR_FAMILIES:
        segment = detect_family(text, rules)
        if segment is not None:
            segments.append(segment)
    return segments


def detect_field_listing(text: str) -> bool:
    """Detect if user is asking which catalog fields exist."""
    lowered = text.lower()
    return _contains_patterns(lowered, FIELD_LISTING_PATTERNS)


def detect_requested_category(text: str) -> Optional[str]:
    match = CATEGORY_PATTERN.search(text)
    return match.group(1).lower() if match else None


def detect_validation_request(text: str) -> bool:
    """Detect if user wants field names checked against the catalog."""
    lowered = text.lower()
    return _contains_patterns(lowered, VALIDATION_REQUEST_PATTERNS)


def extract_field_candidates(text: str) -> List[str]:
    """Collect snake_case tokens plus plain words that name a catalog field."""
    lowered = text.lower()
    candidates = set(FIELD_NAME_PATTERN.findall(lowered))
    candidates.update(word for word in WORD_PATTERN.findall(lowered) if get_field_info(word))
    return [word for word in WORD_PATTERN.findall(lowered) if word in candidates]
