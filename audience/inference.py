"""Pattern definitions, intent classification and suggestion helpers."""

import re
from typing import Dict, List, Pattern, Sequence, Set, Tuple

from .detection.text_match import _contains_patterns
from .state import AudienceSegment, DEFAULT_INTENT
from .constants import (
    DEFINE_AUDIENCE_TRIGGERS,
    ADD_CRITERIA_TRIGGERS,
    REMOVE_CRITERIA_TRIGGERS,
    GENERATE_QUERY_TRIGGERS,
    REFINE_AUDIENCE_TRIGGERS,
    GENERATE_QUERY_SUGGESTION,
    REFINEMENT_HINTS,
    REMOVAL_FIELD_KEYWORDS,
)


def _trigger_stem(trigger: str) -> str:
    # A trailing "e" may give way to "-ing": "exclude" also leads "excluding".
    if trigger.endswith("e"):
        return rf"{re.escape(trigger[:-1])}(?:e|ing)"
    return re.escape(trigger)


def _leading_prefix_pattern(triggers: Sequence[str]) -> Pattern:
    alternation = "|".join(_trigger_stem(trigger) for trigger in triggers)
    return re.compile(rf"^(?:{alternation})", re.IGNORECASE)


# Evaluated top to bottom; the first rule whose trigger prefixes the utterance wins,
# so inflections such as "excluding" or "adding" keep their intent.
# "without" would otherwise read as "with" and land on add_criteria.
# "add" sits above "remove" and "generate", so "and show me..." is an addition.
INTENT_PATTERNS: List[Tuple[str, Pattern]] = [
    ("define_audience", _leading_prefix_pattern(DEFINE_AUDIENCE_TRIGGERS)),
    ("remove_criteria", re.compile(r"^without", re.IGNORECASE)),
    ("add_criteria", _leading_prefix_pattern(ADD_CRITERIA_TRIGGERS)),
    ("remove_criteria", _leading_prefix_pattern(REMOVE_CRITERIA_TRIGGERS)),
    ("generate_query", _leading_prefix_pattern(GENERATE_QUERY_TRIGGERS)),
    ("refine_audience", _leading_prefix_pattern(REFINE_AUDIENCE_TRIGGERS)),
]

# Requests answered from the catalog instead of the audience
FIELD_LISTING_PATTERNS: List[Pattern] = [
    re.compile(r"\bwhat fields\b", re.IGNORECASE),
    re.compile(r"\bfields?\s+(?:are\s+)?available\b", re.IGNORECASE),
    re.compile(r"\bavailable\s+fields\b", re.IGNORECASE),
    re.compile(r"\b(?:list|show)\b.*\bfields\b", re.IGNORECASE),
    re.compile(r"\b(?:demographic|behavioral|psychographic|geographic)\s+(?:fields|options)\b", re.IGNORECASE),
]

VALIDATION_REQUEST_PATTERNS: List[Pattern] = [
    re.compile(r"\b(?:verify|validate)\b", re.IGNORECASE),
    re.compile(r"\bdo(?:es)?\s+(?:these|this|the)\s+(?:fields?|variables?)\s+exist\b", re.IGNORECASE),
]

# Triggers must start a word so "manager" does not also ask to drop "age".
REMOVAL_PATTERNS: Dict[str, List[Pattern]] = {
    field_name: [re.compile(rf"\b{re.escape(keyword)}", re.IGNORECASE) for keyword in keywords]
    for field_name, keywords in REMOVAL_FIELD_KEYWORDS.items()
}

CATEGORY_PATTERN = re.compile(r"\b(demographic|behavioral|psychographic|geographic)\b", re.IGNORECASE)
FIELD_NAME_PATTERN = re.compile(r"\b[a-z][a-z0-9]*(?:_[a-z0-9]+)+\b")
WORD_PATTERN = re.compile(r"[a-z][a-z0-9_]*")


def classify_intent(text: str) -> str:
    """Return the conversational intent of an utterance, defaulting to define_audience."""

    normalized = text.lower().strip()
    for intent, pattern in INTENT_PATTERNS:
        if pattern.match(normalized):
            return intent
    return DEFAULT_INTENT


def build_refinement_suggestions(segments: Sequence[AudienceSegment]) -> List[str]:
    """Suggest the core fields a freshly defined audience still lacks."""

    present = {segment.field for segment in segments}
    suggestions = [hint for field_name, hint in REFINEMENT_HINTS if field_name not in present]
    suggestions.append(GENERATE_QUERY_SUGGESTION)
    return suggestions


def select_removal_fields(text: str) -> Set[str]:
    """Map a removal request to the field names it asks to drop."""

    lowered = text.lower()
    return {
        field_name
        for field_name, patterns in REMOVAL_PATTERNS.items()
        if _contains_patterns(lowered, patterns)
    }
