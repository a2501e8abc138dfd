"""Constants, limits, trigger keyword lists and canned suggestions for the audience module."""

import os

# Limits
DEFAULT_CONFIDENCE = 0.8
MAX_HISTORY_TURNS = int(os.getenv("MAX_HISTORY_TURNS", "0"))  # 0 keeps every turn
MAX_INPUT_LENGTH = int(os.getenv("MAX_MESSAGE_LENGTH", "10000"))
SEGMENT_ID_SUFFIX_LENGTH = 9

# Leading words for intent classification, listed in evaluation order
DEFINE_AUDIENCE_TRIGGERS = [
    "describe",
    "define",
    "target",
    "audience",
    "segment",
    "who",
    "people",
    "users",
    "customers",
]

ADD_CRITERIA_TRIGGERS = [
    "add",
    "include",
    "also",
    "plus",
    "and",
    "with",
    "having",
]

REMOVE_CRITERIA_TRIGGERS = [
    "remove",
    "exclude",
    "not",
    "without",
    "except",
]

GENERATE_QUERY_TRIGGERS = [
    "generate",
    "create",
    "build",
    "make",
    "show",
    "give",
    "query",
    "boolean",
    "logic",
]

REFINE_AUDIENCE_TRIGGERS = [
    "refine",
    "adjust",
    "modify",
    "change",
    "update",
    "improve",
]

# Segment detector triggers
MALE_KEYWORDS = ["male"]
FEMALE_KEYWORDS = ["female", "women"]
MEN_KEYWORDS = ["men"]
MILLENNIAL_KEYWORDS = ["millennial"]
MANAGER_KEYWORDS = ["manager", "management"]
PROFESSIONAL_KEYWORDS = ["professional", "professionals"]
STUDENT_KEYWORDS = ["student", "students"]
TECHNOLOGY_KEYWORDS = ["technology", "tech"]
LINKEDIN_KEYWORDS = ["linkedin"]
SUSTAINABILITY_KEYWORDS = ["sustainability", "sustainable"]
ORGANIC_KEYWORDS = ["organic"]
ENVIRONMENT_KEYWORDS = ["environment"]
USA_KEYWORDS = ["usa", "united states", "america"]

# Removal triggers mapped to the field they clear
REMOVAL_FIELD_KEYWORDS = {
    "gender": ["gender", "male", "female"],
    "age": ["age"],
    "job_level": ["job", "manager"],
}

# Suggestion chips
GENERATE_QUERY_SUGGESTION = "Generate boolean query"
ADD_CRITERIA_SUGGESTIONS = ["Generate boolean query", "Add more criteria", "Refine existing criteria"]
REMOVE_CRITERIA_SUGGESTIONS = ["Add different criteria", "Generate boolean query", "Start over"]
GENERATE_QUERY_SUGGESTIONS = ["Refine query", "Add more criteria", "Export to different format"]
REFINE_AUDIENCE_SUGGESTIONS = ["Generate boolean query", "Add more criteria", "Remove criteria"]

# Missing-field hints for a freshly defined audience, checked in this order
REFINEMENT_HINTS = [
    ("gender", "Add gender targeting"),
    ("age", "Add age range"),
    ("job_level", "Add job level"),
    ("industry", "Add industry focus"),
]
