"""Boolean query synthesis and an optional catalog validation pass."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .catalog import get_field_info
from .state import AudienceSegment

CONJUNCTION = " AND "

CLAUSE_PATTERN = re.compile(
    r"^(?P<field>[a-z][a-z0-9_]*)\s*(?P<operator>==|!=|>=|<=)\s*(?P<value>'[^']*'|\d+(?:\.\d+)?)$"
)
OR_SPLIT = re.compile(r"\s+OR\s+")
AND_SPLIT = re.compile(r"\s+AND\s+")


@dataclass(frozen=True)
class QueryIssue:
    """A problem found in a segment's boolean clause; never blocks synthesis."""

    segment_id: str
    field: str
    message: str


def synthesize_query(segments: Sequence[AudienceSegment]) -> str:
    """Conjoin every segment's boolean clause, in order, without deduplication."""
    if not segments:
        return ""
    return CONJUNCTION.join(segment.boolean_logic for segment in segments)


def split_clauses(fragment: str) -> Optional[List[str]]:
    """Break a fragment into its atomic clauses, or None when it is malformed.

    Accepts a single clause, a conjunction of clauses, or one parenthesised
    disjunction of clauses.
    """
    text = fragment.strip()
    if not text:
        return None
    if text.startswith("(") and text.endswith(")"):
        inner = text[1:-1].strip()
        if "(" in inner or ")" in inner:
            return None
        parts = OR_SPLIT.split(inner)
    elif "(" in text or ")" in text:
        return None
    else:
        parts = AND_SPLIT.split(text)
    clauses = [part.strip() for part in parts]
    if not all(CLAUSE_PATTERN.match(clause) for clause in clauses):
        return None
    return clauses


def fragment_is_well_formed(fragment: str) -> bool:
    return split_clauses(fragment) is not None


def validate_query(segments: Sequence[AudienceSegment]) -> List[QueryIssue]:
    """Check each segment against the catalog and flag repeated fields.

    Repeated fields are reported because conjoining two clauses on one field
    (for example two age brackets) can make the filter unsatisfiable.
    """
    issues: List[QueryIssue] = []
    for segment in segments:
        clauses = split_clauses(segment.boolean_logic)
        if clauses is None:
            issues.append(QueryIssue(segment.id, segment.field, f"malformed clause: {segment.boolean_logic}"))
            continue
        for clause in clauses:
            match = CLAUSE_PATTERN.match(clause)
            field_name = match.group("field")
            definition = get_field_info(field_name)
            if definition is None:
                issues.append(QueryIssue(segment.id, field_name, f"unknown field '{field_name}'"))
                continue
            operator = match.group("operator")
            if operator not in definition.operators:
                issues.append(
                    QueryIssue(segment.id, field_name, f"operator '{operator}' not permitted for '{field_name}'")
                )
            value = match.group("value")
            if value.startswith("'"):
                literal = value.strip("'")
                if literal not in definition.values:
                    issues.append(
                        QueryIssue(segment.id, field_name, f"value '{literal}' not permitted for '{field_name}'")
                    )
            elif all(allowed.isdigit() for allowed in definition.values) and value not in definition.values:
                issues.append(QueryIssue(segment.id, field_name, f"value {value} not permitted for '{field_name}'"))

    counts = Counter(segment.field for segment in segments)
    for field_name, count in counts.items():
        if count > 1:
            first = next(segment for segment in segments if segment.field == field_name)
            issues.append(QueryIssue(first.id, field_name, f"field '{field_name}' is constrained {count} times"))
    return issues
