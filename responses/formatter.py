"""Response builder that turns audience segments into chat replies."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from audience.state import AudienceSegment, FieldDefinition

ACTION_KINDS = ("add_criteria", "generate_query", "refine_audience", "clear_audience")


@dataclass(frozen=True)
class ActionButton:
    label: str
    action: str
    priority: str = "secondary"


@dataclass
class FormattedResponse:
    """Structured reply consumed by the CLI and the HTTP backend."""

    content: str
    suggestions: List[str] = field(default_factory=list)
    action_buttons: List[ActionButton] = field(default_factory=list)
    boolean_output: Optional[str] = None

    def to_mapping(self) -> Dict[str, Any]:
        return asdict(self)


GENERATE_BUTTON = ActionButton("Generate Boolean Query", "generate_query", "primary")
ADD_MORE_BUTTON = ActionButton("Add More Criteria", "add_criteria", "secondary")


def _describe(segments: Sequence[AudienceSegment]) -> str:
    return ", ".join(segment.label for segment in segments)


def _breakdown(segments: Sequence[AudienceSegment]) -> str:
    return "\n".join(f"- **{segment.criteria}**: {segment.boolean_logic}" for segment in segments)


def _mean_confidence(segments: Sequence[AudienceSegment]) -> int:
    return round(sum(segment.confidence for segment in segments) / len(segments) * 100)


def _precision_label(count: int) -> str:
    if count > 3:
        return "High"
    if count > 1:
        return "Medium"
    return "Basic"


def _definition_response(segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    if not segments:
        content = (
            "**Describe your audience**\n\n"
            "I can translate your audience into boolean logic over the field catalog. Please include:\n\n"
            "- **Demographics**: age, gender, location\n"
            "- **Professional**: job level, industry\n"
            "- **Behavioral**: platform usage, purchasing\n"
            "- **Psychographic**: values, attitudes\n\n"
            '**Example**: "Professional males 30-45, managers in technology, active LinkedIn users"'
        )
        return FormattedResponse(
            content=content,
            suggestions=["Try example audience", "What fields are available?", "Show me demographic options"],
        )

    content = (
        "**Audience Analysis Complete**\n\n"
        f"**Target Audience**: {_describe(segments)}\n\n"
        f"**Identified Segments**:\n{_breakdown(segments)}\n\n"
        f"**Confidence Level**: {_mean_confidence(segments)}%"
    )
    return FormattedResponse(
        content=content,
        suggestions=list(suggestions),
        action_buttons=[
            GENERATE_BUTTON,
            ADD_MORE_BUTTON,
            ActionButton("Refine Audience", "refine_audience", "secondary"),
        ],
    )


def _addition_response(segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    content = (
        "**Criteria Added**\n\n"
        f"**Updated Audience**: {_describe(segments)}\n\n"
        f"**Recently Added**:\n{_breakdown(segments[-2:])}\n\n"
        f"**Total Segments**: {len(segments)}"
    )
    return FormattedResponse(
        content=content,
        suggestions=list(suggestions),
        action_buttons=[GENERATE_BUTTON, ADD_MORE_BUTTON, ActionButton("Clear All", "clear_audience", "secondary")],
    )


def _query_response(segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    query = " AND ".join(segment.boolean_logic for segment in segments)
    if segments:
        structure = "\n".join(
            f"{index}. {segment.criteria} -> {segment.boolean_logic}" for index, segment in enumerate(segments, start=1)
        )
        content = (
            "**Boolean Query Generated**\n\n"
            f"**Target Audience**: {_describe(segments)}\n\n"
            f"**Query Structure**:\n{structure}\n\n"
            "**Next Steps**:\n"
            "1. Copy the boolean query below\n"
            "2. Paste it into the survey platform\n"
            "3. Run the query and review the results\n"
            "4. Refine targeting as needed"
        )
    else:
        content = "**Boolean Query Generated**\n\nNo criteria are defined yet, so the query is empty."
    return FormattedResponse(
        content=content,
        boolean_output=query,
        suggestions=[suggestion for suggestion in suggestions if "Generate" not in suggestion],
        action_buttons=[
            ActionButton("Refine Query", "refine_audience", "secondary"),
            ADD_MORE_BUTTON,
            ActionButton("Start Over", "clear_audience", "secondary"),
        ],
    )


def _refinement_response(segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    content = (
        "**Audience Refined**\n\n"
        f"**Updated Target**: {_describe(segments)}\n\n"
        f"**Current Segments**: {len(segments)}\n"
        f"**Targeting Precision**: {_precision_label(len(segments))}"
    )
    return FormattedResponse(
        content=content,
        suggestions=list(suggestions),
        action_buttons=[
            GENERATE_BUTTON,
            ADD_MORE_BUTTON,
            ActionButton("Refine Further", "refine_audience", "secondary"),
        ],
    )


def _removal_response(segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    remaining = _describe(segments) if segments else "No criteria defined"
    closing = (
        "All criteria have been removed. Please define a new audience."
        if not segments
        else "Criteria removed from the audience definition."
    )
    content = (
        "**Criteria Removed**\n\n"
        f"**Remaining Audience**: {remaining}\n\n"
        f"**Active Segments**: {len(segments)}\n\n"
        f"{closing}"
    )
    if segments:
        buttons = [GENERATE_BUTTON, ADD_MORE_BUTTON]
    else:
        buttons = [ActionButton("Define New Audience", "add_criteria", "primary")]
    return FormattedResponse(content=content, suggestions=list(suggestions), action_buttons=buttons)


def _default_response(_segments: Sequence[AudienceSegment], suggestions: List[str]) -> FormattedResponse:
    content = (
        "**Audience Boolean Logic Assistant**\n\n"
        "I can translate audience descriptions into boolean logic. Describe your target audience or ask about:\n\n"
        "- Available fields and values\n"
        "- Boolean logic syntax\n"
        "- Audience translation examples"
    )
    return FormattedResponse(
        content=content,
        suggestions=list(suggestions),
        action_buttons=[
            ActionButton("Show Available Fields", "add_criteria", "secondary"),
            ActionButton("Try Example Audience", "add_criteria", "secondary"),
        ],
    )


_BUILDERS: Dict[str, Callable[[Sequence[AudienceSegment], List[str]], FormattedResponse]] = {
    "define_audience": _definition_response,
    "add_criteria": _addition_response,
    "generate_query": _query_response,
    "refine_audience": _refinement_response,
    "remove_criteria": _removal_response,
}


def format_response(
    segments: Sequence[AudienceSegment],
    intent: str,
    suggestions: Sequence[str],
) -> FormattedResponse:
    """Build the reply for a classified intent from the current audience."""

    builder = _BUILDERS.get(intent, _default_response)
    return builder(list(segments), list(suggestions))


def welcome_message() -> FormattedResponse:
    content = (
        "**Audience Translator**\n\n"
        "I translate audience descriptions into boolean logic over a fixed catalog of survey fields. "
        "I remember the audience as we talk, so you can add, remove and refine criteria step by step.\n\n"
        "**Ready to start?** Describe your target audience..."
    )
    return FormattedResponse(
        content=content,
        suggestions=[
            "Professional males 30-45 in technology",
            "Millennial women interested in sustainability",
            "University students aged 18-25",
            "What fields are available?",
        ],
    )


def format_field_listing(fields: Sequence[FieldDefinition], category: Optional[str] = None) -> FormattedResponse:
    heading = f"**Available {category} fields**" if category else "**Available fields**"
    if fields:
        lines = "\n".join(
            f"- **{definition.name}** ({definition.category}): {definition.description}. "
            f"Values: {', '.join(definition.values)}"
            for definition in fields
        )
    else:
        lines = "No fields match that category."
    return FormattedResponse(
        content=f"{heading}\n\n{lines}",
        suggestions=["Professional males 30-45 in technology", "Verify fitness_level, age"],
    )


def format_validation_report(known: Sequence[str], unknown: Sequence[str]) -> FormattedResponse:
    if not known and not unknown:
        content = "Tell me which field names to verify, for example: verify fitness_level, age"
    else:
        rows = [f"- {name}: available" for name in known]
        rows.extend(f"- {name}: not in the catalog" for name in unknown)
        content = "**Field Verification Results**\n\n" + "\n".join(rows)
    return FormattedResponse(
        content=content,
        suggestions=["What fields are available?", "Show me behavioral fields"],
    )


def format_reference_matches(term: str, lines: Sequence[str], *, available: bool = True) -> FormattedResponse:
    if not available:
        content = "The field reference is unavailable right now. You can still describe an audience."
    elif lines:
        content = f"**From the field reference** ({term}):\n\n" + "\n".join(lines)
    else:
        content = f"Nothing in the field reference mentions '{term}'."
    return FormattedResponse(
        content=content,
        suggestions=["Create boolean logic for this audience", "What fields are available?"],
    )


ACTION_PROMPTS = {
    "add_criteria": "What would you like to add? For example: add organic buyers in the USA.",
    "refine_audience": "How should the audience change? For example: refine to students aged 18-25.",
}


def format_action_prompt(action: str) -> FormattedResponse:
    return FormattedResponse(
        content=ACTION_PROMPTS[action],
        suggestions=["Add organic buyers", "Remove age", "Generate boolean query"],
    )
