"""Dataclasses for catalog fields, audience segments and conversation state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Set, Tuple

INTENTS = (
    "define_audience",
    "add_criteria",
    "remove_criteria",
    "generate_query",
    "refine_audience",
)
DEFAULT_INTENT = "define_audience"

CATEGORIES = ("demographic", "behavioral", "psychographic", "geographic")


@dataclass(frozen=True)
class FieldDefinition:
    """A known target field with its permitted values and operators."""

    name: str
    category: str
    values: Tuple[str, ...]
    operators: Tuple[str, ...]
    description: str


@dataclass(frozen=True)
class AudienceSegment:
    """One targeting criterion plus the boolean clause that expresses it."""

    id: str
    field: str
    category: str
    label: str
    criteria: str
    boolean_logic: str
    confidence: float = 0.8


@dataclass(frozen=True)
class ConversationTurn:
    id: str
    user_input: str
    bot_response: str
    timestamp: datetime
    audience_changes: Tuple[AudienceSegment, ...] = ()


@dataclass
class ConversationContext:
    last_user_intent: str = DEFAULT_INTENT
    pending_actions: List[str] = field(default_factory=list)
    current_query: str = ""


@dataclass
class ConversationState:
    """Accumulated audience, turn log and context for one conversation."""

    current_audience: List[AudienceSegment] = field(default_factory=list)
    conversation_history: List[ConversationTurn] = field(default_factory=list)
    context: ConversationContext = field(default_factory=ConversationContext)


@dataclass
class ExtractionResult:
    """Outcome of interpreting one utterance; applied to the audience by the assistant."""

    intent: str
    extracted: List[AudienceSegment] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    removal_fields: Set[str] = field(default_factory=set)
