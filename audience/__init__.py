"""Audience package exposing the conversational assistant."""

from .agent import AudienceAssistant
from .diagnostics import run_reference_sanity_check
from .manager import AudienceStateManager
from .state import AudienceSegment, ConversationState

__all__ = [
    "AudienceAssistant",
    "AudienceStateManager",
    "AudienceSegment",
    "ConversationState",
    "run_reference_sanity_check",
]
