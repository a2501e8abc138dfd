"""Conversation loop that turns utterances into audience updates and replies"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from reference.loader import ReferenceContext
from reference.search import search_reference
from responses.formatter import (
    ACTION_KINDS,
    FormattedResponse,
    format_action_prompt,
    format_field_listing,
    format_reference_matches,
    format_response,
    format_validation_report,
)

from .catalog import get_all_fields, validate_field_names
from .constants import (
    MAX_HISTORY_TURNS,
    MAX_INPUT_LENGTH,
    ADD_CRITERIA_SUGGESTIONS,
    REMOVE_CRITERIA_SUGGESTIONS,
    GENERATE_QUERY_SUGGESTIONS,
    REFINE_AUDIENCE_SUGGESTIONS,
)
from .manager import AudienceStateManager
from .query import synthesize_query
from .state import ExtractionResult
from .inference import (
    classify_intent,
    build_refinement_suggestions,
    select_removal_fields,
)
from .detection.detectors import (
    extract_segments,
    detect_field_listing,
    detect_requested_category,
    detect_validation_request,
    extract_field_candidates,
)

logger = logging.getLogger(__name__)


class AudienceAssistant:
    """Classifies each utterance, updates the audience and formats the reply."""

    def __init__(
        self,
        *,
        state_manager: Optional[AudienceStateManager] = None,
        reference: Optional[ReferenceContext] = None,
        max_input_length: int = MAX_INPUT_LENGTH,
        max_history_turns: int = MAX_HISTORY_TURNS,
        reference_max_lines: int = 5,
    ) -> None:
        self.state = state_manager or AudienceStateManager(max_history_turns=max_history_turns)
        self.reference = reference
        self.max_input_length = max_input_length
        self.reference_max_lines = reference_max_lines
        self.last_result: Optional[ExtractionResult] = None

    def _validate_input(self, user_input: str) -> None:
        """
        Reject empty or oversized input before it reaches the detectors.

        Raises:
            ValueError: If input fails validation
        """
        if not user_input or not user_input.strip():
            raise ValueError("Input cannot be empty")

        if len(user_input) > self.max_input_length:
            logger.warning(f"Input too long: {len(user_input)} chars (max: {self.max_input_length})")
            raise ValueError(f"Input too long. Maximum {self.max_input_length} characters allowed.")

    def interpret(self, user_input: str) -> ExtractionResult:
        """Classify the utterance and extract what it asks for, without touching state."""

        intent = classify_intent(user_input)
        if intent == "define_audience":
            extracted = extract_segments(user_input)
            # With nothing extracted the current audience stays, so hint against it.
            hinted = extracted or self.state.segments
            return ExtractionResult(intent, extracted, build_refinement_suggestions(hinted))
        if intent == "add_criteria":
            return ExtractionResult(intent, extract_segments(user_input), list(ADD_CRITERIA_SUGGESTIONS))
        if intent == "refine_audience":
            return ExtractionResult(intent, extract_segments(user_input), list(REFINE_AUDIENCE_SUGGESTIONS))
        if intent == "remove_criteria":
            return ExtractionResult(
                intent,
                suggestions=list(REMOVE_CRITERIA_SUGGESTIONS),
                removal_fields=select_removal_fields(user_input),
            )
        return ExtractionResult(intent, suggestions=list(GENERATE_QUERY_SUGGESTIONS))

    def process_message(self, user_input: str) -> FormattedResponse:
        self._validate_input(user_input)

        catalog_reply = self._answer_catalog_request(user_input)
        if catalog_reply is not None:
            self.state.record_turn(user_input, catalog_reply.content, self.state.segments)
            return catalog_reply

        result = self.interpret(user_input)
        self.last_result = result
        self._apply(result)

        segments = self.state.segments
        response: Optional[FormattedResponse] = None
        if result.intent == "define_audience" and not result.extracted:
            response = self._reference_fallback(user_input)
        if response is None:
            response = format_response(segments, result.intent, result.suggestions)
        if result.intent == "generate_query":
            self.state.set_current_query(synthesize_query(segments))

        self.state.update_context(result.intent, result.suggestions)
        self.state.record_turn(user_input, response.content, segments)
        return response

    def perform_action(self, action: str) -> FormattedResponse:
        """Handle an action button; no conversation turn is recorded."""

        if action not in ACTION_KINDS:
            raise ValueError(f"Unknown action: {action}")
        if action == "generate_query":
            segments = self.state.segments
            self.state.set_current_query(synthesize_query(segments))
            self.state.update_context(action, GENERATE_QUERY_SUGGESTIONS)
            return format_response(segments, action, GENERATE_QUERY_SUGGESTIONS)
        if action == "clear_audience":
            self.clear_audience()
            return format_response([], "remove_criteria", REMOVE_CRITERIA_SUGGESTIONS)
        return format_action_prompt(action)

    def remove_segment(self, segment_id: str) -> None:
        self.state.remove_segment(segment_id)

    def clear_audience(self) -> None:
        self.state.clear_audience()
        self.state.set_current_query("")

    def lookup_reference(self, term: str) -> FormattedResponse:
        if self.reference is None or not self.reference.available:
            return format_reference_matches(term, [], available=False)
        lines = search_reference(self.reference, term, self.reference_max_lines)
        return format_reference_matches(term, lines)

    def snapshot(self) -> Dict[str, Any]:
        """Return a shallow summary of the conversation state for monitoring."""

        state = self.state.get_state()
        return {
            "audience": self.state.get_audience_description(),
            "segment_count": len(state.current_audience),
            "last_user_intent": state.context.last_user_intent,
            "current_query": state.context.current_query,
            "history_length": len(state.conversation_history),
        }

    def _apply(self, result: ExtractionResult) -> None:
        if result.intent == "define_audience":
            # An utterance with no recognisable signal keeps the existing audience.
            if result.extracted:
                self.state.replace_audience(result.extracted)
        elif result.intent in {"add_criteria", "refine_audience"}:
            self.state.append_segments(result.extracted)
        elif result.intent == "remove_criteria" and result.removal_fields:
            removed = self.state.remove_by_criteria_keyword(result.removal_fields)
            logger.info(f"Removed {len(removed)} segments for fields {sorted(result.removal_fields)}")

    def _answer_catalog_request(self, user_input: str) -> Optional[FormattedResponse]:
        if detect_validation_request(user_input):
            known, unknown = validate_field_names(extract_field_candidates(user_input))
            return format_validation_report(known, unknown)
        if detect_field_listing(user_input):
            category = detect_requested_category(user_input)
            return format_field_listing(get_all_fields(category), category)
        return None

    def _reference_fallback(self, user_input: str) -> Optional[FormattedResponse]:
        if self.reference is None or not self.reference.available:
            return None
        term = user_input.lower().strip()
        lines = search_reference(self.reference, term, self.reference_max_lines)
        if not lines:
            return None
        return format_reference_matches(term, lines)
