"""Mutable audience state with synchronous change notification."""

from __future__ import annotations

import copy
import itertools
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .query import synthesize_query
from .state import AudienceSegment, ConversationState, ConversationTurn

logger = logging.getLogger(__name__)

Listener = Callable[[ConversationState], None]


class AudienceStateManager:
    """Owns the current audience, the turn log and the conversation context.

    Every mutating call notifies subscribers synchronously, in registration
    order, with an independent snapshot. Subscriber exceptions are not caught.
    """

    def __init__(self, *, max_history_turns: Optional[int] = None) -> None:
        self._state = ConversationState()
        self._listeners: List[Tuple[int, Listener]] = []
        self._handles = itertools.count()
        self.max_history_turns = max_history_turns or None

    def get_state(self) -> ConversationState:
        return copy.deepcopy(self._state)

    @property
    def segments(self) -> List[AudienceSegment]:
        return list(self._state.current_audience)

    def replace_audience(self, segments: Iterable[AudienceSegment]) -> None:
        self._state.current_audience = list(segments)
        self._notify()

    def append_segments(self, segments: Iterable[AudienceSegment]) -> None:
        self._state.current_audience.extend(segments)
        self._notify()

    def add_segment(self, segment: AudienceSegment) -> None:
        self._state.current_audience.append(segment)
        self._notify()

    def remove_segment(self, segment_id: str) -> None:
        self._state.current_audience = [
            segment for segment in self._state.current_audience if segment.id != segment_id
        ]
        self._notify()

    def remove_by_criteria_keyword(self, keywords: Iterable[str]) -> List[AudienceSegment]:
        """Drop segments whose criteria names one of the given fields; return what was removed.

        Only the field part of the criteria ("age" in "age: 30-45") is compared,
        so "age" leaves "linkedin_usage" alone.
        """
        targets = set(keywords)
        kept: List[AudienceSegment] = []
        removed: List[AudienceSegment] = []
        for segment in self._state.current_audience:
            field_name = segment.criteria.split(":", 1)[0].strip()
            (removed if field_name in targets else kept).append(segment)
        self._state.current_audience = kept
        self._notify()
        return removed

    def update_context(self, intent: str, actions: Optional[Sequence[str]] = None) -> None:
        self._state.context.last_user_intent = intent
        self._state.context.pending_actions = list(actions or [])
        self._notify()

    def set_current_query(self, query: str) -> None:
        self._state.context.current_query = query
        self._notify()

    def record_turn(self, user_input: str, bot_response: str, segments: Sequence[AudienceSegment]) -> ConversationTurn:
        history = self._state.conversation_history
        turn = ConversationTurn(
            id=f"{len(history) + 1}-{int(time.time() * 1000)}",
            user_input=user_input,
            bot_response=bot_response,
            timestamp=datetime.now(timezone.utc),
            audience_changes=tuple(segments),
        )
        history.append(turn)
        self._truncate_history()
        self._notify()
        return turn

    def clear_audience(self) -> None:
        self._state.current_audience = []
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it."""
        handle = next(self._handles)
        self._listeners.append((handle, listener))

        def unsubscribe() -> None:
            self._listeners = [entry for entry in self._listeners if entry[0] != handle]

        return unsubscribe

    def generate_combined_query(self) -> str:
        return synthesize_query(self._state.current_audience)

    def get_audience_description(self) -> str:
        if not self._state.current_audience:
            return "No audience defined"
        return ", ".join(segment.label for segment in self._state.current_audience)

    def _truncate_history(self) -> None:
        history = self._state.conversation_history
        if self.max_history_turns and len(history) > self.max_history_turns:
            turns_to_remove = len(history) - self.max_history_turns
            logger.info(f"Truncating history: removing {turns_to_remove} oldest turns")
            self._state.conversation_history = history[-self.max_history_turns :]

    def _notify(self) -> None:
        for _handle, listener in list(self._listeners):
            listener(self.get_state())
