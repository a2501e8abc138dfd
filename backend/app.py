"""FastAPI backend that exposes the audience assistant over HTTP, one assistant per session."""

# No postponed annotations here: wrapped endpoints are resolved against the wrapper's globals.
import logging
from dataclasses import asdict
from typing import List

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from audience import AudienceAssistant, run_reference_sanity_check
from audience.catalog import get_all_fields
from reference.config import load_config
from reference.loader import ReferenceLoadError, load_reference_context
from reference.search import search_reference
from responses.formatter import FormattedResponse

from .middleware.auth import require_api_key
from .middleware.rate_limit import RATE_LIMITS, limiter, rate_limit_exceeded_handler
from .models import (
    ActionRequest,
    AssistantReply,
    AudienceResponse,
    DeleteSessionResponse,
    FieldModel,
    MessageRequest,
    ReferenceResponse,
    SegmentModel,
    SessionCreateResponse,
)
from .session_store import InMemorySessionStore, SessionRecord

load_dotenv()

logger = logging.getLogger(__name__)

config = load_config()

reference = None
try:
    reference = load_reference_context(config)
    run_reference_sanity_check(reference)
except ReferenceLoadError as exc:
    print(f"[Warning] Field reference unavailable: {exc}. Continuing without reference lookups.")


def _assistant_factory() -> AudienceAssistant:
    return AudienceAssistant(
        reference=reference,
        max_input_length=config.max_input_length,
        max_history_turns=config.max_history_turns,
        reference_max_lines=config.reference_max_lines,
    )


session_store = InMemorySessionStore(_assistant_factory, ttl_minutes=config.session_ttl_minutes)

app = FastAPI(title="Audience Translator API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_session(session_id: str) -> SessionRecord:
    record = session_store.get(session_id)
    if not record:
        logger.warning(f"Unknown session {session_id}")
        raise HTTPException(status_code=404, detail="Unknown session")
    return record


def _as_reply(response: FormattedResponse, assistant: AudienceAssistant) -> AssistantReply:
    state = assistant.state.get_state()
    return AssistantReply(
        **response.to_mapping(),
        intent=state.context.last_user_intent,
        current_query=state.context.current_query,
    )


@app.get("/healthz")
def health_check() -> dict:
    return {"status": "ok", "reference_available": bool(reference and reference.available)}


@app.get("/fields", response_model=List[FieldModel])
def list_fields() -> List[FieldModel]:
    return [
        FieldModel(
            name=definition.name,
            category=definition.category,
            values=list(definition.values),
            operators=list(definition.operators),
            description=definition.description,
        )
        for definition in get_all_fields()
    ]


@app.get("/reference", response_model=ReferenceResponse)
def lookup_reference(q: str) -> ReferenceResponse:
    if reference is None or not reference.available:
        return ReferenceResponse(term=q, available=False, lines=[])
    lines = search_reference(reference, q, config.reference_max_lines)
    return ReferenceResponse(term=q, available=True, lines=lines)


@app.post("/sessions", response_model=SessionCreateResponse)
@limiter.limit(f"{RATE_LIMITS['sessions_per_hour']}/hour")
def create_session(request: Request) -> SessionCreateResponse:
    session_id = session_store.create()
    logger.info(f"Created session {session_id}")
    return SessionCreateResponse(session_id=session_id)


@app.delete("/sessions/{session_id}", response_model=DeleteSessionResponse)
def delete_session(session_id: str) -> DeleteSessionResponse:
    if not session_store.delete(session_id):
        logger.info(f"Delete requested for unknown session {session_id}")
    return DeleteSessionResponse(message="Session cleared")


@app.post("/sessions/{session_id}/messages", response_model=AssistantReply)
@require_api_key
@limiter.limit(f"{RATE_LIMITS['messages_per_hour']}/hour")
async def send_message(request: Request, session_id: str, payload: MessageRequest) -> AssistantReply:
    record = _require_session(session_id)
    try:
        response = record.assistant.process_message(payload.text)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _as_reply(response, record.assistant)


@app.post("/sessions/{session_id}/actions", response_model=AssistantReply)
@require_api_key
@limiter.limit(f"{RATE_LIMITS['messages_per_hour']}/hour")
async def perform_action(request: Request, session_id: str, payload: ActionRequest) -> AssistantReply:
    record = _require_session(session_id)
    response = record.assistant.perform_action(payload.action.value)
    return _as_reply(response, record.assistant)


@app.get("/sessions/{session_id}/audience", response_model=AudienceResponse)
def get_audience(session_id: str) -> AudienceResponse:
    record = _require_session(session_id)
    state = record.assistant.state.get_state()
    return AudienceResponse(
        segments=[SegmentModel(**asdict(segment)) for segment in state.current_audience],
        description=record.assistant.state.get_audience_description(),
        last_user_intent=state.context.last_user_intent,
        pending_actions=state.context.pending_actions,
        current_query=state.context.current_query,
        history_length=len(state.conversation_history),
    )


@app.delete("/sessions/{session_id}/audience", response_model=DeleteSessionResponse)
def clear_audience(session_id: str) -> DeleteSessionResponse:
    record = _require_session(session_id)
    record.assistant.clear_audience()
    return DeleteSessionResponse(message="Audience cleared")


@app.delete("/sessions/{session_id}/audience/segments/{segment_id}", response_model=DeleteSessionResponse)
def remove_segment(session_id: str, segment_id: str) -> DeleteSessionResponse:
    record = _require_session(session_id)
    record.assistant.remove_segment(segment_id)
    return DeleteSessionResponse(message="Segment removed")
