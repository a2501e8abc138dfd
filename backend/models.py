"""Pydantic schemas for the FastAPI backend."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ActionKind(str, Enum):
    add_criteria = "add_criteria"
    generate_query = "generate_query"
    refine_audience = "refine_audience"
    clear_audience = "clear_audience"


class SessionCreateResponse(BaseModel):
    session_id: str = Field(..., description="Opaque session identifier.")


class MessageRequest(BaseModel):
    text: str = Field(..., description="User message text.")


class ActionRequest(BaseModel):
    action: ActionKind = Field(..., description="Action button that was pressed.")


class DeleteSessionResponse(BaseModel):
    message: str = Field(..., description="Confirmation message.")


class ActionButtonModel(BaseModel):
    label: str
    action: ActionKind
    priority: str


class AssistantReply(BaseModel):
    content: str = Field(..., description="Display text (markdown).")
    boolean_output: Optional[str] = Field(None, description="Synthesized boolean query, for generate_query only.")
    suggestions: List[str] = Field(default_factory=list)
    action_buttons: List[ActionButtonModel] = Field(default_factory=list)
    intent: Optional[str] = Field(None, description="Classified intent of the last message.")
    current_query: str = Field("", description="Most recently generated query.")


class SegmentModel(BaseModel):
    id: str
    field: str
    category: str
    label: str
    criteria: str
    boolean_logic: str
    confidence: float


class AudienceResponse(BaseModel):
    segments: List[SegmentModel]
    description: str
    last_user_intent: str
    pending_actions: List[str]
    current_query: str
    history_length: int


class FieldModel(BaseModel):
    name: str
    category: str
    values: List[str]
    operators: List[str]
    description: str


class ReferenceResponse(BaseModel):
    term: str
    available: bool
    lines: List[str]
