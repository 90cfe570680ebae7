# /concierge/models/api.py

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Dict, Optional, Any, Literal, Union
from datetime import datetime, timezone

from concierge.models.context import SessionMetadata

# Pydantic models for API requests and responses. Request fields the core
# must reject with its own error codes are Optional here so that a missing
# field reaches the service instead of failing FastAPI validation.

_CAMEL = dict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", **_CAMEL)

    message: Optional[str] = None
    # Raw; invalid entries are dropped by the context assembler
    conversation_history: List[Any] = Field(default_factory=list)
    user_state: Optional[Dict[str, Any]] = None
    current_task: Optional[str] = None
    session_metadata: Optional[SessionMetadata] = None


class SuggestedAction(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    type: Literal["book_vendor", "show_info", "ask_question"]
    vendor_category: Optional[str] = None
    task_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ResponseMeta(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    duration: int = 0  # milliseconds
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    rate_limited: Optional[bool] = None
    error_type: Optional[str] = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    text: str
    suggested_actions: List[SuggestedAction] = Field(default_factory=list)
    state_updates: Dict[str, Any] = Field(default_factory=dict)
    internal_notes: Dict[str, Any] = Field(default_factory=dict)
    meta: Optional[ResponseMeta] = Field(default=None, alias="_meta")


class ChatErrorResponse(BaseModel):
    """User-safe failure. `text` is always one of the fixed strings in config.strings."""
    model_config = ConfigDict(**_CAMEL)

    text: str
    error: Literal[True] = True
    retryable: bool
    internal_notes: Dict[str, Any] = Field(default_factory=dict)
    meta: Optional[ResponseMeta] = Field(default=None, alias="_meta")


ChatResult = Union[ChatResponse, ChatErrorResponse]


class GetWorkflowRequest(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    workflow_id: Optional[str] = None


class SubmitWorkflowRequest(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    workflow_id: Optional[str] = None
    # {questionId: [optionIds]} for vendor flows, [{id, displayName, textEntry?}] for mini-assessments
    answers: Optional[Union[Dict[str, Any], List[Any]]] = None
    user_id: Optional[str] = None


class WorkflowTransitionRequest(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    workflow_id: str
    # Absent on the first call; the response carries a fresh session at intro
    session: Optional[Dict[str, Any]] = None
    action: Optional[Dict[str, Any]] = None
    # When set, reaching "complete" submits the answers for this user
    user_id: Optional[str] = None


class TaskRefreshRequest(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    user_id: str = Field(..., min_length=1)
    profile: Dict[str, Any] = Field(default_factory=dict)
    move_date: Optional[str] = None


class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str
