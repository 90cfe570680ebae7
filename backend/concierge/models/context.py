# /concierge/models/context.py

from typing import Optional, Dict, Any, Tuple, Literal
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

# Data carried through a single chat turn. Clients speak camelCase, so every
# model here accepts and emits camelCase aliases while Python code uses
# snake_case attribute names.

_CAMEL = dict(alias_generator=to_camel, populate_by_name=True)

UrgencyLevel = Literal["unknown", "today", "critical", "urgent", "tight", "normal", "planning", "early"]
SurfacingStyle = Literal["direct", "inform", "plant_seed"]


class ConversationMessage(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    role: Literal["user", "assistant"]
    content: str
    position: int = 0


class SessionMetadata(BaseModel):
    """Caller-supplied and only used for logging."""
    model_config = ConfigDict(frozen=True, extra="ignore", **_CAMEL)

    session_id: Optional[str] = None
    message_count: int = 1
    first_message_at: Optional[datetime] = None


class RelevantVendor(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    vendor: Optional[str] = None
    task: Optional[str] = None
    reason: str
    priority: Literal["high", "normal", "low"] = "normal"
    surfacing_style: Optional[SurfacingStyle] = None


class UserContext(BaseModel):
    """
    Everything the prompt and the response interpreter know about the user
    for one turn. Rebuilt per request from the stored profile plus the
    caller's userState; never mutated afterwards. Changes flow back to the
    client only through stateUpdates.
    """
    model_config = ConfigDict(frozen=True, **_CAMEL)

    # Identity
    user_id: Optional[str] = None
    user_name: str = "there"

    # Move basics
    move_date: Optional[str] = None
    days_until_move: Optional[int] = None
    urgency_level: UrgencyLevel = "unknown"
    move_distance: str = "local"
    move_date_type: Optional[str] = None

    # Origin
    origin_city: Optional[str] = None
    origin_state: Optional[str] = None
    origin_property_type: Optional[str] = None
    origin_ownership: Optional[str] = None
    origin_bedrooms: Optional[str] = None
    lease_end_date: Optional[str] = None

    # Destination
    destination_city: Optional[str] = None
    destination_state: Optional[str] = None
    destination_property_type: Optional[str] = None
    destination_ownership: Optional[str] = None
    destination_year_built: Optional[int] = None
    destination_notes: Optional[str] = None
    move_in_date: Optional[str] = None

    # Household
    household_size: Optional[str] = None
    has_kids: bool = False
    has_pets: bool = False
    pet_types: Tuple[str, ...] = ()

    # Inventory and preferences
    special_items: Tuple[str, ...] = ()
    budget: Optional[str] = None

    # Progress
    completed_tasks: Tuple[str, ...] = ()
    pending_tasks: Tuple[str, ...] = ()
    skipped_tasks: Tuple[str, ...] = ()
    current_task: Optional[str] = None

    # Conversation state
    heard_accountability_pitch: bool = False
    vendor_interactions: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    # Derived
    date_gap: int = 0
    needs_storage: bool = False
    relevant_vendors: Tuple[RelevantVendor, ...] = ()
    message_count: int = 1
    is_first_message: bool = True

    # The sanitized user message for this turn
    message: str = ""

    # Flattened merged profile, used for task condition matching
    profile: Dict[str, Any] = Field(default_factory=dict)

    def as_profile(self) -> Dict[str, Any]:
        return dict(self.profile)
