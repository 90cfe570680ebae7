# /concierge/services/context_service.py

import re
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from concierge.config import rules
from concierge.config.settings import settings
from concierge.models.api import ChatRequest
from concierge.models.context import ConversationMessage, RelevantVendor, UserContext
from concierge.utils.errors import InvalidRequestError

# Builds the immutable UserContext for one chat turn from the stored profile
# (fetched by the caller), the caller's userState and the session metadata.
# No network or store access happens here.

logger = logging.getLogger(__name__)

# Stored profile keys whose context name is not the plain camelCase form
KEY_MAPPING = {
    "user_name": "name",
    "move_date": "moveDate",
    "move_experience": "moveExperience",
    "biggest_concern": "biggestConcern",
    "move_distance": "moveDistance",
    "current_home_type": "originPropertyType",
    "destination_home_type": "destinationPropertyType",
    "household_size": "householdSize",
    "has_pets": "hasPets",
    "moving_help": "movingHelp",
    "packing_help": "packingHelp",
    "cleaning_help": "cleaningHelp",
}

# Owned by the client session; the caller's value wins over the stored one
SESSION_FIELDS = frozenset({
    "currentTask",
    "heardAccountabilityPitch",
    "vendorInteractions",
    "completedTasks",
    "pendingTasks",
    "skippedTasks",
    "lastInteractionAt",
})

LONG_DISTANCE = ("cross_state", "cross_country", "long_distance")

_SNAKE_RE = re.compile(r"_([a-z])")
_DISTANCE_SEP_RE = re.compile(r"[\s\-]+")


def to_camel_case(key: str) -> str:
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), key)


def flatten_user_knowledge(user_knowledge: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """{entries: {field_name: {value, source, ...}}} -> {fieldName: value}"""
    if not user_knowledge or not isinstance(user_knowledge.get("entries"), dict):
        return {}

    flattened: Dict[str, Any] = {}
    for key, entry in user_knowledge["entries"].items():
        if isinstance(entry, dict) and "value" in entry:
            flattened[KEY_MAPPING.get(key, to_camel_case(key))] = entry["value"]
    return flattened


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def merge_user_state(client_state: Optional[Dict[str, Any]], stored: Dict[str, Any]) -> Dict[str, Any]:
    """
    The stored profile is the base. Non-empty client values override it for
    session fields, or where the stored profile has nothing for that key.
    """
    merged = dict(stored)
    for key, value in (client_state or {}).items():
        if _is_empty(value):
            continue
        if key in SESSION_FIELDS or not merged.get(key):
            merged[key] = value
    return merged


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).date()
    except ValueError:
        logger.debug(f"Unparseable date value: {value!r}")
        return None


def compute_days_until_move(move_date: Any, today: Optional[date] = None) -> Optional[int]:
    parsed = parse_date(move_date)
    if parsed is None:
        return None
    today = today or datetime.now(timezone.utc).date()
    return (parsed - today).days


def determine_urgency_level(days_until_move: Optional[int]) -> str:
    if days_until_move is None:
        return "unknown"
    if days_until_move <= 0:
        return "today"
    if days_until_move <= 3:
        return "critical"
    if days_until_move <= 7:
        return "urgent"
    if days_until_move <= 14:
        return "tight"
    if days_until_move <= 30:
        return "normal"
    if days_until_move <= 60:
        return "planning"
    return "early"


def compute_date_gap(lease_end_date: Any, move_in_date: Any) -> int:
    """Days between moving out and being able to move in; never negative."""
    lease_end = parse_date(lease_end_date)
    move_in = parse_date(move_in_date)
    if lease_end is None or move_in is None:
        return 0
    return max((move_in - lease_end).days, 0)


def normalize_distance(move_distance: Optional[str]) -> str:
    return _DISTANCE_SEP_RE.sub("_", (move_distance or "").strip().lower())


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("yes", "true", "y", "1")
    return False


def _as_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> Optional[str]:
    if _is_empty(value):
        return None
    return str(value)


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if _is_empty(value):
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple, set)):
        return tuple(str(item) for item in value if not _is_empty(item))
    return (str(value),)


def _booked(interactions: Dict[str, Any], vendor: str) -> bool:
    return bool((interactions.get(vendor) or {}).get("booked"))


def _mentioned(interactions: Dict[str, Any], vendor: str) -> bool:
    return bool((interactions.get(vendor) or {}).get("mentioned"))


def identify_relevant_vendors(
    *,
    days_until_move: Optional[int],
    move_distance: str,
    origin_ownership: Optional[str],
    destination_ownership: Optional[str],
    destination_year_built: Optional[int],
    date_gap: int,
    has_kids: bool,
    has_pets: bool,
    special_items: Tuple[str, ...],
    completed_tasks: Tuple[str, ...],
    vendor_interactions: Dict[str, Any],
) -> List[RelevantVendor]:
    """Vendor categories (and a few tasks) worth surfacing for this user, in priority order of discovery."""
    relevant: List[RelevantVendor] = []
    distance = normalize_distance(move_distance)
    items = {normalize_distance(item) for item in special_items}

    if not _booked(vendor_interactions, "movers"):
        urgent = days_until_move is not None and days_until_move <= 14
        relevant.append(RelevantVendor(vendor="movers", reason="not_booked", priority="high" if urgent else "normal"))

    if not _booked(vendor_interactions, "internet"):
        relevant.append(RelevantVendor(vendor="internet", reason="not_booked"))

    if (origin_ownership or "").lower() == "rent" and not _booked(vendor_interactions, "cleaning"):
        relevant.append(RelevantVendor(vendor="cleaning", reason="renter_deposit"))

    if date_gap > 0 and not _booked(vendor_interactions, "storage"):
        relevant.append(RelevantVendor(vendor="storage", reason="date_gap", priority="high"))

    if has_pets and distance in LONG_DISTANCE and not _mentioned(vendor_interactions, "pet_transport"):
        relevant.append(RelevantVendor(vendor="pet_transport", reason="long_distance_pets", surfacing_style="inform"))

    if distance == "cross_country" and not _mentioned(vendor_interactions, "auto_transport"):
        relevant.append(RelevantVendor(vendor="auto_transport", reason="cross_country", priority="low",
                                       surfacing_style="inform"))

    for item, vendor in (("piano", "piano_moving"), ("safe", "gun_safe_moving"), ("pool_table", "pool_table_moving")):
        if item in items:
            relevant.append(RelevantVendor(vendor=vendor, reason=f"has_{item}", priority="high"))

    if has_kids and "school_transfer" not in completed_tasks:
        relevant.append(RelevantVendor(task="school_transfer", reason="has_kids"))

    if (destination_ownership or "").lower() == "own" and not _mentioned(vendor_interactions, "locksmith"):
        relevant.append(RelevantVendor(vendor="locksmith", reason="new_homeowner", surfacing_style="direct"))

    if destination_year_built is not None and destination_year_built < 1970:
        for vendor in ("plumber", "electrician"):
            if not _mentioned(vendor_interactions, vendor):
                relevant.append(RelevantVendor(vendor=vendor, reason="old_house", priority="low",
                                               surfacing_style="plant_seed"))

    return relevant


def build_conversation_history(history: Optional[List[Any]], max_messages: int) -> List[ConversationMessage]:
    """Keeps well-formed user/assistant messages, most recent `max_messages` only."""
    if not isinstance(history, list):
        return []

    valid = [
        msg for msg in history
        if isinstance(msg, dict)
        and msg.get("role") in ("user", "assistant")
        and isinstance(msg.get("content"), str)
    ]
    recent = valid[-max_messages:] if max_messages > 0 else []
    offset = len(valid) - len(recent)
    return [
        ConversationMessage(role=msg["role"], content=msg["content"], position=offset + i)
        for i, msg in enumerate(recent)
    ]


def sanitize_input(text: Any) -> str:
    """Strips markup, backslashes and control characters, then trims."""
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    text = rules.HTML_TAG_RE.sub("", text)
    text = text.replace("\\", "")
    text = rules.CONTROL_CHARS_RE.sub("", text)
    return text.strip()


def validate_request(request: ChatRequest) -> str:
    """
    Rejects turns missing message, userState or userId, and over-long
    messages. Returns the user id.
    """
    if request.message is None:
        raise InvalidRequestError("message is required")
    if request.user_state is None:
        raise InvalidRequestError("userState is required")
    user_id = request.user_state.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise InvalidRequestError("userState.userId is required")
    if len(request.message) > settings.max_message_length:
        raise InvalidRequestError(f"message exceeds {settings.max_message_length} characters")
    return user_id


class ContextService:
    def assemble(
        self,
        request: ChatRequest,
        message: str,
        stored_profile: Optional[Dict[str, Any]] = None,
        today: Optional[date] = None,
    ) -> UserContext:
        """
        Merge stored profile, caller state and session metadata into one
        UserContext with derived fields filled in.

        Args:
            request: The validated chat request
            message: The already-sanitized user message
            stored_profile: The user_knowledge document, if any
            today: Override for the current date

        Returns:
            A frozen UserContext
        """
        merged = merge_user_state(request.user_state, flatten_user_knowledge(stored_profile))

        days_until_move = compute_days_until_move(merged.get("moveDate"), today)
        date_gap = compute_date_gap(merged.get("leaseEndDate"), merged.get("moveInDate"))

        special_items = tuple(dict.fromkeys(_as_tuple(merged.get("specialItems")) + _as_tuple(merged.get("largeItems"))))
        completed_tasks = _as_tuple(merged.get("completedTasks"))
        vendor_interactions = merged.get("vendorInteractions") or {}
        if not isinstance(vendor_interactions, dict):
            vendor_interactions = {}

        move_distance = _as_str(merged.get("moveDistance")) or "local"
        has_kids = _as_bool(merged.get("hasKids"))
        has_pets = _as_bool(merged.get("hasPets"))
        year_built = _as_int(merged.get("destinationYearBuilt"))

        metadata = request.session_metadata
        message_count = metadata.message_count if metadata else len(request.conversation_history) + 1

        relevant = identify_relevant_vendors(
            days_until_move=days_until_move,
            move_distance=move_distance,
            origin_ownership=_as_str(merged.get("originOwnership")),
            destination_ownership=_as_str(merged.get("destinationOwnership")),
            destination_year_built=year_built,
            date_gap=date_gap,
            has_kids=has_kids,
            has_pets=has_pets,
            special_items=special_items,
            completed_tasks=completed_tasks,
            vendor_interactions=vendor_interactions,
        )

        return UserContext(
            user_id=_as_str(merged.get("userId")),
            user_name=_as_str(merged.get("name")) or "there",
            move_date=_as_str(merged.get("moveDate")),
            days_until_move=days_until_move,
            urgency_level=determine_urgency_level(days_until_move),
            move_distance=move_distance,
            move_date_type=_as_str(merged.get("moveDateType")),
            origin_city=_as_str(merged.get("originCity")),
            origin_state=_as_str(merged.get("originState")),
            origin_property_type=_as_str(merged.get("originPropertyType")),
            origin_ownership=_as_str(merged.get("originOwnership")),
            origin_bedrooms=_as_str(merged.get("originBedrooms")),
            lease_end_date=_as_str(merged.get("leaseEndDate")),
            destination_city=_as_str(merged.get("destinationCity")),
            destination_state=_as_str(merged.get("destinationState")),
            destination_property_type=_as_str(merged.get("destinationPropertyType")),
            destination_ownership=_as_str(merged.get("destinationOwnership")),
            destination_year_built=year_built,
            destination_notes=_as_str(merged.get("destinationNotes")),
            move_in_date=_as_str(merged.get("moveInDate")),
            household_size=_as_str(merged.get("householdSize")),
            has_kids=has_kids,
            has_pets=has_pets,
            pet_types=_as_tuple(merged.get("petTypes")),
            special_items=special_items,
            budget=_as_str(merged.get("budget")),
            completed_tasks=completed_tasks,
            pending_tasks=_as_tuple(merged.get("pendingTasks")),
            skipped_tasks=_as_tuple(merged.get("skippedTasks")),
            current_task=request.current_task or _as_str(merged.get("currentTask")),
            heard_accountability_pitch=_as_bool(merged.get("heardAccountabilityPitch")),
            vendor_interactions=vendor_interactions,
            date_gap=date_gap,
            needs_storage=date_gap > 0,
            relevant_vendors=tuple(relevant),
            message_count=message_count,
            is_first_message=message_count == 1,
            message=message,
            profile=merged,
        )


# Globally accessible instance
context_service = ContextService()
