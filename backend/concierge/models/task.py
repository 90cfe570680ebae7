# /concierge/models/task.py

from typing import Optional, List, Dict, Any, Tuple, Union
from datetime import datetime, date, timezone
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = dict(alias_generator=to_camel, populate_by_name=True)


class TaskStatus(str, Enum):
    PENDING = "pending"
    MATCHING_IN_PROGRESS = "matching_in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


def normalize_value(value: Any) -> Optional[str]:
    """Render a profile or condition value the way catalog conditions spell it."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class Predicate(BaseModel):
    """One profile field and the values that satisfy it (OR within the set)."""
    model_config = ConfigDict(frozen=True)

    key: str
    allowed: Tuple[str, ...]


class TaskCatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", **_CAMEL)

    id: str
    title: str
    description: str = ""
    category: str = "custom"
    priority: Union[int, str] = "Medium"
    # 1-99, higher means do it sooner
    urgency_percentage: int = 50
    # profile field -> accepted values; AND across fields
    conditions: Dict[str, List[Any]] = Field(default_factory=dict)

    @field_validator("conditions", mode="before")
    @classmethod
    def conditions_as_lists(cls, v):
        # Catalog rows written by older tools store "" for "no conditions"
        # and a bare value for a single accepted value
        if not v:
            return {}
        if not isinstance(v, dict):
            return v
        return {key: values if isinstance(values, (list, tuple)) else [values] for key, values in v.items()}

    @field_validator("conditions")
    @classmethod
    def accepted_values_normalized(cls, v):
        return {key: [text for text in (normalize_value(item) for item in values) if text is not None]
                for key, values in v.items()}

    def predicates(self) -> List[Predicate]:
        return [Predicate(key=key, allowed=tuple(values)) for key, values in self.conditions.items()]


class GeneratedTask(BaseModel):
    model_config = ConfigDict(**_CAMEL)

    id: str
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    category: str
    subcategory: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Union[int, str]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    due_date: Optional[date] = None
    source: str

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, mode="json", exclude_none=True)
        doc["createdAt"] = self.created_at
        return doc
