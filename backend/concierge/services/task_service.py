# /concierge/services/task_service.py

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from concierge.models.task import GeneratedTask, TaskCatalogEntry, TaskStatus
from concierge.models.workflow import MiniAssessmentDefinition, MiniAssessmentEntry
from concierge.services.condition_service import filter_catalog
from concierge.services.context_service import parse_date
from concierge.services.db_service import db_service
from concierge.utils.metrics import tasks_generated_counter

logger = logging.getLogger(__name__)

DEFAULT_URGENCY = 50
# Address-change checklists should be started early in the timeline
CHECKLIST_URGENCY = 85


def compute_due_date(move_date: Optional[date], urgency_percentage: int, today: date) -> Optional[date]:
    """
    Spread tasks over the time left before the move: urgency 90 lands 10% of
    the way there, urgency 10 lands near move day. Never earlier than today.
    """
    if move_date is None:
        return None
    total_days = (move_date - today).days
    days_from_now = total_days * (100 - urgency_percentage) // 100
    return max(today + timedelta(days=days_from_now), today)


def generate_catalog_tasks(
    catalog: Iterable[TaskCatalogEntry],
    profile: Dict[str, Any],
    move_date: Optional[date],
    today: date,
) -> List[GeneratedTask]:
    """Every catalog entry whose conditions match the profile, as a pending task."""
    tasks = []
    for entry in filter_catalog(catalog, profile):
        tasks.append(GeneratedTask(
            id=entry.id,
            title=entry.title,
            description=entry.description or None,
            category=entry.category,
            priority=entry.priority,
            status=TaskStatus.PENDING,
            due_date=compute_due_date(move_date, entry.urgency_percentage, today),
            source="task_catalog",
        ))
    return tasks


def generate_checklist_tasks(
    definitions: Iterable[MiniAssessmentDefinition],
    move_date: Optional[date],
    today: date,
) -> List[GeneratedTask]:
    """One "build your list" task per mini-assessment; its id is the workflow id."""
    due = compute_due_date(move_date, CHECKLIST_URGENCY, today)
    return [
        GeneratedTask(
            id=definition.id,
            title=definition.task_title,
            subtitle=definition.intro.subtitle,
            category=definition.category,
            subcategory=definition.task_template.subcategory,
            priority="Medium",
            due_date=due,
            source="mini_assessment_checklist",
        )
        for definition in definitions
    ]


def generate_mini_assessment_tasks(
    definition: MiniAssessmentDefinition,
    entries: Iterable[MiniAssessmentEntry],
) -> List[GeneratedTask]:
    """
    One task per entry. Ids are {workflowId}_{entryId}, so committing the
    same answers again produces the same ids and overwrites.
    """
    template = definition.task_template
    tasks: Dict[str, GeneratedTask] = {}
    for entry in entries:
        task_id = f"{definition.id}_{entry.id}"
        tasks[task_id] = GeneratedTask(
            id=task_id,
            title=f"{template.title_prefix} {entry.text_entry or entry.display_name}",
            subtitle=template.subtitle,
            category=template.category,
            subcategory=template.subcategory,
            priority=template.priority,
            status=TaskStatus.PENDING,
            source="mini_assessment",
        )
    return list(tasks.values())


class TaskCatalogService:
    def __init__(self):
        self._catalog: List[TaskCatalogEntry] = []
        logger.info("TaskCatalogService initialized.")

    async def load_catalog(self):
        """Loads the task catalog from the database into the in-memory cache."""
        logger.info("Loading task catalog from database into cache...")
        try:
            rows = await db_service.get_task_catalog()
        except Exception as e:
            logger.error(f"Failed to load task catalog from database: {e}", exc_info=True)
            return
        self.set_catalog(rows)
        logger.info(f"Successfully loaded {len(self._catalog)} catalog entries into cache.")

    def set_catalog(self, rows: Iterable[Dict[str, Any]]):
        catalog = []
        for row in rows:
            try:
                catalog.append(TaskCatalogEntry.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed catalog row {row.get('id')!r}: {e.error_count()} error(s)")
        self._catalog = catalog

    def get_catalog(self) -> List[TaskCatalogEntry]:
        return self._catalog

    async def refresh_tasks(
        self,
        user_id: str,
        profile: Dict[str, Any],
        move_date: Optional[str] = None,
        checklists: Iterable[MiniAssessmentDefinition] = (),
        today: Optional[date] = None,
    ) -> List[GeneratedTask]:
        """
        Run the catalog against a user's profile and upsert the resulting tasks.

        Args:
            user_id: Owner of the tasks
            profile: Flat profile (camelCase keys, as stored)
            move_date: ISO date; falls back to profile["moveDate"]
            checklists: Mini-assessments to add "build your list" tasks for
            today: Override for the current date

        Returns:
            The generated tasks, in catalog order
        """
        today = today or datetime.now(timezone.utc).date()
        parsed_move_date = parse_date(move_date or profile.get("moveDate"))

        tasks = generate_catalog_tasks(self._catalog, profile, parsed_move_date, today)
        tasks.extend(generate_checklist_tasks(checklists, parsed_move_date, today))

        await db_service.upsert_tasks(user_id, tasks, keep_lifecycle=True)
        for task in tasks:
            tasks_generated_counter.labels(source=task.source).inc()
        logger.info(f"Refreshed {len(tasks)} task(s) for user {user_id} "
                    f"against {len(self._catalog)} catalog entries")
        return tasks


# Globally accessible instance
task_catalog_service = TaskCatalogService()
