# backend/tests/unit/test_task_generation.py
import pytest
from datetime import date
from unittest.mock import AsyncMock

from concierge.models.task import TaskCatalogEntry
from concierge.models.workflow import MiniAssessmentDefinition, MiniAssessmentEntry
from concierge.services.task_service import (
    CHECKLIST_URGENCY,
    TaskCatalogService,
    compute_due_date,
    generate_catalog_tasks,
    generate_checklist_tasks,
    generate_mini_assessment_tasks,
)
from concierge.workflows.definitions import MINI_ASSESSMENT_WORKFLOWS

TODAY = date(2025, 3, 1)
MOVE_DAY = date(2025, 4, 10)  # 40 days out


@pytest.fixture
def financial():
    return MiniAssessmentDefinition.model_validate(MINI_ASSESSMENT_WORKFLOWS["address_change_financial"])


@pytest.mark.parametrize("urgency, expected", [
    (90, date(2025, 3, 5)),
    (50, date(2025, 3, 21)),
    (10, date(2025, 4, 6)),
])
def test_due_date_spreads_by_urgency(urgency, expected):
    assert compute_due_date(MOVE_DAY, urgency, TODAY) == expected


def test_due_date_never_before_today_and_none_without_move_date():
    assert compute_due_date(date(2025, 2, 1), 50, TODAY) == TODAY
    assert compute_due_date(None, 50, TODAY) is None


def test_catalog_tasks_follow_conditions():
    catalog = [
        TaskCatalogEntry(id="FORWARD_MAIL", title="Forward mail", urgency_percentage=80),
        TaskCatalogEntry(id="NEW_LICENSE", title="New license", conditions={"moveDistance": ["Long Distance", "Cross-Country"]}),
    ]
    local = generate_catalog_tasks(catalog, {"moveDistance": "Local"}, MOVE_DAY, TODAY)
    assert [t.id for t in local] == ["FORWARD_MAIL"]
    assert local[0].due_date == date(2025, 3, 9)
    assert local[0].source == "task_catalog"

    far = generate_catalog_tasks(catalog, {"moveDistance": "Cross-Country"}, MOVE_DAY, TODAY)
    assert [t.id for t in far] == ["FORWARD_MAIL", "NEW_LICENSE"]


def test_checklist_tasks_use_workflow_ids(financial):
    tasks = generate_checklist_tasks([financial], MOVE_DAY, TODAY)
    assert len(tasks) == 1
    assert tasks[0].id == "address_change_financial"
    assert tasks[0].title == "Create financial address change list"
    assert tasks[0].due_date == compute_due_date(MOVE_DAY, CHECKLIST_URGENCY, TODAY)


def test_mini_assessment_tasks_are_deterministic(financial):
    entries = [
        MiniAssessmentEntry(id="bank_chase", display_name="Chase", question_id="bank", text_entry="Chase"),
        MiniAssessmentEntry(id="mortgage", display_name="Mortgage", question_id="mortgage"),
        MiniAssessmentEntry(id="bank_chase", display_name="Chase", question_id="bank", text_entry="Chase"),
    ]
    tasks = generate_mini_assessment_tasks(financial, entries)

    assert [t.id for t in tasks] == ["address_change_financial_bank_chase", "address_change_financial_mortgage"]
    assert [t.title for t in tasks] == ["Update address: Chase", "Update address: Mortgage"]
    assert all(t.priority == 1 and t.subcategory == "financial" for t in tasks)
    assert [t.id for t in generate_mini_assessment_tasks(financial, entries)] == [t.id for t in tasks]


def test_set_catalog_skips_malformed_rows():
    service = TaskCatalogService()
    service.set_catalog([{"id": "OK", "title": "Fine"}, {"title": "no id"}, {"id": "BAD", "title": "x", "urgencyPercentage": "soon"}])
    assert [entry.id for entry in service.get_catalog()] == ["OK"]


@pytest.mark.asyncio
async def test_refresh_tasks_upserts_catalog_and_checklists(mocker, financial):
    upsert = mocker.patch("concierge.services.task_service.db_service.upsert_tasks", new_callable=AsyncMock, return_value=2)
    service = TaskCatalogService()
    service.set_catalog([
        {"id": "BOOK_MOVERS", "title": "Book movers", "conditions": {"HireMovers": ["Hire Movers"]}},
        {"id": "RESERVE_TRUCK", "title": "Reserve truck", "conditions": {"HireMovers": ["Move Myself"]}},
    ])

    tasks = await service.refresh_tasks(
        "user-1", {"HireMovers": "Hire Movers", "moveDate": "2025-04-10"}, checklists=[financial], today=TODAY
    )

    assert [t.id for t in tasks] == ["BOOK_MOVERS", "address_change_financial"]
    assert tasks[0].due_date == date(2025, 3, 21)
    upsert.assert_awaited_once_with("user-1", tasks, keep_lifecycle=True)


@pytest.mark.asyncio
async def test_load_catalog_survives_database_errors(mocker):
    mocker.patch("concierge.services.task_service.db_service.get_task_catalog",
                 new_callable=AsyncMock, side_effect=RuntimeError("mongo down"))
    service = TaskCatalogService()
    await service.load_catalog()
    assert service.get_catalog() == []
