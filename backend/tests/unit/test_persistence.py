# backend/tests/unit/test_persistence.py
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock
from pymongo import ReplaceOne, UpdateOne

from concierge.models.task import GeneratedTask
from concierge.services.db_service import DatabaseService, chunked
from concierge.services.notification_service import NotificationService


def _tasks(count):
    return [GeneratedTask(id=f"TASK_{i}", title=f"Task {i}", category="moving", priority="Medium", source="task_catalog")
            for i in range(count)]


@pytest.fixture
def db(mocker):
    mocker.patch("concierge.services.db_service.settings.mongo_transactions", False)
    service = DatabaseService("mongodb://localhost:27017")
    service.db = MagicMock()
    service.db.user_tasks.bulk_write = AsyncMock()
    return service


def test_chunked():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 500)) == []


@pytest.mark.asyncio
async def test_upsert_tasks_writes_in_batches_of_500(db):
    written = await db.upsert_tasks("user-1", _tasks(1201))

    assert written == 1201
    batches = [call.args[0] for call in db.db.user_tasks.bulk_write.await_args_list]
    assert [len(b) for b in batches] == [500, 500, 201]


@pytest.mark.asyncio
async def test_upsert_tasks_keys_by_user_and_task_id(db):
    await db.upsert_tasks("user-1", _tasks(1))
    operation = db.db.user_tasks.bulk_write.await_args.args[0][0]
    assert operation._filter == {"user_id": "user-1", "id": "TASK_0"}
    assert operation._doc["user_id"] == "user-1"
    assert operation._doc["source"] == "task_catalog"



@pytest.mark.asyncio
async def test_refresh_upsert_leaves_status_and_created_at_to_the_lifecycle(db):
    await db.upsert_tasks("user-1", _tasks(2), keep_lifecycle=True)

    operations = db.db.user_tasks.bulk_write.await_args.args[0]
    assert all(isinstance(op, UpdateOne) for op in operations)
    update = operations[0]._doc
    assert operations[0]._filter == {"user_id": "user-1", "id": "TASK_0"}
    assert operations[0]._upsert is True
    assert update["$setOnInsert"]["status"] == "pending"
    assert "createdAt" in update["$setOnInsert"]
    assert "status" not in update["$set"]
    assert "createdAt" not in update["$set"]
    assert update["$set"]["title"] == "Task 0"
    assert update["$set"]["user_id"] == "user-1"


@pytest.mark.asyncio
async def test_resubmitted_tasks_are_replaced_whole(db):
    await db.upsert_tasks("user-1", _tasks(1))
    operation = db.db.user_tasks.bulk_write.await_args.args[0][0]
    assert isinstance(operation, ReplaceOne)
    assert operation._doc["status"] == "pending"


@pytest.mark.asyncio
async def test_upsert_tasks_failure_propagates(db):
    db.db.user_tasks.bulk_write.side_effect = RuntimeError("write concern error")
    with pytest.raises(RuntimeError):
        await db.upsert_tasks("user-1", _tasks(3))


@pytest.mark.asyncio
async def test_upsert_nothing(db):
    assert await db.upsert_tasks("user-1", []) == 0
    db.db.user_tasks.bulk_write.assert_not_awaited()


@pytest.mark.asyncio
async def test_stored_profile_lookup_failure_returns_none(db):
    db.db.user_knowledge.find_one = AsyncMock(side_effect=RuntimeError("timeout"))
    assert await db.get_user_knowledge("user-1") is None


# --- Webhook ---

@pytest.mark.asyncio
async def test_webhook_posts_submission():
    service = NotificationService("https://hooks.example.com/matching")
    service.client.post = AsyncMock(return_value=MagicMock(raise_for_status=MagicMock()))

    await service.send_workflow_submitted("user-1", "book_movers", {"priority": ["price"]}, "sub-1")

    url = service.client.post.await_args.args[0]
    payload = service.client.post.await_args.kwargs["json"]
    assert url == "https://hooks.example.com/matching"
    assert payload["type"] == "vendor_workflow_submitted"
    assert payload["submissionId"] == "sub-1"
    await service.cleanup()


@pytest.mark.asyncio
async def test_webhook_failure_is_swallowed():
    service = NotificationService("https://hooks.example.com/matching")
    service.client.post = AsyncMock(side_effect=httpx.ConnectError("refused"))
    await service.send_workflow_submitted("user-1", "book_movers", {}, "sub-1")
    await service.cleanup()


@pytest.mark.asyncio
async def test_webhook_skipped_without_url():
    service = NotificationService(None)
    assert service.client is None
    await service.send_workflow_submitted("user-1", "book_movers", {}, "sub-1")


# --- Alerts ---

@pytest.mark.asyncio
async def test_alert_delivery_failure_is_logged_not_raised():
    from concierge.utils.alerting import AlertingService

    service = AlertingService("https://alerts.example.com/hook")
    service.client.post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
    await service.send_critical_alert("LLM provider authentication failed", {"provider": "openai"})
    service.client.post.assert_awaited_once()
    await service.cleanup()
