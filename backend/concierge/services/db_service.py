# /concierge/services/db_service.py

import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ReplaceOne, UpdateOne
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Iterable

from concierge.config.settings import settings
from concierge.models.task import GeneratedTask
from concierge.utils.metrics import database_operations_counter

logger = logging.getLogger(__name__)

# Hard cap on one bulk write, independent of configuration
MAX_BATCH_SIZE = 500

# Owned by the task lifecycle once a task exists
LIFECYCLE_FIELDS = ("status", "createdAt")


def chunked(items: List[Any], size: int) -> Iterable[List[Any]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class DatabaseService:
    """
    Manages all interactions with MongoDB: stored user profiles, generated
    tasks, workflow submissions and the task catalog.
    """

    def __init__(self, mongo_uri: str):
        try:
            self.client = AsyncIOMotorClient(
                mongo_uri,
                maxPoolSize=settings.max_pool_size,
                minPoolSize=settings.min_pool_size,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000
            )
            self.db = self.client[settings.mongo_db_name]
            logger.info("MongoDB client initialized successfully.")
        except Exception as e:
            logger.error(f"Error initializing MongoDB client: {e}")
            raise

    def _now_utc(self) -> datetime:
        return datetime.now(timezone.utc)

    # ==================== Index Management ====================

    async def create_indexes(self) -> None:
        """Create all necessary database indexes on startup."""
        indexes = [
            ("user_knowledge", [("user_id", 1)], {"unique": True}),
            ("user_tasks", [("user_id", 1), ("id", 1)], {"unique": True}),
            ("user_tasks", [("user_id", 1), ("status", 1)], {}),
            ("workflow_submissions", [("user_id", 1), ("submitted_at", -1)], {}),
            ("mini_assessments", [("user_id", 1), ("workflow_id", 1)], {"unique": True}),
            ("task_catalog", [("id", 1)], {"unique": True}),
        ]

        for collection, keys, options in indexes:
            try:
                await self.db[collection].create_index(keys, **options)
                logger.debug(f"Created index on {collection}: {keys}")
            except Exception as e:
                logger.error(f"Failed to create index on {collection} {keys}: {e}")

        logger.info("Database indexes created successfully.")

    async def health_check(self) -> bool:
        try:
            await self.client.admin.command('ping')
            return True
        except Exception as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    # ==================== User Profiles ====================

    async def get_user_knowledge(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Stored assessment profile for a user, shaped {entries: {field: {value, ...}}}.

        Returns None when there is no profile or the lookup fails; chat turns
        carry on with the caller-supplied state in that case.
        """
        if not user_id:
            return None
        try:
            doc = await self.db.user_knowledge.find_one({"user_id": user_id}, {"_id": 0})
            database_operations_counter.labels(operation="get_user_knowledge", status="success").inc()
            if doc is None:
                logger.info(f"No stored profile for user {user_id}")
            return doc
        except Exception as e:
            database_operations_counter.labels(operation="get_user_knowledge", status="error").inc()
            logger.warning(f"Failed to fetch stored profile for user {user_id}: {e}")
            return None

    # ==================== Tasks ====================

    async def upsert_tasks(self, user_id: str, tasks: List[GeneratedTask], keep_lifecycle: bool = False) -> int:
        """
        Write generated tasks keyed by (user_id, task id), so regenerating the
        same tasks overwrites instead of duplicating.

        With keep_lifecycle, existing documents only get their catalog fields
        refreshed; status and createdAt are written on insert only, so state
        set later (matching_in_progress, completed, qualifying answers) survives.

        Tasks are written in chunks of at most task_batch_size (never more
        than 500). Each chunk is one bulk write, inside a transaction when
        mongo_transactions is enabled. Chunks are independent of each other.

        Returns:
            Number of tasks written
        """
        if not tasks:
            return 0

        batch_size = min(settings.task_batch_size, MAX_BATCH_SIZE)
        written = 0
        for batch in chunked(tasks, batch_size):
            operations = [self._task_write(user_id, task, keep_lifecycle) for task in batch]
            try:
                if settings.mongo_transactions:
                    async with await self.client.start_session() as session:
                        async with session.start_transaction():
                            await self.db.user_tasks.bulk_write(operations, ordered=True, session=session)
                else:
                    await self.db.user_tasks.bulk_write(operations, ordered=True)
            except Exception as e:
                database_operations_counter.labels(operation="upsert_tasks", status="error").inc()
                logger.error(f"Task batch write failed for user {user_id} after {written} tasks: {e}")
                raise
            written += len(batch)
            database_operations_counter.labels(operation="upsert_tasks", status="success").inc()

        logger.info(f"Upserted {written} task(s) for user {user_id}")
        return written

    def _task_write(self, user_id: str, task: GeneratedTask, keep_lifecycle: bool):
        key = {"user_id": user_id, "id": task.id}
        document = task.to_document()
        document["user_id"] = user_id
        document["updated_at"] = self._now_utc()
        if not keep_lifecycle:
            return ReplaceOne(key, document, upsert=True)
        on_insert = {field: document.pop(field) for field in LIFECYCLE_FIELDS if field in document}
        return UpdateOne(key, {"$set": document, "$setOnInsert": on_insert}, upsert=True)

    async def update_task_status(self, user_id: str, task_id: str, status: str,
                                 extra: Optional[Dict[str, Any]] = None) -> bool:
        """Returns True when a task document was updated."""
        update = {"status": status, "updated_at": self._now_utc()}
        update.update(extra or {})
        result = await self.db.user_tasks.update_one({"user_id": user_id, "id": task_id}, {"$set": update})
        database_operations_counter.labels(operation="update_task_status", status="success").inc()
        return result.modified_count > 0

    # ==================== Workflows ====================

    async def save_workflow_submission(self, submission: Dict[str, Any]) -> str:
        document = dict(submission)
        document.setdefault("submitted_at", self._now_utc())
        result = await self.db.workflow_submissions.insert_one(document)
        database_operations_counter.labels(operation="save_workflow_submission", status="success").inc()
        return str(result.inserted_id)

    async def save_mini_assessment(self, user_id: str, workflow_id: str, answers: List[Dict[str, Any]]) -> None:
        await self.db.mini_assessments.update_one(
            {"user_id": user_id, "workflow_id": workflow_id},
            {"$set": {
                "answers": answers,
                "status": "completed",
                "completed_at": self._now_utc(),
            }},
            upsert=True
        )
        database_operations_counter.labels(operation="save_mini_assessment", status="success").inc()

    # ==================== Task Catalog ====================

    async def get_task_catalog(self) -> List[Dict[str, Any]]:
        cursor = self.db.task_catalog.find({}, {"_id": 0})
        entries = await cursor.to_list(length=None)
        database_operations_counter.labels(operation="get_task_catalog", status="success").inc()
        return entries

    async def replace_task_catalog(self, entries: List[Dict[str, Any]]) -> int:
        """Removes catalog rows not in `entries` and upserts the rest in chunks."""
        ids = [entry["id"] for entry in entries]
        await self.db.task_catalog.delete_many({"id": {"$nin": ids}})

        batch_size = min(settings.task_batch_size, MAX_BATCH_SIZE)
        written = 0
        for batch in chunked(entries, batch_size):
            operations = [UpdateOne({"id": entry["id"]}, {"$set": entry}, upsert=True) for entry in batch]
            await self.db.task_catalog.bulk_write(operations, ordered=False)
            written += len(batch)
        database_operations_counter.labels(operation="replace_task_catalog", status="success").inc()
        return written

    async def get_content_counts(self) -> Dict[str, int]:
        return {
            "task_catalog": await self.db.task_catalog.count_documents({}),
            "user_tasks": await self.db.user_tasks.count_documents({}),
            "workflow_submissions": await self.db.workflow_submissions.count_documents({}),
        }

    def close(self):
        self.client.close()
        logger.info("MongoDB client closed.")


# Globally accessible instance
db_service = DatabaseService(settings.mongo_uri)
