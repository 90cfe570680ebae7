#!/usr/bin/env python3
"""
Seeds the task catalog collection from a JSON file.

Rows already in the collection but missing from the file are removed; the
rest are upserted in chunks. Each row may use either `id` or the legacy
`taskId` field, and `desc` is accepted for `description`.

Usage:
    python scripts/seed_task_catalog.py scripts/task_catalog.json
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path to import concierge modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import ValidationError
from concierge.models.task import TaskCatalogEntry
from concierge.services.db_service import db_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SPOT_CHECKS = ("BOOK_MOVERS", "SETUP_INTERNET", "CANCEL_YOGA")


def load_rows(path: Path) -> list:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of catalog rows")

    rows = []
    for index, row in enumerate(raw):
        row = dict(row)
        if "id" not in row and "taskId" in row:
            row["id"] = row.pop("taskId")
        if "description" not in row and "desc" in row:
            row["description"] = row.pop("desc")
        try:
            entry = TaskCatalogEntry.model_validate(row)
        except ValidationError as e:
            raise ValueError(f"Row {index} is not a valid catalog entry: {e}") from e
        rows.append(entry.model_dump(by_alias=True, mode="json"))
    return rows


async def seed_task_catalog(path: Path):
    try:
        rows = load_rows(path)
        logger.info(f"Seeding {len(rows)} catalog rows from {path}")

        if not await db_service.health_check():
            raise RuntimeError("MongoDB is not reachable")

        written = await db_service.replace_task_catalog(rows)
        logger.info(f"✓ Seeded {written} catalog rows")

        # Spot-check a few well-known rows
        catalog = {row["id"]: row for row in await db_service.get_task_catalog()}
        logger.info(f"Documents in collection: {len(catalog)}")
        for task_id in SPOT_CHECKS:
            row = catalog.get(task_id)
            if row is None:
                logger.warning(f"✗ {task_id}: not found")
                continue
            keys = ", ".join(row.get("conditions") or {}) or "(none, always generated)"
            logger.info(f"✓ {task_id}: \"{row['title']}\" | urgency: {row.get('urgencyPercentage')} | conditions: {keys}")

    except Exception as e:
        logger.error(f"Error seeding task catalog: {e}", exc_info=True)
        sys.exit(1)
    finally:
        db_service.close()
        logger.info("MongoDB connection closed")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    asyncio.run(seed_task_catalog(Path(sys.argv[1])))
