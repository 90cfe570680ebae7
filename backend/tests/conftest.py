import pytest
from pathlib import Path
from fastapi.testclient import TestClient
from dotenv import load_dotenv
from unittest.mock import AsyncMock

# Load the test environment before any concierge imports so Settings() sees it.
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env.test")

from concierge.main import app  # noqa: E402


@pytest.fixture
def mock_db(mocker):
    """Replaces the shared DatabaseService with an AsyncMock everywhere it is imported."""
    db = AsyncMock()
    db.get_user_knowledge.return_value = None
    db.upsert_tasks.side_effect = lambda user_id, tasks, **kwargs: len(tasks)
    db.update_task_status.return_value = True
    db.save_workflow_submission.return_value = "submission-1"
    for target in (
        "concierge.services.chat_service.db_service",
        "concierge.services.task_service.db_service",
        "concierge.services.workflow_service.db_service",
    ):
        mocker.patch(target, db)
    return db


@pytest.fixture(scope="function")
def test_client(mocker):
    """
    Provides a TestClient for API integration tests.
    Startup work that needs MongoDB is stubbed out.
    """
    mocker.patch("concierge.utils.lifecycle.db_service.create_indexes", new_callable=AsyncMock)
    mocker.patch("concierge.utils.lifecycle.task_catalog_service.load_catalog", new_callable=AsyncMock)
    mocker.patch("concierge.utils.lifecycle.cache_service.close", new_callable=AsyncMock)

    # The app's lifespan (startup/shutdown events) is managed by the TestClient
    with TestClient(app) as client:
        yield client
