# /concierge/routes/tasks.py

from fastapi import APIRouter

from concierge.config.settings import settings
from concierge.models.api import APIResponse, TaskRefreshRequest
from concierge.services.task_service import task_catalog_service
from concierge.services.workflow_service import workflow_service

router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"]
)


@router.post("/refresh", response_model=APIResponse)
async def refresh_tasks(request: TaskRefreshRequest):
    """Re-runs the task catalog against the supplied profile and stores the result."""
    tasks = await task_catalog_service.refresh_tasks(
        request.user_id,
        request.profile,
        move_date=request.move_date,
        checklists=workflow_service.mini_assessments.values(),
    )
    return APIResponse(
        success=True,
        message=f"Generated {len(tasks)} tasks",
        data={
            "tasksGenerated": len(tasks),
            "tasks": [task.model_dump(by_alias=True, mode="json", exclude_none=True) for task in tasks],
        },
        version=settings.api_version
    )
