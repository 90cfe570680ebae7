# /concierge/routes/workflows.py

from fastapi import APIRouter

from concierge.config.settings import settings
from concierge.models.api import APIResponse, GetWorkflowRequest, SubmitWorkflowRequest, WorkflowTransitionRequest
from concierge.services.workflow_service import workflow_service

router = APIRouter(
    prefix="/workflows",
    tags=["Workflows"]
)


@router.post("/qualifying")
async def get_workflow(request: GetWorkflowRequest):
    """Workflow payload for an id; unknown ids get the generic fallback survey."""
    return workflow_service.get_workflow(request.workflow_id)


@router.get("/mini-assessments", response_model=APIResponse)
async def list_mini_assessments():
    return APIResponse(
        success=True,
        message="Mini-assessments retrieved",
        data={"miniAssessments": workflow_service.list_mini_assessments()},
        version=settings.api_version
    )


@router.post("/transition")
async def transition(request: WorkflowTransitionRequest):
    """Apply one action to a client-held workflow or mini-assessment session."""
    return await workflow_service.transition(
        request.workflow_id, request.session, request.action, user_id=request.user_id
    )


@router.post("/submit")
async def submit_answers(request: SubmitWorkflowRequest):
    return await workflow_service.submit(request.workflow_id, request.answers, request.user_id)
