# /concierge/services/workflow_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from concierge.config import strings
from concierge.models.task import TaskStatus
from concierge.models.workflow import (
    MiniAssessmentAction,
    MiniAssessmentDefinition,
    MiniAssessmentEntry,
    MiniAssessmentSession,
    WorkflowAction,
    WorkflowDefinition,
    WorkflowSession,
)
from concierge.services.db_service import db_service
from concierge.services.notification_service import notification_service
from concierge.services.task_service import generate_mini_assessment_tasks
from concierge.utils.errors import ConciergeError, InternalError, InvalidArgumentError, NotFoundError
from concierge.utils.metrics import (
    tasks_generated_counter,
    workflow_fallback_counter,
    workflow_lookup_counter,
    workflow_submission_counter,
)
from concierge.workflows import engine, mini_assessment, validator
from concierge.workflows.definitions import FALLBACK_WORKFLOW, MINI_ASSESSMENT_WORKFLOWS, VENDOR_WORKFLOWS

# Lookup, step-by-step transitions and submission for vendor-qualifying flows
# and mini-assessments. Sessions are held by the client; this service stores
# nothing until answers are submitted.

logger = logging.getLogger(__name__)

Answers = Union[Dict[str, Any], List[Any]]


class WorkflowService:
    def __init__(self):
        self.vendor_workflows: Dict[str, WorkflowDefinition] = {
            workflow_id: WorkflowDefinition.model_validate({"workflowId": workflow_id, **data})
            for workflow_id, data in VENDOR_WORKFLOWS.items()
        }
        self.mini_assessments: Dict[str, MiniAssessmentDefinition] = {
            workflow_id: MiniAssessmentDefinition.model_validate(data)
            for workflow_id, data in MINI_ASSESSMENT_WORKFLOWS.items()
        }

    # ==================== Lookup ====================

    def fallback_workflow(self, workflow_id: str) -> WorkflowDefinition:
        return WorkflowDefinition.model_validate({"workflowId": workflow_id, "fallback": True, **FALLBACK_WORKFLOW})

    def resolve(self, workflow_id: str) -> Union[WorkflowDefinition, MiniAssessmentDefinition]:
        """
        Definition for an id. Unknown ids get the generic fallback survey
        instead of an error; the fallback is logged and counted so catalog
        typos still show up in monitoring.
        """
        if workflow_id in self.vendor_workflows:
            workflow_lookup_counter.labels(source="vendor").inc()
            return self.vendor_workflows[workflow_id]
        if workflow_id in self.mini_assessments:
            workflow_lookup_counter.labels(source="mini_assessment").inc()
            return self.mini_assessments[workflow_id]

        workflow_lookup_counter.labels(source="fallback").inc()
        workflow_fallback_counter.inc()
        logger.warning(f"Unknown workflow id '{workflow_id}'; serving the generic fallback survey.")
        return self.fallback_workflow(workflow_id)

    def get_workflow(self, workflow_id: Optional[str]) -> Dict[str, Any]:
        if not workflow_id:
            raise NotFoundError("workflowId is required")
        return self.resolve(workflow_id).to_payload()

    def list_mini_assessments(self) -> List[Dict[str, str]]:
        return [
            {"id": d.id, "title": d.title, "taskTitle": d.task_title}
            for d in self.mini_assessments.values()
        ]

    def validate_catalogs(self) -> int:
        """Logs every structural problem in the built-in catalogs and returns how many were found."""
        problems = []
        for definition in self.vendor_workflows.values():
            problems.extend(validator.validate_workflow_definition(definition))
        problems.extend(validator.validate_workflow_definition(self.fallback_workflow("fallback")))
        for definition in self.mini_assessments.values():
            problems.extend(validator.validate_mini_assessment_definition(definition))
        for problem in problems:
            logger.error(f"Workflow catalog problem [{problem['error_code']}]: {problem['message']}")
        return len(problems)

    # ==================== Transitions ====================

    async def transition(
        self,
        workflow_id: str,
        session: Optional[Dict[str, Any]],
        action: Optional[Dict[str, Any]],
        user_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Apply one action to a client-held session.

        With no session a fresh one at intro is returned. With no action the
        session is only brought up to date (a pending auto-advance resolved).
        When the action completes the flow and user_id is given, the answers
        are submitted and the submission result is included.
        """
        now = now or datetime.now(timezone.utc)
        definition = self.resolve(workflow_id)
        is_mini = isinstance(definition, MiniAssessmentDefinition)

        try:
            if is_mini:
                current = (MiniAssessmentSession.model_validate(session) if session
                           else mini_assessment.start_mini_session(definition))
                parsed_action = MiniAssessmentAction.model_validate(action) if action else None
            else:
                current = (WorkflowSession.model_validate(session) if session
                           else engine.start_session(definition))
                parsed_action = WorkflowAction.model_validate(action) if action else None
        except ValidationError as e:
            raise InvalidArgumentError(f"Malformed session or action: {e.error_count()} error(s)")

        if parsed_action is None:
            if not is_mini:
                current = engine.resolve_auto_advance(definition, current, now)
            result = {"applied": True, "reason": None, "session": current}
        elif is_mini:
            result = mini_assessment.apply_mini_action(definition, current, parsed_action)
        else:
            result = engine.apply_action(definition, current, parsed_action, now)

        response: Dict[str, Any] = {
            "workflowId": workflow_id,
            "kind": "mini_assessment" if is_mini else "vendor",
            "applied": result["applied"],
            "reason": result["reason"],
            "session": (result["session"] or current).model_dump(by_alias=True, mode="json"),
        }

        updated = result["session"]
        if result["applied"] and updated is not None and updated.state.kind == "complete" and user_id:
            if is_mini:
                answers: Answers = [e.model_dump(by_alias=True, exclude_none=True) for e in updated.entries]
            else:
                answers = updated.answers
            response["submission"] = await self.submit(workflow_id, answers, user_id)
        return response

    # ==================== Submission ====================

    async def submit(self, workflow_id: Optional[str], answers: Optional[Answers], user_id: Optional[str]) -> Dict[str, Any]:
        """
        Persist completed answers.

        Vendor flows return {success, status: "matching_in_progress"};
        mini-assessments return {success, tasksCreated}. Any persistence
        failure becomes a generic internal error.
        """
        if not workflow_id or answers is None or not user_id:
            raise InvalidArgumentError("workflowId, answers, and userId are required")

        definition = self.mini_assessments.get(workflow_id)
        kind = "mini_assessment" if definition else "vendor"
        try:
            if definition:
                result = await self._submit_mini_assessment(definition, answers, user_id)
            else:
                result = await self._submit_vendor_workflow(workflow_id, answers, user_id)
        except ConciergeError:
            workflow_submission_counter.labels(kind=kind, status="rejected").inc()
            raise
        except Exception as e:
            workflow_submission_counter.labels(kind=kind, status="error").inc()
            logger.error(f"Workflow submission failed for {workflow_id} (user {user_id}): {e}", exc_info=True)
            raise InternalError(strings.SUBMISSION_FAILED)

        workflow_submission_counter.labels(kind=kind, status="success").inc()
        return result

    async def _submit_vendor_workflow(self, workflow_id: str, answers: Answers, user_id: str) -> Dict[str, Any]:
        if not isinstance(answers, dict):
            raise InvalidArgumentError("answers must map question ids to selected option ids")

        submission_id = await db_service.save_workflow_submission({
            "workflow_id": workflow_id,
            "user_id": user_id,
            "answers": answers,
            "status": "pending_matching",
        })

        try:
            updated = await db_service.update_task_status(
                user_id, workflow_id, TaskStatus.MATCHING_IN_PROGRESS.value,
                {"qualifying_answers": answers},
            )
            if not updated:
                logger.info(f"No task document '{workflow_id}' for user {user_id} to mark as matching.")
        except Exception as e:
            logger.warning(f"Could not update task status for {workflow_id} (user {user_id}): {e}")

        notification_service.notify_workflow_submitted(user_id, workflow_id, answers, submission_id)
        logger.info(f"Vendor workflow {workflow_id} submitted for user {user_id} ({submission_id})")
        return {"success": True, "status": TaskStatus.MATCHING_IN_PROGRESS.value}

    async def _submit_mini_assessment(self, definition: MiniAssessmentDefinition,
                                      answers: Answers, user_id: str) -> Dict[str, Any]:
        if not isinstance(answers, list):
            raise InvalidArgumentError("answers must be a list of entries")
        try:
            entries = [MiniAssessmentEntry.model_validate(answer) for answer in answers]
        except ValidationError:
            raise InvalidArgumentError("each answer needs an id and a displayName")

        await db_service.save_mini_assessment(
            user_id, definition.id,
            [e.model_dump(by_alias=True, exclude_none=True) for e in entries],
        )
        tasks = generate_mini_assessment_tasks(definition, entries)
        await db_service.upsert_tasks(user_id, tasks)
        tasks_generated_counter.labels(source="mini_assessment").inc(len(tasks))

        try:
            await db_service.update_task_status(user_id, definition.id, TaskStatus.COMPLETED.value)
        except Exception as e:
            logger.warning(f"Could not complete checklist task {definition.id} (user {user_id}): {e}")

        logger.info(f"Mini-assessment {definition.id} committed {len(tasks)} task(s) for user {user_id}")
        return {"success": True, "tasksCreated": len(tasks)}

    def content_counts(self) -> Dict[str, int]:
        return {
            "vendor_workflows": len(self.vendor_workflows),
            "mini_assessments": len(self.mini_assessments),
        }


# Globally accessible instance
workflow_service = WorkflowService()
