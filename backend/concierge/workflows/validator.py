# /concierge/workflows/validator.py

"""
Pure validation functions for workflow definitions and client actions.

This module provides deterministic, side-effect-free checks used by the
workflow engines before any transition is applied, and by the lifespan
hook to catch broken catalog entries at startup.

All functions are:
- Pure (no side effects)
- Deterministic (same input = same output)
- No database access
- No AI calls
- No logging
"""

from typing import Optional, TypedDict, List

from concierge.models.workflow import (
    WorkflowDefinition,
    WorkflowSession,
    WorkflowAction,
    MiniAssessmentDefinition,
    MiniAssessmentSession,
    MiniAssessmentAction,
)


class ValidationResult(TypedDict):
    """Result of a validation check."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]


TERMINAL_STATES = ("complete", "cancelled")

_VALID: ValidationResult = {"is_valid": True, "error_code": None, "message": None}


def _invalid(error_code: str, message: str) -> ValidationResult:
    return {"is_valid": False, "error_code": error_code, "message": message}


def validate_workflow_definition(definition: WorkflowDefinition) -> List[ValidationResult]:
    """
    Check a vendor workflow for structural problems.

    Returns every failure found; an empty list means the definition is usable.
    """
    problems: List[ValidationResult] = []
    seen_questions = set()
    for question in definition.questions:
        if question.id in seen_questions:
            problems.append(_invalid(
                "DUPLICATE_QUESTION",
                f"Question '{question.id}' appears twice in '{definition.workflow_id}'"
            ))
        seen_questions.add(question.id)

        if not question.options:
            problems.append(_invalid(
                "EMPTY_OPTIONS",
                f"Question '{question.id}' in '{definition.workflow_id}' has no options"
            ))

        option_ids = [o.id for o in question.options]
        if len(option_ids) != len(set(option_ids)):
            problems.append(_invalid(
                "DUPLICATE_OPTION",
                f"Question '{question.id}' in '{definition.workflow_id}' repeats an option id"
            ))

        if question.type == "single_select" and any(o.exclusive for o in question.options):
            problems.append(_invalid(
                "EXCLUSIVE_ON_SINGLE_SELECT",
                f"Question '{question.id}' in '{definition.workflow_id}' is single_select but has an exclusive option"
            ))
    return problems


def validate_mini_assessment_definition(definition: MiniAssessmentDefinition) -> List[ValidationResult]:
    problems: List[ValidationResult] = []
    question_ids = [q.id for q in definition.questions]
    if len(question_ids) != len(set(question_ids)):
        problems.append(_invalid(
            "DUPLICATE_QUESTION",
            f"Mini-assessment '{definition.id}' repeats a question id"
        ))
    for question in definition.questions:
        if question.allow_multiple and not question.text_entry_prompt:
            problems.append(_invalid(
                "MULTIPLE_WITHOUT_TEXT_ENTRY",
                f"Question '{question.id}' in '{definition.id}' allows multiple entries but has no text prompt"
            ))
    return problems


def validate_workflow_action(
    definition: WorkflowDefinition,
    session: WorkflowSession,
    action: WorkflowAction
) -> ValidationResult:
    """
    Validate that an action is allowed in the session's current state.

    Args:
        definition: The workflow the session belongs to
        session: Current session (auto-advance already resolved)
        action: The client action

    Returns:
        ValidationResult with is_valid=True if the action may be applied
    """
    if session.workflow_id != definition.workflow_id:
        return _invalid(
            "WORKFLOW_MISMATCH",
            f"Session belongs to '{session.workflow_id}', not '{definition.workflow_id}'"
        )

    state = session.state
    if state.kind in TERMINAL_STATES:
        return _invalid("TERMINAL_STATE", f"Workflow is already {state.kind}")

    if action.type == "cancel":
        return _VALID

    if state.kind == "intro":
        if action.type != "continue":
            return _invalid("ACTION_NOT_ALLOWED", f"'{action.type}' is not allowed at intro")
        return _VALID

    if state.kind == "recap":
        if action.type != "confirm":
            return _invalid("ACTION_NOT_ALLOWED", f"'{action.type}' is not allowed at recap")
        return _VALID

    # question
    if state.index >= len(definition.questions):
        return _invalid("QUESTION_OUT_OF_RANGE", f"No question at index {state.index}")
    question = definition.questions[state.index]

    if action.type == "select":
        if not action.option_id:
            return _invalid("MISSING_OPTION", "select requires an optionId")
        if question.option(action.option_id) is None:
            return _invalid(
                "UNKNOWN_OPTION",
                f"Option '{action.option_id}' is not defined for question '{question.id}'"
            )
        return _VALID

    if action.type == "continue":
        if not session.answers.get(question.id):
            return _invalid("NO_SELECTION", f"Question '{question.id}' needs at least one selection")
        return _VALID

    return _invalid("ACTION_NOT_ALLOWED", f"'{action.type}' is not allowed on a question")


def validate_mini_assessment_action(
    definition: MiniAssessmentDefinition,
    session: MiniAssessmentSession,
    action: MiniAssessmentAction
) -> ValidationResult:
    if session.workflow_id != definition.id:
        return _invalid(
            "WORKFLOW_MISMATCH",
            f"Session belongs to '{session.workflow_id}', not '{definition.id}'"
        )

    state = session.state
    if state.kind in TERMINAL_STATES:
        return _invalid("TERMINAL_STATE", f"Mini-assessment is already {state.kind}")

    if action.type == "cancel":
        return _VALID

    if state.kind == "intro":
        allowed = ("continue",)
    elif state.kind == "review":
        allowed = ("remove_entry", "confirm")
    else:
        if state.index >= len(definition.questions):
            return _invalid("QUESTION_OUT_OF_RANGE", f"No question at index {state.index}")
        allowed = ("yes", "no") if state.phase == "decide" else ("add_entry", "remove_entry", "continue")

    if action.type not in allowed:
        return _invalid("ACTION_NOT_ALLOWED", f"'{action.type}' is not allowed here")

    if action.type == "add_entry" and not (action.text or "").strip():
        return _invalid("EMPTY_ENTRY", "add_entry requires non-empty text")

    if action.type == "remove_entry":
        if not action.entry_id:
            return _invalid("MISSING_ENTRY", "remove_entry requires an entryId")
        if all(e.id != action.entry_id for e in session.entries):
            return _invalid("UNKNOWN_ENTRY", f"Entry '{action.entry_id}' does not exist")

    return _VALID
