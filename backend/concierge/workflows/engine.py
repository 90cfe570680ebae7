# /concierge/workflows/engine.py

"""
Pure vendor-workflow execution engine.

States run intro -> question[0] ... question[n-1] -> recap -> complete,
with cancelled reachable from any non-terminal state. Sessions are
immutable; every transition returns a new one.

All functions are:
- Pure (no side effects)
- Deterministic (the current time is passed in)
- No database writes
- No AI calls
- No logging
"""

from typing import Dict, List, Optional, TypedDict
from datetime import datetime, timedelta

from concierge.models.workflow import (
    WorkflowDefinition,
    WorkflowSession,
    WorkflowAction,
    Question,
    IntroState,
    QuestionState,
    RecapState,
    CompleteState,
    CancelledState,
)
from concierge.workflows.validator import validate_workflow_action

# Pause after a single-select choice so the user sees it register
AUTO_ADVANCE_DELAY = timedelta(milliseconds=300)


class EngineResult(TypedDict):
    """Result of workflow engine execution."""
    applied: bool
    reason: Optional[str]
    session: Optional[WorkflowSession]


def start_session(definition: WorkflowDefinition) -> WorkflowSession:
    return WorkflowSession(workflow_id=definition.workflow_id, state=IntroState())


def summarize(definition: WorkflowDefinition, answers: Dict[str, List[str]]) -> Dict[str, List[str]]:
    """Map each answered question id to the labels of its selected options."""
    summary: Dict[str, List[str]] = {}
    for question in definition.questions:
        labels = []
        for option_id in answers.get(question.id, []):
            option = question.option(option_id)
            if option is not None:
                labels.append(option.label)
        if labels:
            summary[question.id] = labels
    return summary


def toggle_selection(question: Question, current: List[str], option_id: str) -> List[str]:
    """
    Toggle an option in a multi-select answer.

    An exclusive option clears every other selection; picking a
    non-exclusive option drops any exclusive one. Order of selection is kept.
    """
    if option_id in current:
        return [o for o in current if o != option_id]

    option = question.option(option_id)
    if option is not None and option.exclusive:
        return [option_id]

    exclusive_ids = {o.id for o in question.options if o.exclusive}
    return [o for o in current if o not in exclusive_ids] + [option_id]


def _after_question(definition: WorkflowDefinition, session: WorkflowSession, index: int) -> WorkflowSession:
    next_index = index + 1
    if next_index < len(definition.questions):
        state = QuestionState(index=next_index)
    else:
        state = RecapState(summary=summarize(definition, session.answers))
    return session.model_copy(update={"state": state, "advance_due_at": None})


def resolve_auto_advance(
    definition: WorkflowDefinition,
    session: WorkflowSession,
    now: datetime
) -> WorkflowSession:
    """Advance past a single-select question once its pending delay has elapsed."""
    if session.advance_due_at is None or now < session.advance_due_at:
        return session
    if session.state.kind != "question":
        return session.model_copy(update={"advance_due_at": None})
    return _after_question(definition, session, session.state.index)


def apply_action(
    definition: WorkflowDefinition,
    session: WorkflowSession,
    action: WorkflowAction,
    now: datetime
) -> EngineResult:
    """
    Apply one client action to a vendor workflow session.

    Any elapsed auto-advance is resolved first, so an action always targets
    the state the client is looking at.

    Args:
        definition: The workflow being run
        session: The session echoed back by the client
        action: continue | select | confirm | cancel
        now: Current time, used for the single-select auto-advance deadline

    Returns:
        EngineResult with applied=True and the new session, or applied=False
        and a reason when the action is not valid in the current state
    """
    session = resolve_auto_advance(definition, session, now)

    validation = validate_workflow_action(definition, session, action)
    if not validation["is_valid"]:
        return {"applied": False, "reason": validation["message"], "session": None}

    state = session.state

    if action.type == "cancel":
        # Answers are discarded on cancel
        updated = session.model_copy(update={
            "state": CancelledState(), "answers": {}, "advance_due_at": None
        })
        return {"applied": True, "reason": None, "session": updated}

    if state.kind == "intro":
        if definition.questions:
            updated = session.model_copy(update={"state": QuestionState(index=0)})
        else:
            updated = session.model_copy(update={"state": RecapState(summary={})})
        return {"applied": True, "reason": None, "session": updated}

    if state.kind == "recap":
        updated = session.model_copy(update={"state": CompleteState()})
        return {"applied": True, "reason": None, "session": updated}

    question = definition.questions[state.index]

    if action.type == "select":
        answers = {k: list(v) for k, v in session.answers.items()}
        if question.type == "single_select":
            answers[question.id] = [action.option_id]
            due = now + AUTO_ADVANCE_DELAY
        else:
            answers[question.id] = toggle_selection(question, answers.get(question.id, []), action.option_id)
            due = None
        updated = session.model_copy(update={"answers": answers, "advance_due_at": due})
        return {"applied": True, "reason": None, "session": updated}

    # continue
    return {"applied": True, "reason": None, "session": _after_question(definition, session, state.index)}
