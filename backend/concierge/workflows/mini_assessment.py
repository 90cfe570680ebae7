# /concierge/workflows/mini_assessment.py

"""
Pure mini-assessment engine.

Each question is a yes/no card. "Yes" may open a free-text capture where
the user names the thing (bank, gym, pharmacy); every named thing becomes
an entry, and each entry becomes one task on commit. After the last
question a review step lists the entries and allows removal before confirm.

Same guarantees as the vendor engine: pure, deterministic, no logging.
"""

import re
from typing import List, Optional, TypedDict

from concierge.models.workflow import (
    MiniAssessmentDefinition,
    MiniAssessmentSession,
    MiniAssessmentAction,
    MiniAssessmentEntry,
    MiniAssessmentQuestion,
    MiniQuestionState,
    ReviewState,
    CompleteState,
    CancelledState,
)
from concierge.workflows.validator import validate_mini_assessment_action

_SLUG_RE = re.compile(r"[^a-z0-9]+")


class MiniEngineResult(TypedDict):
    applied: bool
    reason: Optional[str]
    session: Optional[MiniAssessmentSession]


def start_mini_session(definition: MiniAssessmentDefinition) -> MiniAssessmentSession:
    return MiniAssessmentSession(workflow_id=definition.id)


def entry_id_for(question: MiniAssessmentQuestion, text: Optional[str]) -> str:
    """
    Stable answer id. Single-entry questions use the question id itself;
    multi-entry questions add a slug of the typed name so that re-adding the
    same name replaces rather than duplicates.
    """
    if not question.allow_multiple or not text:
        return question.id
    slug = _SLUG_RE.sub("_", text.lower()).strip("_")
    return f"{question.id}_{slug}" if slug else question.id


def add_entry(
    question: MiniAssessmentQuestion,
    entries: List[MiniAssessmentEntry],
    text: Optional[str]
) -> List[MiniAssessmentEntry]:
    """Add a named (or generic, when text is None) entry for a question."""
    name = text.strip() if text else None
    entry = MiniAssessmentEntry(
        id=entry_id_for(question, name),
        display_name=name or question.label,
        question_id=question.id,
        text_entry=name,
    )
    if question.allow_multiple:
        kept = [e for e in entries if e.id != entry.id]
    else:
        # At most one entry per single-entry question
        kept = [e for e in entries if e.question_id != question.id]
    return kept + [entry]


def _entries_for(entries: List[MiniAssessmentEntry], question_id: str) -> List[MiniAssessmentEntry]:
    return [e for e in entries if e.question_id == question_id]


def _next_question(
    definition: MiniAssessmentDefinition,
    session: MiniAssessmentSession,
    index: int,
    entries: List[MiniAssessmentEntry]
) -> MiniAssessmentSession:
    next_index = index + 1
    if next_index < len(definition.questions):
        state = MiniQuestionState(index=next_index)
    else:
        state = ReviewState()
    return session.model_copy(update={"state": state, "entries": entries})


def apply_mini_action(
    definition: MiniAssessmentDefinition,
    session: MiniAssessmentSession,
    action: MiniAssessmentAction
) -> MiniEngineResult:
    """
    Apply one client action to a mini-assessment session.

    Returns:
        MiniEngineResult with the new session, or applied=False and a reason
    """
    validation = validate_mini_assessment_action(definition, session, action)
    if not validation["is_valid"]:
        return {"applied": False, "reason": validation["message"], "session": None}

    state = session.state
    entries = list(session.entries)

    if action.type == "cancel":
        updated = session.model_copy(update={"state": CancelledState(), "entries": []})
        return {"applied": True, "reason": None, "session": updated}

    if state.kind == "intro":
        if definition.questions:
            updated = session.model_copy(update={"state": MiniQuestionState(index=0)})
        else:
            updated = session.model_copy(update={"state": ReviewState()})
        return {"applied": True, "reason": None, "session": updated}

    if action.type == "remove_entry":
        entries = [e for e in entries if e.id != action.entry_id]
        return {"applied": True, "reason": None, "session": session.model_copy(update={"entries": entries})}

    if state.kind == "review":
        # confirm
        return {"applied": True, "reason": None, "session": session.model_copy(update={"state": CompleteState()})}

    question = definition.questions[state.index]

    if action.type == "no":
        entries = [e for e in entries if e.question_id != question.id]
        return {"applied": True, "reason": None, "session": _next_question(definition, session, state.index, entries)}

    if action.type == "yes":
        if question.text_entry_prompt:
            updated = session.model_copy(update={"state": MiniQuestionState(index=state.index, phase="entry")})
            return {"applied": True, "reason": None, "session": updated}
        entries = add_entry(question, entries, None)
        return {"applied": True, "reason": None, "session": _next_question(definition, session, state.index, entries)}

    if action.type == "add_entry":
        entries = add_entry(question, entries, action.text)
        return {"applied": True, "reason": None, "session": session.model_copy(update={"entries": entries})}

    # continue out of the entry phase; a yes with nothing typed still counts
    if not _entries_for(entries, question.id):
        entries = add_entry(question, entries, None)
    return {"applied": True, "reason": None, "session": _next_question(definition, session, state.index, entries)}
