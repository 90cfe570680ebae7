# backend/tests/unit/test_workflow_engine.py
import pytest
from datetime import datetime, timedelta, timezone

from concierge.models.workflow import QuestionState, WorkflowAction, WorkflowDefinition, WorkflowSession
from concierge.workflows.definitions import FALLBACK_WORKFLOW, VENDOR_WORKFLOWS
from concierge.workflows.engine import (
    AUTO_ADVANCE_DELAY,
    apply_action,
    resolve_auto_advance,
    start_session,
    summarize,
    toggle_selection,
)
from concierge.workflows.validator import validate_workflow_definition

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def definition():
    return WorkflowDefinition.model_validate({"workflowId": "generic_help", "fallback": True, **FALLBACK_WORKFLOW})


def _act(definition, session, action_type, option_id=None, now=NOW):
    return apply_action(definition, session, WorkflowAction(type=action_type, option_id=option_id), now)


def _at_question(definition, index, answers=None):
    return WorkflowSession(workflow_id=definition.workflow_id, state=QuestionState(index=index), answers=answers or {})


def test_catalog_definitions_are_valid():
    for workflow_id, data in VENDOR_WORKFLOWS.items():
        definition = WorkflowDefinition.model_validate({"workflowId": workflow_id, **data})
        assert validate_workflow_definition(definition) == [], workflow_id


def test_full_run_reaches_complete(definition):
    session = start_session(definition)
    assert session.state.kind == "intro"

    session = _act(definition, session, "continue")["session"]
    assert session.state == QuestionState(index=0)

    # single select: answer is recorded, advance happens after the delay
    session = _act(definition, session, "select", "price")["session"]
    assert session.answers["priority"] == ["price"]
    assert session.advance_due_at == NOW + AUTO_ADVANCE_DELAY
    assert session.state.index == 0

    later = NOW + timedelta(seconds=1)
    session = _act(definition, session, "select", "licensed_insured", now=later)["session"]
    assert session.state.index == 1
    session = _act(definition, session, "select", "flexible_schedule", now=later)["session"]
    assert session.answers["requirements"] == ["licensed_insured", "flexible_schedule"]
    assert session.advance_due_at is None

    session = _act(definition, session, "continue", now=later)["session"]
    assert session.state.index == 2

    session = _act(definition, session, "select", "asap", now=later)["session"]
    session = resolve_auto_advance(definition, session, later + AUTO_ADVANCE_DELAY)
    assert session.state.kind == "recap"
    assert session.state.summary == {
        "priority": ["Best Price"],
        "requirements": ["Licensed & Insured", "Flexible Schedule"],
        "timeline": ["ASAP"],
    }

    session = _act(definition, session, "confirm", now=later)["session"]
    assert session.state.kind == "complete"


def test_auto_advance_waits_for_delay(definition):
    session = _act(definition, _at_question(definition, 0), "select", "quality")["session"]
    assert resolve_auto_advance(definition, session, NOW + timedelta(milliseconds=299)).state.index == 0
    assert resolve_auto_advance(definition, session, NOW + AUTO_ADVANCE_DELAY).state.index == 1


def test_reselecting_single_select_replaces_answer(definition):
    session = _act(definition, _at_question(definition, 0), "select", "price")["session"]
    session = _act(definition, session, "select", "speed")["session"]
    assert session.answers["priority"] == ["speed"]


def test_exclusive_option_clears_others_and_vice_versa(definition):
    question = definition.questions[1]
    assert toggle_selection(question, ["special_handling", "flexible_schedule"], "none") == ["none"]
    assert toggle_selection(question, ["none"], "special_handling") == ["special_handling"]
    assert toggle_selection(question, ["special_handling"], "special_handling") == []


def test_continue_requires_a_selection(definition):
    result = _act(definition, _at_question(definition, 1), "continue")
    assert result["applied"] is False
    assert "needs at least one selection" in result["reason"]


@pytest.mark.parametrize("state_session, action_type", [
    ({"state": {"kind": "intro"}}, "select"),
    ({"state": {"kind": "recap"}}, "continue"),
    ({"state": {"kind": "question", "index": 0}}, "confirm"),
])
def test_actions_not_allowed_in_state(definition, state_session, action_type):
    session = WorkflowSession.model_validate({"workflowId": definition.workflow_id, **state_session})
    result = _act(definition, session, action_type, "price")
    assert result["applied"] is False and result["session"] is None
    assert "not allowed" in result["reason"]


def test_unknown_option_rejected(definition):
    result = _act(definition, _at_question(definition, 0), "select", "teleport")
    assert not result["applied"]
    assert "teleport" in result["reason"]


def test_cancel_discards_answers_from_any_live_state(definition):
    session = _at_question(definition, 1, {"priority": ["price"]})
    cancelled = _act(definition, session, "cancel")["session"]
    assert cancelled.state.kind == "cancelled"
    assert cancelled.answers == {}


def test_terminal_states_reject_everything(definition):
    session = WorkflowSession.model_validate({"workflowId": definition.workflow_id, "state": {"kind": "complete"}})
    for action_type in ("continue", "cancel", "confirm"):
        assert not _act(definition, session, action_type)["applied"]


def test_session_for_other_workflow_rejected(definition):
    session = WorkflowSession(workflow_id="book_movers")
    result = _act(definition, session, "continue")
    assert not result["applied"]
    assert "book_movers" in result["reason"]


def test_summary_skips_unanswered_and_unknown(definition):
    assert summarize(definition, {"priority": ["price", "bogus"], "timeline": []}) == {"priority": ["Best Price"]}


def test_sessions_are_not_mutated(definition):
    session = _at_question(definition, 0)
    _act(definition, session, "select", "price")
    assert session.answers == {}
