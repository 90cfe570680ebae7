# backend/tests/unit/test_mini_assessment.py
import pytest

from concierge.models.workflow import (
    MiniAssessmentAction,
    MiniAssessmentDefinition,
    MiniAssessmentSession,
    MiniQuestionState,
)
from concierge.workflows.definitions import MINI_ASSESSMENT_WORKFLOWS
from concierge.workflows.mini_assessment import add_entry, apply_mini_action, entry_id_for, start_mini_session
from concierge.workflows.validator import validate_mini_assessment_definition


@pytest.fixture
def financial():
    return MiniAssessmentDefinition.model_validate(MINI_ASSESSMENT_WORKFLOWS["address_change_financial"])


def _act(definition, session, action_type, **fields):
    return apply_mini_action(definition, session, MiniAssessmentAction(type=action_type, **fields))


def _at(definition, index, phase="decide", entries=None):
    return MiniAssessmentSession(
        workflow_id=definition.id,
        state=MiniQuestionState(index=index, phase=phase),
        entries=entries or [],
    )


def test_catalog_definitions_are_valid():
    assert len(MINI_ASSESSMENT_WORKFLOWS) == 6
    for data in MINI_ASSESSMENT_WORKFLOWS.values():
        assert validate_mini_assessment_definition(MiniAssessmentDefinition.model_validate(data)) == []


def test_entry_ids_are_stable(financial):
    bank = financial.question("bank")
    retirement = financial.question("retirement")
    assert entry_id_for(bank, "Wells Fargo") == "bank_wells_fargo"
    assert entry_id_for(bank, "wells-fargo!") == "bank_wells_fargo"
    assert entry_id_for(bank, None) == "bank"
    assert entry_id_for(retirement, "Vanguard") == "retirement"


def test_add_entry_replaces_same_name_and_single_entry_answers(financial):
    bank = financial.question("bank")
    entries = add_entry(bank, [], "Chase")
    entries = add_entry(bank, entries, "chase ")
    entries = add_entry(bank, entries, "Ally")
    assert [e.id for e in entries] == ["bank_chase", "bank_ally"]

    retirement = financial.question("retirement")
    entries = add_entry(retirement, entries, "Fidelity")
    entries = add_entry(retirement, entries, "Vanguard")
    assert [e.display_name for e in entries if e.question_id == "retirement"] == ["Vanguard"]


def test_yes_with_prompt_opens_entry_phase_then_collects_names(financial):
    session = _act(financial, start_mini_session(financial), "continue")["session"]
    assert session.state == MiniQuestionState(index=0)

    session = _act(financial, session, "yes")["session"]
    assert session.state.phase == "entry"

    session = _act(financial, session, "add_entry", text="Chase")["session"]
    session = _act(financial, session, "add_entry", text="Ally Bank")["session"]
    assert session.state.phase == "entry"

    session = _act(financial, session, "continue")["session"]
    assert session.state == MiniQuestionState(index=1)
    assert [e.display_name for e in session.entries] == ["Chase", "Ally Bank"]


def test_yes_then_continue_without_text_uses_label(financial):
    session = _act(financial, _at(financial, 0, phase="entry"), "continue")["session"]
    assert [(e.id, e.display_name, e.text_entry) for e in session.entries] == [("bank", "Bank account", None)]


def test_yes_without_prompt_adds_label_entry_and_advances():
    definition = MiniAssessmentDefinition.model_validate({
        **MINI_ASSESSMENT_WORKFLOWS["address_change_financial"],
        "questions": [{"id": "voter", "question": "Registered to vote?", "icon": "checkmark", "label": "Voter registration"}],
    })
    session = _act(definition, _at(definition, 0), "yes")["session"]
    assert session.state.kind == "review"
    assert session.entries[0].display_name == "Voter registration"


def test_no_clears_question_entries_and_advances(financial):
    existing = add_entry(financial.question("bank"), [], "Chase")
    session = _act(financial, _at(financial, 0, entries=existing), "no")["session"]
    assert session.entries == []
    assert session.state.index == 1


def test_last_question_leads_to_review_then_complete(financial):
    last = len(financial.questions) - 1
    session = _act(financial, _at(financial, last), "no")["session"]
    assert session.state.kind == "review"
    session = _act(financial, session, "confirm")["session"]
    assert session.state.kind == "complete"


def test_review_allows_removing_entries(financial):
    entries = add_entry(financial.question("bank"), [], "Chase")
    session = MiniAssessmentSession(workflow_id=financial.id, state={"kind": "review"}, entries=entries)
    session = _act(financial, session, "remove_entry", entry_id="bank_chase")["session"]
    assert session.entries == []
    assert session.state.kind == "review"


@pytest.mark.parametrize("phase, action_type, fields, reason", [
    ("decide", "add_entry", {"text": "Chase"}, "not allowed"),
    ("entry", "yes", {}, "not allowed"),
    ("entry", "add_entry", {"text": "   "}, "non-empty text"),
    ("entry", "remove_entry", {"entry_id": "nope"}, "does not exist"),
    ("entry", "remove_entry", {}, "requires an entryId"),
])
def test_invalid_actions(financial, phase, action_type, fields, reason):
    result = _act(financial, _at(financial, 0, phase=phase), action_type, **fields)
    assert result["applied"] is False
    assert reason in result["reason"]


def test_cancel_clears_entries(financial):
    entries = add_entry(financial.question("bank"), [], "Chase")
    session = _act(financial, _at(financial, 0, phase="entry", entries=entries), "cancel")["session"]
    assert session.state.kind == "cancelled"
    assert session.entries == []
