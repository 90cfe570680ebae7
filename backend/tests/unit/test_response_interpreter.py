# backend/tests/unit/test_response_interpreter.py
import pytest

from concierge.models.context import UserContext
from concierge.services.classifier_service import RegexTextClassifier, TextClassifier
from concierge.services.response_service import ResponseService, clean_text, detect_context_usage

PITCH_REPLY = (
    "Here's the difference: vendors know they need to deliver, or they lose access to thousands of users. "
    "Same services, but with real accountability. Want me to get quotes for movers?"
)


@pytest.fixture
def service():
    return ResponseService(RegexTextClassifier(), pitch_threshold=2)


def _context(**fields):
    return UserContext(**{"user_name": "Dana", **fields})


def test_regex_classifier_satisfies_protocol():
    assert isinstance(RegexTextClassifier(), TextClassifier)


def test_clean_text():
    assert clean_text("  <b>Hi</b>   there...\n\n\n\nBye  ") == "Hi there.\n\nBye"
    assert clean_text(None) == ""


def test_pitch_detected_once_threshold_met(service):
    response = service.interpret(PITCH_REPLY, _context())
    assert response.state_updates["heardAccountabilityPitch"] is True


def test_pitch_never_reported_again_once_heard(service):
    response = service.interpret(PITCH_REPLY, _context(heard_accountability_pitch=True))
    assert "heardAccountabilityPitch" not in response.state_updates


def test_single_indicator_is_below_threshold(service):
    response = service.interpret("We believe in accountability for every booking, Dana.", _context())
    assert "heardAccountabilityPitch" not in response.state_updates


def test_booking_offer_marks_vendor_mentioned_and_keeps_existing_fields(service):
    context = _context(vendor_interactions={"movers": {"quotesRequested": 2}})
    response = service.interpret("I can get quotes for movers today. Want me to get quotes?", context)
    assert response.state_updates["vendorInteractions"] == {"movers": {"quotesRequested": 2, "mentioned": True}}


def test_completed_tasks_read_from_user_message_and_deduped(service):
    context = _context(message="Movers are booked and I gave notice to my landlord", completed_tasks=("landlord_notice",))
    response = service.interpret("Nice work! Next up, let's look at internet.", context)
    assert response.state_updates["completedTasks"] == ["book_movers"]


def test_suggested_actions(service):
    response = service.interpret(
        "Want me to get quotes from movers? Or do you want to start with the internet setup first?",
        _context(),
    )
    kinds = [action.type for action in response.suggested_actions]
    assert kinds == ["book_vendor", "show_info", "ask_question"]
    book, show, ask = response.suggested_actions
    assert book.vendor_category == "movers"
    assert show.task_id == "internet"
    assert ask.metadata == {"hasQuestion": True}


def test_internal_notes(service):
    context = _context(current_task="book_movers", origin_city="Austin", has_pets=True)
    response = service.interpret("Dana, leaving Austin with the dog in 10 days? Let's book movers.", context)
    notes = response.internal_notes
    assert notes["workflowUsed"] == "book_movers"
    assert notes["vendorsSurfaced"] == ["movers"]
    assert {"userName", "originCity", "timeline", "hasPets"} <= set(notes["contextFactorsApplied"])


def test_default_name_is_not_a_context_factor():
    assert "userName" not in detect_context_usage("Hey there!", _context(user_name="there"))


def test_validate_flags_quality_issues(service):
    issues = service.validate("How can I help?")
    assert any(issue.startswith("robotic_phrase") for issue in issues)
    assert "too_short" in issues

    assert "not_proactive" in service.validate("Your move is on the calendar and everything looks fine.")
    assert "too_long" in service.validate("Should we start? " + "x" * 2000)
    assert service.validate("Want to start with booking your movers this week?") == []


def test_validation_never_blocks(service):
    response = service.interpret("How can I help?", _context())
    assert response.text == "How can I help?"
    assert service.log_validation(response.text, "user-1")
