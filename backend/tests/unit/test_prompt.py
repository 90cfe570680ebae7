# backend/tests/unit/test_prompt.py
from concierge.config import persona
from concierge.models.context import RelevantVendor, UserContext
from concierge.services.prompt_service import compose_system_prompt, render_current_situation


def _context(**fields):
    base = {"user_name": "Dana", "move_distance": "local"}
    base.update(fields)
    return UserContext(**base)


def test_urgency_banner_within_a_week():
    text = render_current_situation(_context(days_until_move=5))
    assert "URGENCY: Only 5 days until move" in text
    assert "TIMELINE" not in text


def test_softer_timeline_note_within_two_weeks():
    text = render_current_situation(_context(days_until_move=12))
    assert "TIMELINE: 12 days is tight" in text
    assert "URGENCY" not in text


def test_no_timing_banner_when_far_out_or_unknown():
    for days in (None, 40):
        text = render_current_situation(_context(days_until_move=days))
        assert "URGENCY" not in text and "TIMELINE" not in text


def test_household_line_only_with_kids_or_pets():
    assert "Household" not in render_current_situation(_context(household_size="2"))
    text = render_current_situation(_context(household_size="4", has_kids=True, has_pets=True, pet_types=("dog",)))
    assert "Household: 4 people (has kids) (has pets: dog)" in text


def test_old_house_note():
    text = render_current_situation(_context(destination_year_built=1962, destination_notes="original wiring"))
    assert 'Destination is a 1962 build - "original wiring"' in text
    assert "Property Note" not in render_current_situation(_context(destination_year_built=1995))


def test_pitch_note_and_budget():
    text = render_current_situation(_context(heard_accountability_pitch=True, budget="Tight"))
    assert "already heard the accountability pitch" in text
    assert "Budget: Tight - prioritize cost-effective options" in text


def test_storage_warning_for_out_before_in():
    assert "temporary storage" in render_current_situation(_context(move_date_type="Out Before In"))
    assert "temporary storage" in render_current_situation(_context(needs_storage=True))
    assert "temporary storage" not in render_current_situation(_context())


def test_relevant_services_listed_with_hints():
    vendors = (
        RelevantVendor(vendor="movers", reason="not_booked", priority="high"),
        RelevantVendor(vendor="plumber", reason="old_house", priority="low", surfacing_style="plant_seed"),
        RelevantVendor(task="school_transfer", reason="has_kids"),
    )
    text = render_current_situation(_context(relevant_vendors=vendors))
    assert "- movers: not_booked (high priority)" in text
    assert "- plumber: old_house (low priority, plant a seed only)" in text
    assert "- school_transfer: has_kids (normal priority)" in text


def test_compose_is_deterministic_and_ordered():
    context = _context(days_until_move=5, completed_tasks=("book_movers",))
    prompt = compose_system_prompt(context)
    assert prompt == compose_system_prompt(context)
    assert prompt.startswith("You are a proactive moving concierge helping Dana")

    situation = prompt.index("## CURRENT SITUATION")
    for section in persona.PROMPT_SECTIONS:
        assert prompt.index(section.strip()) < situation
    assert prompt.index(persona.CONVERSATION_TIPS.strip()) > situation
    assert prompt.endswith(persona.CLOSING_REMINDER)
    assert "Completed: book_movers" in prompt
