# /concierge/services/prompt_service.py

from typing import List, Optional

from concierge.config import persona
from concierge.models.context import UserContext

# Builds the system prompt for one chat turn: static policy sections from
# config.persona plus a "current situation" section rendered from the
# UserContext. Rendering is deterministic; the same context always yields
# the same prompt.

_SURFACING_HINTS = {
    "direct": "mention directly",
    "inform": "inform if relevant",
    "plant_seed": "plant a seed only",
}


def _or(value: Optional[object], fallback: str = "?") -> str:
    return fallback if value is None or value == "" else str(value)


def render_current_situation(context: UserContext) -> str:
    sections: List[str] = []

    days = "?" if context.days_until_move is None else str(context.days_until_move)
    sections.append(
        "## CURRENT SITUATION\n\n"
        f"User: {context.user_name}\n"
        f"Move Date: {_or(context.move_date, 'Not set')} ({days} days away)\n"
        f"Move Type: {context.move_distance} move\n"
        f"From: {_or(context.origin_city)}, {_or(context.origin_state)} ({_or(context.origin_bedrooms)})\n"
        f"To: {_or(context.destination_city)}, {_or(context.destination_state)}"
    )

    if context.days_until_move is not None:
        if context.days_until_move <= 7:
            sections.append(
                f"URGENCY: Only {context.days_until_move} days until move. Focus on critical tasks only."
            )
        elif context.days_until_move <= 14:
            sections.append(f"TIMELINE: {context.days_until_move} days is tight. Prioritize ruthlessly.")

    if context.has_kids or context.has_pets:
        line = f"Household: {_or(context.household_size)} people"
        if context.has_kids:
            line += " (has kids)"
        if context.has_pets:
            line += f" (has pets: {', '.join(context.pet_types) or 'unspecified'})"
        sections.append(line)

    if context.destination_year_built is not None and context.destination_year_built < 1970:
        note = f"Property Note: Destination is a {context.destination_year_built} build"
        if context.destination_notes:
            note += f' - "{context.destination_notes}"'
        sections.append(note + ". Consider planting seeds about contractor connections.")

    if context.special_items:
        sections.append(f"Special Items: {', '.join(context.special_items)} - may need specialty movers.")

    if context.completed_tasks:
        sections.append(f"Completed: {', '.join(context.completed_tasks)}")
    if context.pending_tasks:
        sections.append(f"Pending: {', '.join(context.pending_tasks)}")

    if context.heard_accountability_pitch:
        sections.append("Note: User has already heard the accountability pitch. Don't repeat it in full.")

    if context.current_task:
        sections.append(f"Currently Working On: {context.current_task}")

    if context.budget:
        line = f"Budget: {context.budget}"
        if context.budget.lower() == "tight":
            line += " - prioritize cost-effective options"
        sections.append(line)

    if context.move_date_type == "Out Before In" or context.needs_storage:
        sections.append("MOVE TYPE: User moves out before moving in. May need temporary storage or housing.")

    if context.relevant_vendors:
        lines = []
        for rv in context.relevant_vendors:
            name = rv.vendor or rv.task
            hint = f", {_SURFACING_HINTS[rv.surfacing_style]}" if rv.surfacing_style else ""
            lines.append(f"- {name}: {rv.reason} ({rv.priority} priority{hint})")
        sections.append("Relevant Services:\n" + "\n".join(lines))

    return "\n\n".join(sections)


def compose_system_prompt(context: UserContext) -> str:
    """Full instruction text for the model for this turn."""
    parts = [persona.SYSTEM_PROMPT_OPENING_TEMPLATE.format(user_name=context.user_name)]
    parts.extend(section.strip() for section in persona.PROMPT_SECTIONS)
    parts.append(render_current_situation(context))
    parts.append(persona.CONVERSATION_TIPS.strip())
    parts.append(persona.CLOSING_REMINDER)
    return "\n\n".join(parts)
