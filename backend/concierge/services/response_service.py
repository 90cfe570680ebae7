# /concierge/services/response_service.py

import logging
from typing import Any, Dict, List, Optional

from concierge.config import rules
from concierge.config.settings import settings
from concierge.models.api import ChatResponse, SuggestedAction
from concierge.models.context import UserContext
from concierge.services.classifier_service import TextClassifier, text_classifier
from concierge.utils.metrics import response_validation_counter

# Turns raw model text into the structured chat response and checks the
# reply's quality. Validation problems are logged and counted, never blocking.

logger = logging.getLogger(__name__)


def clean_text(text: Optional[str]) -> str:
    if not text:
        return ""
    cleaned = text.strip()
    cleaned = rules.MARKUP_TAG_RE.sub("", cleaned)
    cleaned = rules.INLINE_WHITESPACE_RE.sub(" ", cleaned)
    cleaned = rules.REPEATED_PERIODS_RE.sub(".", cleaned)
    cleaned = rules.EXCESS_NEWLINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def detect_context_usage(text: str, context: UserContext) -> List[str]:
    """Which context fields the reply appears to draw on (observability only)."""
    factors = []
    lowered = text.lower()

    if context.user_name and context.user_name != "there" and context.user_name.lower() in lowered:
        factors.append("userName")
    if context.origin_city and context.origin_city.lower() in lowered:
        factors.append("originCity")
    if context.destination_city and context.destination_city.lower() in lowered:
        factors.append("destinationCity")
    if rules.TIMELINE_RE.search(text):
        factors.append("timeline")
    if rules.DISTANCE_RE.search(text):
        factors.append("moveDistance")
    if rules.BUDGET_RE.search(text):
        factors.append("budget")
    if context.has_kids and rules.KIDS_RE.search(text):
        factors.append("hasKids")
    if context.has_pets and rules.PETS_RE.search(text):
        factors.append("hasPets")
    if rules.BEDROOMS_RE.search(text):
        factors.append("bedrooms")
    return factors


class ResponseService:
    def __init__(self, classifier: TextClassifier = text_classifier, pitch_threshold: Optional[int] = None):
        self.classifier = classifier
        self.pitch_threshold = pitch_threshold or settings.pitch_match_threshold

    def pitch_delivered(self, text: str, context: UserContext) -> bool:
        # One-shot: once heard, the flag is never re-evaluated
        if context.heard_accountability_pitch:
            return False
        return self.classifier.pitch_indicator_count(text) >= self.pitch_threshold

    def extract_suggested_actions(self, text: str) -> List[SuggestedAction]:
        actions = []
        if self.classifier.is_quote_offer(text):
            actions.append(SuggestedAction(
                type="book_vendor",
                vendor_category=self.classifier.primary_vendor(text),
                metadata={"suggested": True},
            ))
        task_id = self.classifier.offered_task(text)
        if task_id:
            actions.append(SuggestedAction(type="show_info", task_id=task_id, metadata={"suggested": True}))
        if "?" in text:
            actions.append(SuggestedAction(type="ask_question", metadata={"hasQuestion": True}))
        return actions

    def interpret(self, raw_text: Optional[str], context: UserContext) -> ChatResponse:
        """
        Parse a model reply into {text, suggestedActions, stateUpdates, internalNotes}.

        State updates only ever move forward: the pitch flag is set once, vendor
        interactions are marked mentioned, and completions are reported only
        for tasks not already completed.
        """
        text = clean_text(raw_text)
        state_updates: Dict[str, Any] = {}

        if self.pitch_delivered(text, context):
            state_updates["heardAccountabilityPitch"] = True

        interactions = {}
        for vendor in self.classifier.booking_offers(text):
            interactions[vendor] = {**(context.vendor_interactions.get(vendor) or {}), "mentioned": True}
        if interactions:
            state_updates["vendorInteractions"] = interactions

        completions = [
            task for task in self.classifier.completed_tasks(context.message)
            if task not in context.completed_tasks
        ]
        if completions:
            state_updates["completedTasks"] = completions

        return ChatResponse(
            text=text,
            suggested_actions=self.extract_suggested_actions(text),
            state_updates=state_updates,
            internal_notes={
                "workflowUsed": context.current_task,
                "vendorsSurfaced": self.classifier.vendor_mentions(text),
                "contextFactorsApplied": detect_context_usage(text, context),
            },
        )

    def validate(self, text: str) -> List[str]:
        """Quality issues in a reply; an empty list means it passed."""
        issues = []
        for pattern in rules.ROBOTIC_PHRASES:
            if pattern.search(text):
                issues.append(f"robotic_phrase: {pattern.pattern}")

        if "?" not in text and not rules.ACTION_WORDS_RE.search(text):
            issues.append("not_proactive")

        if len(text) < rules.MIN_REPLY_LENGTH:
            issues.append("too_short")
        if len(text) > rules.MAX_REPLY_LENGTH:
            issues.append("too_long")
        return issues

    def log_validation(self, text: str, user_id: Optional[str]) -> List[str]:
        issues = self.validate(text)
        for issue in issues:
            response_validation_counter.labels(issue=issue.split(":")[0]).inc()
        if issues:
            logger.warning(f"Reply for user {user_id} failed quality checks: {issues}")
        return issues


# Globally accessible instance
response_service = ResponseService()
