# /concierge/services/classifier_service.py

from typing import List, Optional, Protocol, runtime_checkable

from concierge.config import rules

# Phrase heuristics over assistant replies and user messages. They depend on
# how the model happens to phrase things, so the response service only sees
# the TextClassifier interface and the regex tables can be tuned or replaced
# without touching the pipeline.


@runtime_checkable
class TextClassifier(Protocol):
    def vendor_mentions(self, text: str) -> List[str]:
        ...

    def pitch_indicator_count(self, text: str) -> int:
        ...

    def booking_offers(self, text: str) -> List[str]:
        ...

    def completed_tasks(self, user_message: str) -> List[str]:
        ...

    def is_quote_offer(self, text: str) -> bool:
        ...

    def primary_vendor(self, text: str) -> Optional[str]:
        ...

    def offered_task(self, text: str) -> Optional[str]:
        """Task the reply invites the user to start, if any."""
        ...


class RegexTextClassifier:
    """Default classifier backed by the tables in config.rules."""

    def vendor_mentions(self, text: str) -> List[str]:
        return [category for category, pattern in rules.VENDOR_MENTION_RULES if pattern.search(text)]

    def pitch_indicator_count(self, text: str) -> int:
        return sum(1 for pattern in rules.PITCH_INDICATORS if pattern.search(text))

    def booking_offers(self, text: str) -> List[str]:
        return [vendor for vendor, pattern in rules.BOOKING_OFFER_RULES if pattern.search(text)]

    def completed_tasks(self, user_message: str) -> List[str]:
        return [task for task, pattern in rules.TASK_COMPLETION_RULES if pattern.search(user_message)]

    def is_quote_offer(self, text: str) -> bool:
        return bool(rules.QUOTE_OFFER_RE.search(text))

    def primary_vendor(self, text: str) -> Optional[str]:
        for vendor, pattern in rules.PRIMARY_VENDOR_RULES:
            if pattern.search(text):
                return vendor
        return None

    def offered_task(self, text: str) -> Optional[str]:
        if not rules.TASK_OFFER_RE.search(text):
            return None
        reference = rules.TASK_REFERENCE_RE.search(text)
        return reference.group(2) if reference else None


# Globally accessible instance
text_classifier = RegexTextClassifier()
