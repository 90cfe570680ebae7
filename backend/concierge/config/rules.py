# /concierge/config/rules.py

import re

# This file contains the phrase tables used to read assistant replies and user
# messages. Tables are ordered; where only the first hit matters, earlier rows win.

_I = re.IGNORECASE

# Vendor categories mentioned in a reply: (category, pattern)
VENDOR_MENTION_RULES = [
    ("movers", re.compile(r"\b(movers?|moving compan(y|ies))\b", _I)),
    ("internet", re.compile(r"\b(internet|wifi|cable|fiber|broadband)\b", _I)),
    ("cleaning", re.compile(r"\b(clean(ers?|ing)?|maid service)\b", _I)),
    ("storage", re.compile(r"\b(storage|store your stuff)\b", _I)),
    ("junk_removal", re.compile(r"\b(junk removal|haul away|get rid of)\b", _I)),
    ("pet_transport", re.compile(r"\b(pet transport|ship.*pet|pet.*service)\b", _I)),
    ("auto_transport", re.compile(r"\b(car shipping|auto transport|vehicle transport)\b", _I)),
    ("packing_services", re.compile(r"\b(packers?|packing service)\b", _I)),
    ("locksmith", re.compile(r"\b(locksmith|change.*locks?|new locks?)\b", _I)),
    ("plumber", re.compile(r"\b(plumb(er|ing))\b", _I)),
    ("electrician", re.compile(r"\b(electric(ian|al))\b", _I)),
    ("handyman", re.compile(r"\b(handyman|handy.*service)\b", _I)),
    ("piano_moving", re.compile(r"\b(piano.*mov(e|ing)|mov(e|ing).*piano)\b", _I)),
]

# Indicators that the accountability pitch was delivered in a reply
PITCH_INDICATORS = [
    re.compile(r"vendors?\s+know\s+they\s+need\s+to\s+(deliver|perform)", _I),
    re.compile(r"lose\s+access\s+to\s+\w+\s+users?", _I),
    re.compile(r"accountability", _I),
    re.compile(r"consequences\s+if\s+they\s+(mess|screw)\s+up", _I),
    re.compile(r"same\s+services?.*but\s+with\s+(real\s+)?accountability", _I),
    re.compile(r"motivated\s+to\s+(perform|deliver|show\s+up)", _I),
]

# Offers to book something on the user's behalf: (vendor, pattern)
BOOKING_OFFER_RULES = [
    ("movers", re.compile(r"get\s+(some\s+)?quotes?\s+(for\s+)?movers?", _I)),
    ("internet", re.compile(r"set\s+up\s+(your\s+)?internet", _I)),
    ("cleaning", re.compile(r"book\s+(the\s+)?clean(ers?|ing)", _I)),
    ("storage", re.compile(r"get\s+a\s+storage\s+unit", _I)),
    ("junk_removal", re.compile(r"schedule\s+junk\s+removal", _I)),
]

# Completion phrasings in the user's own message: (task id, pattern)
TASK_COMPLETION_RULES = [
    ("book_movers", re.compile(r"movers?\s+(are\s+)?booked", _I)),
    ("internet_setup", re.compile(r"internet\s+is\s+set\s+up", _I)),
    ("mail_forwarding", re.compile(r"forwarding\s+mail", _I)),
    ("landlord_notice", re.compile(r"gave\s+notice", _I)),
    ("voter_registration", re.compile(r"registered\s+to\s+vote", _I)),
]

# Suggested action triggers
QUOTE_OFFER_RE = re.compile(r"want\s+(me\s+to\s+)?(get\s+)?quotes?", _I)
TASK_OFFER_RE = re.compile(r"want\s+to\s+(start|tackle|work\s+on)", _I)
TASK_REFERENCE_RE = re.compile(r"start\s+with\s+(the\s+)?(\w+)", _I)

# First hit wins when tagging a quote offer with a vendor
PRIMARY_VENDOR_RULES = [
    ("movers", re.compile(r"mover", _I)),
    ("internet", re.compile(r"internet|wifi", _I)),
    ("cleaning", re.compile(r"clean", _I)),
    ("storage", re.compile(r"storage", _I)),
    ("junk_removal", re.compile(r"junk", _I)),
    ("piano_moving", re.compile(r"piano", _I)),
]

# Context factors a reply may have drawn on (observability only)
TIMELINE_RE = re.compile(r"\d+\s+(day|week|month)", _I)
DISTANCE_RE = re.compile(r"local|cross[- ]?(state|country)|long[- ]?distance", _I)
BUDGET_RE = re.compile(r"budget|cost|price|cheap|affordable|expensive", _I)
KIDS_RE = re.compile(r"kid|child|school", _I)
PETS_RE = re.compile(r"pet|dog|cat|animal", _I)
BEDROOMS_RE = re.compile(r"bedroom|\d-?bed|\d\s?br", _I)

# Reply quality checks
ROBOTIC_PHRASES = [
    re.compile(r"how can I help", _I),
    re.compile(r"what would you like", _I),
    re.compile(r"let me know if you have questions", _I),
    re.compile(r"I am here to assist", _I),
    re.compile(r"Great question!", _I),
    re.compile(r"I hope this helps", _I),
]
ACTION_WORDS_RE = re.compile(r"want|let's|should|how about|next|first|start", _I)
MIN_REPLY_LENGTH = 20
MAX_REPLY_LENGTH = 2000

# Text cleaning
MARKUP_TAG_RE = re.compile(r"</?[a-z]+>", _I)
INLINE_WHITESPACE_RE = re.compile(r"[^\S\n]+")
REPEATED_PERIODS_RE = re.compile(r"\.{2,}")
EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

# User input sanitizing
HTML_TAG_RE = re.compile(r"<[^>]*>")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
