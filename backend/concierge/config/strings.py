# /concierge/config/strings.py

# This file contains all user-facing strings, making them easy to manage,
# update, and eventually localize without changing application logic.

# Chat turn
EMPTY_MESSAGE_NUDGE = "What's on your mind about the move?"
SLOW_DOWN = "You're moving fast! Give me a moment to catch up. Try again in a few seconds."

# Provider failures
PROVIDER_RATE_LIMITED = "I'm getting a lot of requests right now. Give me a sec and try again?"
PROVIDER_TIMEOUT = "Give me just a second - I want to make sure I get this right. Mind trying that again?"
PROVIDER_UNAVAILABLE = "Something's not working on my end right now. Can you try again in a minute?"
PROVIDER_AUTH_FAILURE = "Having a technical issue on my end. The team's been notified."
PROVIDER_UNKNOWN_FAILURE = "Something went sideways. Try sending that again?"
UNEXPECTED_FAILURE = "Something went sideways on my end. Mind trying that again?"

# Workflow submissions
SUBMISSION_FAILED = "Failed to submit answers"
MINI_ASSESSMENT_TASK_SUBTITLE = "Update your address"

# Workflow recap defaults
DEFAULT_RECAP_TITLE = "Ready to submit"
DEFAULT_RECAP_CLOSING = "We'll get back to you soon."
DEFAULT_RECAP_BUTTON = "Submit"
