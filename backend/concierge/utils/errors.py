# /concierge/utils/errors.py

# Caller-facing error taxonomy. Each error carries a stable code that the
# exception handler in main.py renders; raw exception text never leaves the
# process.


class ConciergeError(Exception):
    code = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ConciergeError):
    """A chat turn is missing message, userState or userId."""
    code = "invalid-request"
    status_code = 400


class InvalidArgumentError(ConciergeError):
    code = "invalid-argument"
    status_code = 400


class NotFoundError(ConciergeError):
    code = "not-found"
    status_code = 404


class InternalError(ConciergeError):
    code = "internal"
    status_code = 500
