"""Domain error taxonomy.

Services raise these; ``moviehub.main`` renders them into the failure
envelope ``{"success": false, "error": <code>, "message": <text>}``.
"""


class DomainError(Exception):
    """Base class for errors surfaced directly to the caller."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or missing input."""

    status_code = 400
    code = "validation_error"


class NoOp(DomainError):
    """An update was requested without any fields to change."""

    status_code = 400
    code = "no_op"


class InvalidState(DomainError):
    """A state-machine transition was attempted from the wrong state."""

    status_code = 400
    code = "invalid_state"


class Unauthorized(DomainError):
    status_code = 401
    code = "unauthorized"


class Forbidden(DomainError):
    """Authenticated, but not allowed to perform this action."""

    status_code = 403
    code = "forbidden"


class NotFound(DomainError):
    status_code = 404
    code = "not_found"


class Conflict(DomainError):
    """The action would break a uniqueness or membership invariant."""

    status_code = 409
    code = "conflict"
