"""Domain error taxonomy. Transport status codes are assigned in tasktrack.main."""

from typing import Any


class TasktrackError(Exception):
    """Base class for every failure the service core reports to its callers."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(TasktrackError):
    """Field shapes or values rejected; carries field-level detail."""

    default_message = "Validation failed"

    def __init__(self, message: str | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class AuthError(TasktrackError):
    """Any authentication failure. All subclasses surface as one generic 401."""

    default_message = "Not authenticated"


class InvalidCredentials(AuthError):
    """Unknown identifier or wrong secret; the two causes are never distinguished."""

    default_message = "Invalid credentials"


class AuthRequired(AuthError):
    """Missing, malformed or tampered token, or a token for an account that no longer exists."""


class AuthExpired(AuthError):
    default_message = "Token expired"


class AccountFrozen(AuthError):
    default_message = "Account frozen"


class Forbidden(TasktrackError):
    """Authorization denial. Never says why."""

    default_message = "Forbidden"


class ProtectedAccount(TasktrackError):
    """Role change, freeze or deletion attempted against the primordial admin."""

    default_message = "Protected account"

    def __init__(self, message: str | None = None, actor_is_admin: bool = False) -> None:
        self.actor_is_admin = actor_is_admin
        super().__init__(message)


class NotFound(TasktrackError):
    default_message = "Not found"

    def __init__(self, resource: str = "Resource") -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class DuplicateIdentity(TasktrackError):
    default_message = "Email or username already taken"


class StoreUnavailable(TasktrackError):
    """The store timed out or dropped the connection twice in a row; safe to retry later."""

    default_message = "Service temporarily unavailable"
