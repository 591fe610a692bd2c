"""
Domain error kinds raised by repositories and services.

The HTTP layer maps each kind to a status code and a machine-readable
error code; nothing below the route handlers knows about HTTP.
"""


class IdentityError(Exception):
    """Base class for all errors surfaced by the identity core."""

    code: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class NotFoundError(IdentityError):
    """Referenced user or feature flag is absent or soft-deleted."""

    code = "not_found"
    status_code = 404


class AlreadyExistsError(IdentityError):
    """Duplicate email or feature flag key."""

    code = "already_exists"
    status_code = 409


class AlreadyAssignedError(IdentityError):
    """The feature flag is already assigned to the user."""

    code = "already_assigned"
    status_code = 409


class ConstraintViolationError(IdentityError):
    """Storage-level integrity failure not caught by a domain check."""

    code = "constraint_violation"
    status_code = 409


class InternalError(IdentityError):
    """Any other storage failure or unexpected condition."""
