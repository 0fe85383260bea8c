"""Domain errors for the admin panel."""


class ActaAdminError(Exception):
    """Base class for admin panel errors."""


class ValidationError(ActaAdminError):
    """Missing or malformed input."""


class NotFoundError(ActaAdminError):
    """The operation targets a record that does not exist."""


class AdminConflictError(ActaAdminError):
    """Attempt to authorize a sender that is already an administrator."""


class PersistenceError(ActaAdminError):
    """The underlying store was unreachable or rejected a query."""
