"""Domain exceptions raised by services and dependencies.

Each class carries the HTTP status and machine-readable code it maps to.
The handler in main.py turns any of them into the standard error envelope:
{"error": {"code": "...", "message": "..."}}. The client package raises the
same classes when the API answers with the matching status.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    status_code = 400
    code = "domain_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Missing or malformed input."""

    status_code = 400
    code = "validation_error"


class AuthenticationError(DomainError):
    """No session, or the session token is invalid or expired."""

    status_code = 401
    code = "unauthorized"


class AuthorizationError(DomainError):
    """Valid session whose role may not perform the operation."""

    status_code = 403
    code = "forbidden"


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate email)."""

    status_code = 409
    code = "conflict"


class TransientStoreError(DomainError):
    """Connectivity or query failure in the record store."""

    status_code = 500
    code = "store_error"

    def __init__(self, message: str = "Data store unavailable") -> None:
        super().__init__(message)


ERRORS_BY_STATUS: dict[int, type[DomainError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    409: ConflictError,
}
