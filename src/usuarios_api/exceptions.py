"""Domain exceptions raised by services and dependencies.

Services raise these to signal business-rule violations. The classifier in
errors.py translates them into the standard error envelope:
{"timestamp": "...", "status": 404, "code": "...", "message": "...", "errors": {...}}.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist.

    ``message_key`` names a catalog entry (formatted with ``id``) used for the
    localized response; the plain message is the fallback.
    """

    def __init__(self, entity: str, identifier: object, message_key: str | None = None) -> None:
        self.entity = entity
        self.identifier = identifier
        self.message_key = message_key
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""


class AccessDeniedError(DomainError):
    """Raised when the caller lacks the role an operation requires."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Role {role} required")


class ConstraintViolationError(DomainError):
    """Raised for parameter-level rule failures found after request binding.

    ``violations`` maps a property path to a message key; ``args`` carries the
    placeholder values for those keys.
    """

    def __init__(self, violations: dict[str, str], **args: object) -> None:
        self.violations = violations
        self.args_for_messages = args
        super().__init__("Validation failed")
