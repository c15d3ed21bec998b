"""
Error hierarchy for the access-request core.

- ValidationError: malformed input, never retried (422)
- ConflictError: duplicate pending request / already decided (409)
- AuthorizationError: actor role or ownership does not permit the action (403)
- NotFoundError: unknown class, request or notification (404)

Services raise these; app.main maps them to HTTP responses in one handler.
"""


class ClassVaultError(Exception):
    """Base class for all ClassVault errors."""

    code = "error"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class ValidationError(ClassVaultError):
    code = "validation_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidFileTypeSet(ValidationError):
    code = "invalid_file_type_set"

    def __init__(self, message: str = "A class needs at least one allowed file type.") -> None:
        super().__init__(message, field="allowed_file_types")


class ConflictError(ClassVaultError):
    code = "conflict"


class DuplicatePendingRequest(ConflictError):
    code = "duplicate_pending"

    def __init__(self, message: str = "You already have a pending request for this class.") -> None:
        super().__init__(message)


class AlreadyDecided(ConflictError):
    code = "already_decided"

    def __init__(self, request_id: str, status: str | None = None) -> None:
        message = "This request has already been reviewed."
        if status:
            message = f"This request has already been reviewed ({status})."
        super().__init__(message)
        self.request_id = request_id
        self.status = status


class AuthorizationError(ClassVaultError):
    code = "forbidden"


class ForbiddenRole(AuthorizationError):
    code = "forbidden_role"

    def __init__(self, action: str, role: str) -> None:
        super().__init__(f"Role {role} may not perform {action}.")
        self.action = action
        self.role = role


class Forbidden(AuthorizationError):
    code = "forbidden"


class NotFoundError(ClassVaultError):
    code = "not_found"


class UnknownClass(NotFoundError):
    code = "unknown_class"

    def __init__(self, class_id: str) -> None:
        super().__init__(f"Class {class_id} does not exist or is archived.")
        self.class_id = class_id


class ClassNotFound(NotFoundError):
    code = "class_not_found"

    def __init__(self, class_id: str) -> None:
        super().__init__("Class not found")
        self.class_id = class_id


class RequestNotFound(NotFoundError):
    code = "request_not_found"

    def __init__(self, request_id: str) -> None:
        super().__init__("Request not found")
        self.request_id = request_id


class NotificationNotFound(NotFoundError):
    code = "notification_not_found"

    def __init__(self, notification_id: str) -> None:
        super().__init__("Notification not found")
        self.notification_id = notification_id
