"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP
responses by the centralized exception handlers in main.py, so services and
the authentication module stay HTTP-agnostic (usable from init_db.py and
other scripts).

Every exception carries the request correlation ID so that the error a
citizen reports can be found in the logs.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class AlreadyExistsException(DomainException):
    """Raised when trying to create a resource that already exists."""

    pass


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


# Specific exceptions for domain entities


class UserNotFoundException(NotFoundException):
    """User not found."""

    pass


class UserAlreadyExistsException(AlreadyExistsException):
    """A user with this email is already registered."""

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class ComplaintNotFoundException(NotFoundException):
    """Complaint not found."""

    def __init__(self, complaint_id: int):
        super().__init__(f"Complaint with ID {complaint_id} not found")
        self.complaint_id = complaint_id


class DepartmentNotFoundException(NotFoundException):
    """Department not found."""

    pass


class DepartmentAlreadyExistsException(AlreadyExistsException):
    """Department code or name already taken."""

    def __init__(
        self, message: str = "Department with this code or name already exists"
    ):
        super().__init__(message)


class InvalidCredentialsException(AuthenticationException):
    """Invalid email or password."""

    pass


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have sufficient permissions."""

    pass


# ============================================================================
# Complaint lifecycle exceptions
# ============================================================================


class InvalidTransitionException(BusinessRuleException):
    """A lifecycle change was requested while its precondition does not hold."""

    pass


class AcceptanceAlreadyDecidedException(InvalidTransitionException):
    """The department has already accepted or rejected the complaint."""

    def __init__(self) -> None:
        super().__init__("The department has already decided on this complaint")


class DepartmentNotAcceptedException(InvalidTransitionException):
    """Work-phase action attempted before the department accepted the complaint."""

    def __init__(self, action: str) -> None:
        super().__init__(
            f"Cannot {action} before the department has accepted the complaint"
        )
        self.action = action


class InvalidImageException(ValidationException):
    """An uploaded file is not an acceptable image."""

    pass
