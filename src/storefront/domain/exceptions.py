"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the checkout flow and the CLI layer can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class IdentityError(DomainException):
    """The signed-in identity is missing or malformed."""


class GatewayError(DomainException):
    """The backend could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubmissionError(DomainException):
    """The backend refused to create the order."""
