"""Custom exceptions for the Central.IA backend."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Exception type -> safe user-facing message mapping
_SAFE_MESSAGES: dict[str, str] = {
    "LeadNotFoundError": "Lead não encontrado.",
    "NotFoundError": "O recurso solicitado não foi encontrado.",
    "AuthenticationError": "Falha na autenticação. Faça login novamente.",
    "ValidationError": "Os dados informados são inválidos.",
    "DatabaseError": "Erro ao acessar o banco de dados. Tente novamente.",
    "ValueError": "O valor informado é inválido.",
}

_DEFAULT_MESSAGE = "Ocorreu um erro. Tente novamente."


def sanitize_error(e: Exception) -> str:
    """Map an exception to a safe, user-facing error message.

    Walks the exception's MRO so subclasses inherit the message of the
    closest mapped ancestor.

    Args:
        e: The exception to sanitize.

    Returns:
        A safe, generic error message string.
    """
    for cls in type(e).__mro__:
        safe_msg = _SAFE_MESSAGES.get(cls.__name__)
        if safe_msg:
            return safe_msg

    return _DEFAULT_MESSAGE


class CentralIAException(Exception):
    """Base exception for all Central.IA errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status code.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(CentralIAException):
    """Resource not found error (404)."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        """Initialize not found error.

        Args:
            resource: Name of the resource that was not found.
            resource_id: Optional ID of the resource.
        """
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
        )


class LeadNotFoundError(NotFoundError):
    """Lead not found for the requesting owner."""

    def __init__(self, lead_id: str) -> None:
        super().__init__("Lead", lead_id)


class AuthenticationError(CentralIAException):
    """Authentication failed error (401)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=401,
        )


class ValidationError(CentralIAException):
    """Input validation error (400)."""

    def __init__(
        self, message: str, field: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        """Initialize validation error.

        Args:
            message: Error message.
            field: Name of the invalid field.
            details: Additional validation details.
        """
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=error_details,
        )


class DatabaseError(CentralIAException):
    """Data store rejected a select/insert/update/delete (502)."""

    def __init__(self, message: str = "A database error occurred") -> None:
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=502,
        )
