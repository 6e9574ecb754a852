"""Custom exception classes for connection resolution."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base package exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details so hosting layers can render them.

    Attributes:
        status_code: HTTP-equivalent status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=422,
            detail="Sort 'PRICE_ASC' is not declared",
            type="unknown-sort",
            extra={"sort": "PRICE_ASC"},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize package exception.

        Args:
            status_code: HTTP-equivalent status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for a status code.

        Args:
            status_code: HTTP-equivalent status code.

        Returns:
            Human-readable title for the status code.
        """
        titles = {
            400: "Bad Request",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")

    def to_problem(self) -> dict[str, Any]:
        """Render the exception as an RFC 7807 problem details mapping."""
        problem: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
        }
        if self.instance:
            problem["instance"] = self.instance
        problem.update(self.extra)
        return problem


class ConnectionConfigurationError(AppException):
    """Raised while wiring a connection resolver, before any query runs.

    Example:
        raise ConnectionConfigurationError(
            detail="Type 'Product' has no operation named 'count'",
            extra={"type_name": "Product", "operation": "count"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "connection-configuration-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type=type,
            title="Connection Configuration Error",
            instance=instance,
            extra=extra,
        )


class ValidationException(AppException):
    """Exception raised for validation errors.

    Example:
        raise ValidationException(
            detail="Argument 'first' must be non-negative",
            extra={"argument": "first", "value": -1},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            instance=instance,
            extra=extra,
        )


class InvalidPaginationArgsError(ValidationException):
    """Raised when `first` or `last` is negative or above the configured maximum."""

    def __init__(
        self,
        argument: str,
        value: Any,
        instance: str | None = None,
        *,
        reason: str = "must be a non-negative integer",
    ) -> None:
        super().__init__(
            detail=f"Argument '{argument}' {reason}, got {value!r}",
            type="invalid-pagination-args",
            instance=instance,
            extra={"argument": argument, "value": value},
        )


class UnknownSortError(ValidationException):
    """Raised when a sort name is not declared in the sort registry."""

    def __init__(
        self,
        sort: str,
        available: list[str],
        instance: str | None = None,
    ) -> None:
        super().__init__(
            detail=f"Unknown sort '{sort}'. Available: {', '.join(available)}",
            type="unknown-sort",
            instance=instance,
            extra={"sort": sort, "available": available},
        )


__all__ = [
    "AppException",
    "ConnectionConfigurationError",
    "InvalidPaginationArgsError",
    "UnknownSortError",
    "ValidationException",
]
