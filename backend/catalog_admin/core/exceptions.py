"""Custom exception classes for the application."""

import functools
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class CatalogError(Exception):
    """Base exception for all catalog errors.

    ``status_code`` is the HTTP status the API layer answers with.
    """

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Raised when a request field is missing, malformed or references nothing."""

    status_code = 400


class ConflictError(CatalogError):
    """Raised when a write would break a uniqueness rule."""

    status_code = 400


class NotFoundError(CatalogError):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with id '{identifier}' not found")


class InternalError(CatalogError):
    """Raised when the store fails unexpectedly."""

    status_code = 500


class ApiClientError(CatalogError):
    """Raised by the API client when the server answers with an error.

    The server's ``error`` string is kept verbatim in ``message``.
    """

    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)


def translate_store_errors(func: F) -> F:
    """Turn ``SQLAlchemyError`` raised by a service method into ``InternalError``.

    The service's session is rolled back first so the request-scoped
    session is left usable. Domain errors pass through untouched.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(
                "store_operation_failed",
                operation=func.__qualname__,
                error=str(e),
                exc_info=True,
            )
            await self.db.rollback()
            raise InternalError(str(e)) from e

    return wrapper  # type: ignore[return-value]
