"""Error taxonomy for REST resource operations.

Transport failures and decode failures share a common base so that a
resource's ``map_error`` hook can translate either into a domain error.
Neither kind is retried; each failure is raised to the caller exactly once.
"""

from __future__ import annotations


class RestError(Exception):
    """Base exception for every failure raised by this package.

    Attributes:
        resource: The resource path involved (empty until an operation binds it).
        operation: The operation that failed (e.g. ``"get"``, ``"create"``).
        detail: A sanitised description of what went wrong.
    """

    def __init__(
        self,
        detail: str,
        *,
        resource: str = "",
        operation: str = "",
        cause: Exception | None = None,
    ) -> None:
        self.resource = resource
        self.operation = operation
        self.detail = detail
        super().__init__(detail)
        if cause is not None:
            self.__cause__ = cause

    def bind(self, *, resource: str, operation: str) -> RestError:
        """Attach the resource and operation context, keeping existing values."""
        self.resource = self.resource or resource
        self.operation = self.operation or operation
        return self

    def __str__(self) -> str:
        if self.resource or self.operation:
            return f"[{self.resource}] {self.operation} failed: {self.detail}"
        return self.detail


class TransportError(RestError):
    """Raised when the request could not be completed successfully."""


class BadStatusError(TransportError):
    """Raised when the backend answers with a non-2xx status code.

    ``body`` holds the raw response body so that ``map_error`` hooks can
    extract backend error messages.
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        *,
        body: bytes = b"",
        resource: str = "",
        operation: str = "",
        cause: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(
            detail or f"unexpected status {status_code}",
            resource=resource,
            operation=operation,
            cause=cause,
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConnectionFailedError(TransportError):
    """Raised when the backend cannot be reached."""


class RequestTimeoutError(TransportError):
    """Raised when the request exceeds the transport's timeout."""


class DecodeError(RestError):
    """Raised when a response body does not match the expected shape.

    ``path`` is the dotted location of the offending value inside the
    body, e.g. ``data.0.id``. An empty path means the document root.
    """

    def __init__(
        self,
        detail: str,
        *,
        path: str = "",
        resource: str = "",
        operation: str = "",
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        super().__init__(detail, resource=resource, operation=operation, cause=cause)

    def at(self, segment: str | int) -> DecodeError:
        """Prefix ``segment`` onto the error path and return self."""
        self.path = f"{segment}.{self.path}" if self.path else str(segment)
        return self

    def __str__(self) -> str:
        detail = f"{self.detail} (at {self.path})" if self.path else self.detail
        if self.resource or self.operation:
            return f"[{self.resource}] {self.operation} failed: {detail}"
        return detail
