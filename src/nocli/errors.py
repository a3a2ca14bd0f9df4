"""Error hierarchy for nocli.

Every public error class inherits from NocliError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Data-shape anomalies in private API responses (missing tables, empty
records, absent children) are never raised; only input, configuration
and transport failures are.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error nocli can raise."""

    INVALID_INPUT = "INVALID_INPUT"
    INVALID_ID = "INVALID_ID"
    CONFIG_ERROR = "CONFIG_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    HTTP_STATUS = "HTTP_STATUS"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DECODE_ERROR = "DECODE_ERROR"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NocliError(Exception):
    """Base exception for all nocli errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        An operator-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Input / configuration errors
# ---------------------------------------------------------------------------

class NocliInputError(NocliError):
    """Operator input could not be used (blank paste, no auth values found).

    Context keys: ``source``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.INVALID_INPUT,
    ) -> None:
        super().__init__(code=code, message=message, context=context, cause=cause)


class NocliInvalidIdError(NocliInputError):
    """No 32-hex identifier could be extracted from a URL or ID argument.

    Context keys: ``input``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_ID,
        )


class NocliConfigError(NocliError):
    """The credential file could not be read, parsed or written.

    Context keys: ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------

class NocliNetworkError(NocliError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``endpoint``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NocliStatusError(NocliError):
    """The private API answered with a status outside 200-299.

    Context keys: ``endpoint``, ``status_code``, ``body`` (truncated).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.HTTP_STATUS,
    ) -> None:
        super().__init__(code=code, message=message, context=context, cause=cause)

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")


class NocliAuthError(NocliStatusError):
    """401: the session cookie is missing, invalid or expired."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context, cause, code=ErrorCode.AUTH_ERROR)


class NocliPermissionError(NocliStatusError):
    """403: the signed-in user cannot access the requested record."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context, cause, code=ErrorCode.PERMISSION_ERROR)


class NocliNotFoundError(NocliStatusError):
    """404: the endpoint or record does not exist."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, context, cause, code=ErrorCode.NOT_FOUND)


class NocliDecodeError(NocliError):
    """A 2xx response body was not a JSON object.

    Context keys: ``endpoint``, ``status_code``, ``body`` (truncated).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Command errors
# ---------------------------------------------------------------------------

class NocliRecordNotFoundError(NocliError):
    """A command needed a specific record and the response held none.

    Context keys: ``table``, ``record_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RECORD_NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )
