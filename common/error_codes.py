"""Service status codes and their mapping to exception classes."""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Status codes reported by the file service."""
    OK = 0
    UNKNOWN_SERVER_ERROR = 1
    SESSION_NOT_FOUND = 2
    UNAUTHORIZED_ACCESS = 3
    FILE_NOT_FOUND = 4
    QUOTA_EXCEEDED = 5
    OPERATION_NOT_FOUND = 6
    HASH_MISMATCH = 7

    @classmethod
    def from_value(cls, value: int) -> "ErrorCode":
        """Decode a raw status, folding unknown values into UNKNOWN_SERVER_ERROR."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN_SERVER_ERROR

    @classmethod
    def from_name(cls, name: str) -> "ErrorCode":
        """Decode a status name as sent in HTTP error bodies."""
        return cls.__members__.get((name or "").upper(), cls.UNKNOWN_SERVER_ERROR)


def error_for_code(code: ErrorCode, detail: str | None = None):
    """
    Build the exception matching a non-success status code.

    Args:
        code: Decoded status code (must not be OK)
        detail: Optional human-readable detail from the service

    Returns:
        ServiceError subclass instance
    """
    from common import exceptions

    error_classes = {
        ErrorCode.UNKNOWN_SERVER_ERROR: exceptions.UnknownServerError,
        ErrorCode.SESSION_NOT_FOUND: exceptions.SessionNotFoundError,
        ErrorCode.UNAUTHORIZED_ACCESS: exceptions.UnauthorizedAccessError,
        ErrorCode.FILE_NOT_FOUND: exceptions.RemoteFileNotFoundError,
        ErrorCode.QUOTA_EXCEEDED: exceptions.QuotaExceededError,
        ErrorCode.OPERATION_NOT_FOUND: exceptions.OperationNotFoundError,
        ErrorCode.HASH_MISMATCH: exceptions.ServerHashMismatchError,
    }
    error_class = error_classes.get(code, exceptions.ServiceError)
    return error_class(code, detail)


def raise_for_status(status: int, detail: str | None = None) -> None:
    """
    Raise the matching ServiceError unless ``status`` is OK.

    Args:
        status: Raw status code returned by the service
        detail: Optional detail to attach to the exception

    Raises:
        ServiceError: For any non-OK status
    """
    code = ErrorCode.from_value(status)
    if code is not ErrorCode.OK:
        raise error_for_code(code, detail)
