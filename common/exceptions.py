"""Exception classes raised by the transfer client."""

from typing import Optional

from common.error_codes import ErrorCode


class TransferException(Exception):
    """
    Base exception class for all transfer-related errors.
    """
    pass


class InvalidArgumentError(TransferException, ValueError):
    """
    Raised when a required argument is missing, empty or zero where a
    persisted id is required. Always raised before any remote call.
    """

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        super().__init__(message or f"Invalid argument: {argument}")


class NotAuthenticatedError(TransferException):
    """
    Raised when an operation needs a session and none is available.
    """
    pass


class TransportError(TransferException, ConnectionError):
    """
    Raised when the remote service cannot be reached.
    """
    pass


class ServiceError(TransferException):
    """
    Raised when the remote service reports a non-success status code.
    """

    def __init__(self, code: ErrorCode, detail: Optional[str] = None):
        self.code = code
        self.detail = detail
        message = f"Service error {code.name} ({int(code)})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnknownServerError(ServiceError):
    """
    Raised when the service fails without a more specific code.
    """
    pass


class SessionNotFoundError(ServiceError):
    """
    Raised when the session id is unknown or expired on the service.
    """
    pass


class UnauthorizedAccessError(ServiceError):
    """
    Raised when the session may not touch the requested file.
    """
    pass


class RemoteFileNotFoundError(ServiceError):
    """
    Raised when a requested file id does not exist on the service.
    """
    pass


class QuotaExceededError(ServiceError):
    """
    Raised when an upload would exceed the session's upload quota.
    """
    pass


class OperationNotFoundError(ServiceError):
    """
    Raised when a transfer operation id is unknown or already finished.
    """
    pass


class ServerHashMismatchError(ServiceError):
    """
    Raised when the service rejects an upload whose content does not match
    the fingerprint announced at begin time.
    """
    pass


class IntegrityError(TransferException):
    """
    Raised when downloaded content does not match the service fingerprint.
    The body has already been assigned to the record when this is raised.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"File hash mismatch: expected {expected}, got {actual}")


class TransferStalledError(TransferException):
    """
    Raised when the service returns an empty part before the declared
    length has been received.
    """

    def __init__(self, operation_id: str, received: int, expected: int):
        self.operation_id = operation_id
        self.received = received
        self.expected = expected
        super().__init__(
            f"Transfer {operation_id} stalled after {received} of {expected} bytes"
        )


class CorruptPayloadError(TransferException):
    """
    Raised when a received part cannot be decoded (e.g. a broken deflate stream).
    """
    pass
