"""Remote file service interface and finish-upload result decoding."""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

from common.error_codes import ErrorCode
from common.types import FileRecord

ProgressCallback = Callable[[int], None]
CancelPredicate = Callable[[], bool]
SessionProvider = Callable[[], Optional[str]]


class FileService(Protocol):
    """
    Remote operations consumed by the transfer client.

    Each call is delivered exactly once and synchronously; failures surface as
    exceptions raised by the implementation.
    """

    def get_file_info(self, session_id: str, file_id: int) -> FileRecord:
        ...

    def begin_download(self, session_id: str, file_id: int, use_compression: bool) -> str:
        ...

    def download_part(self, operation_id: str, offset: int, max_part_size: int) -> bytes:
        ...

    def finish_download(self, operation_id: str, aborted: bool) -> Optional[str]:
        ...

    def begin_upload_new(
        self,
        session_id: str,
        file_name: str,
        is_public: bool,
        use_compression: bool,
        hash: str,
    ) -> str:
        ...

    def begin_upload_existing(
        self,
        session_id: str,
        file_id: int,
        use_compression: bool,
        hash: str,
    ) -> str:
        ...

    def begin_upload_temporary(
        self,
        session_id: str,
        file_name: str,
        use_compression: bool,
        hash: str,
    ) -> str:
        ...

    def upload_part(self, operation_id: str, data: bytes) -> int:
        ...

    def finish_upload(self, operation_id: str, aborted: bool) -> int:
        ...

    def get_upload_quota(self, session_id: str) -> int:
        ...

    def share(self, session_id: str, file_id: int) -> str:
        ...

    def unshare(self, session_id: str, file_id: int) -> None:
        ...


@dataclass(frozen=True)
class UploadCompleted:
    """The service stored the upload under a permanent id."""
    file_id: int


@dataclass(frozen=True)
class TemporaryUploadCompleted:
    """The service accepted a temporary upload that gets no permanent id."""
    pass


@dataclass(frozen=True)
class UploadRejected:
    """The service refused to finish the upload."""
    code: ErrorCode


FinishUploadResult = Union[UploadCompleted, TemporaryUploadCompleted, UploadRejected]


def decode_finish_result(value: int) -> FinishUploadResult:
    """
    Decode the signed integer returned by finish-upload.

    Negative values carry a negated error code, zero marks a temporary upload
    and positive values are the assigned file id.

    Args:
        value: Raw finish-upload result

    Returns:
        Tagged finish result
    """
    if value < 0:
        return UploadRejected(ErrorCode.from_value(-value))
    if value == 0:
        return TemporaryUploadCompleted()
    return UploadCompleted(value)


@dataclass(frozen=True)
class UploadReceipt:
    """Outcome of a completed upload; ``file_id`` is None for temporary uploads."""
    operation_id: str
    file_id: Optional[int] = None
