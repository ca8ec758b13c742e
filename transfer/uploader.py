"""Chunked upload state machine: begin -> {send part}* -> finish."""

from typing import Callable, Iterator, Optional

from common import compression
from common.error_codes import error_for_code, raise_for_status
from common.exceptions import InvalidArgumentError
from common.hash_validator import compute_hash
from common.logging_config import get_logger
from common.types import FileRecord
from transfer.metadata_cache import MetadataCache
from transfer.service import (
    CancelPredicate,
    FileService,
    ProgressCallback,
    TemporaryUploadCompleted,
    UploadReceipt,
    UploadRejected,
    decode_finish_result,
)
from transfer.settings import TransferSettings

logger = get_logger(__name__)


def iter_parts(data: bytes, part_size: int) -> Iterator[bytes]:
    """Split ``data`` into consecutive slices of at most ``part_size`` bytes."""
    for offset in range(0, len(data), part_size):
        yield data[offset:offset + part_size]


class ChunkedUploader:
    """
    Pushes a record body to the service in parts of at most ``part_size`` bytes.

    New, existing and temporary uploads share the transfer loop and differ
    only in the begin call. When compression is negotiated the whole body is
    deflated once and the compressed stream is what gets split into parts.
    """

    def __init__(self, service: FileService, settings: TransferSettings, cache: MetadataCache):
        self.service = service
        self.settings = settings
        self.cache = cache

    def upload_new(
        self,
        session_id: str,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> Optional[UploadReceipt]:
        """Upload ``record`` as a new named file."""
        self._check_record(record)
        if not record.file_name:
            raise InvalidArgumentError("file_name")

        return self._upload(
            record,
            lambda hash: self.service.begin_upload_new(
                session_id, record.file_name, record.is_public, self.settings.use_compression, hash
            ),
            progress,
            cancel,
        )

    def upload_existing(
        self,
        session_id: str,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> Optional[UploadReceipt]:
        """Replace the content of the persisted file ``record.id``."""
        self._check_record(record)
        if not record.is_persisted:
            raise InvalidArgumentError("record", "Cannot update a file without an id")

        return self._upload(
            record,
            lambda hash: self.service.begin_upload_existing(
                session_id, record.id, self.settings.use_compression, hash
            ),
            progress,
            cancel,
        )

    def upload_temporary(
        self,
        session_id: str,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> Optional[UploadReceipt]:
        """Upload ``record`` as a temporary file that receives no permanent id."""
        self._check_record(record)
        if not record.file_name:
            raise InvalidArgumentError("file_name")

        return self._upload(
            record,
            lambda hash: self.service.begin_upload_temporary(
                session_id, record.file_name, self.settings.use_compression, hash
            ),
            progress,
            cancel,
        )

    @staticmethod
    def _check_record(record: FileRecord) -> None:
        if record is None:
            raise InvalidArgumentError("record")
        if not record.body:
            raise InvalidArgumentError("body", "Cannot upload an empty body")

    def _upload(
        self,
        record: FileRecord,
        begin: Callable[[str], str],
        progress: Optional[ProgressCallback],
        cancel: Optional[CancelPredicate],
    ) -> Optional[UploadReceipt]:
        """
        Run the begin/part/finish sequence for one upload.

        Args:
            record: Record carrying the body to send
            begin: Issues the variant-specific begin call for a fingerprint
            progress: Called with cumulative wire bytes after each part
            cancel: Polled before each part

        Returns:
            UploadReceipt on success, None when cancelled

        Raises:
            ServiceError: If a part or the finish call is rejected
        """
        hash = compute_hash(record.body)
        record.hash = hash

        operation_id = begin(hash)
        logger.info(
            f"Upload started [file_id={record.id}, name={record.file_name}, op={operation_id}, "
            f"length={len(record.body)}, compression={self.settings.use_compression}]"
        )

        payload = record.body
        if self.settings.use_compression:
            payload = compression.compress(payload)

        sent = 0
        for part in iter_parts(payload, self.settings.part_size):
            if cancel is not None and cancel():
                self.service.finish_upload(operation_id, True)
                logger.warning(f"Upload cancelled [op={operation_id}, sent={sent}/{len(payload)}]")
                return None

            status = self.service.upload_part(operation_id, part)
            raise_for_status(status, f"part upload rejected [op={operation_id}, offset={sent}]")

            sent += len(part)
            logger.debug(f"Sent part [op={operation_id}, size={len(part)}, total={sent}]")

            if progress is not None:
                progress(sent)

        result = decode_finish_result(self.service.finish_upload(operation_id, False))

        if isinstance(result, UploadRejected):
            logger.warning(f"Upload rejected [op={operation_id}, code={result.code.name}]")
            raise error_for_code(result.code, f"upload finish rejected [op={operation_id}]")

        if isinstance(result, TemporaryUploadCompleted):
            logger.info(f"Temporary upload finished [op={operation_id}, size={sent}]")
            return UploadReceipt(operation_id)

        if not record.is_persisted:
            record.id = result.file_id

        self.cache.insert_if_absent(result.file_id, record)
        logger.info(f"Upload finished [file_id={result.file_id}, op={operation_id}, size={sent}]")
        return UploadReceipt(operation_id, result.file_id)
