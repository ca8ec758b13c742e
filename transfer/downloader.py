"""Chunked download state machine: begin -> {fetch part}* -> finish."""

from typing import Optional

from common import compression
from common.exceptions import (
    CorruptPayloadError,
    IntegrityError,
    InvalidArgumentError,
    TransferStalledError,
)
from common.hash_validator import IncrementalHashCalculator, hashes_match
from common.logging_config import get_logger
from common.types import FileRecord
from transfer.service import CancelPredicate, FileService, ProgressCallback
from transfer.settings import TransferSettings

logger = get_logger(__name__)


class ChunkedDownloader:
    """
    Pulls a file body from the service in parts of at most ``part_size`` bytes.

    The loop is driven by the declared ``body_length``: each part is requested
    at the current accumulated offset and appended as received, so a short
    part simply leads to one more request.
    """

    def __init__(self, service: FileService, settings: TransferSettings):
        self.service = service
        self.settings = settings

    def download(
        self,
        session_id: str,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> bool:
        """
        Download the body of ``record`` and attach it to the record.

        Args:
            session_id: Session used for the begin call
            record: Record with ``id`` and ``body_length`` set
            progress: Called with the accumulated byte count after each part
            cancel: Polled before each part; returning True aborts the transfer

        Returns:
            True when the body is populated, False when cancelled

        Raises:
            InvalidArgumentError: If record is None
            IntegrityError: If hash verification is enabled and fails
            TransferStalledError: If the service returns an empty part early
            ServiceError: If the service rejects a call
        """
        if record is None:
            raise InvalidArgumentError("record")

        if record.body is not None:
            return True

        use_compression = self.settings.use_compression
        operation_id = self.service.begin_download(session_id, record.id, use_compression)
        logger.info(
            f"Download started [file_id={record.id}, op={operation_id}, "
            f"length={record.body_length}, compression={use_compression}]"
        )

        body = bytearray()
        calculator = IncrementalHashCalculator() if self.settings.verify_download_hash else None

        while len(body) < record.body_length:
            if cancel is not None and cancel():
                self.service.finish_download(operation_id, True)
                logger.warning(
                    f"Download cancelled [file_id={record.id}, op={operation_id}, "
                    f"received={len(body)}/{record.body_length}]"
                )
                return False

            part = self.service.download_part(operation_id, len(body), self.settings.part_size)

            if use_compression:
                try:
                    part = compression.decompress(part)
                except CorruptPayloadError:
                    self.service.finish_download(operation_id, True)
                    logger.error(
                        f"Corrupt part received [file_id={record.id}, op={operation_id}, offset={len(body)}]"
                    )
                    raise

            if not part:
                self.service.finish_download(operation_id, True)
                raise TransferStalledError(operation_id, len(body), record.body_length)

            body.extend(part)
            if calculator is not None:
                calculator.update(part)

            logger.debug(f"Received part [op={operation_id}, size={len(part)}, total={len(body)}]")

            if progress is not None:
                progress(len(body))

        if len(body) > record.body_length:
            logger.warning(
                f"Service sent more bytes than declared [file_id={record.id}, "
                f"received={len(body)}, declared={record.body_length}]"
            )
            record.body_length = len(body)

        server_hash = self.service.finish_download(operation_id, False)

        record.body = bytes(body)
        logger.info(f"Download finished [file_id={record.id}, op={operation_id}, size={len(body)}]")

        if calculator is not None:
            if body:
                actual = calculator.finalize()
                if not hashes_match(server_hash, actual):
                    logger.error(
                        f"Download hash mismatch [file_id={record.id}, "
                        f"expected={server_hash}, actual={actual}]"
                    )
                    raise IntegrityError(server_hash, actual)
            else:
                logger.debug(f"Skipping hash check for empty body [file_id={record.id}]")

        return True
