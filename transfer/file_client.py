"""Public facade for file metadata, transfers, sharing and quota."""

from datetime import datetime, timezone
from typing import Optional

from common.constants import EMPTY_SESSION_ID
from common.exceptions import InvalidArgumentError, NotAuthenticatedError
from common.logging_config import get_logger
from common.types import FileRecord
from transfer.downloader import ChunkedDownloader
from transfer.metadata_cache import MetadataCache
from transfer.service import CancelPredicate, FileService, ProgressCallback, SessionProvider
from transfer.settings import TransferSettings
from transfer.uploader import ChunkedUploader

logger = get_logger(__name__)


class FileTransferClient:
    """
    Client for the remote file service.

    Composes the metadata cache with the chunked uploader and downloader.
    Every operation except metadata lookup needs a session id from
    ``session_provider``; metadata lookup falls back to an anonymous session.
    """

    def __init__(
        self,
        service: FileService,
        session_provider: SessionProvider,
        settings: Optional[TransferSettings] = None,
        cache: Optional[MetadataCache] = None,
    ):
        """
        Initialize the client.

        Args:
            service: Remote file service implementation
            session_provider: Returns the current session id, or None when signed out
            settings: Transfer options (defaults: compression on, no hash check)
            cache: Metadata cache to share between clients (a private one by default)
        """
        self.service = service
        self.session_provider = session_provider
        self.settings = settings or TransferSettings()
        self.cache = cache if cache is not None else MetadataCache()
        self.downloader = ChunkedDownloader(service, self.settings)
        self.uploader = ChunkedUploader(service, self.settings, self.cache)

    def _session_id(self) -> str:
        session_id = self.session_provider()
        if not session_id:
            raise NotAuthenticatedError("No session available. Please run: session <session-id>")
        return session_id

    def get_file_info(self, file_id: int) -> FileRecord:
        """
        Resolve file metadata, consulting the cache first.

        Args:
            file_id: Service-assigned file id

        Returns:
            Cached or freshly fetched record (body may be absent)
        """
        session_id = self.session_provider() or EMPTY_SESSION_ID
        return self.cache.get_or_fetch(
            file_id, lambda key: self.service.get_file_info(session_id, key)
        )

    def get_file(
        self,
        file_id: int,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> FileRecord:
        """
        Resolve metadata and download the body if it is not in memory yet.

        Args:
            file_id: Service-assigned file id
            progress: Called with the accumulated byte count after each part
            cancel: Polled before each part

        Returns:
            The record; ``body`` is None only if the download was cancelled
        """
        record = self.get_file_info(file_id)
        self.download(record, progress, cancel)
        return record

    def download(
        self,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> bool:
        """
        Download the body of ``record`` unless it is already populated.

        Returns:
            True when the body is populated, False when cancelled
        """
        if record is None:
            raise InvalidArgumentError("record")
        if record.body is not None:
            return True
        return self.downloader.download(self._session_id(), record, progress, cancel)

    def update(
        self,
        record: FileRecord,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> bool:
        """
        Replace the content of an existing file with ``record.body``.

        When a different record is cached under the same id, its body, length
        and fingerprint are refreshed so later reads see the new content.

        Returns:
            True on success, False when cancelled

        Raises:
            InvalidArgumentError: If record is None, has no id or has no body
        """
        if record is None:
            raise InvalidArgumentError("record")
        if not record.is_persisted:
            raise InvalidArgumentError("record", "Cannot update a file without an id")
        if not record.body:
            raise InvalidArgumentError("body", "Cannot upload an empty body")

        receipt = self.uploader.upload_existing(self._session_id(), record, progress, cancel)
        if receipt is None:
            return False

        cached = self.cache.get(record.id)
        if cached is not None and cached is not record:
            cached.body = record.body
            cached.body_length = record.body_length
            cached.hash = record.hash
            logger.debug(f"Refreshed cached record after update [file_id={record.id}]")
        return True

    def upload(
        self,
        file_name: str,
        body: bytes,
        is_public: bool = False,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> Optional[FileRecord]:
        """
        Upload a new named file.

        Args:
            file_name: Display name (must be non-empty)
            body: Payload (must be non-empty)
            is_public: Visibility flag stored with the file
            progress: Called with cumulative wire bytes after each part
            cancel: Polled before each part

        Returns:
            The uploaded record with its assigned id, or None when cancelled
        """
        if not file_name:
            raise InvalidArgumentError("file_name")
        if not body:
            raise InvalidArgumentError("body", "Cannot upload an empty body")

        record = FileRecord(
            file_name=file_name,
            body=body,
            body_length=len(body),
            is_public=is_public,
            creation_date=datetime.now(timezone.utc),
        )

        receipt = self.uploader.upload_new(self._session_id(), record, progress, cancel)
        return record if receipt is not None else None

    def upload_temporary(
        self,
        file_name: str,
        body: bytes,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelPredicate] = None,
    ) -> Optional[str]:
        """
        Upload a temporary file.

        Returns:
            The operation id identifying the temporary upload, or None when cancelled
        """
        if not file_name:
            raise InvalidArgumentError("file_name")
        if not body:
            raise InvalidArgumentError("body", "Cannot upload an empty body")

        record = FileRecord(
            file_name=file_name,
            body=body,
            body_length=len(body),
            creation_date=datetime.now(timezone.utc),
        )

        receipt = self.uploader.upload_temporary(self._session_id(), record, progress, cancel)
        return receipt.operation_id if receipt is not None else None

    def get_upload_quota(self) -> int:
        """Return the upload quota, in bytes, granted to the current session."""
        return self.service.get_upload_quota(self._session_id())

    def share(self, file_id: int) -> str:
        """Make a file reachable by link and return the share token."""
        token = self.service.share(self._session_id(), file_id)
        logger.info(f"Shared file [file_id={file_id}]")
        return token

    def unshare(self, file_id: int) -> None:
        """Revoke the share link of a file."""
        self.service.unshare(self._session_id(), file_id)
        logger.info(f"Unshared file [file_id={file_id}]")
