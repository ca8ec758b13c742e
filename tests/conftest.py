"""Shared pytest fixtures for all tests."""

import hashlib
import threading
import time
import uuid
from datetime import datetime, timezone

import pytest

from cli.config import Config
from common import compression
from common.error_codes import ErrorCode
from common.exceptions import OperationNotFoundError, RemoteFileNotFoundError
from common.types import FileRecord
from transfer.file_client import FileTransferClient
from transfer.settings import TransferSettings

SESSION_ID = "session-1"


class InMemoryFileService:
    """
    Fake file service implementing the remote interface in memory.

    Downloads compress each part independently; uploads receive one
    compressed stream split across parts, as the real service does.
    Every call is recorded in ``calls`` as ``(method, args)``.
    """

    def __init__(self):
        self.files = {}
        self.temporary_files = {}
        self.calls = []
        self.info_sessions = []
        self._downloads = {}
        self._uploads = {}
        self._next_id = 1
        self._lock = threading.Lock()

        self.info_delay = 0.0
        self.corrupt_downloads = False
        self.uppercase_hashes = False
        self.max_served_part = None
        self.stall_downloads = False
        self.garbage_parts = False
        self.part_status = int(ErrorCode.OK)
        self.finish_result_override = None

    def _record(self, method, *args):
        with self._lock:
            self.calls.append((method, args))

    def count(self, method):
        """Number of recorded calls to ``method``."""
        return sum(1 for name, _ in self.calls if name == method)

    def args_of(self, method):
        """Argument tuples of every recorded call to ``method``."""
        return [args for name, args in self.calls if name == method]

    def add_file(self, body, file_name="stored.bin", is_public=False):
        """Store a file directly and return its id."""
        with self._lock:
            file_id = self._next_id
            self._next_id += 1
        self.files[file_id] = {
            "file_name": file_name,
            "body": body,
            "is_public": is_public,
            "creation_date": datetime.now(timezone.utc),
        }
        return file_id

    def _hash(self, body):
        digest = hashlib.md5(body).hexdigest()
        return digest.upper() if self.uppercase_hashes else digest

    def get_file_info(self, session_id, file_id):
        self._record("get_file_info", session_id, file_id)
        self.info_sessions.append(session_id)
        if self.info_delay:
            time.sleep(self.info_delay)
        stored = self.files.get(file_id)
        if stored is None:
            raise RemoteFileNotFoundError(ErrorCode.FILE_NOT_FOUND, f"file {file_id}")
        return FileRecord(
            id=file_id,
            file_name=stored["file_name"],
            body_length=len(stored["body"]),
            is_public=stored["is_public"],
            creation_date=stored["creation_date"],
            hash=self._hash(stored["body"]),
        )

    def begin_download(self, session_id, file_id, use_compression):
        self._record("begin_download", session_id, file_id, use_compression)
        if file_id not in self.files:
            raise RemoteFileNotFoundError(ErrorCode.FILE_NOT_FOUND, f"file {file_id}")
        operation_id = str(uuid.uuid4())
        self._downloads[operation_id] = {"file_id": file_id, "compression": use_compression}
        return operation_id

    def download_part(self, operation_id, offset, max_part_size):
        self._record("download_part", operation_id, offset, max_part_size)
        download = self._downloads.get(operation_id)
        if download is None:
            raise OperationNotFoundError(ErrorCode.OPERATION_NOT_FOUND, operation_id)

        size = max_part_size
        if self.max_served_part is not None:
            size = min(size, self.max_served_part)

        body = self.files[download["file_id"]]["body"]
        part = b"" if self.stall_downloads else body[offset:offset + size]

        if self.corrupt_downloads and offset == 0 and part:
            part = bytes([part[0] ^ 0xFF]) + part[1:]

        if download["compression"]:
            part = compression.compress(part)
        if self.garbage_parts:
            part = b"\xff" * 16
        return part

    def finish_download(self, operation_id, aborted):
        self._record("finish_download", operation_id, aborted)
        download = self._downloads.pop(operation_id)
        if aborted:
            return None
        return self._hash(self.files[download["file_id"]]["body"])

    def _begin_upload(self, kind, use_compression, hash, **extra):
        operation_id = str(uuid.uuid4())
        self._uploads[operation_id] = {
            "kind": kind,
            "compression": use_compression,
            "hash": hash,
            "parts": [],
            **extra,
        }
        return operation_id

    def begin_upload_new(self, session_id, file_name, is_public, use_compression, hash):
        self._record("begin_upload_new", session_id, file_name, is_public, use_compression, hash)
        return self._begin_upload("new", use_compression, hash, file_name=file_name, is_public=is_public)

    def begin_upload_existing(self, session_id, file_id, use_compression, hash):
        self._record("begin_upload_existing", session_id, file_id, use_compression, hash)
        if file_id not in self.files:
            raise RemoteFileNotFoundError(ErrorCode.FILE_NOT_FOUND, f"file {file_id}")
        return self._begin_upload("existing", use_compression, hash, file_id=file_id)

    def begin_upload_temporary(self, session_id, file_name, use_compression, hash):
        self._record("begin_upload_temporary", session_id, file_name, use_compression, hash)
        return self._begin_upload("temporary", use_compression, hash, file_name=file_name)

    def upload_part(self, operation_id, data):
        self._record("upload_part", operation_id, data)
        if self.part_status != ErrorCode.OK:
            return self.part_status
        self._uploads[operation_id]["parts"].append(data)
        return int(ErrorCode.OK)

    def finish_upload(self, operation_id, aborted):
        self._record("finish_upload", operation_id, aborted)
        upload = self._uploads.pop(operation_id)
        if aborted:
            return 0
        if self.finish_result_override is not None:
            return self.finish_result_override

        payload = b"".join(upload["parts"])
        if upload["compression"]:
            payload = compression.decompress(payload)
        if hashlib.md5(payload).hexdigest() != upload["hash"].lower():
            return -int(ErrorCode.HASH_MISMATCH)

        if upload["kind"] == "new":
            return self.add_file(payload, upload["file_name"], upload["is_public"])
        if upload["kind"] == "existing":
            self.files[upload["file_id"]]["body"] = payload
            return upload["file_id"]

        self.temporary_files[operation_id] = payload
        return 0

    def get_upload_quota(self, session_id):
        self._record("get_upload_quota", session_id)
        return 10 * 1024 * 1024

    def share(self, session_id, file_id):
        self._record("share", session_id, file_id)
        return f"share-{file_id}"

    def unshare(self, session_id, file_id):
        self._record("unshare", session_id, file_id)


@pytest.fixture
def service():
    """In-memory file service."""
    return InMemoryFileService()


@pytest.fixture
def settings():
    """Default transfer settings (compression on, no hash check)."""
    return TransferSettings()


@pytest.fixture
def client(service, settings):
    """FileTransferClient with a session, backed by the in-memory service."""
    return FileTransferClient(service, lambda: SESSION_ID, settings)


@pytest.fixture
def payload():
    """250,000 bytes of non-repeating payload (three parts)."""
    return bytes((i * 7 + i // 251) % 256 for i in range(250_000))


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .filetransfer directory
    """
    config_dir = tmp_path / '.filetransfer'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample file
    """
    file_path = tmp_path / 'a.bin'
    file_path.write_bytes(b'Sample content for testing' * 100)
    return file_path
