"""Chunked file-transfer client for the remote file service."""

from transfer.downloader import ChunkedDownloader
from transfer.file_client import FileTransferClient
from transfer.http_service import HttpFileService
from transfer.metadata_cache import MetadataCache
from transfer.service import (
    FileService,
    TemporaryUploadCompleted,
    UploadCompleted,
    UploadReceipt,
    UploadRejected,
    decode_finish_result,
)
from transfer.settings import TransferSettings
from transfer.uploader import ChunkedUploader

__all__ = [
    "ChunkedDownloader",
    "ChunkedUploader",
    "FileService",
    "FileTransferClient",
    "HttpFileService",
    "MetadataCache",
    "TemporaryUploadCompleted",
    "TransferSettings",
    "UploadCompleted",
    "UploadReceipt",
    "UploadRejected",
    "decode_finish_result",
]
