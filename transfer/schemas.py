"""Pydantic schemas for the file service HTTP API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from common.types import FileRecord


class FileInfoResponse(BaseModel):
    """Response model for file metadata."""
    id: int
    file_name: str
    body_length: int = Field(ge=0)
    is_public: bool = False
    creation_date: datetime
    hash: Optional[str] = None

    def to_record(self) -> FileRecord:
        """Build a body-less FileRecord from the metadata."""
        return FileRecord(
            id=self.id,
            file_name=self.file_name,
            body_length=self.body_length,
            is_public=self.is_public,
            creation_date=self.creation_date,
            hash=self.hash,
        )


class BeginDownloadRequest(BaseModel):
    """Request model for starting a download."""
    file_id: int
    compression: bool


class BeginUploadRequest(BaseModel):
    """Request model for starting a new or temporary upload."""
    file_name: str
    compression: bool
    hash: str
    is_public: bool = False


class BeginUploadExistingRequest(BaseModel):
    """Request model for starting an upload over an existing file."""
    compression: bool
    hash: str


class OperationResponse(BaseModel):
    """Response model for any begin call."""
    operation_id: str


class FinishRequest(BaseModel):
    """Request model for finishing a download or upload."""
    aborted: bool


class FinishDownloadResponse(BaseModel):
    """Response model for a finished download."""
    hash: Optional[str] = None


class UploadPartResponse(BaseModel):
    """Response model for a single uploaded part."""
    status: int


class FinishUploadResponse(BaseModel):
    """Response model for a finished upload (signed id / error code)."""
    result: int


class QuotaResponse(BaseModel):
    """Response model for the upload quota."""
    limit: int


class ShareResponse(BaseModel):
    """Response model for sharing a file."""
    token: str


class ErrorResponse(BaseModel):
    """Response model for errors."""
    detail: str
    code: str
