"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SessionCommand:
    """Store the session id."""

    session_id: str
    command: Literal["session"] = "session"


@dataclass(frozen=True)
class InfoCommand:
    """Show file metadata."""

    file_id: int
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class GetCommand:
    """Download a file by id."""

    file_id: int
    output_path: str | None = None
    command: Literal["get"] = "get"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a new file."""

    path: str
    is_public: bool = False
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class UploadTempCommand:
    """Upload a temporary file."""

    path: str
    command: Literal["upload-temp"] = "upload-temp"


@dataclass(frozen=True)
class UpdateCommand:
    """Replace the content of an existing file."""

    file_id: int
    path: str
    command: Literal["update"] = "update"


@dataclass(frozen=True)
class ShareCommand:
    """Share a file."""

    file_id: int
    command: Literal["share"] = "share"


@dataclass(frozen=True)
class UnshareCommand:
    """Revoke a file's share token."""

    file_id: int
    command: Literal["unshare"] = "unshare"


@dataclass(frozen=True)
class QuotaCommand:
    """Show the upload quota."""

    command: Literal["quota"] = "quota"


CommandRequest = (
    SessionCommand
    | InfoCommand
    | GetCommand
    | UploadCommand
    | UploadTempCommand
    | UpdateCommand
    | ShareCommand
    | UnshareCommand
    | QuotaCommand
)
