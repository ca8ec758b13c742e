"""Shared data type definitions (FileRecord)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from common.constants import UNASSIGNED_FILE_ID


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FileRecord:
    """
    Metadata and (optionally) content of a single remote file.

    A record fetched from the service carries ``body_length`` but no ``body``
    until a download completes. A record built for an upload carries its body
    from the start and keeps ``id == 0`` until the service assigns one.
    """
    id: int = UNASSIGNED_FILE_ID
    file_name: str = ""
    body: Optional[bytes] = None
    body_length: int = 0
    is_public: bool = False
    creation_date: datetime = field(default_factory=_utcnow)
    hash: Optional[str] = None

    @property
    def is_persisted(self) -> bool:
        """True once the service has assigned a permanent id."""
        return self.id != UNASSIGNED_FILE_ID

    @property
    def is_materialized(self) -> bool:
        """True when the payload is held in memory."""
        return self.body is not None
