"""Command handler functions for CLI operations."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

from common.exceptions import IntegrityError, TransferException
from common.logging_config import get_logger
from common.types import FileRecord
from cli.config import Config
from cli.constants import DEFAULT_CONFIG_DIR, DOWNLOADS_DIR
from cli.models import (
    GetCommand,
    InfoCommand,
    QuotaCommand,
    SessionCommand,
    ShareCommand,
    UnshareCommand,
    UpdateCommand,
    UploadCommand,
    UploadTempCommand,
)
from cli.utils import InterruptCancellation, ProgressPrinter, format_file_size
from transfer.file_client import FileTransferClient
from transfer.http_service import HttpFileService

logger = get_logger(__name__)


_config: Optional[Config] = None
_client: Optional[FileTransferClient] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance backed by ~/.filetransfer/config.json
    """
    global _config
    if _config is None:
        _config = Config(Path.home() / DEFAULT_CONFIG_DIR / 'config.json')
    return _config


def get_client() -> FileTransferClient:
    """
    Get or create global FileTransferClient instance.

    Returns:
        FileTransferClient talking HTTP to the configured service
    """
    global _client
    if _client is None:
        logger.debug("Creating new FileTransferClient instance")
        config = get_config()
        retry = config.get_retry_config()
        service = HttpFileService(
            config.get_service_url(),
            timeout=config.get_timeout(),
            max_retries=retry['max_retries'],
            retry_backoff_multiplier=retry['retry_backoff_multiplier'],
        )
        _client = FileTransferClient(
            service,
            session_provider=config.get_session_id,
            settings=config.get_transfer_settings(),
        )
    return _client


def _read_local_file(path: str) -> tuple[bytes | None, str | None]:
    """
    Read a local file for upload.

    Returns:
        Tuple of (content, error_message); error_message is None on success
    """
    file_path = Path(path).expanduser()
    if not file_path.exists():
        return None, f"File not found: {path}"
    if not file_path.is_file():
        return None, f"Not a file: {path}"

    try:
        content = file_path.read_bytes()
    except OSError as e:
        return None, f"Cannot read {path}: {e.strerror or e}"
    if not content:
        return None, f"File is empty: {path}"
    return content, None


def _describe(record: FileRecord) -> str:
    visibility = "public" if record.is_public else "private"
    return (
        f"{record.file_name} (ID: {record.id})\n"
        f"  Size: {format_file_size(record.body_length)}\n"
        f"  Visibility: {visibility}\n"
        f"  Created: {record.creation_date.isoformat()}\n"
        f"  Hash: {record.hash or '-'}"
    )


def handle_session(cmd: SessionCommand, config: Optional[Config] = None) -> str:
    """
    Handle 'session' command.

    Args:
        cmd: SessionCommand with the session id
        config: Optional Config for dependency injection (testing)

    Returns:
        Confirmation message
    """
    if config is None:
        config = get_config()
    config.set_session_id(cmd.session_id)
    return "Session saved to config."


def handle_info(cmd: InfoCommand, client: Optional[FileTransferClient] = None) -> str:
    """
    Handle 'info' command.

    Args:
        cmd: InfoCommand with file_id
        client: Optional FileTransferClient for dependency injection (testing)

    Returns:
        Formatted file metadata or error message
    """
    if client is None:
        client = get_client()
    try:
        return _describe(client.get_file_info(cmd.file_id))
    except TransferException as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during info: {e}", exc_info=True)
        return f"Unexpected error: {e}"


def handle_get(
    cmd: GetCommand,
    client: Optional[FileTransferClient] = None,
    downloads_dir: Path = Path(DOWNLOADS_DIR),
) -> str:
    """
    Handle 'get' command.

    Args:
        cmd: GetCommand with file_id and optional output_path
        client: Optional FileTransferClient for dependency injection (testing)
        downloads_dir: Directory used when no output path is given

    Returns:
        Success or error message with download details
    """
    logger.info(f"Executing get command: file_id={cmd.file_id} output_path={cmd.output_path}")
    if client is None:
        client = get_client()

    try:
        record = client.get_file_info(cmd.file_id)
        printer = ProgressPrinter(f"Downloading {record.file_name}", record.body_length)
        with InterruptCancellation() as cancel:
            try:
                completed = client.download(record, printer, cancel)
            finally:
                printer.finish()
    except IntegrityError as e:
        return f"Error: downloaded content failed verification ({e})"
    except TransferException as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during download: {e}", exc_info=True)
        return f"Unexpected error downloading file {cmd.file_id}: {e}"

    if not completed:
        return f"Download of {record.file_name} cancelled."

    output_file = Path(cmd.output_path) if cmd.output_path else downloads_dir / record.file_name
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_bytes(record.body)
    except OSError as e:
        return f"Error writing file: {e}"

    return (
        f"Downloaded: {record.file_name} ({format_file_size(len(record.body))})\n"
        f"Saved to: {output_file.absolute()}"
    )


def handle_upload(cmd: UploadCommand, client: Optional[FileTransferClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with path and visibility
        client: Optional FileTransferClient for dependency injection (testing)

    Returns:
        Success or error message with the assigned id
    """
    logger.info(f"Executing upload command: path={cmd.path} public={cmd.is_public}")
    if client is None:
        client = get_client()

    body, error = _read_local_file(cmd.path)
    if error:
        return f"Error: {error}"

    file_name = Path(cmd.path).name
    printer = ProgressPrinter(f"Uploading {file_name}", 0)
    try:
        with InterruptCancellation() as cancel:
            try:
                record = client.upload(file_name, body, cmd.is_public, printer, cancel)
            finally:
                printer.finish()
    except TransferException as e:
        return f"Error uploading {cmd.path}: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during upload: {e}", exc_info=True)
        return f"Unexpected error uploading {cmd.path}: {e}"

    if record is None:
        return f"Upload of {file_name} cancelled."
    return f"Uploaded: {record.file_name} (ID: {record.id}, Size: {format_file_size(record.body_length)})"


def handle_upload_temp(cmd: UploadTempCommand, client: Optional[FileTransferClient] = None) -> str:
    """
    Handle 'upload-temp' command.

    Args:
        cmd: UploadTempCommand with path
        client: Optional FileTransferClient for dependency injection (testing)

    Returns:
        Success or error message with the operation id
    """
    if client is None:
        client = get_client()

    body, error = _read_local_file(cmd.path)
    if error:
        return f"Error: {error}"

    file_name = Path(cmd.path).name
    printer = ProgressPrinter(f"Uploading {file_name}", 0)
    try:
        with InterruptCancellation() as cancel:
            try:
                operation_id = client.upload_temporary(file_name, body, printer, cancel)
            finally:
                printer.finish()
    except TransferException as e:
        return f"Error uploading {cmd.path}: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during upload: {e}", exc_info=True)
        return f"Unexpected error uploading {cmd.path}: {e}"

    if operation_id is None:
        return f"Upload of {file_name} cancelled."
    return f"Uploaded temporary file: {file_name} (Operation: {operation_id})"


def handle_update(cmd: UpdateCommand, client: Optional[FileTransferClient] = None) -> str:
    """
    Handle 'update' command.

    Args:
        cmd: UpdateCommand with file_id and path
        client: Optional FileTransferClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()

    body, error = _read_local_file(cmd.path)
    if error:
        return f"Error: {error}"

    printer = ProgressPrinter(f"Updating file {cmd.file_id}", 0)
    try:
        record = replace(client.get_file_info(cmd.file_id), body=body, body_length=len(body))
        with InterruptCancellation() as cancel:
            try:
                completed = client.update(record, printer, cancel)
            finally:
                printer.finish()
    except TransferException as e:
        return f"Error updating file {cmd.file_id}: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during update: {e}", exc_info=True)
        return f"Unexpected error updating file {cmd.file_id}: {e}"

    if not completed:
        return f"Update of file {cmd.file_id} cancelled."
    return f"Updated: {record.file_name} (ID: {record.id}, Size: {format_file_size(len(body))})"


def handle_share(cmd: ShareCommand, client: Optional[FileTransferClient] = None) -> str:
    """Handle 'share' command."""
    if client is None:
        client = get_client()
    try:
        token = client.share(cmd.file_id)
    except TransferException as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during share: {e}", exc_info=True)
        return f"Unexpected error: {e}"
    return f"Shared file {cmd.file_id}. Token: {token}"


def handle_unshare(cmd: UnshareCommand, client: Optional[FileTransferClient] = None) -> str:
    """Handle 'unshare' command."""
    if client is None:
        client = get_client()
    try:
        client.unshare(cmd.file_id)
    except TransferException as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during unshare: {e}", exc_info=True)
        return f"Unexpected error: {e}"
    return f"Unshared file {cmd.file_id}."


def handle_quota(cmd: QuotaCommand, client: Optional[FileTransferClient] = None) -> str:
    """Handle 'quota' command."""
    if client is None:
        client = get_client()
    try:
        limit = client.get_upload_quota()
    except TransferException as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Unexpected error during quota: {e}", exc_info=True)
        return f"Unexpected error: {e}"
    return f"Upload quota: {format_file_size(limit)}"
