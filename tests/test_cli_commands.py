"""Tests for CLI command handlers."""

from pathlib import Path
from unittest.mock import Mock

import httpx

from cli.commands import (
    handle_get,
    handle_info,
    handle_quota,
    handle_session,
    handle_share,
    handle_unshare,
    handle_update,
    handle_upload,
    handle_upload_temp,
)
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
from cli.utils import format_file_size
from common.error_codes import ErrorCode
from common.exceptions import NotAuthenticatedError, QuotaExceededError
from transfer.file_client import FileTransferClient
from transfer.http_service import HttpFileService
from transfer.settings import TransferSettings

from conftest import SESSION_ID


def test_handle_session(temp_config):
    """Test session command stores the id."""
    result = handle_session(SessionCommand(session_id='abc-123'), config=temp_config)

    assert 'Session saved' in result
    assert temp_config.get_session_id() == 'abc-123'


def test_handle_info(client, service):
    """Test info command formats metadata."""
    file_id = service.add_file(b'x' * 2048, file_name='report.pdf', is_public=True)

    result = handle_info(InfoCommand(file_id=file_id), client=client)

    assert f'report.pdf (ID: {file_id})' in result
    assert '2.00 KiB' in result
    assert 'public' in result


def test_handle_info_missing_file(client):
    """Test info command reports service errors."""
    result = handle_info(InfoCommand(file_id=404), client=client)

    assert result.startswith('Error:')


def test_handle_get_writes_file(client, service, payload, tmp_path):
    """Test get command saves the body into the downloads directory."""
    file_id = service.add_file(payload, file_name='data.bin')

    result = handle_get(GetCommand(file_id=file_id), client=client, downloads_dir=tmp_path)

    assert 'Downloaded: data.bin' in result
    assert (tmp_path / 'data.bin').read_bytes() == payload


def test_handle_get_explicit_output_path(client, service, tmp_path):
    """Test get command honours the output path argument."""
    file_id = service.add_file(b'hello', file_name='data.bin')
    target = tmp_path / 'out' / 'copy.bin'

    result = handle_get(GetCommand(file_id=file_id, output_path=str(target)), client=client)

    assert 'Saved to' in result
    assert target.read_bytes() == b'hello'


def test_handle_get_reports_integrity_failure(service, payload, tmp_path):
    """Test get command reports a corrupted download."""
    client = FileTransferClient(service, lambda: SESSION_ID, TransferSettings(verify_download_hash=True))
    file_id = service.add_file(payload)
    service.corrupt_downloads = True

    result = handle_get(GetCommand(file_id=file_id), client=client, downloads_dir=tmp_path)

    assert 'failed verification' in result
    assert not any(tmp_path.iterdir())


def test_handle_upload(client, service, sample_file):
    """Test upload command reports the assigned id."""
    result = handle_upload(UploadCommand(path=str(sample_file), is_public=True), client=client)

    assert 'Uploaded: a.bin (ID: 1' in result
    assert service.files[1]['body'] == sample_file.read_bytes()
    assert service.files[1]['is_public'] is True


def test_handle_upload_missing_file(client, service, tmp_path):
    """Test upload command rejects a missing local file."""
    result = handle_upload(UploadCommand(path=str(tmp_path / 'nope.bin')), client=client)

    assert 'File not found' in result
    assert service.calls == []


def test_handle_upload_empty_file(client, service, tmp_path):
    """Test upload command rejects an empty local file."""
    empty = tmp_path / 'empty.bin'
    empty.write_bytes(b'')

    result = handle_upload(UploadCommand(path=str(empty)), client=client)

    assert 'File is empty' in result
    assert service.calls == []


def test_handle_upload_without_session(service, sample_file):
    """Test upload command without a stored session."""
    client = FileTransferClient(service, lambda: None)

    result = handle_upload(UploadCommand(path=str(sample_file)), client=client)

    assert result.startswith('Error uploading')
    assert service.calls == []


def test_handle_upload_rejected(client, service, sample_file):
    """Test upload command reports a rejected upload."""
    service.finish_result_override = -int(ErrorCode.QUOTA_EXCEEDED)

    result = handle_upload(UploadCommand(path=str(sample_file)), client=client)

    assert result.startswith('Error uploading')


def test_handle_upload_temp(client, service, sample_file):
    """Test upload-temp command reports the operation id."""
    result = handle_upload_temp(UploadTempCommand(path=str(sample_file)), client=client)

    assert 'Uploaded temporary file: a.bin' in result
    assert list(service.temporary_files.values()) == [sample_file.read_bytes()]


def test_handle_update(client, service, sample_file):
    """Test update command replaces the stored body."""
    file_id = service.add_file(b'old content', file_name='doc.txt')

    result = handle_update(UpdateCommand(file_id=file_id, path=str(sample_file)), client=client)

    assert f'Updated: doc.txt (ID: {file_id}' in result
    assert service.files[file_id]['body'] == sample_file.read_bytes()


def test_get_after_update_returns_new_content(client, service, sample_file, tmp_path):
    """Test a download after an update serves the updated content."""
    file_id = service.add_file(b'old content', file_name='stored.bin')
    new_content = sample_file.read_bytes()

    handle_get(GetCommand(file_id=file_id), client=client, downloads_dir=tmp_path)
    handle_update(UpdateCommand(file_id=file_id, path=str(sample_file)), client=client)
    result = handle_get(GetCommand(file_id=file_id), client=client, downloads_dir=tmp_path)

    assert f'Downloaded: stored.bin ({format_file_size(len(new_content))})' in result
    assert (tmp_path / 'stored.bin').read_bytes() == new_content


def test_handle_update_missing_file(client, sample_file):
    """Test update command reports a missing remote file."""
    result = handle_update(UpdateCommand(file_id=77, path=str(sample_file)), client=client)

    assert result.startswith('Error updating file 77')


def test_handle_share():
    """Test share command with mocked client."""
    mock_client = Mock(spec=FileTransferClient)
    mock_client.share.return_value = 'tok-9'

    result = handle_share(ShareCommand(file_id=9), client=mock_client)

    assert result == 'Shared file 9. Token: tok-9'
    mock_client.share.assert_called_once_with(9)


def test_handle_unshare():
    """Test unshare command with mocked client."""
    mock_client = Mock(spec=FileTransferClient)

    result = handle_unshare(UnshareCommand(file_id=9), client=mock_client)

    assert result == 'Unshared file 9.'
    mock_client.unshare.assert_called_once_with(9)


def test_handle_quota():
    """Test quota command with mocked client."""
    mock_client = Mock(spec=FileTransferClient)
    mock_client.get_upload_quota.return_value = 10 * 1024 * 1024

    result = handle_quota(QuotaCommand(), client=mock_client)

    assert result == 'Upload quota: 10.00 MiB'


def test_handle_quota_not_authenticated():
    """Test quota command without a session."""
    mock_client = Mock(spec=FileTransferClient)
    mock_client.get_upload_quota.side_effect = NotAuthenticatedError("No session set")

    result = handle_quota(QuotaCommand(), client=mock_client)

    assert result == 'Error: No session set'


def test_handle_share_service_error():
    """Test share command reports service errors."""
    mock_client = Mock(spec=FileTransferClient)
    mock_client.share.side_effect = QuotaExceededError(ErrorCode.QUOTA_EXCEEDED, 'full')

    result = handle_share(ShareCommand(file_id=1), client=mock_client)

    assert result.startswith('Error:')


def test_handle_upload_unreadable_file(client, service, sample_file, monkeypatch):
    """Test upload command reports a local file that cannot be read."""
    def deny(self):
        raise PermissionError(13, 'Permission denied')

    monkeypatch.setattr(Path, 'read_bytes', deny)

    result = handle_upload(UploadCommand(path=str(sample_file)), client=client)

    assert result.startswith('Error: Cannot read')
    assert service.calls == []


def test_handle_upload_connection_reset(sample_file):
    """Test upload command reports a dropped connection."""
    def handler(request):
        raise httpx.ReadError('connection reset')

    http_service = HttpFileService('http://test')
    http_service.session = httpx.Client(transport=httpx.MockTransport(handler), base_url='http://test')
    client = FileTransferClient(http_service, lambda: SESSION_ID)

    result = handle_upload(UploadCommand(path=str(sample_file)), client=client)

    assert result.startswith('Error uploading')
    assert 'connection reset' in result


def test_handle_get_corrupt_compressed_part(client, service, payload, tmp_path):
    """Test get command reports an undecodable part and aborts the transfer."""
    file_id = service.add_file(payload)
    service.garbage_parts = True

    result = handle_get(GetCommand(file_id=file_id), client=client, downloads_dir=tmp_path)

    assert result.startswith('Error: Cannot inflate')
    assert [args[1] for args in service.args_of('finish_download')] == [True]
    assert not any(tmp_path.iterdir())


def test_handle_quota_unexpected_error():
    """Test quota command reports errors outside the transfer hierarchy."""
    mock_client = Mock(spec=FileTransferClient)
    mock_client.get_upload_quota.side_effect = RuntimeError('boom')

    result = handle_quota(QuotaCommand(), client=mock_client)

    assert result == 'Unexpected error: boom'
