"""HTTP implementation of the remote file service interface."""

import time
import uuid
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from common.error_codes import ErrorCode, error_for_code
from common.exceptions import TransportError
from common.logging_config import get_logger
from common.types import FileRecord
from transfer.schemas import (
    BeginDownloadRequest,
    BeginUploadExistingRequest,
    BeginUploadRequest,
    ErrorResponse,
    FileInfoResponse,
    FinishDownloadResponse,
    FinishRequest,
    FinishUploadResponse,
    OperationResponse,
    QuotaResponse,
    ShareResponse,
    UploadPartResponse,
)

logger = get_logger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)

OCTET_STREAM = 'application/octet-stream'

STATUS_ERROR_CODES = {
    401: ErrorCode.SESSION_NOT_FOUND,
    403: ErrorCode.UNAUTHORIZED_ACCESS,
    404: ErrorCode.FILE_NOT_FOUND,
    410: ErrorCode.OPERATION_NOT_FOUND,
    413: ErrorCode.QUOTA_EXCEEDED,
    422: ErrorCode.HASH_MISMATCH,
    507: ErrorCode.QUOTA_EXCEEDED,
}


class HttpFileService:
    """
    HTTP client for the file service API with retry logic and error mapping.

    Only GET requests are retried: begin, part upload and finish calls change
    server state and are sent exactly once.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        max_retries: int = 3,
        retry_backoff_multiplier: float = 2,
    ):
        """
        Initialize the service client.

        Args:
            base_url: Service root URL
            timeout: Per-request timeout in seconds
            max_retries: Retry attempts for idempotent requests
            retry_backoff_multiplier: Base of the exponential backoff delay
        """
        self.base_url = base_url
        self.max_retries = max_retries
        self.retry_backoff_multiplier = retry_backoff_multiplier
        self.session = httpx.Client(base_url=base_url, timeout=timeout)
        self.request_id = None
        logger.info(f"Initialized HttpFileService [base_url={base_url}]")

    def _request_with_retry(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request, retrying GETs on 5xx errors and network failures.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Successful HTTP response

        Raises:
            ServiceError: If the service answers with an error status
            TransportError: If the service cannot be reached
        """
        max_retries = self.max_retries if method == 'GET' else 0
        backoff = self.retry_backoff_multiplier

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")

        last_exception = None
        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)
            except httpx.TransportError as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s "
                        f"[request_id={self.request_id}]"
                    )
                    time.sleep(delay)
                    continue
                logger.error(
                    f"Network error: {method} {endpoint} error={e} [request_id={self.request_id}]"
                )
                break

            logger.debug(
                f"Response received: {method} {endpoint} status={response.status_code} "
                f"[request_id={self.request_id}]"
            )

            if response.status_code >= 500 and attempt < max_retries:
                delay = backoff ** attempt
                logger.warning(
                    f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                    f"{method} {endpoint} status={response.status_code}, retrying in {delay}s "
                    f"[request_id={self.request_id}]"
                )
                time.sleep(delay)
                continue

            if response.status_code >= 400:
                raise self._to_service_error(response)

            return response

        if isinstance(last_exception, httpx.TimeoutException):
            raise TransportError("Request timed out. Server may be overloaded.") from last_exception
        if isinstance(last_exception, httpx.ConnectError):
            raise TransportError("Cannot connect to file service. Is it running?") from last_exception
        raise TransportError(f"Connection to file service failed: {last_exception}") from last_exception

    def _to_service_error(self, response: httpx.Response):
        """
        Map an HTTP error response to the matching ServiceError.

        Args:
            response: Response with a 4xx/5xx status

        Returns:
            ServiceError subclass instance
        """
        try:
            error = ErrorResponse.model_validate(response.json())
            code = ErrorCode.from_name(error.code)
            detail = error.detail
        except (ValueError, ValidationError):
            code = ErrorCode.UNKNOWN_SERVER_ERROR
            detail = response.text or None

        if code is ErrorCode.UNKNOWN_SERVER_ERROR:
            code = STATUS_ERROR_CODES.get(response.status_code, code)

        logger.warning(
            f"Service error: status={response.status_code} code={code.name} "
            f"[request_id={self.request_id}]"
        )
        return error_for_code(code, detail)

    @staticmethod
    def _parse(response: httpx.Response, model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise error_for_code(
                ErrorCode.UNKNOWN_SERVER_ERROR, f"malformed {model.__name__}: {e}"
            ) from e

    @staticmethod
    def _auth_header(session_id: str) -> dict:
        return {'Authorization': f'Bearer {session_id}'}

    def get_file_info(self, session_id: str, file_id: int) -> FileRecord:
        response = self._request_with_retry(
            'GET', f'/files/{file_id}', headers=self._auth_header(session_id)
        )
        return self._parse(response, FileInfoResponse).to_record()

    def begin_download(self, session_id: str, file_id: int, use_compression: bool) -> str:
        request = BeginDownloadRequest(file_id=file_id, compression=use_compression)
        response = self._request_with_retry(
            'POST', '/downloads', json=request.model_dump(), headers=self._auth_header(session_id)
        )
        return self._parse(response, OperationResponse).operation_id

    def download_part(self, operation_id: str, offset: int, max_part_size: int) -> bytes:
        response = self._request_with_retry(
            'GET',
            f'/downloads/{operation_id}/parts',
            params={'offset': offset, 'size': max_part_size},
            headers={'Accept': OCTET_STREAM},
        )
        return response.content

    def finish_download(self, operation_id: str, aborted: bool) -> Optional[str]:
        request = FinishRequest(aborted=aborted)
        response = self._request_with_retry(
            'POST', f'/downloads/{operation_id}/finish', json=request.model_dump()
        )
        return self._parse(response, FinishDownloadResponse).hash

    def begin_upload_new(
        self,
        session_id: str,
        file_name: str,
        is_public: bool,
        use_compression: bool,
        hash: str,
    ) -> str:
        request = BeginUploadRequest(
            file_name=file_name, is_public=is_public, compression=use_compression, hash=hash
        )
        response = self._request_with_retry(
            'POST', '/uploads', json=request.model_dump(), headers=self._auth_header(session_id)
        )
        return self._parse(response, OperationResponse).operation_id

    def begin_upload_existing(
        self,
        session_id: str,
        file_id: int,
        use_compression: bool,
        hash: str,
    ) -> str:
        request = BeginUploadExistingRequest(compression=use_compression, hash=hash)
        response = self._request_with_retry(
            'POST',
            f'/files/{file_id}/uploads',
            json=request.model_dump(),
            headers=self._auth_header(session_id),
        )
        return self._parse(response, OperationResponse).operation_id

    def begin_upload_temporary(
        self,
        session_id: str,
        file_name: str,
        use_compression: bool,
        hash: str,
    ) -> str:
        request = BeginUploadRequest(file_name=file_name, compression=use_compression, hash=hash)
        response = self._request_with_retry(
            'POST',
            '/uploads/temporary',
            json=request.model_dump(),
            headers=self._auth_header(session_id),
        )
        return self._parse(response, OperationResponse).operation_id

    def upload_part(self, operation_id: str, data: bytes) -> int:
        response = self._request_with_retry(
            'PUT',
            f'/uploads/{operation_id}/parts',
            content=data,
            headers={'Content-Type': OCTET_STREAM},
        )
        return self._parse(response, UploadPartResponse).status

    def finish_upload(self, operation_id: str, aborted: bool) -> int:
        request = FinishRequest(aborted=aborted)
        response = self._request_with_retry(
            'POST', f'/uploads/{operation_id}/finish', json=request.model_dump()
        )
        return self._parse(response, FinishUploadResponse).result

    def get_upload_quota(self, session_id: str) -> int:
        response = self._request_with_retry('GET', '/quota', headers=self._auth_header(session_id))
        return self._parse(response, QuotaResponse).limit

    def share(self, session_id: str, file_id: int) -> str:
        response = self._request_with_retry(
            'POST', f'/files/{file_id}/share', headers=self._auth_header(session_id)
        )
        return self._parse(response, ShareResponse).token

    def unshare(self, session_id: str, file_id: int) -> None:
        self._request_with_retry(
            'DELETE', f'/files/{file_id}/share', headers=self._auth_header(session_id)
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
