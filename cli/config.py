"""Configuration management for the FileTransfer CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.constants import DEFAULT_SERVICE_URL
from transfer.settings import TransferSettings

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "service_url": os.environ.get("FT_SERVICE_URL", DEFAULT_SERVICE_URL),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
        "use_compression": True,
        "verify_download_hash": False,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.filetransfer/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.filetransfer' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = self.DEFAULT_CONFIG.copy()

        if not self.config_path.exists():
            self._write(config)
            return config

        try:
            with open(self.config_path, 'r') as f:
                config.update(json.load(f))
            return config
        except (json.JSONDecodeError, IOError) as e:
            backup_path = self.config_path.with_suffix('.json.bak')
            logger.warning(f"Config file unreadable ({e}), backing up to {backup_path}")
            try:
                shutil.copy(self.config_path, backup_path)
            except IOError as copy_error:
                logger.warning(f"Could not back up config file: {copy_error}")
            return self.DEFAULT_CONFIG.copy()

    def _write(self, data: dict) -> None:
        try:
            with open(self.config_path, 'w') as f:
                json.dump(data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write config file {self.config_path}: {e}")

    def save(self) -> None:
        """Save current configuration to file."""
        self._write(self.data)

    def get_session_id(self) -> Optional[str]:
        """
        Get stored session id.

        Returns:
            Session id string or None if not set
        """
        return self.data.get('session_id')

    def set_session_id(self, session_id: str) -> None:
        """
        Set session id and save to file.

        Args:
            session_id: Session id issued by the service
        """
        self.data['session_id'] = session_id
        self.save()

    def get_service_url(self) -> str:
        """
        Get file service base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8000")
        """
        return self.data.get('service_url', DEFAULT_SERVICE_URL)

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries', 3),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }

    def get_transfer_settings(self) -> TransferSettings:
        """
        Build transfer options from the configuration.

        Returns:
            TransferSettings instance
        """
        return TransferSettings(
            use_compression=bool(self.data.get('use_compression', True)),
            verify_download_hash=bool(self.data.get('verify_download_hash', False)),
        )
