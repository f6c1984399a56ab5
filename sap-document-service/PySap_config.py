"""
Configuration settings for the SAP BI object usage scanner
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

# Logging configuration
LOGGING_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

DEFAULT_AUTH_TYPE = 'secWinAD'

TRUE_VALUES = ('1', 'true', 'yes', 'on')

EXPORT_SUFFIXES = ('.xlsx', '.csv')


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for scripts and the API service.

    The level comes from the argument, then SAP_LOG_LEVEL, then SAP_ENV
    (development -> DEBUG, anything else -> INFO).
    """
    if level is None:
        level = os.getenv('SAP_LOG_LEVEL')
    if level is None:
        level = 'DEBUG' if os.getenv('SAP_ENV', 'production') == 'development' else 'INFO'
    logging.basicConfig(level=level.upper(), format=LOGGING_FORMAT)


def check_output_file(file_path: Optional[str]) -> None:
    """Reject export paths whose extension cannot be written."""
    if file_path and Path(file_path).suffix.lower() not in EXPORT_SUFFIXES:
        suffix = Path(file_path).suffix or "(none)"
        raise ValueError(f"Unsupported export format: {suffix}. Use .xlsx or .csv")


def split_object_names(value: Optional[str]) -> List[str]:
    """Split a comma-separated list of object names, dropping blanks."""
    if not value:
        return []
    return [name.strip() for name in value.split(',') if name.strip()]


class SapConfig:
    """
    Everything a scan needs: server, credential, folder and object names.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        folder_id: Optional[str] = None,
        object_names: Optional[List[str]] = None,
        auth_type: str = DEFAULT_AUTH_TYPE,
        output_file: Optional[str] = None,
        timeout: Optional[float] = None,
        skip_failed: bool = False,
    ):
        check_output_file(output_file)
        self.base_url = base_url.rstrip('/')
        self.username = username
        self.password = password
        self.folder_id = folder_id
        self.object_names = list(object_names or [])
        self.auth_type = auth_type
        self.output_file = output_file
        self.timeout = timeout
        self.skip_failed = skip_failed

    def __repr__(self) -> str:
        return (f"SapConfig(base_url={self.base_url!r}, username={self.username!r}, "
                f"folder_id={self.folder_id!r}, object_names={self.object_names!r}, "
                f"auth_type={self.auth_type!r})")

    @classmethod
    def from_env(cls, require_scan: bool = True) -> 'SapConfig':
        """
        Build the configuration from environment variables.

        Required environment variables:
        - SAP_BASE_URL: SAP BI RESTful root, e.g. http://host:6405/biprws
        - SAP_USERNAME, SAP_PASSWORD: credential
        - SAP_FOLDER_ID, SAP_OBJECT_NAMES: folder to scan and comma-separated
          object names (only when require_scan is True)

        Optional environment variables:
        - SAP_AUTH_TYPE (default: secWinAD)
        - SAP_OUTPUT_FILE: .xlsx or .csv export path
        - SAP_TIMEOUT: request timeout in seconds
        - SAP_SKIP_FAILED: 1/true/yes to skip reports that cannot be inspected

        Raises:
            ValueError: If required configuration is missing or invalid
        """
        required = ['SAP_BASE_URL', 'SAP_USERNAME', 'SAP_PASSWORD']
        if require_scan:
            required += ['SAP_FOLDER_ID', 'SAP_OBJECT_NAMES']

        missing_fields = [name for name in required if not os.getenv(name)]
        if require_scan and 'SAP_OBJECT_NAMES' not in missing_fields \
                and not split_object_names(os.getenv('SAP_OBJECT_NAMES')):
            missing_fields.append('SAP_OBJECT_NAMES')

        if missing_fields:
            raise ValueError(
                f"Missing required SAP configuration: {', '.join(missing_fields)}. "
                f"Please set these environment variables."
            )

        timeout = os.getenv('SAP_TIMEOUT')
        try:
            timeout = float(timeout) if timeout else None
        except ValueError:
            raise ValueError(f"SAP_TIMEOUT must be a number of seconds, got {timeout!r}")

        return cls(
            base_url=os.getenv('SAP_BASE_URL'),
            username=os.getenv('SAP_USERNAME'),
            password=os.getenv('SAP_PASSWORD'),
            folder_id=os.getenv('SAP_FOLDER_ID'),
            object_names=split_object_names(os.getenv('SAP_OBJECT_NAMES')),
            auth_type=os.getenv('SAP_AUTH_TYPE', DEFAULT_AUTH_TYPE),
            output_file=os.getenv('SAP_OUTPUT_FILE') or None,
            timeout=timeout,
            skip_failed=os.getenv('SAP_SKIP_FAILED', '').lower() in TRUE_VALUES,
        )
