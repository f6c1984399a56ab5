"""Errors raised by the SAP BI RESTful client"""
from typing import Optional


class SapError(Exception):
    """Base class for every failure reported by the SAP BI client."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        details = self.message
        if self.status_code is not None:
            details += f" (HTTP {self.status_code})"
        if self.url:
            details += f" [{self.url}]"
        return details


class AuthError(SapError):
    """Logon refused, or the token was rejected (401/403)."""


class TransportError(SapError):
    """Network failure, timeout or unexpected HTTP status."""


class NotFoundError(SapError):
    """Unknown report, folder or data provider id (404)."""


class ParseError(SapError):
    """Response body could not be decoded or lacks an expected field."""
