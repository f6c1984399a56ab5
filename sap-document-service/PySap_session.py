"""Service that opens and closes SAP BI RESTful sessions"""
import logging
import requests
from typing import Dict, Optional, Union
from requests import RequestException
from PySap_exceptions import AuthError, NotFoundError, ParseError, SapError, TransportError

logger = logging.getLogger(__name__)

TOKEN_HEADER = 'X-SAP-LogonToken'

# 401/403 are mapped by _error_for_status, 400 is a bad auth type on logon
LOGON_REFUSED_STATUSES = (400,)

CONTENT_TYPES = {
    'json': 'application/json',
    'xml': 'text/xml',
}


def get_headers(token: Optional[str] = None, content_type: str = 'json') -> Dict[str, str]:
    """Generate a fresh set of request headers.
    :param token: SAP token, omitted for the logon call
    :param content_type: 'json' or 'xml'
    :return: New headers dict, never shared between requests"""

    if content_type not in CONTENT_TYPES:
        raise ValueError(f"Unsupported content type: {content_type}")

    mime_type = CONTENT_TYPES[content_type]
    headers = {
        'Accept': mime_type,
        'Content-Type': mime_type,
    }
    if token:
        headers[TOKEN_HEADER] = token
    return headers


def _error_for_status(status_code: int, url: str, text: str) -> SapError:
    if status_code in (401, 403):
        return AuthError(f"Access refused: {text}", url, status_code)
    if status_code == 404:
        return NotFoundError(f"Resource not found: {text}", url, status_code)
    return TransportError(f"Request failed: {text}", url, status_code)


def _send(method, url: str, headers: Dict[str, str], timeout: Optional[float] = None, **kwargs) -> requests.Response:
    try:
        response = method(url, headers=headers, timeout=timeout, **kwargs)
        response.raise_for_status()
        return response
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        text = e.response.text if e.response is not None else str(e)
        logger.error(f"HTTP {status_code} from {url}: {text}")
        if status_code is None:
            raise TransportError(f"Request failed: {text}", url) from e
        raise _error_for_status(status_code, url, text) from e
    except requests.exceptions.Timeout as e:
        logger.error(f"Timeout calling {url}: {e}")
        raise TransportError(f"Timed out: {e}", url) from e
    except RequestException as e:
        logger.error(f"Error calling {url}: {e}")
        raise TransportError(f"Connection failed: {e}", url) from e


def sap_get(url: str, headers: Dict[str, str], timeout: Optional[float] = None) -> requests.Response:
    """GET a SAP BI resource.
    :param url: Full resource url
    :param headers: Headers built by get_headers
    :param timeout: Seconds before giving up, None for the requests default"""

    logger.debug(f"GET {url}")
    return _send(requests.get, url, headers, timeout)


def sap_post(url: str, headers: Dict[str, str], json: Optional[dict] = None,
             timeout: Optional[float] = None) -> requests.Response:
    """POST to a SAP BI resource.
    :param url: Full resource url
    :param headers: Headers built by get_headers
    :param json: Optional JSON payload
    :param timeout: Seconds before giving up, None for the requests default"""

    logger.debug(f"POST {url}")
    return _send(requests.post, url, headers, timeout, json=json)


def parse_json(response: requests.Response, url: str) -> Union[dict, list]:
    """Decode a JSON response body or raise ParseError."""

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Invalid JSON from {url}: {e}")
        raise ParseError(f"Invalid JSON: {e}", url) from e


def get_token(base_url: str, username: str, password: str, auth_type: str = 'secWinAD',
              timeout: Optional[float] = None) -> str:
    """Retrieve SAP connection token.
    :param base_url: SAP BI RESTful root, e.g. http://host:6405/biprws
    :param username: SAP username
    :param password: SAP password
    :param auth_type: SAP auth type. Defaults to secWinAD
    :param timeout: Seconds before giving up
    :return: SAP connection token"""

    url = f"{base_url}/logon/long"
    payload = {
        'userName': username,
        'password': password,
        'auth': auth_type,
    }

    try:
        response = sap_post(url, get_headers(), json=payload, timeout=timeout)
    except TransportError as e:
        if e.status_code not in LOGON_REFUSED_STATUSES:
            raise
        raise AuthError(f"Logon refused for {username} ({auth_type}): {e.message}", url, e.status_code) from e

    body = parse_json(response, url)
    token = body.get('logonToken') if isinstance(body, dict) else None
    if not token:
        raise ParseError("Logon response has no logonToken", url)

    logger.info(f"Logged on as {username} ({auth_type})")
    return token


def logoff(base_url: str, token: str, timeout: Optional[float] = None) -> None:
    """Invalidate a SAP connection token.
    :param base_url: SAP BI RESTful root
    :param token: The SAP token"""

    url = f"{base_url}/logoff"
    sap_post(url, {TOKEN_HEADER: token}, timeout=timeout)
    logger.info("Logged off from SAP BI")
