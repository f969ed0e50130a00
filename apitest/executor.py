"""api-test executor - HTTP request execution."""

import json
import time
from typing import Any

import requests

DEFAULT_TIMEOUT = 30


class RequestResult:
    """Result of an HTTP request."""

    def __init__(self):
        self.status_code: int = 0
        self.status_text: str = ""
        self.headers: dict[str, str] = {}
        self.body: Any = None  # parsed JSON or raw text
        self.elapsed_ms: float = 0
        self.raw_text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class RequestError(Exception):
    """A request that did not complete with a 2xx response.

    `result` holds the server's response when there was one, and is None
    for transport failures.
    """

    def __init__(self, message: str, result: RequestResult | None = None):
        super().__init__(message)
        self.message = message
        self.result = result


class RemoteError(RequestError):
    """The server answered with a non-2xx status."""


class TransportError(RequestError):
    """No response was received (connection, timeout, bad URL...)."""


def execute_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    query: dict[str, str] | None = None,
    data: Any = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> RequestResult:
    """Execute an HTTP request and return structured result.

    - JSON body is sent with `json=`, query mapping with `params=`
    - Attempts to parse response as JSON, falls back to raw text
    - Raises RemoteError for non-2xx responses (with the result attached)
    - Raises TransportError when there is no response at all
    """
    kwargs: dict[str, Any] = {
        "method": method.upper(),
        "url": url,
        "headers": headers or {},
        "params": query or {},
        "timeout": timeout,
        "allow_redirects": True,
    }
    if data is not None:
        kwargs["json"] = data

    try:
        start = time.monotonic()
        resp = requests.request(**kwargs)
        elapsed_ms = (time.monotonic() - start) * 1000
    except requests.exceptions.Timeout as e:
        raise TransportError(f"Request timed out after {timeout}s: {e}") from e
    except requests.exceptions.ConnectionError as e:
        raise TransportError(f"Connection error: {e}") from e
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Request failed: {e}") from e
    except Exception as e:
        raise TransportError(f"Unexpected error: {e}") from e

    result = RequestResult()
    result.elapsed_ms = elapsed_ms
    result.status_code = resp.status_code
    result.status_text = resp.reason or ""
    result.headers = dict(resp.headers)
    result.raw_text = resp.text

    try:
        result.body = resp.json()
    except (json.JSONDecodeError, ValueError):
        result.body = resp.text

    if not result.ok:
        raise RemoteError(
            f"Request failed with status code {result.status_code}",
            result=result,
        )
    return result
