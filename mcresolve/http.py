"""Minimal HTTP client used by the manifest loader to fetch JSON documents.
"""

from urllib.error import HTTPError, URLError
from http.client import HTTPResponse
import urllib.request
import json
import ssl

import certifi

from . import RESOLVER_NAME, RESOLVER_VERSION

from typing import Optional, Dict, Any, cast


__all__ = ["HttpResponse", "HttpError", "http_request", "http_get_json"]


class HttpResponse:
    """Status, body and headers of a response. A status of 0 means that no response
    was received at all.
    """

    __slots__ = "status", "data", "headers"

    def __init__(self, status: int, data: bytes, headers: Dict[str, str]) -> None:
        self.status = status
        self.data = data
        self.headers = headers

    @classmethod
    def from_raw(cls, res: Optional[HTTPResponse]) -> "HttpResponse":
        if res is None:
            return cls(0, b"", {})
        return cls(res.status, res.read(), dict(res.headers.items()))

    def json(self) -> Any:
        """Decode the body as JSON, this may raise a JSONDecodeError.
        """
        return json.loads(self.data)

    def __repr__(self) -> str:
        return f"<HttpResponse {self.status}>"


class HttpError(Exception):
    """Raised when a request doesn't succeed, either because the server answered with
    a non-2xx status or because of a network error, in which case the response has
    status 0. The underlying `URLError` is kept in `reason`.
    """

    def __init__(self, res: HttpResponse, method: str, url: str, reason: URLError) -> None:
        self.res = res
        self.method = method
        self.url = url
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.method} {self.url}: {self.res.status} ({self.reason})"


def http_request(method: str, url: str, *,
    headers: Optional[Dict[str, str]] = None,
    accept: Optional[str] = None,
    timeout: Optional[float] = None
) -> HttpResponse:
    """Make a synchronous HTTP request, verifying certificates with certifi's bundle.

    :raises HttpError: If no 2xx response is received.
    """

    headers = dict(headers or {})
    if accept is not None:
        headers["Accept"] = accept
    headers.setdefault("User-Agent", f"{RESOLVER_NAME}/{RESOLVER_VERSION}")

    ctx = ssl.create_default_context(cafile=certifi.where())
    req = urllib.request.Request(url, None, headers, method=method)

    try:
        return HttpResponse.from_raw(urllib.request.urlopen(req, context=ctx, timeout=timeout))
    except HTTPError as error:
        raise HttpError(HttpResponse.from_raw(cast(HTTPResponse, error)), method, url, error)
    except URLError as error:
        raise HttpError(HttpResponse.from_raw(None), method, url, error)


def http_get_json(url: str, *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None
) -> HttpResponse:
    """Shortcut for a GET request accepting JSON.
    """
    return http_request("GET", url, headers=headers, accept="application/json", timeout=timeout)
