"""State shared by a test server with every request it creates."""

from __future__ import annotations

import dataclasses
import re
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from http.cookies import CookieError, Morsel
from typing import Optional
from urllib.parse import quote_plus

_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def _text(value) -> str:
    return value.decode("latin-1") if isinstance(value, bytes) else str(value)


def _make_morsel(name: str, value: str) -> Morsel:
    morsel = Morsel()
    try:
        morsel.set(name, value, value)
    except CookieError as err:
        raise ValueError(f"Invalid cookie name {name!r}") from err
    return morsel


def _parse_set_cookie(header: str) -> Morsel:
    """Parse one ``Set-Cookie`` header value into a cookie."""
    pair, *attributes = header.split(";")
    name, sep, value = pair.partition("=")
    name, value = name.strip(), value.strip()
    if not sep or not name:
        raise ValueError(f"Cookie header {header!r} has no name")
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    morsel = _make_morsel(name, value)
    for attribute in attributes:
        key, has_value, attr_value = attribute.partition("=")
        key = key.strip().lower()
        if key in ("secure", "httponly"):
            morsel[key] = True
        elif key in Morsel._reserved and has_value:
            morsel[key] = attr_value.strip()
    return morsel


def _serialize_query(query_params) -> str:
    """Form-encode a mapping, dataclass instance or iterable of pairs."""
    if dataclasses.is_dataclass(query_params) and not isinstance(query_params, type):
        query_params = dataclasses.asdict(query_params)
    if isinstance(query_params, Mapping):
        query_params = query_params.items()
    elif isinstance(query_params, (str, bytes)):
        raise TypeError("Query parameters must be a mapping or a sequence of pairs")
    encoded = []
    for key, value in query_params:
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif not isinstance(value, (str, int, float)):
            raise TypeError(f"Cannot serialize {type(value).__name__} as a query parameter")
        pair = (quote_plus(str(part), safe="*").replace("~", "%7E") for part in (key, value))
        encoded.append("=".join(pair))
    return "&".join(encoded)


@dataclass(frozen=True)
class _StateSnapshot:
    scheme: Optional[str]
    cookies: dict
    query_params: tuple
    headers: tuple

    @property
    def query_string(self) -> str:
        return "&".join(self.query_params)


class ServerSharedState:
    """Scheme, cookies, query parameters and headers shared across requests.

    Every method is safe to call from several threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._scheme: Optional[str] = None
        self._cookies: dict[str, Morsel] = {}
        self._query_params: list[str] = []
        self._headers: list[tuple[str, str]] = []

    def _store_cookies(self, morsels) -> None:
        with self._lock:
            for morsel in morsels:
                self._cookies[morsel.key] = morsel

    def add_cookies_by_header(self, cookie_headers) -> None:
        """Store cookies from ``Set-Cookie`` header values over existing ones."""
        self._store_cookies([_parse_set_cookie(_text(h)) for h in cookie_headers])

    def clear_cookies(self) -> None:
        with self._lock:
            self._cookies = {}

    def add_cookies(self, cookies) -> None:
        """Store cookies from a mapping of names to values or cookies, or from cookies."""
        if isinstance(cookies, Mapping):
            cookies = [
                value if isinstance(value, Morsel) else _make_morsel(str(name), str(value))
                for name, value in cookies.items()
            ]
        entries = []
        for cookie in cookies:
            if not isinstance(cookie, Morsel):
                raise TypeError(f"Expected a cookie, got {type(cookie).__name__}")
            entries.append(cookie.copy())
        self._store_cookies(entries)

    def add_cookie(self, name, value) -> None:
        self._store_cookies([_make_morsel(str(name), str(value))])

    def add_query_params(self, query_params) -> None:
        encoded = _serialize_query(query_params)
        if encoded:
            with self._lock:
                self._query_params.append(encoded)

    def add_query_param(self, key, value) -> None:
        self.add_query_params([(key, value)])

    def add_raw_query_param(self, raw_value) -> None:
        """Add a query parameter exactly as given, with no encoding."""
        with self._lock:
            self._query_params.append(str(raw_value))

    def clear_query_params(self) -> None:
        with self._lock:
            self._query_params.clear()

    def query_string(self) -> str:
        with self._lock:
            return "&".join(self._query_params)

    def clear_headers(self) -> None:
        with self._lock:
            self._headers.clear()

    def add_header(self, name, value) -> None:
        name, value = _text(name), _text(value)
        if not _HEADER_NAME_RE.match(name):
            raise ValueError(f"Invalid header name {name!r}")
        if any(ch in value for ch in "\r\n\0"):
            raise ValueError(f"Invalid header value {value!r}")
        with self._lock:
            self._headers.append((name.lower(), value))

    def set_scheme(self, scheme) -> None:
        with self._lock:
            self._scheme = str(scheme)

    def snapshot(self) -> _StateSnapshot:
        """An independent copy of the current state."""
        with self._lock:
            return _StateSnapshot(
                scheme=self._scheme,
                cookies={name: morsel.copy() for name, morsel in self._cookies.items()},
                query_params=tuple(self._query_params),
                headers=tuple(self._headers),
            )