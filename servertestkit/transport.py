"""Transport modes and the server configuration built around them."""

from __future__ import annotations

import dataclasses
import enum
import ipaddress
from dataclasses import dataclass
from typing import Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class TransportKind(enum.Enum):
    """How requests reach the application under test."""

    MOCK_HTTP = "mock_http"
    HTTP_RANDOM_PORT = "http_random_port"
    HTTP_IP_PORT = "http_ip_port"


@dataclass(frozen=True)
class Transport:
    """A transport mode, with the address to bind for ``HTTP_IP_PORT``.

    ``ip`` defaults to 127.0.0.1 and ``port`` to a random free port.
    """

    kind: TransportKind
    ip: Optional[IPAddress] = None
    port: Optional[int] = None

    def __post_init__(self) -> None:
        if self.ip is not None:
            object.__setattr__(self, "ip", ipaddress.ip_address(self.ip))
        if self.port is not None and not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"port {self.port} is outside 0..65535")

    @classmethod
    def mock_http(cls) -> Transport:
        return cls(TransportKind.MOCK_HTTP)

    @classmethod
    def http_random_port(cls) -> Transport:
        return cls(TransportKind.HTTP_RANDOM_PORT)

    @classmethod
    def http_ip_port(cls, ip, port) -> Transport:
        return cls(TransportKind.HTTP_IP_PORT, ip, port)

    @classmethod
    def default(cls) -> Transport:
        return cls.mock_http()


@dataclass(frozen=True)
class ServerConfig:
    """Settings for a test server, fixed at construction."""

    transport: Optional[Transport] = None
    save_cookies: bool = False
    expect_success_by_default: bool = False
    restrict_requests_with_http_schema: bool = False
    default_content_type: Optional[str] = None
    default_scheme: Optional[str] = None

    @classmethod
    def builder(cls) -> ServerConfigBuilder:
        return ServerConfigBuilder()


class ServerConfigBuilder:
    """Fluent builder for :class:`ServerConfig`."""

    def __init__(self) -> None:
        self._config = ServerConfig()

    def _update(self, **changes) -> ServerConfigBuilder:
        self._config = dataclasses.replace(self._config, **changes)
        return self

    def http_transport(self) -> ServerConfigBuilder:
        return self.transport(Transport.http_random_port())

    def http_transport_with_ip_port(self, ip, port) -> ServerConfigBuilder:
        return self.transport(Transport.http_ip_port(ip, port))

    def mock_transport(self) -> ServerConfigBuilder:
        return self.transport(Transport.mock_http())

    def transport(self, transport) -> ServerConfigBuilder:
        return self._update(transport=transport)

    def save_cookies(self) -> ServerConfigBuilder:
        return self._update(save_cookies=True)

    def do_not_save_cookies(self) -> ServerConfigBuilder:
        return self._update(save_cookies=False)

    def default_content_type(self, content_type) -> ServerConfigBuilder:
        return self._update(default_content_type=str(content_type))

    def default_scheme(self, scheme) -> ServerConfigBuilder:
        return self._update(default_scheme=str(scheme))

    def expect_success_by_default(self) -> ServerConfigBuilder:
        return self._update(expect_success_by_default=True)

    def restrict_requests_with_http_schema(self) -> ServerConfigBuilder:
        return self._update(restrict_requests_with_http_schema=True)

    def build(self) -> ServerConfig:
        return self._config