"""The interface for sending requests, and binding listeners for real servers."""

from __future__ import annotations

import abc
import ipaddress
import socket
from typing import Optional

from servertestkit.util import DEFAULT_IP_ADDRESS, new_random_tcp_listener_with_socket_addr


class TransportLayer(abc.ABC):
    """Sends a request to the application, mocked or over the network.

    Layers backed by a real server set ``server_url`` to its address.
    """

    server_url: Optional[str] = None

    @abc.abstractmethod
    async def send(self, request):
        """Send ``request`` and return the response parts and body bytes."""

    def url(self) -> Optional[str]:
        """The address of a real server, or None when there is none."""
        return self.server_url


class TransportLayerBuilder:
    """Binds the TCP listener a real server will run on.

    ``ip`` defaults to 127.0.0.1 and ``port`` to a random free port.
    """

    def __init__(self, ip=None, port: Optional[int] = None) -> None:
        self.ip = ipaddress.ip_address(ip) if ip is not None else None
        if port is not None and not 0 <= port <= 0xFFFF:
            raise ValueError(f"port {port} is outside 0..65535")
        self.port = port

    def _bind(self, ip, port: int) -> socket.socket:
        family = socket.AF_INET6 if ip.version == 6 else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.bind((str(ip), port))
            sock.listen()
        except OSError:
            sock.close()
            raise
        return sock

    def tcp_listener_with_reserved_port(
        self,
    ) -> tuple[tuple[str, int], socket.socket, Optional[int]]:
        """Bind a listener; return its address, the listener and any reserved port."""
        try:
            if self.ip is None and self.port is None:
                listener, addr = new_random_tcp_listener_with_socket_addr()
                return addr, listener, addr[1]
            ip = self.ip or ipaddress.ip_address(DEFAULT_IP_ADDRESS)
            listener = self._bind(ip, self.port or 0)
        except OSError as err:
            raise OSError(f"Cannot create socket address for use: {err}") from err
        host, bound_port = listener.getsockname()[:2]
        reserved = bound_port if self.port is None else None
        return (host, bound_port), listener, reserved

    def tcp_listener(self) -> socket.socket:
        """Bind and return the listener alone."""
        _, listener, _ = self.tcp_listener_with_reserved_port()
        return listener