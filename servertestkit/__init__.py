"""Transport settings, server configuration, multipart bodies, shared request state and free-port helpers for testing HTTP servers."""

__version__ = "0.1.0"

__all__ = ["multipart", "server_shared_state", "transport", "transport_layer", "util"]