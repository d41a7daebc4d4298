# servertestkit

Building blocks for writing tests against HTTP servers. It has no
dependencies beyond the standard library.

## Modules

- **`servertestkit.transport`**
  - `TransportKind` names the three transport modes: `MOCK_HTTP`,
    `HTTP_RANDOM_PORT` and `HTTP_IP_PORT`.
  - `Transport` is a frozen value holding a kind plus an optional `ip` and
    `port`:
    - `Transport.mock_http()` is also what `Transport.default()` returns.
    - `Transport.http_random_port()` selects the random-port mode.
    - `Transport.http_ip_port(ip, port)` selects a chosen address.
    - The `ip` is parsed with `ipaddress.ip_address`.
    - A port outside 0..65535 raises `ValueError`.
  - `ServerConfig` is a frozen set of settings. Each setting has a default:
    - `transport`: `None`
    - `save_cookies`: `False`
    - `expect_success_by_default`: `False`
    - `restrict_requests_with_http_schema`: `False`
    - `default_content_type`: `None`
    - `default_scheme`: `None`
  - `ServerConfig.builder()` returns a `ServerConfigBuilder`.
- **`servertestkit.multipart`**
  - `Part` is one section of a multipart form.
  - `MultipartForm` collects named parts and encodes them as a
    `multipart/form-data` body.
- **`servertestkit.server_shared_state`**
  - `ServerSharedState` holds a thread-safe scheme, cookies, query
    parameters and headers.
- **`servertestkit.transport_layer`**
  - `TransportLayer` is an abstract base class with an async `send(request)`
    and a `url()` that returns `server_url`. `server_url` is `None` unless a
    subclass sets it.
  - `TransportLayerBuilder(ip=None, port=None)` binds a listening TCP socket.
- **`servertestkit.util`**
  - Helpers for free local ports and listeners on `127.0.0.1`.

## Installing

```
pip install servertestkit
```

## Configuring a server

```python
from servertestkit.transport import ServerConfig, Transport

config = (
    ServerConfig.builder()
    .save_cookies()
    .default_content_type("application/json")
    .http_transport_with_ip_port("127.0.0.1", 8080)
    .build()
)
assert config.transport == Transport.http_ip_port("127.0.0.1", 8080)
```

The builder also has these methods:

- `http_transport()`
- `mock_transport()`
- `transport(transport)`
- `do_not_save_cookies()`
- `default_scheme(scheme)`
- `expect_success_by_default()`
- `restrict_requests_with_http_schema()`

## Multipart forms

```python
from servertestkit.multipart import MultipartForm, Part

form = (
    MultipartForm()
    .add_text("name", "Joe")
    .add_part(
        "file",
        Part.from_bytes(b"# Notes").with_file_name("notes.md").with_mime_type("text/markdown"),
    )
)

headers = {"Content-Type": form.content_type()}
payload = form.body()
```

Parts default to these mime types:

- `Part.text(...)` parts are sent as `text/plain`.
- `Part.from_bytes(...)` parts are sent as `application/octet-stream`.

Both `with_file_name` and `with_mime_type` return a new part. `with_mime_type`
raises `ValueError` when the mime type does not parse.

The boundary is random unless you pass one, as in
`MultipartForm(boundary="xyz")`.

## Shared request state

```python
from servertestkit.server_shared_state import ServerSharedState

state = ServerSharedState()
state.set_scheme("https")
state.add_query_params({"user": "Brian", "age": 20})
state.add_raw_query_param("array[]=123")
state.add_header("X-Test", "yes")
state.add_cookies_by_header(["session=token; Path=/; HttpOnly"])

state.query_string()   # "user=Brian&age=20&array[]=123"
snap = state.snapshot()
snap.headers           # (("x-test", "yes"),)
snap.cookies["session"].value  # "token"
```

Query parameters can be given in three forms:

- a mapping
- a dataclass instance
- an iterable of pairs

`None` values are skipped. Booleans become `true` or `false`. Any other value
that is not a string or a number raises `TypeError`.

Header names and values are checked, and an invalid one raises `ValueError`.

Cookies can be added in three ways:

- `add_cookie(name, value)`
- `add_cookies(...)`, which takes a mapping or `http.cookies.Morsel` objects
- `add_cookies_by_header(...)`, which takes `Set-Cookie` header values

A later cookie with the same name replaces the earlier one.

The matching `clear_*` methods empty each part of the state.

## Picking a free port

```python
from servertestkit.util import new_random_port, new_random_tcp_listener

port = new_random_port()

with new_random_tcp_listener() as listener:
    host, port = listener.getsockname()
```

`new_random_port()` never returns the same port twice within one process.

Two more helpers return addresses as `(ip, port)` tuples:

- `new_random_socket_addr()` returns such a tuple.
- `new_random_tcp_listener_with_socket_addr()` returns a listener together
  with its address.

`TransportLayerBuilder().tcp_listener()` binds a listener in the same way. With
an explicit `ip` and/or `port`, it binds that address instead.
`tcp_listener_with_reserved_port()` returns three things:

- the address
- the listener
- the port, when the port was chosen at random

## What this package does not do

It does not start or run a server, and it does not send requests. No mock or
HTTP `TransportLayer` is included: you subclass `TransportLayer` and
implement `send` yourself. `ServerConfig` and `Transport` only describe
settings, and nothing in the package acts on them.

## Running the tests

```
pip install -e ".[test]"
pytest
```