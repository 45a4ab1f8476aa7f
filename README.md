# yab

`yab` is a small library for making RPC calls to services, for example
while testing them. It provides transports that speak HTTP (sending the
`RPC-*` request headers that YARPC services understand) and gRPC, a hook
for adjusting requests before they go out, and helpers for turning JSON
or YAML request payloads into Python values.

The version string is available as `yab.version.VERSION`.

## Installation

```
pip install .
```

To run the test suite, install the test extra and run pytest:

```
pip install .[test]
pytest
```

## Requests, responses and protocols

`yab.transport.interface` defines the shared types:

- `Request` — `target_service`, `method`, `timeout` (seconds, `0` means
  the transport's default), `headers`, `baggage`, `transport_headers`,
  `shard_key` and `body` (bytes).
- `StreamRequest` — wraps a `Request` to open a streaming call.
- `Response` — `headers`, `body` and `transport_fields`, a dict of
  values specific to the transport that produced it.
- `Protocol` — `UNKNOWN`, `TCHANNEL`, `HTTP`, `GRPC`.
- `Transport`, `StreamTransport` and `TransportCloser` — the abstract
  base classes. `TransportCloser` adds `close()` and works as a context
  manager.

## HTTP transport

`new_http` (or `HTTPTransport`) builds a transport from `HTTPOptions`.
At least one URL and a target service name are required, otherwise
`ValueError` is raised; the HTTP method defaults to `POST`.

Each call picks one of the URLs at random and sends:

- `RPC-Service`, `RPC-Procedure`, `RPC-Caller` and `RPC-Encoding`, plus
  `RPC-Routing-Key`, `RPC-Routing-Delegate` and `RPC-Shard-Key` when set;
- `Context-TTL-MS`, the call's `timeout` in milliseconds, or 1000 when
  no timeout is given;
- each application header prefixed with `Rpc-Header-`;
- the request's `transport_headers` as they are.

If the tracer in the options has an `inject` method, it is called with
the header dict so it can add its own headers. `build_request` returns
the prepared request without sending it.

A response outside the 2xx range raises `RuntimeError` with the status
code and body. A timeout raises `TimeoutError` and other connection
failures raise `ConnectionError`. On success, the response headers and
body are returned and the status code is in
`transport_fields["statusCode"]`.

```python
from yab.transport.http import HTTPOptions, new_http
from yab.transport.interface import Request

transport = new_http(HTTPOptions(
    urls=["http://localhost:8080/rpc"],
    source_service="my-client",
    target_service="my-service",
    encoding="json",
))

response = transport.call(
    Request(method="Service::method", headers={"key": "value"}, body=b'{"arg": 1}'),
    timeout=1.0,
)
print(response.body)
```

## gRPC transport

`new_grpc` (or `GRPCTransport`) builds a transport from `GRPCOptions`.
It needs at least one address, a tracer and a caller name, otherwise
`ValueError` is raised. `max_response_size`, when positive, raises the
largest response the client accepts. Calls rotate through the addresses
in turn.

A request's `method` has the form `Service::method` and is sent as the
gRPC path `/Service/method`; both `target_service` and `method` must be
set. The caller, service, encoding, shard key, routing key, routing
delegate and application headers are sent as metadata. Bodies are sent
and received as raw bytes.

- `call(request, timeout=None)` makes a unary call. Without an explicit
  timeout, the request's `timeout` is used, falling back to one second.
  Response headers come from the initial and trailing metadata.
- `call_stream(stream_request, timeout=None)` opens a bidirectional
  stream and returns a `ClientStream` with `send_message(body)`,
  `receive_message()` (raises `EOFError` when the server is done),
  `close_send()` and `close()`. A `ClientStream` is also a context
  manager.

gRPC failures raise `RuntimeError` with a message of the form
`code:<code> message:<details>`, or `TimeoutError` when the deadline is
exceeded. The transport holds open channels, so close it when done; it
works as a context manager.

```python
from yab.transport.grpc import GRPCOptions, new_grpc
from yab.transport.interface import Request

with new_grpc(GRPCOptions(addresses=["127.0.0.1:5000"], tracer=object(), caller="me")) as t:
    response = t.call(Request(target_service="Bar", method="Bar::Baz", body=b"..."))
```

## Request interceptors

A single `RequestInterceptor` can be registered to modify requests before
they are sent. `register_interceptor` installs one and returns a function
that restores the previous interceptor; `registered_interceptor` returns
the current one; `apply_interceptor` runs it, or returns the request
unchanged when none is registered.

```python
from yab.transport.request_interceptor import (
    RequestInterceptor,
    apply_interceptor,
    register_interceptor,
)

class AddHeader(RequestInterceptor):
    def apply(self, request):
        request.headers["foo"] = "bar"
        return request

restore = register_interceptor(AddHeader())
try:
    request = apply_interceptor(request)
finally:
    restore()
```

## Payload helpers

`yab.unmarshal` turns request payloads into Python values. Both
functions raise `ValueError` on bad input.

- `unmarshal_json(data)` decodes the first JSON value in `data` and
  ignores anything after it. Numbers are kept exactly as written, as
  `JSONNumber` (a `str` subclass that also converts with `int()` and
  `float()`). Empty input gives `None`; `NaN` and `Infinity` are
  rejected.
- `unmarshal_yaml(data)` decodes a YAML mapping; empty input gives an
  empty dict and a non-mapping top level is an error. JSON is valid
  YAML, and looser forms such as trailing commas or integer keys are
  accepted. Timestamps are left as strings.

## What this package does not do

- There is no command-line program; everything is used from Python.
- There is no TChannel transport, although `Protocol.TCHANNEL` exists.
- Payloads are not encoded for you: Thrift or Protobuf bodies must be
  passed to the transports as bytes.
- There is no benchmarking or load generation.