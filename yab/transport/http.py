"""Transport that makes RPCs as plain HTTP requests carrying RPC headers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Any

import requests

from yab.transport.interface import Protocol, Request, Response, Transport

_DEFAULT_TTL = 1.0


@dataclass
class HTTPOptions:
    """Options used to create an HTTP transport."""

    method: str = ""
    urls: list[str] = field(default_factory=list)
    source_service: str = ""
    target_service: str = ""
    routing_delegate: str = ""
    routing_key: str = ""
    shard_key: str = ""
    encoding: str = ""
    tracer: Any = None


class HTTPTransport(Transport):
    """Sends each request to one of the configured URLs, picked at random."""

    def __init__(self, options: HTTPOptions) -> None:
        if not options.urls:
            raise ValueError("specify at least one URL")
        if not options.target_service:
            raise ValueError("specify target service name")
        if not options.method:
            options = replace(options, method="POST")
        self.options = options
        # Each transport gets its own independent connection pool.
        self._session = requests.Session()
        self._tracer = options.tracer

    def tracer(self) -> Any:
        return self._tracer

    def protocol(self) -> Protocol:
        return Protocol.HTTP

    def _rpc_headers(self, request: Request, ttl: float) -> dict[str, str]:
        opts = self.options
        headers = {
            "RPC-Service": opts.target_service,
            "RPC-Procedure": request.method,
            "RPC-Caller": opts.source_service,
            "RPC-Encoding": opts.encoding,
        }
        if opts.routing_key:
            headers["RPC-Routing-Key"] = opts.routing_key
        if opts.routing_delegate:
            headers["RPC-Routing-Delegate"] = opts.routing_delegate
        if opts.shard_key:
            headers["RPC-Shard-Key"] = opts.shard_key
        headers["Context-TTL-MS"] = str(int(ttl * 1000))
        for key, value in request.headers.items():
            headers["Rpc-Header-" + key] = value
        return headers

    def build_request(
        self, request: Request, timeout: float | None = None
    ) -> requests.PreparedRequest:
        """Build the HTTP request for ``request`` without sending it.

        ``timeout`` (seconds) sets the TTL header; without one, a TTL of one
        second is advertised. If the tracer has an ``inject`` method it is
        given the header dict to add its propagation headers.
        """
        url = random.choice(self.options.urls)
        ttl = _DEFAULT_TTL if timeout is None else timeout
        headers = self._rpc_headers(request, ttl)
        headers.update(request.transport_headers)
        inject = getattr(self._tracer, "inject", None)
        if callable(inject):
            inject(headers)
        return requests.Request(
            self.options.method, url, headers=headers, data=request.body
        ).prepare()

    def call(self, request: Request, timeout: float | None = None) -> Response:
        prepared = self.build_request(request, timeout)
        try:
            resp = self._session.send(prepared, timeout=timeout, stream=True)
        except requests.Timeout as exc:
            raise TimeoutError(f"context deadline exceeded: {exc}") from exc
        except requests.RequestException as exc:
            raise ConnectionError(f"HTTP call failed: {exc}") from exc

        with resp:
            read_error: Exception | None = None
            try:
                body = resp.content or b""
            except requests.RequestException as exc:
                body = b""
                read_error = exc

            if not 200 <= resp.status_code < 300:
                raise RuntimeError(
                    "HTTP call got non-success response code: "
                    f"{resp.status_code}, body: {body.decode('utf-8', errors='replace')}"
                )
            if read_error is not None:
                raise ConnectionError(
                    f"failed to read HTTP response body: {read_error}"
                ) from read_error

            return Response(
                headers=dict(resp.headers),
                body=body,
                transport_fields={"statusCode": resp.status_code},
            )


def new_http(options: HTTPOptions) -> HTTPTransport:
    """Return a transport that calls an HTTP service."""
    return HTTPTransport(options)