"""Transport that makes unary and streaming RPCs over gRPC with raw bytes."""

from __future__ import annotations

import itertools
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Iterator

import grpc

from yab.transport.interface import (
    Protocol,
    Request,
    Response,
    StreamRequest,
    StreamTransport,
    TransportCloser,
)

_DEFAULT_TIMEOUT = 1.0
_SEPARATOR = "::"
_END_OF_SEND = object()


@dataclass
class GRPCOptions:
    """Options used to create a gRPC transport."""

    addresses: list[str] = field(default_factory=list)
    tracer: Any = None
    caller: str = ""
    encoding: str = ""
    routing_key: str = ""
    routing_delegate: str = ""
    max_response_size: int = 0


def _status_error(exc: grpc.RpcError) -> Exception:
    code = exc.code() if hasattr(exc, "code") else grpc.StatusCode.UNKNOWN
    details = exc.details() if hasattr(exc, "details") else str(exc)
    name = code.name.lower().replace("_", "-")
    message = f"code:{name} message:{details}"
    if code == grpc.StatusCode.DEADLINE_EXCEEDED:
        return TimeoutError(message)
    return RuntimeError(message)


def _method_path(procedure: str) -> str:
    service, sep, method = procedure.rpartition(_SEPARATOR)
    if not sep:
        raise ValueError(f"no service procedure separator found in {procedure}")
    return f"/{service}/{method}"


def _metadata_to_headers(*groups: Any) -> dict[str, str]:
    headers: dict[str, str] = {}
    for group in groups:
        for key, value in group or ():
            if key.startswith(("grpc-", ":")):
                continue
            if isinstance(value, bytes):
                value = value.decode("utf-8", errors="replace")
            headers[key] = value
    return headers


class ClientStream:
    """A client side of an open gRPC stream that exchanges raw messages."""

    def __init__(
        self,
        multi_callable: grpc.StreamStreamMultiCallable,
        timeout: float | None,
        metadata: list[tuple[str, str]],
    ) -> None:
        self._outgoing: queue.Queue[Any] = queue.Queue()
        self._send_closed = False
        self._call = multi_callable(self._requests(), timeout=timeout, metadata=metadata)

    def _requests(self) -> Iterator[bytes]:
        while True:
            item = self._outgoing.get()
            if item is _END_OF_SEND:
                return
            yield item

    def send_message(self, body: bytes) -> None:
        """Queue one message to be sent on the stream."""
        if self._send_closed:
            raise ValueError("stream is closed for sending")
        self._outgoing.put(bytes(body))

    def receive_message(self) -> bytes:
        """Block for the next message; raise EOFError once the server is done."""
        try:
            return next(self._call)
        except StopIteration:
            raise EOFError("end of stream") from None
        except grpc.RpcError as exc:
            raise _status_error(exc) from exc

    def close_send(self) -> None:
        """Tell the server that no more messages will be sent."""
        if not self._send_closed:
            self._send_closed = True
            self._outgoing.put(_END_OF_SEND)

    def close(self) -> None:
        """Stop sending and end the stream."""
        self.close_send()
        self._call.cancel()

    def __enter__(self) -> ClientStream:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class GRPCTransport(TransportCloser, StreamTransport):
    """Calls a gRPC service, rotating through the given addresses."""

    def __init__(self, options: GRPCOptions) -> None:
        if not options.addresses:
            raise ValueError("must specify at least one grpc address")
        if options.tracer is None:
            raise ValueError("must specify grpc tracer")
        if not options.caller:
            raise ValueError("must specify grpc caller")

        channel_options = []
        if options.max_response_size > 0:
            channel_options.append(
                ("grpc.max_receive_message_length", options.max_response_size)
            )
        self._channels = [
            grpc.insecure_channel(address, options=channel_options)
            for address in options.addresses
        ]
        self._rotation = itertools.cycle(self._channels)
        self._lock = threading.Lock()
        self.caller = options.caller
        self.encoding = options.encoding
        self.routing_key = options.routing_key
        self.routing_delegate = options.routing_delegate
        self._tracer = options.tracer

    def tracer(self) -> Any:
        return self._tracer

    def protocol(self) -> Protocol:
        return Protocol.GRPC

    def _next_channel(self) -> grpc.Channel:
        with self._lock:
            return next(self._rotation)

    def _metadata(self, request: Request) -> list[tuple[str, str]]:
        metadata = [
            ("rpc-caller", self.caller),
            ("rpc-service", request.target_service),
        ]
        optional = [
            ("rpc-encoding", self.encoding),
            ("rpc-shard-key", request.shard_key),
            ("rpc-routing-key", self.routing_key),
            ("rpc-routing-delegate", self.routing_delegate),
        ]
        metadata.extend((key, value) for key, value in optional if value)
        metadata.extend((key.lower(), value) for key, value in request.headers.items())
        return metadata

    @staticmethod
    def _validate(request: Request) -> None:
        if not request.target_service:
            raise ValueError("must specify grpc service")
        if not request.method:
            raise ValueError("must specify grpc procedure")

    def call(self, request: Request, timeout: float | None = None) -> Response:
        """Make a unary call.

        Without an explicit ``timeout`` the request's own timeout is used,
        falling back to one second.
        """
        self._validate(request)
        if timeout is None:
            timeout = request.timeout if request.timeout > 0 else _DEFAULT_TIMEOUT
        method = self._next_channel().unary_unary(_method_path(request.method))
        try:
            body, call = method.with_call(
                request.body, timeout=timeout, metadata=self._metadata(request)
            )
        except grpc.RpcError as exc:
            raise _status_error(exc) from exc
        return Response(
            headers=_metadata_to_headers(call.initial_metadata(), call.trailing_metadata()),
            body=body or b"",
        )

    def call_stream(
        self, request: StreamRequest, timeout: float | None = None
    ) -> ClientStream:
        """Open a stream; ``timeout`` bounds the whole stream when given."""
        if request is None or request.request is None:
            raise ValueError("stream request must carry a request")
        inner = request.request
        self._validate(inner)
        method = self._next_channel().stream_stream(_method_path(inner.method))
        return ClientStream(method, timeout, self._metadata(inner))

    def close(self) -> None:
        for channel in self._channels:
            channel.close()


def new_grpc(options: GRPCOptions) -> GRPCTransport:
    """Return a transport that calls a gRPC service."""
    return GRPCTransport(options)