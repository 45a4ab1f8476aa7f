import pytest

from yab.transport.interface import (
    Protocol,
    Request,
    Response,
    StreamRequest,
    StreamTransport,
    Transport,
    TransportCloser,
)


class EchoTransport(TransportCloser):
    def __init__(self):
        self.closed = False
        self.calls = []

    def call(self, request, timeout=None):
        self.calls.append((request, timeout))
        return Response(headers=dict(request.headers), body=request.body)

    def protocol(self):
        return Protocol.HTTP

    def tracer(self):
        return None

    def close(self):
        self.closed = True


class EchoStreamTransport(StreamTransport):
    def call_stream(self, request, timeout=None):
        return [request.request.method, timeout]


def test_request_defaults_are_empty():
    req = Request()
    assert req.target_service == ""
    assert req.method == ""
    assert req.timeout == 0
    assert req.headers == {}
    assert req.baggage == {}
    assert req.transport_headers == {}
    assert req.shard_key == ""
    assert req.body == b""


def test_request_mappings_are_not_shared():
    first = Request()
    second = Request()
    first.headers["k"] = "v"
    first.baggage["b"] = "v"
    assert second.headers == {}
    assert second.baggage == {}


def test_response_defaults_are_empty_and_independent():
    first = Response()
    second = Response()
    first.transport_fields["ok"] = True
    assert second.transport_fields == {}
    assert first.body == b""


def test_stream_request_wraps_request():
    req = Request(method="Bar::BidiStream")
    stream_req = StreamRequest(request=req)
    assert stream_req.request is req
    assert StreamRequest().request is None


@pytest.mark.parametrize(
    "value, name",
    [(0, "UNKNOWN"), (1, "TCHANNEL"), (2, "HTTP"), (3, "GRPC")],
)
def test_protocol_values_match_declaration(value, name):
    assert Protocol(value).name == name


def test_protocol_unknown_value_is_rejected():
    with pytest.raises(ValueError):
        Protocol(4)


def test_abstract_transport_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Transport()
    with pytest.raises(TypeError):
        TransportCloser()
    with pytest.raises(TypeError):
        StreamTransport()


def test_concrete_transport_call_round_trip():
    transport = EchoTransport()
    req = Request(method="echo", headers={"k": "v"}, body=b"\x01\x02\x03")
    res = transport.call(req, timeout=2.5)
    assert res.body == req.body
    assert res.headers == req.headers
    assert transport.calls == [(req, 2.5)]
    assert transport.protocol() is Protocol.HTTP


def test_transport_closer_enter_returns_self_and_exit_closes():
    transport = EchoTransport()
    entered = TransportCloser.__enter__(transport)
    assert entered is transport
    assert transport.closed is False
    TransportCloser.__exit__(transport, None, None, None)
    assert transport.closed is True


def test_transport_closer_exit_closes_on_error():
    transport = EchoTransport()
    TransportCloser.__enter__(transport)
    error = RuntimeError("boom")
    suppressed = TransportCloser.__exit__(transport, RuntimeError, error, None)
    assert not suppressed
    assert transport.closed is True


def test_stream_transport_receives_request():
    transport = EchoStreamTransport()
    stream = transport.call_stream(StreamRequest(Request(method="m")), timeout=1.0)
    assert stream == ["m", 1.0]