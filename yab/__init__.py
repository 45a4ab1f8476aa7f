"""RPC transports over HTTP and gRPC, a request interceptor hook, and payload helpers."""

__version__ = "0.22.0.dev0"