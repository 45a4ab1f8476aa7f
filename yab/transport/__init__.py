"""Request and response types, HTTP and gRPC transports, and the request interceptor hook."""