"""Middleware components for request processing."""

from .request_id import get_request_id, request_id_middleware

__all__ = ["get_request_id", "request_id_middleware"]
