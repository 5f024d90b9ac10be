"""
API package - cross-cutting HTTP concerns.

This package provides:
- Global middleware (request_id, request_logging, error_envelope)
"""
