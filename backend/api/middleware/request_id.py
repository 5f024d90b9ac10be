"""
Request ID middleware - X-Request-ID for request correlation.

The caller's X-Request-ID header is reused when present (so a dashboard can
correlate its own logs); otherwise a UUID4 is generated. The id is stored on
g.request_id, echoed in the response header and included in error envelopes.
"""

import uuid
from flask import Flask, request, g

REQUEST_ID_HEADER = 'X-Request-ID'
MAX_REQUEST_ID_LENGTH = 128


def setup_request_id_middleware(app: Flask) -> None:
    @app.before_request
    def inject_request_id():
        incoming = (request.headers.get(REQUEST_ID_HEADER) or '').strip()
        if not incoming or len(incoming) > MAX_REQUEST_ID_LENGTH:
            incoming = str(uuid.uuid4())
        g.request_id = incoming

    @app.after_request
    def add_request_id_header(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response
