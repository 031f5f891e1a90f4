"""
BileMo API — Middleware Package
=================================

Middleware Chain:
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log record
    emitted while handling the request carry the same correlation ID.
"""
