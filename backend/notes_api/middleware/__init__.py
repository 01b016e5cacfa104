"""
Notes API: Middleware Package
==============================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

Responses unwind in reverse, so the access log sees the final status and the
X-Request-ID header is set on every response.
"""
