# Middleware package init
"""
Scriblink Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs, echoed as X-Request-ID
    2. Logging: one access line per request, level chosen by status class
"""
