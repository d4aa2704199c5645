"""
OpenMusic API — Middleware Package
===================================

What:  Concerns applied to every request before route dispatch.

Middleware chain (request direction):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - Rate limit runs first so rejected requests cost nothing further.
    - Request ID is set before the access log so every entry carries it.
    - The access log sees the final status and duration on the way out.

Starlette runs middleware in reverse order of registration; see create_app().
"""
