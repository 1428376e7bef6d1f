# Middleware package init
"""
CityInfo API: Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access line per request, with the ID from step 1
    3. GZip / CORS: FastAPI's stock middleware
"""
