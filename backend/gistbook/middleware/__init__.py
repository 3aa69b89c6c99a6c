"""
Gistbook Backend - Middleware Package
=====================================

Middleware Chain (order matters):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    1. Request ID: read or generate the X-Request-ID correlation id
    2. Access Log: log method, path, status and duration with that id
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
