# Middleware package init
"""
Biodex Backend - Middleware Package
====================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [Session] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: method, path, status, duration tagged with the request ID
    3. Session: signed cookie carrying flashed notifications
    4. CORS: applied by FastAPI's CORSMiddleware
"""
