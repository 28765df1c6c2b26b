# Middleware package init
"""
DeviceLab Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [CORS] → Route Handler

    1. Request ID first so every log line of the request can carry it
    2. Access log measures status and duration on the way back out
    3. CORS is FastAPI's CORSMiddleware (answers preflight OPTIONS)
"""
