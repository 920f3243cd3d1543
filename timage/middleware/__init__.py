"""
T-Image API: Middleware Package
==================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first so every later log line can be correlated
    2. Logging wraps the rest to capture final status and duration
    3. GZip / CORS are Starlette's stock middleware
"""
