# Middleware package init
"""
Product Catalog Backend — Middleware Package
==============================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so every later log line can carry it
    - Logging captures status and duration on the way back out
"""
