# Middleware package init
"""
PodReview Backend — Middleware Package
=======================================

Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

The request id is assigned first so that the access log line and any error
body produced further in can carry it.
"""
