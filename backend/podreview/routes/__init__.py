# Routes package init
"""
PodReview Backend — API Routes Package
=======================================

Route Inventory:
    - podcasts.py:  GET/POST /api/podcast/, GET/PUT/DELETE /api/podcast/{id}
    - reviews.py:   GET /api/review/mine, GET /api/review/{podcast_id},
                    POST /api/review/, PUT/DELETE /api/review/{id}
    - users.py:     POST /api/user/, GET /api/user/me, PUT /api/user/
    - auth.py:      POST /auth/local
    - health.py:    GET /health

Routes stay thin: read the request, resolve the principal where the route
needs one, call a service, pick the status code. Errors propagate to the
global handlers in main.py.
"""
