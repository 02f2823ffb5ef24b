"""
PodReview Backend — Application Package
=======================================

What: The `podreview` package — a podcast review API built on FastAPI.
How:  Imported by uvicorn (`uvicorn podreview.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth dependency
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership + uniqueness rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

Services never create sessions themselves: every call receives the
`AsyncSession` it should use, so tests can run them against any engine.
"""

__version__ = "1.0.0"
