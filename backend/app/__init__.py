"""
BileMo API — Application Package Initializer
==============================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is layered; each layer only calls the one below it:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← status codes, Location headers
    ├─────────────────────────────────────┤
    │   Security (tokens, authorization)  │  ← who may do what
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← validation, linking, cache eviction
    ├─────────────────────────────────────┤
    │   Repositories + List Cache         │  ← queries, paginated pages
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic views
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
