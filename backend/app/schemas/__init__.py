"""
BileMo API — Pydantic Schemas
===============================

Read views (what the API returns) and write payloads (what it accepts).
Views are built from ORM entities by `app.schemas.views`; routes never
serialize ORM objects directly.
"""
