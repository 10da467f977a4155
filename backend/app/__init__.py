"""
Biodex Backend - Application Package Initializer
=================================================

What: Marks the `app` directory as a Python package.
Who:  Used by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes (Pages + JSON API)      │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Listing, Species Editor) │  ← Business rules, form state
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Authentication is delegated to the hosted auth service: the backend only
    verifies the access token it issued (see app/auth.py).
"""

__version__ = "1.0.0"
