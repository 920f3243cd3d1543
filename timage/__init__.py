"""
T-Image API: Application Package Initializer
===============================================

What: Marks the `timage` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the `timage-api` console script.

Architecture Note:
    The service follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Auth (Basic credential verifier)  │  ← Resolves the caller
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Signup, ownership checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; services never touch HTTP.
"""

__version__ = "1.0.0"
