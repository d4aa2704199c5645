"""
OpenMusic API — Application Package Initializer
================================================

What: Marks the `openmusic` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    Every resource follows the same layered path:

    ┌─────────────────────────────────────┐
    │     Route Tables (API Layer)        │  ← (verb, path) → handler, auth tag
    ├─────────────────────────────────────┤
    │     Services (Business Logic)       │  ← parameterized SQL, access checks
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Resources: albums, songs, users, playlists, collaborations, playlist activities.
"""

__version__ = "1.0.0"
