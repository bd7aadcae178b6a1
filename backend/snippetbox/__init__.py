"""
SnippetBox Backend — Application Package Initializer
====================================================

What: Marks the `snippetbox` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Dependencies (Access Control Gate) │  ← bearer token → current user
    ├─────────────────────────────────────┤
    │   Repositories & Services (Logic)   │  ← ownership, transactions, filters
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async engine + sessions
    └─────────────────────────────────────┘

    Repositories receive their session explicitly, so each layer can be
    exercised in tests against a throwaway SQLite file.
"""

__version__ = "1.0.0"
