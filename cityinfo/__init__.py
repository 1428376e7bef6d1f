"""
CityInfo API: Application Package Initializer
=============================================

What: Marks the `cityinfo` directory as a Python package.
Who:  Imported by uvicorn (cityinfo.main:app), Alembic and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation, mapping,    │
    │   JSON Patch, repositories, mail)   │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Entity store: in-memory or ORM     │  ← selected by STORE_BACKEND
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
