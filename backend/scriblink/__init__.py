"""
Scriblink Backend — Application Package
=========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Workspace (request flows)        │  ← cascades, ownership checks
    ├─────────────────────────────────────┤
    │  Concept services                   │  ← folders, notes, tags,
    │                                     │    summaries, auth
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

The folder hierarchy and the summary validator are independent of each other;
only the workspace layer composes them.
"""

__version__ = "1.0.0"
