"""
Gistbook Backend - Application Package
======================================

What: A small personal snippet ("gist") organizer. Snippets are grouped by
      subject; subjects are unique case-insensitively and cannot be deleted
      while snippets still reference them.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services + Validation (Rules)      │  ← duplicate check, delete guard
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy tables + Pydantic
    ├─────────────────────────────────────┤
    │        RecordStore (Persistence)    │  ← async SQLAlchemy over SQLite
    └─────────────────────────────────────┘

The presentation side (grouping snippets into subject buckets) lives in
`gistbook.presentation` and is driven by `gistbook.client` or by the bundled
browser page under `gistbook/static/`.
"""

__version__ = "1.0.0"
