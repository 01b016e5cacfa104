"""
Notes API: Application Package
===============================

What: A small CRUD service for notes, served over HTTP as JSON envelopes.
Who:  Imported by uvicorn (notes_api.main:app), pytest and the console script.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    NoteService (envelope handlers)  │  ← presence checks, outcome mapping
    ├─────────────────────────────────────┤
    │       NoteStore (persistence)       │  ← one storage operation per call
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
