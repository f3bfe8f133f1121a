"""Database Infrastructure — SQLAlchemy declarative Base for the embedded store.

Invariants:
    - One SQLite file per process, opened via infrastructure/store.py
    - All sessions are async (AsyncSession over aiosqlite)
"""
