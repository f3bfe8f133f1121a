"""ORM Models — SQLAlchemy declarative models for each resource kind.

Invariants:
    - All models inherit from Base (db/base.py)
    - Each resource kind owns exactly one table

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table
"""

from tracker.models.coffee import Coffee  # noqa: F401
from tracker.models.beer import Beer  # noqa: F401
