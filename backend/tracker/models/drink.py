"""Drink Columns — the fixed field set shared by every drink table.

Invariants:
    - id is a UUID primary key generated by the store on insert
    - brand, size, time are all non-nullable (no partial records)
    - Column names match the wire record fields one to one

Design Decisions:
    - Mixin over a single polymorphic table: each kind keeps its own schema
      and its own identifier space (ADR: kinds are structurally independent)
    - time stored as Text: the client owns the timestamp string format
"""

import uuid

from sqlalchemy import BigInteger, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class DrinkColumns:
    """Columns mixed into each drink table."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    brand: Mapped[str] = mapped_column(Text, nullable=False)
    # uint32 does not fit a signed 32-bit INTEGER on other backends
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    time: Mapped[str] = mapped_column(Text, nullable=False)
