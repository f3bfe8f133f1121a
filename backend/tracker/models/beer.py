"""Beer ORM — one row per beer record."""

from tracker.db.base import Base
from tracker.models.drink import DrinkColumns


class Beer(DrinkColumns, Base):
    """Beer entity."""
    __tablename__ = "beer"
