"""Coffee ORM — one row per coffee record."""

from tracker.db.base import Base
from tracker.models.drink import DrinkColumns


class Coffee(DrinkColumns, Base):
    """Coffee entity."""
    __tablename__ = "coffee"
