"""Resource Kinds — the registry of record types the API exposes.

Invariants:
    - Each kind pairs one ORM table with one wire record type
    - name is the URL prefix and envelope key; label is the identifier tag
    - RESOURCE_KINDS is the single list the router mounts

Design Decisions:
    - Kinds as data, not subclasses: the CRUD protocol is written once and
      instantiated per kind (store adapter and router are both generic)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from tracker.db.base import Base
from tracker.models import Beer, Coffee
from tracker.schemas.drinks import BeerRecord, CoffeeRecord, DrinkRecord

R = TypeVar("R", bound=DrinkRecord)


@dataclass(frozen=True)
class ResourceKind(Generic[R]):
    """One persistable, serializable record type."""
    name: str
    label: str
    model: type[Base]
    record_type: type[R]

    @property
    def plural(self) -> str:
        return f"{self.name}s"

    @property
    def table_name(self) -> str:
        return self.model.__tablename__


COFFEE = ResourceKind("coffee", "Coffee", Coffee, CoffeeRecord)
BEER = ResourceKind("beer", "Beer", Beer, BeerRecord)

RESOURCE_KINDS: tuple[ResourceKind, ...] = (COFFEE, BEER)
