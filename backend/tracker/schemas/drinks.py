"""Drink Schemas — Pydantic models for the wire format of records and envelopes.

Invariants:
    - DrinkRecord: brand (str), size (uint32), time (str), all required
    - Strict decoding: "12" is not a size; unknown fields are ignored
    - Envelope models are built per kind: {"id", "<kind>"} and {"<kind>s": [...]}
    - ErrorResponse is the only error shape on the wire

Design Decisions:
    - strict=True over lax coercion: a record is stored exactly as sent
    - create_model for envelopes: the field name is the kind name, so one
      factory serves every kind and OpenAPI still documents each shape
"""

from pydantic import BaseModel, ConfigDict, Field, create_model

UINT32_MAX = 2**32 - 1


class DrinkRecord(BaseModel):
    """Fields shared by every drink kind."""
    model_config = ConfigDict(strict=True)

    brand: str
    size: int = Field(ge=0, le=UINT32_MAX)
    time: str


class CoffeeRecord(DrinkRecord):
    """A coffee as sent by the client."""


class BeerRecord(DrinkRecord):
    """A beer as sent by the client."""


class ErrorResponse(BaseModel):
    """Error envelope — paired with an HTTP status."""
    message: str


def build_envelope_models(
    kind: str, record_type: type[DrinkRecord],
) -> tuple[type[BaseModel], type[BaseModel]]:
    """Build the item and list envelope models for one kind."""
    title = kind.capitalize()
    item_model = create_model(
        f"{title}Item", id=(str, ...), **{kind: (record_type, ...)},
    )
    list_model = create_model(
        f"{title}List", **{f"{kind}s": (list[item_model], ...)},
    )
    return item_model, list_model
