"""Record Identifiers — store-issued handles and their canonical string form.

Invariants:
    - Canonical form is "<Kind>@<32 lowercase hex digits>", e.g. "Coffee@3f2a..."
    - RecordRef.parse(str(ref)) == ref for every ref the store issues
    - Parsing a malformed string raises InvalidInputError, never anything else

Design Decisions:
    - Kind tag embedded in the string: an identifier names the record type it
      was issued for, so handlers can reject a Beer id used on /coffee early
      (ADR: fail fast with 400 instead of a store miss)
    - Frozen dataclass over NewType: equality and hashing come for free
"""

import re
from dataclasses import dataclass
from uuid import UUID

from tracker.core.errors import InvalidInputError

_REF_PATTERN = re.compile(r"(?P<kind>[A-Z][A-Za-z]*)@(?P<key>[0-9a-f]{32})")


@dataclass(frozen=True)
class RecordRef:
    """Opaque handle to one stored record."""
    kind: str
    key: UUID

    def __str__(self) -> str:
        return f"{self.kind}@{self.key.hex}"

    @classmethod
    def parse(cls, raw: str) -> "RecordRef":
        """Decode the canonical string form."""
        match = _REF_PATTERN.fullmatch(raw or "")
        if match is None:
            raise InvalidInputError(
                f"Failed to parse identifier '{raw}': "
                "expected '<Kind>@<32 hex digits>'",
            )
        return cls(match.group("kind"), UUID(hex=match.group("key")))
