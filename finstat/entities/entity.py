# finstat/entities/entity.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntityIdType(Enum):
    TICKER = "ticker"
    CUSIP = "cusip"
    ISIN = "isin"
    LEI = "lei"
    TAX_ID = "tax_id"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Entity:
    """
    Business entity owning accounts and statements.

    Identity is the id alone: two Entity values with the same id are the
    same company even if the display name differs.
    """

    id: str
    primary_type: EntityIdType = EntityIdType.INTERNAL
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("id must be a non-empty string")
        if not isinstance(self.primary_type, EntityIdType):
            raise TypeError("primary_type must be an EntityIdType")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "primary_type": self.primary_type.value,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entity:
        return cls(
            id=data["id"],
            primary_type=EntityIdType(data.get("primary_type", EntityIdType.INTERNAL.value)),
            name=data.get("name", ""),
        )
