from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PartType(str, Enum):
    ELECTRICAL = "ELECTRICAL"
    ENGINE = "ENGINE"
    FUEL_FILTER = "FUEL_FILTER"
    OIL_FILTER = "OIL_FILTER"
    TIRE = "TIRE"

    def __str__(self) -> str:
        return self.value


class ConditionType(str, Enum):
    NEW = "NEW"
    GOOD = "GOOD"
    WORN = "WORN"
    DAMAGED = "DAMAGED"
    BROKEN = "BROKEN"
    FLAT = "FLAT"
    NO_POWER = "NO_POWER"
    SPUN_BEARING = "SPUN_BEARING"

    def __str__(self) -> str:
        return self.value


WORKING_CONDITIONS = frozenset(
    {ConditionType.NEW, ConditionType.GOOD, ConditionType.WORN}
)

EXPECTED_PART_QUANTITIES: Dict[PartType, int] = {
    PartType.ELECTRICAL: 1,
    PartType.ENGINE: 1,
    PartType.FUEL_FILTER: 1,
    PartType.OIL_FILTER: 1,
    PartType.TIRE: 2,
}

REQUIRED_FIELDS = ("make", "model", "year")


class Part(BaseModel):
    model_config = ConfigDict(frozen=True)

    inventory_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("inventory_id", "inventoryId")
    )
    type: Optional[PartType] = Field(
        default=None, validation_alias=AliasChoices("type", "partType", "part_type")
    )
    condition: Optional[ConditionType] = None

    def is_in_working_condition(self) -> bool:
        return self.condition in WORKING_CONDITIONS

    def is_damaged(self) -> bool:
        # A part with no recorded condition is neither working nor damaged.
        return self.condition is not None and not self.is_in_working_condition()


class Car(BaseModel):
    """Deserialized vehicle record.

    ``parts`` keeps document order and may be absent entirely; the
    diagnostic engine treats ``None`` and an empty tuple the same way.
    """

    model_config = ConfigDict(frozen=True)

    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[str] = None
    parts: Optional[Tuple[Part, ...]] = None

    def missing_fields(self) -> List[str]:
        out: List[str] = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                out.append(name)
        return out

    def missing_parts_map(self) -> Dict[PartType, int]:
        """Shortfall per part type against ``EXPECTED_PART_QUANTITIES``.

        Only types with a positive shortfall are present. Parts without a
        type are not counted toward any quantity.
        """

        counts: Dict[PartType, int] = {t: 0 for t in PartType}
        for part in self.parts or ():
            if part.type is not None:
                counts[part.type] += 1

        missing: Dict[PartType, int] = {}
        for part_type in PartType:
            shortfall = EXPECTED_PART_QUANTITIES[part_type] - counts[part_type]
            if shortfall > 0:
                missing[part_type] = shortfall
        return missing
