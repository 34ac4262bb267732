from __future__ import annotations

from typing import Iterable, Optional

import pytest

from car_diagnostics.domain import Car, ConditionType, Part, PartType
from car_diagnostics.engine import DiagnosticEngine
from car_diagnostics.sinks import ListSink


def make_part(
    inventory_id: Optional[str],
    part_type: Optional[PartType],
    condition: Optional[ConditionType] = ConditionType.GOOD,
) -> Part:
    return Part(inventory_id=inventory_id, type=part_type, condition=condition)


def complete_parts() -> list[Part]:
    return [
        make_part("E-1", PartType.ENGINE),
        make_part("EL-1", PartType.ELECTRICAL, ConditionType.NEW),
        make_part("FF-1", PartType.FUEL_FILTER),
        make_part("OF-1", PartType.OIL_FILTER, ConditionType.WORN),
        make_part("T-1", PartType.TIRE),
        make_part("T-2", PartType.TIRE),
    ]


def make_car(parts: Optional[Iterable[Part]] = None, **fields) -> Car:
    base = {"make": "Ford", "model": "Mustang", "year": "1967"}
    base.update(fields)
    return Car(parts=None if parts is None else tuple(parts), **base)


@pytest.fixture
def complete_car() -> Car:
    return make_car(complete_parts())


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def engine(sink: ListSink) -> DiagnosticEngine:
    return DiagnosticEngine(sink=sink)
