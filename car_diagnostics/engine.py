from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from car_diagnostics.domain import Car, ConditionType, Part, PartType
from car_diagnostics.sinks import LineSink, StdoutSink

logger = logging.getLogger(__name__)

MISSING_INVENTORY_ID = "Missing InventoryId: - Count: {count}"
MISSING_TYPE = "Missing Type for InventoryId: {inventory_id} - Count: {count}"
MISSING_CONDITION = "Missing condition for InventoryId: {inventory_id} - Count: {count}"
MISSING_PART = "Missing Part(s) Detected: {part_type} - Count: {count}"
DAMAGED_PART = "Damaged Part Detected: {part_type} - Condition: {condition}"
WORKING_PART = "Working Part : {part_type}"


@dataclass(frozen=True)
class Finding:
    kind: str
    message: str
    part_type: Optional[PartType] = None
    condition: Optional[ConditionType] = None
    inventory_id: Optional[str] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "part_type": None if self.part_type is None else self.part_type.value,
            "condition": None if self.condition is None else self.condition.value,
            "inventory_id": self.inventory_id,
            "count": self.count,
        }


@dataclass
class DiagnosticReport:
    findings: List[Finding] = field(default_factory=list)
    working_parts: List[PartType] = field(default_factory=list)
    missing_fields: List[str] = field(default_factory=list)

    @property
    def lines(self) -> List[str]:
        out = [f.message for f in self.findings]
        out.extend(WORKING_PART.format(part_type=t) for t in self.working_parts)
        return out

    @property
    def has_issues(self) -> bool:
        # A part type that is not confirmed working counts even without a line.
        return (
            bool(self.findings)
            or bool(self.missing_fields)
            or len(self.working_parts) < len(PartType)
        )

    def by_kind(self, kind: str) -> List[Finding]:
        return [f for f in self.findings if f.kind == kind]


class DiagnosticEngine:
    """Run the fixed diagnostic checks over a loaded car.

    Phases run in a fixed order (part fields, missing parts, damaged parts,
    working summary). Every line is pushed to the sink as soon as it is
    produced, so a contract violation in a later phase leaves the earlier
    lines emitted.
    """

    def __init__(self, sink: Optional[LineSink] = None):
        self.sink: LineSink = sink if sink is not None else StdoutSink()

    def run(self, car: Car) -> List[str]:
        return self.diagnose(car).lines

    def diagnose(self, car: Car) -> DiagnosticReport:
        report = DiagnosticReport(missing_fields=car.missing_fields())
        if report.missing_fields:
            logger.warning("Car record missing fields: %s", ", ".join(report.missing_fields))

        parts: Sequence[Part] = car.parts or ()
        if not parts:
            logger.info("Car has no parts; nothing to diagnose")
            return report

        working: Set[PartType] = set(PartType)

        logger.debug("Checking part fields on %d parts", len(parts))
        # Position 0 is not checked; counts are the part's position.
        for idx in range(1, len(parts)):
            self._check_part_fields(report, parts[idx], idx)

        missing_parts = car.missing_parts_map()
        logger.debug("Missing parts: %s", missing_parts)
        for part_type, count in missing_parts.items():
            self._report_missing_part(report, part_type, count)
            working.discard(part_type)

        for part in parts:
            if part.is_in_working_condition():
                continue
            if part.condition is None:
                # Not damaged, but the type cannot be confirmed working.
                if part.type is not None:
                    working.discard(part.type)
                continue
            self._report_damaged_part(report, part.type, part.condition, part.inventory_id)
            working.discard(part.type)

        for part_type in PartType:
            if part_type in working:
                report.working_parts.append(part_type)
                self.sink.emit(WORKING_PART.format(part_type=part_type))

        logger.info(
            "Diagnostics complete: %d missing part field(s), %d missing part type(s), "
            "%d damaged part(s), %d working part type(s)",
            len(report.by_kind("missing_part_field")),
            len(report.by_kind("missing_part")),
            len(report.by_kind("damaged_part")),
            len(report.working_parts),
        )
        return report

    def _emit(self, report: DiagnosticReport, finding: Finding) -> None:
        report.findings.append(finding)
        self.sink.emit(finding.message)

    def _check_part_fields(self, report: DiagnosticReport, part: Part, count: int) -> None:
        if part.inventory_id is None:
            self._emit(
                report,
                Finding(
                    kind="missing_part_field",
                    message=MISSING_INVENTORY_ID.format(count=count),
                    part_type=part.type,
                    condition=part.condition,
                    count=count,
                ),
            )
            return

        if part.type is None:
            self._emit(
                report,
                Finding(
                    kind="missing_part_field",
                    message=MISSING_TYPE.format(inventory_id=part.inventory_id, count=count),
                    condition=part.condition,
                    inventory_id=part.inventory_id,
                    count=count,
                ),
            )
        if part.condition is None:
            self._emit(
                report,
                Finding(
                    kind="missing_part_field",
                    message=MISSING_CONDITION.format(
                        inventory_id=part.inventory_id, count=count
                    ),
                    part_type=part.type,
                    inventory_id=part.inventory_id,
                    count=count,
                ),
            )

    def _report_missing_part(
        self, report: DiagnosticReport, part_type: Optional[PartType], count: Optional[int]
    ) -> None:
        if part_type is None:
            raise ValueError("PartType must not be None")
        if count is None or count <= 0:
            raise ValueError("Count must be greater than 0")

        self._emit(
            report,
            Finding(
                kind="missing_part",
                message=MISSING_PART.format(part_type=part_type, count=count),
                part_type=part_type,
                count=count,
            ),
        )

    def _report_damaged_part(
        self,
        report: DiagnosticReport,
        part_type: Optional[PartType],
        condition: Optional[ConditionType],
        inventory_id: Optional[str] = None,
    ) -> None:
        if part_type is None:
            raise ValueError("PartType must not be None")
        if condition is None:
            raise ValueError("ConditionType must not be None")

        self._emit(
            report,
            Finding(
                kind="damaged_part",
                message=DAMAGED_PART.format(part_type=part_type, condition=condition),
                part_type=part_type,
                condition=condition,
                inventory_id=inventory_id,
            ),
        )
