from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import yaml
from pydantic import ValidationError

from car_diagnostics.domain import Car, ConditionType, Part, PartType

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    s = str(value).strip()
    return s or None


def _enum_or_none(enum_cls: Type[E], value: Any, *, field_name: str) -> Optional[E]:
    s = _text_or_none(value)
    if s is None:
        return None
    try:
        return enum_cls(s.upper())
    except ValueError:
        logger.warning("Unknown %s %r; treating as missing", field_name, s)
        return None


def _first(obj: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if obj.get(k) is not None:
            return obj[k]
    return None


def part_from_mapping(obj: Mapping[str, Any]) -> Part:
    return Part(
        inventory_id=_text_or_none(_first(obj, "inventoryId", "inventory_id")),
        type=_enum_or_none(
            PartType, _first(obj, "type", "partType", "part_type"), field_name="part type"
        ),
        condition=_enum_or_none(ConditionType, obj.get("condition"), field_name="condition"),
    )


def car_from_mapping(data: Mapping[str, Any]) -> Car:
    """Build a Car from a JSON/YAML-style mapping.

    ``parts`` may be missing or null; any other non-list value is rejected.
    Entries of ``parts`` must be mappings.
    """

    if not isinstance(data, Mapping):
        raise ValueError("Car document must be a mapping/object.")

    # Some documents wrap the record as {"car": {...}}.
    if set(data.keys()) == {"car"} and isinstance(data["car"], Mapping):
        data = data["car"]

    parts_raw = data.get("parts")
    parts: Optional[List[Part]] = None
    if parts_raw is not None:
        if not isinstance(parts_raw, list):
            raise ValueError("'parts' must be a list of objects.")
        parts = []
        for idx, obj in enumerate(parts_raw):
            if not isinstance(obj, Mapping):
                raise ValueError(f"Part entry at index {idx} must be an object.")
            parts.append(part_from_mapping(obj))

    try:
        return Car(
            make=_text_or_none(data.get("make")),
            model=_text_or_none(data.get("model")),
            year=_text_or_none(data.get("year")),
            parts=None if parts is None else tuple(parts),
        )
    except ValidationError as exc:
        raise ValueError(f"Invalid car record: {exc}") from exc


def _child_text(elem: ET.Element, *names: str) -> Optional[str]:
    for name in names:
        child = elem.find(name)
        if child is not None:
            return child.text
    return None


def _xml_part(elem: ET.Element) -> Dict[str, Any]:
    return {
        "inventoryId": elem.get("inventoryId") or _child_text(elem, "inventoryId"),
        "type": elem.get("type")
        or elem.get("partType")
        or _child_text(elem, "type", "partType"),
        "condition": elem.get("condition") or _child_text(elem, "condition"),
    }


def parse_car_xml(text: str | bytes) -> Car:
    """Parse a <car> document; pass bytes to honour the XML encoding declaration."""

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid XML car document: {exc}") from exc

    if root.tag != "car":
        raise ValueError(f"Expected <car> root element, got <{root.tag}>")

    data: Dict[str, Any] = {
        "make": _child_text(root, "make"),
        "model": _child_text(root, "model"),
        "year": _child_text(root, "year"),
    }

    parts_elem = root.find("parts")
    if parts_elem is not None:
        data["parts"] = [_xml_part(p) for p in parts_elem.findall("part")]

    return car_from_mapping(data)


def load_yaml(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML file must be a mapping/object: {path}")
    return data


def load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in car file: {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"JSON file must be an object: {path}")
    return data


def load_car(path: str | Path) -> Car:
    """Load a car record from an XML, JSON or YAML file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the suffix is unsupported, the file cannot be read or the
        document is malformed.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"car file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in {".xml", ".json", ".yaml", ".yml"}:
        raise ValueError(f"Unsupported car file type: {path.suffix or '(none)'}")

    try:
        if suffix == ".xml":
            car = parse_car_xml(path.read_bytes())
        elif suffix == ".json":
            car = car_from_mapping(load_json(path))
        else:
            try:
                data = load_yaml(path)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in car file: {path}") from exc
            car = car_from_mapping(data)
    except OSError as exc:
        raise ValueError(f"Cannot read car file {path}: {exc}") from exc

    logger.debug(
        "Loaded car %s %s %s with %d part(s) from %s",
        car.make,
        car.model,
        car.year,
        len(car.parts or ()),
        path,
    )
    return car
