from __future__ import annotations

import json
from pathlib import Path

import pytest

from car_diagnostics.config import SAMPLE_CAR_PATH
from car_diagnostics.domain import ConditionType, PartType
from car_diagnostics.loader import car_from_mapping, load_car, parse_car_xml


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_load_bundled_sample():
    car = load_car(SAMPLE_CAR_PATH)

    assert (car.make, car.model, car.year) == ("Ford", "Mustang", "1967")
    assert len(car.parts) == 5
    assert car.parts[2].type is PartType.TIRE
    assert car.parts[2].condition is ConditionType.FLAT


def test_parse_xml_attributes_and_children():
    car = parse_car_xml(
        """
        <car>
          <make>Honda</make>
          <year>2004</year>
          <parts>
            <part type="ENGINE" condition="GOOD"><inventoryId>E-1</inventoryId></part>
            <part><inventoryId>T-1</inventoryId><type>TIRE</type><condition>flat</condition></part>
            <part partType="OIL_FILTER"><inventoryId> </inventoryId></part>
          </parts>
        </car>
        """
    )

    assert car.model is None
    assert car.missing_fields() == ["model"]
    assert [p.type for p in car.parts] == [PartType.ENGINE, PartType.TIRE, PartType.OIL_FILTER]
    assert car.parts[1].condition is ConditionType.FLAT
    assert car.parts[2].inventory_id is None
    assert car.parts[2].condition is None


def test_parse_xml_without_parts_element():
    car = parse_car_xml("<car><make>Kia</make></car>")

    assert car.parts is None


def test_parse_xml_rejects_other_root():
    with pytest.raises(ValueError, match="<car>"):
        parse_car_xml("<truck/>")


def test_parse_xml_rejects_malformed():
    with pytest.raises(ValueError):
        parse_car_xml("<car><make>")


def test_unknown_enum_value_becomes_missing(caplog):
    with caplog.at_level("WARNING"):
        car = car_from_mapping(
            {"parts": [{"inventoryId": "X", "type": "SPOILER", "condition": "RUSTY"}]}
        )

    assert car.parts[0].type is None
    assert car.parts[0].condition is None
    assert "SPOILER" in caplog.text
    assert "RUSTY" in caplog.text


def test_mapping_coerces_numbers_and_unwraps_car_key():
    car = car_from_mapping(
        {"car": {"make": "Saab", "year": 1999, "parts": [{"inventoryId": 42, "partType": "tire"}]}}
    )

    assert car.year == "1999"
    assert car.parts[0].inventory_id == "42"
    assert car.parts[0].type is PartType.TIRE


def test_mapping_rejects_bad_parts():
    with pytest.raises(ValueError, match="list"):
        car_from_mapping({"parts": "ENGINE"})
    with pytest.raises(ValueError, match="index 1"):
        car_from_mapping({"parts": [{"type": "ENGINE"}, "TIRE"]})


def test_load_json(tmp_path):
    path = _write(
        tmp_path,
        "car.json",
        json.dumps(
            {
                "make": "Volvo",
                "model": "240",
                "year": "1988",
                "parts": [{"inventoryId": "E-1", "type": "ENGINE", "condition": "WORN"}],
            }
        ),
    )

    car = load_car(path)

    assert car.model == "240"
    assert car.parts[0].is_in_working_condition()


def test_load_yaml(tmp_path):
    path = _write(
        tmp_path,
        "car.yml",
        "make: Fiat\nmodel: Panda\nyear: 1990\nparts:\n"
        "  - inventoryId: F-1\n    type: FUEL_FILTER\n    condition: DAMAGED\n",
    )

    car = load_car(path)

    assert car.year == "1990"
    assert car.parts[0].is_damaged()


def test_load_empty_yaml_gives_empty_car(tmp_path):
    car = load_car(_write(tmp_path, "car.yaml", ""))

    assert car.parts is None
    assert car.missing_fields() == ["make", "model", "year"]


def test_load_missing_file():
    with pytest.raises(FileNotFoundError):
        load_car("nonexistent.xml")


@pytest.mark.parametrize(
    "name, text",
    [
        ("car.json", "{not json"),
        ("car.json", "[]"),
        ("car.yaml", "- a\n- b\n"),
        ("car.yaml", "make: [unclosed"),
        ("car.txt", "make=Ford"),
    ],
)
def test_load_malformed(tmp_path, name, text):
    with pytest.raises(ValueError):
        load_car(_write(tmp_path, name, text))


def test_load_xml_honours_declared_encoding(tmp_path):
    path = tmp_path / "car.xml"
    path.write_bytes(
        '<?xml version="1.0" encoding="ISO-8859-1"?>'
        "<car><make>Citroën</make><model>2CV</model><year>1970</year>"
        '<parts><part type="ENGINE" condition="GOOD"><inventoryId>E-1</inventoryId></part></parts>'
        "</car>".encode("latin-1")
    )

    car = load_car(path)

    assert car.make == "Citroën"
    assert car.parts[0].type is PartType.ENGINE


def test_load_unreadable_path_is_value_error(tmp_path):
    path = tmp_path / "car.xml"
    path.mkdir()

    with pytest.raises(ValueError, match="Cannot read car file"):
        load_car(path)
