import json

import pytest

from veribridge.base_data import build_location_table, load_location_table
from veribridge.config import load_config
from veribridge.locations import KENYA_LOCATIONS
from veribridge.models import AddressComponents, LocationRecord


def test_components_from_loose_mapping():
    comps = AddressComponents.from_mapping({
        "building": "Yaya Centre",
        "postalCode": "00100",
        "countryName": "Kenya",
        "state": None,
        "unexpected": "ignored",
    })
    assert comps.postal_code == "00100"
    assert comps.country == "Kenya"
    assert comps.state == ""
    assert AddressComponents(city=None).city == ""


def test_location_table_is_read_only():
    with pytest.raises(TypeError):
        KENYA_LOCATIONS["kilimani"] = LocationRecord("Dagoretti North", "00505")
    assert len(KENYA_LOCATIONS) == 13
    assert KENYA_LOCATIONS["cbd"].roads[0] == "Kenyatta Avenue"


def test_load_location_table(tmp_path):
    path = tmp_path / "locations.json"
    path.write_text(json.dumps({
        " Kilimani ": {"subCounty": "Dagoretti North", "postalCode": "00505", "roads": ["Ngong Road"]},
    }), encoding="utf-8")
    table = load_location_table(path)
    assert table == {"kilimani": LocationRecord("Dagoretti North", "00505", ("Ngong Road",))}

    merged = build_location_table(path)
    assert merged["kilimani"].postal_code == "00505"
    assert merged["makina"] == KENYA_LOCATIONS["makina"]
    assert build_location_table(None) is KENYA_LOCATIONS


def test_load_location_table_rejects_bad_entries(tmp_path):
    path = tmp_path / "locations.json"
    path.write_text(json.dumps({"karen": {"roads": []}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_location_table(path)

    path.write_text(json.dumps(["karen"]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_location_table(path)


def test_load_config(tmp_path, monkeypatch):
    monkeypatch.setenv("VERIBRIDGE_API_KEYS", "vb_one, vb_two,")
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "default_jurisdiction": "KE",
        "report_path": "out.xlsx",
        "log_level": "debug",
        "locations_path": "extra.json",
    }), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.default_jurisdiction == "KE"
    assert cfg.log_level == "DEBUG"
    assert cfg.locations_path == str(tmp_path / "extra.json")
    assert cfg.api_keys == ("vb_one", "vb_two")


def test_load_default_config(monkeypatch):
    monkeypatch.delenv("VERIBRIDGE_CONFIG", raising=False)
    monkeypatch.delenv("VERIBRIDGE_API_KEYS", raising=False)
    cfg = load_config()
    assert cfg.default_jurisdiction == "KE"
    assert cfg.locations_path is None
    assert cfg.api_keys == ()


def test_load_config_requires_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"report_path": "out.xlsx"}), encoding="utf-8")
    with pytest.raises(KeyError):
        load_config(path)
