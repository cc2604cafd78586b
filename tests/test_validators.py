import json

from ecostore.config import CacheConfig, EcoStoreConfig, StorageConfig
from ecostore.validators import validate_config, validate_storage_dict, validate_storage_file


def test_validate_config_accepts_defaults():
    assert validate_config(EcoStoreConfig()) == []


def test_validate_config_reports_problems():
    config = EcoStoreConfig(
        storage=StorageConfig(path="./storage.txt"),
        cache=CacheConfig(max_age=-1, remote_timeout=0),
    )
    errors = validate_config(config)
    assert any("extension" in error for error in errors)
    assert any("max_age" in error for error in errors)
    assert any("remote_timeout" in error for error in errors)


def test_validate_storage_dict_accepts_valid_tree():
    data = {
        "g1": {
            "u1": {
                "money": 10,
                "bank": -5.5,
                "inventory": [{"id": 1, "name": "Sword"}],
                "history": [],
                "cooldowns": {"daily": 1700000000000},
            },
            "shop": [],
            "settings": {"prefix": "!"},
        }
    }
    assert validate_storage_dict(data) == []


def test_validate_storage_dict_reports_problems():
    data = {
        "g1": {
            "u1": {"money": "10", "inventory": [{"name": "Sword"}], "cooldowns": {"hourly": 1}},
            "u2": 5,
            "shop": {},
        },
        "g2": [],
    }
    errors = validate_storage_dict(data)
    assert "'g1.u1.money' must be a number, found str." in errors
    assert "'g1.u1.inventory' entry #1 must define an integer 'id'." in errors
    assert "'g1.u1.cooldowns' has unknown cooldown 'hourly'." in errors
    assert "Member 'g1.u2' must be an object." in errors
    assert "Guild 'g1' shop must be an array." in errors
    assert "Guild 'g2' must be an object." in errors


def test_validate_storage_dict_rejects_non_object_root():
    assert validate_storage_dict([]) == ["Storage root must be a JSON object."]


def test_validate_storage_file(tmp_path):
    missing = tmp_path / "missing.json"
    assert validate_storage_file(missing) == [f"Storage file '{missing}' does not exist."]

    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    assert "not valid JSON" in validate_storage_file(broken)[0]

    valid = tmp_path / "valid.json"
    valid.write_text(json.dumps({"g1": {"u1": {"money": 1}}}), encoding="utf-8")
    assert validate_storage_file(valid) == []
