import json

import pytest

from ufilestore.config.json_config import JsonConfig
from ufilestore.core.exceptions import ConfigError

DOCUMENT = {
    "ufile": {
        "public_key": "pub",
        "limits": {"max_workers": 8, "timeout": 2.5},
        "regions": ["cn-bj", "cn-sh"],
    },
    "mixed": ["a", 1],
    "flag": True,
}


@pytest.fixture
def config():
    return JsonConfig(DOCUMENT)


def test_dotted_lookup(config):
    assert config.get("ufile.public_key") == "pub"
    assert config.get("ufile.limits.max_workers") == 8
    assert config.get("ufile.limits") == {"max_workers": 8, "timeout": 2.5}


def test_lookup_stops_at_first_leaf(config):
    assert config.get("ufile.public_key.extra") == "pub"


def test_missing_key_raises(config):
    with pytest.raises(ConfigError, match="no value for key ufile.missing"):
        config.get("ufile.missing")
    assert not config.has("ufile.missing")
    assert config.has("ufile.regions")


def test_typed_getters(config):
    assert config.get_string("ufile.public_key") == "pub"
    assert config.get_int("ufile.limits.max_workers") == 8
    assert config.get_float("ufile.limits.timeout") == 2.5
    assert config.get_float("ufile.limits.max_workers") == 8.0
    assert config.get_string_list("ufile.regions") == ["cn-bj", "cn-sh"]
    assert config.get_list("mixed") == ["a", 1]


@pytest.mark.parametrize(
    "getter,key,message",
    [
        ("get_string", "ufile.limits.max_workers", "is not string"),
        ("get_int", "ufile.public_key", "is not int"),
        ("get_int", "flag", "is not int"),
        ("get_float", "ufile.regions", "is not float"),
        ("get_list", "ufile.public_key", "is not a list"),
        ("get_string_list", "mixed", r"mixed\[1\] is not a string"),
    ],
)
def test_typed_getter_type_errors(config, getter, key, message):
    with pytest.raises(ConfigError, match=message):
        getattr(config, getter)(key)


def test_from_bytes_and_dump_round_trip():
    config = JsonConfig.from_bytes(json.dumps(DOCUMENT).encode())

    assert json.loads(config.dump()) == DOCUMENT
    assert "\t" in config.dump()


def test_from_bytes_rejects_invalid_json():
    with pytest.raises(ConfigError, match="invalid JSON"):
        JsonConfig.from_bytes(b"{not json")


def test_from_bytes_rejects_non_mapping():
    with pytest.raises(ConfigError, match="must be a mapping"):
        JsonConfig.from_bytes(b"[1, 2]")


def test_from_file_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(DOCUMENT))

    assert JsonConfig.from_file(path).get("ufile.regions") == ["cn-bj", "cn-sh"]


def test_from_file_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("ufile:\n  public_key: pub\n  limits:\n    max_workers: 3\n")

    config = JsonConfig.from_file(path)

    assert config.get_int("ufile.limits.max_workers") == 3


def test_from_file_empty_yaml_is_empty_document(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")

    assert JsonConfig.from_file(path).to_dict() == {}


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigError, match="cannot read configuration"):
        JsonConfig.from_file(tmp_path / "missing.json")


def test_from_file_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("ufile: [unclosed\n")

    with pytest.raises(ConfigError, match="invalid YAML"):
        JsonConfig.from_file(path)
