from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from catalog_sync.config.loader import SCHEMA_PATH

"""Config schema contract test: the packaged schema accepts the documented keys only."""


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_validates_from_sample_yaml(schema, sample_config_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_config_yaml), schema)


def test_config_schema_empty_mapping_is_valid(schema):
    jsonschema.validate({}, schema)


def test_config_schema_rejects_extra_key(schema):
    with pytest.raises(ValidationError):
        jsonschema.validate({"delimiter": ",", "database": {"host": "localhost"}}, schema)


@pytest.mark.parametrize("delimiter", ["", ",,", '"', "\n"])
def test_config_schema_rejects_bad_delimiter(schema, delimiter: str):
    with pytest.raises(ValidationError):
        jsonschema.validate({"delimiter": delimiter}, schema)


def test_config_schema_accepts_semicolon_delimiter(schema):
    jsonschema.validate({"delimiter": ";"}, schema)


def test_config_schema_rejects_unknown_mode(schema):
    with pytest.raises(ValidationError):
        jsonschema.validate({"default_mode": "upsert"}, schema)


def test_config_schema_rejects_path_like_export_prefix(schema):
    with pytest.raises(ValidationError):
        jsonschema.validate({"export_prefix": "../exports/catalog"}, schema)
