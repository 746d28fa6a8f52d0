"""Schema conformance tests for MergeConfig.

Each input is checked against both the JSON Schema and the Pydantic model;
the two must agree on accepting it, and whenever the schema rejects an
input Pydantic must reject it too.
"""

# pylint: disable=missing-function-docstring
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import ValidationError as JsonSchemaValidationError
from jsonschema import validate as jsonschema_validate
from pydantic import ValidationError as PydanticValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from log_seek.config.merge_config import MergeConfig

SCHEMA_DIR = Path(__file__).parent.parent.parent.parent / "log_seek" / "core" / "schemas"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_schema(name: str) -> tuple[dict, Registry]:
    with (SCHEMA_DIR / name).open("r", encoding="utf-8") as f:
        schema = json.load(f)

    resource = Resource.from_contents(schema, default_specification=DRAFT202012)
    registry = Registry().with_resource(schema["$id"], resource)
    return schema, registry


def assert_both_accept(data: dict[str, Any], schema: dict, registry: Registry) -> MergeConfig:
    jsonschema_validate(instance=data, schema=schema, registry=registry)
    return MergeConfig.from_json_obj(data)


def assert_schema_invalid_but_pydantic_rejects(data: dict[str, Any], schema: dict, registry: Registry) -> None:
    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=data, schema=schema, registry=registry)

    with pytest.raises(PydanticValidationError):
        MergeConfig.from_json_obj(data)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module")
def merge_config_schema() -> tuple[dict, Registry]:
    return load_schema("merge_config.schema.json")


# ---------------------------------------------------------------------------
# Accepted inputs
# ---------------------------------------------------------------------------

def test_minimal_config(merge_config_schema):
    cfg = assert_both_accept({"files": ["app.log"]}, *merge_config_schema)
    assert cfg.files == [Path("app.log")]


def test_full_config(merge_config_schema):
    data = {
        "files": ["app.log", "worker.log"],
        "start": "2024-04-22T10:00:00Z",
        "duration": "15m",
        "lines": 100,
        "syslog_year": 2024,
        "record_events": "events.jsonl",
    }
    cfg = assert_both_accept(data, *merge_config_schema)
    assert cfg.lines == 100


def test_explicit_nulls(merge_config_schema):
    assert_both_accept(
        {"files": ["app.log"], "start": None, "end": None, "lines": None},
        *merge_config_schema,
    )


def test_start_and_end(merge_config_schema):
    assert_both_accept(
        {"files": ["app.log"], "start": "2024-04-22T10:00:00Z", "end": "2024-04-22T11:00:00Z"},
        *merge_config_schema,
    )


# ---------------------------------------------------------------------------
# Rejected inputs
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "data",
    [
        {},
        {"files": []},
        {"files": ["app.log"], "follow": True},
        {"files": ["app.log"], "lines": -1},
        {"files": ["app.log"], "duration": "5d"},
        {"files": ["app.log"], "duration": "0s"},
        {"files": ["app.log"], "syslog_year": 0},
        {
            "files": ["app.log"],
            "start": "2024-04-22T10:00:00Z",
            "end": "2024-04-22T11:00:00Z",
            "duration": "5m",
        },
    ],
)
def test_rejected_by_both(merge_config_schema, data):
    assert_schema_invalid_but_pydantic_rejects(data, *merge_config_schema)
