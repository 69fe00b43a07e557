"""Shared fixtures: a small pet store API in two versions."""

import copy
import json
import tempfile
from pathlib import Path

import pytest
import yaml

PREVIOUS_SPEC = {
    "openapi": "3.0.3",
    "info": {"title": "Pets", "version": "1.0.0", "description": "Pet store"},
    "paths": {
        "/pets": {
            "get": {
                "summary": "List pets",
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "required": False,
                        "schema": {"type": "integer"},
                    }
                ],
                "responses": {
                    "200": {"description": "OK"},
                    "404": {"description": "Not found"},
                },
            },
        },
        "/stores": {"get": {"responses": {"200": {"description": "OK"}}}},
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "tag": {"type": "string"},
                },
            },
            "Legacy": {"type": "object"},
        }
    },
}

LATEST_SPEC = {
    "openapi": "3.0.3",
    "info": {"title": "Pets", "version": "1.1.0", "description": "Pet store"},
    "paths": {
        "/pets": {
            "get": {
                "summary": "List all pets",
                "deprecated": True,
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "required": True,
                        "schema": {"type": "integer"},
                    }
                ],
                "responses": {"200": {"description": "OK"}},
            },
            "post": {"responses": {"201": {"description": "Created"}}},
        },
        "/owners": {"get": {"responses": {"200": {"description": "OK"}}}},
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "integer", "format": "int64"},
                    "name": {"type": "string"},
                },
            },
            "Owner": {"type": "object"},
        }
    },
}


@pytest.fixture
def previous_spec():
    return copy.deepcopy(PREVIOUS_SPEC)


@pytest.fixture
def latest_spec():
    return copy.deepcopy(LATEST_SPEC)


@pytest.fixture
def temp_dir():
    """Create a temporary working directory."""
    with tempfile.TemporaryDirectory() as temp:
        yield Path(temp)


@pytest.fixture
def spec_files(temp_dir, previous_spec, latest_spec):
    """Write both versions to disk, previous as YAML and latest as JSON."""
    previous_path = temp_dir / "previous.yaml"
    latest_path = temp_dir / "latest.json"
    previous_path.write_text(yaml.safe_dump(previous_spec, sort_keys=False))
    latest_path.write_text(json.dumps(latest_spec, indent=2))
    return previous_path, latest_path
