"""
Common test helpers
"""

# Standard
import json
import os

# Third Party
import pytest

# First Party
import alog

# Global logging config
alog.configure(
    default_level=os.environ.get("LOG_LEVEL", "info"),
    filters=os.environ.get("LOG_FILTERS", ""),
    formatter="json" if os.environ.get("LOG_JSON", "").lower() == "true" else "pretty",
    thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
)

BUNDLE_NAME = "skiff.registry.v1.PluginManifest.jsonschema.strict.bundle.json"


@pytest.fixture
def bundled_schema():
    """A schema shaped like the protoc-gen-jsonschema bundle output"""
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": "skiff.registry.v1.PluginManifest.jsonschema.strict.bundle.json",
        "$ref": "#/$defs/skiff.registry.v1.PluginManifest.jsonschema.strict.json",
        "$defs": {
            "skiff.registry.v1.PluginManifest.jsonschema.strict.json": {
                "$schema": "https://json-schema.org/draft/2020-12/schema",
                "$id": "skiff.registry.v1.PluginManifest.jsonschema.strict.json",
                "type": "object",
                "title": "Plugin Manifest",
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string"},
                    "version": {
                        "$ref": "#/$defs/skiff.registry.v1.Version.jsonschema.strict.json"
                    },
                    "tags": {
                        "type": "array",
                        "items": {
                            "$ref": "#/$defs/skiff.registry.v1.Tag.jsonschema.strict.json"
                        },
                    },
                },
            },
            "skiff.registry.v1.Version.jsonschema.strict.json": {
                "$schema": "https://json-schema.org/draft/2020-12/schema",
                "$id": "skiff.registry.v1.Version.jsonschema.strict.json",
                "type": "object",
                "properties": {
                    "major": {"type": "integer"},
                    "minor": {"type": "integer"},
                },
            },
            "skiff.registry.v1.Tag.jsonschema.strict.json": {
                "$id": "skiff.registry.v1.Tag.jsonschema.strict.json",
                "type": "string",
                "enum": ["STABLE", "BETA"],
            },
        },
    }


@pytest.fixture
def schema_dir(tmp_path, bundled_schema):
    """A directory holding one bundled schema and one unrelated file"""
    (tmp_path / BUNDLE_NAME).write_text(json.dumps(bundled_schema))
    (tmp_path / "README.md").write_text("not a schema")
    yield tmp_path
