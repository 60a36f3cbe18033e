"""JSON schema for the host keymap file, generated from registered action names."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"


def keymap_json_schema(action_names: Iterable[str]) -> dict[str, Any]:
    """Build the keymap schema.

    A keymap file is an array of blocks, each with an optional ``context``
    predicate and a ``bindings`` object mapping keystrokes to actions. An action
    is a bare action name, a ``[name, arguments]`` pair, or ``null`` to unbind.
    """
    names = sorted({str(name) for name in action_names if str(name)})
    action_name = {"type": "string", "enum": names}

    return {
        "$schema": JSON_SCHEMA_DRAFT,
        "title": "KeymapFile",
        "type": "array",
        "items": {"$ref": "#/definitions/KeymapBlock"},
        "definitions": {
            "KeymapBlock": {
                "type": "object",
                "required": ["bindings"],
                "properties": {
                    "context": {"type": ["string", "null"]},
                    "bindings": {
                        "type": "object",
                        "additionalProperties": {"$ref": "#/definitions/KeymapAction"},
                    },
                },
            },
            "KeymapAction": {
                "anyOf": [
                    action_name,
                    {
                        "type": "array",
                        "items": [action_name, {}],
                        "minItems": 2,
                        "maxItems": 2,
                    },
                    {"type": "null"},
                ]
            },
        },
    }
