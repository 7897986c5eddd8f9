"""Schema translation from pydantic models to the provider's JSON-schema wire format.

Strict structured outputs require:
1. All objects must have 'additionalProperties: false'
2. All properties must be in the 'required' array
3. No $ref indirection (referenced definitions are inlined here)

This is the only module that knows how a validator description becomes a
``response_format`` payload; the client never inspects schemas itself.
"""

import copy
import logging
from typing import Any

from pydantic import BaseModel

from flashcardengine.models.requests import ResponseSchema

logger = logging.getLogger(__name__)

# Keys pydantic emits for documentation only
_METADATA_KEYS = {"title", "$schema"}


def build_response_format(response_schema: ResponseSchema) -> dict[str, Any]:
    """Build the ``response_format`` object for a chat-completion payload."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": response_schema.name,
            "strict": True,
            "schema": to_json_schema(response_schema.output_type),
        },
    }


def to_json_schema(output_type: type[BaseModel]) -> dict[str, Any]:
    """Render *output_type* as a self-contained strict JSON schema."""
    schema = output_type.model_json_schema()
    definitions = schema.pop("$defs", {})
    inlined = _inline_refs(schema, definitions)
    return make_schema_strict(inlined)


def make_schema_strict(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Force strict structural enforcement on every object node.

    Args:
        schema: JSON schema without $ref indirection

    Returns:
        Copy of the schema with additionalProperties disabled and all properties required
    """
    schema = copy.deepcopy(schema)
    strict = _clean_schema_node(schema)
    # The root is always closed, even when it is not declared as an object
    strict["additionalProperties"] = False
    return strict


def _inline_refs(node: Any, definitions: dict[str, Any]) -> Any:
    """Replace every ``{"$ref": "#/$defs/Name"}`` with a copy of the definition."""
    if isinstance(node, list):
        return [_inline_refs(item, definitions) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        ref_name = node["$ref"].rsplit("/", 1)[-1]
        if ref_name not in definitions:
            raise ValueError(f"Unresolvable schema reference: {node['$ref']}")
        logger.debug(f"Inlining schema definition {ref_name}")
        return _inline_refs(copy.deepcopy(definitions[ref_name]), definitions)

    return {key: _inline_refs(value, definitions) for key, value in node.items()}


def _clean_schema_node(schema: Any) -> Any:
    """Recursive helper for make_schema_strict."""
    if isinstance(schema, list):
        return [_clean_schema_node(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    cleaned: dict[str, Any] = {}
    for key, value in schema.items():
        if key in _METADATA_KEYS:
            continue
        if key == "properties" and isinstance(value, dict):
            # Property names are user data, not schema keywords
            cleaned[key] = {name: _clean_schema_node(prop) for name, prop in value.items()}
        else:
            cleaned[key] = _clean_schema_node(value)

    if cleaned.get("type") == "object":
        cleaned["additionalProperties"] = False
        if "properties" in cleaned:
            cleaned["required"] = list(cleaned["properties"].keys())

    return cleaned
