"""Maps a single field to an OpenAPI property fragment.

Keys are applied in a fixed order: type, plain copy-through values,
constraints for the resolved type, enum, then boolean flags. Boolean
flags are only ever written when true.
"""

import logging

from api_spectrum.models import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

SIMPLE_PROPERTIES = ("description", "example", "format", "pattern", "default")

NUMERIC_CONSTRAINTS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")
STRING_CONSTRAINTS = ("minLength", "maxLength")
ARRAY_CONSTRAINTS = ("minItems", "maxItems", "uniqueItems")

CONSTRAINTS_BY_TYPE = {
    "integer": NUMERIC_CONSTRAINTS,
    "number": NUMERIC_CONSTRAINTS,
    "string": STRING_CONSTRAINTS,
    "array": ARRAY_CONSTRAINTS,
}

BOOLEAN_FLAGS = ("nullable", "readOnly", "writeOnly", "deprecated")


def normalize_enum(enum) -> tuple[list, str | None] | None:
    """Reduce the accepted enum shapes to ``(values, type override)``.

    Accepted: a plain list, ``{"values": [...], "type": ...}``, or an
    object with ``values`` and ``get_openapi_type()`` such as EnumInfo.
    """
    if enum is None:
        return None
    if isinstance(enum, (list, tuple)):
        return list(enum), None
    if isinstance(enum, dict):
        if "values" not in enum:
            return None
        return list(enum["values"]), enum.get("type")
    get_type = getattr(enum, "get_openapi_type", None)
    values = getattr(enum, "values", None)
    if callable(get_type) and values is not None:
        return list(values() if callable(values) else values), get_type()
    logger.debug("Unsupported enum shape %s", type(enum).__name__)
    return None


def descriptor_to_source(descriptor: FieldDescriptor) -> dict:
    """Flat source dict for a FieldDescriptor, using OpenAPI key names."""
    source: dict = {
        "type": "string" if descriptor.type == FieldType.FILE else descriptor.type.value,
    }
    for key in ("description", "format", "example", "default"):
        value = getattr(descriptor, key)
        if value is not None:
            source[key] = value
    source.update(descriptor.constraints)
    if descriptor.enum is not None:
        source["enum"] = descriptor.enum
    source["nullable"] = descriptor.nullable
    source["readOnly"] = descriptor.read_only
    source["writeOnly"] = descriptor.write_only
    source["deprecated"] = descriptor.deprecated
    return source


class SchemaPropertyMapper:
    """Pure mapping of one field description to a property schema."""

    def map_all(self, source: FieldDescriptor | dict) -> dict:
        data = self._as_source(source)
        schema = {"type": self.map_type(data)}
        schema.update(self.map_simple_properties(data))
        schema.update(self.map_constraints(data, schema["type"]))
        schema.update(self.map_enum(data))
        schema.update(self.map_boolean_flags(data))
        return schema

    def map_type(self, source: FieldDescriptor | dict) -> str:
        data = self._as_source(source)
        return data.get("type") or "string"

    def map_simple_properties(self, data: dict) -> dict:
        return {key: data[key] for key in SIMPLE_PROPERTIES if key in data}

    def map_constraints(self, data: dict, resolved_type: str) -> dict:
        # Legacy inputs nest constraints one level down.
        merged = {**data.get("constraints", {}), **data}
        keys = CONSTRAINTS_BY_TYPE.get(resolved_type, ())
        return {key: merged[key] for key in keys if key in merged}

    def map_enum(self, data: dict) -> dict:
        normalized = normalize_enum(data.get("enum"))
        if normalized is None:
            return {}
        values, type_override = normalized
        result: dict = {"enum": values}
        if type_override:
            result["type"] = type_override
        return result

    def map_boolean_flags(self, data: dict) -> dict:
        return {flag: True for flag in BOOLEAN_FLAGS if data.get(flag) is True}

    def map_specific_properties(self, source: FieldDescriptor | dict, keys: list[str]) -> dict:
        """Full mapping restricted to ``keys``; ``type`` is always kept."""
        schema = self.map_all(source)
        return {k: v for k, v in schema.items() if k == "type" or k in keys}

    def _as_source(self, source: FieldDescriptor | dict) -> dict:
        if isinstance(source, FieldDescriptor):
            return descriptor_to_source(source)
        return source
