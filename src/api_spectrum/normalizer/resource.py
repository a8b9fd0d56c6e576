"""Resource/transformer field lists to FieldDescriptors."""

import logging

from api_spectrum.analysis.base import ResourceField
from api_spectrum.models import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

# Loose type names seen in serializer analysis -> (type, format)
TYPE_ALIASES = {
    "int": (FieldType.INTEGER, None),
    "float": (FieldType.NUMBER, None),
    "double": (FieldType.NUMBER, None),
    "decimal": (FieldType.NUMBER, None),
    "bool": (FieldType.BOOLEAN, None),
    "list": (FieldType.ARRAY, None),
    "dict": (FieldType.OBJECT, None),
    "date": (FieldType.STRING, "date"),
    "datetime": (FieldType.STRING, "date-time"),
    "timestamp": (FieldType.STRING, "date-time"),
    "mixed": (FieldType.STRING, None),
}


def resolve_type(name: str, type_name: str) -> tuple[FieldType, str | None]:
    type_name = (type_name or "string").lower()
    if type_name in TYPE_ALIASES:
        return TYPE_ALIASES[type_name]
    try:
        return FieldType(type_name), None
    except ValueError:
        logger.warning("Unknown type '%s' for field %s, using string", type_name, name)
        return FieldType.STRING, None


def descriptor_from_resource_field(name: str, field: ResourceField) -> FieldDescriptor:
    field_type, implied_format = resolve_type(name, field.type)
    if field.properties:
        field_type = FieldType.OBJECT
    elif field.items is not None:
        field_type = FieldType.ARRAY

    descriptor = FieldDescriptor(
        name=name,
        type=field_type,
        format=field.format or implied_format,
        nullable=field.nullable,
        read_only=field.read_only,
        description=field.description,
        example=field.example,
        enum=field.enum,
    )
    if field.properties:
        descriptor.children = normalize_resource_fields(field.properties)
    elif field.items is not None:
        descriptor.children = {"*": descriptor_from_resource_field("*", field.items)}
    return descriptor


def normalize_resource_fields(fields: dict[str, ResourceField]) -> dict[str, FieldDescriptor]:
    return {name: descriptor_from_resource_field(name, field) for name, field in fields.items()}
