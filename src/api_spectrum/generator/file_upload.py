"""Schemas for uploaded files and multipart request bodies."""

from api_spectrum.models import FieldDescriptor, FileConstraints

MULTIPART = "multipart/form-data"


def format_file_size(size: int) -> str:
    """``2097152`` -> ``2MB``, ``1536`` -> ``1.5KB``."""
    for unit, factor in (("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)):
        if size >= factor:
            value = size / factor
            return f"{int(value)}{unit}" if value == int(value) else f"{value:.1f}{unit}"
    return f"{size}B"


def describe_dimensions(dimensions: dict) -> list[str]:
    parts = []
    if "width" in dimensions and "height" in dimensions:
        parts.append(f"Required dimensions: {dimensions['width']}x{dimensions['height']}")

    if "min_width" in dimensions and "min_height" in dimensions:
        parts.append(f"Min dimensions: {dimensions['min_width']}x{dimensions['min_height']}")
    elif "min_width" in dimensions:
        parts.append(f"Min width: {dimensions['min_width']}")
    elif "min_height" in dimensions:
        parts.append(f"Min height: {dimensions['min_height']}")

    if "max_width" in dimensions and "max_height" in dimensions:
        parts.append(f"Max dimensions: {dimensions['max_width']}x{dimensions['max_height']}")
    elif "max_width" in dimensions:
        parts.append(f"Max width: {dimensions['max_width']}")
    elif "max_height" in dimensions:
        parts.append(f"Max height: {dimensions['max_height']}")

    if "ratio" in dimensions:
        parts.append(f"Aspect ratio: {dimensions['ratio']}")
    return parts


def describe_file(constraints: FileConstraints | None) -> str:
    if constraints is None:
        return ""
    parts = []
    if constraints.mimes:
        parts.append("Allowed types: " + ", ".join(constraints.mimes))
    if constraints.max_size is not None:
        parts.append("Max size: " + format_file_size(constraints.max_size))
    if constraints.min_size is not None:
        parts.append("Min size: " + format_file_size(constraints.min_size))
    parts.extend(describe_dimensions(constraints.dimensions))
    return ". ".join(parts)


class FileUploadSchemaGenerator:
    def generate_file_schema(self, descriptor: FieldDescriptor) -> dict:
        """``{type: string, format: binary}`` plus a readable constraint summary."""
        schema = {"type": "string", "format": "binary"}
        description = describe_file(descriptor.file_constraints)
        if descriptor.description:
            description = f"{descriptor.description}. {description}" if description else descriptor.description
        if description:
            schema["description"] = description
        return schema

    def generate_multipart_schema(self, properties: dict, required: list[str]) -> dict:
        schema: dict = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return {"content": {MULTIPART: {"schema": schema}}}

    def file_fields(self, fields: dict[str, FieldDescriptor]) -> list[str]:
        return [name for name, field in fields.items() if field.is_file]
