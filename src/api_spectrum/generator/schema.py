"""Object, array, conditional and resource schema composition."""

from api_spectrum.analysis.base import ResourceFieldInfo
from api_spectrum.generator.file_upload import FileUploadSchemaGenerator
from api_spectrum.generator.property_mapper import SchemaPropertyMapper
from api_spectrum.models import ConditionalRuleSet, FieldDescriptor, FieldType
from api_spectrum.normalizer.resource import normalize_resource_fields
from api_spectrum.support.text import singular


class SchemaGenerator:
    """Builds request and response schemas from FieldDescriptors.

    Request-side ``required`` comes from the fields' rules. Response-side
    ``required`` lists every field that is neither nullable nor read-only.
    """

    def __init__(
        self,
        mapper: SchemaPropertyMapper | None = None,
        file_uploads: FileUploadSchemaGenerator | None = None,
    ):
        self.mapper = mapper or SchemaPropertyMapper()
        self.file_uploads = file_uploads or FileUploadSchemaGenerator()

    # -- request side -------------------------------------------------------

    def generate_from_fields(self, fields: dict[str, FieldDescriptor]) -> dict:
        """Plain object schema, or a multipart content wrapper if any field is a file."""
        if self.file_uploads.file_fields(fields):
            properties = {name: self.property_schema(field) for name, field in fields.items()}
            return self.file_uploads.generate_multipart_schema(properties, self._request_required(fields))
        return self.object_schema(fields)

    def object_schema(self, fields: dict[str, FieldDescriptor]) -> dict:
        schema: dict = {
            "type": "object",
            "properties": {name: self.property_schema(field) for name, field in fields.items()},
        }
        required = self._request_required(fields)
        if required:
            schema["required"] = required
        return schema

    def property_schema(self, field: FieldDescriptor) -> dict:
        if field.type == FieldType.FILE:
            return self.file_uploads.generate_file_schema(field)

        schema = self.mapper.map_all(field)
        if field.type == FieldType.ARRAY:
            items = field.items
            schema["items"] = self.property_schema(items) if items is not None else {"type": "string"}
        elif field.type == FieldType.OBJECT and field.children:
            nested = self.object_schema(field.children)
            schema["properties"] = nested["properties"]
            if "required" in nested:
                schema["required"] = nested["required"]
        return schema

    def generate_conditional(self, rule_set: ConditionalRuleSet, titles: dict[str, str] | None = None) -> dict:
        """``oneOf`` of titled branch schemas; a single branch collapses to a plain object."""
        branches = rule_set.branches
        if not branches:
            return self.object_schema({})
        if len(branches) == 1:
            return self.object_schema(branches[0].fields)

        titles = titles or {}
        alternatives = []
        for branch in branches:
            schema = self.object_schema(branch.fields)
            schema["title"] = f"{titles.get(branch.label, branch.label)} Request"
            alternatives.append(schema)
        return {"oneOf": alternatives}

    @staticmethod
    def _request_required(fields: dict[str, FieldDescriptor]) -> list[str]:
        return [name for name, field in fields.items() if field.required]

    # -- response side ------------------------------------------------------

    def generate_from_resource(self, fields: dict[str, FieldDescriptor]) -> dict:
        schema: dict = {
            "type": "object",
            "properties": {name: self.resource_property_schema(field) for name, field in fields.items()},
        }
        required = self._response_required(fields)
        if required:
            schema["required"] = required
        return schema

    def resource_property_schema(self, field: FieldDescriptor) -> dict:
        schema = self.mapper.map_all(field)
        if field.type == FieldType.ARRAY:
            items = field.items
            schema["items"] = self.resource_property_schema(items) if items is not None else {"type": "string"}
        elif field.type == FieldType.OBJECT and field.children:
            nested = self.generate_from_resource(field.children)
            schema["properties"] = nested["properties"]
            if "required" in nested:
                schema["required"] = nested["required"]
        return schema

    @staticmethod
    def _response_required(fields: dict[str, FieldDescriptor]) -> list[str]:
        return [name for name, field in fields.items() if not field.nullable and not field.read_only]

    def generate_fractal(self, info: ResourceFieldInfo, is_collection: bool = False, paginated: bool = False) -> dict:
        """Transformer payload: ``{data: ...}`` plus ``meta.pagination`` for paginated lists."""
        item = self.generate_from_resource(normalize_resource_fields(info.fields))

        for include in info.available_includes:
            if include in item["properties"]:
                continue
            kind = "Default include" if include in info.default_includes else "Optional include"
            if singular(include) != include:
                item["properties"][include] = {"type": "array", "items": {"type": "object"}, "description": kind}
            else:
                item["properties"][include] = {"type": "object", "description": kind}
        for include in info.default_includes:
            if include not in item["properties"]:
                item["properties"][include] = {"type": "object", "description": "Default include"}

        data = {"type": "array", "items": item} if is_collection else item
        schema = {"type": "object", "properties": {"data": data}}
        if is_collection and paginated:
            schema["properties"]["meta"] = {
                "type": "object",
                "properties": {
                    "pagination": {
                        "type": "object",
                        "properties": {
                            "total": {"type": "integer"},
                            "count": {"type": "integer"},
                            "per_page": {"type": "integer"},
                            "current_page": {"type": "integer"},
                            "total_pages": {"type": "integer"},
                            "links": {
                                "type": "object",
                                "properties": {
                                    "next": {"type": "string", "format": "uri"},
                                    "previous": {"type": "string", "format": "uri"},
                                },
                            },
                        },
                    }
                },
            }
        return schema
