"""Success responses: resources, collections, paginators and non-JSON bodies."""

import logging

from api_spectrum.analysis.base import AnalysisSource, ControllerAnalysisResult, ResourceFieldInfo
from api_spectrum.examples.generator import ExampleGenerator
from api_spectrum.generator.pagination import PAGINATION_TYPES, PaginationSchemaGenerator
from api_spectrum.generator.registry import SchemaRegistry
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.models import OpenApiResponse
from api_spectrum.normalizer.resource import normalize_resource_fields

logger = logging.getLogger(__name__)

JSON = "application/json"
OCTET_STREAM = "application/octet-stream"

STATUS_DESCRIPTIONS = {
    "200": "Successful response",
    "201": "Resource created successfully",
    "204": "No content",
    "400": "Bad request",
    "401": "Unauthorized",
    "403": "Forbidden",
    "404": "Resource not found",
    "422": "Validation error",
    "500": "Internal server error",
}

TEXT_CONTENT_TYPES = {
    "text": "text/plain",
    "plain": "text/plain",
    "html": "text/html",
    "xml": "application/xml",
}

UNKNOWN_SCHEMA = {"type": "object", "description": "Response structure could not be determined automatically"}


def status_description(status_code: str) -> str:
    return STATUS_DESCRIPTIONS.get(str(status_code), "Response")


def unknown_schema() -> dict:
    return dict(UNKNOWN_SCHEMA)


class ResponseSchemaGenerator:
    """Builds the single success response of an operation.

    Resource classes become component schemas referenced by ``$ref``;
    Fractal transformers stay inline because their envelope depends on
    includes. Item examples are cached per component until ``reset()``.
    """

    def __init__(
        self,
        source: AnalysisSource,
        registry: SchemaRegistry,
        schemas: SchemaGenerator | None = None,
        pagination: PaginationSchemaGenerator | None = None,
        examples: ExampleGenerator | None = None,
    ):
        self.source = source
        self.registry = registry
        self.schemas = schemas or SchemaGenerator()
        self.pagination = pagination or PaginationSchemaGenerator()
        self.examples = examples
        self._item_examples: dict[str, object] = {}

    def reset(self) -> None:
        self._item_examples = {}

    def generate(self, controller: ControllerAnalysisResult, status_code: str = "200") -> OpenApiResponse:
        description = status_description(status_code)
        if status_code == "204":
            return OpenApiResponse(status_code=status_code, description=description)

        info = controller.response_type_info
        if info is not None and info.type != "json":
            return self.typed_response(info.type, info.content_type, status_code, info.description or description)

        classes = controller.all_resource_classes
        if not classes:
            return OpenApiResponse(status_code=status_code, description=description)

        if len(classes) > 1:
            media = self.multiple_resources(classes, controller)
        else:
            media = self.resource_media(classes[0], controller)
        return OpenApiResponse(status_code=status_code, description=description, content={JSON: media})

    def unknown(self, status_code: str) -> OpenApiResponse:
        return OpenApiResponse(
            status_code=status_code,
            description=status_description(status_code),
            content={JSON: {"schema": unknown_schema()}},
        )

    def typed_response(self, kind: str, content_type: str | None, status_code: str, description: str) -> OpenApiResponse:
        if kind == "void":
            return OpenApiResponse(status_code=status_code, description=description)
        if kind == "binary":
            content = {content_type or OCTET_STREAM: {"schema": {"type": "string", "format": "binary"}}}
            return OpenApiResponse(status_code=status_code, description=description, content=content)
        if kind in TEXT_CONTENT_TYPES:
            content = {content_type or TEXT_CONTENT_TYPES[kind]: {"schema": {"type": "string"}}}
            return OpenApiResponse(status_code=status_code, description=description, content=content)
        if kind != "unknown":
            logger.warning("Unknown response type '%s', using a placeholder schema", kind)
        return self.unknown(status_code)

    # -- resources ------------------------------------------------------------

    def resource_media(self, class_name: str, controller: ControllerAnalysisResult) -> dict:
        info = self.source.analyze_resource(class_name)
        paginated = controller.pagination_info is not None
        if info.is_transformer:
            schema = self.schemas.generate_fractal(info, controller.returns_collection, paginated)
            media = {"schema": schema}
            if self.examples is not None:
                data = schema["properties"]["data"]
                item = self._item_example(class_name, data.get("items", data), info)
                media["example"] = self.examples.fractal(item, controller.returns_collection, paginated)
            return media

        ref = self.register_resource(class_name, info)
        schema = self.wrap_collection(ref, controller)
        media = {"schema": schema}
        if self.examples is not None:
            name = self.registry.extract_schema_name(class_name)
            item = self._item_example(name, self.registry.get(name), info)
            media["example"] = self.wrap_example(item, controller)
        return media

    def multiple_resources(self, classes: list[str], controller: ControllerAnalysisResult) -> dict:
        """``oneOf`` of the referenced resources."""
        refs = []
        first_example = None
        for class_name in classes:
            info = self.source.analyze_resource(class_name)
            refs.append(self.register_resource(class_name, info))
            if first_example is None and self.examples is not None:
                name = self.registry.extract_schema_name(class_name)
                first_example = self._item_example(name, self.registry.get(name), info)

        media = {"schema": self.wrap_collection({"oneOf": refs}, controller)}
        if first_example is not None:
            media["example"] = self.wrap_example(first_example, controller)
        return media

    def register_resource(self, class_name: str, info: ResourceFieldInfo) -> dict:
        name = self.registry.extract_schema_name(class_name)
        if not self.registry.has(name):
            schema = self.schemas.generate_from_resource(normalize_resource_fields(info.fields))
            self.registry.register(name, schema)
        return self.registry.get_ref(name)

    def wrap_collection(self, item_schema: dict, controller: ControllerAnalysisResult) -> dict:
        if not controller.returns_collection:
            return item_schema
        if self._paginated(controller):
            return self.pagination.generate(controller.pagination_info.type, item_schema)
        return {"type": "array", "items": item_schema}

    def wrap_example(self, item, controller: ControllerAnalysisResult):
        if not controller.returns_collection or not isinstance(item, dict):
            return item
        if self._paginated(controller):
            return self.examples.paginated(item, controller.pagination_info.type)
        return self.examples.collection(item)

    @staticmethod
    def _paginated(controller: ControllerAnalysisResult) -> bool:
        return controller.pagination_info is not None and controller.pagination_info.type in PAGINATION_TYPES

    def _item_example(self, key: str, schema: dict | None, info: ResourceFieldInfo):
        if info.custom_example is not None:
            return info.custom_example
        if key not in self._item_examples:
            self._item_examples[key] = self.examples.from_schema(schema or {}, all_fields=True)
        return self._item_examples[key]
