"""Intermediate field model and OpenAPI operation models.

The normalizer turns validation rules and resource fields into
FieldDescriptor trees; the generators turn those into OpenAPI fragments.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    FILE = "file"


class FileConstraints(BaseModel):
    """Upload constraints; sizes are in bytes."""

    mimes: list[str] = []
    max_size: int | None = None
    min_size: int | None = None
    dimensions: dict = {}  # width, height, min_width, max_width, ratio, ...
    multiple: bool = False


class FieldDescriptor(BaseModel):
    """One validated or serialized field.

    ``children`` holds object properties by name. For arrays it holds the
    single item shape under the ``*`` key.
    """

    name: str
    type: FieldType = FieldType.STRING
    format: str | None = None
    required: bool = False
    nullable: bool = False
    enum: list | None = None
    constraints: dict = {}  # minimum, maximum, minLength, maxLength, pattern, minItems, maxItems
    children: dict[str, "FieldDescriptor"] = {}
    file_constraints: FileConstraints | None = None
    description: str | None = None
    example: Any = None
    default: Any = None
    read_only: bool = False
    write_only: bool = False
    deprecated: bool = False

    @model_validator(mode="after")
    def _file_is_binary(self):
        if self.type == FieldType.FILE:
            self.format = "binary"
        return self

    @property
    def items(self) -> "FieldDescriptor | None":
        return self.children.get("*")

    @property
    def is_file(self) -> bool:
        if self.type == FieldType.FILE:
            return True
        items = self.items
        return self.type == FieldType.ARRAY and items is not None and items.type == FieldType.FILE


class EnumInfo(BaseModel):
    """Values of a backed enum class."""

    values: list
    backing_type: str | None = None  # "string" / "int"
    class_name: str | None = None

    def get_openapi_type(self) -> str:
        if self.backing_type in ("int", "integer"):
            return "integer"
        if self.backing_type in ("string", "str"):
            return "string"
        if self.values and all(isinstance(v, int) and not isinstance(v, bool) for v in self.values):
            return "integer"
        return "string"


class ConditionalBranch(BaseModel):
    label: str
    fields: dict[str, FieldDescriptor] = {}


class ConditionalRuleSet(BaseModel):
    """Alternative field sets in declaration order."""

    branches: list[ConditionalBranch] = []


class OpenApiResponse(BaseModel):
    status_code: str
    description: str
    content: dict | None = None
    headers: dict | None = None

    def to_dict(self) -> dict:
        data: dict = {"description": self.description}
        if self.headers:
            data["headers"] = self.headers
        if self.content is not None:
            data["content"] = self.content
        return data


class OpenApiOperation(BaseModel):
    """One HTTP method on one path."""

    model_config = ConfigDict(populate_by_name=True)

    operation_id: str = Field(alias="operationId")
    summary: str
    tags: list[str] = []
    parameters: list[dict] = []
    request_body: dict | None = Field(default=None, alias="requestBody")
    responses: dict[str, OpenApiResponse] = {}
    security: list[dict] | None = None
    deprecated: bool = False
    callbacks: dict | None = None

    def to_dict(self) -> dict:
        # Example payloads may hold nulls; no exclude_none dump.
        data: dict = {"operationId": self.operation_id, "summary": self.summary}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.parameters:
            data["parameters"] = list(self.parameters)
        if self.request_body is not None:
            data["requestBody"] = self.request_body
        data["responses"] = {code: resp.to_dict() for code, resp in self.responses.items()}
        if self.security is not None:
            data["security"] = self.security
        if self.deprecated:
            data["deprecated"] = True
        if self.callbacks:
            data["callbacks"] = self.callbacks
        return data
