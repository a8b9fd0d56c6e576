"""Data models handed over by the source analyzers.

Route discovery, controller inspection and rule extraction happen outside
this package. Whatever performs them converts its findings into these
models, and the generators only ever see these.
"""

import re
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, model_validator

from api_spectrum.errors import AnalysisError
from api_spectrum.models import EnumInfo

_PATH_PARAM = re.compile(r"\{(\w+)(\??)\}")


class PathParameter(BaseModel):
    """A ``{name}`` placeholder in a route URI."""

    name: str
    required: bool = True
    param_type: str = "string"
    description: str = ""
    pattern: str | None = None


class RouteDescriptor(BaseModel):
    """A single registered route."""

    uri: str  # api/users/{user}
    http_methods: list[str]
    controller_class: str | None = None
    controller_method: str | None = None
    route_name: str | None = None
    middleware: list[str] = []
    path_parameters: list[PathParameter] = []

    @model_validator(mode="after")
    def _fill_path_parameters(self):
        if not self.path_parameters:
            self.path_parameters = [
                PathParameter(name=name, required=not optional)
                for name, optional in _PATH_PARAM.findall(self.uri)
            ]
        return self

    @property
    def controller_key(self) -> str | None:
        if not self.controller_class:
            return None
        return f"{self.controller_class}@{self.controller_method or '__invoke'}"


class QueryParameterInfo(BaseModel):
    name: str
    param_type: str = "string"
    required: bool = False
    default: Any = None
    enum: list | None = None
    description: str = ""
    validation_rules: str | list | None = None


class EnumParameterInfo(BaseModel):
    """A controller argument type-hinted with a backed enum."""

    name: str
    values: list
    backing_type: str | None = None
    location: str = "query"  # query / path
    required: bool = False
    description: str = ""

    def enum_info(self) -> EnumInfo:
        return EnumInfo(values=self.values, backing_type=self.backing_type)


class PaginationInfo(BaseModel):
    type: str = "length_aware"  # length_aware / simple / cursor / none
    per_page: int | None = None


class ResponseTypeInfo(BaseModel):
    type: str = "json"  # json / resource / binary / void / unknown / text / html / xml
    content_type: str | None = None
    description: str | None = None


class CallbackInfo(BaseModel):
    """A webhook the API calls back after this operation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    expression: str  # {$request.body#/callbackUrl}
    method: str = "post"
    request_body: dict | None = Field(default=None, alias="requestBody")
    responses: dict | None = None
    description: str | None = None
    summary: str | None = None
    ref: str | None = None


class ConditionalRuleBranch(BaseModel):
    """Rules that apply only when a condition holds.

    ``method`` discriminates by HTTP method; ``condition`` by anything else.
    Branches with neither fall into the ``DEFAULT`` group.
    """

    rules: dict[str, str | list]
    method: str | None = None
    condition: str | None = None

    @property
    def key(self) -> str:
        if self.method:
            return self.method.upper()
        return self.condition or "DEFAULT"


class ValidationRuleSet(BaseModel):
    rules: dict[str, str | list] = {}
    messages: dict[str, str] = {}  # "field.rule" -> message
    attributes: dict[str, str] = {}  # field -> human label
    conditional_rules: list[ConditionalRuleBranch] = []
    enums: dict[str, EnumInfo] = {}  # class name used in enum:<Class> rules

    @property
    def is_empty(self) -> bool:
        return not self.rules and not self.conditional_rules


class ResourceField(BaseModel):
    """One serialized field of a resource or transformer."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = "string"
    format: str | None = None
    nullable: bool = False
    read_only: bool = Field(default=False, alias="readOnly")
    description: str | None = None
    example: Any = None
    enum: list | None = None
    properties: dict[str, "ResourceField"] = {}
    items: "ResourceField | None" = None


class ResourceFieldInfo(BaseModel):
    fields: dict[str, ResourceField] = {}
    is_transformer: bool = False
    available_includes: list[str] = []
    default_includes: list[str] = []
    custom_example: dict | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap_transformer_default(cls, data):
        # Transformers group their fields under "default", next to include definitions.
        if isinstance(data, dict) and data.get("is_transformer"):
            fields = data.get("fields") or {}
            default = fields.get("default")
            if isinstance(default, dict) and "type" not in default:
                data = {**data, "fields": default}
        return data


class ControllerAnalysisResult(BaseModel):
    form_request_class: str | None = None
    inline_validation_rules: ValidationRuleSet | None = None
    resource_class: str | None = None
    resource_classes: list[str] = []
    returns_collection: bool = False
    pagination_info: PaginationInfo | None = None
    query_parameters: list[QueryParameterInfo] = []
    enum_parameters: list[EnumParameterInfo] = []
    response_type_info: ResponseTypeInfo | None = None
    is_deprecated: bool = False
    callbacks: list[CallbackInfo] = []

    @property
    def all_resource_classes(self) -> list[str]:
        names = list(self.resource_classes)
        if self.resource_class and self.resource_class not in names:
            names.insert(0, self.resource_class)
        return names


class AnalysisSource(Protocol):
    """What the generator needs from the source-code analyzers."""

    def analyze_controller(self, controller: str, method: str | None) -> ControllerAnalysisResult: ...

    def analyze_form_request(self, class_name: str) -> ValidationRuleSet: ...

    def analyze_resource(self, class_name: str) -> ResourceFieldInfo: ...


class StaticAnalysisSource:
    """AnalysisSource backed by pre-computed analysis results."""

    def __init__(
        self,
        controllers: dict[str, ControllerAnalysisResult] | None = None,
        form_requests: dict[str, ValidationRuleSet] | None = None,
        resources: dict[str, ResourceFieldInfo] | None = None,
    ):
        self.controllers = controllers or {}
        self.form_requests = form_requests or {}
        self.resources = resources or {}

    def analyze_controller(self, controller: str, method: str | None) -> ControllerAnalysisResult:
        key = f"{controller}@{method or '__invoke'}"
        return self.controllers.get(key) or ControllerAnalysisResult()

    def analyze_form_request(self, class_name: str) -> ValidationRuleSet:
        if class_name not in self.form_requests:
            raise AnalysisError(f"Unknown form request: {class_name}")
        return self.form_requests[class_name]

    def analyze_resource(self, class_name: str) -> ResourceFieldInfo:
        if class_name not in self.resources:
            raise AnalysisError(f"Unknown resource: {class_name}")
        return self.resources[class_name]
