"""Path and query parameters of an operation."""

import logging

from api_spectrum.analysis.base import ControllerAnalysisResult, PathParameter, QueryParameterInfo, RouteDescriptor
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.models import FieldDescriptor, FieldType
from api_spectrum.normalizer.resource import resolve_type
from api_spectrum.normalizer.rules import extract_constraints, parse_rules

logger = logging.getLogger(__name__)


def path_parameter(param: PathParameter) -> dict:
    schema: dict = {"type": param.param_type}
    if param.pattern:
        schema["pattern"] = param.pattern
    parameter = {"name": param.name, "in": "path", "required": True, "schema": schema}
    if param.description:
        parameter["description"] = param.description
    return parameter


class ParameterGenerator:
    def generate(self, route: RouteDescriptor, controller: ControllerAnalysisResult) -> list[dict]:
        parameters = [path_parameter(p) for p in route.path_parameters]
        parameters = self.add_enum_parameters(parameters, controller)
        return self.add_query_parameters(parameters, controller)

    def add_enum_parameters(self, parameters: list[dict], controller: ControllerAnalysisResult) -> list[dict]:
        """Enum-typed arguments refine a matching path parameter, or become query parameters."""
        result = list(parameters)
        for enum_param in controller.enum_parameters:
            schema = {"type": enum_param.enum_info().get_openapi_type(), "enum": list(enum_param.values)}
            match = next((p for p in result if p["name"] == enum_param.name), None)
            if match is not None:
                match["schema"] = schema
                if enum_param.description:
                    match["description"] = enum_param.description
                continue
            parameter = {"name": enum_param.name, "in": "query", "required": enum_param.required, "schema": schema}
            if enum_param.description:
                parameter["description"] = enum_param.description
            result.append(parameter)
        return result

    def add_query_parameters(self, parameters: list[dict], controller: ControllerAnalysisResult) -> list[dict]:
        existing = {(p["name"], p["in"]) for p in parameters}
        for query in controller.query_parameters:
            if (query.name, "query") in existing:
                logger.debug("Query parameter %s already declared, skipping", query.name)
                continue
            parameters.append(self.query_parameter(query))
            existing.add((query.name, "query"))
        return parameters

    def query_parameter(self, query: QueryParameterInfo) -> dict:
        field_type, implied_format = resolve_type(query.name, query.param_type)
        if field_type == FieldType.FILE:
            field_type = FieldType.STRING
        schema: dict = {"type": field_type.value}
        if implied_format:
            schema["format"] = implied_format
        if query.default is not None:
            schema["default"] = query.default
        if query.enum is not None:
            schema["enum"] = query.enum

        if query.validation_rules:
            tokens = parse_rules(query.validation_rules)
            schema.update(extract_constraints(tokens, field_type))
            if "enum" not in schema:
                for token in tokens:
                    if token.name == "in":
                        schema["enum"] = token.params

        parameter = {"name": query.name, "in": "query", "required": query.required, "schema": schema}
        if query.description:
            parameter["description"] = query.description
        return parameter

    def add_rule_parameters(self, parameters: list[dict], fields: dict[str, FieldDescriptor], schemas: SchemaGenerator) -> list[dict]:
        """Validated fields of a GET request are read from the query string."""
        existing = {(p["name"], p["in"]) for p in parameters}
        for name, field in fields.items():
            if (name, "query") in existing or field.is_file:
                continue
            parameter = {"name": name, "in": "query", "required": field.required, "schema": schemas.property_schema(field)}
            if field.description:
                parameter["description"] = field.description
            parameters.append(parameter)
        return parameters
