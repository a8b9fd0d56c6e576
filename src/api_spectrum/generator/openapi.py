"""Assembles the OpenAPI document for a list of routes."""

import logging

from api_spectrum.analysis.base import (
    AnalysisSource,
    ControllerAnalysisResult,
    RouteDescriptor,
    StaticAnalysisSource,
    ValidationRuleSet,
)
from api_spectrum.auth import AuthenticationAnalyzer, route_scopes
from api_spectrum.config import SpectrumConfig
from api_spectrum.examples.factory import ExampleValueFactory
from api_spectrum.examples.generator import ExampleGenerator, inclusion_strategy
from api_spectrum.generator.callbacks import CallbackGenerator
from api_spectrum.generator.converter import OpenApi31Converter
from api_spectrum.generator.error_responses import ErrorResponseGenerator
from api_spectrum.generator.metadata import OperationMetadataGenerator, convert_to_openapi_path
from api_spectrum.generator.parameters import ParameterGenerator, path_parameter
from api_spectrum.generator.registry import SchemaRegistry
from api_spectrum.generator.request_body import RequestBodyGenerator
from api_spectrum.generator.response import ResponseSchemaGenerator, status_description, unknown_schema
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.generator.security import RouteAuthentication, SecuritySchemeGenerator
from api_spectrum.generator.tags import TagGenerator, TagGroupGenerator
from api_spectrum.models import OpenApiOperation, OpenApiResponse
from api_spectrum.normalizer.tree import normalize_rule_set

logger = logging.getLogger(__name__)

SUCCESS_CODES = {"post": "201", "delete": "204"}
QUERY_METHODS = ("get",)
SKIPPED_METHODS = ("head",)


class OpenApiGenerator:
    """One instance per document build.

    ``generate()`` never raises for a single broken route: the failing
    request body or response is replaced by a placeholder schema and the
    reason lands in ``warnings``.
    """

    def __init__(self, config: SpectrumConfig | None = None, source: AnalysisSource | None = None):
        self.config = config or SpectrumConfig()
        self.source = source or StaticAnalysisSource()
        self.registry = SchemaRegistry()
        self.schemas = SchemaGenerator()

        settings = self.config.example_generation
        self.factory = ExampleValueFactory(
            seed=settings.seed,
            locale=settings.locale,
            randomized=settings.randomized,
            reference_time=settings.reference_time,
        )
        self.examples = ExampleGenerator(
            self.factory,
            inclusion_strategy(self.factory, settings.include_all_optional, settings.optional_field_probability),
            components=self.registry,
        )

        self.metadata = OperationMetadataGenerator()
        self.parameters = ParameterGenerator()
        self.request_bodies = RequestBodyGenerator(self.schemas, self.examples, self.metadata)
        self.responses = ResponseSchemaGenerator(self.source, self.registry, self.schemas, examples=self.examples)
        self.errors = ErrorResponseGenerator()
        self.callbacks = CallbackGenerator()
        self.security = SecuritySchemeGenerator()
        self.auth = AuthenticationAnalyzer(self.config.authentication)
        self.tags = TagGenerator(self.config)
        self.tag_groups = TagGroupGenerator(self.config)
        self.converter = OpenApi31Converter()

        self.warnings: list[str] = []
        self._operation_ids: set[str] = set()
        self._schemes: dict = {}
        self._global_auth: RouteAuthentication | None = None
        self._component_callbacks: dict = {}

    def generate(self, routes: list[RouteDescriptor]) -> dict:
        self.registry.clear()
        self.responses.reset()
        self.factory.reseed()
        self.warnings = []
        self._operation_ids = set()
        self._component_callbacks = {}

        analysis = self.auth.analyze(routes)
        self._schemes = dict(analysis.schemes)
        self._global_auth = analysis.global_auth

        document = self.skeleton()
        if analysis.global_auth is not None and analysis.global_auth.required:
            document["security"] = self.security.generate_endpoint_security(analysis.global_auth)

        used_tags: list[str] = []
        paths: dict = {}
        for index, route in enumerate(routes):
            path = convert_to_openapi_path(route.uri)
            for method in route.http_methods:
                method = method.lower()
                if method in SKIPPED_METHODS:
                    continue
                logger.debug("Generating %s %s", method.upper(), path)
                operation = self.generate_operation(route, method, analysis.routes.get(index))
                paths.setdefault(path, {})[method] = operation.to_dict()
                for tag in operation.tags:
                    if tag not in used_tags:
                        used_tags.append(tag)
        document["paths"] = paths

        document["components"] = self.components()
        if used_tags:
            document["tags"] = self.tag_groups.generate_tag_definitions(used_tags)
        if used_tags and self.tag_groups.has_tag_groups():
            document["x-tagGroups"] = self.tag_groups.generate_tag_groups(used_tags)

        for name in self.registry.validate_references():
            self._warn(f"Schema '{name}' is referenced but was never registered")

        if self.config.is_openapi_31:
            document = self.converter.convert(document)
        return document

    def skeleton(self) -> dict:
        info = {"title": self.config.title, "version": self.config.version}
        if self.config.description:
            info["description"] = self.config.description
        return {
            "openapi": "3.0.0",
            "info": info,
            "servers": self.config.server_list(),
            "paths": {},
            "components": {},
        }

    def components(self) -> dict:
        components: dict = {"schemas": self.registry.all()}
        if self._schemes:
            components["securitySchemes"] = self.security.generate_security_schemes(self._schemes)
        if self._component_callbacks:
            components["callbacks"] = self.callbacks.generate_component_callbacks(list(self._component_callbacks.values()))
        return components

    # -- operations -----------------------------------------------------------

    def generate_operation(
        self,
        route: RouteDescriptor,
        method: str,
        authentication: RouteAuthentication | None = None,
    ) -> OpenApiOperation:
        label = f"{method.upper()} {route.uri}"
        controller, analyzed = self._analyze_controller(route, label)

        rule_set = None
        fields: dict = {}
        request_body = None
        try:
            if analyzed:
                rule_set = self._rule_set(controller)
            if rule_set is not None and method in QUERY_METHODS and not rule_set.conditional_rules:
                fields = normalize_rule_set(rule_set)
            elif rule_set is not None:
                request_body = self.request_bodies.generate(rule_set, route)
            elif not analyzed and method not in QUERY_METHODS:
                request_body = {"content": {"application/json": {"schema": unknown_schema()}}}
        except Exception as e:
            self._warn(f"{label}: request body could not be generated ({e})")
            request_body = {"content": {"application/json": {"schema": unknown_schema()}}}

        try:
            parameters = self.parameters.generate(route, controller)
            if fields:
                parameters = self.parameters.add_rule_parameters(parameters, fields, self.schemas)
        except Exception as e:
            self._warn(f"{label}: parameters could not be generated ({e})")
            parameters = [path_parameter(p) for p in route.path_parameters]

        success_code = SUCCESS_CODES.get(method, "200")
        if analyzed:
            try:
                success = self.responses.generate(controller, success_code)
            except Exception as e:
                self._warn(f"{label}: response could not be generated ({e})")
                success = self.responses.unknown(success_code)
        elif success_code == "204":
            success = OpenApiResponse(status_code=success_code, description=status_description(success_code))
        else:
            success = self.responses.unknown(success_code)

        security = self._operation_security(route, authentication)
        requires_auth = bool(security) or self._globally_authenticated()
        responses = {success_code: success}
        if self.config.error_responses:
            has_validation = rule_set is not None and not rule_set.is_empty
            responses.update(self.errors.get_default_error_responses(method, requires_auth, has_validation))
            if has_validation:
                try:
                    responses["422"] = self.errors.validation_error(self._flat_rules(rule_set), rule_set.messages)
                except Exception as e:
                    self._warn(f"{label}: validation error response could not be generated ({e})")

        try:
            tags = self.tags.generate(route)
        except Exception as e:
            self._warn(f"{label}: tags could not be generated ({e})")
            tags = []

        try:
            callbacks = self.callbacks.generate(controller.callbacks)
            for callback in controller.callbacks:
                if callback.ref is not None:
                    self._component_callbacks.setdefault(callback.ref, callback.model_copy(update={"name": callback.ref}))
        except Exception as e:
            self._warn(f"{label}: callbacks could not be generated ({e})")
            callbacks = None

        return OpenApiOperation(
            operation_id=self._unique_operation_id(self.metadata.generate_operation_id(route, method)),
            summary=self.metadata.generate_summary(route, method),
            tags=tags,
            parameters=parameters,
            request_body=request_body,
            responses=dict(sorted(responses.items())),
            security=security or None,
            deprecated=controller.is_deprecated,
            callbacks=callbacks,
        )

    def _analyze_controller(self, route: RouteDescriptor, label: str) -> tuple[ControllerAnalysisResult, bool]:
        if not route.controller_class:
            return ControllerAnalysisResult(), True
        try:
            return self.source.analyze_controller(route.controller_class, route.controller_method), True
        except Exception as e:
            self._warn(f"{label}: controller {route.controller_key} could not be analyzed ({e})")
            return ControllerAnalysisResult(), False

    def _rule_set(self, controller: ControllerAnalysisResult) -> ValidationRuleSet | None:
        if controller.form_request_class:
            return self.source.analyze_form_request(controller.form_request_class)
        return controller.inline_validation_rules

    @staticmethod
    def _flat_rules(rule_set: ValidationRuleSet) -> dict:
        """Every field validated by any branch, for the 422 error catalog."""
        rules = dict(rule_set.rules)
        for branch in rule_set.conditional_rules:
            for field, raw in branch.rules.items():
                rules.setdefault(field, raw)
        return rules

    def _operation_security(self, route: RouteDescriptor, authentication: RouteAuthentication | None) -> list[dict]:
        schemes = self.auth.detector.detect_multiple_schemes(route.middleware)
        if len(schemes) > 1:
            for scheme in schemes:
                self._schemes.setdefault(scheme.name, scheme)
            scopes = route_scopes(route.middleware)
            return self.security.generate_multiple_auth_security(
                [RouteAuthentication(scheme=s, scopes=scopes) for s in schemes]
            )
        return self.security.generate_endpoint_security(authentication)

    def _globally_authenticated(self) -> bool:
        return self._global_auth is not None and self._global_auth.required

    def _unique_operation_id(self, operation_id: str) -> str:
        candidate = operation_id
        counter = 2
        while candidate in self._operation_ids:
            candidate = f"{operation_id}{counter}"
            counter += 1
        self._operation_ids.add(candidate)
        return candidate

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)
