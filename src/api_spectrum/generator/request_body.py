"""Operation ``requestBody`` from validation rules."""

from api_spectrum.analysis.base import RouteDescriptor, ValidationRuleSet
from api_spectrum.examples.generator import ExampleGenerator
from api_spectrum.generator.file_upload import MULTIPART
from api_spectrum.generator.metadata import OperationMetadataGenerator
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.models import FieldDescriptor
from api_spectrum.normalizer.tree import normalize_conditional_rules, normalize_rule_set

JSON = "application/json"

BRANCH_VERBS = {"POST": "Create", "PUT": "Update", "PATCH": "Update", "DELETE": "Delete", "GET": "Get"}


class RequestBodyGenerator:
    def __init__(
        self,
        schemas: SchemaGenerator | None = None,
        examples: ExampleGenerator | None = None,
        metadata: OperationMetadataGenerator | None = None,
    ):
        self.schemas = schemas or SchemaGenerator()
        self.examples = examples
        self.metadata = metadata or OperationMetadataGenerator()

    def generate(self, rule_set: ValidationRuleSet | None, route: RouteDescriptor) -> dict | None:
        """``None`` when there is nothing to validate."""
        if rule_set is None or rule_set.is_empty:
            return None

        if rule_set.conditional_rules:
            conditional = normalize_conditional_rules(rule_set)
            titles = self.branch_titles([b.label for b in conditional.branches], route)
            schema = self.schemas.generate_conditional(conditional, titles)
            branch_fields: dict[str, FieldDescriptor] = {}
            for branch in conditional.branches:
                for name, field in branch.fields.items():
                    branch_fields.setdefault(name, field)
            files = self.schemas.file_uploads.file_fields(branch_fields)
            if files:
                return {
                    "description": self.file_upload_description(branch_fields, files),
                    "required": True,
                    "content": {MULTIPART: {"schema": schema}},
                }
            return self._json_body(schema)

        fields = normalize_rule_set(rule_set)
        if not fields:
            return None
        files = self.schemas.file_uploads.file_fields(fields)
        if files:
            body = self.schemas.generate_from_fields(fields)
            return {
                "description": self.file_upload_description(fields, files),
                "required": True,
                "content": body["content"],
            }
        return self._json_body(self.schemas.object_schema(fields))

    def branch_titles(self, labels: list[str], route: RouteDescriptor) -> dict[str, str]:
        """``POST`` -> ``Create Product (POST)``; non-method labels are kept as they are."""
        resource = self.metadata.extract_resource_name(route.uri)
        titles = {}
        for label in labels:
            verb = BRANCH_VERBS.get(label)
            titles[label] = f"{verb} {resource} ({label})" if verb else label
        return titles

    @staticmethod
    def file_upload_description(fields: dict[str, FieldDescriptor], files: list[str]) -> str:
        lines = ["This endpoint accepts file uploads."]
        for name in files:
            field = fields[name]
            items = field.items if field.items is not None else field
            if items.file_constraints is not None and items.file_constraints.multiple:
                lines.append(f"- {name}: Multiple files allowed")
        return "\n".join(lines)

    def _json_body(self, schema: dict) -> dict:
        media: dict = {"schema": schema}
        if self.examples is not None:
            media["example"] = self.examples.from_schema(schema)
        return {"required": True, "content": {JSON: media}}

