from api_spectrum.analysis.base import ConditionalRuleBranch, ResourceFieldInfo, RouteDescriptor, ValidationRuleSet
from api_spectrum.generator.file_upload import describe_file, format_file_size
from api_spectrum.generator.request_body import RequestBodyGenerator
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.models import ConditionalBranch, ConditionalRuleSet, FieldDescriptor, FieldType, FileConstraints
from api_spectrum.normalizer.resource import normalize_resource_fields
from api_spectrum.normalizer.tree import normalize_rules


def _route(uri="api/products", methods=("POST",)) -> RouteDescriptor:
    return RouteDescriptor(uri=uri, http_methods=list(methods))


class TestObjectSchema:
    def test_required_string_and_number(self):
        fields = normalize_rules({"name": "required|string|max:255", "price": "required|numeric|min:0"})
        schema = SchemaGenerator().generate_from_fields(fields)
        assert schema == {
            "type": "object",
            "properties": {
                "name": {"type": "string", "maxLength": 255},
                "price": {"type": "number", "minimum": 0},
            },
            "required": ["name", "price"],
        }

    def test_no_required_key_when_nothing_required(self):
        schema = SchemaGenerator().object_schema(normalize_rules({"note": "string"}))
        assert "required" not in schema
        assert schema["properties"]["note"] == {"type": "string", "nullable": True}

    def test_nested_array_of_objects(self):
        fields = normalize_rules({
            "items": "required|array|min:1",
            "items.*.sku": "required|string",
            "items.*.qty": "required|integer|min:1",
        })
        items = SchemaGenerator().object_schema(fields)["properties"]["items"]
        assert items["type"] == "array"
        assert items["minItems"] == 1
        assert items["items"]["type"] == "object"
        assert items["items"]["required"] == ["sku", "qty"]
        assert items["items"]["properties"]["qty"] == {"type": "integer", "minimum": 1}

    def test_array_without_item_rules_defaults_to_strings(self):
        schema = SchemaGenerator().object_schema(normalize_rules({"tags": "array"}))
        assert schema["properties"]["tags"]["items"] == {"type": "string"}


class TestConditionalSchema:
    def test_single_branch_collapses(self):
        conditional = ConditionalRuleSet(branches=[
            ConditionalBranch(label="POST", fields=normalize_rules({"name": "required|string"})),
        ])
        schema = SchemaGenerator().generate_conditional(conditional)
        assert "oneOf" not in schema
        assert schema["required"] == ["name"]

    def test_branches_become_titled_one_of(self):
        rule_set = ValidationRuleSet(conditional_rules=[
            ConditionalRuleBranch(method="POST", rules={"name": "required|string"}),
            ConditionalRuleBranch(method="PUT", rules={"name": "sometimes|string"}),
        ])
        body = RequestBodyGenerator().generate(rule_set, _route())
        schema = body["content"]["application/json"]["schema"]
        assert [s["title"] for s in schema["oneOf"]] == [
            "Create Product (POST) Request",
            "Update Product (PUT) Request",
        ]
        assert schema["oneOf"][0]["required"] == ["name"]
        assert "required" not in schema["oneOf"][1]

    def test_non_method_labels_are_kept(self):
        titles = RequestBodyGenerator().branch_titles(["POST", "is_admin"], _route())
        assert titles == {"POST": "Create Product (POST)", "is_admin": "is_admin"}


class TestFileUploads:
    def test_format_file_size(self):
        assert format_file_size(2048 * 1024) == "2MB"
        assert format_file_size(1536) == "1.5KB"
        assert format_file_size(500) == "500B"

    def test_describe_file(self):
        constraints = FileConstraints(mimes=["jpeg", "png"], max_size=2048 * 1024, dimensions={"min_width": 100, "min_height": 100})
        assert describe_file(constraints) == "Allowed types: jpeg, png. Max size: 2MB. Min dimensions: 100x100"

    def test_file_field_switches_to_multipart(self):
        fields = normalize_rules({"avatar": "required|image|mimes:jpeg,png|max:2048", "caption": "string"})
        body = SchemaGenerator().generate_from_fields(fields)
        schema = body["content"]["multipart/form-data"]["schema"]
        assert schema["required"] == ["avatar"]
        avatar = schema["properties"]["avatar"]
        assert avatar["type"] == "string"
        assert avatar["format"] == "binary"
        assert "Max size: 2MB" in avatar["description"]

    def test_request_body_for_uploads(self):
        rule_set = ValidationRuleSet(rules={
            "avatar": "required|image|max:2048",
            "photos": "array",
            "photos.*": "image",
        })
        body = RequestBodyGenerator().generate(rule_set, _route("api/users/{user}/avatar"))
        assert body["required"] is True
        assert list(body["content"]) == ["multipart/form-data"]
        assert body["description"] == "This endpoint accepts file uploads.\n- photos: Multiple files allowed"

    def test_conditional_branches_with_file_use_multipart(self):
        rule_set = ValidationRuleSet(conditional_rules=[
            ConditionalRuleBranch(method="POST", rules={"name": "required|string", "photo": "required|image|max:2048"}),
            ConditionalRuleBranch(method="PUT", rules={"name": "sometimes|string", "photo": "image|max:2048"}),
        ])
        body = RequestBodyGenerator().generate(rule_set, _route())
        assert list(body["content"]) == ["multipart/form-data"]
        assert body["description"].startswith("This endpoint accepts file uploads.")
        branches = body["content"]["multipart/form-data"]["schema"]["oneOf"]
        assert branches[0]["title"] == "Create Product (POST) Request"
        assert branches[0]["properties"]["photo"]["format"] == "binary"

    def test_empty_rules_give_no_body(self):
        assert RequestBodyGenerator().generate(ValidationRuleSet(), _route()) is None


class TestResourceSchema:
    def test_required_excludes_nullable_and_read_only(self):
        info = ResourceFieldInfo.model_validate({
            "fields": {
                "id": {"type": "integer", "readOnly": True},
                "name": {"type": "string"},
                "deleted_at": {"type": "string", "format": "date-time", "nullable": True},
            }
        })
        schema = SchemaGenerator().generate_from_resource(normalize_resource_fields(info.fields))
        assert schema["required"] == ["name"]
        assert schema["properties"]["id"] == {"type": "integer", "readOnly": True}
        assert schema["properties"]["deleted_at"] == {"type": "string", "format": "date-time", "nullable": True}

    def test_required_lists_differ_between_request_and_response(self):
        request = SchemaGenerator().object_schema(normalize_rules({"code": "required|string"}))
        info = ResourceFieldInfo.model_validate({"fields": {"code": {"type": "string", "readOnly": True}}})
        response = SchemaGenerator().generate_from_resource(normalize_resource_fields(info.fields))
        assert request["required"] == ["code"]
        assert "required" not in response

    def test_nested_resource_fields(self):
        info = ResourceFieldInfo.model_validate({
            "fields": {
                "author": {"type": "object", "properties": {"name": {"type": "string"}}},
                "tags": {"type": "array", "items": {"type": "string"}},
                "score": {"type": "float"},
            }
        })
        schema = SchemaGenerator().generate_from_resource(normalize_resource_fields(info.fields))
        assert schema["properties"]["author"]["required"] == ["name"]
        assert schema["properties"]["tags"]["items"] == {"type": "string"}
        assert schema["properties"]["score"] == {"type": "number"}

    def test_fractal_paginated_collection(self):
        info = ResourceFieldInfo.model_validate({
            "is_transformer": True,
            "fields": {"default": {"id": {"type": "integer"}, "title": {"type": "string"}}},
            "available_includes": ["author", "comments"],
            "default_includes": ["author"],
        })
        schema = SchemaGenerator().generate_fractal(info, is_collection=True, paginated=True)
        item = schema["properties"]["data"]["items"]
        assert list(item["properties"]) == ["id", "title", "author", "comments"]
        assert item["properties"]["author"] == {"type": "object", "description": "Default include"}
        assert item["properties"]["comments"]["type"] == "array"
        assert "pagination" in schema["properties"]["meta"]["properties"]

    def test_fractal_single_item_has_no_meta(self):
        info = ResourceFieldInfo.model_validate({"is_transformer": True, "fields": {"id": {"type": "integer"}}})
        schema = SchemaGenerator().generate_fractal(info)
        assert schema["properties"]["data"]["properties"]["id"] == {"type": "integer"}
        assert "meta" not in schema["properties"]

    def test_file_type_field(self):
        field = FieldDescriptor(name="doc", type=FieldType.FILE, description="Contract")
        assert SchemaGenerator().property_schema(field) == {
            "type": "string", "format": "binary", "description": "Contract",
        }
