from api_spectrum.analysis.base import (
    CallbackInfo,
    ControllerAnalysisResult,
    EnumParameterInfo,
    PathParameter,
    QueryParameterInfo,
    RouteDescriptor,
)
from api_spectrum.config import SpectrumConfig
from api_spectrum.generator.callbacks import CallbackGenerator
from api_spectrum.generator.metadata import OperationMetadataGenerator, convert_to_openapi_path
from api_spectrum.generator.parameters import ParameterGenerator
from api_spectrum.generator.schema import SchemaGenerator
from api_spectrum.generator.tags import TagGenerator, TagGroupGenerator
from api_spectrum.normalizer.tree import normalize_rules


def _route(uri, methods=("GET",), **kwargs) -> RouteDescriptor:
    return RouteDescriptor(uri=uri, http_methods=list(methods), **kwargs)


class TestSummaries:
    def test_crud_summaries(self):
        meta = OperationMetadataGenerator()
        assert meta.generate_summary(_route("api/users"), "get") == "List all User"
        assert meta.generate_summary(_route("api/users/{user}"), "get") == "Get User by ID"
        assert meta.generate_summary(_route("api/users"), "post") == "Create a new User"
        assert meta.generate_summary(_route("api/users/{user}"), "put") == "Update User"
        assert meta.generate_summary(_route("api/users/{user}"), "delete") == "Delete User"

    def test_singular_get(self):
        meta = OperationMetadataGenerator()
        assert meta.generate_summary(_route("api/profile"), "get") == "Get Profile"

    def test_list_controller_method_is_never_singular(self):
        route = _route("api/profile", controller_class="ProfileController", controller_method="index")
        assert OperationMetadataGenerator().generate_summary(route, "get") == "List all Profile"

    def test_version_prefix_is_ignored(self):
        assert OperationMetadataGenerator().extract_resource_name("api/v1/orders") == "Order"

    def test_compound_post_resource(self):
        meta = OperationMetadataGenerator()
        assert meta.extract_resource_name("api/orders/{order}/line-items", "post") == "OrderLineItem"
        assert meta.extract_resource_name("api/orders/{order}/line-items", "get") == "LineItem"

    def test_no_meaningful_segment(self):
        assert OperationMetadataGenerator().extract_resource_name("api/{id}") == "Resource"


class TestOperationIds:
    def test_from_route_name(self):
        route = _route("api/users", route_name="users.index")
        assert OperationMetadataGenerator().generate_operation_id(route, "get") == "usersIndex"

    def test_from_method_and_uri(self):
        route = _route("api/users/{user}/posts")
        assert OperationMetadataGenerator().generate_operation_id(route, "post") == "postApiUsersUserPosts"

    def test_paths(self):
        assert convert_to_openapi_path("api/users/{user?}") == "/api/users/{user}"
        assert convert_to_openapi_path("/api/users/") == "/api/users"


class TestTags:
    def test_from_controller(self):
        route = _route("api/orders", controller_class="App\\Http\\Controllers\\OrderController")
        assert TagGenerator().generate(route) == ["Order"]

    def test_from_uri(self):
        assert TagGenerator().generate(_route("api/v2/order-items/{item}")) == ["OrderItem"]

    def test_tag_depth(self):
        config = SpectrumConfig(tag_depth=2)
        assert TagGenerator(config).generate(_route("api/users/{user}/posts")) == ["User", "Post"]
        assert TagGenerator(SpectrumConfig(tag_depth=0)).generate(_route("api/users")) == []

    def test_custom_mapping_wins(self):
        config = SpectrumConfig(tags={"api/admin/*": ["Admin", "Internal"]})
        route = _route("api/admin/users", controller_class="UserController")
        assert TagGenerator(config).generate(route) == ["Admin", "Internal"]

    def test_tag_groups_with_catch_all(self):
        config = SpectrumConfig(tag_groups={"Catalogue": ["Product", "Category"]})
        groups = TagGroupGenerator(config).generate_tag_groups(["Product", "User"])
        assert groups == [
            {"name": "Catalogue", "tags": ["Product"]},
            {"name": "Other", "tags": ["User"]},
        ]

    def test_tag_definitions(self):
        config = SpectrumConfig(tag_descriptions={"Product": "Catalogue management"})
        definitions = TagGroupGenerator(config).generate_tag_definitions(["Product", "User"])
        assert definitions == [{"name": "Product", "description": "Catalogue management"}, {"name": "User"}]


class TestParameters:
    def test_path_parameters_from_uri(self):
        params = ParameterGenerator().generate(_route("api/users/{user}/posts/{post?}"), ControllerAnalysisResult())
        assert [(p["name"], p["in"], p["required"]) for p in params] == [
            ("user", "path", True),
            ("post", "path", True),
        ]

    def test_explicit_path_parameter_pattern(self):
        route = _route("api/users/{id}", path_parameters=[PathParameter(name="id", param_type="integer", pattern="[0-9]+")])
        params = ParameterGenerator().generate(route, ControllerAnalysisResult())
        assert params[0]["schema"] == {"type": "integer", "pattern": "[0-9]+"}

    def test_query_parameter_with_rules(self):
        controller = ControllerAnalysisResult(query_parameters=[
            QueryParameterInfo(name="per_page", param_type="int", default=15, validation_rules="integer|min:1|max:100"),
            QueryParameterInfo(name="sort", validation_rules="in:name,price"),
        ])
        params = ParameterGenerator().generate(_route("api/products"), controller)
        assert params[0] == {
            "name": "per_page",
            "in": "query",
            "required": False,
            "schema": {"type": "integer", "default": 15, "minimum": 1, "maximum": 100},
        }
        assert params[1]["schema"]["enum"] == ["name", "price"]

    def test_enum_parameter_refines_path_parameter(self):
        controller = ControllerAnalysisResult(enum_parameters=[
            EnumParameterInfo(name="status", values=["open", "closed"], location="path"),
            EnumParameterInfo(name="priority", values=[1, 2, 3], backing_type="int"),
        ])
        params = ParameterGenerator().generate(_route("api/tickets/{status}"), controller)
        assert params[0]["schema"] == {"type": "string", "enum": ["open", "closed"]}
        assert params[1] == {
            "name": "priority", "in": "query", "required": False, "schema": {"type": "integer", "enum": [1, 2, 3]},
        }

    def test_rule_parameters_skip_existing_and_files(self):
        fields = normalize_rules({"search": "string|max:50", "page": "integer", "upload": "file"})
        params = ParameterGenerator().add_rule_parameters(
            [{"name": "page", "in": "query", "required": False, "schema": {"type": "integer"}}],
            fields,
            SchemaGenerator(),
        )
        assert [p["name"] for p in params] == ["page", "search"]
        assert params[1]["schema"] == {"type": "string", "maxLength": 50, "nullable": True}


class TestCallbacks:
    def test_inline_callback(self):
        callback = CallbackInfo(
            name="orderShipped",
            expression="{$request.body#/callbackUrl}",
            requestBody={"type": "object", "properties": {"status": {"type": "string"}}},
            summary="Order shipped",
        )
        result = CallbackGenerator().generate([callback])
        operation = result["orderShipped"]["{$request.body#/callbackUrl}"]["post"]
        assert operation["summary"] == "Order shipped"
        assert operation["requestBody"]["content"]["application/json"]["schema"]["type"] == "object"
        assert operation["responses"] == {"200": {"description": "Callback received successfully"}}

    def test_ref_callback(self):
        callback = CallbackInfo(name="paid", expression="{$request.body#/url}", ref="PaymentCallback")
        result = CallbackGenerator().generate([callback])
        assert result == {"paid": {"$ref": "#/components/callbacks/PaymentCallback"}}

    def test_no_callbacks(self):
        assert CallbackGenerator().generate([]) is None
