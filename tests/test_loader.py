import logging
from pathlib import Path

import pytest

from api_spectrum.analysis.base import ResourceFieldInfo, RouteDescriptor
from api_spectrum.analysis.loader import detect_format, load_project
from api_spectrum.config import SpectrumConfig
from api_spectrum.errors import AnalysisError, ConfigError

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadProject:
    def test_shop_fixture(self):
        routes, source = load_project(FIXTURES / "shop.yaml")
        assert len(routes) == 7
        assert routes[0].controller_key == "App\\Http\\Controllers\\ProductController@index"
        controller = source.analyze_controller("App\\Http\\Controllers\\ProductController", "index")
        assert controller.pagination_info.type == "length_aware"
        assert source.analyze_resource("App\\Http\\Resources\\ProductResource").fields["id"].read_only is True

    def test_json_input(self, tmp_path):
        path = tmp_path / "dump.json"
        path.write_text('{"routes": [{"uri": "api/ping", "http_methods": ["GET"]}]}')
        routes, source = load_project(path)
        assert routes[0].uri == "api/ping"
        assert source.controllers == {}

    def test_missing_routes(self, tmp_path):
        path = tmp_path / "dump.yaml"
        path.write_text("controllers: {}\n")
        with pytest.raises(AnalysisError, match="routes"):
            load_project(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "dump.yaml"
        path.write_text("routes: [unclosed\n")
        with pytest.raises(AnalysisError):
            load_project(path)

    def test_invalid_route(self, tmp_path):
        path = tmp_path / "dump.yaml"
        path.write_text("routes:\n  - uri: api/ping\n")
        with pytest.raises(AnalysisError, match="Invalid analysis data"):
            load_project(path)

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / "dump.yaml"
        path.write_text("routes: []\nresources: [a, b]\n")
        with pytest.raises(AnalysisError, match="resources"):
            load_project(path)

    def test_unknown_form_request(self):
        _, source = load_project(FIXTURES / "shop.yaml")
        with pytest.raises(AnalysisError):
            source.analyze_form_request("App\\Http\\Requests\\Missing")

    def test_unknown_controller_is_empty(self):
        _, source = load_project(FIXTURES / "shop.yaml")
        assert source.analyze_controller("Nope", None).all_resource_classes == []


class TestDetectFormat:
    def test_by_suffix(self, tmp_path):
        assert detect_format(tmp_path / "out.json") == "json"
        assert detect_format(tmp_path / "out.yml") == "yaml"

    def test_sniffs_content(self, tmp_path):
        path = tmp_path / "openapi"
        path.write_text('{"openapi": "3.0.0"}')
        assert detect_format(path) == "json"
        path.write_text("openapi: 3.0.0\n")
        assert detect_format(path) == "yaml"

    def test_missing_file_defaults_to_yaml(self, tmp_path):
        assert detect_format(tmp_path / "openapi") == "yaml"


class TestModels:
    def test_path_parameters_from_uri(self):
        route = RouteDescriptor(uri="api/posts/{post}/comments/{comment?}", http_methods=["GET"])
        assert [(p.name, p.required) for p in route.path_parameters] == [("post", True), ("comment", False)]

    def test_invokable_controller_key(self):
        route = RouteDescriptor(uri="api/x", http_methods=["GET"], controller_class="XController")
        assert route.controller_key == "XController@__invoke"

    def test_transformer_default_group(self):
        info = ResourceFieldInfo.model_validate({
            "is_transformer": True,
            "fields": {"default": {"id": {"type": "integer"}}, "author": {"type": "object"}},
        })
        assert list(info.fields) == ["id"]


class TestConfig:
    def test_defaults(self):
        config = SpectrumConfig.load(None)
        assert config.title == "API Documentation"
        assert config.is_openapi_31 is False
        assert config.server_list() == [{"url": "http://localhost/api", "description": "API Server"}]

    def test_shop_config(self):
        config = SpectrumConfig.load(FIXTURES / "shop_config.yaml")
        assert config.title == "Shop API"
        assert config.example_generation.seed == 42
        assert config.tag_groups == {"Catalogue": ["Product"]}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert SpectrumConfig.load(path).version == "1.0.0"

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            SpectrumConfig.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            SpectrumConfig.load(tmp_path / "missing.yaml")

    def test_malformed_sections_are_coerced(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = SpectrumConfig.model_validate({
                "tag_groups": {"Good": ["A"], "Bad": "B"},
                "tags": "nope",
                "tag_depth": "deep",
                "servers": ["https://a.example.com"],
            })
        assert config.tag_groups == {"Good": ["A"]}
        assert config.tags == {}
        assert config.tag_depth == 1
        assert config.server_list() == [{"url": "https://a.example.com"}]
        assert "Tag group 'Bad' is not a list" in caplog.text

    def test_invalid_tag_values_are_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = SpectrumConfig.model_validate({"tags": {"api/*": 5, "api/admin/*": ["Admin"]}})
        assert config.tags == {"api/admin/*": ["Admin"]}
        assert "Tag for 'api/*'" in caplog.text

    def test_auxiliary_sections_fall_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text(
            "title: Shop\n"
            "example_generation: yes-please\n"
            "authentication: [bearer]\n"
            "ungrouped_tags_group: [a]\n"
            "error_responses: sometimes\n"
            "servers: [{description: no url}]\n"
        )
        with caplog.at_level(logging.WARNING):
            config = SpectrumConfig.load(path)
        assert config.title == "Shop"
        assert config.example_generation.randomized is True
        assert config.authentication.global_auth.enabled is False
        assert config.ungrouped_tags_group == "Other"
        assert config.error_responses is True
        assert config.servers == []
        assert "example_generation must be a mapping" in caplog.text

    def test_invalid_section_values_use_defaults(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = SpectrumConfig.model_validate({"example_generation": {"seed": "abc"}})
        assert config.example_generation.seed is None
        assert "Invalid example_generation section" in caplog.text

    def test_negative_tag_depth(self):
        assert SpectrumConfig(tag_depth=-2).tag_depth == 1

    def test_global_auth_alias(self):
        config = SpectrumConfig.model_validate({"authentication": {"global": {"enabled": True}}})
        assert config.authentication.global_auth.enabled is True
