from api_spectrum.generator.converter import JSON_SCHEMA_DIALECT, OpenApi31Converter


def _document(schema: dict) -> dict:
    return {
        "openapi": "3.0.0",
        "info": {"title": "T", "version": "1"},
        "paths": {
            "/items": {
                "get": {
                    "parameters": [{"name": "q", "in": "query", "schema": {"type": "string", "nullable": True}}],
                    "responses": {"200": {"description": "OK", "content": {"application/json": {"schema": schema}}}},
                }
            }
        },
        "components": {"schemas": {"Item": schema}},
    }


class TestConvertSchema:
    def test_nullable_becomes_type_list(self):
        schema = OpenApi31Converter().convert_schema({"type": "string", "nullable": True})
        assert schema == {"type": ["string", "null"]}

    def test_nullable_false_is_dropped(self):
        assert OpenApi31Converter().convert_schema({"type": "string", "nullable": False}) == {"type": "string"}

    def test_exclusive_bounds_become_numeric(self):
        schema = OpenApi31Converter().convert_schema({
            "type": "number", "minimum": 0, "exclusiveMinimum": True, "maximum": 10, "exclusiveMaximum": False,
        })
        assert schema == {"type": "number", "exclusiveMinimum": 0, "maximum": 10}

    def test_byte_format_gets_content_encoding(self):
        schema = OpenApi31Converter().convert_schema({"type": "string", "format": "byte"})
        assert schema["contentEncoding"] == "base64"

    def test_nested_schemas(self):
        schema = OpenApi31Converter().convert_schema({
            "type": "object",
            "properties": {
                "tags": {"type": "array", "items": {"type": "string", "nullable": True}},
                "choice": {"oneOf": [{"type": "integer", "nullable": True}]},
            },
        })
        assert schema["properties"]["tags"]["items"]["type"] == ["string", "null"]
        assert schema["properties"]["choice"]["oneOf"][0]["type"] == ["integer", "null"]


class TestConvertDocument:
    def test_document_header(self):
        converted = OpenApi31Converter().convert(_document({"type": "object"}))
        assert converted["openapi"] == "3.1.0"
        assert converted["jsonSchemaDialect"] == JSON_SCHEMA_DIALECT
        assert converted["webhooks"] == {}

    def test_paths_and_components_are_converted(self):
        converted = OpenApi31Converter().convert(_document({"type": "integer", "nullable": True}))
        operation = converted["paths"]["/items"]["get"]
        assert operation["parameters"][0]["schema"]["type"] == ["string", "null"]
        assert operation["responses"]["200"]["content"]["application/json"]["schema"]["type"] == ["integer", "null"]
        assert converted["components"]["schemas"]["Item"]["type"] == ["integer", "null"]

    def test_input_is_not_modified(self):
        document = _document({"type": "string", "nullable": True})
        OpenApi31Converter().convert(document)
        assert document["openapi"] == "3.0.0"
        assert document["components"]["schemas"]["Item"] == {"type": "string", "nullable": True}

    def test_idempotent(self):
        converter = OpenApi31Converter()
        once = converter.convert(_document({"type": "string", "nullable": True}))
        assert converter.convert(once) == once
