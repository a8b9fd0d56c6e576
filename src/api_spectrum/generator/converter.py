"""OpenAPI 3.0.x -> 3.1.0 document conversion."""

import copy

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class OpenApi31Converter:
    """Rewrites a 3.0 document for 3.1.

    - ``nullable: true`` becomes a ``[type, "null"]`` type list
    - boolean ``exclusiveMinimum``/``exclusiveMaximum`` become numeric bounds
    - ``format: byte`` strings get ``contentEncoding: base64``
    - ``jsonSchemaDialect`` and an empty ``webhooks`` map are added

    A document that already declares ``jsonSchemaDialect`` is returned unchanged.
    """

    def convert(self, document: dict) -> dict:
        if "jsonSchemaDialect" in document:
            return document
        spec = copy.deepcopy(document)
        spec["openapi"] = "3.1.0"
        spec["jsonSchemaDialect"] = JSON_SCHEMA_DIALECT

        for path_item in spec.get("paths", {}).values():
            self._convert_path_item(path_item)
        if isinstance(spec.get("components"), dict):
            self._convert_components(spec["components"])

        spec.setdefault("webhooks", {})
        return spec

    # -- document walk --------------------------------------------------------

    def _convert_path_item(self, path_item: dict) -> None:
        for method, operation in path_item.items():
            if method in HTTP_METHODS and isinstance(operation, dict):
                self._convert_operation(operation)

    def _convert_operation(self, operation: dict) -> None:
        for parameter in operation.get("parameters", []):
            self._convert_parameter(parameter)
        if isinstance(operation.get("requestBody"), dict):
            self._convert_content(operation["requestBody"])
        for response in operation.get("responses", {}).values():
            if isinstance(response, dict):
                self._convert_content(response)
        for callback in (operation.get("callbacks") or {}).values():
            if isinstance(callback, dict) and "$ref" not in callback:
                for path_item in callback.values():
                    self._convert_path_item(path_item)

    def _convert_parameter(self, parameter: dict) -> None:
        if isinstance(parameter.get("schema"), dict):
            parameter["schema"] = self.convert_schema(parameter["schema"])

    def _convert_content(self, holder: dict) -> None:
        for media in (holder.get("content") or {}).values():
            if isinstance(media.get("schema"), dict):
                media["schema"] = self.convert_schema(media["schema"])

    def _convert_components(self, components: dict) -> None:
        schemas = components.get("schemas", {})
        for name, schema in schemas.items():
            schemas[name] = self.convert_schema(schema)
        for body in components.get("requestBodies", {}).values():
            self._convert_content(body)
        for response in components.get("responses", {}).values():
            self._convert_content(response)
        for parameter in components.get("parameters", {}).values():
            self._convert_parameter(parameter)
        for callback in components.get("callbacks", {}).values():
            for path_item in callback.values():
                self._convert_path_item(path_item)

    # -- schemas --------------------------------------------------------------

    def convert_schema(self, schema: dict) -> dict:
        schema = self._convert_nullable(schema)
        schema = self._convert_exclusive_bounds(schema)
        schema = self._convert_content_encoding(schema)

        if isinstance(schema.get("properties"), dict):
            schema["properties"] = {
                name: self.convert_schema(prop) if isinstance(prop, dict) else prop
                for name, prop in schema["properties"].items()
            }
        if isinstance(schema.get("items"), dict):
            schema["items"] = self.convert_schema(schema["items"])
        for key in ("allOf", "anyOf", "oneOf"):
            if isinstance(schema.get(key), list):
                schema[key] = [self.convert_schema(s) if isinstance(s, dict) else s for s in schema[key]]
        if isinstance(schema.get("additionalProperties"), dict):
            schema["additionalProperties"] = self.convert_schema(schema["additionalProperties"])
        return schema

    @staticmethod
    def _convert_nullable(schema: dict) -> dict:
        if "nullable" not in schema:
            return schema
        nullable = schema.pop("nullable")
        if nullable is not True or "type" not in schema:
            return schema
        current = schema["type"]
        if isinstance(current, list):
            if "null" not in current:
                schema["type"] = current + ["null"]
        else:
            schema["type"] = [current, "null"]
        return schema

    @staticmethod
    def _convert_exclusive_bounds(schema: dict) -> dict:
        for flag, bound in (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum")):
            value = schema.get(flag)
            if not isinstance(value, bool):
                continue
            if value and bound in schema:
                schema[flag] = schema.pop(bound)
            else:
                del schema[flag]
        return schema

    @staticmethod
    def _convert_content_encoding(schema: dict) -> dict:
        type_ = schema.get("type")
        is_string = "string" in type_ if isinstance(type_, list) else type_ == "string"
        if is_string and schema.get("format") == "byte" and "contentEncoding" not in schema:
            schema["contentEncoding"] = "base64"
        return schema
