from api_spectrum.generator.registry import SchemaRegistry


class TestSchemaRegistry:
    def test_register_and_ref(self):
        registry = SchemaRegistry()
        ref = registry.register_and_get_ref("App\\Http\\Resources\\UserResource", {"type": "object"})
        assert ref == {"$ref": "#/components/schemas/UserResource"}
        assert registry.has("UserResource")
        assert registry.all() == {"UserResource": {"type": "object"}}

    def test_dangling_references(self):
        registry = SchemaRegistry()
        registry.get_ref("Missing")
        registry.register_and_get_ref("Present", {"type": "object"})
        assert registry.validate_references() == ["Missing"]

    def test_clear(self):
        registry = SchemaRegistry()
        registry.register("A", {"type": "object"})
        registry.get_ref("B")
        registry.clear()
        assert registry.all() == {}
        assert registry.validate_references() == []

    def test_instances_are_isolated(self):
        first, second = SchemaRegistry(), SchemaRegistry()
        first.register("A", {"type": "object"})
        assert not second.has("A")

    def test_all_returns_a_copy(self):
        registry = SchemaRegistry()
        registry.register("A", {"type": "object"})
        registry.all()["B"] = {}
        assert not registry.has("B")
