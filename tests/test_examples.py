import re
from datetime import datetime, timezone

import pytest

from api_spectrum.examples.factory import ExampleValueFactory
from api_spectrum.examples.generator import ExampleGenerator, inclusion_strategy
from api_spectrum.examples.patterns import FieldPatternRegistry
from api_spectrum.examples.providers import AlwaysInclude, RandomInclusion, RandomValueProvider

REFERENCE = datetime(2025, 6, 1, tzinfo=timezone.utc)
ISO = "%Y-%m-%dT%H:%M:%SZ"

PRODUCT = {
    "type": "object",
    "properties": {
        "id": {"type": "integer", "readOnly": True},
        "name": {"type": "string"},
        "email": {"type": "string", "format": "email"},
        "status": {"type": "string", "enum": ["draft", "published"]},
        "created_at": {"type": "string", "format": "date-time"},
        "deleted_at": {"type": "string", "format": "date-time", "nullable": True},
    },
    "required": ["id", "name"],
}


def _factory(**kwargs) -> ExampleValueFactory:
    return ExampleValueFactory(reference_time=REFERENCE, **kwargs)


class TestFieldPatterns:
    def test_exact_name(self):
        assert FieldPatternRegistry().get_config("email").type == "email"

    def test_normalized_name(self):
        assert FieldPatternRegistry().get_config("First-Name").generator == "first_name"

    def test_last_part(self):
        assert FieldPatternRegistry().get_config("billing_city").generator == "city"

    def test_affixes(self):
        registry = FieldPatternRegistry()
        assert registry.get_config("author_id").static_value == 1
        assert registry.get_config("authorId").static_value == 1
        assert registry.get_config("is_featured").type == "boolean"
        assert registry.get_config("comments_count").static_value == 42
        assert registry.get_config("hero_image_key").generator == "image_url"

    def test_no_match(self):
        assert FieldPatternRegistry().get_config("xyz") is None

    def test_custom_pattern(self):
        registry = FieldPatternRegistry()
        registry.register_pattern("sku", {"type": "code", "generator": "slug", "static_value": "SKU-1"})
        assert registry.get_config("sku").static_value == "SKU-1"
        assert "sku" in registry.all_patterns()

    def test_custom_pattern_validation(self):
        registry = FieldPatternRegistry()
        with pytest.raises(ValueError):
            registry.register_pattern("", {"type": "x", "static_value": None})
        with pytest.raises(ValueError):
            registry.register_pattern("sku", {"static_value": None})
        with pytest.raises(ValueError):
            registry.register_pattern("sku", {"type": "x"})


class TestStaticValues:
    def test_fixed_literals(self):
        factory = _factory(randomized=False)
        assert factory.create("email", {"type": "string", "format": "email"}) == "user@example.com"
        assert factory.create("name", {"type": "string"}) == "John Doe"
        assert factory.create("price", {"type": "number"}) == 99.99
        assert factory.create("xyz", {"type": "string", "format": "date"}) == "2024-01-15"
        assert factory.create("xyz", {"type": "boolean"}) is True

    def test_numeric_midpoint(self):
        factory = _factory(randomized=False)
        assert factory.create("xyz", {"type": "integer", "minimum": 1, "maximum": 10}) == 5
        assert factory.create("xyz", {"type": "number"}) == 1.0

    def test_enum_picks_first(self):
        assert _factory(randomized=False).create("xyz", {"type": "string", "enum": ["b", "a"]}) == "b"

    def test_deleted_at_is_null(self):
        assert _factory(randomized=False).create("deleted_at", {"type": "string", "format": "date-time"}) is None

    def test_text_pattern_skipped_for_numeric_type(self):
        assert _factory(randomized=False).create("title", {"type": "integer"}) == 1


class TestPrecedence:
    def test_const_beats_everything(self):
        assert _factory().create("email", {"const": "fixed", "enum": ["a"], "default": "b"}) == "fixed"

    def test_examples_then_enum_then_default(self):
        factory = _factory()
        assert factory.create("x", {"examples": ["first", "second"], "default": "d"}) == "first"
        assert factory.create("x", {"enum": ["only"], "default": "d"}) == "only"
        assert factory.create("x", {"type": "string", "default": "d"}) == "d"


class TestRandomValues:
    def test_same_seed_same_values(self):
        first = ExampleGenerator(_factory(seed=7)).from_schema(PRODUCT, all_fields=True)
        second = ExampleGenerator(_factory(seed=7)).from_schema(PRODUCT, all_fields=True)
        assert first == second

    def test_reseed_restarts_sequence(self):
        factory = _factory(seed=3)
        before = [factory.create("email", {"type": "string"}) for _ in range(3)]
        factory.reseed()
        after = [factory.create("email", {"type": "string"}) for _ in range(3)]
        assert before == after

    def test_created_at_in_the_past(self):
        factory = _factory(seed=1)
        for _ in range(20):
            value = datetime.strptime(factory.create("created_at", {"type": "string"}), ISO).replace(tzinfo=timezone.utc)
            assert value < REFERENCE

    def test_deleted_at_is_null_or_past(self):
        factory = _factory(seed=11)
        values = [factory.create("deleted_at", {"type": "string", "format": "date-time"}) for _ in range(50)]
        assert None in values
        for value in values:
            if value is not None:
                assert datetime.strptime(value, ISO).replace(tzinfo=timezone.utc) <= REFERENCE

    def test_expires_at_in_the_future(self):
        value = _factory(seed=5).create("expires_at", {"type": "string"})
        assert datetime.strptime(value, ISO).replace(tzinfo=timezone.utc) >= REFERENCE

    def test_japanese_phone(self):
        value = _factory(seed=2, locale="ja_JP").create("phone", {"type": "string"})
        assert re.fullmatch(r"0[789]0-\d{4}-\d{4}", value)

    def test_avatar_url_size(self):
        value = _factory(seed=2).create("avatar", {"type": "string"})
        assert value.startswith("https://via.placeholder.com/200x200.png")

    def test_integer_range(self):
        factory = _factory(seed=4)
        for _ in range(20):
            assert 5 <= factory.create("xyz", {"type": "integer", "minimum": 5, "maximum": 9}) <= 9

    def test_short_string_respects_max_length(self):
        assert len(_factory(seed=4).create("xyz", {"type": "string", "maxLength": 8})) <= 8

    def test_string_respects_min_length(self):
        factory = _factory(seed=1)
        for _ in range(20):
            value = factory.create("note", {"type": "string", "minLength": 60, "maxLength": 80})
            assert 60 <= len(value) <= 80

    def test_short_string_respects_min_length(self):
        factory = _factory(seed=3)
        for _ in range(20):
            assert 6 <= len(factory.create("xyz", {"type": "string", "minLength": 6, "maxLength": 8})) <= 8

    def test_pattern_value_outside_length_bounds_is_replaced(self):
        value = _factory(seed=2).create("title", {"type": "string", "minLength": 150, "maxLength": 200})
        assert 150 <= len(value) <= 200

    def test_static_string_fits_length(self):
        factory = _factory(randomized=False)
        assert factory.create("xyz", {"type": "string", "maxLength": 3}) == "str"
        assert factory.create("xyz", {"type": "string", "minLength": 10}) == "stringstri"
        assert factory.create("xyz", {"type": "string"}) == "string"

    def test_uuid_format(self):
        value = RandomValueProvider(seed=1).uuid()
        assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}", value)

    def test_unknown_generator_falls_back_to_word(self):
        assert isinstance(RandomValueProvider(seed=1).call("no_such_generator", []), str)


class TestExampleGenerator:
    def test_required_fields_always_present(self):
        gen = ExampleGenerator(_factory(seed=9), RandomInclusion(_factory(seed=9).rng, probability=0.0))
        example = gen.from_schema(PRODUCT)
        assert set(example) == {"id", "name"}

    def test_all_fields(self):
        example = ExampleGenerator(_factory(seed=9)).from_schema(PRODUCT, all_fields=True)
        assert list(example) == list(PRODUCT["properties"])
        assert example["status"] in ("draft", "published")

    def test_schema_example_wins(self):
        assert ExampleGenerator(_factory()).from_schema({"type": "string", "example": "given"}) == "given"

    def test_ref_resolved_through_components(self):
        components = {"Product": {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]}}
        gen = ExampleGenerator(_factory(randomized=False), components=components)
        assert gen.from_schema({"$ref": "#/components/schemas/Product"}) == {"id": 1}
        assert gen.from_schema({"$ref": "#/components/schemas/Missing"}) == {}

    def test_array_of_objects_becomes_collection(self):
        schema = {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "integer"}}}}
        example = ExampleGenerator(_factory(randomized=False)).from_schema(schema, all_fields=True)
        assert [item["id"] for item in example] == [1, 2, 3]

    def test_one_of_uses_first_branch(self):
        schema = {"oneOf": [{"type": "string", "example": "a"}, {"type": "integer"}]}
        assert ExampleGenerator(_factory()).from_schema(schema) == "a"

    def test_paginated_envelopes(self):
        gen = ExampleGenerator(_factory())
        length_aware = gen.paginated({"id": 1}, "length_aware")
        assert length_aware["total"] == 150
        assert length_aware["current_page"] == 1
        assert len(length_aware["data"]) == 3
        simple = gen.paginated({"id": 1}, "simple")
        assert "total" not in simple
        assert "last_page" not in simple
        cursor = gen.paginated({"id": 1}, "cursor")
        assert cursor["prev_cursor"] is None
        assert "current_page" not in cursor

    def test_fractal_meta(self):
        example = ExampleGenerator(_factory()).fractal({"id": 1}, is_collection=True, paginated=True)
        assert example["meta"]["pagination"]["count"] == 3

    def test_inclusion_strategy(self):
        assert isinstance(inclusion_strategy(_factory(randomized=False), False), AlwaysInclude)
        assert isinstance(inclusion_strategy(_factory(), True), AlwaysInclude)
        assert isinstance(inclusion_strategy(_factory(), False), RandomInclusion)
