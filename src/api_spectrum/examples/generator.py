"""Whole example payloads built from schemas, one field at a time."""

from api_spectrum.examples.factory import ExampleValueFactory
from api_spectrum.examples.providers import AlwaysInclude, RandomInclusion

REF_PREFIX = "#/components/schemas/"
COLLECTION_SIZE = 3
EXAMPLE_BASE_URL = "https://api.example.com/items"


def inclusion_strategy(factory: ExampleValueFactory, include_all: bool, probability: float = 0.7):
    """``AlwaysInclude`` when every optional field is wanted or examples are fixed."""
    if include_all or not factory.randomized:
        return AlwaysInclude()
    return RandomInclusion(factory.rng, probability)


class ExampleGenerator:
    """Walks object and array schemas and asks the factory for each leaf.

    Required properties are always present. Optional ones go through the
    inclusion strategy unless ``all_fields`` is set, which response
    examples use so that every documented field shows up.
    """

    def __init__(self, factory: ExampleValueFactory | None = None, inclusion=None, components: dict | None = None):
        self.factory = factory or ExampleValueFactory()
        self.inclusion = inclusion or AlwaysInclude()
        self.components = components if components is not None else {}

    def from_schema(self, schema: dict, all_fields: bool = False, field_name: str = "value"):
        return self._value(field_name, schema, all_fields, depth=0)

    def _value(self, name: str, schema: dict, all_fields: bool, depth: int):
        if "$ref" in schema:
            target = self.components.get(schema["$ref"].removeprefix(REF_PREFIX))
            if target is None or depth > 8:
                return {}
            return self._value(name, target, all_fields, depth + 1)
        if "example" in schema:
            return schema["example"]
        for key in ("oneOf", "anyOf"):
            if schema.get(key):
                return self._value(name, schema[key][0], all_fields, depth + 1)

        type_name = schema.get("type")
        if type_name == "object" or (type_name is None and "properties" in schema):
            return self._object(schema, all_fields, depth)
        if type_name == "array":
            items = schema.get("items")
            if not items or depth > 8:
                return []
            item = self._value(name, items, all_fields, depth + 1)
            if isinstance(item, dict) and item:
                return self.collection(item)
            return [item]
        return self.factory.create(name, schema)

    def _object(self, schema: dict, all_fields: bool, depth: int) -> dict:
        required = set(schema.get("required", []))
        example = {}
        for name, prop in schema.get("properties", {}).items():
            if not all_fields and name not in required and not self.inclusion.include(name):
                continue
            example[name] = self._value(name, prop, all_fields, depth + 1)
        return example

    def collection(self, item: dict) -> list[dict]:
        """Three copies of ``item``; an ``id`` key is renumbered 1..3."""
        items = []
        for i in range(1, COLLECTION_SIZE + 1):
            copy = dict(item)
            if "id" in copy:
                copy["id"] = i
            items.append(copy)
        return items

    def paginated(self, item: dict, pagination_type: str):
        data = self.collection(item)
        if pagination_type == "cursor":
            return {
                "data": data,
                "path": EXAMPLE_BASE_URL,
                "per_page": 15,
                "next_cursor": "eyJpZCI6MTUsIl9wb2ludHNUb05leHRJdGVtcyI6dHJ1ZX0",
                "next_page_url": f"{EXAMPLE_BASE_URL}?cursor=eyJpZCI6MTUsIl9wb2ludHNUb05leHRJdGVtcyI6dHJ1ZX0",
                "prev_cursor": None,
                "prev_page_url": None,
            }
        envelope = {"data": data}
        if pagination_type == "length_aware":
            envelope["current_page"] = 1
        envelope["first_page_url"] = f"{EXAMPLE_BASE_URL}?page=1"
        envelope["from"] = 1
        if pagination_type == "length_aware":
            envelope["last_page"] = 10
            envelope["last_page_url"] = f"{EXAMPLE_BASE_URL}?page=10"
            envelope["links"] = [
                {"url": None, "label": "&laquo; Previous", "active": False},
                {"url": f"{EXAMPLE_BASE_URL}?page=1", "label": "1", "active": True},
                {"url": f"{EXAMPLE_BASE_URL}?page=2", "label": "Next &raquo;", "active": False},
            ]
        envelope["next_page_url"] = f"{EXAMPLE_BASE_URL}?page=2"
        envelope["path"] = EXAMPLE_BASE_URL
        envelope["per_page"] = 15
        envelope["prev_page_url"] = None
        envelope["to"] = 15
        if pagination_type == "length_aware":
            envelope["total"] = 150
        return envelope

    def fractal(self, item: dict, is_collection: bool = False, paginated: bool = False) -> dict:
        example = {"data": self.collection(item) if is_collection else item}
        if is_collection and paginated:
            example["meta"] = {
                "pagination": {
                    "total": 150,
                    "count": COLLECTION_SIZE,
                    "per_page": 15,
                    "current_page": 1,
                    "total_pages": 10,
                    "links": {"next": f"{EXAMPLE_BASE_URL}?page=2"},
                }
            }
        return example
