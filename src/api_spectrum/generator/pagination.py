"""Pagination envelopes around a list item schema."""

import logging

logger = logging.getLogger(__name__)

PAGINATION_TYPES = ("length_aware", "simple", "cursor")


def _uri(nullable: bool = False) -> dict:
    schema = {"type": "string"}
    if nullable:
        schema["nullable"] = True
    schema["format"] = "uri"
    return schema


def _integer(nullable: bool = False, example=None) -> dict:
    schema: dict = {"type": "integer"}
    if example is not None:
        schema["example"] = example
    if nullable:
        schema["nullable"] = True
    return schema


def _links() -> dict:
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "url": _uri(nullable=True),
                "label": {"type": "string"},
                "active": {"type": "boolean"},
            },
        },
    }


def _envelope(properties: dict) -> dict:
    return {"type": "object", "properties": properties, "required": list(properties)}


class PaginationSchemaGenerator:
    """Laravel-style paginator payloads.

    ``length_aware`` carries page numbers, links and a total; ``simple`` drops
    the total and last page; ``cursor`` has cursor tokens instead of page numbers.
    Any other type returns the data schema untouched.
    """

    def generate(self, pagination_type: str, data_schema: dict) -> dict:
        if pagination_type == "length_aware":
            return self.length_aware(data_schema)
        if pagination_type == "simple":
            return self.simple(data_schema)
        if pagination_type == "cursor":
            return self.cursor(data_schema)
        if pagination_type not in (None, "", "none"):
            logger.debug("Unknown pagination type '%s', leaving schema unwrapped", pagination_type)
        return data_schema

    def length_aware(self, data_schema: dict) -> dict:
        return _envelope({
            "data": {"type": "array", "items": data_schema},
            "current_page": _integer(example=1),
            "first_page_url": _uri(),
            "from": _integer(nullable=True),
            "last_page": _integer(),
            "last_page_url": _uri(),
            "links": _links(),
            "next_page_url": _uri(nullable=True),
            "path": _uri(),
            "per_page": _integer(),
            "prev_page_url": _uri(nullable=True),
            "to": _integer(nullable=True),
            "total": _integer(),
        })

    def simple(self, data_schema: dict) -> dict:
        return _envelope({
            "data": {"type": "array", "items": data_schema},
            "first_page_url": _uri(),
            "from": _integer(nullable=True),
            "next_page_url": _uri(nullable=True),
            "path": _uri(),
            "per_page": _integer(),
            "prev_page_url": _uri(nullable=True),
            "to": _integer(nullable=True),
        })

    def cursor(self, data_schema: dict) -> dict:
        return _envelope({
            "data": {"type": "array", "items": data_schema},
            "path": _uri(),
            "per_page": _integer(),
            "next_cursor": {"type": "string", "nullable": True},
            "next_page_url": _uri(nullable=True),
            "prev_cursor": {"type": "string", "nullable": True},
            "prev_page_url": _uri(nullable=True),
        })
