"""Named component schemas for one document."""

from api_spectrum.support.text import class_basename

REF_PREFIX = "#/components/schemas/"


class SchemaRegistry:
    """Component schemas keyed by short class name.

    Names are class basenames, so two classes sharing a basename in
    different namespaces end up as one component (the later one wins).
    Call ``clear()`` before every document.
    """

    def __init__(self):
        self._schemas: dict[str, dict] = {}
        self._referenced: list[str] = []

    def register(self, name: str, schema: dict) -> None:
        self._schemas[name] = schema

    def has(self, name: str) -> bool:
        return name in self._schemas

    def get(self, name: str) -> dict | None:
        return self._schemas.get(name)

    def get_ref(self, name: str) -> dict:
        if name not in self._referenced:
            self._referenced.append(name)
        return {"$ref": REF_PREFIX + name}

    def all(self) -> dict[str, dict]:
        return dict(self._schemas)

    def clear(self) -> None:
        self._schemas = {}
        self._referenced = []

    def extract_schema_name(self, class_name: str) -> str:
        return class_basename(class_name)

    def register_and_get_ref(self, class_name: str, schema: dict) -> dict:
        name = self.extract_schema_name(class_name)
        self.register(name, schema)
        return self.get_ref(name)

    def validate_references(self) -> list[str]:
        """Names handed out by ``get_ref`` that were never registered."""
        return [name for name in self._referenced if name not in self._schemas]
