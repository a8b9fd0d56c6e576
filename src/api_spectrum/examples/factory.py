"""Example literal for a single field."""

import logging
from datetime import datetime, timedelta

from api_spectrum.examples.patterns import FieldPatternRegistry, normalize_field_name
from api_spectrum.examples.providers import (
    DATETIME_FORMAT,
    RandomValueProvider,
    StaticValueProvider,
    start_of_today,
)

logger = logging.getLogger(__name__)

PHONE_FIELDS = ("phone", "phonenumber", "mobile", "fax")
IMAGE_HINTS = ("image", "avatar", "photo", "picture", "thumbnail", "banner", "cover", "logo", "icon")
NUMERIC_TYPES = ("integer", "number")

_NO_VALUE = object()


def _matches_type(value, type_name: str | None) -> bool:
    if value is None or type_name is None:
        return True
    if type_name == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "string":
        return isinstance(value, str)
    return True


def _fits_length(value, schema: dict) -> bool:
    if not isinstance(value, str):
        return True
    return schema.get("minLength", 0) <= len(value) <= schema.get("maxLength", len(value))


class ExampleValueFactory:
    """Produces one example value per field.

    Precedence: ``const``, first of ``examples``, ``enum``, ``default``,
    name-pattern heuristics, then format and type fallbacks. With
    ``randomized`` off every value is a fixed literal.
    """

    def __init__(
        self,
        registry: FieldPatternRegistry | None = None,
        seed: int | None = None,
        locale: str = "en_US",
        randomized: bool = True,
        reference_time: datetime | None = None,
    ):
        self.registry = registry or FieldPatternRegistry()
        self.seed = seed
        self.locale = locale
        self.randomized = randomized
        self.reference_time = reference_time or start_of_today()
        self.random = RandomValueProvider(seed, self.reference_time)
        self.static = StaticValueProvider()

    @property
    def rng(self):
        return self.random.rng

    def reseed(self) -> None:
        """Restart the random sequence from the configured seed."""
        self.random.reseed(self.seed)

    def create(self, field_name: str, schema: dict):
        if "const" in schema:
            return schema["const"]
        if schema.get("examples"):
            return schema["examples"][0]
        if schema.get("enum"):
            return self._select_enum(schema["enum"])
        if "default" in schema:
            return schema["default"]

        type_name = schema.get("type")
        if self.randomized:
            special = self._special_field(field_name, schema)
            if special is not _NO_VALUE:
                return special

        pattern = self.registry.get_config(field_name)
        if pattern is not None and not (type_name in NUMERIC_TYPES and pattern.format not in ("integer", "float")):
            if self.randomized and pattern.generator:
                value = self.random.call(pattern.generator, pattern.args)
            else:
                value = pattern.static_value
            if _matches_type(value, type_name) and _fits_length(value, schema):
                return value
            logger.debug("Pattern value for %s does not fit %s", field_name, schema)

        return self.generate_by_type(type_name or "string", schema)

    def generate_by_type(self, type_name: str, schema: dict | None = None):
        schema = schema or {}
        provider = self.random if self.randomized else self.static
        fmt = schema.get("format")
        if fmt and type_name == "string":
            value = provider.by_format(fmt)
            if value is not None:
                return value
        return provider.by_type(type_name, schema)

    def _select_enum(self, values: list):
        if self.randomized:
            return self.rng.choice(values)
        return values[0]

    # -- special fields -------------------------------------------------------

    def _special_field(self, field_name: str, schema: dict):
        lower = field_name.lower()
        if lower.endswith("_at"):
            return self._timestamp(lower)
        if lower in ("name", "company_name", "first_name", "last_name", "user_name"):
            return self._contextual_name(lower)
        if normalize_field_name(field_name) in PHONE_FIELDS:
            return self._phone()
        if schema.get("type", "string") == "string" and any(hint in lower for hint in IMAGE_HINTS):
            return self._image_url(lower)
        return _NO_VALUE

    def _timestamp(self, field_name: str) -> str | None:
        now = self.reference_time
        if "deleted" in field_name:
            if self.rng.random() < 0.2:
                return self._between(now - timedelta(days=365), now)
            return None
        if "created" in field_name:
            return self._between(now - timedelta(days=365), now - timedelta(weeks=1))
        if "updated" in field_name or "modified" in field_name:
            return self._between(now - timedelta(weeks=1), now)
        if "expire" in field_name:
            return self._between(now, now + timedelta(days=365))
        return self._between(now - timedelta(days=365), now)

    def _between(self, start: datetime, end: datetime) -> str:
        span = int((end - start).total_seconds())
        return (start + timedelta(seconds=self.rng.randint(0, span))).strftime(DATETIME_FORMAT)

    def _contextual_name(self, field_name: str) -> str:
        if "company" in field_name:
            return self.random.company()
        if "first" in field_name:
            return self.random.first_name()
        if "last" in field_name:
            return self.random.last_name()
        if "user" in field_name:
            return self.random.user_name()
        return self.random.name()

    def _phone(self) -> str:
        if self.locale.startswith("ja_"):
            return f"0{self.rng.choice('789')}0-{self.rng.randint(0, 9999):04d}-{self.rng.randint(0, 9999):04d}"
        return self.random.phone_number()

    def _image_url(self, field_name: str) -> str:
        if "avatar" in field_name or "profile" in field_name:
            size = (200, 200)
        elif "thumbnail" in field_name:
            size = (150, 150)
        elif "banner" in field_name:
            size = (1200, 400)
        elif "cover" in field_name:
            size = (1200, 600)
        else:
            size = (640, 480)
        return self.random.image_url(*size)

