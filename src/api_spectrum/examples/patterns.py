"""Field-name patterns that drive example value generation.

Each pattern names a generator of ``RandomValueProvider`` (plus its
arguments) and a fixed value used when examples are not randomized.
"""

from typing import Any

from pydantic import BaseModel


class FieldPattern(BaseModel):
    type: str
    format: str | None = None
    generator: str | None = None
    args: list = []
    static_value: Any = None


def _p(type_, generator, args=None, static=None, format=None) -> FieldPattern:
    return FieldPattern(type=type_, format=format, generator=generator, args=args or [], static_value=static)


# Keys are lowercase with underscores and hyphens removed.
FIELD_PATTERNS: dict[str, FieldPattern] = {
    "id": _p("id", "number_between", [1, 10000], 1, "integer"),
    "uuid": _p("uuid", "uuid", [], "550e8400-e29b-41d4-a716-446655440000", "uuid"),
    "name": _p("name", "name", [], "John Doe"),
    "firstname": _p("name", "first_name", [], "John"),
    "lastname": _p("name", "last_name", [], "Doe"),
    "fullname": _p("name", "name", [], "John Doe"),
    "email": _p("email", "email", [], "user@example.com", "email"),
    "emailaddress": _p("email", "email", [], "user@example.com", "email"),
    "username": _p("username", "user_name", [], "johndoe"),
    "password": _p("password", None, [], "********", "password"),
    "phone": _p("phone", "phone_number", [], "+1-555-123-4567"),
    "phonenumber": _p("phone", "phone_number", [], "+1-555-123-4567"),
    "mobile": _p("phone", "phone_number", [], "+1-555-987-6543"),
    "fax": _p("phone", "phone_number", [], "+1-555-000-0000"),
    "address": _p("address", "address", [], "123 Main St, Anytown, USA"),
    "street": _p("address", "street_address", [], "123 Main St"),
    "city": _p("address", "city", [], "Anytown"),
    "state": _p("address", "random_element", [["CA", "NY", "TX", "FL", "IL"]], "CA"),
    "country": _p("address", "country", [], "USA"),
    "countrycode": _p("address", "country_code", [], "US"),
    "postalcode": _p("address", "postcode", [], "12345"),
    "zipcode": _p("address", "postcode", [], "12345"),
    "latitude": _p("coordinate", "latitude", [], 37.7749),
    "longitude": _p("coordinate", "longitude", [], -122.4194),
    "lat": _p("coordinate", "latitude", [], 37.7749),
    "lng": _p("coordinate", "longitude", [], -122.4194),
    "lon": _p("coordinate", "longitude", [], -122.4194),
    "url": _p("url", "url", [], "https://example.com", "uri"),
    "website": _p("url", "url", [], "https://example.com", "uri"),
    "websiteurl": _p("url", "url", [], "https://example.com", "uri"),
    "homepage": _p("url", "url", [], "https://example.com", "uri"),
    "image": _p("url", "image_url", [640, 480], "https://example.com/image.jpg", "uri"),
    "avatar": _p("url", "image_url", [200, 200], "https://example.com/avatar.jpg", "uri"),
    "thumbnail": _p("url", "image_url", [150, 150], "https://example.com/thumb.jpg", "uri"),
    "photo": _p("url", "image_url", [640, 480], "https://example.com/photo.jpg", "uri"),
    "picture": _p("url", "image_url", [640, 480], "https://example.com/picture.jpg", "uri"),
    "icon": _p("url", "image_url", [64, 64], "https://example.com/icon.png", "uri"),
    "logo": _p("url", "image_url", [200, 200], "https://example.com/logo.png", "uri"),
    "banner": _p("url", "image_url", [1200, 400], "https://example.com/banner.jpg", "uri"),
    "cover": _p("url", "image_url", [1200, 600], "https://example.com/cover.jpg", "uri"),
    "company": _p("company", "company", [], "Acme Inc."),
    "companyname": _p("company", "company", [], "Acme Inc."),
    "jobtitle": _p("company", "job_title", [], "Software Engineer"),
    "department": _p("company", "random_element", [["Sales", "Marketing", "Engineering", "HR", "Finance"]], "Engineering"),
    "title": _p("text", "sentence", [4], "Example Title"),
    "description": _p("text", "paragraph", [2], "This is an example description."),
    "summary": _p("text", "sentence", [10], "This is a summary."),
    "content": _p("text", "paragraphs", [3], "<p>This is example content.</p>"),
    "body": _p("text", "paragraphs", [3], "This is the body content."),
    "message": _p("text", "sentence", [8], "This is an example message."),
    "notes": _p("text", "paragraph", [1], "Some notes here."),
    "bio": _p("text", "paragraph", [3], "This is a biography."),
    "biography": _p("text", "paragraph", [3], "This is a biography."),
    "slug": _p("text", "slug", [], "example-slug"),
    "age": _p("quantity", "number_between", [18, 80], 25, "integer"),
    "price": _p("money", "random_float", [2, 10, 1000], 99.99, "float"),
    "amount": _p("money", "random_float", [2, 0, 10000], 100.00, "float"),
    "total": _p("money", "random_float", [2, 0, 10000], 100.00, "float"),
    "subtotal": _p("money", "random_float", [2, 0, 10000], 90.00, "float"),
    "tax": _p("money", "random_float", [2, 0, 1000], 10.00, "float"),
    "discount": _p("money", "random_float", [2, 0, 100], 0.00, "float"),
    "quantity": _p("quantity", "number_between", [1, 100], 1, "integer"),
    "stock": _p("quantity", "number_between", [0, 1000], 100, "integer"),
    "count": _p("quantity", "number_between", [0, 100], 42, "integer"),
    "rating": _p("rating", "random_float", [1, 1, 5], 4.5, "float"),
    "score": _p("rating", "number_between", [0, 100], 85, "integer"),
    "views": _p("quantity", "number_between", [0, 100000], 1000, "integer"),
    "clicks": _p("quantity", "number_between", [0, 10000], 100, "integer"),
    "downloads": _p("quantity", "number_between", [0, 50000], 500, "integer"),
    "status": _p("enum", "random_element", [["active", "inactive", "pending"]], "active"),
    "role": _p("enum", "random_element", [["user", "admin", "moderator"]], "user"),
    "type": _p("enum", "word", [], "default"),
    "token": _p("secret", "sha256", [], "sk_test_********************"),
    "apikey": _p("secret", "sha256", [], "sk_test_********************"),
    "apitoken": _p("secret", "sha256", [], "sk_test_********************"),
    "accesstoken": _p("secret", "sha256", [], "sk_test_********************"),
    "refreshtoken": _p("secret", "sha256", [], "sk_test_********************"),
    "secret": _p("secret", "sha256", [], "********************"),
    "birthdate": _p("date", "date", [-80 * 365, -18 * 365], "1990-01-15", "date"),
    "dateofbirth": _p("date", "date", [-80 * 365, -18 * 365], "1990-01-15", "date"),
    "createdat": _p("timestamp", "date_time_between", [-365, -7], "2024-01-15T10:30:00Z", "date-time"),
    "updatedat": _p("timestamp", "date_time_between", [-7, 0], "2024-01-15T10:30:00Z", "date-time"),
    "deletedat": _p("timestamp", None, [], None, "date-time"),
    "publishedat": _p("timestamp", "date_time_between", [-365, 0], "2024-01-15T10:30:00Z", "date-time"),
    "expiresat": _p("timestamp", "date_time_between", [0, 365], "2025-01-15T10:30:00Z", "date-time"),
    "startedat": _p("timestamp", "date_time_between", [-365, 0], "2024-01-15T10:30:00Z", "date-time"),
    "endedat": _p("timestamp", "date_time_between", [-365, 0], "2024-01-15T10:30:00Z", "date-time"),
    "completedat": _p("timestamp", "date_time_between", [-365, 0], "2024-01-15T10:30:00Z", "date-time"),
    "locale": _p("locale", "locale", [], "en_US"),
    "language": _p("locale", "language_code", [], "en"),
    "currency": _p("locale", "currency_code", [], "USD"),
    "timezone": _p("locale", "timezone", [], "America/New_York"),
    "ipaddress": _p("network", "ipv4", [], "192.168.1.1", "ipv4"),
    "ip": _p("network", "ipv4", [], "192.168.1.1", "ipv4"),
    "useragent": _p("network", "user_agent", [], "Mozilla/5.0 (compatible)"),
    "color": _p("color", "hex_color", [], "#FF5733"),
    "hexcolor": _p("color", "hex_color", [], "#FF5733"),
    "gender": _p("enum", "random_element", [["male", "female", "other"]], "male"),
    "isactive": _p("boolean", "boolean", [], True, "boolean"),
    "isverified": _p("boolean", "boolean", [], True, "boolean"),
    "isadmin": _p("boolean", "boolean", [], False, "boolean"),
    "haschildren": _p("boolean", "boolean", [], False, "boolean"),
}

SUFFIX_PATTERNS = (
    (("_id",), _p("id", "number_between", [1, 1000], 1, "integer")),
    (("_at",), _p("timestamp", "date_time", [], "2024-01-15T10:30:00Z", "date-time")),
    (("_url", "_link"), _p("url", "url", [], "https://example.com", "uri")),
    (("_date",), _p("date", "date", [-365, 0], "2024-01-15", "date")),
    (("_time",), _p("time", "time", [], "10:30:00", "time")),
    (("_count", "_total"), _p("quantity", "number_between", [0, 100], 42, "integer")),
)

PREFIX_PATTERNS = (
    (("is_", "has_", "can_", "should_"), _p("boolean", "boolean", [], True, "boolean")),
    (("num_", "number_"), _p("quantity", "number_between", [1, 100], 1, "integer")),
)

CONTAINS_PATTERNS = (
    (("image", "photo", "picture", "avatar", "thumbnail"), _p("url", "image_url", [640, 480], "https://example.com/image.jpg", "uri")),
    (("file", "document", "attachment"), _p("file", "file_path", [], "/path/to/file.pdf")),
)


def normalize_field_name(name: str) -> str:
    return name.replace("-", "").replace("_", "").lower()


class FieldPatternRegistry:
    """Looks up the pattern for a field name.

    Order: custom patterns, normalized exact name, last ``_`` part,
    then suffix, prefix and substring rules.
    """

    def __init__(self):
        self._custom: dict[str, FieldPattern] = {}

    def get_config(self, field_name: str) -> FieldPattern | None:
        if field_name in self._custom:
            return self._custom[field_name]

        normalized = normalize_field_name(field_name)
        if normalized in FIELD_PATTERNS:
            return FIELD_PATTERNS[normalized]

        if "_" in field_name:
            last = field_name.rsplit("_", 1)[-1].lower()
            if last in FIELD_PATTERNS:
                return FIELD_PATTERNS[last]

        return self._match_affixes(field_name)

    def register_pattern(self, name: str, config: FieldPattern | dict) -> None:
        if not name:
            raise ValueError("Pattern name cannot be empty.")
        if isinstance(config, dict):
            if "type" not in config:
                raise ValueError(f"Pattern '{name}' must have a 'type' field.")
            if "static_value" not in config:
                raise ValueError(f"Pattern '{name}' must have a 'static_value' field (can be None).")
            config = FieldPattern(**config)
        self._custom[name] = config

    def all_patterns(self) -> dict[str, FieldPattern]:
        return {**FIELD_PATTERNS, **self._custom}

    @staticmethod
    def _match_affixes(field_name: str) -> FieldPattern | None:
        lower = field_name.lower()
        if field_name.endswith("Id"):
            return SUFFIX_PATTERNS[0][1]
        for suffixes, pattern in SUFFIX_PATTERNS:
            if lower.endswith(suffixes):
                return pattern
        for prefixes, pattern in PREFIX_PATTERNS:
            if lower.startswith(prefixes):
                return pattern
        for needles, pattern in CONTAINS_PATTERNS:
            if any(needle in lower for needle in needles):
                return pattern
        return None
