"""Value providers for examples: fixed values, or seeded pseudo-random ones."""

import hashlib
import logging
import random
import string
import uuid
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)

STATIC_FORMAT_VALUES = {
    "date-time": "2024-01-15T10:30:00Z",
    "date": "2024-01-15",
    "time": "10:30:00",
    "email": "user@example.com",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": "550e8400-e29b-41d4-a716-446655440000",
    "password": "********",
    "ipv4": "192.168.1.1",
    "ipv6": "2001:0db8:85a3:0000:0000:8a2e:0370:7334",
    "hostname": "example.com",
    "byte": "c3RyaW5n",
    "binary": "<binary data>",
}

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def fit_length(text: str, min_length: int | None = None, max_length: int | None = None) -> str:
    """Repeat ``text`` up to ``min_length`` and cut it at ``max_length``."""
    if min_length and len(text) < min_length:
        text = (text * (min_length // len(text) + 1))[:min_length]
    if max_length is not None and len(text) > max_length:
        text = text[:max_length]
    return text


FIRST_NAMES = ["John", "Jane", "Alex", "Maria", "Liam", "Emma", "Noah", "Olivia", "Lucas", "Sofia"]
LAST_NAMES = ["Doe", "Smith", "Johnson", "Brown", "Garcia", "Miller", "Davis", "Wilson", "Moore", "Taylor"]
CITIES = ["Anytown", "Springfield", "Riverside", "Fairview", "Madison", "Georgetown", "Salem"]
STREETS = ["Main St", "Oak Ave", "Pine Rd", "Maple Dr", "Cedar Ln", "Elm St", "Park Blvd"]
COUNTRIES = [("USA", "US"), ("Canada", "CA"), ("Germany", "DE"), ("France", "FR"), ("Japan", "JP"), ("Brazil", "BR")]
COMPANIES = ["Acme Inc.", "Globex Corp.", "Initech", "Umbrella LLC", "Stark Industries", "Wayne Enterprises"]
JOB_TITLES = ["Software Engineer", "Product Manager", "Designer", "Data Analyst", "Sales Manager", "Accountant"]
DOMAINS = ["example.com", "example.org", "example.net"]
LOCALES = ["en_US", "en_GB", "de_DE", "fr_FR", "ja_JP", "es_ES"]
LANGUAGES = ["en", "de", "fr", "ja", "es", "pt"]
CURRENCIES = ["USD", "EUR", "GBP", "JPY", "CAD", "AUD"]
TIMEZONES = ["America/New_York", "Europe/London", "Europe/Berlin", "Asia/Tokyo", "Australia/Sydney"]
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64)",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_0)",
    "Mozilla/5.0 (X11; Linux x86_64)",
]
WORDS = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua enim ad minim veniam quis nostrud"
).split()


def start_of_today() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


class StaticValueProvider:
    """Deterministic values chosen from the format, then the type."""

    def by_format(self, fmt: str | None):
        return STATIC_FORMAT_VALUES.get(fmt or "")

    def by_type(self, type_name: str, schema: dict | None = None):
        schema = schema or {}
        if type_name in ("integer", "number"):
            minimum = schema.get("minimum")
            maximum = schema.get("maximum")
            if minimum is not None and maximum is not None:
                middle = (minimum + maximum) / 2
                return int(middle) if type_name == "integer" else middle
            if minimum is not None:
                return int(minimum) if type_name == "integer" else minimum
            return 1 if type_name == "integer" else 1.0
        if type_name == "boolean":
            return True
        if type_name == "array":
            return []
        if type_name == "object":
            return {}
        return fit_length("string", schema.get("minLength"), schema.get("maxLength"))


class RandomValueProvider:
    """Pseudo-random values from a private ``random.Random``; equal seeds give equal output."""

    def __init__(self, seed: int | None = None, reference_time: datetime | None = None):
        self.rng = random.Random(seed)
        self.reference_time = reference_time or start_of_today()

    def reseed(self, seed: int | None) -> None:
        self.rng.seed(seed)

    def call(self, generator: str, args: list):
        method = getattr(self, generator, None)
        if method is None:
            logger.warning("Unknown example generator %r, using a word", generator)
            return self.word()
        return method(*args)

    # -- by format / type ---------------------------------------------------

    def by_format(self, fmt: str | None):
        if fmt == "date-time":
            return self.date_time()
        if fmt == "date":
            return self.date()
        if fmt == "time":
            return self.time()
        if fmt == "email":
            return self.email()
        if fmt in ("uri", "url"):
            return self.url()
        if fmt == "uuid":
            return self.uuid()
        if fmt == "ipv4":
            return self.ipv4()
        if fmt == "hostname":
            return self.rng.choice(DOMAINS)
        return STATIC_FORMAT_VALUES.get(fmt or "")

    def by_type(self, type_name: str, schema: dict | None = None):
        schema = schema or {}
        if type_name == "integer":
            return self.number_between(int(schema.get("minimum", 1)), int(schema.get("maximum", 1000000)))
        if type_name == "number":
            return self.random_float(2, schema.get("minimum", 0), schema.get("maximum", 1000000))
        if type_name == "boolean":
            return self.boolean()
        if type_name == "array":
            return []
        if type_name == "object":
            return {}
        if type_name != "string":
            logger.warning("Unknown schema type %r, generating a string", type_name)
        return self.text_for_length(schema.get("maxLength", 255), schema.get("minLength", 0))

    def text_for_length(self, max_length: int, min_length: int = 0) -> str:
        min_length = min(min_length, max_length)
        if max_length <= 10:
            length = self.rng.randint(max(1, min_length), max(1, max_length))
            return "".join(self.rng.choice(string.ascii_lowercase) for _ in range(length))
        if max_length > 1000:
            text = self.paragraphs(3)
        elif max_length > 100:
            text = self.paragraph(3)
        else:
            text = self.sentence(6)
        while len(text) < min_length:
            text = f"{text} {self.sentence(6)}"
        return text[:max_length]

    # -- generators named by field patterns ---------------------------------

    def number_between(self, minimum=0, maximum=100) -> int:
        if minimum > maximum:
            minimum, maximum = maximum, minimum
        return self.rng.randint(int(minimum), int(maximum))

    def random_float(self, decimals=2, minimum=0, maximum=1000) -> float:
        return round(self.rng.uniform(minimum, maximum), decimals)

    def boolean(self) -> bool:
        return self.rng.random() < 0.5

    def random_element(self, values: list):
        return self.rng.choice(values)

    def date_time_between(self, start_days=-365, end_days=0) -> str:
        start = self.reference_time + timedelta(days=start_days)
        span = (end_days - start_days) * 86400
        moment = start + timedelta(seconds=self.rng.randint(0, max(span, 0)))
        return moment.strftime(DATETIME_FORMAT)

    def date_time(self) -> str:
        return self.date_time_between(-365, 0)

    def date(self, start_days=-365, end_days=0) -> str:
        return self.date_time_between(start_days, end_days)[:10]

    def time(self) -> str:
        return f"{self.rng.randint(0, 23):02d}:{self.rng.randint(0, 59):02d}:{self.rng.randint(0, 59):02d}"

    def uuid(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def sha256(self) -> str:
        return hashlib.sha256(self.rng.getrandbits(256).to_bytes(32, "big")).hexdigest()

    def first_name(self) -> str:
        return self.rng.choice(FIRST_NAMES)

    def last_name(self) -> str:
        return self.rng.choice(LAST_NAMES)

    def name(self) -> str:
        return f"{self.first_name()} {self.last_name()}"

    def user_name(self) -> str:
        return f"{self.first_name().lower()}{self.rng.randint(1, 99)}"

    def email(self) -> str:
        return f"{self.first_name().lower()}.{self.last_name().lower()}@{self.rng.choice(DOMAINS)}"

    def phone_number(self) -> str:
        return f"+1-555-{self.rng.randint(100, 999)}-{self.rng.randint(1000, 9999)}"

    def street_address(self) -> str:
        return f"{self.rng.randint(1, 9999)} {self.rng.choice(STREETS)}"

    def city(self) -> str:
        return self.rng.choice(CITIES)

    def country(self) -> str:
        return self.rng.choice(COUNTRIES)[0]

    def country_code(self) -> str:
        return self.rng.choice(COUNTRIES)[1]

    def postcode(self) -> str:
        return f"{self.rng.randint(10000, 99999)}"

    def address(self) -> str:
        return f"{self.street_address()}, {self.city()}, {self.country()}"

    def latitude(self) -> float:
        return round(self.rng.uniform(-90, 90), 6)

    def longitude(self) -> float:
        return round(self.rng.uniform(-180, 180), 6)

    def company(self) -> str:
        return self.rng.choice(COMPANIES)

    def job_title(self) -> str:
        return self.rng.choice(JOB_TITLES)

    def word(self) -> str:
        return self.rng.choice(WORDS)

    def sentence(self, words=6) -> str:
        text = " ".join(self.rng.choice(WORDS) for _ in range(max(1, words)))
        return text[0].upper() + text[1:] + "."

    def paragraph(self, sentences=3) -> str:
        return " ".join(self.sentence(self.rng.randint(4, 10)) for _ in range(max(1, sentences)))

    def paragraphs(self, count=3) -> str:
        return "\n\n".join(self.paragraph() for _ in range(max(1, count)))

    def slug(self) -> str:
        return "-".join(self.rng.choice(WORDS) for _ in range(3))

    def url(self) -> str:
        return f"https://{self.rng.choice(DOMAINS)}/{self.slug()}"

    def image_url(self, width=640, height=480) -> str:
        return f"https://via.placeholder.com/{width}x{height}.png?id={self.rng.randint(1, 9999)}"

    def file_path(self) -> str:
        return f"/path/to/{self.word()}.pdf"

    def locale(self) -> str:
        return self.rng.choice(LOCALES)

    def language_code(self) -> str:
        return self.rng.choice(LANGUAGES)

    def currency_code(self) -> str:
        return self.rng.choice(CURRENCIES)

    def timezone(self) -> str:
        return self.rng.choice(TIMEZONES)

    def ipv4(self) -> str:
        return ".".join(str(self.rng.randint(1, 254)) for _ in range(4))

    def user_agent(self) -> str:
        return self.rng.choice(USER_AGENTS)

    def hex_color(self) -> str:
        return f"#{self.rng.randint(0, 0xFFFFFF):06X}"


class AlwaysInclude:
    def include(self, field_name: str) -> bool:
        return True


class RandomInclusion:
    """Includes an optional field with the given probability."""

    def __init__(self, rng: random.Random, probability: float = 0.7):
        self.rng = rng
        self.probability = probability

    def include(self, field_name: str) -> bool:
        return self.rng.random() < self.probability
