"""Validation rule parsing and per-field normalization.

A rule list such as ``"required|integer|between:1,10"`` becomes one
FieldDescriptor. Nested paths are folded by ``normalizer.tree``.
"""

import logging
import re
from typing import NamedTuple

from api_spectrum.models import EnumInfo, FieldDescriptor, FieldType, FileConstraints
from api_spectrum.support.text import class_basename

logger = logging.getLogger(__name__)

INTEGER_RULES = {"integer", "int", "digits", "digits_between"}
NUMBER_RULES = {"numeric", "decimal"}
BOOLEAN_RULES = {"boolean", "bool", "accepted", "declined"}
FILE_RULES = {"file", "image", "mimes", "mimetypes", "dimensions"}

FORMAT_RULES = {
    "email": "email",
    "url": "uri",
    "active_url": "uri",
    "uuid": "uuid",
    "ip": "ipv4",
    "ipv4": "ipv4",
    "ipv6": "ipv6",
    "mac_address": "mac",
    "date": "date",
    "datetime": "date-time",
    "date_format": "date-time",
    "password": "password",
    "current_password": "password",
}
DATE_COMPARISON_RULES = {"after", "before", "after_or_equal", "before_or_equal", "date_equals"}

# Rules that keep an optional field from being null.
NON_NULLABLE_RULES = {"filled", "present", "accepted", "declined"}

IMAGE_MIMES = ["jpeg", "jpg", "png", "gif", "bmp", "svg", "webp"]

# Rules that carry no schema information.
PASSIVE_RULES = {
    "bail", "sometimes", "confirmed", "different", "same", "unique", "exists",
    "distinct", "prohibited", "prohibited_if", "prohibited_unless", "missing",
    "not_in", "not_regex", "string", "array", "list", "json", "alpha", "alpha_dash",
    "alpha_num", "ascii", "lowercase", "uppercase", "timezone", "nullable",
    "required", "exclude", "present", "filled", "required_array_keys", "enum", "in",
    "regex", "min", "max", "size", "between", "gt", "gte", "lt", "lte", "multiple_of",
    "starts_with", "ends_with", "doesnt_start_with", "doesnt_end_with", "ulid",
}


class RuleToken(NamedTuple):
    """A single parsed rule: ``max:255`` -> ``RuleToken("max", ["255"])``.

    ``payload`` carries non-string rule values such as the value list of an
    ``{"in": [...]}`` entry or an enum class name.
    """

    name: str
    params: list
    payload: object = None


def parse_token(raw: str) -> RuleToken:
    name, _, rest = raw.strip().partition(":")
    name = name.strip().lower()
    if name in ("regex", "not_regex"):
        return RuleToken(name, [rest] if rest else [])
    return RuleToken(name, [p.strip() for p in rest.split(",")] if rest else [])


def parse_rules(raw) -> list[RuleToken]:
    """Parse a pipe-delimited rule string or a list of rule items."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [parse_token(part) for part in raw.split("|") if part.strip()]

    tokens = []
    for item in raw:
        if isinstance(item, str):
            if item.strip():
                tokens.append(parse_token(item))
        elif isinstance(item, dict):
            # Rule objects: {"in": ["a", "b"]}, {"enum": "App\\Enums\\Status"}
            for name, value in item.items():
                if isinstance(value, list):
                    tokens.append(RuleToken(str(name).lower(), [str(v) for v in value], value))
                else:
                    tokens.append(RuleToken(str(name).lower(), [str(value)] if value is not None else [], value))
        else:
            logger.debug("Ignoring rule item of type %s", type(item).__name__)
    return tokens


def rule_names(tokens: list[RuleToken]) -> set[str]:
    return {t.name for t in tokens}


def is_required(tokens: list[RuleToken]) -> bool:
    """Only a plain ``required`` rule makes a field unconditionally required."""
    return "required" in rule_names(tokens)


def is_conditionally_required(tokens: list[RuleToken]) -> bool:
    return any(t.name.startswith("required_") and t.name != "required_array_keys" for t in tokens)


def is_excluded(tokens: list[RuleToken]) -> bool:
    return any(t.name == "exclude" and not t.params for t in tokens)


def infer_type(tokens: list[RuleToken], enum_info: EnumInfo | None = None) -> FieldType:
    """Pick the most specific type among the rules; string when nothing says otherwise."""
    names = rule_names(tokens)
    if names & FILE_RULES:
        return FieldType.FILE
    if enum_info is not None:
        return FieldType(enum_info.get_openapi_type())
    if names & INTEGER_RULES:
        return FieldType.INTEGER
    if names & NUMBER_RULES:
        return FieldType.NUMBER
    if names & BOOLEAN_RULES:
        return FieldType.BOOLEAN
    if names & {"array", "list"}:
        return FieldType.ARRAY
    return FieldType.STRING


def infer_format(tokens: list[RuleToken]) -> str | None:
    names = rule_names(tokens)
    if "date_format" in names or "datetime" in names:
        return "date-time"
    for token in tokens:
        if token.name in FORMAT_RULES:
            return FORMAT_RULES[token.name]
    if names & DATE_COMPARISON_RULES:
        return "date-time"
    return None


def strip_regex_delimiters(pattern: str) -> str:
    """``/^[a-z]+$/i`` -> ``^[a-z]+$``."""
    if len(pattern) < 2:
        return pattern
    delimiter = pattern[0]
    if delimiter.isalnum() or delimiter in "\\ ":
        return pattern
    closing = {"(": ")", "{": "}", "[": "]", "<": ">"}.get(delimiter, delimiter)
    end = pattern.rfind(closing)
    if end <= 0:
        return pattern
    if not re.fullmatch(r"[a-zA-Z]*", pattern[end + 1:]):
        return pattern
    return pattern[1:end]


def to_number(value: str):
    """Numeric rule parameter, or None when it names another field."""
    try:
        return float(value) if "." in value else int(value)
    except (TypeError, ValueError):
        return None


def _bound_keys(field_type: FieldType) -> tuple[str, str] | None:
    if field_type in (FieldType.INTEGER, FieldType.NUMBER):
        return "minimum", "maximum"
    if field_type == FieldType.STRING:
        return "minLength", "maxLength"
    if field_type == FieldType.ARRAY:
        return "minItems", "maxItems"
    return None


def extract_constraints(tokens: list[RuleToken], field_type: FieldType) -> dict:
    """Size and pattern constraints keyed by their OpenAPI names."""
    constraints: dict = {}
    keys = _bound_keys(field_type)
    numeric = field_type in (FieldType.INTEGER, FieldType.NUMBER)

    for token in tokens:
        values = [to_number(p) for p in token.params]
        first = values[0] if values else None

        if token.name == "regex" and token.params:
            constraints["pattern"] = strip_regex_delimiters(token.params[0])
        elif keys and token.name == "min" and first is not None:
            constraints[keys[0]] = first
        elif keys and token.name == "max" and first is not None:
            constraints[keys[1]] = first
        elif keys and token.name == "size" and first is not None:
            constraints[keys[0]] = first
            constraints[keys[1]] = first
        elif keys and token.name in ("between", "digits_between") and len(values) == 2:
            if token.name == "digits_between":
                low, high = values
                if low is not None and high is not None:
                    constraints["minimum"] = 10 ** (int(low) - 1) if int(low) > 1 else 0
                    constraints["maximum"] = 10 ** int(high) - 1
            elif None not in values:
                constraints[keys[0]], constraints[keys[1]] = values
        elif token.name == "digits" and first is not None:
            digits = int(first)
            constraints["minimum"] = 10 ** (digits - 1) if digits > 1 else 0
            constraints["maximum"] = 10 ** digits - 1
        elif numeric and token.name == "gte" and first is not None:
            constraints["minimum"] = first
        elif numeric and token.name == "lte" and first is not None:
            constraints["maximum"] = first
        elif numeric and token.name == "gt" and first is not None:
            constraints["minimum"] = first
            constraints["exclusiveMinimum"] = True
        elif numeric and token.name == "lt" and first is not None:
            constraints["maximum"] = first
            constraints["exclusiveMaximum"] = True
        elif numeric and token.name == "multiple_of" and first is not None:
            constraints["multipleOf"] = first
        elif field_type == FieldType.ARRAY and token.name == "distinct":
            constraints["uniqueItems"] = True
    return constraints


def _kilobytes(value) -> int | None:
    number = to_number(value) if isinstance(value, str) else value
    if number is None:
        return None
    return int(number * 1024)


def parse_dimensions(params: list[str]) -> dict:
    """``["min_width=100", "ratio=3/2"]`` -> ``{"min_width": 100, "ratio": "3/2"}``."""
    dimensions = {}
    for param in params:
        key, _, value = param.partition("=")
        if not value:
            continue
        number = to_number(value)
        dimensions[key.strip()] = number if number is not None else value.strip()
    return dimensions


def extract_file_constraints(tokens: list[RuleToken]) -> FileConstraints:
    constraints = FileConstraints()
    for token in tokens:
        if token.name == "image" and not constraints.mimes:
            constraints.mimes = list(IMAGE_MIMES)
        elif token.name == "mimes":
            constraints.mimes = list(token.params)
        elif token.name == "mimetypes":
            constraints.mimes = [p.split("/")[-1] for p in token.params]
        elif token.name == "max" and token.params:
            constraints.max_size = _kilobytes(token.params[0])
        elif token.name == "min" and token.params:
            constraints.min_size = _kilobytes(token.params[0])
        elif token.name == "size" and token.params:
            constraints.min_size = constraints.max_size = _kilobytes(token.params[0])
        elif token.name == "between" and len(token.params) == 2:
            constraints.min_size = _kilobytes(token.params[0])
            constraints.max_size = _kilobytes(token.params[1])
        elif token.name == "dimensions":
            constraints.dimensions = parse_dimensions(token.params)
    return constraints


def resolve_enum(tokens: list[RuleToken], enums: dict[str, EnumInfo]) -> EnumInfo | None:
    """Find the EnumInfo behind an ``enum:<Class>`` rule."""
    for token in tokens:
        if token.name != "enum" or not token.params:
            continue
        if isinstance(token.payload, EnumInfo):
            return token.payload
        class_name = token.params[0]
        info = enums.get(class_name) or enums.get(class_basename(class_name))
        if info is None:
            for name, candidate in enums.items():
                if class_basename(name) == class_basename(class_name):
                    info = candidate
                    break
        if info is None:
            logger.warning("Enum class %s is not known, ignoring enum rule", class_name)
        return info
    return None


def _cast_enum_values(values: list, field_type: FieldType) -> list:
    if field_type not in (FieldType.INTEGER, FieldType.NUMBER):
        return values
    cast = []
    for value in values:
        number = to_number(value) if isinstance(value, str) else value
        cast.append(value if number is None else number)
    return cast


def descriptor_from_rules(
    name: str,
    raw_rules,
    enums: dict[str, EnumInfo] | None = None,
    label: str | None = None,
) -> FieldDescriptor | None:
    """Normalize one field's rules. Returns None for excluded fields."""
    tokens = parse_rules(raw_rules)
    if is_excluded(tokens):
        return None

    for token in tokens:
        if token.name not in PASSIVE_RULES and not _is_known(token.name):
            logger.debug("Ignoring unrecognized rule '%s' on field %s", token.name, name)

    names = rule_names(tokens)
    enum_info = resolve_enum(tokens, enums or {})
    field_type = infer_type(tokens, enum_info)
    required = is_required(tokens)

    if "nullable" in names:
        nullable = True
    else:
        nullable = not required and not is_conditionally_required(tokens) and not (names & NON_NULLABLE_RULES)

    descriptor = FieldDescriptor(
        name=name,
        type=field_type,
        format=infer_format(tokens) if field_type != FieldType.FILE else None,
        required=required,
        nullable=nullable,
        description=label,
    )

    if field_type == FieldType.FILE:
        descriptor.file_constraints = extract_file_constraints(tokens)
    else:
        descriptor.constraints = extract_constraints(tokens, field_type)

    if enum_info is not None:
        descriptor.enum = list(enum_info.values)
    else:
        for token in tokens:
            if token.name == "in":
                values = token.payload if isinstance(token.payload, list) else token.params
                descriptor.enum = _cast_enum_values([v.strip('"') if isinstance(v, str) else v for v in values], field_type)
    return descriptor


def _is_known(name: str) -> bool:
    return (
        name in INTEGER_RULES
        or name in NUMBER_RULES
        or name in BOOLEAN_RULES
        or name in FILE_RULES
        or name in FORMAT_RULES
        or name in DATE_COMPARISON_RULES
        or name.startswith("required_")
    )
