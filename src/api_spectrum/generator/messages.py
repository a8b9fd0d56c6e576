"""Default validation error messages, used for 422 examples."""

from api_spectrum.normalizer.rules import parse_rules, rule_names
from api_spectrum.support.text import humanize

MESSAGE_TEMPLATES = {
    "required": "The :attribute field is required.",
    "required_if": "The :attribute field is required when :other is :value.",
    "required_unless": "The :attribute field is required unless :other is in :values.",
    "required_with": "The :attribute field is required when :values is present.",
    "required_without": "The :attribute field is required when :values is not present.",
    "email": "The :attribute must be a valid email address.",
    "unique": "The :attribute has already been taken.",
    "exists": "The selected :attribute is invalid.",
    "string": "The :attribute must be a string.",
    "integer": "The :attribute must be an integer.",
    "numeric": "The :attribute must be a number.",
    "boolean": "The :attribute field must be true or false.",
    "array": "The :attribute must be an array.",
    "date": "The :attribute is not a valid date.",
    "date_format": "The :attribute does not match the format :format.",
    "min": {
        "numeric": "The :attribute must be at least :min.",
        "string": "The :attribute must be at least :min characters.",
        "array": "The :attribute must have at least :min items.",
        "file": "The :attribute must be at least :min kilobytes.",
    },
    "max": {
        "numeric": "The :attribute may not be greater than :max.",
        "string": "The :attribute may not be greater than :max characters.",
        "array": "The :attribute may not have more than :max items.",
        "file": "The :attribute may not be greater than :max kilobytes.",
    },
    "between": {
        "numeric": "The :attribute must be between :min and :max.",
        "string": "The :attribute must be between :min and :max characters.",
        "array": "The :attribute must have between :min and :max items.",
        "file": "The :attribute must be between :min and :max kilobytes.",
    },
    "size": {
        "numeric": "The :attribute must be :size.",
        "string": "The :attribute must be :size characters.",
        "array": "The :attribute must contain :size items.",
        "file": "The :attribute must be :size kilobytes.",
    },
    "in": "The selected :attribute is invalid.",
    "not_in": "The selected :attribute is invalid.",
    "enum": "The selected :attribute is invalid.",
    "regex": "The :attribute format is invalid.",
    "confirmed": "The :attribute confirmation does not match.",
    "same": "The :attribute and :other must match.",
    "different": "The :attribute and :other must be different.",
    "url": "The :attribute format is invalid.",
    "uuid": "The :attribute must be a valid UUID.",
    "ip": "The :attribute must be a valid IP address.",
    "json": "The :attribute must be a valid JSON string.",
    "file": "The :attribute must be a file.",
    "image": "The :attribute must be an image.",
    "mimes": "The :attribute must be a file of type: :values.",
    "alpha": "The :attribute may only contain letters.",
    "alpha_num": "The :attribute may only contain letters and numbers.",
    "alpha_dash": "The :attribute may only contain letters, numbers, dashes and underscores.",
}


def template_field_type(names: set[str]) -> str:
    """Which size-message variant applies to a field."""
    if names & {"file", "image", "mimes", "mimetypes"}:
        return "file"
    if names & {"integer", "numeric", "decimal"}:
        return "numeric"
    if "array" in names:
        return "array"
    return "string"


def message_template(rule: str, field_type: str = "string") -> str | None:
    template = MESSAGE_TEMPLATES.get(rule)
    if isinstance(template, dict):
        return template.get(field_type) or template["string"]
    return template


class ValidationMessageGenerator:
    def generate_messages(self, rules: dict, custom_messages: dict[str, str] | None = None) -> dict[str, list[str]]:
        return {
            field: self.generate_field_messages(field, raw, custom_messages or {})
            for field, raw in rules.items()
        }

    def generate_field_messages(self, field: str, raw_rules, custom_messages: dict[str, str] | None = None) -> list[str]:
        messages: list[str] = []
        for _, message in self._token_messages(field, raw_rules, custom_messages or {}):
            if message not in messages:
                messages.append(message)
        return messages

    def generate_sample_message(self, field: str, raw_rules, custom_messages: dict[str, str] | None = None) -> str:
        """The required-family message when there is one, else the first generated message."""
        pairs = self._token_messages(field, raw_rules, custom_messages or {})
        for token, message in pairs:
            if token.name == "required" or token.name.startswith("required_"):
                return message
        if pairs:
            return pairs[0][1]
        return f"The {field} field is invalid."

    def _token_messages(self, field: str, raw_rules, custom_messages: dict[str, str]) -> list[tuple]:
        tokens = parse_rules(raw_rules)
        field_type = template_field_type(rule_names(tokens))
        attribute = humanize(field)

        pairs = []
        for token in tokens:
            custom = custom_messages.get(f"{field}.{token.name}")
            if custom:
                pairs.append((token, custom))
                continue
            template = message_template(token.name, field_type)
            if template is not None:
                pairs.append((token, self._replace_placeholders(template, attribute, token.params)))
        return pairs

    @staticmethod
    def _replace_placeholders(template: str, attribute: str, params: list[str]) -> str:
        replacements = {":attribute": attribute}
        if params:
            replacements.update({
                ":min": params[0],
                ":max": params[-1],
                ":size": params[0],
                ":value": params[1] if len(params) > 1 else params[0],
                ":other": humanize(params[0]),
                ":format": params[0],
                ":values": ", ".join(params),
            })
        # Longest placeholders first so ":value" does not eat ":values".
        for placeholder in sorted(replacements, key=len, reverse=True):
            template = template.replace(placeholder, replacements[placeholder])
        return template
