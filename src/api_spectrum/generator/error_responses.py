"""Standard error responses (401, 403, 404, 422, 500)."""

from api_spectrum.generator.messages import ValidationMessageGenerator
from api_spectrum.models import OpenApiResponse

JSON = "application/json"

# status code -> (description, example message)
STANDARD_ERRORS = {
    "401": ("Unauthorized", "Unauthenticated."),
    "403": ("Forbidden", "This action is unauthorized."),
    "404": ("Not Found", "Resource not found."),
    "500": ("Internal Server Error", "Server Error"),
}

NOT_FOUND_METHODS = ("GET", "PUT", "PATCH", "DELETE")


def _message_response(status_code: str) -> OpenApiResponse:
    description, message = STANDARD_ERRORS[status_code]
    return OpenApiResponse(
        status_code=status_code,
        description=description,
        content={
            JSON: {
                "schema": {
                    "type": "object",
                    "properties": {"message": {"type": "string", "example": message}},
                }
            }
        },
    )


class ErrorResponseGenerator:
    def __init__(self, messages: ValidationMessageGenerator | None = None):
        self.messages = messages or ValidationMessageGenerator()

    def unauthorized(self) -> OpenApiResponse:
        return _message_response("401")

    def forbidden(self) -> OpenApiResponse:
        return _message_response("403")

    def not_found(self) -> OpenApiResponse:
        return _message_response("404")

    def server_error(self) -> OpenApiResponse:
        return _message_response("500")

    def validation_error(self, rules: dict, custom_messages: dict[str, str] | None = None) -> OpenApiResponse:
        """422 with one ``errors`` entry per validated field."""
        properties = {}
        examples = {}
        for field, raw in rules.items():
            if field.startswith("_"):
                continue
            properties[field] = {
                "type": "array",
                "items": {"type": "string"},
                "description": f"Validation errors for the {field} field",
            }
            examples[field] = [self.messages.generate_sample_message(field, raw, custom_messages)]

        return OpenApiResponse(
            status_code="422",
            description="Validation Error",
            content={
                JSON: {
                    "schema": {
                        "type": "object",
                        "properties": {
                            "message": {"type": "string", "example": "The given data was invalid."},
                            "errors": {"type": "object", "properties": properties, "example": examples},
                        },
                    }
                }
            },
        )

    def generate_error_responses(self, rules: dict | None = None, custom_messages: dict[str, str] | None = None) -> dict[str, OpenApiResponse]:
        """The whole catalog; 422 only when there are rules."""
        responses = {
            "401": self.unauthorized(),
            "403": self.forbidden(),
            "404": self.not_found(),
            "500": self.server_error(),
        }
        if rules:
            responses["422"] = self.validation_error(rules, custom_messages)
        return responses

    def get_default_error_responses(self, method: str, requires_auth: bool = False, has_validation: bool = False) -> dict[str, OpenApiResponse]:
        """Errors that apply to an operation.

        422 is not part of this set; callers holding the rules add it.
        """
        responses = {}
        if requires_auth:
            responses["401"] = self.unauthorized()
            responses["403"] = self.forbidden()
        if method.upper() in NOT_FOUND_METHODS:
            responses["404"] = self.not_found()
        responses["500"] = self.server_error()
        return responses
