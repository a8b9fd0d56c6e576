"""Operation summaries, operationIds and OpenAPI path strings."""

import re

from api_spectrum.analysis.base import RouteDescriptor
from api_spectrum.generator.tags import is_ignored_prefix
from api_spectrum.support.text import camel, plural, singular, singular_studly

_PARAM_SEGMENT = re.compile(r"^\{[^}]+\??\}$")
_PARAM = re.compile(r"\{[^}]+\??\}")
_OPTIONAL_PARAM = re.compile(r"\{([^}]+)\?\}")

LIST_METHODS = ("index", "list", "search", "browse")


def meaningful_segments(uri: str) -> list[str]:
    """URI segments without parameters, ``api`` or version prefixes."""
    segments = []
    for segment in uri.strip("/").split("/"):
        if not segment or _PARAM_SEGMENT.match(segment):
            continue
        cleaned = _PARAM.sub("", segment)
        if cleaned and not is_ignored_prefix(cleaned):
            segments.append(cleaned)
    return segments


def convert_to_openapi_path(uri: str) -> str:
    """``api/users/{user?}`` -> ``/api/users/{user}``."""
    return "/" + _OPTIONAL_PARAM.sub(r"{\1}", uri.strip("/"))


class OperationMetadataGenerator:
    def generate_summary(self, route: RouteDescriptor, method: str) -> str:
        method = method.lower()
        resource = self.extract_resource_name(route.uri, method)
        if method == "get":
            if self._has_trailing_parameter(route.uri):
                return f"Get {resource} by ID"
            if self._is_singular_get(route.uri, (route.controller_method or "").lower()):
                return f"Get {resource}"
            return f"List all {resource}"
        if method == "post":
            return f"Create a new {resource}"
        if method in ("put", "patch"):
            return f"Update {resource}"
        if method == "delete":
            return f"Delete {resource}"
        return f"{method.capitalize()} {resource}"

    def generate_operation_id(self, route: RouteDescriptor, method: str) -> str:
        if route.route_name:
            return camel(route.route_name.replace(".", "_"))
        uri = route.uri.replace("/", "_")
        for char in "{}?":
            uri = uri.replace(char, "")
        return camel(f"{method.lower()}_{uri}")

    def extract_resource_name(self, uri: str, method: str | None = None) -> str:
        """Singular resource named by the last meaningful segment, ``Resource`` if none."""
        segments = meaningful_segments(uri)
        if not segments:
            return "Resource"
        resource = singular_studly(segments[-1])
        # POST /orders/{order}/line-items creates an OrderLineItem.
        if method == "post" and len(segments) >= 2 and ("-" in segments[-1] or "_" in segments[-1]):
            resource = singular_studly(segments[-2]) + resource
        return resource

    @staticmethod
    def _has_trailing_parameter(uri: str) -> bool:
        segments = uri.strip("/").split("/")
        return bool(segments) and bool(_PARAM_SEGMENT.match(segments[-1]))

    @staticmethod
    def _is_singular_get(uri: str, controller_method: str) -> bool:
        if controller_method in LIST_METHODS:
            return False
        segments = meaningful_segments(uri)
        if not segments:
            return False
        last = segments[-1].lower()
        return singular(last).lower() == last and plural(last).lower() != last
