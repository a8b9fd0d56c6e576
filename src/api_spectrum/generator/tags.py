"""Operation tags, tag definitions and the ``x-tagGroups`` extension."""

import fnmatch
import re

from api_spectrum.analysis.base import RouteDescriptor
from api_spectrum.config import SpectrumConfig
from api_spectrum.support.text import class_basename, singular_studly

_VERSION_SEGMENT = re.compile(r"^v\d+$", re.IGNORECASE)
_PARAM_SEGMENT = re.compile(r"^\{[^}]+\}$")
_PARAM = re.compile(r"\{[^}]+\}")


def is_ignored_prefix(segment: str) -> bool:
    return segment.lower() == "api" or bool(_VERSION_SEGMENT.match(segment))


class TagGenerator:
    """Tags come from, in order: configured URI mappings, the controller name, the URI."""

    def __init__(self, config: SpectrumConfig | None = None):
        self.config = config or SpectrumConfig()

    def generate(self, route: RouteDescriptor) -> list[str]:
        custom = self.get_custom_tag(route.uri)
        if custom is not None:
            return [custom] if isinstance(custom, str) else list(custom)

        if route.controller_class:
            tags = self.generate_from_controller(route.controller_class)
            if tags:
                return tags

        return list(dict.fromkeys(self.generate_from_uri(route.uri)))

    def get_custom_tag(self, uri: str) -> str | list[str] | None:
        mappings = self.config.tags
        if uri in mappings:
            return mappings[uri]
        for pattern, tag in mappings.items():
            if fnmatch.fnmatchcase(uri, pattern):
                return tag
        return None

    def generate_from_controller(self, controller: str) -> list[str]:
        name = class_basename(controller).replace("Controller", "")
        if not name:
            return []
        return [singular_studly(name)]

    def generate_from_uri(self, uri: str) -> list[str]:
        segments = []
        for segment in uri.strip("/").split("/"):
            if not segment or is_ignored_prefix(segment) or _PARAM_SEGMENT.match(segment):
                continue
            cleaned = _PARAM.sub("", segment)
            if cleaned:
                segments.append(cleaned)

        depth = self.config.tag_depth
        if depth == 0:
            return []
        return [singular_studly(s) for s in segments[:depth]]


class TagGroupGenerator:
    def __init__(self, config: SpectrumConfig | None = None):
        self.config = config or SpectrumConfig()

    def has_tag_groups(self) -> bool:
        return bool(self.config.tag_groups)

    def generate_tag_groups(self, used_tags: list[str]) -> list[dict]:
        """Configured groups restricted to used tags, then a catch-all group for the rest."""
        result = []
        grouped: list[str] = []
        for name, tags in self.config.tag_groups.items():
            present = [tag for tag in tags if tag in used_tags]
            if present:
                result.append({"name": name, "tags": present})
                grouped.extend(present)

        ungrouped_name = self.config.ungrouped_tags_group
        if ungrouped_name is not None:
            ungrouped = [tag for tag in used_tags if tag not in grouped]
            if ungrouped:
                result.append({"name": ungrouped_name, "tags": ungrouped})
        return result

    def generate_tag_definitions(self, used_tags: list[str]) -> list[dict]:
        definitions = []
        for tag in used_tags:
            definition = {"name": tag}
            description = self.config.tag_descriptions.get(tag)
            if description:
                definition["description"] = description
            definitions.append(definition)
        return definitions
