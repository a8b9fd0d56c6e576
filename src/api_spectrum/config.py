"""Generator configuration, loaded from a YAML file.

Only ``title``/``version`` matter for a minimal document. Malformed
auxiliary sections are replaced by their defaults with a warning instead
of failing the whole run.
"""

import logging
from datetime import datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from api_spectrum.errors import ConfigError
from api_spectrum.generator.security import AuthenticationScheme

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    url: str
    description: str | None = None


class ExampleGenerationConfig(BaseModel):
    randomized: bool = True
    seed: int | None = None
    locale: str = "en_US"
    include_all_optional: bool = False
    optional_field_probability: float = 0.7
    reference_time: datetime | None = None


class GlobalAuthConfig(BaseModel):
    enabled: bool = False
    required: bool = True
    scheme: AuthenticationScheme | None = None


class AuthenticationConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    global_auth: GlobalAuthConfig = Field(default_factory=GlobalAuthConfig, alias="global")
    custom_schemes: dict[str, AuthenticationScheme] = {}  # middleware -> scheme
    patterns: dict[str, AuthenticationScheme] = {}  # uri pattern -> scheme


SECTIONS = {"example_generation": ExampleGenerationConfig, "authentication": AuthenticationConfig}


class SpectrumConfig(BaseModel):
    title: str = "API Documentation"
    version: str = "1.0.0"
    description: str | None = None
    app_url: str = "http://localhost"
    servers: list[ServerConfig] = []
    openapi_version: str = "3.0.0"
    tags: dict[str, str | list[str]] = {}  # uri pattern -> tag(s)
    tag_depth: int = 1
    tag_descriptions: dict[str, str] = {}
    tag_groups: dict[str, list[str]] = {}
    ungrouped_tags_group: str | None = "Other"
    error_responses: bool = True
    example_generation: ExampleGenerationConfig = Field(default_factory=ExampleGenerationConfig)
    authentication: AuthenticationConfig = Field(default_factory=AuthenticationConfig)

    @property
    def is_openapi_31(self) -> bool:
        return self.openapi_version.startswith("3.1")

    @field_validator("tag_groups", mode="before")
    @classmethod
    def _coerce_tag_groups(cls, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("tag_groups must be a mapping, ignoring it")
            return {}
        groups = {}
        for name, tags in value.items():
            if not isinstance(tags, list):
                logger.warning("Tag group '%s' is not a list, ignoring it", name)
                continue
            groups[str(name)] = [str(t) for t in tags]
        return groups

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("tags must be a mapping, ignoring it")
            return {}
        tags = {}
        for pattern, tag in value.items():
            if isinstance(tag, str):
                tags[str(pattern)] = tag
            elif isinstance(tag, list) and all(isinstance(t, str) for t in tag):
                tags[str(pattern)] = tag
            else:
                logger.warning("Tag for '%s' must be a string or a list of strings, ignoring it", pattern)
        return tags

    @field_validator("tag_descriptions", mode="before")
    @classmethod
    def _coerce_tag_descriptions(cls, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            logger.warning("tag_descriptions must be a mapping, ignoring it")
            return {}
        descriptions = {}
        for tag, description in value.items():
            if isinstance(description, (dict, list)) or description is None:
                logger.warning("Description of tag '%s' is not text, ignoring it", tag)
                continue
            descriptions[str(tag)] = str(description)
        return descriptions

    @field_validator("tag_depth", mode="before")
    @classmethod
    def _coerce_tag_depth(cls, value):
        try:
            depth = int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid tag_depth %r, using 1", value)
            return 1
        if depth < 0:
            logger.warning("Negative tag_depth %r, using 1", value)
            return 1
        return depth

    @field_validator("servers", mode="before")
    @classmethod
    def _coerce_servers(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("servers must be a list, ignoring it")
            return []
        servers = []
        for server in value:
            if isinstance(server, str):
                servers.append({"url": server})
            elif isinstance(server, dict) and isinstance(server.get("url"), str):
                servers.append(server)
            else:
                logger.warning("Server entry %r has no url, ignoring it", server)
        return servers

    @field_validator("ungrouped_tags_group", mode="before")
    @classmethod
    def _coerce_ungrouped_tags_group(cls, value):
        if value is None or isinstance(value, str):
            return value
        logger.warning("Invalid ungrouped_tags_group %r, using 'Other'", value)
        return "Other"

    @field_validator("error_responses", mode="before")
    @classmethod
    def _coerce_error_responses(cls, value):
        if isinstance(value, bool):
            return value
        logger.warning("error_responses must be true or false, using true")
        return True

    @field_validator("example_generation", "authentication", mode="before")
    @classmethod
    def _coerce_section(cls, value, info):
        section = SECTIONS[info.field_name]
        if value is None:
            return section()
        if isinstance(value, section):
            return value
        if not isinstance(value, dict):
            logger.warning("%s must be a mapping, using defaults", info.field_name)
            return section()
        try:
            return section.model_validate(value)
        except ValidationError as e:
            logger.warning("Invalid %s section, using defaults: %s", info.field_name, e)
            return section()

    def server_list(self) -> list[dict]:
        if self.servers:
            return [s.model_dump(exclude_none=True) for s in self.servers]
        return [{"url": self.app_url.rstrip("/") + "/api", "description": "API Server"}]

    @classmethod
    def load(cls, path: Path | None) -> "SpectrumConfig":
        if path is None:
            return cls()
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
