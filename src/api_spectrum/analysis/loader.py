"""Loads a pre-computed analysis dump (YAML or JSON) from disk."""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_spectrum.analysis.base import (
    ControllerAnalysisResult,
    ResourceFieldInfo,
    RouteDescriptor,
    StaticAnalysisSource,
    ValidationRuleSet,
)
from api_spectrum.errors import AnalysisError


def detect_format(file_path: Path) -> str:
    """Return 'json' or 'yaml' from the suffix, sniffing the content if there is none."""
    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if file_path.exists():
        text = file_path.read_text(encoding="utf-8").lstrip()
        if text.startswith(("{", "[")):
            try:
                json.loads(text)
                return "json"
            except (json.JSONDecodeError, ValueError):
                pass
    return "yaml"


def load_project(file_path: Path) -> tuple[list[RouteDescriptor], StaticAnalysisSource]:
    """Parse an analysis dump into routes plus an analysis source.

    The file holds four top-level sections: ``routes`` (list),
    ``controllers`` (keyed ``Class@method``), ``form_requests`` and
    ``resources`` (keyed by class name). Only ``routes`` is mandatory.
    """
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise AnalysisError(f"Cannot read {file_path}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise AnalysisError(f"Invalid analysis file {file_path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("routes"), list):
        raise AnalysisError(f"{file_path} must be a mapping with a 'routes' list")

    try:
        routes = [RouteDescriptor.model_validate(r) for r in data["routes"]]
        source = StaticAnalysisSource(
            controllers=_section(data, "controllers", ControllerAnalysisResult),
            form_requests=_section(data, "form_requests", ValidationRuleSet),
            resources=_section(data, "resources", ResourceFieldInfo),
        )
    except ValidationError as e:
        raise AnalysisError(f"Invalid analysis data in {file_path}: {e}") from e
    return routes, source


def _section(data: dict, key: str, model) -> dict:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise AnalysisError(f"'{key}' must be a mapping")
    return {name: model.model_validate(value or {}) for name, value in section.items()}
