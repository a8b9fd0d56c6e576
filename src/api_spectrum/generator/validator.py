"""Structural checks for a generated OpenAPI document."""

from api_spectrum.generator.converter import HTTP_METHODS


def _operations(document: dict):
    for path, path_item in (document.get("paths") or {}).items():
        for method, operation in path_item.items():
            if method in HTTP_METHODS and isinstance(operation, dict):
                yield f"{method.upper()} {path}", operation


def _collect_refs(node, found: list[str]) -> None:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            found.append(ref)
        for value in node.values():
            _collect_refs(value, found)
    elif isinstance(node, list):
        for value in node:
            _collect_refs(value, found)


def validate_references(document: dict) -> dict[str, str]:
    """Find ``$ref``s pointing at components that do not exist.

    Returns dict of {ref: error_message}.
    """
    components = document.get("components") or {}
    found: list[str] = []
    _collect_refs(document, found)

    errors = {}
    for ref in found:
        parts = ref.removeprefix("#/").split("/")
        if len(parts) != 3 or parts[0] != "components":
            errors[ref] = "Unsupported reference"
            continue
        section, name = parts[1], parts[2]
        if name not in (components.get(section) or {}):
            errors[ref] = f"Component '{name}' is missing from components.{section}"
    return errors


def validate_operation_ids(document: dict) -> dict[str, str]:
    """Every operationId must be unique.

    Returns dict of {operation: error_message}.
    """
    seen: dict[str, str] = {}
    errors = {}
    for label, operation in _operations(document):
        operation_id = operation.get("operationId")
        if not operation_id:
            errors[label] = "Missing operationId"
        elif operation_id in seen:
            errors[label] = f"Duplicate operationId '{operation_id}' (also used by {seen[operation_id]})"
        else:
            seen[operation_id] = label
    return errors


def validate_responses(document: dict) -> dict[str, str]:
    """Each operation declares exactly one 2xx response.

    Returns dict of {"<operation> responses": error_message}.
    """
    errors = {}
    for label, operation in _operations(document):
        success = [code for code in (operation.get("responses") or {}) if str(code).startswith("2")]
        if len(success) != 1:
            errors[f"{label} responses"] = f"Expected exactly one 2xx response, found {len(success)}"
    return errors


def validate_document(document: dict) -> dict[str, str]:
    """Run all checks. Returns merged error dict."""
    errors = {}
    if not isinstance(document.get("openapi"), str):
        errors["openapi"] = "Missing OpenAPI version"
    if not isinstance(document.get("info"), dict):
        errors["info"] = "Missing info object"
    errors.update(validate_references(document))
    errors.update(validate_operation_ids(document))
    errors.update(validate_responses(document))
    return errors
