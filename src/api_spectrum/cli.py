"""CLI entry point for api-spectrum."""

import json
import logging
from pathlib import Path

import click
import yaml

from api_spectrum.analysis.loader import detect_format, load_project
from api_spectrum.config import SpectrumConfig
from api_spectrum.errors import SpectrumError
from api_spectrum.generator.openapi import OpenApiGenerator
from api_spectrum.generator.validator import validate_document


class _Dumper(yaml.SafeDumper):
    """Writes shared example objects out in full instead of as YAML anchors."""

    def ignore_aliases(self, data):
        return True


def _dump(document: dict, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return yaml.dump(document, Dumper=_Dumper, sort_keys=False, allow_unicode=True)


def _load_document(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} is not an OpenAPI document")
    return data


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """api-spectrum: OpenAPI documents from static analysis results."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("analysis_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the OpenAPI document.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--openapi-version", default=None, help="Override the OpenAPI version (3.0.0 or 3.1.0).")
@click.option("--seed", default=None, type=int, help="Seed for reproducible examples.")
@click.option("--all-optional", is_flag=True, help="Include every optional field in examples.")
def generate(
    analysis_path: Path,
    output: Path,
    config_path: Path | None,
    fmt: str,
    openapi_version: str | None,
    seed: int | None,
    all_optional: bool,
):
    """Generate an OpenAPI document from an analysis dump."""
    try:
        config = SpectrumConfig.load(config_path)
        click.echo(f"Loading {analysis_path}...")
        routes, source = load_project(analysis_path)
    except SpectrumError as e:
        raise click.ClickException(str(e))
    click.echo(f"Found {len(routes)} routes.")

    if openapi_version:
        config.openapi_version = openapi_version
    if seed is not None:
        config.example_generation.seed = seed
    if all_optional:
        config.example_generation.include_all_optional = True

    generator = OpenApiGenerator(config, source)
    document = generator.generate(routes)
    for warning in generator.warnings:
        click.echo(f"  Warning: {warning}", err=True)

    if fmt == "auto":
        fmt = detect_format(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_dump(document, fmt), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output} ({len(document['paths'])} paths)")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def validate(doc_path: Path):
    """Check a generated document for dangling references and malformed operations."""
    errors = validate_document(_load_document(doc_path))
    if errors:
        for location, message in errors.items():
            click.echo(f"  {location}: {message}")
        raise click.ClickException(f"{len(errors)} problem(s) found in {doc_path}")
    click.echo(f"{doc_path} is valid.")
