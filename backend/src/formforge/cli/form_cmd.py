"""Form CLI commands: validate definitions and check submissions."""

from dataclasses import replace
import json
import mimetypes
from pathlib import Path
from typing import Any

import click
import yaml

from formforge.config import BoundPolicy, EngineConfig
from formforge.core.field_types import FieldType
from formforge.metadata.loader import FormDefinition, FormLoader, read_document
from formforge.metadata.validator import (
    ValidationIssue,
    validate_form_file,
    validate_forms_dir,
)
from formforge.validation import UploadedFile, ValidationEngine

_UPLOAD_TYPES = (
    FieldType.FILE_UPLOAD,
    FieldType.IMAGE_UPLOAD,
    FieldType.VIDEO_UPLOAD,
    FieldType.DOCUMENT_UPLOAD,
)


def _load_config() -> EngineConfig:
    """Config from the environment; forms default to <repo root>/forms."""
    cwd = Path.cwd()
    repo_root = cwd.parent if cwd.name == "backend" else cwd
    return EngineConfig.from_env(repo_root)


def _load_upload(value: Any, base_dir: Path) -> Any:
    """Turn a file path in a values document into an UploadedFile."""
    if not isinstance(value, str) or not value:
        return value
    path = Path(value)
    if not path.is_absolute():
        path = base_dir / path
    if not path.is_file():
        return value
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return UploadedFile.from_bytes(path.name, content_type, path.read_bytes())


def _read_values(values_path: Path, form: FormDefinition) -> dict[int, Any]:
    """Read a field id -> value map; upload fields may hold file paths."""
    try:
        raw = read_document(values_path)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise click.ClickException(f"Could not parse {values_path}: {exc}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise click.ClickException(f"{values_path} must map field ids to values")

    values: dict[int, Any] = {}
    for key, value in raw.items():
        try:
            field_id = int(key)
        except (TypeError, ValueError):
            raise click.ClickException(f"'{key}' in {values_path} is not a field id")
        field = form.get_field(field_id)
        if field is not None and FieldType.parse(field.field_type) in _UPLOAD_TYPES:
            value = _load_upload(value, values_path.parent)
        values[field_id] = value
    return values


@click.group()
def form():
    """Form definition commands."""
    pass


@form.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Validate a single form file instead of the whole forms directory.",
)
def validate(strict: bool, target_path: Path | None):
    """Validate form definition files against JSON Schemas."""
    config = _load_config()
    forms_path = config.forms_path

    if target_path is None and not forms_path.exists():
        click.echo(f"Error: Forms directory not found at {forms_path}", err=True)
        raise SystemExit(1)

    # JSON Schema pass
    if target_path is None:
        issues = validate_forms_dir(forms_path, strict=strict)
    else:
        issues = validate_form_file(target_path)
        if strict:
            issues = [replace(issue, severity="error") for issue in issues]
    _report_issues(issues)

    # Loader pass: duplicate ids, dangling same/different targets
    loader = FormLoader(forms_path)
    try:
        if target_path is None:
            loader.load_all()
            definitions = [loader.forms[name] for name in sorted(loader.list_forms())]
        else:
            definitions = [loader.load_file(target_path)]
    except ValueError as exc:
        click.echo(click.style(f"\nSemantic validation failed: {exc}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"\nLoaded {len(definitions)} form(s):")
    for definition in definitions:
        click.echo(f"  ✓ {definition.name} ({len(definition.fields)} fields)")
    click.echo(click.style("\nAll forms are valid.", fg="green", bold=True))


def _report_issues(issues: list[ValidationIssue]) -> None:
    """Print issues; exit 1 if any of them is an error."""
    by_severity: dict[str, int] = {"error": 0, "warning": 0}
    for issue in issues:
        by_severity[issue.severity] = by_severity.get(issue.severity, 0) + 1
        click.echo(click.style(str(issue), fg="red" if issue.severity == "error" else "yellow"))

    n_errors, n_warnings = by_severity["error"], by_severity["warning"]
    if n_errors:
        summary = f"\n{n_errors} schema error(s) found"
        if n_warnings:
            summary += f", {n_warnings} warning(s)"
        click.echo(click.style(summary, fg="red", bold=True))
        raise SystemExit(1)
    if n_warnings:
        click.echo(click.style(f"{n_warnings} warning(s) found.", fg="yellow"))


@form.command()
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("values_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--policy",
    type=click.Choice([p.value for p in BoundPolicy]),
    default=None,
    help="How 'between' combines with min/max (default: FORMFORGE_BOUND_POLICY).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
def check(form_file: Path, values_file: Path, policy: str | None, as_json: bool):
    """Validate a submission (VALUES_FILE) against a form (FORM_FILE)."""
    config = _load_config()
    if policy is not None:
        config = replace(config, bound_policy=BoundPolicy(policy))

    try:
        definition = FormLoader(form_file.parent).load_file(form_file)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    values = _read_values(values_file, definition)
    result = ValidationEngine(config=config).validate_form(definition.fields, values)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for field in definition.fields:
            error = result.errors.get(field.field_id)
            if error:
                click.echo(click.style(f"  ✗ [{field.field_id}] {field.label}: {error}", fg="red"))
            else:
                click.echo(f"  ✓ [{field.field_id}] {field.label}")

    if not result.valid:
        if not as_json:
            click.echo(
                click.style(f"\n{len(result.errors)} field(s) failed validation", fg="red", bold=True)
            )
        raise SystemExit(1)

    if not as_json:
        click.echo(click.style("\nSubmission is valid.", fg="green", bold=True))
