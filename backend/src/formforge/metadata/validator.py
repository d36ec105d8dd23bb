"""
metadata/validator.py: JSON Schema validation for formforge form definition files.

Validates form YAML/JSON files against JSON Schemas, then reports field types
and rule names the engine doesn't know as warnings (they still load, but are
validated permissively or ignored).

Usage:
    from formforge.metadata.validator import validate_forms_dir, validate_form_file

    issues = validate_forms_dir(Path("forms"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry
from referencing.jsonschema import DRAFT202012

from formforge.core.field_types import FieldType
from formforge.metadata.loader import FORM_FILE_SUFFIXES, read_document
from formforge.validation.types import RuleName

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------

_SCHEMAS_DIR = Path(__file__).parent / "schemas"

FORM_SCHEMA_ID = "https://formforge.dev/schemas/form.schema.json"


@dataclass
class ValidationIssue:
    """A single validation finding for a form definition file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "sections[0]/fields[2]"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_schemas() -> dict[str, dict[str, Any]]:
    """Every bundled schema keyed by file name."""
    return {
        schema_file.name: json.loads(schema_file.read_text())
        for schema_file in sorted(_SCHEMAS_DIR.glob("*.schema.json"))
    }


def _load_registry() -> Registry:
    """Registry resolving the $id of each bundled schema, for cross-file $refs."""
    return Registry().with_resources(
        (contents["$id"], DRAFT202012.create_resource(contents))
        for contents in _read_schemas().values()
    )


def _json_path(error: ValidationError) -> str:
    """Location of a jsonschema error, e.g. "sections[0]/fields[2]/label"."""
    location = ""
    for part in error.absolute_path:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f"/{part}" if location else str(part)
    return location


def _iter_fields(doc: dict[str, Any]):
    """Yield (path, field dict) for every field in a schema-valid document."""
    if "sections" in doc:
        for s_idx, section in enumerate(doc["sections"]):
            for f_idx, field_data in enumerate(section.get("fields", [])):
                yield f"sections[{s_idx}]/fields[{f_idx}]", field_data
    else:
        for f_idx, field_data in enumerate(doc.get("fields", [])):
            yield f"fields[{f_idx}]", field_data


def _vocabulary_issues(path: Path, doc: dict[str, Any]) -> list[ValidationIssue]:
    """Warnings for field types and rule names outside the built-in vocabulary."""
    known_rules = {r.value for r in RuleName}
    issues: list[ValidationIssue] = []
    for loc, field_data in _iter_fields(doc):
        field_type = field_data.get("field_type")
        if FieldType.parse(field_type) is None:
            issues.append(
                ValidationIssue(
                    file=path,
                    message=f"Unknown field type '{field_type}'; only 'required' will be enforced",
                    path=f"{loc}/field_type",
                    severity="warning",
                )
            )
        for r_idx, rule in enumerate(field_data.get("rules", [])):
            if rule.get("rule_name") not in known_rules:
                issues.append(
                    ValidationIssue(
                        file=path,
                        message=f"Unknown rule '{rule.get('rule_name')}' will be ignored",
                        path=f"{loc}/rules[{r_idx}]/rule_name",
                        severity="warning",
                    )
                )
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_form_file(
    form_path: Path,
    *,
    registry: Registry | None = None,
) -> list[ValidationIssue]:
    """
    Validate a single form file against the form schema.

    Args:
        form_path: Path to the YAML or JSON file to validate.
        registry:  Pre-built schema registry.  Built automatically if omitted.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    # 1. Parse
    try:
        doc = read_document(form_path)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        return [ValidationIssue(file=form_path, message=f"Parse error: {exc}")]

    if doc is None:
        return [
            ValidationIssue(file=form_path, message="File is empty or contains only whitespace")
        ]

    # 2. Load schema + registry
    if registry is None:
        registry = _load_registry()

    schema = registry.contents(FORM_SCHEMA_ID)
    validator = Draft202012Validator(schema, registry=registry)

    # 3. Collect validation errors
    issues = [
        ValidationIssue(file=form_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=_json_path)
    ]

    # 4. Vocabulary warnings only make sense on a structurally valid form
    if not issues:
        issues.extend(_vocabulary_issues(form_path, doc))

    return issues


def validate_forms_dir(
    forms_dir: Path,
    *,
    strict: bool = False,
) -> list[ValidationIssue]:
    """
    Validate all form files under *forms_dir*.

    Args:
        forms_dir: Directory holding ``.yaml``, ``.yml`` and ``.json`` form files.
        strict:    If ``True``, warnings are escalated to errors.

    Returns:
        A flat list of :class:`ValidationIssue` objects across all files.
        Empty list means all files are valid.
    """
    if not forms_dir.is_dir():
        return [
            ValidationIssue(
                file=forms_dir,
                message=f"Forms directory does not exist: {forms_dir}",
            )
        ]

    # Build registry once, shared across all file validations
    try:
        registry = _load_registry()
    except (FileNotFoundError, json.JSONDecodeError) as exc:
        return [
            ValidationIssue(
                file=_SCHEMAS_DIR,
                message=f"Failed to load JSON Schema files: {exc}",
            )
        ]

    all_issues: list[ValidationIssue] = []
    for form_file in sorted(forms_dir.iterdir()):
        if form_file.suffix not in FORM_FILE_SUFFIXES:
            continue
        file_issues = validate_form_file(form_file, registry=registry)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    logger.debug("Validated forms in %s: %d issue(s)", forms_dir, len(all_issues))
    return all_issues
