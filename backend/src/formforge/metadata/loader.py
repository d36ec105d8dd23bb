"""Load form definitions from YAML or JSON files."""

from pathlib import Path
from dataclasses import dataclass, field
import json
from typing import Any
import yaml

from formforge.validation.rules import extract_cross_field_rules
from formforge.validation.types import Field

FORM_FILE_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass
class FormSection:
    name: str = ""
    description: str = ""
    fields: list[Field] = field(default_factory=list)


@dataclass
class FormDefinition:
    """A resolved form: sections of fields, keyed by field id."""

    name: str
    title: str = ""
    description: str = ""
    sections: list[FormSection] = field(default_factory=list)
    source: Path | None = None

    @property
    def fields(self) -> list[Field]:
        return [f for section in self.sections for f in section.fields]

    def get_field(self, field_id: int) -> Field | None:
        for f in self.fields:
            if f.field_id == field_id:
                return f
        return None


def read_document(path: Path) -> Any:
    """Parse a YAML or JSON file, chosen by suffix."""
    with open(path) as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


class FormLoader:
    """Loads form definitions from a directory of YAML/JSON files."""

    def __init__(self, forms_path: Path):
        self.forms_path = forms_path
        self.forms: dict[str, FormDefinition] = {}

    def load_all(self) -> None:
        """Load every form file in the forms directory."""
        if not self.forms_path.exists():
            return

        for path in sorted(self.forms_path.iterdir()):
            if path.suffix not in FORM_FILE_SUFFIXES:
                continue
            form = self.load_file(path)
            if form.name in self.forms:
                raise ValueError(
                    f"Duplicate form '{form.name}' in {path} and "
                    f"{self.forms[form.name].source}"
                )
            self.forms[form.name] = form

    def load_file(self, path: Path) -> FormDefinition:
        """Load and resolve a single form file.

        Raises:
            ValueError: If the file can't be parsed or the form is inconsistent.
        """
        try:
            data = read_document(path)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ValueError(f"Could not parse {path}: {exc}") from exc

        if not isinstance(data, dict) or "form" not in data:
            raise ValueError(f"{path} is not a form definition (missing 'form')")

        form = self._resolve_form(data)
        form.source = path
        self._validate_field_ids(form)
        return form

    def _resolve_form(self, data: dict) -> FormDefinition:
        if "sections" in data:
            sections = [self._resolve_section(s) for s in data.get("sections") or []]
        else:
            # a flat field list is one unnamed section
            sections = [self._resolve_section({"fields": data.get("fields") or []})]

        return FormDefinition(
            name=str(data["form"]),
            title=data.get("title") or self._to_title(str(data["form"])),
            description=data.get("description", ""),
            sections=sections,
        )

    def _resolve_section(self, data: dict) -> FormSection:
        fields = []
        for field_data in data.get("fields") or []:
            try:
                fields.append(Field.from_dict(field_data))
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Invalid field definition {field_data!r}: {exc}") from exc
        return FormSection(
            name=data.get("name", ""),
            description=data.get("description", ""),
            fields=fields,
        )

    def _validate_field_ids(self, form: FormDefinition) -> None:
        """Field ids are unique and same/different rules point at real fields."""
        seen: set[int] = set()
        for f in form.fields:
            if f.field_id in seen:
                raise ValueError(f"Form '{form.name}' has duplicate field id {f.field_id}")
            seen.add(f.field_id)

        for f in form.fields:
            targets = extract_cross_field_rules(f.rules)
            for target in (targets.same_as, targets.different_from):
                if target is not None and target not in seen:
                    raise ValueError(
                        f"Field {f.field_id} ({f.label}) in form '{form.name}' "
                        f"compares with unknown field {target}"
                    )

    def _to_title(self, name: str) -> str:
        """Convert snake_case / kebab-case to Title Case."""
        return name.replace("_", " ").replace("-", " ").title()

    def get_form(self, name: str) -> FormDefinition | None:
        return self.forms.get(name)

    def list_forms(self) -> list[str]:
        return list(self.forms.keys())
