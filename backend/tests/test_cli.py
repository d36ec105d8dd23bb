"""Tests for formforge CLI commands."""

import io
import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner
from PIL import Image

from formforge.cli.main import cli

_REPO_ROOT = Path(__file__).resolve().parents[2]
_FORMS_DIR = _REPO_ROOT / "forms"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def in_backend_dir(monkeypatch):
    """Ensure CWD is the backend directory for forms resolution."""
    monkeypatch.delenv("FORMFORGE_FORMS_PATH", raising=False)
    monkeypatch.delenv("FORMFORGE_BOUND_POLICY", raising=False)
    backend_dir = Path(__file__).parent.parent
    monkeypatch.chdir(backend_dir)


def _write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.dump(data))
    return path


class TestFieldTypes:
    def test_lists_categories(self, runner):
        result = runner.invoke(cli, ["field-types"])
        assert result.exit_code == 0
        assert "Text-based" in result.output
        assert "Multi_Select" in result.output
        assert "Signature Pad" in result.output


class TestFormValidate:
    def test_validate_succeeds(self, runner, in_backend_dir):
        result = runner.invoke(cli, ["form", "validate"])
        assert result.exit_code == 0
        assert "All forms are valid" in result.output

    def test_validate_shows_forms(self, runner, in_backend_dir):
        result = runner.invoke(cli, ["form", "validate"])
        assert "contact_signup (7 fields)" in result.output
        assert "event_registration (3 fields)" in result.output

    def test_validate_single_file(self, runner, in_backend_dir):
        result = runner.invoke(
            cli, ["form", "validate", "--path", str(_FORMS_DIR / "event_registration.json")]
        )
        assert result.exit_code == 0
        assert "Loaded 1 form(s)" in result.output

    def test_schema_error_exits_1(self, runner, in_backend_dir, tmp_path):
        bad = _write_yaml(tmp_path / "bad.yaml", {"form": "bad", "fields": [{"field_id": 1}]})
        result = runner.invoke(cli, ["form", "validate", "--path", str(bad)])
        assert result.exit_code == 1
        assert "schema error(s) found" in result.output

    def test_strict_fails_on_warnings(self, runner, in_backend_dir, tmp_path):
        form = {"form": "odd", "fields": [{"field_id": 1, "field_type": "Hologram"}]}
        path = _write_yaml(tmp_path / "odd.yaml", form)
        lenient = runner.invoke(cli, ["form", "validate", "--path", str(path)])
        assert lenient.exit_code == 0
        assert "1 warning(s) found." in lenient.output
        strict = runner.invoke(cli, ["form", "validate", "--strict", "--path", str(path)])
        assert strict.exit_code == 1

    def test_semantic_error_exits_1(self, runner, in_backend_dir, tmp_path):
        form = {
            "form": "dupes",
            "fields": [
                {"field_id": 1, "field_type": "Text Input"},
                {"field_id": 1, "field_type": "Text Input"},
            ],
        }
        path = _write_yaml(tmp_path / "dupes.yaml", form)
        result = runner.invoke(cli, ["form", "validate", "--path", str(path)])
        assert result.exit_code == 1

    def test_forms_dir_from_env(self, runner, in_backend_dir, tmp_path, monkeypatch):
        _write_yaml(
            tmp_path / "only.yaml",
            {"form": "only", "fields": [{"field_id": 1, "field_type": "Text Input"}]},
        )
        monkeypatch.setenv("FORMFORGE_FORMS_PATH", str(tmp_path))
        result = runner.invoke(cli, ["form", "validate"])
        assert result.exit_code == 0
        assert "only (1 fields)" in result.output


class TestFormCheck:
    def test_valid_submission(self, runner, in_backend_dir, tmp_path):
        values = _write_yaml(
            tmp_path / "values.yaml",
            {
                1: "Ada Lovelace",
                2: "ada@example.com",
                3: "ada@example.com",
                4: "+44 20 7946 0958",
                5: ["Engineering"],
                6: 4,
                7: True,
            },
        )
        result = runner.invoke(
            cli, ["form", "check", str(_FORMS_DIR / "contact_signup.yaml"), str(values)]
        )
        assert result.exit_code == 0, result.output
        assert "Submission is valid." in result.output

    def test_invalid_submission(self, runner, in_backend_dir, tmp_path):
        values = _write_yaml(
            tmp_path / "values.yaml",
            {1: "A", 2: "ada@example.com", 3: "bob@example.com", 7: False},
        )
        result = runner.invoke(
            cli, ["form", "check", str(_FORMS_DIR / "contact_signup.yaml"), str(values)]
        )
        assert result.exit_code == 1
        assert "[1] Full Name: Full Name must be at least 2 characters" in result.output
        assert "[3] Confirm Email: Confirm Email must match field 2" in result.output
        assert "[7] Terms: Terms must be checked" in result.output
        assert "3 field(s) failed validation" in result.output

    def test_json_output(self, runner, in_backend_dir, tmp_path):
        values = tmp_path / "values.json"
        values.write_text(json.dumps({"10": "2023-12-31", "11": 2}))
        result = runner.invoke(
            cli,
            ["form", "check", "--json", str(_FORMS_DIR / "event_registration.json"), str(values)],
        )
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload == {
            "valid": False,
            "errors": {"10": "Arrival must be on or after Jan 01, 2024"},
        }

    def test_upload_paths_are_read(self, runner, in_backend_dir, tmp_path):
        photo = tmp_path / "badge.png"
        buffer = io.BytesIO()
        Image.new("RGB", (40, 40)).save(buffer, format="PNG")
        photo.write_bytes(buffer.getvalue())
        values = _write_yaml(
            tmp_path / "values.yaml",
            {10: "2024-03-01", 12: "badge.png"},
        )
        result = runner.invoke(
            cli, ["form", "check", str(_FORMS_DIR / "event_registration.json"), str(values)]
        )
        assert result.exit_code == 1
        assert "Image width must be at least 100px (current: 40px)" in result.output

    def test_policy_option(self, runner, in_backend_dir, tmp_path):
        form = {
            "form": "policy",
            "fields": [
                {
                    "field_id": 1,
                    "field_type": "Number Input",
                    "label": "Seats",
                    "rules": [
                        {"rule_name": "between", "rule_props": {"min": 1, "max": 4}},
                        {"rule_name": "max", "rule_props": {"value": 10}},
                    ],
                }
            ],
        }
        form_path = _write_yaml(tmp_path / "policy.yaml", form)
        values = _write_yaml(tmp_path / "values.yaml", {1: 8})

        standalone = runner.invoke(cli, ["form", "check", str(form_path), str(values)])
        assert standalone.exit_code == 0
        ranged = runner.invoke(
            cli, ["form", "check", "--policy", "range", str(form_path), str(values)]
        )
        assert ranged.exit_code == 1
        assert "Seats must be at most 4" in ranged.output

    def test_bad_values_file(self, runner, in_backend_dir, tmp_path):
        values = _write_yaml(tmp_path / "values.yaml", ["not", "a", "map"])
        result = runner.invoke(
            cli, ["form", "check", str(_FORMS_DIR / "contact_signup.yaml"), str(values)]
        )
        assert result.exit_code == 1
        assert "must map field ids to values" in result.output
