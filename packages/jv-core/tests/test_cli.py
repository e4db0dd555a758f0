"""Tests for the jv command line."""

import json

from typer.testing import CliRunner

from conftest import EXAMPLES_DIR
from jv.cli import app

runner = CliRunner()

SCHEMA = str(EXAMPLES_DIR / "schema.json")
REMOTE = ["--remote", str(EXAMPLES_DIR / "remote"), "--remote-base", "https://example.com/schemas/"]


class TestValidateCommand:
    def test_valid_instance(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.json"), *REMOTE])
        assert result.exit_code == 0, result.output
        output = json.loads(result.output)
        assert output["valid"] is True
        assert output["keywordLocation"] == ""

    def test_invalid_instance(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "invalid.json"), *REMOTE])
        assert result.exit_code == 1
        output = json.loads(result.output)
        assert output["valid"] is False
        locations = {(u["keywordLocation"], u["instanceLocation"]) for u in output["errors"]}
        assert ("/properties/age/$ref/minimum", "/age") in locations
        assert ("/properties/name/minLength", "/name") in locations
        assert ("/properties/tags/uniqueItems", "/tags") in locations
        assert ("/unevaluatedProperties", "/nickname") in locations

    def test_remote_reference_errors(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "invalid.json"), *REMOTE])
        output = json.loads(result.output)
        instance_locations = {u["instanceLocation"] for u in output["errors"]}
        assert "/address" in instance_locations
        assert "/address/postcode" in instance_locations

    def test_missing_remote_store(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.json")])
        assert result.exit_code == 1
        output = json.loads(result.output)
        assert any("Could not resolve reference" in u["error"] for u in output["errors"])

    def test_yaml_instance(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.yaml")])
        assert result.exit_code == 0, result.output

    def test_flag_output(self):
        args = ["validate", SCHEMA, str(EXAMPLES_DIR / "invalid.json"), *REMOTE, "--output", "flag"]
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert json.loads(result.output) is False

    def test_formats_flag(self, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"format": "email"}))
        instance = tmp_path / "instance.json"
        instance.write_text(json.dumps("not-an-email"))
        assert runner.invoke(app, ["validate", str(schema), str(instance)]).exit_code == 0
        result = runner.invoke(app, ["validate", str(schema), str(instance), "--formats"])
        assert result.exit_code == 1
        assert "is not a valid email" in result.output

    def test_output_level_from_env(self, monkeypatch):
        monkeypatch.setenv("JV_OUTPUT_LEVEL", "flag")
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.json"), *REMOTE])
        assert json.loads(result.output) is True

    def test_bad_output_level(self):
        result = runner.invoke(app, ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.json"), "-o", "compact"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", SCHEMA, str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_remote_requires_base(self):
        args = ["validate", SCHEMA, str(EXAMPLES_DIR / "valid.json"), "--remote", str(EXAMPLES_DIR / "remote")]
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "--remote requires --remote-base" in result.output


class TestCheckSchemaCommand:
    def test_valid_schema(self):
        result = runner.invoke(app, ["check-schema", SCHEMA])
        assert result.exit_code == 0
        assert "schema is valid" in result.output

    def test_invalid_schema(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("type: 123\n")
        result = runner.invoke(app, ["check-schema", str(path)])
        assert result.exit_code == 1
        assert "Schema errors" in result.output
