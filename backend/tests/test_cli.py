"""Tests for the entitydesk CLI."""

import pytest
from click.testing import CliRunner

from entitydesk.cli.main import cli

PRODUCTS_YAML = """\
collection: products
name: Product
properties:
  title:
    dataType: string
    validation: {required: true}
  status:
    dataType: enum
    enumValues: {draft: Draft, published: Published}
    readOnly: true
defaultValues:
  status: draft
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schemas_dir(tmp_path):
    (tmp_path / "products.yaml").write_text(PRODUCTS_YAML)
    return tmp_path


class TestValidate:
    def test_valid_directory(self, runner, schemas_dir):
        result = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(schemas_dir)])
        assert result.exit_code == 0, result.output
        assert "products: Product (2 properties)" in result.output
        assert "All schemas are valid." in result.output

    def test_schemas_dir_from_env(self, runner, schemas_dir, monkeypatch):
        monkeypatch.setenv("ENTITYDESK_SCHEMAS_DIR", str(schemas_dir))
        result = runner.invoke(cli, ["schema", "validate"])
        assert result.exit_code == 0, result.output

    def test_invalid_file(self, runner, schemas_dir):
        (schemas_dir / "bad.yaml").write_text("collection: bad\nproperties:\n  x: {dataType: color}\n")
        result = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(schemas_dir)])
        assert result.exit_code == 1
        assert "1 schema error(s) found" in result.output

    def test_strict_escalates_warnings(self, runner, tmp_path):
        (tmp_path / "a.yaml").write_text("collection: a\nproperties: {}\ndefaultValues: {ghost: 1}\n")
        lenient = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(tmp_path), "--path", str(tmp_path / "a.yaml")])
        assert lenient.exit_code == 0, lenient.output
        assert "1 warning(s) found." in lenient.output

        strict = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(tmp_path), "--strict"])
        assert strict.exit_code == 1

    def test_semantic_failure(self, runner, schemas_dir):
        (schemas_dir / "locales.yaml").write_text(
            "collection: locales\nproperties: {}\nhooks: {onPreSave: missingHook}\n"
        )
        result = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(schemas_dir)])
        assert result.exit_code == 1
        assert "Semantic validation failed" in result.output

    def test_missing_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["schema", "validate", "--schemas-dir", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestShow:
    def test_show_collection(self, runner, schemas_dir):
        result = runner.invoke(cli, ["schema", "show", "products", "--schemas-dir", str(schemas_dir)])
        assert result.exit_code == 0, result.output
        assert "Product (products)" in result.output
        assert "customId: False" in result.output
        assert "  - title: string [required]" in result.output
        assert "  - status: enum [readOnly, default='draft']" in result.output

    def test_unknown_collection(self, runner, schemas_dir):
        result = runner.invoke(cli, ["schema", "show", "orders", "--schemas-dir", str(schemas_dir)])
        assert result.exit_code == 1
        assert "Unknown collection 'orders'" in result.output


def test_log_level_option(runner, schemas_dir):
    result = runner.invoke(
        cli, ["--log-level", "debug", "schema", "validate", "--schemas-dir", str(schemas_dir)]
    )
    assert result.exit_code == 0, result.output
