# Copyright (c) 2025 Varshith Gudur. Licensed under AGPLv3.
"""Test CLI commands."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from typer.testing import CliRunner

from pampam.cli import app, load_signer
from pampam.errors import SigningError
from pampam.fields import FieldType, FieldValue, Kind
from pampam.signing import Signer, SignedEntry

runner = CliRunner()

SIGNER_PATH = "tests_cli_signer:make_signer"


class StaticSigner(Signer):
    @property
    def public_key(self):
        return "pk_cli"

    def sign(self, operation, next_args):
        return SignedEntry(entry="e", operation="o", hash="h")


def make_signer():
    return StaticSigner()


@pytest.fixture
def signer_module(monkeypatch):
    """Expose make_signer under an importable module name."""
    import sys
    import types

    module = types.ModuleType("tests_cli_signer")
    module.make_signer = make_signer
    module.instance = StaticSigner()
    module.not_a_signer = lambda: "nope"
    monkeypatch.setitem(sys.modules, "tests_cli_signer", module)
    return module


@pytest.fixture
def operator():
    with patch("pampam.cli.Operator") as mock_cls:
        instance = MagicMock()
        mock_cls.return_value = instance
        yield mock_cls, instance


def test_no_args_shows_help():
    result = runner.invoke(app, [])
    assert result.exit_code == 2
    assert "pampam" in result.output


def test_create_schema(signer_module, operator):
    mock_cls, instance = operator
    instance.create_schema.return_value = {
        "schema_id": "pets_0020ab", "view_id": "0020ab", "name": "pets", "field_ids": ["f1", "f2"],
    }

    result = runner.invoke(app, [
        "--signer", SIGNER_PATH, "--op-version", "2",
        "create", "schema", "pets", "my pets", "name: str", "owner: relation(person_01)",
    ])

    assert result.exit_code == 0, result.output
    assert "schema_id: pets_0020ab" in result.output
    assert "schema name: pets" in result.output
    instance.create_schema.assert_called_once_with("pets", "my pets", [
        ("name", FieldType(Kind.STRING)),
        ("owner", FieldType(Kind.RELATION, "person_01")),
    ])
    _, kwargs = mock_cls.call_args
    assert kwargs["version"] == 2
    assert isinstance(kwargs["signer"], StaticSigner)


def test_create_schema_bad_type_never_reaches_node(signer_module, operator):
    _, instance = operator

    result = runner.invoke(app, ["--signer", SIGNER_PATH, "create", "schema", "pets", "d", "age: money"])

    assert result.exit_code == 1
    assert 'Unknown type "money"' in result.output
    instance.create_schema.assert_not_called()


def test_create_document(signer_module, operator):
    _, instance = operator
    instance.create_document.return_value = "doc_01"

    result = runner.invoke(app, [
        "--signer", SIGNER_PATH,
        "create", "document", "pets_0020", "name: Neko", "age: 3", "friends: relation_list([d_1, d_2])",
    ])

    assert result.exit_code == 0, result.output
    assert "document_id: doc_01" in result.output
    instance.create_document.assert_called_once_with("pets_0020", [
        ("name", FieldValue(Kind.STRING, "neko")),
        ("age", FieldValue(Kind.INTEGER, 3)),
        ("friends", FieldValue(Kind.RELATION_LIST, "[d_1, d_2]")),
    ])


def test_update_document(signer_module, operator):
    _, instance = operator
    instance.update_document.return_value = "op_02"

    result = runner.invoke(app, [
        "--signer", SIGNER_PATH, "update", "document", "pets_0020", "view_1", "pi: 3.1416",
    ])

    assert result.exit_code == 0, result.output
    assert "updated document_id: op_02" in result.output
    instance.update_document.assert_called_once_with(
        "pets_0020", "view_1", [("pi", FieldValue(Kind.FLOAT, 3.1416))]
    )


def test_delete_document(signer_module, operator):
    _, instance = operator
    instance.delete_document.return_value = "op_03"

    result = runner.invoke(app, ["--signer", SIGNER_PATH, "delete", "document", "pets_0020", "view_1"])

    assert result.exit_code == 0, result.output
    assert "deleted document_id: op_03" in result.output


def test_publishing_without_signer(operator, monkeypatch):
    monkeypatch.delenv("PAMPAM_SIGNER", raising=False)
    _, instance = operator

    result = runner.invoke(app, ["delete", "document", "pets_0020", "view_1"])

    assert result.exit_code == 1
    assert "No signing identity" in result.output
    instance.delete_document.assert_not_called()


def test_schema_all_works_without_signer(operator, monkeypatch):
    monkeypatch.delenv("PAMPAM_SIGNER", raising=False)
    _, instance = operator
    instance.get_all_schema_definition.return_value = [{"meta": {"documentId": "d", "viewId": "v"}}]

    result = runner.invoke(app, ["schema", "all"])

    assert result.exit_code == 0, result.output
    assert '"documentId": "d"' in result.output


def test_schema_show(operator, monkeypatch):
    monkeypatch.delenv("PAMPAM_SIGNER", raising=False)
    _, instance = operator
    instance.get_schema_definition.return_value = {"meta": {"documentId": "d", "viewId": "v"}}

    result = runner.invoke(app, ["schema", "show", "d", "v"])

    assert result.exit_code == 0, result.output
    instance.get_schema_definition.assert_called_once_with("d", "v")


def test_duplicate_field_is_reported(signer_module):
    with patch("requests.Session.post") as mock_post:
        result = runner.invoke(app, [
            "--signer", SIGNER_PATH, "create", "document", "pets_0020", "a: 1", "a: 2",
        ])

    assert result.exit_code == 1
    assert "duplicate field" in result.output
    mock_post.assert_not_called()


def test_unreachable_node_is_reported(monkeypatch):
    monkeypatch.delenv("PAMPAM_SIGNER", raising=False)
    with patch("requests.Session.post", side_effect=requests.ConnectionError("refused")):
        result = runner.invoke(app, ["--endpoint", "http://nowhere/graphql", "schema", "all"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "refused" in result.output


def test_check_reports_every_problem():
    result = runner.invoke(app, ["check", "type", "a: int", "b money", "c: cash"])

    assert result.exit_code == 1
    assert "missing" in result.output
    assert 'Unknown type "cash"' in result.output


def test_check_clean():
    result = runner.invoke(app, ["check", "value", "a: 1", "b: relation_list([x, y])"])

    assert result.exit_code == 0
    assert "2 field(s) OK" in result.output


def test_check_bad_mode():
    result = runner.invoke(app, ["check", "both", "a: 1"])
    assert result.exit_code == 1
    assert "mode must be" in result.output


def test_load_signer(signer_module):
    assert isinstance(load_signer("tests_cli_signer:make_signer"), StaticSigner)
    assert load_signer("tests_cli_signer:instance") is signer_module.instance

    with pytest.raises(SigningError, match="module:attr"):
        load_signer("tests_cli_signer")
    with pytest.raises(SigningError, match="Could not load"):
        load_signer("tests_cli_signer:missing")
    with pytest.raises(SigningError, match="did not provide"):
        load_signer("tests_cli_signer:not_a_signer")
