"""Tests for the operator directory adapter."""

import pytest
from fulfillment.errors import NotFound
from fulfillment.operators import get_operator_directory, reset_operator_directory
from fulfillment.operators.fake_adapter import FakeOperatorDirectory
from fulfillment.operators.port import Operator


class TestFakeOperatorDirectory:
    def test_known_operator(self):
        operator = FakeOperatorDirectory().get("OP001")
        assert operator.name == "João Silva"
        assert operator.role == "Warehouse Operator"

    def test_unknown_operator(self):
        with pytest.raises(NotFound):
            FakeOperatorDirectory().get("OP404")

    def test_register(self):
        directory = FakeOperatorDirectory(operators=[])
        directory.register(Operator(id="OP010", name="Rita Gomes", role="Packer"))
        assert directory.get("OP010").name == "Rita Gomes"


class TestOperatorDirectorySingleton:
    def test_defaults_to_fake(self):
        assert isinstance(get_operator_directory(), FakeOperatorDirectory)

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("OPERATOR_DIRECTORY_ADAPTER", "ldap")
        reset_operator_directory()
        with pytest.raises(ValueError):
            get_operator_directory()
