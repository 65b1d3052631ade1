import importlib
import uuid

import pytest

from binary_codegen import CodeGeneratorConfig, GenerationDriver, declare_context, write_units
from binary_codegen.tests.support import Generator


@pytest.fixture
def generate(tmp_path, monkeypatch):
    """Generate converters for some types into a fresh importable package.

    Returns a function taking the types and returning a Generator wired to
    the generated creator registry.
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _generate(*types, config=None):
        namespace = f"generated_{uuid.uuid4().hex}"
        context = declare_context("TestContext", namespace, types)
        result = GenerationDriver(config or CodeGeneratorConfig()).run(context)
        assert not result.has_errors, result.diagnostics
        write_units(tmp_path / namespace, result.units)
        importlib.invalidate_caches()
        package = importlib.import_module(namespace)
        return Generator(package.CONVERTER_CREATORS)

    return _generate
