"""
Tests for the package layout that installation relies on.
"""

import importlib

import pytest


@pytest.mark.parametrize("name", ["tablefix", "tablefix.models", "tablefix.services"])
def test_subpackages_are_regular_packages(name):
    """Namespace packages have no __file__ and are skipped by find_packages()."""
    module = importlib.import_module(name)

    assert module.__file__ is not None
    assert module.__file__.endswith("__init__.py")
