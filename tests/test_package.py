"""Tests for the package's public surface."""

import inspect

import pytest

from visual_matcher import api, catalog, engine, filtering, hashing, query, scoring


@pytest.mark.parametrize("module", [api, catalog, engine, filtering, hashing, query, scoring])
def test_public_callables_are_documented(module):
    undocumented = []
    for name, obj in vars(module).items():
        if name.startswith("_") or getattr(obj, "__module__", None) != module.__name__:
            continue
        if inspect.isfunction(obj) or inspect.isclass(obj):
            if not inspect.getdoc(obj):
                undocumented.append(name)
            if inspect.isclass(obj):
                for attr, member in vars(obj).items():
                    if inspect.isfunction(member) and not attr.startswith("_") \
                            and not inspect.getdoc(member):
                        undocumented.append(f"{name}.{attr}")
    assert undocumented == []
