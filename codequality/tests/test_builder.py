"""
Tests for the skeleton pass.
"""

import pytest

from codequality.core.builder import ModelBuilder
from codequality.core.entities import Module
from codequality.core.registry import TypeRegistry
from codequality.errors import ModelBuildError
from codequality.metadata import RawType

from codequality.tests.factories import nested_chain, sample_module


def _build(raw_types):
    module = Module(name="Test.dll")
    registry = TypeRegistry(module)
    created = ModelBuilder(registry).build(raw_types)
    return module, registry, created


def _count_raw(raw_types):
    total = 0
    for raw in raw_types:
        if raw.name == "<Module>":
            continue
        total += 1 + _count_raw(raw.nested_types)
    return total


def test_every_raw_type_yields_one_type():
    sample = sample_module()
    module, registry, created = _build(sample.types)

    listed = sum(len(ns.types) for ns in module.namespaces)
    assert listed == _count_raw(sample.types) == created == len(registry) == 5


def test_module_pseudo_type_is_skipped():
    sample = sample_module()
    module, _, _ = _build(sample.types)

    assert all(t.name != "<Module>" for t in module.all_types())


def test_namespaces_deduplicate_in_creation_order():
    sample = sample_module()
    module, _, _ = _build(sample.types)

    assert [ns.name for ns in module.namespaces] == ["-", "Shop.Core"]
    assert all(ns.module is module for ns in module.namespaces)
    shop = module.get_namespace("Shop.Core")
    assert [t.name for t in shop.types] == ["Order", "Order+Line", "Logger", "Repository<T>"]


def test_nested_type_links():
    sample = sample_module()
    module, registry, _ = _build(sample.types)

    order = registry.find_type(sample.order_type)
    line = registry.find_type(sample.line_type)

    assert line.owner is order
    assert line.is_nested
    assert not order.is_nested
    assert order.nested_types == [line]
    assert line.namespace is order.namespace
    assert line in order.namespace.types


def test_nested_types_follow_their_parent():
    b2 = RawType(name="B2")
    b = RawType(name="B", nested_types=[RawType(name="B1"), b2])
    a = RawType(name="A", namespace="N", nested_types=[b])
    c = RawType(name="C", namespace="N")

    module, _, _ = _build([a, c])

    assert [t.name for t in module.get_namespace("N").types] == [
        "A", "A+B", "A+B+B1", "A+B+B2", "C"
    ]


def test_generic_type_name_in_skeleton():
    module, _, _ = _build([RawType(name="Pair`2", namespace="N", generic_parameters=["K", "V"])])
    assert [t.name for t in module.all_types()] == ["Pair<K,V>"]


def test_same_name_in_different_namespaces():
    module, registry, _ = _build([
        RawType(name="Util", namespace="A"),
        RawType(name="Util", namespace="B"),
    ])

    assert len(registry.find_by_name("Util")) == 2
    assert [ns.name for ns in module.namespaces] == ["A", "B"]


def test_duplicate_type_aborts():
    with pytest.raises(ModelBuildError):
        _build([RawType(name="Order", namespace="Shop"), RawType(name="Order", namespace="Shop")])


def test_deep_nesting_builds_without_recursion():
    module, registry, created = _build([nested_chain(2500)])

    assert created == 2501
    assert len(module.namespaces) == 1
    innermost = list(module.all_types())[-1]
    depth = 0
    while innermost.owner is not None:
        innermost = innermost.owner
        depth += 1
    assert depth == 2500
