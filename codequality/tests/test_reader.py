"""
End-to-end tests for the three-stage module build.
"""

import unittest

from codequality.config import BuilderConfig, reset_config
from codequality.core.reader import MetricsReader, build_module
from codequality.errors import ModelBuildError
from codequality.metadata import RawMethod, RawModule, RawType

from codequality.tests.factories import sample_module


class MetricsReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sample = sample_module()
        self.config = BuilderConfig()

    def test_builds_complete_module(self) -> None:
        reader = MetricsReader(self.config)
        module = reader.read_module(self.sample.raw_module)

        self.assertIs(reader.main_module, module)
        self.assertEqual(module.name, "Shop.dll")
        self.assertEqual(module.statistics(), {
            "namespaces": 2,
            "types": 5,
            "nested_types": 1,
            "fields": 3,
            "events": 1,
            "methods": 8,
            "type_uses": 7,
            "method_uses": 3,
            "field_uses": 3
        })

    def test_event_reconciliation_in_full_build(self) -> None:
        module = build_module(self.sample.raw_module, self.config)
        order = next(t for t in module.all_types() if t.name == "Order")

        changed_fields = [f for f in order.fields if f.name == "Changed"]
        self.assertEqual(len(changed_fields), 1)
        self.assertTrue(changed_fields[0].is_event)
        self.assertEqual([e.name for e in order.events], ["Changed"])
        self.assertIsNone(order.events[0].event_type)

    def test_build_is_deterministic(self) -> None:
        first = build_module(sample_module().raw_module, self.config)
        second = build_module(sample_module().raw_module, self.config)

        self.assertEqual(first.to_dict(), second.to_dict())
        self.assertEqual(first.statistics(), second.statistics())

    def test_same_raw_input_twice(self) -> None:
        reader = MetricsReader(self.config)
        first = reader.read_module(self.sample.raw_module)
        second = reader.read_module(self.sample.raw_module)

        self.assertIsNot(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())
        # No entity is shared between builds
        first_ids = {id(t) for t in first.all_types()}
        self.assertTrue(first_ids.isdisjoint(id(t) for t in second.all_types()))

    def test_parallel_usage_stage_matches_sequential(self) -> None:
        sequential = build_module(sample_module().raw_module, BuilderConfig(max_workers=1))
        parallel = build_module(sample_module().raw_module, BuilderConfig(max_workers=4))

        self.assertEqual(sequential.to_dict(), parallel.to_dict())

    def test_duplicate_types_abort_build(self) -> None:
        raw = RawModule(name="Broken.dll", types=[
            RawType(name="Order", namespace="Shop"),
            RawType(name="Order", namespace="Shop"),
        ])
        reader = MetricsReader(self.config)

        with self.assertRaises(ModelBuildError):
            reader.read_module(raw)
        self.assertIsNone(reader.main_module)

    def test_unexpected_failure_is_wrapped(self) -> None:
        bad = RawMethod(name="Bad", parameter_types=[None])
        raw = RawModule(name="Broken.dll", types=[RawType(name="T", namespace="N", methods=[bad])])

        with self.assertRaises(ModelBuildError) as ctx:
            build_module(raw, self.config)
        self.assertIsInstance(ctx.exception.__cause__, TypeError)

    def test_empty_module(self) -> None:
        module = build_module(RawModule(name="Empty.dll", types=[RawType(name="<Module>")]),
                              self.config)

        self.assertEqual(module.namespaces, [])
        self.assertEqual(list(module.all_methods()), [])

    def test_custom_no_namespace_sentinel(self) -> None:
        config = BuilderConfig(no_namespace="<global>")
        module = build_module(self.sample.raw_module, config)

        self.assertEqual([ns.name for ns in module.namespaces], ["<global>", "Shop.Core"])

    def test_default_config_comes_from_environment(self) -> None:
        reset_config()
        try:
            reader = MetricsReader()
            self.assertEqual(reader.config.module_type_name, "<Module>")
        finally:
            reset_config()

    def test_to_dict_renders_edges_by_name(self) -> None:
        module = build_module(self.sample.raw_module, self.config)
        shop = module.get_namespace("Shop.Core").to_dict()
        order = shop["types"][0]
        add = next(m for m in order["methods"] if m["name"] == "Add(System.String)")

        self.assertEqual(order["nested_types"], ["Order+Line"])
        self.assertEqual(add["type_uses"], ["Logger", "Order"])
        self.assertEqual(add["method_uses"], ["Validate(System.String)"])
        self.assertEqual(add["field_uses"], ["_items"])
        self.assertEqual(add["declaring_type"], "Order")


if __name__ == "__main__":
    unittest.main()
