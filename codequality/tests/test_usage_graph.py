"""
Tests for projecting a built module into the usage graph.
"""

import networkx as nx
import pytest

from codequality.config import BuilderConfig
from codequality.core.reader import build_module
from codequality.graph import (
    RelationType,
    Relationship,
    build_usage_graph
)
from codequality.metadata import RawField, RawMethod, RawModule, RawType

from codequality.tests.factories import call, instr, load_field, sample_module


ORDER = "Shop.Core:Order"
VALIDATE = "Shop.Core:Order.Validate(System.String)"
ADD = "Shop.Core:Order.Add(System.String)"
CTOR = "Shop.Core:Order..ctor()"
MAIN = "-:Program.Main(System.String[])"


@pytest.fixture
def graph():
    module = build_module(sample_module().raw_module, BuilderConfig())
    return build_usage_graph(module)


def test_nodes_and_edges(graph):
    stats = graph.get_statistics()

    # 5 types, 3 fields, 8 methods
    assert stats["nodes"] == 16
    assert stats["edges"] == 25
    assert stats["edge_types"] == {
        "NESTS": 1,
        "CONTAINS": 11,
        "USES_TYPE": 7,
        "CALLS": 3,
        "USES_FIELD": 3
    }


def test_method_queries(graph):
    assert sorted(graph.get_type_uses(ADD)) == ["Shop.Core:Logger", ORDER]
    assert graph.get_callees(ADD) == [VALIDATE]
    assert sorted(graph.get_callers(VALIDATE)) == sorted([ADD, CTOR, VALIDATE])
    assert graph.get_field_uses(ADD) == ["Shop.Core:Order._items"]


def test_type_dependencies(graph):
    assert graph.get_type_dependencies(ORDER) == {
        "Shop.Core:Logger", "Shop.Core:Order+Line"
    }
    assert graph.get_type_dependencies("-:Program") == {
        ORDER, "Shop.Core:Repository<T>"
    }


def test_dependents_and_dependencies(graph):
    assert MAIN in graph.get_dependents(ORDER)
    assert set(graph.get_dependencies(MAIN)) == {ORDER, "Shop.Core:Repository<T>"}
    assert graph.get_dependencies("missing") == []


def test_event_backing_field_metadata(graph):
    data = graph.get_entity("Shop.Core:Order.Changed")
    assert data["kind"] == "field"
    assert data["is_event"] is True
    assert graph.get_entity("missing") == {}


def test_recursive_method_shows_up_as_cycle(graph):
    assert [VALIDATE] in graph.find_cycles()


def test_fills_given_digraph():
    digraph = nx.DiGraph()
    module = build_module(sample_module().raw_module, BuilderConfig())
    graph = build_usage_graph(module, digraph)

    assert graph.graph is digraph
    assert digraph.has_edge(ORDER, "Shop.Core:Order+Line")
    assert digraph.edges[ORDER, "Shop.Core:Order+Line"]["type"] == "NESTS"


def test_relationship_round_trip():
    rel = Relationship(source="a", target="b", rel_type=RelationType.CALLS, context="call")
    assert Relationship.from_dict(rel.to_dict()) == rel


def test_reachable_from_entry_point(graph):
    reachable = graph.get_reachable(MAIN)

    assert graph.has_entity(MAIN)
    assert not graph.has_entity("External.Lib:Util")
    # Main -> Order -> Add -> Logger
    assert "Shop.Core:Logger" in reachable
    assert graph.get_reachable("missing") == set()


def test_empty_graph_statistics():
    graph = build_usage_graph(build_module(RawModule(name="Empty.dll"), BuilderConfig()))

    assert graph.get_statistics() == {
        "nodes": 0, "edges": 0, "density": 0.0, "edge_types": {}
    }
    assert graph.get_callers("missing") == []


def test_colliding_signatures_get_separate_nodes():
    counter = RawField(name="Counter")
    first = RawMethod(name="Next", return_type="System.Int32", body=[instr(opcode="ret")])
    second = RawMethod(name="Next", return_type="System.String", body=[load_field(counter)])
    caller = RawMethod(name="Run", body=[call(second)])
    raw = RawModule(name="Collide.dll", types=[
        RawType(name="Sequence", namespace="N", fields=[counter],
                methods=[first, second, caller])
    ])

    graph = build_usage_graph(build_module(raw, BuilderConfig()))
    stats = graph.get_statistics()

    # Sequence, Counter, Next(), Next()#2, Run()
    assert stats["nodes"] == 5
    assert stats["edge_types"]["CONTAINS"] == 4
    assert len(graph.get_members("N:Sequence")) == 4
    assert graph.get_field_uses("N:Sequence.Next()#2") == ["N:Sequence.Counter"]
    assert graph.get_field_uses("N:Sequence.Next()") == []
    # Lookup by signature resolves to the first definition
    assert graph.get_callees("N:Sequence.Run()") == ["N:Sequence.Next()"]
    assert graph.get_entity("N:Sequence.Next()#2")["name"] == "Next()"
