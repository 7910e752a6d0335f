"""
Usage graph built from a completed code model.

Projects a Module into a NetworkX DiGraph so downstream metric code can
query coupling, fan-in and fan-out without walking the entity tree:
- nodes: every Type, Field and Method (keyed by unique_id); events are
  represented by their backing field (is_event)
- structural edges: CONTAINS (type -> member), NESTS (type -> nested type)
- usage edges: USES_TYPE, CALLS, USES_FIELD (method -> target)

Every edge carries its RelationType value in the ``type`` attribute.
"""

import logging
from typing import Dict, List, Optional, Set

import networkx as nx

from ..core.entities import Method, Module, Type
from .relationships import USAGE_TYPES, Relationship, RelationType


logger = logging.getLogger(__name__)


class UsageGraph:
    """
    Graph view of a module's structure and usage edges.

    Attributes:
        graph: The underlying DiGraph, for NetworkX algorithms downstream
        relationships: Every relationship added, in insertion order
    """

    def __init__(self, graph: Optional[nx.DiGraph] = None):
        self.graph = graph if graph is not None else nx.DiGraph()
        self.relationships: List[Relationship] = []

    def add_entity(self, entity_id: str, metadata: Optional[Dict] = None):
        """Add a model entity node to the graph."""
        self.graph.add_node(entity_id, **(metadata or {}))

    def add_relationship(self, rel: Relationship):
        """Add a relationship edge to the graph."""
        self.relationships.append(rel)
        self.graph.add_edge(
            rel.source,
            rel.target,
            type=rel.rel_type.value,
            weight=rel.weight,
            context=rel.context
        )

    def add_relationships(self, rels: List[Relationship]):
        for rel in rels:
            self.add_relationship(rel)

    def get_entity(self, entity_id: str) -> Dict:
        """Node attributes of an entity, {} if it is not in the graph."""
        if entity_id in self.graph:
            return dict(self.graph.nodes[entity_id])
        return {}

    def has_entity(self, entity_id: str) -> bool:
        return entity_id in self.graph

    def _targets(self, entity_id: str, rel_types: Set[RelationType]) -> List[str]:
        if entity_id not in self.graph:
            return []
        wanted = {rt.value for rt in rel_types}
        return [target for _, target, rel in self.graph.out_edges(entity_id, data="type")
                if rel in wanted]

    def _sources(self, entity_id: str, rel_types: Set[RelationType]) -> List[str]:
        if entity_id not in self.graph:
            return []
        wanted = {rt.value for rt in rel_types}
        return [source for source, _, rel in self.graph.in_edges(entity_id, data="type")
                if rel in wanted]

    def get_type_uses(self, method_id: str) -> List[str]:
        """Types referenced by a method."""
        return self._targets(method_id, {RelationType.USES_TYPE})

    def get_callees(self, method_id: str) -> List[str]:
        """Same-type methods called by a method."""
        return self._targets(method_id, {RelationType.CALLS})

    def get_callers(self, method_id: str) -> List[str]:
        """Methods that call this method."""
        return self._sources(method_id, {RelationType.CALLS})

    def get_field_uses(self, method_id: str) -> List[str]:
        return self._targets(method_id, {RelationType.USES_FIELD})

    def get_dependencies(self, entity_id: str, rel_types: Optional[Set[RelationType]] = None) -> List[str]:
        """Get all entities this entity uses (usage edges by default)."""
        return self._targets(entity_id, set(rel_types or USAGE_TYPES))

    def get_dependents(self, entity_id: str, rel_types: Optional[Set[RelationType]] = None) -> List[str]:
        """Get all entities that use this entity (usage edges by default)."""
        return self._sources(entity_id, set(rel_types or USAGE_TYPES))

    def get_reachable(self, entity_id: str) -> Set[str]:
        """Everything reachable from an entity over any edge (transitive fan-out)."""
        if entity_id not in self.graph:
            return set()
        return nx.descendants(self.graph, entity_id)

    def get_members(self, type_id: str) -> List[str]:
        return self._targets(type_id, {RelationType.CONTAINS})

    def get_type_dependencies(self, type_id: str) -> Set[str]:
        """
        Other types referenced by any method of a type.

        Args:
            type_id: unique_id of the type

        Returns:
            Set of type ids, excluding the type itself
        """
        used = set()
        for member in self.get_members(type_id):
            used.update(self.get_type_uses(member))
        used.discard(type_id)
        return used

    def find_cycles(self) -> List[List[str]]:
        """Find all cycles in the graph (recursive call chains show up here)."""
        return list(nx.simple_cycles(self.graph))

    def get_statistics(self) -> Dict:
        """Get graph statistics."""
        stats = {
            "nodes": self.graph.number_of_nodes(),
            "edges": self.graph.number_of_edges(),
            "density": nx.density(self.graph) if self.graph.number_of_nodes() else 0.0,
        }

        edge_types: Dict[str, int] = {}
        for rel in self.relationships:
            edge_types[rel.rel_type.value] = edge_types.get(rel.rel_type.value, 0) + 1
        stats["edge_types"] = edge_types

        return stats


def build_usage_graph(module: Module, graph: Optional[nx.DiGraph] = None) -> UsageGraph:
    """
    Build a UsageGraph from a completed Module.

    Nodes are keyed by ``unique_id``. Methods whose signatures collide
    within one type share a unique_id; every method after the first gets
    the node id ``<unique_id>#<n>`` (n = 2, 3, ...) so each Method keeps
    its own node and edges.

    Args:
        module: Module produced by MetricsReader
        graph: DiGraph to fill (default: a new one)

    Returns:
        Populated UsageGraph
    """
    usage_graph = UsageGraph(graph)
    node_ids: Dict[int, str] = {}

    types = list(module.all_types())
    for type_ in types:
        _add_type(usage_graph, type_, node_ids)

    for type_ in types:
        for method in type_.methods:
            _add_usage_edges(usage_graph, method, node_ids)

    stats = usage_graph.get_statistics()
    logger.info("Usage graph for %s: %d nodes, %d edges",
                module.name, stats["nodes"], stats["edges"])
    return usage_graph


def _node_id(entity, node_ids: Dict[int, str]) -> str:
    return node_ids.get(id(entity), entity.unique_id)


def _add_type(usage_graph: UsageGraph, type_: Type, node_ids: Dict[int, str]):
    usage_graph.add_entity(type_.unique_id, metadata={
        "kind": "type",
        "name": type_.name,
        "namespace": type_.namespace.name if type_.namespace else None,
        "nested": type_.is_nested
    })

    if type_.owner is not None:
        usage_graph.add_relationship(Relationship(
            source=type_.owner.unique_id,
            target=type_.unique_id,
            rel_type=RelationType.NESTS
        ))

    for f in type_.fields:
        usage_graph.add_entity(f.unique_id, metadata={
            "kind": "field", "name": f.name, "owner": type_.unique_id, "is_event": f.is_event
        })
        usage_graph.add_relationship(Relationship(
            source=type_.unique_id, target=f.unique_id, rel_type=RelationType.CONTAINS
        ))

    seen: Dict[str, int] = {}
    for method in type_.methods:
        count = seen.get(method.unique_id, 0) + 1
        seen[method.unique_id] = count
        node_id = method.unique_id if count == 1 else f"{method.unique_id}#{count}"
        node_ids[id(method)] = node_id
        if count > 1:
            logger.debug("Colliding signature %s mapped to node %s", method.unique_id, node_id)

        usage_graph.add_entity(node_id, metadata={
            "kind": "method",
            "name": method.name,
            "owner": type_.unique_id,
            "is_constructor": method.is_constructor
        })
        usage_graph.add_relationship(Relationship(
            source=type_.unique_id, target=node_id, rel_type=RelationType.CONTAINS
        ))


def _add_usage_edges(usage_graph: UsageGraph, method: Method, node_ids: Dict[int, str]):
    source = _node_id(method, node_ids)
    # Sorted so repeated builds produce the same edge order
    for used in sorted(method.type_uses, key=lambda t: t.unique_id):
        usage_graph.add_relationship(Relationship(
            source=source,
            target=used.unique_id,
            rel_type=RelationType.USES_TYPE
        ))
    for callee in sorted(method.method_uses, key=lambda m: _node_id(m, node_ids)):
        usage_graph.add_relationship(Relationship(
            source=source,
            target=_node_id(callee, node_ids),
            rel_type=RelationType.CALLS
        ))
    for f in sorted(method.field_uses, key=lambda f: f.unique_id):
        usage_graph.add_relationship(Relationship(
            source=source,
            target=f.unique_id,
            rel_type=RelationType.USES_FIELD
        ))
