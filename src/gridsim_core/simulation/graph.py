# src/gridsim_core/simulation/graph.py
"""
Global connectivity of a simulation space, independent of how nodes are
currently grouped into networks.
"""
import logging
from typing import List, Set

import networkx as nx

from ..components.nodes import ElectricNode
from ..components.wires import Wire

logger = logging.getLogger(__name__)


class ConnectionGraph:
    """
    Records every wire made through a registry as an edge of a networkx
    `MultiGraph` keyed by the wire object. Parallel wires are separate edges.
    """
    def __init__(self):
        self._graph = nx.MultiGraph()

    @property
    def graph(self) -> nx.MultiGraph:
        return self._graph

    def add_wire(self, wire: Wire):
        if wire.node_b is None:
            raise ValueError(f"Only two-ended wires can be recorded as connections, got {wire!r}.")
        self._graph.add_edge(wire.node_a, wire.node_b, key=wire)

    def remove_wire(self, wire: Wire):
        """Removes the wire's edge and drops endpoints left without connections."""
        if wire.node_b is None or not self._graph.has_edge(wire.node_a, wire.node_b, key=wire):
            return
        self._graph.remove_edge(wire.node_a, wire.node_b, key=wire)
        for node in wire.nodes:
            if self._graph.degree(node) == 0:
                self._graph.remove_node(node)

    def __contains__(self, node) -> bool:
        return node in self._graph

    def connected_nodes(self, node: ElectricNode) -> Set[ElectricNode]:
        if node not in self._graph:
            return set()
        return set(self._graph.neighbors(node))

    def connection_count(self, node: ElectricNode) -> int:
        """Number of wires attached to `node`, parallel wires counted separately."""
        if node not in self._graph:
            return 0
        return self._graph.degree(node)

    def wires_between(self, node_a: ElectricNode, node_b: ElectricNode) -> List[Wire]:
        if not self._graph.has_edge(node_a, node_b):
            return []
        return list(self._graph[node_a][node_b].keys())

    def components(self) -> List[Set[ElectricNode]]:
        return [set(c) for c in nx.connected_components(self._graph)]

    def clear(self):
        self._graph.clear()
