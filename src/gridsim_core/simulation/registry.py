# src/gridsim_core/simulation/registry.py
"""
The per-space network registry: makes connections between endpoints, merges
networks as they become connected and drives the per-step recalculation.
"""
import logging
from typing import Any, Callable, List, Optional

from ..components.nodes import ElectricNode
from ..components.wires import Wire, SwitchedWire
from ..units import QuantityLike, to_magnitude
from .config import SolverConfig
from .endpoints import WireEndpoint
from .graph import ConnectionGraph
from .network import ElectricalNetwork

logger = logging.getLogger(__name__)


class NetworkRegistry:
    """Owns every live network of one simulation space."""

    def __init__(self, space_id: Any, config: Optional[SolverConfig] = None):
        self.space_id = space_id
        self.config: SolverConfig = config or SolverConfig()
        self._networks: List[ElectricalNetwork] = []
        self.graph = ConnectionGraph()
        logger.info(f"Network registry created for space '{space_id}'.")

    @property
    def networks(self) -> List[ElectricalNetwork]:
        return list(self._networks)

    def new_network(self) -> ElectricalNetwork:
        network = ElectricalNetwork(self.config, graph=self.graph)
        self._networks.append(network)
        logger.info(f"Space '{self.space_id}': created {network!r}.")
        return network

    def connect(self, endpoint_a: WireEndpoint, endpoint_b: WireEndpoint,
                resistance: QuantityLike) -> Optional[Wire]:
        """
        Connects two endpoints with a wire of the given resistance. Returns
        None when either endpoint has no node or both resolve to the same node.
        """
        ohms = to_magnitude(resistance, 'ohm')
        return self._connect(endpoint_a, endpoint_b, lambda a, b: Wire(ohms, a, b))

    def connect_switch(self, endpoint_a: WireEndpoint, endpoint_b: WireEndpoint,
                       resistance: QuantityLike, closed: bool = True) -> Optional[SwitchedWire]:
        ohms = to_magnitude(resistance, 'ohm')
        return self._connect(endpoint_a, endpoint_b, lambda a, b: SwitchedWire(ohms, a, b, closed))

    def _connect(self, endpoint_a: WireEndpoint, endpoint_b: WireEndpoint,
                 make_wire: Callable[[ElectricNode, ElectricNode], Wire]) -> Optional[Wire]:
        node_a = endpoint_a.get_node(self.space_id)
        node_b = endpoint_b.get_node(self.space_id)
        if node_a is None or node_b is None or node_a is node_b:
            return None

        # Built before any topology change, so an invalid resistance leaves the space untouched.
        wire = make_wire(node_a, node_b)

        net_a, net_b = node_a.network, node_b.network
        if net_a is None and net_b is None:
            network = self.new_network()
            endpoint_a.join_network(self.space_id, network)
            endpoint_b.join_network(self.space_id, network)
        elif net_a is None:
            network = net_b
            endpoint_a.join_network(self.space_id, network)
        elif net_b is None:
            network = net_a
            endpoint_b.join_network(self.space_id, network)
        elif net_a is not net_b:
            network, absorbed = (net_a, net_b) if net_a.size >= net_b.size else (net_b, net_a)
            network.merge(absorbed)
            self._discard(absorbed)
        else:
            network = net_a

        assert node_a.network is network and node_b.network is network, \
            "endpoints did not join the network they were connected through"
        network.add_wire(wire)
        self.graph.add_wire(wire)
        return wire

    def disconnect(self, wire: Wire):
        """
        Removes a wire made by `connect`. Networks emptied by this are dropped on
        the next tick. Wires removed directly from their network leave the graph too.
        """
        if wire.network is not None:
            wire.network.remove_wire(wire)
        self.graph.remove_wire(wire)

    def _discard(self, network: ElectricalNetwork):
        if network in self._networks:
            self._networks.remove(network)
        network.release()
        logger.info(f"Space '{self.space_id}': discarded {network!r}.")

    def tick(self):
        """
        One simulation step. Empty networks are dropped after the pass; a dirty
        network is recalculated `settle_passes` extra times before its regular
        calculation.
        """
        empty: List[ElectricalNetwork] = []
        for network in self._networks:
            if network.is_empty():
                empty.append(network)
                continue
            if network.is_dirty():
                for _ in range(self.config.settle_passes):
                    network.calculate()
                network.clear_dirty()
            network.calculate()
        for network in empty:
            self._discard(network)

    def teardown(self):
        """Releases every network and forgets all connections."""
        for network in self._networks:
            network.release()
        logger.info(f"Space '{self.space_id}': torn down {len(self._networks)} network(s).")
        self._networks.clear()
        self.graph.clear()

    def __repr__(self):
        return f"NetworkRegistry(space={self.space_id!r}, networks={len(self._networks)})"
