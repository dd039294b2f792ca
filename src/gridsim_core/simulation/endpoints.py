# src/gridsim_core/simulation/endpoints.py
from typing import Any, Optional, Protocol, runtime_checkable

from ..components.nodes import ElectricNode
from .network import ElectricalNetwork


@runtime_checkable
class WireEndpoint(Protocol):
    """
    One end of a connection made through a registry. Device terminals resolve
    to a node per simulation space, and know which nodes have to join a network
    together with that terminal.
    """
    def get_node(self, space: Any) -> Optional[ElectricNode]:
        ...

    def join_network(self, space: Any, network: ElectricalNetwork) -> None:
        ...


class NodeEndpoint:
    """Adapts a bare node to the `WireEndpoint` protocol."""
    def __init__(self, node: ElectricNode):
        self.node = node

    def get_node(self, space: Any) -> Optional[ElectricNode]:
        return self.node

    def join_network(self, space: Any, network: ElectricalNetwork) -> None:
        network.add_node(self.node)

    def __repr__(self):
        return f"NodeEndpoint({self.node!r})"
