# src/gridsim_core/circuit_builder.py

"""
Defines the CircuitBuilder, the factory device definitions use to declare their
internal electrical topology once, and the `DeviceCircuit` it produces.

A device circuit is a small, fixed set of nodes and wires:

*   **External nodes** are the device's terminals. Wires made between devices
    attach to them through `DeviceCircuit.terminal(i)`.
*   **Internal nodes** (free nodes, sources, current sources) and **couplings**
    are never connected to from outside.
*   **Internal wires** tie the nodes of the device together.

When a terminal is connected for the first time, the whole circuit joins the
network of that connection, so every node of a device always lives in the same
network.

Error handling follows the build-time convention of the package: any
`DiagnosableError` raised while declaring an element, and any unit conversion
failure, is re-raised as a `CircuitBuildError` carrying the diagnostic report.
"""

import logging
from contextlib import contextmanager
from typing import Any, List, Optional, Tuple

import pint

from .components.base_enums import NodeKind
from .components.coupling import CouplingNode
from .components.nodes import ElectricNode, FreeNode, Node, SourceNode, CurrentSourceNode
from .components.wires import Wire, SwitchedWire
from .errors import CircuitBuildError, DiagnosableError, format_diagnostic_report
from .simulation.network import ElectricalNetwork
from .units import QuantityLike, to_magnitude

logger = logging.getLogger(__name__)


class DeviceCircuit:
    """The immutable electrical topology of one device instance."""

    def __init__(self, name: str, internal_nodes: List[ElectricNode], external_nodes: List[FreeNode],
                 couplings: List[CouplingNode], wires: List[Wire]):
        self.name = name
        self.internal_nodes: Tuple[ElectricNode, ...] = tuple(internal_nodes)
        self.external_nodes: Tuple[FreeNode, ...] = tuple(external_nodes)
        self.couplings: Tuple[CouplingNode, ...] = tuple(couplings)
        self.wires: Tuple[Wire, ...] = tuple(wires)

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return self.internal_nodes + self.external_nodes + self.couplings

    @property
    def network(self) -> Optional[ElectricalNetwork]:
        for node in self.nodes:
            if node.network is not None:
                return node.network
        return None

    def terminal(self, index: int) -> "TerminalEndpoint":
        if not 0 <= index < len(self.external_nodes):
            raise IndexError(f"Device '{self.name}' has {len(self.external_nodes)} terminal(s), got index {index}.")
        return TerminalEndpoint(self, index)

    def join_network(self, network: ElectricalNetwork):
        """Adds every node and internal wire of the device to `network`. Repeated joins are no-ops."""
        network.add_nodes(self.internal_nodes)
        network.add_nodes(self.external_nodes)
        network.add_nodes(self.couplings)
        for wire in self.wires:
            network.add_wire(wire)
        logger.debug(f"Device '{self.name}' joined {network!r}.")

    def detach(self):
        """Removes the device from its network, together with every wire attached to its nodes."""
        for node in self.nodes:
            if node.network is not None:
                node.network.remove_node(node)
        logger.debug(f"Device '{self.name}' detached.")

    def __repr__(self):
        return (f"DeviceCircuit('{self.name}', internal={len(self.internal_nodes)}, "
                f"terminals={len(self.external_nodes)}, couplings={len(self.couplings)}, wires={len(self.wires)})")


class TerminalEndpoint:
    """A `WireEndpoint` for one terminal of a device circuit."""

    def __init__(self, circuit: DeviceCircuit, index: int):
        self.circuit = circuit
        self.index = index

    def get_node(self, space: Any) -> Optional[ElectricNode]:
        return self.circuit.external_nodes[self.index]

    def join_network(self, space: Any, network: ElectricalNetwork) -> None:
        self.circuit.join_network(network)

    def __repr__(self):
        return f"TerminalEndpoint('{self.circuit.name}', {self.index})"


class CircuitBuilder:
    """
    Collects the nodes, couplings and wires of one device and produces a
    `DeviceCircuit`. Values may be plain numbers in SI units, quantity strings
    such as "10 ohm" or "230 V", or pint Quantities.
    """

    def __init__(self, name: str = "device"):
        self.name = name
        self._internal: List[ElectricNode] = []
        self._external: List[FreeNode] = []
        self._couplings: List[CouplingNode] = []
        self._wires: List[Wire] = []

    @contextmanager
    def _declaring(self, what: str, user_input: Any = None):
        try:
            yield
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        except (pint.DimensionalityError, pint.UndefinedUnitError) as e:
            report = format_diagnostic_report(
                error_type="Invalid Quantity",
                details=f"Could not declare {what} in device '{self.name}': {e}",
                suggestion="Give the value as a plain number in SI units or as a quantity with compatible units (e.g. '10 ohm', '5 V').",
                context={'element': what, 'user_input': None if user_input is None else str(user_input)}
            )
            raise CircuitBuildError(report) from e

    def _check_member(self, node: Node, what: str):
        if not any(node is n for n in self._internal + self._external):
            report = format_diagnostic_report(
                error_type="Foreign Node",
                details=f"{node!r} used by {what} was not created by the builder of device '{self.name}'.",
                suggestion="Only connect nodes returned by add_internal_node() or add_external_node() of the same builder.",
                context={'element': what}
            )
            raise CircuitBuildError(report)

    def add_internal_node(self, kind: NodeKind = NodeKind.FREE, initial_value: QuantityLike = 0.0) -> ElectricNode:
        """
        Declares an internal node. `initial_value` is the potential of a source
        node or the current of a current-source node, and is ignored for free nodes.
        """
        with self._declaring(f"{kind.name.lower()} node", initial_value):
            if kind is NodeKind.FREE:
                node = FreeNode()
            elif kind is NodeKind.SOURCE:
                node = SourceNode(to_magnitude(initial_value, 'V'))
            elif kind is NodeKind.CURRENT_SOURCE:
                node = CurrentSourceNode(to_magnitude(initial_value, 'A'))
            else:
                raise CircuitBuildError(format_diagnostic_report(
                    error_type="Unsupported Node Kind",
                    details=f"add_internal_node() cannot create a {kind.name} node.",
                    suggestion="Declare couplings with couple().",
                    context={'element': self.name}
                ))
        self._internal.append(node)
        return node

    def add_external_node(self) -> FreeNode:
        """Declares the next terminal of the device."""
        node = FreeNode()
        self._external.append(node)
        return node

    def connect(self, resistance: QuantityLike, node_a: ElectricNode, node_b: Optional[ElectricNode] = None) -> Wire:
        """Connects two nodes of this device, or one node to the reference when `node_b` is None."""
        for node in (node_a, node_b):
            if node is not None:
                self._check_member(node, "wire")
        with self._declaring("wire", resistance):
            wire = Wire(to_magnitude(resistance, 'ohm'), node_a, node_b)
        self._wires.append(wire)
        return wire

    def connect_switch(self, resistance: QuantityLike, node_a: ElectricNode, node_b: Optional[ElectricNode] = None,
                       closed: bool = True) -> SwitchedWire:
        for node in (node_a, node_b):
            if node is not None:
                self._check_member(node, "switch")
        with self._declaring("switch", resistance):
            wire = SwitchedWire(to_magnitude(resistance, 'ohm'), node_a, node_b, closed)
        self._wires.append(wire)
        return wire

    def couple(self, ratio: float, *terminals: ElectricNode, resistance: QuantityLike = 0.0) -> CouplingNode:
        """
        Declares an ideal coupling between 2, 3 or 4 nodes of this device; see
        `CouplingNode.create` for how the terminals are split.
        """
        for node in terminals:
            self._check_member(node, "coupling")
        with self._declaring("coupling", resistance):
            coupling = CouplingNode.create(float(ratio), *terminals, resistance=to_magnitude(resistance, 'ohm'))
        self._couplings.append(coupling)
        return coupling

    def build(self) -> DeviceCircuit:
        circuit = DeviceCircuit(self.name, self._internal, self._external, self._couplings, self._wires)
        logger.debug(f"Built {circuit!r}.")
        return circuit
