# src/gridsim_core/simulation/network.py
"""
The electrical network: an index-addressed set of nodes and wires, assembled
into a dense nodal system and re-solved on every simulation step.

Assembly order is fixed:
  1. wire conductances (stamped additively),
  2. coupling rows (overwriting whatever the wires put there),
  3. injected currents,
  4. Dirichlet elimination of fixed-potential nodes.
"""
from __future__ import annotations

import itertools
import logging
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..components.base_enums import NodeKind
from ..components.nodes import Node, UNASSIGNED_INDEX
from ..components.wires import Wire
from ..constants import SOURCE_ROW_DIAGONAL
from .config import SolverConfig
from .graph import ConnectionGraph
from .solver import BiCGSTABSolver, SolveResult

logger = logging.getLogger(__name__)

_network_ids = itertools.count(1)


class ElectricalNetwork:
    """
    A connected group of nodes and wires with its own matrix, right-hand side
    and warm-started solver.

    The node list is dense: the node at position `i` has `index == i`, and the
    matrix is always `len(nodes) x len(nodes)` after `calculate()`.
    """
    def __init__(self, config: Optional[SolverConfig] = None, graph: Optional[ConnectionGraph] = None):
        self.id: int = next(_network_ids)
        self.config: SolverConfig = config or SolverConfig()
        # Connection graph of the owning registry, kept in step with wire removals.
        self.graph: Optional[ConnectionGraph] = graph
        self._nodes: List[Node] = []
        # Insertion-ordered set of wires.
        self._wires: Dict[Wire, None] = {}
        self._dirty: bool = False

        self._matrix: np.ndarray = np.zeros((0, 0))
        self._vector: np.ndarray = np.zeros(0)
        self._source_rows: np.ndarray = np.zeros((0, 0))
        self._solver = BiCGSTABSolver(
            tolerance=self.config.tolerance,
            max_iterations=self.config.max_iterations,
            norm_order=self.config.norm_order,
            random_shadow=self.config.random_shadow,
            seed=self.config.seed,
        )
        self.last_result: Optional[SolveResult] = None
        logger.debug(f"Created {self!r}.")

    # --- Read access ---

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def wires(self) -> Tuple[Wire, ...]:
        return tuple(self._wires)

    @property
    def size(self) -> int:
        """Number of nodes, i.e. the dimension of the nodal system."""
        return len(self._nodes)

    @property
    def solver(self) -> BiCGSTABSolver:
        return self._solver

    @property
    def matrix(self) -> np.ndarray:
        """The matrix assembled by the last `calculate()` call."""
        return self._matrix

    @property
    def vector(self) -> np.ndarray:
        """The right-hand side assembled by the last `calculate()` call."""
        return self._vector

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, item) -> bool:
        if isinstance(item, Wire):
            return item in self._wires
        return getattr(item, 'network', None) is self

    def is_empty(self) -> bool:
        """A network without wires no longer connects anything and can be discarded."""
        return not self._wires

    def is_dirty(self) -> bool:
        return self._dirty

    def mark_dirty(self):
        self._dirty = True

    def clear_dirty(self):
        self._dirty = False

    # --- Topology mutation ---

    def add_node(self, node: Node):
        """Appends `node` at the next free index. Adding a member again is a no-op."""
        if node.network is self:
            return
        assert node.network is None, f"{node!r} already belongs to {node.network!r}"
        node.set_index(len(self._nodes))
        node.network = self
        self._nodes.append(node)
        self._dirty = True
        logger.debug(f"{self!r}: added {node!r}.")

    def add_nodes(self, nodes: Iterable[Node]):
        for node in nodes:
            self.add_node(node)

    def remove_node(self, node: Node):
        """
        Removes `node`, moving the last node into its slot so indices stay dense.
        Wires touching the node and couplings using it as a terminal go with it.
        """
        assert node.network is self, f"{node!r} is not a member of {self!r}"
        for wire in [w for w in self._wires if w.touches(node)]:
            self.remove_wire(wire)
        dependants = [n for n in self._nodes
                      if n.kind is NodeKind.COUPLING and node in n.terminals]

        hole = node.index
        last = self._nodes.pop()
        if last is not node:
            self._nodes[hole] = last
            last.set_index(hole)
        node.set_index(UNASSIGNED_INDEX)
        node.network = None
        self._dirty = True
        logger.debug(f"{self!r}: removed {node!r}.")

        for coupling in dependants:
            if coupling.network is self:
                self.remove_node(coupling)

    def add_wire(self, wire: Wire):
        """Adds `wire`; both of its endpoints must already be members."""
        assert all(n.network is self for n in wire.nodes), \
            f"{wire!r} has endpoints outside {self!r}"
        if wire in self._wires:
            return
        assert wire.network is None, f"{wire!r} already belongs to {wire.network!r}"
        self._wires[wire] = None
        wire.network = self
        self._dirty = True
        logger.debug(f"{self!r}: added {wire!r}.")

    def remove_wire(self, wire: Wire):
        if wire not in self._wires:
            return
        del self._wires[wire]
        wire.network = None
        if self.graph is not None:
            self.graph.remove_wire(wire)
        self._dirty = True
        logger.debug(f"{self!r}: removed {wire!r}.")

    def merge(self, other: ElectricalNetwork):
        """
        Moves every node and wire of `other` into this network. The moved nodes
        are renumbered to continue this network's sequence; `other` is left empty.
        """
        if other is self:
            return
        logger.info(f"Merging {other!r} ({other.size} nodes, {len(other._wires)} wires) into {self!r} ({self.size} nodes).")
        for node in other._nodes:
            node.set_index(len(self._nodes))
            node.network = self
            self._nodes.append(node)
        for wire in other._wires:
            wire.network = self
            self._wires[wire] = None
        if self.graph is None:
            self.graph = other.graph
        other._nodes.clear()
        other._wires.clear()
        other._dirty = True
        self._dirty = True

    def release(self):
        """Detaches every node and wire. Used when the network is discarded."""
        for node in self._nodes:
            node.set_index(UNASSIGNED_INDEX)
            node.network = None
        for wire in self._wires:
            wire.network = None
        self._nodes.clear()
        self._wires.clear()
        self._dirty = True
        logger.debug(f"Released {self!r}.")

    # --- Assembly & solve ---

    def _resize(self, n: int):
        if self._matrix.shape[0] == n:
            self._matrix.fill(0.0)
            self._vector.fill(0.0)
            return
        logger.debug(f"{self!r}: resizing system to {n}x{n}.")
        self._matrix = np.zeros((n, n))
        self._vector = np.zeros(n)
        self._solver.resize(n)

    def _assemble(self) -> List[Node]:
        """Builds matrix and vector in place. Returns the fixed-potential nodes."""
        A, b = self._matrix, self._vector

        for wire in self._wires:
            g = wire.conductance()
            if g == 0.0:
                continue
            i = wire.node_a.index
            A[i, i] += g
            if wire.node_b is not None:
                j = wire.node_b.index
                A[j, j] += g
                A[i, j] -= g
                A[j, i] -= g

        sources: List[Node] = []
        for node in self._nodes:
            if node.kind is NodeKind.COUPLING:
                node.couple(A, node.index)
            elif node.kind is NodeKind.SOURCE:
                sources.append(node)

        for node in self._nodes:
            if node.kind is NodeKind.CURRENT_SOURCE:
                b[node.index] += node.current

        # Rows of the sources as written by wires and couplings, before elimination.
        self._source_rows = A[[s.index for s in sources], :].copy()

        for source in sources:
            k, potential = source.index, source.potential
            b -= potential * A[:, k]
            A[:, k] = 0.0
            A[k, :] = 0.0
            A[k, k] = SOURCE_ROW_DIAGONAL
            b[k] = SOURCE_ROW_DIAGONAL * potential
        return sources

    def calculate(self) -> SolveResult:
        """
        Assembles the nodal system, solves it from the warm-start guess and
        hands every node its result.
        """
        self._resize(len(self._nodes))
        sources = self._assemble()

        result = self._solver.solve(self._matrix, self._vector)
        if not np.all(np.isfinite(result.solution)):
            logger.warning(f"{self!r}: solve produced non-finite values, retrying from a zero guess.")
            self._solver.reset()
            result = self._solver.solve(self._matrix, self._vector)
            if not np.all(np.isfinite(result.solution)):
                logger.error(f"{self!r}: solve failed twice with non-finite values; writing zero to every node.")
                self._solver.reset()
                result = SolveResult(
                    solution=np.zeros(len(self._nodes)),
                    iterations=result.iterations,
                    residual_norm=float('nan'),
                    converged=False,
                )

        x = result.solution
        for node in self._nodes:
            node.receive_result(float(x[node.index]))
        if sources:
            currents = self._source_rows @ x
            for source, current in zip(sources, currents):
                source.receive_current(float(current))

        self.last_result = result
        return result

    def __repr__(self):
        return f"ElectricalNetwork(id={self.id}, nodes={len(self._nodes)}, wires={len(self._wires)})"
