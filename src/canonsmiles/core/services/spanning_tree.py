"""
Depth-first spanning tree construction in canonical order.

The walk starts at the atom ranked 1, visits neighbours by ascending rank,
opens a branch for every child but the last one and records each non-tree
bond once as a ring closure.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional
from ..domain.models.molecular_graph import MolecularGraph
from ..domain.models.spanning_tree import Branch, BrokenBond, SpanningTree
from ..exceptions import SpanningTreeError

logger = logging.getLogger(__name__)


class VisitState(Enum):
    """Traversal state of an atom."""

    UNVISITED = auto()
    VISITING = auto()
    VISITED = auto()


@dataclass
class _Frame:
    atom_id: int
    chain: Branch
    neighbours: List[int]
    index: int = 0


class SpanningTreeBuilder:
    """Builds the DFS tree of a connected molecule from its canonical ranks."""

    def canonical_neighbours(
        self, graph: MolecularGraph, ranks: Dict[int, int], atom_id: int
    ) -> List[int]:
        """Neighbours of an atom sorted by ascending canonical rank."""
        return sorted(graph.get_connected_atoms(atom_id), key=lambda other: ranks[other])

    def build(
        self, graph: MolecularGraph, ranks: Dict[int, int], root_id: Optional[int] = None
    ) -> SpanningTree:
        """
        Walk a connected molecule.

        Args:
            graph: Connected molecule
            ranks: Canonical rank of every atom
            root_id: Start atom; defaults to the atom ranked 1

        Returns:
            SpanningTree with the nested branch structure and ring closures
        """
        if root_id is None:
            root_id = min(ranks, key=ranks.get)
        state = {atom.atom_id: VisitState.UNVISITED for atom in graph.atoms}
        parents: Dict[int, Optional[int]] = {root_id: None}
        broken_bonds: List[BrokenBond] = []
        marker = 0
        root = Branch()

        stack = [self._enter(graph, ranks, state, root_id, None, root)]
        while stack:
            frame = stack[-1]
            if frame.index >= len(frame.neighbours):
                state[frame.atom_id] = VisitState.VISITED
                stack.pop()
                continue
            x = frame.index
            frame.index += 1
            next_id = frame.neighbours[x]
            if state[next_id] is VisitState.UNVISITED:
                if x == len(frame.neighbours) - 1:
                    # last neighbour continues this chain
                    chain = frame.chain
                else:
                    chain = Branch()
                    frame.chain.nodes.append(chain)
                parents[next_id] = frame.atom_id
                stack.append(
                    self._enter(graph, ranks, state, next_id, frame.atom_id, chain)
                )
            elif not any(b.connects(frame.atom_id, next_id) for b in broken_bonds):
                marker += 1
                broken_bonds.append(BrokenBond(frame.atom_id, next_id, marker))

        self._check_closures(graph, broken_bonds, parents)
        return SpanningTree(root, broken_bonds, parents)

    def _enter(
        self,
        graph: MolecularGraph,
        ranks: Dict[int, int],
        state: Dict[int, VisitState],
        atom_id: int,
        parent_id: Optional[int],
        chain: Branch,
    ) -> _Frame:
        chain.nodes.append(atom_id)
        state[atom_id] = VisitState.VISITING
        neighbours = self.canonical_neighbours(graph, ranks, atom_id)
        if parent_id is not None:
            neighbours.remove(parent_id)
        return _Frame(atom_id, chain, neighbours)

    def _check_closures(
        self,
        graph: MolecularGraph,
        broken_bonds: List[BrokenBond],
        parents: Dict[int, Optional[int]],
    ) -> None:
        if len(parents) != graph.atom_count:
            raise SpanningTreeError(
                f"Walk reached {len(parents)} of {graph.atom_count} atoms; "
                "the molecule is not connected"
            )
        expected = graph.bond_count - (graph.atom_count - 1)
        if len(broken_bonds) != expected:
            raise SpanningTreeError(
                f"Found {len(broken_bonds)} ring closures, expected {expected}"
            )
