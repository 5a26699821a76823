#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/spanning_tree.py

"""
Transient models built while walking a molecule: the DFS spanning tree and
the ring closure records for its non-tree bonds.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union


@dataclass(frozen=True)
class BrokenBond:
    """A bond left out of the spanning tree, written as a ring closure."""

    atom1_id: int
    atom2_id: int
    marker: int

    def touches(self, atom_id: int) -> bool:
        return atom_id in (self.atom1_id, self.atom2_id)

    def connects(self, atom1_id: int, atom2_id: int) -> bool:
        return {self.atom1_id, self.atom2_id} == {atom1_id, atom2_id}

    def partner(self, atom_id: int) -> int:
        return self.atom2_id if atom_id == self.atom1_id else self.atom1_id


@dataclass
class Branch:
    """An ordered chain of atoms (ids) and nested branches."""

    nodes: List["Node"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.nodes)

    def first_atom(self) -> int:
        """The atom a branch starts with, i.e. the one bonded to its owner."""
        first = self.nodes[0]
        return first if isinstance(first, int) else first.first_atom()

    def atom_ids(self) -> List[int]:
        """All atoms of the branch, depth first."""
        found: List[int] = []
        for node in self.nodes:
            if isinstance(node, Branch):
                found.extend(node.atom_ids())
            else:
                found.append(node)
        return found


Node = Union[int, Branch]


def head_atom(node: Node) -> int:
    """Atom id a tree node begins with."""
    return node if isinstance(node, int) else node.first_atom()


@dataclass
class SpanningTree:
    """Result of one DFS walk over a connected molecule."""

    root: Branch
    broken_bonds: List[BrokenBond]
    parents: Dict[int, Optional[int]]

    def ring_closures(self, atom_id: int) -> List[BrokenBond]:
        """Ring closures touching an atom, by ascending marker."""
        return sorted(
            (bond for bond in self.broken_bonds if bond.touches(atom_id)),
            key=lambda bond: bond.marker,
        )

    def is_bond_broken(self, atom1_id: int, atom2_id: int) -> bool:
        return any(bond.connects(atom1_id, atom2_id) for bond in self.broken_bonds)
