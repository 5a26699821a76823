#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/ring_set.py

"""
Domain models for rings and ring sets.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Set, Tuple
import networkx as nx


@dataclass(frozen=True)
class Ring:
    """A cycle of atoms, in ring order."""

    atom_ids: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.atom_ids)

    def contains_atom(self, atom_id: int) -> bool:
        return atom_id in self.atom_ids

    def contains_bond(self, atom1_id: int, atom2_id: int) -> bool:
        """True if the two atoms are adjacent along the ring."""
        n = len(self.atom_ids)
        for i, atom_id in enumerate(self.atom_ids):
            following = self.atom_ids[(i + 1) % n]
            if {atom_id, following} == {atom1_id, atom2_id}:
                return True
        return False


@dataclass
class RingSet:
    """Collection of rings of one molecule."""

    rings: List[Ring] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rings)

    def __iter__(self) -> Iterator[Ring]:
        return iter(self.rings)

    def rings_containing(self, atom_id: int) -> List[Ring]:
        return [ring for ring in self.rings if ring.contains_atom(atom_id)]

    def rings_containing_bond(self, atom1_id: int, atom2_id: int) -> List[Ring]:
        return [ring for ring in self.rings if ring.contains_bond(atom1_id, atom2_id)]

    def atom_ids(self) -> Set[int]:
        return {atom_id for ring in self.rings for atom_id in ring.atom_ids}

    def restricted_to(self, atom_ids: Iterable[int]) -> "RingSet":
        """Rings lying entirely inside the given atoms."""
        wanted = set(atom_ids)
        return RingSet([ring for ring in self.rings if wanted.issuperset(ring.atom_ids)])

    def partition(self) -> List["RingSet"]:
        """Partition into ring systems: rings sharing an atom are fused."""
        G = nx.Graph()
        G.add_nodes_from(range(len(self.rings)))
        for i, ring in enumerate(self.rings):
            for j in range(i + 1, len(self.rings)):
                if set(ring.atom_ids) & set(self.rings[j].atom_ids):
                    G.add_edge(i, j)
        return [
            RingSet([self.rings[i] for i in sorted(system)])
            for system in nx.connected_components(G)
        ]
