"""Interface for aromaticity perception strategies."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Set
from ..models.molecular_graph import MolecularGraph
from ..models.ring_set import RingSet


@dataclass
class AromaticityResult:
    """Atoms and bonds found to be aromatic."""

    atom_ids: Set[int] = field(default_factory=set)
    bond_keys: Set[FrozenSet[int]] = field(default_factory=set)


class AromaticityDetector(ABC):
    """Abstract base class for aromaticity perception strategies."""

    @abstractmethod
    def detect(self, graph: MolecularGraph, rings: RingSet) -> AromaticityResult:
        """
        Perceive aromatic atoms and bonds.

        Args:
            graph: Molecule to inspect
            rings: All rings of the molecule

        Returns:
            AromaticityResult with the aromatic atom ids and bond keys
        """
        pass
