"""Interface for ring perception strategies."""

from abc import ABC, abstractmethod
from ..models.molecular_graph import MolecularGraph
from ..models.ring_set import RingSet


class RingFinder(ABC):
    """Abstract base class for ring perception strategies."""

    timeout: float

    @abstractmethod
    def find_all_rings(self, graph: MolecularGraph) -> RingSet:
        """
        Find every ring of a molecule.

        Args:
            graph: Molecule to search

        Returns:
            RingSet holding all rings

        Raises:
            RingSearchTimeoutError: If the search exceeds ``timeout`` seconds
        """
        pass
