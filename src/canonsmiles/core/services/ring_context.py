"""
Ring and aromaticity information for one fragment.

Wraps the ring finder and aromaticity detector collaborators and turns a
ring search timeout into "no ring data" instead of a failure.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from ..domain.interfaces.aromaticity_detector import AromaticityDetector, AromaticityResult
from ..domain.interfaces.ring_finder import RingFinder
from ..domain.models.bond import Bond
from ..domain.models.molecular_graph import MolecularGraph
from ..domain.models.ring_set import Ring, RingSet
from ..exceptions import RingSearchTimeoutError

logger = logging.getLogger(__name__)


@dataclass
class RingContext:
    """Rings, ring systems and aromaticity of one fragment."""

    graph: MolecularGraph
    rings: RingSet = field(default_factory=RingSet)
    aromaticity: AromaticityResult = field(default_factory=AromaticityResult)
    available: bool = True

    @classmethod
    def unavailable(cls, graph: MolecularGraph) -> "RingContext":
        """Context used when ring perception was aborted."""
        return cls(graph, available=False)

    def rings_containing(self, atom_id: int) -> List[Ring]:
        return self.rings.rings_containing(atom_id)

    def ring_systems(self) -> List[RingSet]:
        return self.rings.partition()

    def is_aromatic_atom(self, atom_id: int) -> bool:
        return (
            self.graph.get_atom(atom_id).aromatic
            or atom_id in self.aromaticity.atom_ids
        )

    def is_aromatic_bond(self, bond: Bond) -> bool:
        return bond.is_aromatic or bond.key in self.aromaticity.bond_keys


class RingContextProvider:
    """Builds a RingContext from the configured collaborators."""

    def __init__(self, ring_finder: RingFinder, aromaticity_detector: AromaticityDetector):
        self.ring_finder = ring_finder
        self.aromaticity_detector = aromaticity_detector

    def build(
        self, graph: MolecularGraph, rings: Optional[RingSet] = None
    ) -> RingContext:
        """
        Compute ring data for a fragment.

        Args:
            graph: Connected fragment
            rings: Precomputed ring set covering the fragment, if any

        Returns:
            RingContext; ``available`` is False if ring search timed out
        """
        if rings is None:
            try:
                rings = self.ring_finder.find_all_rings(graph)
            except RingSearchTimeoutError as e:
                logger.warning(
                    "Skipping aromaticity and ring stereo for fragment of %d atoms: %s",
                    graph.atom_count,
                    e,
                )
                return RingContext.unavailable(graph)
        else:
            rings = rings.restricted_to(atom.atom_id for atom in graph.atoms)
        aromaticity = self.aromaticity_detector.detect(graph, rings)
        return RingContext(graph, rings, aromaticity)
