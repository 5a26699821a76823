"""Core domain models and interfaces."""

from .models.molecular_graph import MolecularGraph
from .models.ring_set import Ring, RingSet
from .interfaces.aromaticity_detector import AromaticityDetector, AromaticityResult
from .interfaces.ring_finder import RingFinder

__all__ = [
    "MolecularGraph",
    "Ring",
    "RingSet",
    "AromaticityDetector",
    "AromaticityResult",
    "RingFinder",
]
