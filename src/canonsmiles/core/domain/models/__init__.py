"""Domain model classes."""

from .atom import Atom, Hybridization
from .bond import Bond, BondStereo, BondType
from .molecular_graph import MolecularGraph
from .reaction import Reaction
from .ring_set import Ring, RingSet
from .spanning_tree import Branch, BrokenBond, SpanningTree

__all__ = [
    "Atom",
    "Hybridization",
    "Bond",
    "BondStereo",
    "BondType",
    "MolecularGraph",
    "Reaction",
    "Ring",
    "RingSet",
    "Branch",
    "BrokenBond",
    "SpanningTree",
]
