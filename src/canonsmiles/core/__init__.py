"""Core domain models, interfaces and services for SMILES generation."""

from .domain.models.molecular_graph import MolecularGraph
from .domain.models.ring_set import RingSet
from .domain.interfaces.aromaticity_detector import AromaticityDetector
from .domain.interfaces.ring_finder import RingFinder
from .services.smiles_generator import SmilesGenerator, SmilesGeneratorConfig

__all__ = [
    "MolecularGraph",
    "RingSet",
    "AromaticityDetector",
    "RingFinder",
    "SmilesGenerator",
    "SmilesGeneratorConfig",
]
