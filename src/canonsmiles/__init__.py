"""Canonical SMILES generation for molecular graphs."""

from .core.domain.models import Atom, Bond, BondStereo, BondType, MolecularGraph, Reaction
from .core.services.smiles_generator import SmilesGenerator, SmilesGeneratorConfig

__all__ = [
    "Atom",
    "Bond",
    "BondStereo",
    "BondType",
    "MolecularGraph",
    "Reaction",
    "SmilesGenerator",
    "SmilesGeneratorConfig",
]
