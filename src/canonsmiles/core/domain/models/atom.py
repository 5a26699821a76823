#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/atom.py

"""
Domain model representing an atom in a molecular graph.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class Hybridization(Enum):
    """Enumeration of atom hybridization states."""

    UNSET = auto()
    SP1 = auto()
    SP2 = auto()
    SP3 = auto()


@dataclass
class Atom:
    """Represents an atom in a molecular graph."""

    atom_id: int
    element: str
    formal_charge: int = 0
    mass_number: Optional[int] = None
    hydrogen_count: int = 0  # implicit hydrogens
    point_2d: Optional[Tuple[float, float]] = None
    point_3d: Optional[Tuple[float, float, float]] = None
    hybridization: Hybridization = Hybridization.UNSET
    aromatic: bool = False
    is_pseudo: bool = False
    canonical_label: Optional[int] = None

    @property
    def symbol(self) -> str:
        """Element symbol as written in a SMILES string."""
        return "*" if self.is_pseudo else self.element
