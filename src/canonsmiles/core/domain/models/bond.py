#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/bond.py

"""
Domain model representing a chemical bond between atoms.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Tuple


class BondType(Enum):
    """Enumeration of possible bond types."""

    SINGLE = auto()
    DOUBLE = auto()
    TRIPLE = auto()
    AROMATIC = auto()


class BondStereo(Enum):
    """Wedge annotation of a bond as drawn in 2D."""

    NONE = auto()
    UP = auto()
    DOWN = auto()
    UNDEFINED = auto()


_ORDERS = {
    BondType.SINGLE: 1,
    BondType.DOUBLE: 2,
    BondType.TRIPLE: 3,
    BondType.AROMATIC: 1,
}


@dataclass
class Bond:
    """Represents a chemical bond between two atoms."""

    atom1_id: int
    atom2_id: int
    bond_type: BondType = BondType.SINGLE
    stereo: BondStereo = BondStereo.NONE
    aromatic: bool = False

    @property
    def order(self) -> int:
        """Integral bond order; aromatic bonds count as single."""
        return _ORDERS[self.bond_type]

    @property
    def is_aromatic(self) -> bool:
        return self.aromatic or self.bond_type is BondType.AROMATIC

    @property
    def atom_ids(self) -> Tuple[int, int]:
        return (self.atom1_id, self.atom2_id)

    @property
    def key(self) -> FrozenSet[int]:
        """Order-insensitive identity of the bond."""
        return frozenset((self.atom1_id, self.atom2_id))

    def other(self, atom_id: int) -> int:
        """Return the partner of ``atom_id`` in this bond."""
        if atom_id == self.atom1_id:
            return self.atom2_id
        if atom_id == self.atom2_id:
            return self.atom1_id
        raise ValueError(f"Atom {atom_id} is not part of bond {self.atom_ids}")
