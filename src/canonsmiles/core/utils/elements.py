# src/canonsmiles/core/utils/elements.py

"""Element data looked up from the RDKit periodic table."""

from functools import lru_cache
from typing import Optional
from rdkit import Chem

ORGANIC_SUBSET = frozenset({"B", "C", "N", "O", "P", "S", "F", "Cl", "Br", "I"})

_PERIODIC_TABLE = Chem.GetPeriodicTable()


@lru_cache(maxsize=None)
def atomic_number(symbol: str) -> int:
    """Atomic number of an element, 0 for pseudo atoms and unknown symbols."""
    if symbol in ("*", "R"):
        return 0
    try:
        return _PERIODIC_TABLE.GetAtomicNumber(symbol)
    except RuntimeError:
        return 0


@lru_cache(maxsize=None)
def major_isotope_mass_number(symbol: str) -> Optional[int]:
    """Mass number of the most abundant isotope, None if unknown."""
    number = atomic_number(symbol)
    if number == 0:
        return None
    return _PERIODIC_TABLE.GetMostCommonIsotope(number)
