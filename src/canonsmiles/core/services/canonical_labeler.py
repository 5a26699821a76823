"""
Canonical labeling of atoms.

Ranks atoms with iterated prime products of neighbour invariants and breaks
remaining ties deterministically, following Weininger's CANON scheme.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple
from ..domain.models.atom import Atom
from ..domain.models.bond import Bond, BondType
from ..domain.models.molecular_graph import MolecularGraph
from ..utils.benchmarking import benchmark
from ..utils.elements import atomic_number

logger = logging.getLogger(__name__)

_primes: List[int] = [2]

_BOND_CODES = {BondType.SINGLE: 1, BondType.DOUBLE: 2, BondType.TRIPLE: 3}


def nth_prime(n: int) -> int:
    """Return the n-th prime, 1-based."""
    candidate = _primes[-1]
    while len(_primes) < n:
        candidate += 1
        if all(candidate % p for p in _primes if p * p <= candidate):
            _primes.append(candidate)
    return _primes[n - 1]


def bond_code(bond: Bond) -> int:
    """0 for aromatic bonds, otherwise the bond order."""
    if bond.is_aromatic:
        return 0
    return _BOND_CODES[bond.bond_type]


@dataclass
class InvariantPair:
    """Current and previous invariant of one atom."""

    atom_id: int
    curr: int
    last: int = 0


class CanonicalLabeler:
    """Assigns every atom a unique rank in [1, n], invariant to input order."""

    def initial_invariant(self, graph: MolecularGraph, atom: Atom) -> int:
        """Decimal concatenation of the local atom invariants."""
        degree = graph.degree(atom.atom_id)
        charge = atom.formal_charge
        digits = [
            degree + atom.hydrogen_count,
            degree,
            atomic_number(atom.symbol),
            1 if charge < 0 else 0,
            abs(charge),
            atom.hydrogen_count,
        ]
        return int("".join(str(d) for d in digits))

    @benchmark
    def label(self, graph: MolecularGraph) -> Dict[int, int]:
        """
        Canonically label a connected molecule.

        Args:
            graph: Molecule to label

        Returns:
            Mapping of atom id to canonical rank; the ranks are also written
            to ``Atom.canonical_label``
        """
        if graph.atom_count == 0:
            return {}
        pairs = [
            InvariantPair(atom.atom_id, self.initial_invariant(graph, atom))
            for atom in graph.atoms
        ]
        by_id = {pair.atom_id: pair for pair in pairs}
        neighbours = {
            atom.atom_id: [
                (bond.other(atom.atom_id), bond_code(bond))
                for bond in graph.get_connected_bonds(atom.atom_id)
            ]
            for atom in graph.atoms
        }

        pairs = self._sort_and_rank(pairs)
        while True:
            if not self._is_invariant_partition(pairs):
                self._prime_product(pairs, by_id, neighbours)
            elif pairs[-1].curr < len(pairs):
                self._break_ties(pairs)
                self._prime_product(pairs, by_id, neighbours)
            else:
                break
            pairs = self._sort_and_rank(pairs)

        ranks = {pair.atom_id: pair.curr for pair in pairs}
        for atom in graph.atoms:
            atom.canonical_label = ranks[atom.atom_id]
        return ranks

    def _sort_and_rank(self, pairs: List[InvariantPair]) -> List[InvariantPair]:
        pairs = sorted(pairs, key=lambda p: (p.last, p.curr))
        ranks = []
        num = 1
        previous = pairs[0]
        for pair in pairs:
            if (pair.last, pair.curr) != (previous.last, previous.curr):
                num += 1
            ranks.append(num)
            previous = pair
        for pair, rank in zip(pairs, ranks):
            pair.curr = rank
        return pairs

    def _prime_product(
        self,
        pairs: List[InvariantPair],
        by_id: Dict[int, InvariantPair],
        neighbours: Dict[int, List[Tuple[int, int]]],
    ) -> None:
        # One prime per (rank, bond code) pair, read for every atom before any
        # rank changes.
        products = {}
        for pair in pairs:
            product = 1
            for other, code in neighbours[pair.atom_id]:
                product *= nth_prime(4 * by_id[other].curr + code)
            products[pair.atom_id] = product
        for pair in pairs:
            pair.last = pair.curr
            pair.curr = products[pair.atom_id]

    def _is_invariant_partition(self, pairs: List[InvariantPair]) -> bool:
        if pairs[-1].curr == len(pairs):
            return True
        return all(pair.curr == pair.last for pair in pairs)

    def _break_ties(self, pairs: List[InvariantPair]) -> None:
        """Split the first tied class by demoting its first member."""
        tie = None
        for x, pair in enumerate(pairs):
            pair.curr *= 2
            if tie is None and x > 0 and pair.curr == pairs[x - 1].curr:
                tie = x - 1
        pairs[tie].curr -= 1
