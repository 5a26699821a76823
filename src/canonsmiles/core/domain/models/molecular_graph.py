#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/molecular_graph.py

"""
Domain model representing a molecular structure as a graph.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional
import networkx as nx
import numpy as np
from .atom import Atom
from .bond import Bond


class MolecularGraph:
    """Graph representation of a molecular structure."""

    def __init__(self, atoms: Iterable[Atom] = (), bonds: Iterable[Bond] = ()):
        """
        Initialize a MolecularGraph.

        Args:
            atoms: Atom objects, in input order
            bonds: Bond objects between those atoms, in input order
        """
        self.atoms: List[Atom] = []
        self.bonds: List[Bond] = []
        self._atoms_by_id: Dict[int, Atom] = {}
        self._atom_index: Dict[int, int] = {}
        self._bonds_by_key: Dict[FrozenSet[int], Bond] = {}
        self._bond_index: Dict[FrozenSet[int], int] = {}
        self._adjacency: Dict[int, List[Bond]] = {}
        for atom in atoms:
            self.add_atom(atom)
        for bond in bonds:
            self.add_bond(bond)

    def add_atom(self, atom: Atom) -> Atom:
        if atom.atom_id in self._atoms_by_id:
            raise ValueError(f"Duplicate atom id {atom.atom_id}")
        self._atom_index[atom.atom_id] = len(self.atoms)
        self._atoms_by_id[atom.atom_id] = atom
        self._adjacency[atom.atom_id] = []
        self.atoms.append(atom)
        return atom

    def add_bond(self, bond: Bond) -> Bond:
        for atom_id in bond.atom_ids:
            if atom_id not in self._atoms_by_id:
                raise ValueError(f"Bond references unknown atom {atom_id}")
        if bond.atom1_id == bond.atom2_id:
            raise ValueError(f"Bond from atom {bond.atom1_id} to itself")
        if bond.key in self._bonds_by_key:
            raise ValueError(f"Duplicate bond between atoms {bond.atom_ids}")
        self._bond_index[bond.key] = len(self.bonds)
        self._bonds_by_key[bond.key] = bond
        self._adjacency[bond.atom1_id].append(bond)
        self._adjacency[bond.atom2_id].append(bond)
        self.bonds.append(bond)
        return bond

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    @property
    def bond_count(self) -> int:
        return len(self.bonds)

    def get_atom(self, atom_id: int) -> Atom:
        return self._atoms_by_id[atom_id]

    def atom_index(self, atom_id: int) -> int:
        """Position of the atom in input order."""
        return self._atom_index[atom_id]

    def get_bond(self, atom1_id: int, atom2_id: int) -> Optional[Bond]:
        """Return the bond between two atoms, or None if they are not bonded."""
        return self._bonds_by_key.get(frozenset((atom1_id, atom2_id)))

    def get_bond_index(self, atom1_id: int, atom2_id: int) -> int:
        """Position of the bond in input order, -1 if the atoms are not bonded."""
        return self._bond_index.get(frozenset((atom1_id, atom2_id)), -1)

    def get_connected_bonds(self, atom_id: int) -> List[Bond]:
        return list(self._adjacency[atom_id])

    def get_connected_atoms(self, atom_id: int) -> List[int]:
        """Neighbour atom ids, in the order their bonds were added."""
        return [bond.other(atom_id) for bond in self._adjacency[atom_id]]

    def degree(self, atom_id: int) -> int:
        return len(self._adjacency[atom_id])

    def get_coordinates(self) -> np.ndarray:
        """Get 2D coordinates of all atoms in the graph.

        Returns:
            numpy array of shape (n_atoms, 2), NaN where an atom has no point
        """
        return np.array(
            [
                atom.point_2d if atom.point_2d is not None else (np.nan, np.nan)
                for atom in self.atoms
            ],
            dtype=float,
        ).reshape(len(self.atoms), 2)

    def to_networkx(self) -> nx.Graph:
        """Convert to a NetworkX graph keyed by atom id."""
        G = nx.Graph()
        for atom in self.atoms:
            G.add_node(atom.atom_id, element=atom.element)
        for bond in self.bonds:
            G.add_edge(bond.atom1_id, bond.atom2_id, order=bond.order)
        return G

    def subgraph(self, atom_ids: Iterable[int]) -> "MolecularGraph":
        """Graph over the given atoms, sharing the Atom and Bond objects."""
        wanted = set(atom_ids)
        return MolecularGraph(
            [atom for atom in self.atoms if atom.atom_id in wanted],
            [
                bond
                for bond in self.bonds
                if bond.atom1_id in wanted and bond.atom2_id in wanted
            ],
        )

    def partition_into_molecules(self) -> List["MolecularGraph"]:
        """Split into connected components, ordered by their first atom."""
        components = nx.connected_components(self.to_networkx())
        return [self.subgraph(component) for component in components]
