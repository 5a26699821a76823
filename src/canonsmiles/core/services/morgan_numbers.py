"""Extended connectivity (Morgan) numbers of the atoms of a molecule."""

from typing import Dict
from ..domain.models.molecular_graph import MolecularGraph


def get_morgan_numbers(graph: MolecularGraph) -> Dict[int, int]:
    """
    Compute Morgan numbers by summing neighbour values, one round per atom.

    Args:
        graph: Molecule to evaluate

    Returns:
        Mapping of atom id to Morgan number
    """
    current = {atom.atom_id: graph.degree(atom.atom_id) for atom in graph.atoms}
    neighbours = {
        atom.atom_id: graph.get_connected_atoms(atom.atom_id) for atom in graph.atoms
    }
    for _ in range(graph.atom_count):
        current = {
            atom_id: sum(current[other] for other in neighbours[atom_id])
            for atom_id in current
        }
    return current


def get_morgan_numbers_with_element_symbol(graph: MolecularGraph) -> Dict[int, str]:
    """Morgan numbers suffixed with the element symbol, e.g. ``"12C"``."""
    numbers = get_morgan_numbers(graph)
    return {
        atom.atom_id: f"{numbers[atom.atom_id]}{atom.symbol}" for atom in graph.atoms
    }
