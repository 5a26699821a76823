import math

import pytest

from conftest import build_graph
from canonsmiles.core.domain.models import Atom, Bond, BondType, MolecularGraph


def test_lookups(ethanol):
    assert ethanol.get_bond(2, 1) is ethanol.get_bond(1, 2)
    assert ethanol.get_bond(0, 2) is None
    assert ethanol.get_bond_index(2, 1) == 1
    assert ethanol.get_bond_index(0, 2) == -1
    assert ethanol.get_connected_atoms(1) == [0, 2]
    assert ethanol.degree(1) == 2


def test_invalid_bonds_are_rejected():
    graph = MolecularGraph([Atom(0, "C"), Atom(1, "O")])
    with pytest.raises(ValueError):
        graph.add_bond(Bond(0, 5))
    with pytest.raises(ValueError):
        graph.add_bond(Bond(0, 0))
    graph.add_bond(Bond(0, 1))
    with pytest.raises(ValueError):
        graph.add_bond(Bond(1, 0, bond_type=BondType.DOUBLE))
    with pytest.raises(ValueError):
        graph.add_atom(Atom(1, "N"))


def test_coordinates_mark_missing_points():
    graph = build_graph([("C", {"point_2d": (1.0, 2.0)}), ("O", {})], [(0, 1, {})])
    coordinates = graph.get_coordinates()
    assert coordinates.shape == (2, 2)
    assert tuple(coordinates[0]) == (1.0, 2.0)
    assert all(math.isnan(value) for value in coordinates[1])


def test_partition_keeps_atom_and_bond_objects():
    graph = build_graph(
        [("C", {}), ("O", {}), ("N", {}), ("C", {})],
        [(0, 3, {}), (1, 2, {})],
    )
    fragments = graph.partition_into_molecules()
    assert len(fragments) == 2
    assert [atom.atom_id for atom in fragments[0].atoms] == [0, 3]
    assert fragments[0].get_atom(3) is graph.get_atom(3)
    assert fragments[1].get_bond(1, 2) is graph.get_bond(1, 2)


def test_bond_properties():
    bond = Bond(4, 2, bond_type=BondType.AROMATIC)
    assert bond.is_aromatic
    assert bond.key == frozenset((2, 4))
    assert bond.other(4) == 2
    assert Bond(0, 1, aromatic=True).is_aromatic
    assert not Bond(0, 1).is_aromatic
