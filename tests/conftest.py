import pytest
from rdkit import Chem

from canonsmiles.core.domain.models import (
    Atom,
    Bond,
    BondStereo,
    BondType,
    MolecularGraph,
)

SINGLE = BondType.SINGLE
DOUBLE = BondType.DOUBLE


def build_graph(atoms, bonds):
    """Build a MolecularGraph from (element, kwargs) tuples and (a, b, kwargs) tuples."""
    graph = MolecularGraph()
    for atom_id, (element, kwargs) in enumerate(atoms):
        graph.add_atom(Atom(atom_id=atom_id, element=element, **kwargs))
    for a, b, kwargs in bonds:
        graph.add_bond(Bond(atom1_id=a, atom2_id=b, **kwargs))
    return graph


def rdkit_canonical(smiles: str) -> str:
    mol = Chem.MolFromSmiles(smiles)
    assert mol is not None, f"RDKit could not parse {smiles}"
    return Chem.MolToSmiles(mol)


@pytest.fixture
def ethane():
    return build_graph(
        [("C", {"hydrogen_count": 3}), ("C", {"hydrogen_count": 3})],
        [(0, 1, {})],
    )


@pytest.fixture
def ethanol():
    return build_graph(
        [
            ("C", {"hydrogen_count": 3}),
            ("C", {"hydrogen_count": 2}),
            ("O", {"hydrogen_count": 1}),
        ],
        [(0, 1, {}), (1, 2, {})],
    )


@pytest.fixture
def cyclohexane():
    return build_graph(
        [("C", {"hydrogen_count": 2}) for _ in range(6)],
        [(i, (i + 1) % 6, {}) for i in range(6)],
    )


@pytest.fixture
def kekule_benzene():
    """Benzene with alternating bond orders and no aromatic flags."""
    return build_graph(
        [("C", {"hydrogen_count": 1}) for _ in range(6)],
        [
            (i, (i + 1) % 6, {"bond_type": DOUBLE if i % 2 == 0 else SINGLE})
            for i in range(6)
        ],
    )


@pytest.fixture
def flagged_benzene_with_hydrogens():
    """Benzene ring flagged aromatic on every atom and bond, hydrogens as atoms."""
    atoms = [("C", {"aromatic": True}) for _ in range(6)]
    atoms += [("H", {}) for _ in range(6)]
    bonds = [
        (
            i,
            (i + 1) % 6,
            {"bond_type": DOUBLE if i % 2 == 0 else SINGLE, "aromatic": True},
        )
        for i in range(6)
    ]
    bonds += [(i, i + 6, {}) for i in range(6)]
    return build_graph(atoms, bonds)


@pytest.fixture
def naphthalene():
    atoms = [("C", {"hydrogen_count": 1, "aromatic": True}) for _ in range(10)]
    atoms[4] = ("C", {"aromatic": True})
    atoms[9] = ("C", {"aromatic": True})
    ring_bonds = [(i, i + 1) for i in range(9)] + [(9, 0), (4, 9)]
    return build_graph(
        atoms, [(a, b, {"bond_type": BondType.AROMATIC}) for a, b in ring_bonds]
    )


def halomethane(center_point=(0.0, 0.0), **stereo):
    """C bonded to F, Cl, Br and I drawn as a cross: F up, Cl left, Br down, I right.

    Keyword arguments give the wedge of a bond, e.g. ``F=BondStereo.UP``.
    """
    points = {
        "F": (0.0, 1.0),
        "Cl": (-1.0, 0.0),
        "Br": (0.0, -1.0),
        "I": (1.0, 0.0),
    }
    atoms = [("C", {"point_2d": center_point})]
    bonds = []
    for i, symbol in enumerate(["F", "Cl", "Br", "I"], start=1):
        x, y = points[symbol]
        atoms.append((symbol, {"point_2d": (center_point[0] + x, center_point[1] + y)}))
        bonds.append((0, i, {"stereo": stereo.get(symbol, BondStereo.NONE)}))
    return build_graph(atoms, bonds)


def difluoroethene(cis: bool):
    """F-CH=CH-F with explicit hydrogens; the fluorines are drawn cis or trans."""
    second_f = (1.5, 0.87) if cis else (1.5, -0.87)
    second_h = (1.5, -0.87) if cis else (1.5, 0.87)
    return build_graph(
        [
            ("F", {"point_2d": (-0.5, 0.87)}),
            ("C", {"point_2d": (0.0, 0.0)}),
            ("C", {"point_2d": (1.0, 0.0)}),
            ("F", {"point_2d": second_f}),
            ("H", {"point_2d": (-0.5, -0.87)}),
            ("H", {"point_2d": second_h}),
        ],
        [
            (0, 1, {}),
            (1, 2, {"bond_type": DOUBLE}),
            (2, 3, {}),
            (1, 4, {}),
            (2, 5, {}),
        ],
    )


HALOMETHANE_MOL_BLOCK = """halomethane
  handdrawn

  5  4  0  0  0  0  0  0  0  0999 V2000
    0.0000    0.0000    0.0000 C   0  0  0  0  0  0  0  0  0  0  0  0
    0.0000    1.0000    0.0000 F   0  0  0  0  0  0  0  0  0  0  0  0
   -1.0000    0.0000    0.0000 Cl  0  0  0  0  0  0  0  0  0  0  0  0
    0.0000   -1.0000    0.0000 Br  0  0  0  0  0  0  0  0  0  0  0  0
    1.0000    0.0000    0.0000 I   0  0  0  0  0  0  0  0  0  0  0  0
  1  2  1  1
  1  3  1  0
  1  4  1  0
  1  5  1  0
M  END
"""
