import logging
import math
import random
import re
from collections import Counter
from concurrent.futures import ThreadPoolExecutor

import pytest
from rdkit import Chem

from conftest import build_graph, difluoroethene, halomethane, rdkit_canonical
from canonsmiles import SmilesGenerator, SmilesGeneratorConfig
from canonsmiles.core.domain.implementations import AllRingsFinder
from canonsmiles.core.domain.models import BondStereo, Reaction
from canonsmiles.core.exceptions import MissingCoordinatesError
from canonsmiles.infrastructure.adapters import RDKitAdapter

UP = BondStereo.UP
DOWN = BondStereo.DOWN

ROUND_TRIP_SMILES = [
    "CC(=O)Oc1ccccc1C(=O)O",
    "c1ccc2ccccc2c1",
    "C1CCC2CCCCC2C1",
    "C#CC=CC",
    "OC(=O)c1ccccn1",
    "CC(C)(C)c1ccc(O)cc1",
    "O=C1CCC(=O)N1Br",
    "c1ccc2[nH]ccc2c1",
    "c1cc[nH]c1",
]


def graph_from_smiles(smiles, seed=None):
    mol = Chem.MolFromSmiles(smiles)
    if seed is not None:
        order = list(range(mol.GetNumAtoms()))
        random.Random(seed).shuffle(order)
        mol = Chem.RenumberAtoms(mol, order)
    return RDKitAdapter().from_rdkit_mol(mol)


def ring_digits(smiles):
    return Counter(re.findall(r"%\d\d|\d", re.sub(r"\[[^\]]*\]", "", smiles)))


def test_empty_molecule():
    assert SmilesGenerator().create_smiles(build_graph([], [])) == ""


def test_aromatic_ring_with_explicit_hydrogens(flagged_benzene_with_hydrogens):
    smiles = SmilesGenerator().create_smiles(flagged_benzene_with_hydrogens)
    assert "." not in smiles
    assert smiles.count("c") == 6
    assert "C" not in smiles.replace("[H]", "")
    assert smiles.count("[H]") == 6
    assert ring_digits(smiles) == {"1": 2}
    assert rdkit_canonical(smiles) == "c1ccccc1"


def test_disconnected_fragments_joined_with_a_dot():
    graph = build_graph(
        [
            ("C", {"hydrogen_count": 3}),
            ("C", {"hydrogen_count": 3}),
            ("O", {"hydrogen_count": 1}),
            ("O", {"hydrogen_count": 1}),
        ],
        [(0, 1, {}), (2, 3, {})],
    )
    assert SmilesGenerator().create_smiles(graph) == "CC.OO"


def test_chiral_center_viewed_from_wedged_parent():
    generator = SmilesGenerator()
    assert generator.create_chiral_smiles(halomethane(F=UP)) == "F[C@](Cl)(Br)I"


def test_mirror_image_gives_the_other_enantiomer():
    graph = halomethane(F=UP)
    graph.get_atom(2).point_2d = (1.0, 0.0)
    graph.get_atom(4).point_2d = (-1.0, 0.0)
    smiles = SmilesGenerator().create_chiral_smiles(graph)
    assert smiles == "F[C@](Cl)(I)Br"
    assert rdkit_canonical(smiles) != rdkit_canonical("F[C@](Cl)(Br)I")


def test_chiral_root_atom_uses_its_first_child():
    graph = halomethane(F=UP)
    graph.get_atom(1).element = "Si"
    assert SmilesGenerator().create_chiral_smiles(graph) == "[C@]([Si])(Cl)(Br)I"


def test_square_planar_center():
    graph = halomethane(F=UP, Cl=UP, Br=DOWN, I=DOWN)
    graph.get_atom(0).element = "Pt"
    assert SmilesGenerator().create_chiral_smiles(graph) == "F[Pt@SP1](Cl)(Br)I"


def test_unresolvable_center_is_written_plain():
    graph = halomethane(F=UP, I=DOWN)
    graph.get_atom(2).point_2d = (0.7, -0.7)
    graph.get_atom(4).point_2d = (-1.0, 0.0)
    assert SmilesGenerator().create_chiral_smiles(graph) == "FC(Cl)(Br)I"


def test_non_chiral_output_ignores_wedges():
    assert SmilesGenerator().create_smiles(halomethane(F=UP)) == "FC(Cl)(Br)I"


def test_chiral_config_default():
    generator = SmilesGenerator(SmilesGeneratorConfig(chiral=True))
    assert "@" in generator.create_smiles(halomethane(F=UP))


def test_chiral_output_needs_coordinates(ethane):
    with pytest.raises(MissingCoordinatesError) as excinfo:
        SmilesGenerator().create_chiral_smiles(ethane)
    assert excinfo.value.atom_index == 0
    assert "Atom number 0 has no 2D coordinates" in str(excinfo.value)
    # the same molecule is fine without chirality
    assert SmilesGenerator().create_smiles(ethane) == "CC"


@pytest.mark.parametrize("cis, reference", [(False, "F/C=C/F"), (True, "F/C=C\\F")])
def test_double_bond_configuration(cis, reference):
    graph = difluoroethene(cis=cis)
    flags = [False, True, False, False, False]
    smiles = SmilesGenerator().create_smiles(graph, double_bond_configuration=flags)
    assert smiles.count("/") + smiles.count("\\") == 2
    assert rdkit_canonical(smiles) == rdkit_canonical(reference)


def test_trans_difluoroethene_tokens():
    graph = difluoroethene(cis=False)
    smiles = SmilesGenerator().create_chiral_smiles(
        graph, double_bond_configuration=[False, True, False, False, False]
    )
    assert smiles == "[H]/C(F)=C(/[H])F"


def test_unflagged_double_bond_has_no_direction():
    smiles = SmilesGenerator().create_smiles(difluoroethene(cis=False))
    assert smiles == "[H]C(F)=C([H])F"


def test_double_bond_mark_is_dropped_when_the_other_end_is_undecided():
    graph = difluoroethene(cis=False)
    # the second hydrogen lies on the double bond axis
    graph.get_atom(5).point_2d = (2.0, 0.0)
    smiles = SmilesGenerator().create_smiles(
        graph, double_bond_configuration=[False, True, False, False, False]
    )
    assert smiles == "[H]C(F)=C([H])F"


def test_is_valid_double_bond_configuration():
    graph = difluoroethene(cis=True)
    generator = SmilesGenerator()
    assert generator.is_valid_double_bond_configuration(graph, graph.get_bond(1, 2))
    assert not generator.is_valid_double_bond_configuration(graph, graph.get_bond(1, 4))


def test_charge_and_isotope_formatting():
    generator = SmilesGenerator()
    assert generator.create_smiles(build_graph([("Ca", {"formal_charge": 2})], [])) == "[Ca+2]"
    natural = build_graph([("C", {"mass_number": 12, "hydrogen_count": 4})], [])
    assert generator.create_smiles(natural) == "C"
    labelled = build_graph([("C", {"mass_number": 13, "hydrogen_count": 4})], [])
    assert generator.create_smiles(labelled) == "[13C]"


def test_bracket_hydrogens_config():
    graph = build_graph([("N", {"formal_charge": 1, "hydrogen_count": 4})], [])
    generator = SmilesGenerator(SmilesGeneratorConfig(write_bracket_hydrogens=True))
    assert generator.create_smiles(graph) == "[NH4+]"


def test_pseudo_atom():
    graph = build_graph(
        [("R", {"is_pseudo": True}), ("C", {"hydrogen_count": 3})], [(0, 1, {})]
    )
    assert SmilesGenerator().create_smiles(graph) == "[*]C"


def test_kekule_input_is_written_aromatic(kekule_benzene):
    assert SmilesGenerator().create_smiles(kekule_benzene) == "c1ccccc1"


def test_ring_search_timeout_falls_back_to_input_flags(kekule_benzene, caplog):
    generator = SmilesGenerator(SmilesGeneratorConfig(ring_search_timeout=-1.0))
    with caplog.at_level(logging.WARNING):
        smiles = generator.create_smiles(kekule_benzene)
    assert "c" not in smiles
    assert smiles.count("=") >= 3
    assert rdkit_canonical(smiles) == "c1ccccc1"
    assert "Skipping aromaticity" in caplog.text


def test_precomputed_rings_are_used_once(kekule_benzene):
    class CountingFinder(AllRingsFinder):
        calls = 0

        def find_all_rings(self, graph):
            CountingFinder.calls += 1
            return super().find_all_rings(graph)

    generator = SmilesGenerator(ring_finder=CountingFinder())
    rings = AllRingsFinder().find_all_rings(kekule_benzene)
    assert generator.set_rings(rings).create_smiles(kekule_benzene) == "c1ccccc1"
    assert CountingFinder.calls == 0
    generator.create_smiles(kekule_benzene)
    assert CountingFinder.calls == 1


def test_ring_finder_can_be_replaced():
    generator = SmilesGenerator()
    finder = AllRingsFinder(timeout=1.0)
    generator.ring_finder = finder
    assert generator.ring_finder is finder


def test_ring_stereo_marks():
    points = [
        (math.cos(k * math.pi / 3), math.sin(k * math.pi / 3)) for k in range(6)
    ]
    atoms = [("C", {"hydrogen_count": 1, "point_2d": points[0]})]
    atoms += [("C", {"hydrogen_count": 2, "point_2d": p}) for p in points[1:]]
    atoms.append(("C", {"hydrogen_count": 3, "point_2d": (2.0, 0.0)}))
    bonds = [(i, (i + 1) % 6, {}) for i in range(6)] + [(0, 6, {"stereo": UP})]
    smiles = SmilesGenerator().create_chiral_smiles(build_graph(atoms, bonds))
    assert "/" in smiles
    assert rdkit_canonical(smiles) == rdkit_canonical("CC1CCCCC1")


@pytest.mark.parametrize("smiles", ROUND_TRIP_SMILES)
def test_round_trip_connectivity(smiles):
    graph = graph_from_smiles(smiles)
    generated = SmilesGenerator().create_smiles(graph)
    parsed = Chem.MolFromSmiles(generated)
    assert parsed is not None
    assert parsed.GetNumAtoms() == graph.atom_count
    assert parsed.GetNumBonds() == graph.bond_count
    assert Chem.MolToSmiles(parsed) == rdkit_canonical(smiles)
    assert all(count == 2 for count in ring_digits(generated).values())


@pytest.mark.parametrize("smiles", ROUND_TRIP_SMILES)
def test_output_does_not_depend_on_atom_order(smiles):
    generator = SmilesGenerator()
    expected = generator.create_smiles(graph_from_smiles(smiles))
    for seed in range(3):
        assert generator.create_smiles(graph_from_smiles(smiles, seed)) == expected


def test_kekule_ring_does_not_depend_on_atom_order():
    generator = SmilesGenerator()
    outputs = {
        generator.create_smiles(graph_from_smiles("C1=CC=CC=CC=C1", seed))
        for seed in range(8)
    }
    assert len(outputs) == 1
    assert rdkit_canonical(outputs.pop()) == rdkit_canonical("C1=CC=CC=CC=C1")


def test_repeated_calls_are_identical(naphthalene):
    generator = SmilesGenerator()
    first = generator.create_smiles(naphthalene)
    assert generator.create_smiles(naphthalene) == first
    assert ring_digits(first) == {"1": 2, "2": 2}


def test_reaction_smiles(ethanol):
    acetaldehyde = graph_from_smiles("CC=O")
    water = build_graph([("O", {"hydrogen_count": 2})], [])
    reaction = Reaction(reactants=[ethanol], agents=[], products=[acetaldehyde])
    generator = SmilesGenerator()
    assert generator.create_reaction_smiles(reaction) == "OCC>>O=CC"
    reaction.agents.append(water)
    assert generator.create_reaction_smiles(reaction) == "OCC>O>O=CC"


def test_shared_generator_across_threads():
    generator = SmilesGenerator()
    graphs = [graph_from_smiles(smiles) for smiles in ROUND_TRIP_SMILES]
    expected = [generator.create_smiles(graph) for graph in graphs]
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(generator.create_smiles, graphs * 3))
    assert results == expected * 3
