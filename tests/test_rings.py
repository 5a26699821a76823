import logging

import pytest

from canonsmiles.core.domain.implementations import AllRingsFinder, HueckelAromaticityDetector
from canonsmiles.core.domain.models import Ring, RingSet
from canonsmiles.core.exceptions import RingSearchTimeoutError
from canonsmiles.core.services.ring_context import RingContext, RingContextProvider


def test_all_rings_of_naphthalene(naphthalene):
    rings = AllRingsFinder().find_all_rings(naphthalene)
    assert sorted(len(ring) for ring in rings) == [6, 6, 10]
    assert len(rings.partition()) == 1


def test_chain_has_no_rings(ethanol):
    assert len(AllRingsFinder().find_all_rings(ethanol)) == 0


def test_ring_search_timeout(cyclohexane, caplog):
    finder = AllRingsFinder(timeout=-1.0)
    with caplog.at_level(logging.WARNING):
        with pytest.raises(RingSearchTimeoutError):
            finder.find_all_rings(cyclohexane)
    assert "Ring search aborted" in caplog.text


def test_ring_membership_queries():
    rings = RingSet([Ring((0, 1, 2)), Ring((2, 3, 4, 5)), Ring((7, 8, 9))])
    assert len(rings.rings_containing(2)) == 2
    assert rings.rings_containing_bond(0, 2) == [Ring((0, 1, 2))]
    assert rings.rings_containing_bond(0, 3) == []
    assert rings.atom_ids() == {0, 1, 2, 3, 4, 5, 7, 8, 9}
    systems = rings.partition()
    assert sorted(len(system) for system in systems) == [1, 2]
    assert len(rings.restricted_to(range(6))) == 2


def test_detector_finds_kekule_benzene_aromatic(kekule_benzene):
    rings = AllRingsFinder().find_all_rings(kekule_benzene)
    result = HueckelAromaticityDetector().detect(kekule_benzene, rings)
    assert result.atom_ids == set(range(6))
    assert len(result.bond_keys) == 6


def test_detector_leaves_cyclohexane_alone(cyclohexane):
    rings = AllRingsFinder().find_all_rings(cyclohexane)
    result = HueckelAromaticityDetector().detect(cyclohexane, rings)
    assert not result.atom_ids
    assert not result.bond_keys


def test_detector_skips_ring_free_molecules(ethanol):
    result = HueckelAromaticityDetector().detect(ethanol, RingSet())
    assert not result.atom_ids


def test_provider_falls_back_when_ring_search_times_out(flagged_benzene_with_hydrogens):
    provider = RingContextProvider(
        AllRingsFinder(timeout=-1.0), HueckelAromaticityDetector()
    )
    context = provider.build(flagged_benzene_with_hydrogens)
    assert not context.available
    assert len(context.rings) == 0
    # flags present on the input are still honoured
    assert context.is_aromatic_atom(0)
    assert not context.is_aromatic_atom(6)


def test_provider_uses_precomputed_rings(kekule_benzene):
    class FailingFinder(AllRingsFinder):
        def find_all_rings(self, graph):
            raise AssertionError("ring search should have been skipped")

    provider = RingContextProvider(FailingFinder(), HueckelAromaticityDetector())
    rings = RingSet([Ring(tuple(range(6))), Ring((10, 11, 12))])
    context = provider.build(kekule_benzene, rings)
    assert context.available
    assert len(context.rings) == 1
    assert context.is_aromatic_bond(kekule_benzene.get_bond(0, 1))


def test_unavailable_context(ethane):
    context = RingContext.unavailable(ethane)
    assert not context.available
    assert context.ring_systems() == []
