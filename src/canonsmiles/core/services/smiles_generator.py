"""
Canonical SMILES generation for molecules and reactions.

Splits the input into connected fragments and, per fragment, labels the
atoms canonically, gathers ring data, builds the spanning tree and writes
it with the token emitter. Fragments are joined with "." in the order the
connectivity partition returns them.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Sequence, Set
import numpy as np
from ..domain.implementations.all_rings_finder import (
    AllRingsFinder,
    DEFAULT_RING_SEARCH_TIMEOUT,
)
from ..domain.implementations.hueckel_aromaticity_detector import (
    HueckelAromaticityDetector,
)
from ..domain.interfaces.aromaticity_detector import AromaticityDetector
from ..domain.interfaces.ring_finder import RingFinder
from ..domain.models.bond import Bond
from ..domain.models.molecular_graph import MolecularGraph
from ..domain.models.reaction import Reaction
from ..domain.models.ring_set import RingSet
from ..domain.models.spanning_tree import SpanningTree
from ..exceptions import MissingCoordinatesError
from ..utils.benchmarking import Timer
from .canonical_labeler import CanonicalLabeler
from .ring_context import RingContext, RingContextProvider
from .spanning_tree import SpanningTreeBuilder
from .stereo_resolver import StereoResolver
from .token_emitter import TokenEmitter, compute_ring_marks

logger = logging.getLogger(__name__)


@dataclass
class SmilesGeneratorConfig:
    """Configuration for SmilesGenerator.

    Attributes:
        chiral: Write stereo descriptors from wedge bonds by default
        ring_search_timeout: Seconds the default ring finder may spend
        write_bracket_hydrogens: Write implicit hydrogens inside brackets
    """

    chiral: bool = False
    ring_search_timeout: float = DEFAULT_RING_SEARCH_TIMEOUT
    write_bracket_hydrogens: bool = False


@dataclass
class GenerationContext:
    """Scratch state of one fragment, discarded after it has been written."""

    graph: MolecularGraph
    chiral: bool = False
    configured_bonds: Set[FrozenSet[int]] = field(default_factory=set)
    ranks: Dict[int, int] = field(default_factory=dict)
    ring_context: Optional[RingContext] = None
    tree: Optional[SpanningTree] = None
    ring_marks: Dict[int, str] = field(default_factory=dict)
    smiles: str = ""


class SmilesGenerator:
    """Generates canonical, optionally chiral, SMILES strings.

    Public methods hold an instance lock, so a shared generator serialises
    concurrent calls.
    """

    def __init__(
        self,
        config: Optional[SmilesGeneratorConfig] = None,
        ring_finder: Optional[RingFinder] = None,
        aromaticity_detector: Optional[AromaticityDetector] = None,
    ):
        """Initialize generator.

        Args:
            config: Generation options
            ring_finder: Ring perception; AllRingsFinder by default
            aromaticity_detector: Aromaticity perception; RDKit based by default
        """
        self.config = config or SmilesGeneratorConfig()
        self._ring_finder = ring_finder or AllRingsFinder(self.config.ring_search_timeout)
        self.aromaticity_detector = aromaticity_detector or HueckelAromaticityDetector()
        self.labeler = CanonicalLabeler()
        self.tree_builder = SpanningTreeBuilder()
        self._rings: Optional[RingSet] = None
        self._lock = threading.RLock()

    @property
    def ring_finder(self) -> RingFinder:
        return self._ring_finder

    @ring_finder.setter
    def ring_finder(self, ring_finder: RingFinder) -> None:
        with self._lock:
            self._ring_finder = ring_finder

    def set_rings(self, rings: RingSet) -> "SmilesGenerator":
        """Use precomputed rings for the next create_smiles call instead of a search."""
        with self._lock:
            self._rings = rings
        return self

    def create_smiles(
        self,
        molecule: MolecularGraph,
        chiral: bool = False,
        double_bond_configuration: Optional[Sequence[bool]] = None,
    ) -> str:
        """
        Generate the canonical SMILES of a molecule.

        Args:
            molecule: Molecule, possibly made of several fragments
            chiral: Write stereo descriptors read from wedge bonds and 2D coordinates
            double_bond_configuration: One flag per bond index; flagged double
                bonds are written with their cis/trans configuration

        Returns:
            SMILES string, fragments separated by "."

        Raises:
            MissingCoordinatesError: If chiral output is requested and an atom
                has no 2D coordinates
        """
        with self._lock:
            try:
                chiral = chiral or self.config.chiral
                if molecule.atom_count == 0:
                    return ""
                if chiral:
                    self._check_coordinates(molecule)
                configured = self._configured_bonds(molecule, double_bond_configuration)
                fragments = molecule.partition_into_molecules()
                logger.debug(
                    "Generating SMILES for %d atoms in %d fragment(s)",
                    molecule.atom_count,
                    len(fragments),
                )
                return ".".join(
                    self._generate_fragment(fragment, chiral, configured).smiles
                    for fragment in fragments
                )
            finally:
                self._rings = None

    def create_chiral_smiles(
        self,
        molecule: MolecularGraph,
        double_bond_configuration: Optional[Sequence[bool]] = None,
    ) -> str:
        """Generate a SMILES with stereo descriptors; see create_smiles."""
        return self.create_smiles(molecule, True, double_bond_configuration)

    def create_reaction_smiles(self, reaction: Reaction) -> str:
        """Reaction SMILES of the form reactants>agents>products."""
        with self._lock:
            return ">".join(
                ".".join(self.create_smiles(molecule) for molecule in molecules)
                for molecules in (reaction.reactants, reaction.agents, reaction.products)
            )

    def is_valid_double_bond_configuration(
        self, molecule: MolecularGraph, bond: Bond
    ) -> bool:
        """True if a double bond of ``molecule`` can carry a cis/trans configuration."""
        with self._lock:
            resolver = StereoResolver(molecule, RingContext(molecule))
            return resolver.is_valid_double_bond_configuration(bond)

    def _generate_fragment(
        self,
        graph: MolecularGraph,
        chiral: bool,
        configured_bonds: Set[FrozenSet[int]],
    ) -> GenerationContext:
        context = GenerationContext(
            graph,
            chiral=chiral,
            configured_bonds={
                bond.key for bond in graph.bonds if bond.key in configured_bonds
            },
        )
        with Timer(f"fragment of {graph.atom_count} atoms"):
            context.ranks = self.labeler.label(graph)
            provider = RingContextProvider(self._ring_finder, self.aromaticity_detector)
            context.ring_context = provider.build(graph, self._rings)

            resolver = None
            if chiral or context.configured_bonds:
                resolver = StereoResolver(
                    graph, context.ring_context, context.configured_bonds
                )
            if chiral:
                context.ring_marks = compute_ring_marks(
                    graph, context.ring_context, resolver
                )

            context.tree = self.tree_builder.build(graph, context.ranks)
            emitter = TokenEmitter(
                graph,
                context.tree,
                context.ring_context,
                resolver=resolver,
                chiral=chiral,
                ring_marks=context.ring_marks,
                write_bracket_hydrogens=self.config.write_bracket_hydrogens,
            )
            context.smiles = emitter.emit()
        return context

    @staticmethod
    def _check_coordinates(molecule: MolecularGraph) -> None:
        missing = np.flatnonzero(np.isnan(molecule.get_coordinates()).any(axis=1))
        if missing.size:
            raise MissingCoordinatesError(int(missing[0]))

    @staticmethod
    def _configured_bonds(
        molecule: MolecularGraph, flags: Optional[Sequence[bool]]
    ) -> Set[FrozenSet[int]]:
        """Translate per-index bond flags into bond keys."""
        if not flags:
            return set()
        return {bond.key for bond, flag in zip(molecule.bonds, flags) if flag}
