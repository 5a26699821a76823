"""
Serialization of a spanning tree into SMILES tokens.

The emitter walks the chains of a SpanningTree in order, writing bond
symbols, atom tokens, ring closure labels and branch parentheses. Chiral
centers are resolved on the fly: the part of the chain following a center
is rearranged before the center itself is written.
"""

import logging
from typing import Dict, List, Optional
from ..domain.models.atom import Atom, Hybridization
from ..domain.models.bond import BondStereo, BondType
from ..domain.models.molecular_graph import MolecularGraph
from ..domain.models.spanning_tree import Branch, SpanningTree, head_atom
from ..exceptions import StereoConfigurationError
from ..utils.elements import ORGANIC_SUBSET, major_isotope_mass_number
from .ring_context import RingContext
from .stereo_resolver import StereoResolver

logger = logging.getLogger(__name__)

UP_MARK = "/"
DOWN_MARK = "\\"


def generate_charge_string(atom: Atom) -> str:
    """Charge suffix: "" for neutral, "+" / "-" for +-1, sign and digits otherwise."""
    charge = atom.formal_charge
    if charge == 0:
        return ""
    sign = "+" if charge > 0 else "-"
    if abs(charge) == 1:
        return sign
    return f"{sign}{abs(charge)}"


def generate_mass_string(atom: Atom) -> str:
    """Mass prefix, empty when unset or equal to the most abundant isotope."""
    if atom.mass_number is None:
        return ""
    if atom.mass_number == major_isotope_mass_number(atom.element):
        return ""
    return str(atom.mass_number)


def ring_closure_label(marker: int) -> str:
    if marker < 10:
        return str(marker)
    if marker < 100:
        return f"%{marker}"
    return f"%({marker})"


def opposite_mark(mark: str) -> str:
    return DOWN_MARK if mark == UP_MARK else UP_MARK


def compute_ring_marks(
    graph: MolecularGraph, ring_context: RingContext, resolver: StereoResolver
) -> Dict[int, str]:
    """
    Up/down marks for wedge-bearing ring atoms that are not stereocenters.

    Works per fused ring system. A system with a single such atom marks
    every one of its atoms as up.
    """
    marks: Dict[int, str] = {}
    if not ring_context.available:
        return marks
    for system in ring_context.ring_systems():
        atom_ids = sorted(system.atom_ids(), key=graph.atom_index)
        system_marks: Dict[int, str] = {}
        for atom_id in atom_ids:
            if resolver.is_stereo(atom_id):
                continue
            partner = resolver.has_wedges(atom_id)
            if partner is None:
                continue
            stereo = graph.get_bond(atom_id, partner).stereo
            system_marks[atom_id] = UP_MARK if stereo is BondStereo.UP else DOWN_MARK
        if len(system_marks) == 1:
            system_marks = {atom_id: UP_MARK for atom_id in atom_ids}
        marks.update(system_marks)
    return marks


class TokenEmitter:
    """Writes one fragment's spanning tree as a SMILES string."""

    def __init__(
        self,
        graph: MolecularGraph,
        tree: SpanningTree,
        ring_context: RingContext,
        resolver: Optional[StereoResolver] = None,
        chiral: bool = False,
        ring_marks: Optional[Dict[int, str]] = None,
        write_bracket_hydrogens: bool = False,
    ):
        self.graph = graph
        self.tree = tree
        self.ring_context = ring_context
        self.resolver = resolver
        self.chiral = chiral and resolver is not None
        self.ring_marks = ring_marks or {}
        self.write_bracket_hydrogens = write_bracket_hydrogens
        # directional tokens waiting to be written in front of an atom
        self._pending: Dict[int, str] = {}
        self._start_tokens: Dict[int, str] = {}
        self._view_from: Dict[int, int] = {}
        # output positions of opening marks whose closing mark is not placed yet
        self._unconfirmed: Dict[int, int] = {}
        if resolver is not None:
            resolver.tree = tree

    def emit(self) -> str:
        out: List[str] = []
        self._write_chain(self.tree.root, None, out)
        for atom_id, index in self._unconfirmed.items():
            logger.debug("Dropping unmatched double bond mark before atom %d", atom_id)
            out[index] = ""
        return "".join(out)

    # ------------------------------------------------------------------
    # Tokens

    def bond_symbol(self, atom1_id: int, atom2_id: int) -> str:
        """"=" or "#" for non-aromatic double and triple bonds, "" otherwise."""
        bond = self.graph.get_bond(atom1_id, atom2_id)
        if self._is_aromatic_pair(atom1_id, atom2_id):
            return ""
        if bond.bond_type is BondType.DOUBLE:
            return "="
        if bond.bond_type is BondType.TRIPLE:
            return "#"
        return ""

    def atom_token(self, atom: Atom, stereo_marker: Optional[str] = None) -> str:
        if atom.is_pseudo:
            return "[*]"
        mass = generate_mass_string(atom)
        charge = generate_charge_string(atom)
        lower_case = self.ring_context.is_aromatic_atom(atom.atom_id) or (
            atom.hybridization is Hybridization.SP2
        )
        # an aromatic nitrogen or phosphorus hydrogen is not implied by "n" or "p"
        aromatic_hydrogen = (
            lower_case and atom.hydrogen_count > 0 and atom.element in ("N", "P")
        )
        brackets = bool(
            atom.element not in ORGANIC_SUBSET
            or mass
            or charge
            or stereo_marker
            or aromatic_hydrogen
        )
        symbol = atom.element.lower() if lower_case else atom.element
        if not brackets:
            return symbol
        hydrogens = ""
        if (self.write_bracket_hydrogens or lower_case) and atom.hydrogen_count:
            hydrogens = "H" if atom.hydrogen_count == 1 else f"H{atom.hydrogen_count}"
        return f"[{mass}{symbol}{stereo_marker or ''}{hydrogens}{charge}]"

    def _is_aromatic_pair(self, atom1_id: int, atom2_id: int) -> bool:
        bond = self.graph.get_bond(atom1_id, atom2_id)
        return self.ring_context.is_aromatic_bond(bond) or (
            self.ring_context.is_aromatic_atom(atom1_id)
            and self.ring_context.is_aromatic_atom(atom2_id)
        )

    def _accepts_direction(self, atom1_id: int, atom2_id: int) -> bool:
        bond = self.graph.get_bond(atom1_id, atom2_id)
        return bond.bond_type is BondType.SINGLE and not self._is_aromatic_pair(
            atom1_id, atom2_id
        )

    # ------------------------------------------------------------------
    # Tree walk

    def _write_chain(self, chain: Branch, parent: Optional[int], out: List[str]) -> None:
        previous = parent
        i = 0
        # the chain may grow while a stereocenter rearranges it
        while i < len(chain.nodes):
            node = chain.nodes[i]
            if isinstance(node, Branch):
                is_last = i == len(chain.nodes) - 1
                if not is_last:
                    out.append("(")
                self._write_chain(node, previous, out)
                if not is_last:
                    out.append(")")
            else:
                if previous is not None:
                    out.append(self.bond_symbol(previous, node))
                marker = self._resolve_center(chain, i, previous)
                self._write_atom(chain, i, previous, marker, out)
                previous = node
            i += 1

    def _write_atom(
        self,
        chain: Branch,
        position: int,
        parent: Optional[int],
        stereo_marker: Optional[str],
        out: List[str],
    ) -> None:
        atom_id = chain.nodes[position]
        token = self._pending.pop(atom_id, None)
        if self._opens_double_bond(atom_id, parent):
            if token is None:
                token = UP_MARK
                self._unconfirmed[atom_id] = len(out)
            self._start_tokens[atom_id] = token
            self._view_from[atom_id] = parent
        if token and parent is not None and self._accepts_direction(parent, atom_id):
            out.append(token)

        out.append(self.atom_token(self.graph.get_atom(atom_id), stereo_marker))

        first_child = None
        if position + 1 < len(chain.nodes):
            first_child = head_atom(chain.nodes[position + 1])
        if first_child is not None and parent in self._start_tokens:
            self._close_double_bond(parent, atom_id, first_child)

        for closure in self.tree.ring_closures(atom_id):
            out.append(self.bond_symbol(atom_id, closure.partner(atom_id)))
            out.append(ring_closure_label(closure.marker))

        mark = self.ring_marks.get(atom_id)
        if (
            mark
            and first_child is not None
            and first_child not in self._pending
            and self._accepts_direction(atom_id, first_child)
        ):
            self._pending[first_child] = mark

    # ------------------------------------------------------------------
    # Stereocenters

    def _resolve_center(
        self, chain: Branch, position: int, parent: Optional[int]
    ) -> Optional[str]:
        """Rearrange the chain after a stereocenter; the marker to write, if any."""
        if not self.chiral:
            return None
        center = chain.nodes[position]
        center_class = self.resolver.classify_center(center)
        if center_class is None:
            return None
        closures = self.tree.ring_closures(center)
        start = position + 1
        view_from = parent
        if parent is None:
            # the first atom is viewed from its first child
            if closures or position + 1 >= len(chain.nodes):
                logger.debug("Writing root atom %d without stereo", center)
                return None
            view_from = head_atom(chain.nodes[position + 1])
            start = position + 2
        try:
            slots = self.resolver.neighbour_order(center, view_from, center_class)
        except StereoConfigurationError as e:
            logger.debug("Writing atom %d without stereo: %s", center, e)
            return None
        if slots is None or not self.resolver.apply_neighbour_order(
            chain, start, slots, len(closures)
        ):
            logger.debug(
                "Writing atom %d without stereo: unresolved %s neighbour order",
                center,
                center_class.geometry.name.lower(),
            )
            return None
        return center_class.marker

    # ------------------------------------------------------------------
    # Double bonds

    def _opens_double_bond(self, atom_id: int, parent: Optional[int]) -> bool:
        if self.resolver is None or not self.resolver.configured_bonds or parent is None:
            return False
        if not self._accepts_direction(parent, atom_id):
            return False
        try:
            if not self.resolver.is_start_of_double_bond(atom_id, parent):
                return False
            return any(
                self.tree.parents.get(n) == atom_id
                and self.resolver.is_end_of_double_bond(n, atom_id)
                for n in self.graph.get_connected_atoms(atom_id)
            )
        except StereoConfigurationError as e:
            logger.debug("Skipping double bond at atom %d: %s", atom_id, e)
            return False

    def _close_double_bond(self, start_id: int, end_id: int, view_to: int) -> None:
        """Queue the token for the bond leaving the end atom of a double bond."""
        if not self._accepts_direction(end_id, view_to):
            return
        try:
            if not self.resolver.is_end_of_double_bond(end_id, start_id):
                return
            cis = self.resolver.same_side(
                self._view_from[start_id], start_id, end_id, view_to
            )
        except StereoConfigurationError as e:
            logger.debug("Skipping double bond %d=%d: %s", start_id, end_id, e)
            return
        self._unconfirmed.pop(start_id, None)
        start_token = self._start_tokens[start_id]
        self._pending[view_to] = opposite_mark(start_token) if cis else start_token
