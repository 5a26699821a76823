"""
Stereo descriptors for chiral SMILES.

Wedge drawings around a stereocenter are classified into a fixed set of
cases. Each case maps to an explicit neighbour order (see
``TETRAHEDRAL_ORDERS``), and the spanning tree after the center is then
rearranged so that neighbours appear in that order behind an ``@``.
Cis/trans double bonds are decided from the 2D drawing.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Union
from ..domain.models.bond import Bond, BondStereo, BondType
from ..domain.models.molecular_graph import MolecularGraph
from ..domain.models.spanning_tree import Branch, Node, SpanningTree, head_atom
from ..exceptions import StereoConfigurationError
from ..utils.geometry import give_angle, give_angle_from_middle, is_left, side_of_line
from .morgan_numbers import get_morgan_numbers, get_morgan_numbers_with_element_symbol
from .ring_context import RingContext

logger = logging.getLogger(__name__)

NONE = BondStereo.NONE
UP = BondStereo.UP
DOWN = BondStereo.DOWN
UNDEFINED = BondStereo.UNDEFINED

# Nitrogen double bonds only count as configured when bent by more than this.
MIN_NITROGEN_BEND = math.pi / 10


class Side(Enum):
    """Position of a neighbour relative to the line parent -> center."""

    ANY = auto()
    LEFT = auto()
    RIGHT = auto()


@dataclass(frozen=True)
class WedgeSlot:
    """The neighbour with this wedge (on this side) goes to ``slot``."""

    stereo: BondStereo
    slot: int
    side: Side = Side.ANY


@dataclass(frozen=True)
class AngleSlots:
    """All remaining neighbours, counter-clockwise from the parent bond."""


@dataclass(frozen=True)
class AnglePair:
    """Two neighbours with this wedge: the larger angle takes ``larger_slot``."""

    stereo: BondStereo
    larger_slot: int
    smaller_slot: int


@dataclass(frozen=True)
class PlainSideSwitch:
    """Rules chosen by whether a plain neighbour lies left of parent -> center."""

    left: Tuple[WedgeSlot, ...]
    right: Tuple[WedgeSlot, ...]


Rule = Union[WedgeSlot, AngleSlots, AnglePair, PlainSideSwitch]

_CASE_1_PLAIN_PARENT = PlainSideSwitch(
    left=(WedgeSlot(NONE, 0), WedgeSlot(UP, 2), WedgeSlot(DOWN, 1)),
    right=(WedgeSlot(UP, 1), WedgeSlot(NONE, 0), WedgeSlot(DOWN, 2)),
)

# (tetrahedral case, wedge of the parent bond) -> slot rules for the three
# other neighbours. Cases: 1 = one up one down, 2 = two up two down on
# opposite sides, 3 = one up, 4 = one down, 5 = two down one up,
# 6 = two up one down.
TETRAHEDRAL_ORDERS: Dict[Tuple[int, BondStereo], Tuple[Rule, ...]] = {
    (1, DOWN): (
        WedgeSlot(NONE, 2, Side.LEFT),
        WedgeSlot(NONE, 1, Side.RIGHT),
        WedgeSlot(UP, 0),
    ),
    (1, UP): (
        WedgeSlot(NONE, 1, Side.LEFT),
        WedgeSlot(NONE, 2, Side.RIGHT),
        WedgeSlot(DOWN, 0),
    ),
    (1, NONE): (_CASE_1_PLAIN_PARENT,),
    (1, UNDEFINED): (_CASE_1_PLAIN_PARENT,),
    (2, UP): (
        WedgeSlot(DOWN, 1, Side.LEFT),
        WedgeSlot(DOWN, 2, Side.RIGHT),
        WedgeSlot(UP, 0),
    ),
    (2, DOWN): (AnglePair(UP, larger_slot=0, smaller_slot=2), WedgeSlot(DOWN, 1)),
    (3, UP): (AngleSlots(),),
    (3, NONE): (AnglePair(NONE, larger_slot=1, smaller_slot=2), WedgeSlot(UP, 0)),
    (4, DOWN): (AngleSlots(),),
    (4, NONE): (AnglePair(NONE, larger_slot=1, smaller_slot=0), WedgeSlot(DOWN, 2)),
    (5, DOWN): (WedgeSlot(UP, 0), WedgeSlot(NONE, 2), WedgeSlot(DOWN, 1)),
    (5, UP): (
        WedgeSlot(DOWN, 0, Side.LEFT),
        WedgeSlot(DOWN, 2, Side.RIGHT),
        WedgeSlot(NONE, 1),
    ),
    (5, NONE): (
        WedgeSlot(DOWN, 0, Side.LEFT),
        WedgeSlot(DOWN, 2, Side.RIGHT),
        WedgeSlot(UP, 1),
    ),
    (5, UNDEFINED): (
        WedgeSlot(DOWN, 0, Side.LEFT),
        WedgeSlot(DOWN, 2, Side.RIGHT),
        WedgeSlot(UP, 1),
    ),
    (6, UP): (WedgeSlot(UP, 0), WedgeSlot(NONE, 2), WedgeSlot(DOWN, 1)),
    (6, DOWN): (
        WedgeSlot(UP, 2, Side.LEFT),
        WedgeSlot(UP, 0, Side.RIGHT),
        WedgeSlot(NONE, 1),
    ),
    (6, NONE): (
        WedgeSlot(UP, 2, Side.LEFT),
        WedgeSlot(UP, 0, Side.RIGHT),
        WedgeSlot(DOWN, 1),
    ),
    (6, UNDEFINED): (
        WedgeSlot(UP, 2, Side.LEFT),
        WedgeSlot(UP, 0, Side.RIGHT),
        WedgeSlot(DOWN, 1),
    ),
}

SQUARE_PLANAR_ORDER: Tuple[Rule, ...] = (AngleSlots(),)


class Geometry(Enum):
    """Kind of stereocenter."""

    TETRAHEDRAL = auto()
    SQUARE_PLANAR = auto()
    TRIGONAL_BIPYRAMIDAL = auto()
    OCTAHEDRAL = auto()


@dataclass(frozen=True)
class CenterClass:
    """Classification of a stereocenter."""

    geometry: Geometry
    case: int = 0

    @property
    def marker(self) -> str:
        return "@SP1" if self.geometry is Geometry.SQUARE_PLANAR else "@"


Slots = List[Optional[int]]


class StereoResolver:
    """Stereo perception over one fragment, bound to its spanning tree."""

    def __init__(
        self,
        graph: MolecularGraph,
        ring_context: RingContext,
        configured_bonds: Optional[Set[FrozenSet[int]]] = None,
    ):
        """
        Args:
            graph: Connected fragment
            ring_context: Rings and aromaticity of the fragment
            configured_bonds: Keys of the double bonds to evaluate for cis/trans
        """
        self.graph = graph
        self.ring_context = ring_context
        self.configured_bonds = configured_bonds or set()
        self.morgan_numbers = get_morgan_numbers(graph)
        self.morgan_symbols = get_morgan_numbers_with_element_symbol(graph)
        self.tree: Optional[SpanningTree] = None

    # ------------------------------------------------------------------
    # Local queries

    def _point(self, atom_id: int):
        point = self.graph.get_atom(atom_id).point_2d
        if point is None:
            raise StereoConfigurationError(f"Atom {atom_id} has no 2D coordinates")
        return point

    def _wedge(self, center: int, other: int) -> BondStereo:
        return self.graph.get_bond(center, other).stereo

    def _wedge_counts(self, atom_id: int) -> Tuple[int, int]:
        bonds = self.graph.get_connected_bonds(atom_id)
        up = sum(1 for bond in bonds if bond.stereo is UP)
        down = sum(1 for bond in bonds if bond.stereo is DOWN)
        return up, down

    def _connections(self, atom_id: int) -> int:
        """Explicit plus implicit hydrogen connections."""
        return self.graph.degree(atom_id) + self.graph.get_atom(atom_id).hydrogen_count

    def _is_bond_broken(self, atom1_id: int, atom2_id: int) -> bool:
        return self.tree is not None and self.tree.is_bond_broken(atom1_id, atom2_id)

    # ------------------------------------------------------------------
    # Stereocenter perception

    def is_stereo(self, atom_id: int) -> bool:
        """
        True if an atom is a wedge-annotated stereocenter.

        It needs 4 to 6 neighbours, at least one annotated bond, and
        neighbours that can be told apart by element or Morgan number.
        """
        neighbours = self.graph.get_connected_atoms(atom_id)
        if len(neighbours) < 4 or len(neighbours) > 6:
            return False
        if all(bond.stereo is NONE for bond in self.graph.get_connected_bonds(atom_id)):
            return False

        symbols = [self.graph.get_atom(n).symbol for n in neighbours]
        different_atoms = len(set(symbols))
        if different_atoms == len(neighbours):
            return True

        different_symbols = list(dict.fromkeys(symbols))
        only_relevant_if_two = [0, 0]
        if len(different_symbols) == 2:
            for symbol in symbols:
                only_relevant_if_two[0 if symbol == different_symbols[0] else 1] += 1
        seen: Dict[str, Set[int]] = {symbol: set() for symbol in different_symbols}
        distinct = {symbol: True for symbol in different_symbols}
        for neighbour, symbol in zip(neighbours, symbols):
            number = self.morgan_numbers[neighbour]
            if number in seen[symbol]:
                distinct[symbol] = False
            seen[symbol].add(number)
        symbols_with_distinct_numbers = sum(distinct.values())
        if symbols_with_distinct_numbers == len(different_symbols):
            return True

        enough_variety = symbols_with_distinct_numbers + different_atoms > 2 or (
            different_atoms == 2
            and only_relevant_if_two[0] > 1
            and only_relevant_if_two[1] > 1
        )
        if len(neighbours) in (5, 6) and enough_variety:
            return True
        return self.is_square_planar(atom_id) and enough_variety

    def stereos_are_opposite(self, atom_id: int) -> bool:
        """True if the first neighbour and the one across from it share a wedge."""
        neighbours = self.graph.get_connected_atoms(atom_id)
        center = self._point(atom_id)
        reference = self._point(neighbours[0])
        by_angle = sorted(
            neighbours[1:],
            key=lambda n: give_angle(center, reference, self._point(n)),
        )
        return self._wedge(atom_id, neighbours[0]) is self._wedge(atom_id, by_angle[1])

    def is_tetrahedral(self, atom_id: int, strict: bool = False) -> int:
        """Tetrahedral case number 1-6, or 0 if not a tetrahedral pattern."""
        if self.graph.degree(atom_id) != 4:
            return 0
        up, down = self._wedge_counts(atom_id)
        if up == 1 and down == 1:
            return 1
        if up == 2 and down == 2:
            return 2 if self.stereos_are_opposite(atom_id) else 0
        if strict:
            return 0
        return {(1, 0): 3, (0, 1): 4, (1, 2): 5, (2, 1): 6}.get((up, down), 0)

    def is_square_planar(self, atom_id: int) -> bool:
        if self.graph.degree(atom_id) != 4:
            return False
        return self._wedge_counts(atom_id) == (2, 2) and not self.stereos_are_opposite(
            atom_id
        )

    def is_trigonal_bipyramidal_or_octahedral(self, atom_id: int) -> int:
        """1 for trigonal bipyramidal, 2 for octahedral, 0 otherwise."""
        degree = self.graph.degree(atom_id)
        if degree not in (5, 6) or self._wedge_counts(atom_id) != (1, 1):
            return 0
        return 1 if degree == 5 else 2

    def classify_center(self, atom_id: int) -> Optional[CenterClass]:
        if not self.is_stereo(atom_id):
            return None
        polyhedral = self.is_trigonal_bipyramidal_or_octahedral(atom_id)
        if polyhedral:
            return CenterClass(
                Geometry.TRIGONAL_BIPYRAMIDAL if polyhedral == 1 else Geometry.OCTAHEDRAL
            )
        if self.is_square_planar(atom_id):
            return CenterClass(Geometry.SQUARE_PLANAR)
        case = self.is_tetrahedral(atom_id)
        if case:
            return CenterClass(Geometry.TETRAHEDRAL, case)
        return None

    def has_wedges(self, atom_id: int) -> Optional[int]:
        """First neighbour on an annotated bond, preferring heavy atoms."""
        neighbours = self.graph.get_connected_atoms(atom_id)
        for n in neighbours:
            if self._wedge(atom_id, n) is not NONE and self.graph.get_atom(n).symbol != "H":
                return n
        for n in neighbours:
            if self._wedge(atom_id, n) is not NONE:
                return n
        return None

    # ------------------------------------------------------------------
    # Neighbour order around a center

    def neighbour_order(
        self, center: int, parent: int, center_class: CenterClass
    ) -> Optional[Slots]:
        """
        Canonical order of the neighbours after ``parent``.

        Returns:
            One entry per slot, None where no neighbour was assigned, or None
            if the drawing does not match any known pattern
        """
        if center_class.geometry in (Geometry.TRIGONAL_BIPYRAMIDAL, Geometry.OCTAHEDRAL):
            return self._polyhedral_order(center, parent)
        if center_class.geometry is Geometry.SQUARE_PLANAR:
            rules = SQUARE_PLANAR_ORDER
        else:
            rules = TETRAHEDRAL_ORDERS.get(
                (center_class.case, self._wedge(center, parent))
            )
            if rules is None:
                return None
        slots: Slots = [None] * 3
        others = [
            n
            for n in self.graph.get_connected_atoms(center)
            if n != parent and not self._is_bond_broken(n, center)
        ]
        for rule in rules:
            self._apply_rule(rule, center, parent, others, slots)
        return slots

    def _apply_rule(
        self, rule: Rule, center: int, parent: int, others: List[int], slots: Slots
    ) -> None:
        if isinstance(rule, PlainSideSwitch):
            plain_is_left = any(
                self._wedge(center, n) is NONE and self._is_left_of(n, parent, center)
                for n in others
            )
            for sub_rule in rule.left if plain_is_left else rule.right:
                self._apply_rule(sub_rule, center, parent, others, slots)
        elif isinstance(rule, WedgeSlot):
            for n in others:
                if self._wedge(center, n) is not rule.stereo:
                    continue
                if rule.side is Side.LEFT and not self._is_left_of(n, parent, center):
                    continue
                if rule.side is Side.RIGHT and self._is_left_of(n, parent, center):
                    continue
                slots[rule.slot] = n
        elif isinstance(rule, AngleSlots):
            for i, n in enumerate(self._by_angle(center, parent, others)):
                if i < len(slots):
                    slots[i] = n
        elif isinstance(rule, AnglePair):
            pair = [n for n in others if self._wedge(center, n) is rule.stereo][:2]
            pair.sort(key=lambda n: self._angle(center, parent, n), reverse=True)
            for n, slot in zip(pair, (rule.larger_slot, rule.smaller_slot)):
                slots[slot] = n

    def _polyhedral_order(self, center: int, parent: int) -> Optional[Slots]:
        neighbours = self.graph.get_connected_atoms(center)
        size = len(neighbours) - 1
        slots: Slots = [None] * size
        parent_wedge = self._wedge(center, parent)
        others = [n for n in neighbours if n != parent]
        plain = [n for n in others if self._wedge(center, n) is NONE]

        if parent_wedge in (UP, DOWN):
            axial = [n for n in others if self._wedge(center, n) is not parent_wedge]
            axial = [n for n in axial if self._wedge(center, n) is not NONE]
            if len(plain) != size - 1 or len(axial) != 1:
                return None
            for i, n in enumerate(self._by_angle(center, parent, plain)):
                slots[i] = n
            slots[-1] = axial[0]
            return slots

        if parent_wedge is not NONE or len(plain) not in (2, 3):
            return None
        for n in others:
            if self._wedge(center, n) is UP:
                slots[0] = n
            elif self._wedge(center, n) is DOWN:
                slots[size - 2] = n
        def middle(n: int) -> float:
            return give_angle_from_middle(
                self._point(center), self._point(parent), self._point(n)
            )

        plain.sort(key=middle)
        slots[size - 1] = plain[-1]
        if len(plain) == 2:
            slots[size - 3] = plain[0]
            if middle(plain[1]) < 0:
                slots[size - 2], slots[0] = slots[0], slots[size - 2]
        else:
            slots[size - 3] = slots[size - 2]
            slots[size - 2] = plain[-2]
            slots[size - 4] = plain[-3]
        return slots

    def _angle(self, center: int, parent: int, n: int) -> float:
        return give_angle(self._point(center), self._point(parent), self._point(n))

    def _by_angle(self, center: int, parent: int, atoms: Sequence[int]) -> List[int]:
        return sorted(atoms, key=lambda n: self._angle(center, parent, n))

    def _is_left_of(self, n: int, parent: int, center: int) -> bool:
        return is_left(self._point(n), self._point(parent), self._point(center))

    # ------------------------------------------------------------------
    # Rearranging the spanning tree

    @staticmethod
    def apply_neighbour_order(
        chain: Branch, start: int, slots: Slots, ring_closures: int
    ) -> bool:
        """
        Rearrange the nodes following a center to match ``slots``.

        Args:
            chain: Chain holding the center
            start: Index of the first node after the center's view-from atom
            slots: Desired order; None marks a ring closure
            ring_closures: Number of ring closures on the center

        Returns:
            False, leaving the chain untouched, if the order cannot be applied
        """
        width = len(slots) - ring_closures
        window = chain.nodes[start : start + width]
        if width <= 0 or len(window) != width:
            return False
        ordered: List[Optional[Node]] = []
        for target in slots:
            match = None
            if target is not None:
                match = next((node for node in window if head_atom(node) == target), None)
            ordered.append(match)
        placed = [node for node in ordered if node is not None]
        if len(placed) != width or len({id(node) for node in placed}) != width:
            return False
        if ordered.count(None) > 1:
            logger.debug(
                "Neighbour order has %d ring closure slots, only one can be placed",
                ordered.count(None),
            )
            return False

        # Rotations keep the parity of the order.
        if ring_closures:
            while ordered[0] is not None:
                ordered.append(ordered.pop(0))
        else:
            first = window[0]
            while ordered[0] is not first:
                ordered.insert(0, ordered.pop())

        if isinstance(ordered[-1], Branch):
            last_branch = ordered[-1]
            for i, node in enumerate(ordered):
                if isinstance(node, int):
                    tail = chain.nodes[start + width :]
                    del chain.nodes[start + width :]
                    ordered[i] = Branch([node] + tail)
                    chain.nodes.extend(last_branch.nodes[1:])
                    ordered[-1] = last_branch.nodes[0]
                    break

        k = 0
        for node in ordered:
            if node is not None:
                chain.nodes[start + k] = node
                k += 1
        return True

    # ------------------------------------------------------------------
    # Double bond configurations

    def _is_aromatic(self, bond: Bond) -> bool:
        return self.ring_context.is_aromatic_bond(bond)

    def is_end_of_double_bond(
        self,
        atom_id: int,
        parent: Optional[int],
        configured: Optional[Set[FrozenSet[int]]] = None,
    ) -> bool:
        """True if ``atom_id`` closes a configured double bond coming from ``parent``."""
        configured = self.configured_bonds if configured is None else configured
        if parent is None:
            return False
        bond = self.graph.get_bond(atom_id, parent)
        if bond is None or bond.key not in configured:
            return False
        if bond.bond_type is not BondType.DOUBLE or self._is_aromatic(bond):
            return False
        if not self._can_carry_configuration(atom_id) or not self._can_carry_configuration(
            parent
        ):
            return False
        others = [n for n in self.graph.get_connected_atoms(atom_id) if n != parent]
        one = others[0] if others else None
        two = others[-1] if len(others) > 1 else None
        is_nitrogen = self.graph.get_atom(atom_id).symbol == "N"
        if is_nitrogen and one is not None and two is None:
            angle = give_angle(self._point(parent), self._point(atom_id), self._point(one))
            return abs(angle) > MIN_NITROGEN_BEND
        return (
            not is_nitrogen
            and one is not None
            and two is not None
            and self.morgan_symbols[one] != self.morgan_symbols[two]
        )

    def is_start_of_double_bond(
        self,
        atom_id: int,
        parent: Optional[int],
        configured: Optional[Set[FrozenSet[int]]] = None,
    ) -> bool:
        """True if ``atom_id``, reached from ``parent``, opens a configured double bond."""
        configured = self.configured_bonds if configured is None else configured
        if parent is None or not self._can_carry_configuration(atom_id):
            return False
        next_atom = None
        one = two = None
        for n in self.graph.get_connected_atoms(atom_id):
            bond = self.graph.get_bond(n, atom_id)
            if (
                n != parent
                and bond.bond_type is BondType.DOUBLE
                and self.is_end_of_double_bond(n, atom_id, configured)
            ):
                next_atom = n
            if n != next_atom:
                if one is None:
                    one = n
                else:
                    two = n
        if next_atom is None or one is None:
            return False
        if self.graph.get_atom(atom_id).symbol == "N":
            angle = give_angle(
                self._point(next_atom), self._point(atom_id), self._point(parent)
            )
            return abs(angle) > MIN_NITROGEN_BEND
        return (
            two is not None
            and self.morgan_symbols[one] != self.morgan_symbols[two]
            and self.graph.get_bond(atom_id, next_atom).key in configured
        )

    def _can_carry_configuration(self, atom_id: int) -> bool:
        connections = self._connections(atom_id)
        return connections == 3 or (
            connections == 2 and self.graph.get_atom(atom_id).symbol == "N"
        )

    def is_valid_double_bond_configuration(self, bond: Bond) -> bool:
        """True if a bond could carry a cis/trans configuration at all."""
        first, second = bond.atom_ids
        view_from = None
        for n in self.graph.get_connected_atoms(first):
            if n != second:
                view_from = n
        every_bond = {b.key for b in self.graph.bonds}
        return (
            self.is_start_of_double_bond(first, view_from, every_bond)
            and self.is_end_of_double_bond(second, first, every_bond)
            and not self._is_aromatic(bond)
        )

    def is_cis_trans(
        self, first_outer: int, first_inner: int, second_inner: int, second_outer: int
    ) -> bool:
        """
        True if the two outer atoms lie on the same side of the double bond.

        Raises:
            StereoConfigurationError: If the inner bond cannot be configured
        """
        bond = self.graph.get_bond(first_inner, second_inner)
        if bond is None or not self.is_valid_double_bond_configuration(bond):
            raise StereoConfigurationError(
                "There is no valid double bond configuration between the inner atoms"
            )
        return self.same_side(first_outer, first_inner, second_inner, second_outer)

    def same_side(
        self, first_outer: int, first_inner: int, second_inner: int, second_outer: int
    ) -> bool:
        """Side test of the outer atoms against the line through the inner atoms."""
        start = self._point(first_inner)
        end = self._point(second_inner)
        first_side = side_of_line(self._point(first_outer), start, end)
        second_side = side_of_line(self._point(second_outer), start, end)
        if first_side == 0 or second_side == 0:
            raise StereoConfigurationError("Substituent lies on the double bond axis")
        return (first_side > 0) == (second_side > 0)
