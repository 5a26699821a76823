"""Exhaustive ring perception on top of NetworkX cycle enumeration."""

import logging
import networkx as nx
from ..interfaces.ring_finder import RingFinder
from ..models.molecular_graph import MolecularGraph
from ..models.ring_set import Ring, RingSet
from ...exceptions import RingSearchTimeoutError
from ...utils.benchmarking import Timer

logger = logging.getLogger(__name__)

DEFAULT_RING_SEARCH_TIMEOUT = 5.0


class AllRingsFinder(RingFinder):
    """Finds all simple cycles of a molecule, giving up after a timeout.

    The number of rings grows exponentially on highly fused polycyclic
    systems, so the search is time-boxed.
    """

    def __init__(self, timeout: float = DEFAULT_RING_SEARCH_TIMEOUT):
        """Initialize finder.

        Args:
            timeout: Maximum time in seconds to spend enumerating rings
        """
        self.timeout = timeout

    def find_all_rings(self, graph: MolecularGraph) -> RingSet:
        G = graph.to_networkx()
        # Chains and trees have no cycles; skip straight out.
        G.remove_nodes_from([node for node, degree in G.degree() if degree < 2])
        rings = RingSet()
        with Timer("all rings search") as timer:
            for cycle in nx.simple_cycles(G):
                if timer.elapsed() > self.timeout:
                    logger.warning(
                        "Ring search aborted after %.1f s with %d rings found",
                        timer.elapsed(),
                        len(rings),
                    )
                    raise RingSearchTimeoutError(
                        f"Timeout for AllRingsFinder exceeded ({self.timeout} s)"
                    )
                rings.rings.append(Ring(tuple(cycle)))
        logger.debug("Found %d rings in %d atoms", len(rings), graph.atom_count)
        return rings
