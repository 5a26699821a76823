"""Default implementations of the ring and aromaticity collaborators."""

from .all_rings_finder import AllRingsFinder, DEFAULT_RING_SEARCH_TIMEOUT
from .hueckel_aromaticity_detector import HueckelAromaticityDetector

__all__ = [
    "AllRingsFinder",
    "DEFAULT_RING_SEARCH_TIMEOUT",
    "HueckelAromaticityDetector",
]
