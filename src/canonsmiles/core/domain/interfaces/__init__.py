"""Interfaces for external collaborators of the generator."""

from .aromaticity_detector import AromaticityDetector, AromaticityResult
from .ring_finder import RingFinder

__all__ = ["AromaticityDetector", "AromaticityResult", "RingFinder"]
