"""Core SMILES generation services."""

from .canonical_labeler import CanonicalLabeler
from .ring_context import RingContext, RingContextProvider
from .smiles_generator import GenerationContext, SmilesGenerator, SmilesGeneratorConfig
from .spanning_tree import SpanningTreeBuilder
from .stereo_resolver import StereoResolver
from .token_emitter import TokenEmitter

__all__ = [
    "CanonicalLabeler",
    "RingContext",
    "RingContextProvider",
    "GenerationContext",
    "SmilesGenerator",
    "SmilesGeneratorConfig",
    "SpanningTreeBuilder",
    "StereoResolver",
    "TokenEmitter",
]
