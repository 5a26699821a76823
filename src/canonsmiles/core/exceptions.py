"""Exceptions raised while generating SMILES."""


class SmilesGenerationError(Exception):
    """Base class for SMILES generation failures."""


class MissingCoordinatesError(SmilesGenerationError, ValueError):
    """Chiral SMILES requested but an atom has no 2D coordinates."""

    def __init__(self, atom_index: int):
        self.atom_index = atom_index
        super().__init__(
            f"Atom number {atom_index} has no 2D coordinates, but 2D coordinates "
            "are needed for creating chiral smiles"
        )


class RingSearchTimeoutError(SmilesGenerationError, TimeoutError):
    """Ring perception did not finish within its time limit."""


class SpanningTreeError(SmilesGenerationError, RuntimeError):
    """Internal inconsistency in the spanning tree or its ring closures."""


class StereoConfigurationError(SmilesGenerationError, ValueError):
    """A bond or atom does not carry a resolvable stereo configuration."""
