"""Adapters for external molecule toolkits."""

from .rdkit_adapter import RDKitAdapter

__all__ = ["RDKitAdapter"]
