#!/usr/bin/env python3
# src/canonsmiles/core/domain/models/reaction.py

"""
Domain model for a reaction: reactant, agent and product molecules.
"""

from dataclasses import dataclass, field
from typing import List
from .molecular_graph import MolecularGraph


@dataclass
class Reaction:
    """Reactants, agents and products of a reaction."""

    reactants: List[MolecularGraph] = field(default_factory=list)
    agents: List[MolecularGraph] = field(default_factory=list)
    products: List[MolecularGraph] = field(default_factory=list)
