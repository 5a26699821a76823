"""Aromaticity perception delegated to RDKit's Hueckel-type model."""

import logging
from typing import Dict
from rdkit import Chem
from ..interfaces.aromaticity_detector import AromaticityDetector, AromaticityResult
from ..models.bond import BondType
from ..models.molecular_graph import MolecularGraph
from ..models.ring_set import RingSet

logger = logging.getLogger(__name__)

_RDKIT_BOND_TYPES = {
    BondType.SINGLE: Chem.BondType.SINGLE,
    BondType.DOUBLE: Chem.BondType.DOUBLE,
    BondType.TRIPLE: Chem.BondType.TRIPLE,
    BondType.AROMATIC: Chem.BondType.AROMATIC,
}


class HueckelAromaticityDetector(AromaticityDetector):
    """Detector that applies RDKit's aromaticity model to a MolecularGraph."""

    def _create_rdkit_mol(self, graph: MolecularGraph) -> Chem.Mol:
        """Convert MolecularGraph to RDKit Mol.

        Hydrogen counts are fixed from the graph so RDKit does not add
        implicit hydrogens of its own.
        """
        mol = Chem.RWMol()
        atom_map: Dict[int, int] = {}
        for atom in graph.atoms:
            rdatom = Chem.Atom(0 if atom.is_pseudo else atom.element)
            rdatom.SetFormalCharge(atom.formal_charge)
            rdatom.SetNoImplicit(True)
            rdatom.SetNumExplicitHs(atom.hydrogen_count)
            rdatom.SetIsAromatic(atom.aromatic)
            atom_map[atom.atom_id] = mol.AddAtom(rdatom)
        for bond in graph.bonds:
            index = mol.AddBond(
                atom_map[bond.atom1_id],
                atom_map[bond.atom2_id],
                _RDKIT_BOND_TYPES[bond.bond_type],
            )
            mol.GetBondWithIdx(index - 1).SetIsAromatic(bond.is_aromatic)
        return mol.GetMol()

    def detect(self, graph: MolecularGraph, rings: RingSet) -> AromaticityResult:
        result = AromaticityResult()
        if len(rings) == 0:
            return result
        try:
            mol = self._create_rdkit_mol(graph)
            mol.UpdatePropertyCache(strict=False)
            Chem.SanitizeMol(
                mol,
                Chem.SanitizeFlags.SANITIZE_SYMMRINGS
                | Chem.SanitizeFlags.SANITIZE_SETAROMATICITY,
            )
        except (ValueError, RuntimeError) as e:
            logger.warning("Aromaticity perception failed: %s", e)
            return result

        for rdatom in mol.GetAtoms():
            if rdatom.GetIsAromatic():
                result.atom_ids.add(graph.atoms[rdatom.GetIdx()].atom_id)
        for rdbond in mol.GetBonds():
            if rdbond.GetIsAromatic():
                result.bond_keys.add(
                    frozenset(
                        (
                            graph.atoms[rdbond.GetBeginAtomIdx()].atom_id,
                            graph.atoms[rdbond.GetEndAtomIdx()].atom_id,
                        )
                    )
                )
        return result
