"""Adapter between RDKit molecules and MolecularGraph."""

import logging
from typing import Dict, Optional
from rdkit import Chem
from rdkit.Geometry import Point3D

from ...core.domain.models.atom import Atom, Hybridization
from ...core.domain.models.bond import Bond, BondStereo, BondType
from ...core.domain.models.molecular_graph import MolecularGraph

logger = logging.getLogger(__name__)

_BOND_TYPES = {
    Chem.BondType.SINGLE: BondType.SINGLE,
    Chem.BondType.DOUBLE: BondType.DOUBLE,
    Chem.BondType.TRIPLE: BondType.TRIPLE,
    Chem.BondType.AROMATIC: BondType.AROMATIC,
}
_RDKIT_BOND_TYPES = {value: key for key, value in _BOND_TYPES.items()}

# V2000 bond stereo field: 1 wedge, 6 hash, 4 either
_MOLFILE_STEREO = {
    1: BondStereo.UP,
    6: BondStereo.DOWN,
    4: BondStereo.UNDEFINED,
}
_BOND_DIRS = {
    Chem.BondDir.BEGINWEDGE: BondStereo.UP,
    Chem.BondDir.BEGINDASH: BondStereo.DOWN,
    Chem.BondDir.UNKNOWN: BondStereo.UNDEFINED,
}
_RDKIT_BOND_DIRS = {value: key for key, value in _BOND_DIRS.items()}

_HYBRIDIZATIONS = {
    Chem.HybridizationType.SP: Hybridization.SP1,
    Chem.HybridizationType.SP2: Hybridization.SP2,
    Chem.HybridizationType.SP3: Hybridization.SP3,
}


class RDKitAdapter:
    """Converts RDKit molecules to MolecularGraph and back."""

    def __init__(self, with_hybridization: bool = False):
        """Initialize adapter.

        Args:
            with_hybridization: Copy RDKit's hybridization onto the atoms. SP2
                atoms are then written in lower case, aromatic or not.
        """
        self.with_hybridization = with_hybridization

    def from_rdkit_mol(self, mol: Chem.Mol) -> MolecularGraph:
        """
        Convert an RDKit molecule to a MolecularGraph.

        Hydrogens that are atoms of ``mol`` stay atoms; all others become
        implicit hydrogen counts. 2D conformers fill ``point_2d``, 3D ones
        ``point_3d``. Wedge bonds are read from the mol file bond stereo
        field, or from the RDKit bond direction when that is missing.

        Args:
            mol: RDKit molecule

        Returns:
            MolecularGraph whose atom ids are the RDKit atom indices
        """
        conformer = mol.GetConformer() if mol.GetNumConformers() else None
        graph = MolecularGraph()
        for rdatom in mol.GetAtoms():
            idx = rdatom.GetIdx()
            atom = Atom(
                atom_id=idx,
                element=rdatom.GetSymbol(),
                formal_charge=rdatom.GetFormalCharge(),
                mass_number=rdatom.GetIsotope() or None,
                hydrogen_count=rdatom.GetTotalNumHs(),
                aromatic=rdatom.GetIsAromatic(),
                is_pseudo=rdatom.GetAtomicNum() == 0,
            )
            if self.with_hybridization:
                atom.hybridization = _HYBRIDIZATIONS.get(
                    rdatom.GetHybridization(), Hybridization.UNSET
                )
            if conformer is not None:
                position = conformer.GetAtomPosition(idx)
                if conformer.Is3D():
                    atom.point_3d = (position.x, position.y, position.z)
                else:
                    atom.point_2d = (position.x, position.y)
            graph.add_atom(atom)

        for rdbond in mol.GetBonds():
            bond_type = _BOND_TYPES.get(rdbond.GetBondType(), BondType.SINGLE)
            graph.add_bond(
                Bond(
                    atom1_id=rdbond.GetBeginAtomIdx(),
                    atom2_id=rdbond.GetEndAtomIdx(),
                    bond_type=bond_type,
                    stereo=self._bond_stereo(rdbond),
                    aromatic=rdbond.GetIsAromatic(),
                )
            )
        logger.debug(
            "Converted RDKit molecule with %d atoms and %d bonds",
            graph.atom_count,
            graph.bond_count,
        )
        return graph

    def from_mol_block(self, mol_block: str, remove_hs: bool = False) -> MolecularGraph:
        """Parse a mol block, keeping its wedge bonds and coordinates."""
        mol = Chem.MolFromMolBlock(mol_block, removeHs=remove_hs)
        if mol is None:
            raise ValueError("Could not parse mol block")
        return self.from_rdkit_mol(mol)

    def to_rdkit_mol(self, graph: MolecularGraph, sanitize: bool = True) -> Chem.Mol:
        """
        Convert a MolecularGraph to an RDKit molecule.

        Args:
            graph: Molecule to convert
            sanitize: Run RDKit sanitization on the result

        Returns:
            RDKit molecule with atoms in graph order and a conformer when
            every atom has coordinates
        """
        mol = Chem.RWMol()
        atom_map: Dict[int, int] = {}
        for atom in graph.atoms:
            rdatom = Chem.Atom(0 if atom.is_pseudo else atom.element)
            rdatom.SetFormalCharge(atom.formal_charge)
            if atom.mass_number is not None:
                rdatom.SetIsotope(atom.mass_number)
            rdatom.SetNoImplicit(True)
            rdatom.SetNumExplicitHs(atom.hydrogen_count)
            rdatom.SetIsAromatic(atom.aromatic)
            atom_map[atom.atom_id] = mol.AddAtom(rdatom)

        for bond in graph.bonds:
            mol.AddBond(
                atom_map[bond.atom1_id],
                atom_map[bond.atom2_id],
                _RDKIT_BOND_TYPES[bond.bond_type],
            )
            rdbond = mol.GetBondBetweenAtoms(
                atom_map[bond.atom1_id], atom_map[bond.atom2_id]
            )
            rdbond.SetIsAromatic(bond.is_aromatic)
            if bond.stereo in _RDKIT_BOND_DIRS:
                rdbond.SetBondDir(_RDKIT_BOND_DIRS[bond.stereo])

        conformer = self._conformer(graph)
        if conformer is not None:
            mol.AddConformer(conformer, assignId=True)

        mol = mol.GetMol()
        if sanitize:
            Chem.SanitizeMol(mol)
        return mol

    @staticmethod
    def _bond_stereo(rdbond: Chem.Bond) -> BondStereo:
        if rdbond.HasProp("_MolFileBondStereo"):
            return _MOLFILE_STEREO.get(
                rdbond.GetUnsignedProp("_MolFileBondStereo"), BondStereo.NONE
            )
        return _BOND_DIRS.get(rdbond.GetBondDir(), BondStereo.NONE)

    @staticmethod
    def _conformer(graph: MolecularGraph) -> Optional[Chem.Conformer]:
        if graph.atom_count == 0:
            return None
        if all(atom.point_3d is not None for atom in graph.atoms):
            points = [atom.point_3d for atom in graph.atoms]
            is_3d = True
        elif all(atom.point_2d is not None for atom in graph.atoms):
            points = [(x, y, 0.0) for x, y in (atom.point_2d for atom in graph.atoms)]
            is_3d = False
        else:
            return None
        conformer = Chem.Conformer(graph.atom_count)
        for i, (x, y, z) in enumerate(points):
            conformer.SetAtomPosition(i, Point3D(float(x), float(y), float(z)))
        conformer.Set3D(is_3d)
        return conformer
