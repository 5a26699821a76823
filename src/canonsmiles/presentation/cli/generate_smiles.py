"""Command-line interface for canonical SMILES generation from SD files."""

import argparse
import logging
import sys
from typing import List, Optional, TextIO
from rdkit import Chem
from tqdm import tqdm

from ...core.domain.implementations.all_rings_finder import DEFAULT_RING_SEARCH_TIMEOUT
from ...core.domain.models.bond import BondType
from ...core.domain.models.molecular_graph import MolecularGraph
from ...core.exceptions import SmilesGenerationError
from ...core.services.smiles_generator import SmilesGenerator, SmilesGeneratorConfig
from ...infrastructure.adapters.rdkit_adapter import RDKitAdapter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")


def setup_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description="Write canonical SMILES for every molecule of an SD file"
    )
    parser.add_argument("input", help="SD file to read")
    parser.add_argument(
        "-o", "--output", help="Output file (default: standard output)"
    )
    parser.add_argument(
        "--chiral",
        action="store_true",
        help="Write stereo descriptors from wedge bonds (needs 2D coordinates)",
    )
    parser.add_argument(
        "--double-bond-stereo",
        action="store_true",
        help="Write cis/trans configuration for every double bond that has one",
    )
    parser.add_argument(
        "--ring-timeout",
        type=float,
        default=DEFAULT_RING_SEARCH_TIMEOUT,
        help="Seconds allowed for ring search per fragment",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def double_bond_flags(graph: MolecularGraph) -> List[bool]:
    return [bond.bond_type is BondType.DOUBLE for bond in graph.bonds]


def write_smiles(
    input_path: str,
    output: TextIO,
    generator: SmilesGenerator,
    chiral: bool = False,
    double_bond_stereo: bool = False,
) -> int:
    """
    Write one ``SMILES<TAB>name`` line per readable molecule.

    Returns:
        Number of molecules that could not be read or written
    """
    adapter = RDKitAdapter()
    supplier = Chem.SDMolSupplier(input_path, removeHs=False)
    failures = 0
    for index, mol in enumerate(tqdm(supplier, desc="Generating SMILES", unit="mol")):
        if mol is None:
            logger.warning("Skipping unreadable record %d", index)
            failures += 1
            continue
        name = mol.GetProp("_Name") if mol.HasProp("_Name") else str(index)
        graph = adapter.from_rdkit_mol(mol)
        flags = double_bond_flags(graph) if double_bond_stereo else None
        try:
            smiles = generator.create_smiles(graph, chiral, flags)
        except SmilesGenerationError as e:
            logger.error("Failed to write record %d (%s): %s", index, name, e)
            failures += 1
            continue
        output.write(f"{smiles}\t{name}\n")
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for SMILES generation CLI."""
    parser = setup_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    generator = SmilesGenerator(
        SmilesGeneratorConfig(ring_search_timeout=args.ring_timeout)
    )
    if args.output:
        with open(args.output, "w") as output:
            failures = write_smiles(
                args.input, output, generator, args.chiral, args.double_bond_stereo
            )
    else:
        failures = write_smiles(
            args.input, sys.stdout, generator, args.chiral, args.double_bond_stereo
        )
    if failures:
        logger.warning("%d record(s) skipped", failures)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
