"""
CLI main entry point.
"""

import argparse
import glob
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from .. import __version__
from ..config import (
    SUPPORTED_UBL_VERSIONS,
    BaseQuantityPolicy,
    ConfigValidationError,
    ConversionConfig,
    CreationMode,
    config_from_mapping,
    create_default_config,
    load_config,
)
from ..converter import CIIToUBLConverter
from ..diagnostics import ErrorCollector, Severity
from ..ubl.writer import write_document

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_SUFFIX = "-ubl"
CII_SUFFIX = ".xml"

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="cii2ubl",
        description="Convert CII D16B invoices (EN 16931) to UBL Invoice or CreditNote",
    )

    parser.add_argument(
        "sources",
        nargs="*",
        metavar="SOURCE",
        help="CII files, directories (searched recursively) or glob patterns",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--init-config",
        type=Path,
        metavar="PATH",
        help="Write a default config file to PATH and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-t",
        "--target",
        type=Path,
        default=Path("."),
        help="Target directory for the UBL files (default: current directory)",
    )
    parser.add_argument(
        "--output-suffix",
        type=str,
        default=DEFAULT_OUTPUT_SUFFIX,
        help=f"Suffix appended to the base name of each output file (default: {DEFAULT_OUTPUT_SUFFIX})",
    )
    parser.add_argument(
        "--ubl",
        dest="ubl_version",
        choices=SUPPORTED_UBL_VERSIONS,
        help="UBL version to create (default: 2.1)",
    )
    parser.add_argument(
        "--mode",
        dest="creation_mode",
        choices=[mode.value for mode in CreationMode],
        help="Document type to create (default: automatic)",
    )
    parser.add_argument(
        "--ubl-vatscheme",
        dest="vat_scheme",
        help="Tax scheme ID for VAT (default: VAT)",
    )
    parser.add_argument(
        "--ubl-customizationid",
        dest="customization_id",
        help="CustomizationID used when the source has none",
    )
    parser.add_argument(
        "--ubl-profileid",
        dest="profile_id",
        help="ProfileID used when the source has none",
    )
    parser.add_argument(
        "--ubl-cardaccountnetworkid",
        dest="card_account_network_id",
        help="CardAccount/NetworkID for payment card information",
    )
    parser.add_argument(
        "--ubl-defaultorderrefid",
        dest="default_order_ref_id",
        help="OrderReference/ID used when only a sales order reference exists",
    )
    parser.add_argument(
        "--base-quantity",
        dest="base_quantity_policy",
        choices=[policy.value for policy in BaseQuantityPolicy],
        help="Price base quantity: copy from source or always 1 (default: source)",
    )
    parser.add_argument(
        "--no-swap-quantity-sign",
        dest="swap_quantity_sign_if_needed",
        action="store_false",
        default=None,
        help="Keep quantity and price signs of lines with a negative amount",
    )
    parser.add_argument(
        "--override-context",
        dest="override_document_context",
        action="store_true",
        default=None,
        help="Replace CustomizationID/ProfileID found in the source with the configured ones",
    )

    return parser


# CLI options that map onto ConversionConfig fields
CONFIG_OPTIONS = (
    "ubl_version",
    "creation_mode",
    "vat_scheme",
    "customization_id",
    "profile_id",
    "card_account_network_id",
    "default_order_ref_id",
    "base_quantity_policy",
    "swap_quantity_sign_if_needed",
    "override_document_context",
)


def build_config(args: argparse.Namespace) -> ConversionConfig:
    """Merge the config file, environment and command line options."""
    config = load_config(args.config)
    overrides = {
        name: getattr(args, name)
        for name in CONFIG_OPTIONS
        if getattr(args, name, None) is not None
    }
    if not overrides:
        return config
    merged = {**asdict(config), **overrides}
    return config_from_mapping(merged)


def collect_sources(sources: list[str]) -> list[Path]:
    """Expand source arguments into CII files.

    Directories are searched recursively for *.xml files, glob patterns are
    expanded, and every file is returned once in a stable order.
    """
    files: list[Path] = []
    seen: set[Path] = set()

    def add(path: Path) -> None:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            files.append(path)

    for source in sources:
        if any(char in source for char in "*?["):
            matches = [Path(m) for m in sorted(glob.glob(source, recursive=True))]
            if not matches:
                logger.warning(f"No files match {source}")
        else:
            matches = [Path(source)]

        for match in matches:
            if match.is_dir():
                for path in sorted(match.rglob(f"*{CII_SUFFIX}")):
                    if path.is_file():
                        add(path)
            elif match.is_file():
                add(match)
            else:
                logger.error(f"Source not found: {match}")

    return files


def output_path(source: Path, target_dir: Path, suffix: str) -> Path:
    """Name of the UBL file created for a CII source file."""
    return target_dir / f"{source.stem}{suffix}{CII_SUFFIX}"


def log_diagnostics(source: Path, errors: ErrorCollector) -> None:
    for diagnostic in errors:
        logger.log(_LOG_LEVELS[diagnostic.severity], f"{source.name}: {diagnostic}")


def convert_sources(
    converter: CIIToUBLConverter, files: list[Path], target_dir: Path, suffix: str
) -> int:
    """Convert files one by one.

    Returns:
        Number of files that failed (no output or mapping errors)
    """
    failed = 0
    for source in files:
        errors = ErrorCollector()
        document = converter.convert_file(source, errors)
        log_diagnostics(source, errors)

        if document is None:
            logger.error(f"✗ {source}: not converted")
            failed += 1
            continue

        destination = output_path(source, target_dir, suffix)
        write_document(document, destination)

        if errors.has_errors():
            logger.error(f"✗ {source} → {destination} (with {len(errors.errors)} error(s))")
            failed += 1
        else:
            logger.info(f"✓ {source} → {destination}")

    return failed


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if parsed.init_config:
        create_default_config(parsed.init_config)
        logger.info(f"Wrote default config to {parsed.init_config}")
        return 0

    if not parsed.sources:
        parser.print_help()
        return 1

    try:
        config = build_config(parsed)
        converter = CIIToUBLConverter(config)
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    logger.info(f"CII → UBL converter v{__version__} (UBL {config.ubl_version})")

    files = collect_sources(parsed.sources)
    if not files:
        logger.error("No CII files to convert")
        return 1

    failed = convert_sources(converter, files, parsed.target, parsed.output_suffix)
    logger.info(f"Converted {len(files) - failed}/{len(files)} file(s)")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
