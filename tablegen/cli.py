# File: tablegen/cli.py
"""
TableGen - Command-Line Interface
==================================

Built with the standard-library ``argparse`` module.

Usage examples::

    # Basic generation
    python -m tablegen --declarations models.yaml --output build/generated

    # Verbose, with extra field-order source folders
    tablegen -d models.yaml -o build/generated --source-folders src:lib -v

    # Validate only (no file output)
    tablegen -d models.yaml --validate-only

    # Render everything but write nothing
    tablegen -d models.yaml --dry-run

Exit codes:
    0: success
    1: validation error
    2: non-fatal generation errors (unsupported fields, empty models)
    3: fatal configuration error
    4: input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("tablegen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_CONFIGURATION_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root tablegen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("tablegen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from tablegen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="tablegen",
        description=(
            "TableGen: typed table source generator.\n\n"
            "Turns model declarations (YAML/JSON) into Table, Row, View and "
            "Query classes for every model."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -d models.yaml -o build/generated\n"
            "  %(prog)s -d models.yaml -o build/generated --source-folders src:lib -v\n"
            "  %(prog)s -d models.yaml --validate-only\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"TableGen v{__version__}",
    )

    parser.add_argument(
        "-d", "--declarations",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the model declaration file (JSON or YAML).",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help=(
            "Root directory for generated sources. Overrides 'output_dir' "
            "from the declaration file."
        ),
    )

    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the declarations without generating code.",
    )
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Run the full pipeline but don't write files to disk.",
    )

    config_group = parser.add_argument_group("configuration overrides")
    config_group.add_argument(
        "--source-folders",
        type=str,
        default=None,
        metavar="LIST",
        help="Folders searched for model sources, separated by ':', ',' or ';'.",
    )
    config_group.add_argument(
        "--default-package",
        type=str,
        default=None,
        metavar="PKG",
        help="Package for models that declare none.",
    )
    config_group.add_argument(
        "--no-sort-fields",
        action="store_true",
        default=False,
        help="Keep the declared field order without consulting model sources.",
    )

    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--no-strict",
        action="store_true",
        default=False,
        help="Continue even if validation reports errors.",
    )

    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.output is not None:
        overrides["output_dir"] = str(Path(args.output).resolve())

    if args.source_folders is not None:
        overrides["source_folders"] = args.source_folders

    if args.default_package is not None:
        overrides["default_package"] = args.default_package

    if args.no_sort_fields:
        overrides["sort_fields"] = False

    if args.dry_run:
        overrides["dry_run"] = True

    return overrides


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(declaration_path: Path) -> int:
    """Run validation only and return the exit code."""
    from tablegen.generator import load_declaration_file, parse_declarations
    from tablegen.utils import Timer
    from tablegen.validators import validate_batch

    logger.info("Running validation-only mode for: %s", declaration_path)

    try:
        batch, _ = parse_declarations(load_declaration_file(declaration_path))
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load declarations: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result = validate_batch(batch)

    print(f"\n{'='*50}")
    print("  Declaration Validation Report")
    print(f"{'='*50}")
    print(f"  File:     {declaration_path.name}")
    print(f"  Models:   {len(batch.models)}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({len(result.warnings)}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.is_valid and not result.warnings:
        print("\n  All validations passed!")

    print(f"{'='*50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(declaration_path: Path, args: argparse.Namespace) -> int:
    """Run the full generation pipeline and return the exit code."""
    from tablegen.generator import GenerationReport, TableGenerator

    config_overrides: Dict[str, Any] = _build_config_overrides(args)
    generator: TableGenerator = TableGenerator(strict_validation=not args.no_strict)

    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    report: GenerationReport = generator.generate_from_file(
        declaration_path,
        config_overrides=config_overrides or None,
    )

    print(report.summary())

    if report.success:
        return EXIT_SUCCESS
    if report.input_errors:
        return EXIT_INPUT_ERROR
    if report.fatal_error is not None:
        return EXIT_CONFIGURATION_ERROR
    if report.validation_errors:
        return EXIT_VALIDATION_ERROR
    return EXIT_GENERATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    declaration_path: Path = Path(args.declarations).resolve()

    if not declaration_path.is_file():
        logger.error("Declaration file not found: %s", declaration_path)
        sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(declaration_path))

    logger.info("Declarations: %s", declaration_path)
    logger.info("Output:       %s", args.output or "(from declaration file)")
    logger.info("Strict:       %s", not args.no_strict)

    exit_code: int = _run_generation(declaration_path, args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_CONFIGURATION_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("tablegen.cli loaded.")
