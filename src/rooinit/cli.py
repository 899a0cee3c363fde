"""
CLI entry point for rooinit.

Usage:
    roo-init [init] [--modes a,b] [--category x] [--force]   Initialize a project
    roo-init list-modes [--source custom|system|all]          List modes
    roo-init list-categories [--source custom|system|all]     List categories

Without --modes or --category, init asks interactively: pick a category,
pick modes from it, repeat.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rooinit import __version__
from rooinit.config import get_config
from rooinit.definitions import DefinitionRepository, load_definitions
from rooinit.errors import (
    CatalogValidationError,
    ConflictError,
    MaterializationIOError,
    RooInitError,
    SelectionError,
    UserAbortError,
)
from rooinit.listing import SOURCES, definition_rows, format_table, list_categories, list_modes
from rooinit.materialize import MaterializationEngine, MaterializationOutcome
from rooinit.selection import ConsolePrompter, SelectionRequest, SelectionResolver

logger = logging.getLogger("rooinit")

COMMANDS = ("init", "list-modes", "list-categories")


def setup_logging(level: str, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format='[%(levelname)s] %(message)s',
    )


def build_repository(args) -> DefinitionRepository:
    config = get_config(Path(args.config) if args.config else None)
    system_path = Path(args.definitions) if args.definitions else config.definitions_path
    user_path = Path(args.user_config) if args.user_config else config.user_config_path
    return DefinitionRepository(system_path, user_path)


def cmd_init(args, prompter: Optional[ConsolePrompter] = None):
    """Resolve the selection and write it into the target directory."""
    config = get_config()
    repository = build_repository(args)
    target = Path(args.target).resolve()

    logger.info("Starting Roo project initialization...")
    definitions = load_definitions(repository)
    logger.info(f"Definitions loaded: {len(definitions.modes)} modes, {len(definitions.categories)} categories")

    request = SelectionRequest.from_flags(args.modes, args.category)
    resolver = SelectionResolver(definitions, prompter)

    if request.interactive:
        logger.info("Starting interactive mode selection...")
    else:
        logger.info("Non-interactive mode detected. Resolving modes from flags...")

    result = resolver.select(request)
    if result.is_empty:
        if request.interactive:
            raise UserAbortError("No modes selected. Nothing to do.")
        raise RooInitError("No valid modes selected with the provided flags. Please check your input.")

    modes = resolver.modes_for(result)
    logger.info(f"Selected modes: {', '.join(m.name for m in modes)}")

    engine = MaterializationEngine(
        repository,
        target,
        force=args.force,
        manifest_name=config.manifest_name,
        rules_base_dir=config.rules_dir,
    )
    report = engine.materialize(modes)

    for item in report.outcomes:
        print(f"  {item.outcome.value:<17} {item.path}")
    skipped = report.by_outcome(MaterializationOutcome.SKIPPED_CONFLICT)
    if skipped:
        print(f"{len(skipped)} file(s) skipped because they already exist. Use --force to overwrite.")
    print(f"Project initialized successfully with modes: {', '.join(m.name for m in modes)}.")
    return 0


def cmd_list_modes(args):
    """List modes from the chosen source."""
    modes = list_modes(build_repository(args), args.source)
    if not modes:
        print(f"No {args.source} modes found.")
        return 0
    print(format_table(["Slug", "Name", "Source", "Description"], definition_rows(modes)))
    return 0


def cmd_list_categories(args):
    """List categories from the chosen source."""
    categories = list_categories(build_repository(args), args.source)
    if not categories:
        print(f"No {args.source} categories found.")
        return 0
    print(format_table(["Slug", "Name", "Source", "Description"], definition_rows(categories)))
    return 0


def report_error(error: Exception) -> int:
    """Top-level error boundary. Returns the exit code."""
    if isinstance(error, UserAbortError):
        logger.info(f"Aborted: {error}")
        return 0
    if isinstance(error, ConflictError):
        logger.error(f"Conflict: {error}")
    elif isinstance(error, SelectionError):
        logger.error(f"Invalid Command-Line Arguments: {error}")
    elif isinstance(error, CatalogValidationError):
        logger.error(f"Definition Error: {error}")
    elif isinstance(error, MaterializationIOError):
        details = f"File System Error: {error}\nDestination: {error.path}"
        if error.source_path is not None:
            details += f"\nSource: {error.source_path}"
        logger.error(details)
    else:
        logger.error(f"Error: {error}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', help='Path to a YAML config file')
    common.add_argument('--definitions', help='System catalog directory (overrides config)')
    common.add_argument('--user-config', help='User config directory holding user-definitions.json')
    common.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    parser = argparse.ArgumentParser(
        prog='roo-init',
        description="A CLI tool for initializing Roo projects.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    roo-init
    roo-init --modes code,architect
    roo-init --category core --force
    roo-init list-modes --source all
"""
    )
    parser.add_argument('--version', action='version', version=f'roo-init {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init
    init_p = subparsers.add_parser('init', parents=[common], help='Initialize a project')
    init_p.add_argument('--modes', help='Comma-separated list of mode slugs to initialize')
    init_p.add_argument('--category', help='Comma-separated list of category slugs to initialize')
    init_p.add_argument('-f', '--force', action='store_true', help='Overwrite existing files')
    init_p.add_argument('--target', default='.', help='Project directory (default: current directory)')
    init_p.set_defaults(func=cmd_init)

    # list-modes
    modes_p = subparsers.add_parser('list-modes', parents=[common], help='List available modes')
    modes_p.add_argument('--source', choices=SOURCES, default='custom', help='Which modes to list')
    modes_p.set_defaults(func=cmd_list_modes)

    # list-categories
    cats_p = subparsers.add_parser('list-categories', parents=[common], help='List available categories')
    cats_p.add_argument('--source', choices=SOURCES, default='custom', help='Which categories to list')
    cats_p.set_defaults(func=cmd_list_categories)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)

    # `init` is the default command
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ('-h', '--help', '--version')):
        argv.insert(0, 'init')

    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config(Path(args.config) if args.config else None)
    setup_logging(config.log_level, args.verbose)

    try:
        return args.func(args)
    except RooInitError as e:
        return report_error(e)


if __name__ == "__main__":
    sys.exit(main())
