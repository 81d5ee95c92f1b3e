# File: crudgen/cli.py
"""
NexaFlow CrudGen - Command-Line Interface
==========================================

``argparse`` front end with one subcommand per entry point.

Usage examples::

    # Generate artifacts for two tables from a schema file
    python -m crudgen generate -s schema.yaml -t dbo.Order_Items -t Customers \\
        -o ../AngularApp/src/app

    # Same, straight from a database, rendering only
    python -m crudgen generate --database-url sqlite:///shop.db -t Orders --dry-run

    # Remove everything generated so far
    python -m crudgen cleanup -o ../AngularApp/src/app

    # List the tables a source knows about
    python -m crudgen tables -s schema.yaml

    # Serve the HTTP API
    python -m crudgen serve -s schema.yaml --port 8000

Exit codes:
    0: success
    2: generation error
    3: cleanup error
    4: input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_GENERATION_ERROR: int = 2
EXIT_CLEANUP_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4

DEFAULT_OUTPUT: str = "../AngularApp/src/app"


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root crudgen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crudgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _source_options() -> argparse.ArgumentParser:
    """Shared ``--schema-file`` / ``--database-url`` options."""
    parent: argparse.ArgumentParser = argparse.ArgumentParser(add_help=False)
    group = parent.add_argument_group("schema source")
    exclusive = group.add_mutually_exclusive_group()
    exclusive.add_argument(
        "-s", "--schema-file",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML/JSON file declaring the tables.",
    )
    exclusive.add_argument(
        "--database-url",
        type=str,
        default=None,
        metavar="URL",
        help="SQLAlchemy database URL to reflect tables from.",
    )
    group.add_argument(
        "--default-schema",
        type=str,
        default=None,
        metavar="NAME",
        help="Schema for unqualified table names (overrides the config file).",
    )
    return parent


def _common_options() -> argparse.ArgumentParser:
    parent: argparse.ArgumentParser = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML/JSON generator config file.",
    )
    verbosity_group = parent.add_argument_group("verbosity")
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
    return parent


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from crudgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crudgen",
        description=(
            "NexaFlow CrudGen: Angular CRUD screens from database tables.\n\n"
            "Renders a model, a service and list/form components per table, "
            "then wires them into the app's routes and sidebar menu."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"NexaFlow CrudGen v{__version__}",
    )

    source: argparse.ArgumentParser = _source_options()
    common: argparse.ArgumentParser = _common_options()
    commands = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    # --- generate ---
    generate = commands.add_parser(
        "generate",
        parents=[source, common],
        help="Generate artifacts for one or more tables.",
    )
    generate.add_argument(
        "-t", "--table",
        dest="tables",
        action="append",
        required=True,
        metavar="TABLE",
        help="Table to generate, optionally schema-qualified (repeatable).",
    )
    generate.add_argument(
        "-o", "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        metavar="DIR",
        help="SPA source root containing app.routes.ts (default: %(default)s).",
    )
    generate.add_argument(
        "--page-size",
        type=int,
        default=None,
        metavar="N",
        help="Initial list page size (overrides the config file).",
    )
    mode_group = generate.add_argument_group("operation modes")
    mode_group.add_argument(
        "--no-frontend",
        action="store_true",
        default=False,
        help="Skip front-end artifact generation.",
    )
    mode_group.add_argument(
        "--backend",
        action="store_true",
        default=False,
        help="Request backend generation (not supported; logged and ignored).",
    )
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render and report without writing files or patching navigation.",
    )

    # --- cleanup ---
    cleanup = commands.add_parser(
        "cleanup",
        parents=[common],
        help="Delete generated artifacts and their navigation entries.",
    )
    cleanup.add_argument(
        "-o", "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        metavar="DIR",
        help="SPA source root to clean (default: %(default)s).",
    )

    # --- tables ---
    commands.add_parser(
        "tables",
        parents=[source, common],
        help="List the tables known to the schema source.",
    )

    # --- serve ---
    serve = commands.add_parser(
        "serve",
        parents=[source, common],
        help="Run the HTTP API with uvicorn.",
    )
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Bind address.")
    serve.add_argument("--port", type=int, default=8000, help="Bind port.")

    return parser


# ---------------------------------------------------------------------------
# Shared construction helpers
# ---------------------------------------------------------------------------


def _load_generator(args: argparse.Namespace, needs_source: bool = True):
    """
    Build a ``CrudGenerator`` from parsed arguments.

    Raises:
        FileNotFoundError, ValueError: On bad config or source input.
    """
    from crudgen.discovery import FileSchemaSource
    from crudgen.generator import CrudGenerator, build_source, load_config
    from crudgen.models import GeneratorConfig

    config = load_config(Path(args.config) if args.config else None)

    # CLI flags win over the config file
    overrides = {}
    if getattr(args, "default_schema", None):
        overrides["default_schema"] = args.default_schema
    if getattr(args, "page_size", None) is not None:
        overrides["items_per_page"] = args.page_size
    if overrides:
        config = GeneratorConfig.model_validate({**config.model_dump(), **overrides})

    if not needs_source:
        return CrudGenerator(FileSchemaSource({"tables": []}), config)

    source = build_source(
        schema_file=Path(args.schema_file) if args.schema_file else None,
        database_url=args.database_url,
        default_schema=config.default_schema,
    )
    return CrudGenerator(source, config)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _run_generate(args: argparse.Namespace) -> int:
    from crudgen.models import GenerationRequest

    try:
        generator = _load_generator(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INPUT_ERROR

    request = GenerationRequest(
        selected_tables=args.tables,
        output_base_path=str(Path(args.output)),
        generate_frontend=not args.no_frontend,
        generate_backend=args.backend,
        dry_run=args.dry_run,
    )
    if args.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    result = generator.generate(request)
    print(result.summary())
    return EXIT_SUCCESS if result.success else EXIT_GENERATION_ERROR


def _run_cleanup(args: argparse.Namespace) -> int:
    from crudgen.models import CleanupRequest

    try:
        generator = _load_generator(args, needs_source=False)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INPUT_ERROR

    result = generator.cleanup(CleanupRequest(base_path=str(Path(args.output))))
    print(result.summary())
    return EXIT_SUCCESS if result.success else EXIT_CLEANUP_ERROR


def _run_tables(args: argparse.Namespace) -> int:
    from crudgen.errors import SchemaDiscoveryError

    try:
        generator = _load_generator(args)
        pairs = generator.source.list_tables()
    except (FileNotFoundError, ValueError, SchemaDiscoveryError) as exc:
        logger.error("Cannot list tables: %s", exc)
        return EXIT_INPUT_ERROR

    for schema, name in pairs:
        print(f"{schema}.{name}")
    return EXIT_SUCCESS


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from crudgen.api import create_app

    try:
        generator = _load_generator(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INPUT_ERROR

    logger.info("Serving on http://%s:%d", args.host, args.port)
    uvicorn.run(create_app(generator), host=args.host, port=args.port)
    return EXIT_SUCCESS


_COMMANDS = {
    "generate": _run_generate,
    "cleanup": _run_cleanup,
    "tables": _run_tables,
    "serve": _run_serve,
}


# ---------------------------------------------------------------------------
# Banner
# ---------------------------------------------------------------------------


def _print_banner() -> None:
    """Print the NexaFlow banner."""
    banner: str = r"""
    ╔═══════════════════════════════════════════════════╗
    ║                                                   ║
    ║    NexaFlow CrudGen                               ║
    ║    Angular CRUD screens from database tables      ║
    ║                                                   ║
    ╚═══════════════════════════════════════════════════╝
    """
    print(banner, file=sys.stderr)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    # --- Verbosity ---
    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    if verbosity >= 1:
        _print_banner()

    if args.command in ("generate", "tables", "serve") and not (
        args.schema_file or args.database_url
    ):
        logger.error("A schema source is required: use --schema-file or --database-url.")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    exit_code: int = _COMMANDS[args.command](args)

    if exit_code == EXIT_SUCCESS:
        logger.info("'%s' completed successfully.", args.command)
    else:
        logger.error("'%s' failed with exit code %d.", args.command, exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_GENERATION_ERROR",
    "EXIT_CLEANUP_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("crudgen.cli loaded.")
