"""CLI entrypoint for the Arachne configuration builder."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from arachne import __version__
from arachne.config import load_settings
from arachne.constants.branding import CLI_DESCRIPTION
from arachne.exceptions import ArachneError, ConfigError
from arachne.exceptions.validation import format_errors
from arachne.io import render_graph, write_graph
from arachne.script import ModuleReference, NamedFunction, ScriptFile, build_config
from arachne.validation import preflight_validate


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="arachne",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a configuration graph and print it as JSON")
    build.add_argument("-r", "--root", type=Path, required=True, help="Project root path")
    build.add_argument("-c", "--config", type=Path, help="Explicit settings file")
    build.add_argument(
        "-m",
        "--module",
        dest="initializers",
        type=ModuleReference,
        action="append",
        default=[],
        help="Config module to load after the settings initializers (repeatable)",
    )
    build.add_argument(
        "-f",
        "--file",
        dest="initializers",
        type=ScriptFile,
        action="append",
        help="Config script file to execute after the settings initializers (repeatable)",
    )
    build.add_argument(
        "-F",
        "--function",
        dest="initializers",
        type=NamedFunction,
        action="append",
        help="Initializer function `package.module:function` (repeatable)",
    )
    build.add_argument("-o", "--output", type=Path, default=None, help="Write the graph JSON here instead of stdout")
    build.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    validate = subparsers.add_parser("validate-config", help="Validate settings without building")
    validate.add_argument("-r", "--root", type=Path, required=True, help="Project root path")
    validate.add_argument("-c", "--config", type=Path, help="Explicit settings file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    if args.command == "validate-config":
        return _handle_validate_config(args)

    if args.command != "build":
        parser.error(f"Unsupported command: {args.command}")

    validation_errors = preflight_validate(root=args.root, config_path=args.config)
    if validation_errors:
        print(format_errors(validation_errors), file=sys.stderr)
        return 2

    try:
        settings = load_settings(args.root, args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    logging.getLogger("arachne").setLevel(logging.DEBUG if args.verbose else settings.log_level_number)

    try:
        graph = build_config(
            [*settings.initializers, *args.initializers],
            module_paths=settings.module_paths,
        )
    except ArachneError as exc:
        print(exc.explain(), file=sys.stderr)
        return 1

    if args.output is not None:
        write_graph(args.output, graph)
    else:
        print(render_graph(graph))
    return 0


def _handle_validate_config(args: argparse.Namespace) -> int:
    """Run settings validation and report results."""
    errors = preflight_validate(root=args.root, config_path=args.config)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
