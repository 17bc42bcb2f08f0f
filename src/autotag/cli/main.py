"""CLI entry point for autotag."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger

from ..core.config import Config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="autotag",
        description="autotag - LLM tag suggestions for markdown frontmatter",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 1.0.0")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument("-c", "--config", type=Path, help="TOML configuration file")
    parser.add_argument("--vault", type=Path, help="Vault root directory")
    parser.add_argument("-p", "--provider", help="LLM provider name")

    subparsers = parser.add_subparsers(dest="command", required=False)

    # Tagging commands
    tag_parser = subparsers.add_parser("tag", help="Suggest and add tags to documents")
    commands.add_tag_arguments(tag_parser)

    clear_parser = subparsers.add_parser("clear", help="Clear tags from documents")
    commands.add_clear_arguments(clear_parser)

    # Vault-wide commands
    graph_parser = subparsers.add_parser("graph", help="Show the tag co-occurrence graph")
    commands.add_graph_arguments(graph_parser)

    analytics_parser = subparsers.add_parser("analytics", help="Show tag usage statistics")
    commands.add_analytics_arguments(analytics_parser)

    # Provider commands
    subparsers.add_parser("test-connection", help="Check the configured provider")
    subparsers.add_parser("providers", help="List supported providers")

    return parser


def configure_logging(verbosity: int) -> None:
    """Route loguru output to stderr at a level chosen by ``-v`` flags."""
    level = {0: "WARNING", 1: "INFO"}.get(verbosity, "DEBUG")
    logger.remove()
    logger.add(sys.stderr, level=level)


def main() -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        config = Config.from_env_or_file(args.config)
        if args.vault:
            config.vault.root = args.vault
        if args.provider:
            config.provider.name = args.provider

        if args.command == "tag":
            ok = commands.handle_tag(args, config)
        elif args.command == "clear":
            ok = commands.handle_clear(args, config)
        elif args.command == "graph":
            ok = commands.handle_graph(args, config)
        elif args.command == "analytics":
            ok = commands.handle_analytics(args, config)
        elif args.command == "test-connection":
            ok = commands.handle_test_connection(args, config)
        elif args.command == "providers":
            ok = commands.handle_providers(args, config)
        else:
            parser.print_help()
            ok = True

        sys.exit(0 if ok else 1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
