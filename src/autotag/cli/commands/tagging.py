"""Tagging commands for autotag CLI."""

import asyncio
from pathlib import Path

from ...core.config import Config
from ...core.types import BatchResult
from ...frontmatter.reconciler import FrontmatterReconciler
from ...llm import create_tagging_provider
from ...llm.prompts import TaggingMode
from ...services.batch import BatchProgress
from ...services.tagging import TaggingService
from ...vault import FileSystemVault, load_predefined_tags


def add_tag_arguments(parser) -> None:
    """Add arguments for the tag command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("paths", nargs="+", help="Documents to tag, relative to the vault")
    parser.add_argument(
        "-m",
        "--mode",
        choices=[m.value for m in TaggingMode],
        help="Tagging mode (default: from config)",
    )
    parser.add_argument("-n", "--max-tags", type=int, help="Maximum tags per set")
    parser.add_argument("-l", "--language", help="Language code for generated tags")


def add_clear_arguments(parser) -> None:
    """Add arguments for the clear command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("paths", nargs="+", help="Documents to clear, relative to the vault")


def _print_progress(progress: BatchProgress) -> None:
    if not progress.done:
        print(f"  {progress.processed}/{progress.total} documents processed")


def _doc_ids(vault: FileSystemVault, paths: list[str]) -> list[str]:
    """Resolve CLI paths (absolute or vault-relative) to document ids."""
    doc_ids = []
    for raw in paths:
        path = Path(raw).expanduser()
        if path.is_absolute():
            path = path.resolve().relative_to(vault.root)
        doc_ids.append(path.as_posix())
    return doc_ids


def build_service(config: Config) -> tuple[TaggingService, FileSystemVault]:
    """Wire the vault, provider and reconciler into a TaggingService.

    Args:
        config: Application configuration.

    Returns:
        Tuple of (service, vault).
    """
    vault = FileSystemVault(config.vault.root, config.vault.glob_pattern)
    reconciler = FrontmatterReconciler(vault, reindex_timeout=config.vault.reindex_timeout)
    predefined = (
        load_predefined_tags(config.tagging.predefined_tags_path)
        if config.tagging.predefined_tags_path
        else []
    )
    service = TaggingService(
        create_tagging_provider(config),
        reconciler,
        vault,
        config.tagging,
        predefined_tags=predefined,
        progress_interval=config.vault.progress_interval,
        on_progress=_print_progress,
    )
    return service, vault


def _print_batch(result: BatchResult, verb: str) -> None:
    print(f"✓ {verb} {result.success_count}/{result.processed} documents")
    if result.cancelled:
        print("  Cancelled before completion")
    if result.errors:
        print(f"  Errors: {len(result.errors)}")
        for path, error in result.errors[:5]:  # Show first 5 errors
            print(f"    {path}: {error}")


def handle_tag(args, config: Config) -> bool:
    """Tag documents.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        True if every document succeeded.
    """

    async def run() -> BatchResult:
        service, vault = build_service(config)
        try:
            return await service.tag_documents(
                _doc_ids(vault, args.paths),
                mode=args.mode,
                max_tags=args.max_tags,
                language=args.language,
            )
        finally:
            await service.dispose()

    result = asyncio.run(run())
    _print_batch(result, "Tagged")
    return result.success


def handle_clear(args, config: Config) -> bool:
    """Clear tags from documents.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Returns:
        True if every document succeeded.
    """

    async def run() -> BatchResult:
        service, vault = build_service(config)
        try:
            return await service.clear_documents(_doc_ids(vault, args.paths))
        finally:
            await service.dispose()

    result = asyncio.run(run())
    _print_batch(result, "Cleared")
    return result.success
