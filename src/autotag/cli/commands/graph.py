"""Graph and analytics commands for autotag CLI."""

import json

from ...core.config import Config
from ...graph import CooccurrenceGraphBuilder, TagAnalytics
from ...vault import FileSystemVault


def add_graph_arguments(parser) -> None:
    """Add arguments for the graph command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument(
        "-w",
        "--min-weight",
        type=int,
        default=1,
        help="Only show edges with at least this weight (default: 1)",
    )
    parser.add_argument("--json", action="store_true", help="Print renderer-ready JSON")


def add_analytics_arguments(parser) -> None:
    """Add arguments for the analytics command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument("--csv", action="store_true", help="Print per-tag statistics as CSV")


def _vault(config: Config) -> FileSystemVault:
    vault = FileSystemVault(config.vault.root, config.vault.glob_pattern)
    vault.build_index()
    return vault


def handle_graph(args, config: Config) -> bool:
    """Print the tag co-occurrence graph.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    vault = _vault(config)
    graph = CooccurrenceGraphBuilder().build(tags for _, tags in vault.all_tag_sets())

    if args.json:
        print(json.dumps(graph.to_network_data(args.min_weight), indent=2, ensure_ascii=False))
        return True

    print(f"Tags ({len(graph.nodes)}) across {graph.document_count} documents:")
    for tag, frequency in graph.node_list():
        print(f"  {tag}: {frequency}")

    edges = graph.edge_list(args.min_weight)
    print(f"\nCo-occurrences ({len(edges)}):")
    for tag_a, tag_b, weight in edges:
        print(f"  {tag_a} -- {tag_b}: {weight}")
    return True


def handle_analytics(args, config: Config) -> bool:
    """Print tag usage statistics.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    vault = _vault(config)
    report = TagAnalytics().compute(vault.all_tag_sets())

    if args.csv:
        print(report.to_csv(), end="")
        return True

    print("Tag Analytics")
    print("=" * 50)
    print(f"Unique tags:           {report.total_unique_tags}")
    print(f"Tagged documents:      {report.tagged_documents}")
    print(f"Untagged documents:    {report.untagged_documents}")
    print(f"Average tags per doc:  {report.average_tags_per_document}")
    print(f"Orphaned tags:         {report.orphaned_count}")
    print()
    for stats in report.tags:
        print(f"  {stats.name:<30} {stats.frequency:>5}  {stats.status}")
    return True
