"""Command implementations for autotag CLI."""

from .graph import (
    add_analytics_arguments,
    add_graph_arguments,
    handle_analytics,
    handle_graph,
)
from .provider import handle_providers, handle_test_connection
from .tagging import (
    add_clear_arguments,
    add_tag_arguments,
    build_service,
    handle_clear,
    handle_tag,
)

__all__ = [
    "add_analytics_arguments",
    "add_graph_arguments",
    "handle_analytics",
    "handle_graph",
    "handle_providers",
    "handle_test_connection",
    "add_clear_arguments",
    "add_tag_arguments",
    "build_service",
    "handle_clear",
    "handle_tag",
]
