"""Document storage the tagging core reads from and writes to."""

from .filesystem import FileSystemVault
from .host import VaultHost
from .metadata import (
    FrontmatterResult,
    extract_tags_from_field,
    parse_frontmatter,
    tags_from_text,
)
from .predefined import load_predefined_tags

__all__ = [
    "FileSystemVault",
    "VaultHost",
    "FrontmatterResult",
    "extract_tags_from_field",
    "parse_frontmatter",
    "tags_from_text",
    "load_predefined_tags",
]
