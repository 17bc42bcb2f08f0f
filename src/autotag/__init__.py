"""autotag - LLM tag suggestions reconciled into markdown frontmatter."""

__version__ = "1.0.0"
