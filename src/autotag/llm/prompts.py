"""Prompt templates for tag analysis."""

from enum import Enum


class TaggingMode(str, Enum):
    """How the model should choose tags."""

    PREDEFINED = "predefined"
    GENERATE = "generate"
    EXISTING = "existing"
    # Generate first, then match vault tags
    HYBRID_GENERATE_EXISTING = "hybrid-generate-existing"
    # Generate first, then match the predefined list
    HYBRID_GENERATE_PREDEFINED = "hybrid-generate-predefined"

    @property
    def is_hybrid(self) -> bool:
        return self in (
            TaggingMode.HYBRID_GENERATE_EXISTING,
            TaggingMode.HYBRID_GENERATE_PREDEFINED,
        )

    @property
    def uses_predefined(self) -> bool:
        """Whether candidates come from the predefined list rather than the vault."""
        return self in (TaggingMode.PREDEFINED, TaggingMode.HYBRID_GENERATE_PREDEFINED)


SYSTEM_PROMPT = (
    "You are a professional document tag analysis assistant. "
    "Your task is to analyze document content and suggest relevant tags for organization and retrieval. "
    "Tags should be concise, descriptive, and formatted in kebab-case (lowercase with hyphens). "
    "Follow the specific output format requested in each task."
)

LANGUAGE_NAMES: dict[str, str] = {
    "ar": "Arabic",
    "cs": "Czech",
    "da": "Danish",
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "he": "Hebrew",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "nl": "Dutch",
    "no": "Norwegian",
    "pl": "Polish",
    "pt": "Portuguese",
    "pt-BR": "Brazilian Portuguese",
    "ro": "Romanian",
    "ru": "Russian",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "zh": "Chinese (Simplified)",
    "zh-TW": "Chinese (Traditional)",
}


def get_language_name(code: str | None) -> str | None:
    """Map a language code to its display name.

    Args:
        code: Language code such as "de" or "pt-BR". None or "default" means no preference.

    Returns:
        Display name, the code itself if unknown, or None for no preference.
    """
    if not code or code == "default":
        return None
    return LANGUAGE_NAMES.get(code, code)


def _language_instructions(language: str | None) -> str:
    name = get_language_name(language)
    if name is None:
        return ""
    return (
        f"IMPORTANT: Generate all tags in {name} language only.\n"
        f"Regardless of what language the content is in, all tags must be in {name} only.\n"
        f"First understand the content, then if needed translate concepts to {name}, "
        f"then generate tags in {name}.\n\n"
    )


def build_tag_prompt(
    content: str,
    candidate_tags: list[str],
    mode: TaggingMode,
    max_tags: int = 5,
    language: str | None = None,
) -> str:
    """Build the user prompt for a single (non-hybrid) analysis call.

    Args:
        content: Document text, already truncated.
        candidate_tags: Tags the model may pick from (existing/predefined modes).
        mode: Non-hybrid tagging mode.
        max_tags: Upper bound the model is asked to respect.
        language: Optional language code; only applies when generating.

    Returns:
        Prompt text.

    Raises:
        ValueError: If called with a hybrid mode.
    """
    if mode is TaggingMode.GENERATE:
        return (
            f"{_language_instructions(language)}"
            f"Analyze the following content and generate up to {max_tags} relevant tags.\n\n"
            "Requirements for tags:\n"
            "- Must start with # symbol\n"
            "- Can contain letters, numbers, and hyphens\n"
            "- No spaces allowed\n"
            "- Example format: #topic, #concept, #subject\n\n"
            f"Content:\n{content}\n\n"
            "Return only a JSON object in this exact format:\n"
            '{\n    "newTags": ["#tag1", "#tag2", "#tag3"]\n}'
        )

    if mode is TaggingMode.PREDEFINED:
        source = "from the provided tag list"
        heading = "Available tags"
    elif mode is TaggingMode.EXISTING:
        source = "from the existing tags in the vault"
        heading = "Existing tags in vault"
    else:
        raise ValueError(f"Hybrid mode {mode.value!r} must be split into separate calls")

    return (
        f"Analyze the following content and select up to {max_tags} most relevant tags {source}.\n"
        "Only use exact matches from the provided tags, do not modify or generate new tags.\n\n"
        f"{heading}:\n{', '.join(candidate_tags)}\n\n"
        f"Content:\n{content}\n\n"
        "Return only a JSON object in this exact format:\n"
        '{\n    "matchedTags": ["#tag1", "#tag2"]\n}'
    )
