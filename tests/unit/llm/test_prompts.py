"""Tests for prompt building."""

import pytest

from autotag.llm.prompts import TaggingMode, build_tag_prompt, get_language_name


class TestTaggingMode:
    """Tests for TaggingMode properties."""

    def test_hybrid_modes(self):
        assert TaggingMode.HYBRID_GENERATE_EXISTING.is_hybrid
        assert TaggingMode.HYBRID_GENERATE_PREDEFINED.is_hybrid
        assert not TaggingMode.GENERATE.is_hybrid

    def test_predefined_modes(self):
        assert TaggingMode.PREDEFINED.uses_predefined
        assert TaggingMode.HYBRID_GENERATE_PREDEFINED.uses_predefined
        assert not TaggingMode.EXISTING.uses_predefined

    def test_parses_from_value(self):
        assert TaggingMode("hybrid-generate-existing") is TaggingMode.HYBRID_GENERATE_EXISTING


class TestLanguageName:
    """Tests for get_language_name."""

    def test_known_code(self):
        assert get_language_name("de") == "German"

    def test_unknown_code_passes_through(self):
        assert get_language_name("xx") == "xx"

    @pytest.mark.parametrize("code", [None, "", "default"])
    def test_no_preference(self, code):
        assert get_language_name(code) is None


class TestBuildTagPrompt:
    """Tests for build_tag_prompt."""

    def test_generate_prompt(self):
        prompt = build_tag_prompt("My content", [], TaggingMode.GENERATE, max_tags=3)

        assert "up to 3 relevant tags" in prompt
        assert '"newTags"' in prompt
        assert "My content" in prompt

    def test_generate_prompt_with_language(self):
        prompt = build_tag_prompt("text", [], TaggingMode.GENERATE, language="ja")

        assert prompt.startswith("IMPORTANT: Generate all tags in Japanese")

    def test_existing_prompt_lists_candidates(self):
        prompt = build_tag_prompt("text", ["#a", "#b"], TaggingMode.EXISTING)

        assert "Existing tags in vault:\n#a, #b" in prompt
        assert '"matchedTags"' in prompt

    def test_predefined_prompt(self):
        prompt = build_tag_prompt("text", ["#a"], TaggingMode.PREDEFINED, language="ja")

        assert "Available tags:\n#a" in prompt
        assert "Japanese" not in prompt

    def test_hybrid_mode_rejected(self):
        with pytest.raises(ValueError):
            build_tag_prompt("text", [], TaggingMode.HYBRID_GENERATE_EXISTING)
