"""Tests for podcast_digest.llm.prompts."""

from podcast_digest.llm.prompts import build_system_instruction, build_user_prompt, language_name


class TestLanguageName:
    def test_english_and_empty_mean_default(self) -> None:
        assert language_name(None) is None
        assert language_name("") is None
        assert language_name("EN") is None

    def test_known_codes(self) -> None:
        assert language_name("es") == "Spanish"
        assert language_name("zh") == "Chinese"

    def test_unknown_code_passes_through(self) -> None:
        assert language_name("Swahili") == "Swahili"

    def test_regional_tags_use_primary_subtag(self) -> None:
        assert language_name("en-US") is None
        assert language_name("en_GB") is None
        assert language_name("es-ES") == "Spanish"
        assert language_name("pt-BR") == "Portuguese"


class TestBuildSystemInstruction:
    def test_transcript_length(self) -> None:
        text = build_system_instruction(is_from_transcript=True)
        assert "at most 4 paragraphs" in text
        assert "description only" not in text

    def test_description_caveat(self) -> None:
        text = build_system_instruction(is_from_transcript=False)
        assert "2 to 3 paragraphs" in text
        assert "description only" in text

    def test_translation_clause(self) -> None:
        text = build_system_instruction(is_from_transcript=True, language="Spanish")
        assert "entirely in Spanish" in text
        assert "entirely in" not in build_system_instruction(is_from_transcript=True, language="English")

    def test_json_contract_always_present(self) -> None:
        for flag in (True, False):
            assert '"keyPoints"' in build_system_instruction(is_from_transcript=flag)


def test_user_prompt_labels_source() -> None:
    assert build_user_prompt("hi", is_from_transcript=True).startswith("Podcast transcript:")
    assert build_user_prompt("hi", is_from_transcript=False) == "Episode description:\nhi"
