from __future__ import annotations

DEFAULT_LANGUAGE = "en"

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "it": "Italian",
    "pt": "Portuguese",
    "ja": "Japanese",
    "ko": "Korean",
    "hi": "Hindi",
    "ar": "Arabic",
    "ru": "Russian",
    "nl": "Dutch",
}

JSON_CONTRACT = (
    "Respond with a single JSON object and nothing else, using exactly these keys:\n"
    '{"summary": string, "keyPoints": array of 3 to 6 short strings, '
    '"sentiment": one of "positive", "neutral", "negative"}'
)


def language_name(code: str | None) -> str | None:
    """Display name for a language code; None means write in English.

    Regional tags resolve on their primary subtag ("es-MX" is Spanish).
    Unknown codes are passed through so a caller can ask for e.g. "Swahili".
    """
    if not code:
        return None
    code = code.strip()
    primary = code.replace("_", "-").split("-")[0].lower()
    if not primary or primary == DEFAULT_LANGUAGE:
        return None
    return LANGUAGE_NAMES.get(primary, code)


def build_system_instruction(*, is_from_transcript: bool, language: str | None = None) -> str:
    if is_from_transcript:
        length = (
            "Summarize the following podcast transcript in a concise, engaging and "
            "informative way for a general audience, in at most 4 paragraphs."
        )
    else:
        length = (
            "No transcript is available for this episode. Summarize the following "
            "episode description in 2 to 3 paragraphs for a general audience. State "
            "clearly in the summary that it is based on the episode description only, "
            "not on the full episode."
        )

    parts = ["You are a helpful assistant that summarizes podcast episodes.", length, JSON_CONTRACT]
    if language and language.lower() != "english":
        parts.append(
            f"Write the summary and every key point entirely in {language}. "
            f"Do not leave any sentence in another language. "
            'Keep the JSON keys and the sentiment value in English.'
        )
    return "\n\n".join(parts)


def build_user_prompt(content: str, *, is_from_transcript: bool) -> str:
    label = "Podcast transcript" if is_from_transcript else "Episode description"
    return f"{label}:\n{content}"
