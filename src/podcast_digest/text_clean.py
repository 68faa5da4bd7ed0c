from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_DEC_ENTITY_RE = re.compile(r"&#(\d{1,8});")
_HEX_ENTITY_RE = re.compile(r"&#[xX]([0-9a-fA-F]{1,6});")
# any run of encodings of "&" itself ("&amp;amp;", "&#38;amp;", ...)
_AMP_RUN_RE = re.compile(r"&(?:amp;|#0*38;|#[xX]0*26;)+")

_URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)

URL_PLACEHOLDER = "[URL]"
EMAIL_PLACEHOLDER = "[EMAIL]"

MAX_INPUT_CHARS = 1_000_000
MAX_DECODE_PASSES = 8

NAMED_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&nbsp;": " ",
    "&copy;": "©",
    "&reg;": "®",
    "&trade;": "™",
    "&hellip;": "...",
    "&mdash;": "—",
    "&ndash;": "–",
    "&rsquo;": "'",
    "&lsquo;": "'",
    "&rdquo;": '"',
    "&ldquo;": '"',
}
_NAMED_ENTITY_RE = re.compile("|".join(re.escape(k) for k in NAMED_ENTITIES))


def _code_point(value: int, original: str) -> str:
    # NUL, surrogates and out-of-range values stay encoded
    if value == 0 or 0xD800 <= value <= 0xDFFF or value > 0x10FFFF:
        return original
    return chr(value)


def _decode_entities(text: str) -> str:
    text = _AMP_RUN_RE.sub("&", text)
    text = _NAMED_ENTITY_RE.sub(lambda m: NAMED_ENTITIES[m.group(0)], text)
    text = _DEC_ENTITY_RE.sub(lambda m: _code_point(int(m.group(1)), m.group(0)), text)
    text = _HEX_ENTITY_RE.sub(lambda m: _code_point(int(m.group(1), 16), m.group(0)), text)
    return text


def strip_tags(text: str) -> str:
    """Drop every ``<...>`` span, each running from a ``<`` to the next ``>``.

    Scans with str.find so a long run of unclosed ``<`` stays linear.
    """
    out = []
    pos = 0
    while True:
        start = text.find("<", pos)
        end = text.find(">", start) if start >= 0 else -1
        if end < 0:
            out.append(text[pos:])
            return "".join(out)
        out.append(text[pos:start])
        pos = end + 1


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_for_display(text: str | None) -> str:
    """Plain text for display: no markup, entities decoded, whitespace collapsed.

    Stripping and decoding repeat until nothing changes, so double-encoded
    input (``&amp;lt;b&amp;gt;``) cannot smuggle a tag through and the
    function is idempotent. Encoded ampersands collapse in one step, so real
    input settles in two or three rounds; MAX_DECODE_PASSES bounds crafted
    input. Text past MAX_INPUT_CHARS is dropped before cleaning.
    """
    if not text:
        return ""

    text = text[:MAX_INPUT_CHARS]
    prev = None
    passes = 0
    while text != prev and passes < MAX_DECODE_PASSES:
        prev = text
        text = strip_tags(_decode_entities(strip_tags(text)))
        passes += 1

    # one stripping pass leaves no "<" with a ">" after it
    return collapse_whitespace(strip_tags(text))


def _looks_like_email(token: str) -> bool:
    # something@something.something, anywhere in a whitespace-free token
    at = token.find("@", 1)
    return at >= 0 and token.find(".", at + 2, len(token) - 1) >= 0


def sanitize_for_model(text: str | None) -> str:
    """Display-clean text with URLs and emails replaced by placeholders."""
    clean = sanitize_for_display(text)
    clean = _URL_RE.sub(URL_PLACEHOLDER, clean)
    clean = " ".join(EMAIL_PLACEHOLDER if _looks_like_email(t) else t for t in clean.split(" "))
    return collapse_whitespace(clean)


def truncate_for_display(text: str | None, max_length: int = 200) -> str:
    clean = sanitize_for_display(text)
    if len(clean) <= max_length:
        return clean

    truncated = clean[:max_length]
    last_space = truncated.rfind(" ")
    # prefer a word boundary unless it would cut off too much
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."
