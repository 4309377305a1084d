"""Language sniffing and phrase-table translation.

Detection is a first-match scan over character-class patterns, so text with
accents shared by several languages resolves to the earliest one listed.
Translation only knows a handful of greetings; everything else is returned
tagged with the detected language.
"""

import logging
import re

from aio_chat.config.app_config import SettingsConfig
from aio_chat.parsing.documents import truncate

logger = logging.getLogger(__name__)

ENGLISH = "english"

# Order matters: the first pattern that matches wins
LANGUAGE_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("spanish", re.compile(r"[ñáéíóúü]", re.IGNORECASE)),
    ("french", re.compile(r"[àâäéèêëïîôöùûüÿç]", re.IGNORECASE)),
    ("german", re.compile(r"[äöüß]", re.IGNORECASE)),
    ("italian", re.compile(r"[àèéìíîòóù]", re.IGNORECASE)),
    ("portuguese", re.compile(r"[ãõáàâéêíóôúç]", re.IGNORECASE)),
    ("russian", re.compile(r"[а-яё]", re.IGNORECASE)),
    ("chinese", re.compile(r"[\u4e00-\u9fff]")),
    ("japanese", re.compile(r"[\u3040-\u309f\u30a0-\u30ff]")),
    ("korean", re.compile(r"[\uac00-\ud7af]")),
    ("arabic", re.compile(r"[\u0600-\u06ff]")),
]

PHRASE_TABLE: dict[str, str] = {
    "Hola, ¿cómo estás?": "Hello, how are you?",
    "Bonjour, comment allez-vous?": "Hello, how are you?",
    "Guten Tag, wie geht es Ihnen?": "Good day, how are you?",
    "Ciao, come stai?": "Hello, how are you?",
    "Olá, como você está?": "Hello, how are you?",
}


def detect_language(text: str) -> str:
    """Guess the language of text from the characters it contains."""
    for language, pattern in LANGUAGE_PATTERNS:
        if pattern.search(text):
            return language
    return ENGLISH


def translate_text(text: str, target_language: str = "en") -> str:
    """Translate text using the phrase table.

    Args:
        text: Text to translate.
        target_language: Requested target language code. Only English is
            produced by the phrase table.

    Returns:
        The text unchanged if already English, the table translation tagged
        with its source language, or the original text tagged with the
        detected language.
    """
    detected = detect_language(text)
    if detected == ENGLISH:
        return text

    phrase = PHRASE_TABLE.get(text.strip())
    if phrase:
        return f"[Translated from {detected}] {phrase}"

    return f"[Detected: {detected}] {text}"


def translate_to_english(text: str, settings: SettingsConfig) -> str:
    """Translate extracted document text when translation is enabled.

    Text longer than the translation limit is truncated before translating.
    Failures fall back to the original text.
    """
    if not settings.enable_translation:
        return text

    try:
        return translate_text(truncate(text, settings.translation_limit), "en")
    except Exception as e:
        logger.error(f"Translation failed, returning original text: {e}")
        return text
