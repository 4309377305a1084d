"""Unit tests for language detection and translation."""

import pytest
import pytest_check as check

from aio_chat.config.app_config import SettingsConfig
from aio_chat.services import translation
from aio_chat.services.translation import (
    detect_language,
    translate_text,
    translate_to_english,
)


class TestDetectLanguage:
    """Tests for character-class language detection."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Hello, how are you?", "english"),
            ("Hola, ¿cómo estás?", "spanish"),
            ("Привет, как дела?", "russian"),
            ("你好，你好吗？", "chinese"),
            ("こんにちは", "japanese"),
            ("안녕하세요", "korean"),
            ("مرحبا", "arabic"),
            ("Straße", "german"),
        ],
    )
    def test_detects_language(self, text: str, expected: str) -> None:
        """Each script maps to its language."""
        check.equal(detect_language(text), expected)

    def test_first_matching_pattern_wins(self) -> None:
        """Accents shared by several languages resolve to the first listed."""
        check.equal(detect_language("Un café au lait"), "spanish")


class TestTranslateText:
    """Tests for phrase-table translation."""

    def test_english_unchanged(self) -> None:
        """English text comes back untouched."""
        check.equal(translate_text("Day 1: Arrive in Paris"), "Day 1: Arrive in Paris")

    def test_known_phrase_translated(self) -> None:
        """Phrases in the table are translated and tagged."""
        check.equal(
            translate_text("Hola, ¿cómo estás?"),
            "[Translated from spanish] Hello, how are you?",
        )

    def test_unknown_text_tagged_with_language(self) -> None:
        """Other foreign text is returned tagged with its detected language."""
        check.equal(translate_text("Привет"), "[Detected: russian] Привет")


class TestTranslateToEnglish:
    """Tests for the upload translation step."""

    def test_disabled_returns_text(self) -> None:
        """With translation off the text is returned unchanged."""
        settings = SettingsConfig(enable_translation=False, translation_limit=100)

        check.equal(translate_to_english("Привет " * 50, settings), "Привет " * 50)

    def test_truncates_to_translation_limit(self) -> None:
        """Text over the limit is cut before translating."""
        settings = SettingsConfig(translation_limit=100)

        result = translate_to_english("a" * 300, settings)

        check.equal(result, "a" * 100 + "...")

    def test_failure_returns_original(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Translator errors fall back to the original text."""

        def boom(text: str, target: str) -> str:
            raise RuntimeError("translator down")

        monkeypatch.setattr(translation, "translate_text", boom)

        check.equal(translate_to_english("Привет", SettingsConfig()), "Привет")
