"""
Tests for translator modules.

Run with: pytest tests/test_translators.py -v
"""
import pytest
from types import SimpleNamespace

from google.genai import errors as genai_errors

from treetrans.translators import GeminiTranslator, TranslationContext, create_translator
from treetrans.translators.gemini import split_whitespace
from treetrans.translators.prompts import build_document_prompt, build_probe_prompt
from treetrans.utils.config import Config
from treetrans.utils.exceptions import ConfigError, SetupError, TranslationError

CONTEXT = TranslationContext("Dutch", "English", source_file="guide/intro.rst")


class StubModels:
    """Stands in for client.models, replaying queued answers."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.requests = []

    def generate_content(self, model, contents, config):
        self.requests.append({"model": model, "contents": contents, "config": config})
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return SimpleNamespace(text=answer)


def make_translator(*answers):
    models = StubModels(answers)
    client = SimpleNamespace(models=models)
    return GeminiTranslator(api_key="", model="gemini-test", client=client), models


class TestSplitWhitespace:
    """Tests for whitespace preservation helpers."""

    def test_splits_surrounding_whitespace(self):
        """Leading and trailing runs should be separated from content."""
        assert split_whitespace("\n\n  Titel\n=====\n\n") == ("\n\n  ", "Titel\n=====", "\n\n")

    def test_blank_text(self):
        """Blank text has no content."""
        assert split_whitespace(" \n\t") == (" \n\t", "", "")


class TestGeminiTranslator:
    """Tests for the Gemini translator with a stub client."""

    def test_whitespace_restored(self):
        """Surrounding whitespace of the source should survive translation."""
        translator, models = make_translator("  Hello world  \n")
        result = translator.translate("\n\nHallo wereld\n", CONTEXT)

        assert result == "\n\nHello world\n"
        assert models.requests[0]["model"] == "gemini-test"

    def test_prompt_carries_languages_and_content(self):
        """The prompt should name both languages and include the stripped text."""
        translator, models = make_translator("Hello")
        translator.translate("  Hallo  ", CONTEXT)

        prompt = models.requests[0]["contents"]
        assert "from Dutch to English" in prompt
        assert prompt.endswith("Hallo")

    def test_blank_document_not_sent(self):
        """Blank documents should be returned unchanged without a request."""
        translator, models = make_translator()
        assert translator.translate("\n \n", CONTEXT) == "\n \n"
        assert models.requests == []

    @pytest.mark.parametrize("answer", [None, "", "   \n"])
    def test_empty_response_is_error(self, answer):
        """An empty answer should be a translation failure."""
        translator, _ = make_translator(answer)
        with pytest.raises(TranslationError) as exc_info:
            translator.translate("Hallo", CONTEXT)
        assert exc_info.value.source_file == "guide/intro.rst"

    def test_identical_response_is_error(self):
        """An answer equal to the source counts as not translated."""
        translator, _ = make_translator("Hallo wereld")
        with pytest.raises(TranslationError):
            translator.translate("Hallo wereld\n", CONTEXT)

    def test_api_error_wrapped(self):
        """Provider errors should carry the status code."""
        error = genai_errors.APIError(503, {"error": {"message": "overloaded", "status": "UNAVAILABLE"}})
        translator, _ = make_translator(error)

        with pytest.raises(TranslationError) as exc_info:
            translator.translate("Hallo", CONTEXT)
        assert exc_info.value.cause is error
        assert exc_info.value.details["status_code"] == 503
        assert exc_info.value.api == "gemini"

    def test_other_exception_wrapped(self):
        """Unexpected client errors should also become TranslationError."""
        boom = ConnectionError("network down")
        translator, _ = make_translator(boom)

        with pytest.raises(TranslationError) as exc_info:
            translator.translate("Hallo", CONTEXT)
        assert exc_info.value.cause is boom
        assert "network down" in str(exc_info.value)

    def test_check_connection_success(self):
        """A non-empty probe answer means the provider is reachable."""
        translator, models = make_translator("This is a test.")
        translator.check_connection(CONTEXT)
        assert "Dutch" in models.requests[0]["contents"]

    @pytest.mark.parametrize("answer", [RuntimeError("401 unauthorized"), ""])
    def test_check_connection_failure(self, answer):
        """Probe errors or empty answers should be setup errors."""
        translator, _ = make_translator(answer)
        with pytest.raises(SetupError):
            translator.check_connection()

    def test_missing_api_key(self):
        """Without key or client the translator cannot be built."""
        with pytest.raises(ConfigError) as exc_info:
            GeminiTranslator(api_key="")
        assert exc_info.value.config_key == "gemini_api_key"

    def test_factory_uses_config(self):
        """create_translator should pass model settings through."""
        config = Config()
        config.gemini_api_key = "test-key"
        config.translation.model = "gemini-other"
        translator = create_translator(config)

        assert isinstance(translator, GeminiTranslator)
        assert translator.model == "gemini-other"
        assert translator.temperature == config.translation.temperature


class TestPrompts:
    """Tests for prompt builders."""

    def test_document_prompt_rules(self):
        """Document prompt should ask to keep markup and placeholders."""
        prompt = build_document_prompt("Zie {naam}", "Dutch", "German")
        assert "from Dutch to German" in prompt
        assert "curly braces {}" in prompt
        assert "reStructuredText" in prompt
        assert prompt.endswith("Zie {naam}")

    def test_probe_prompt(self):
        """Probe prompt should use the language pair."""
        assert build_probe_prompt("Dutch", "English") == \
            "Translate this Dutch text to English: 'This is a test.'"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
