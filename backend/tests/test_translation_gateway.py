import asyncio

import pytest

from conftest import FakeTranslator
from interpreter.services.exceptions import TranslationFailure, TranslationUnavailable
from interpreter.services.translation import Language, TranslationGateway


# =============================================================================
# Language lookup
# =============================================================================

@pytest.mark.parametrize("code,expected", [
    ("es", Language.SPANISH),
    ("es-ES", Language.SPANISH),
    ("ZH", Language.CHINESE),
    ("", Language.NONE),
    (None, Language.NONE),
    ("xx", Language.NONE),
])
def test_language_from_code(code, expected):
    assert Language.from_code(code) is expected


def test_language_locales():
    assert Language.SPANISH.locale == "es"
    assert Language.CHINESE.locale == "zh-CN"
    assert Language.ENGLISH.code == "en"


# =============================================================================
# Language selection
# =============================================================================

@pytest.mark.asyncio
async def test_disabled_until_a_language_is_selected(gateway):
    assert gateway.current_language is Language.NONE
    assert not gateway.is_enabled()
    assert gateway.target_locale == "en-US"

    assert await gateway.translate("Hello there.") == "Hello there."


@pytest.mark.asyncio
async def test_select_language_prepares_pair_and_reports_progress(gateway, translator):
    progress = []

    assert await gateway.select_language(Language.SPANISH, on_progress=progress.append)

    assert translator.prepared == [("en", "es")]
    assert progress == ["Preparing translation model...", "Translation ready"]
    assert gateway.is_enabled()
    assert gateway.current_language is Language.SPANISH
    assert gateway.target_locale == "es"


@pytest.mark.asyncio
async def test_prepare_runs_once_per_pair(gateway, translator):
    await gateway.select_language(Language.SPANISH)
    await gateway.select_language(Language.FRENCH)
    await gateway.select_language(Language.SPANISH)

    assert translator.prepared == [("en", "es"), ("en", "fr")]
    assert gateway.current_language is Language.SPANISH


@pytest.mark.asyncio
async def test_concurrent_selection_of_same_pair_prepares_once():
    translator = FakeTranslator(prepare_delay=0.1)
    gateway = TranslationGateway(translator, timeout_sec=1.0)

    results = await asyncio.gather(
        gateway.select_language(Language.GERMAN),
        gateway.select_language(Language.GERMAN),
    )

    assert translator.prepared == [("en", "de")]
    # the first selection was superseded by the second
    assert results == [False, True]
    assert gateway.current_language is Language.GERMAN


@pytest.mark.asyncio
async def test_newer_selection_wins_over_slower_older_one():
    translator = FakeTranslator(prepare_delay=0.1)
    gateway = TranslationGateway(translator, timeout_sec=1.0)

    slow = asyncio.create_task(gateway.select_language(Language.JAPANESE))
    await asyncio.sleep(0)
    assert await gateway.select_language(Language.NONE)

    assert await slow is False
    assert gateway.current_language is Language.NONE
    assert not gateway.is_enabled()


@pytest.mark.asyncio
async def test_selecting_none_disables_translation(gateway):
    await gateway.select_language(Language.SPANISH)

    assert await gateway.select_language(Language.NONE)

    assert not gateway.is_enabled()
    assert await gateway.translate("Hello there.") == "Hello there."


@pytest.mark.asyncio
async def test_same_source_and_target_needs_no_translator(gateway, translator):
    assert await gateway.select_language(Language.ENGLISH)

    assert translator.prepared == []
    assert not gateway.is_enabled()


@pytest.mark.asyncio
async def test_select_without_translator_fails():
    gateway = TranslationGateway(None)
    progress = []

    assert not await gateway.select_language(Language.SPANISH, on_progress=progress.append)

    assert progress == ["Translation unavailable"]
    assert not gateway.is_enabled()


@pytest.mark.asyncio
async def test_prepare_failure_keeps_translation_disabled():
    translator = FakeTranslator(prepare_error=TranslationUnavailable("Language 'hi' is not supported"))
    gateway = TranslationGateway(translator)
    progress = []

    assert not await gateway.select_language(Language.HINDI, on_progress=progress.append)

    assert progress[-1] == "Translation unavailable: Hindi (हिन्दी)"
    assert gateway.current_language is Language.NONE
    assert not gateway.is_enabled()


# =============================================================================
# Translation
# =============================================================================

@pytest.mark.asyncio
async def test_translate_uses_active_pair(gateway, translator):
    await gateway.select_language(Language.SPANISH)

    assert await gateway.translate("Hello there.") == "[es] Hello there."
    assert translator.calls == ["Hello there."]


@pytest.mark.asyncio
async def test_translate_error_passes_original_through():
    translator = FakeTranslator(fail_on={"Hello there."})
    gateway = TranslationGateway(translator)
    await gateway.select_language(Language.SPANISH)

    assert await gateway.translate("Hello there.") == "Hello there."

    with pytest.raises(TranslationFailure):
        await gateway.translate_or_raise("Hello there.")


@pytest.mark.asyncio
async def test_translate_timeout_passes_original_through():
    translator = FakeTranslator(delays={"Slow sentence.": 0.5})
    gateway = TranslationGateway(translator, timeout_sec=0.05)
    await gateway.select_language(Language.SPANISH)

    assert await gateway.translate("Slow sentence.") == "Slow sentence."


@pytest.mark.asyncio
async def test_empty_translation_counts_as_failure():
    translator = FakeTranslator(result="")
    gateway = TranslationGateway(translator)
    await gateway.select_language(Language.SPANISH)

    assert await gateway.translate("Hello there.") == "Hello there."

    with pytest.raises(TranslationFailure, match="Empty translation"):
        await gateway.translate_or_raise("Hello there.")


@pytest.mark.asyncio
async def test_empty_text_is_not_sent_to_translator(gateway, translator):
    await gateway.select_language(Language.SPANISH)

    assert await gateway.translate("") == ""
    assert translator.calls == []


@pytest.mark.asyncio
async def test_timed_out_calls_still_count_against_the_concurrency_limit():
    slow = {f"Sentence {i}.": 0.3 for i in range(6)}
    translator = FakeTranslator(delays=slow)
    gateway = TranslationGateway(translator, timeout_sec=0.05, max_concurrent_translations=2)
    await gateway.select_language(Language.SPANISH)

    results = await asyncio.gather(*(gateway.translate(text) for text in slow))
    await asyncio.sleep(0.4)

    assert results == list(slow)
    assert translator.max_active <= 2
    gateway.close()
