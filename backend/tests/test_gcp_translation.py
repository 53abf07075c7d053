import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from interpreter.services.exceptions import TranslationUnavailable
from interpreter.services.translation.gcp import GCPTranslationService


@pytest.fixture
def mock_client():
    """Mock the Cloud Translation v3 client."""
    with patch("interpreter.services.translation.gcp.translate.TranslationServiceClient") as client_cls:
        client = MagicMock()
        client.get_supported_languages.return_value = SimpleNamespace(
            languages=[SimpleNamespace(language_code=code) for code in ("en", "es", "zh-CN")]
        )
        client_cls.return_value = client
        yield client


@pytest.fixture
def service(mock_client):
    return GCPTranslationService(project_id="test-project")


def test_requires_project_id(monkeypatch, mock_client):
    monkeypatch.setattr("interpreter.services.translation.gcp.settings.GOOGLE_PROJECT_ID", None)

    with pytest.raises(RuntimeError, match="GOOGLE_PROJECT_ID"):
        GCPTranslationService()


def test_prepare_checks_supported_languages_once(service, mock_client):
    service.prepare("en", "es")
    service.prepare("en", "es")

    mock_client.get_supported_languages.assert_called_once_with(
        request={"parent": "projects/test-project/locations/global"}
    )


def test_prepare_rejects_unsupported_language(service):
    with pytest.raises(TranslationUnavailable, match="'hi'"):
        service.prepare("en", "hi")


def test_translate_sends_plain_text_request(service, mock_client):
    mock_client.translate_text.return_value = SimpleNamespace(
        translations=[SimpleNamespace(translated_text="Hola.")]
    )

    assert service.translate("Hello.", "en", "es") == "Hola."

    mock_client.translate_text.assert_called_once_with(
        request={
            "parent": "projects/test-project/locations/global",
            "contents": ["Hello."],
            "mime_type": "text/plain",
            "source_language_code": "en",
            "target_language_code": "es",
        }
    )


def test_translate_without_result_returns_empty(service, mock_client):
    mock_client.translate_text.return_value = SimpleNamespace(translations=[])

    assert service.translate("Hello.", "en", "es") == ""


def test_prepare_accepts_regional_variants(service):
    # only "zh-CN" is listed; "zh" still resolves
    service.prepare("en", "zh")
