"""
Unit tests for the optional model rewrite of email drafts.
"""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from presse_leads.rewrite import _safe_parse_json, is_available, rewrite_email
from presse_leads.types import EmailDraft

DRAFT = EmailDraft(subject="GQ - hors-série", body="Bonjour,\n\nJe vous contacte car...")


@pytest.fixture
def ai_settings(settings):
    return replace(settings, openai_api_key="sk-test")


def _client(output_text):
    client = MagicMock()
    client.responses.create.return_value = MagicMock(output_text=output_text)
    return client


class TestSafeParseJson:
    def test_plain_json(self):
        assert _safe_parse_json('{"subject": "a", "body": "b"}') == {"subject": "a", "body": "b"}

    def test_json_inside_text(self):
        assert _safe_parse_json('Voici :\n{"subject": "a", "body": "b"}\nMerci') == {"subject": "a", "body": "b"}

    def test_garbage(self):
        assert _safe_parse_json("pas du json") == {}
        assert _safe_parse_json("[1, 2]") == {}


class TestRewriteEmail:
    def test_availability(self, settings, ai_settings):
        assert is_available(settings) is False
        assert is_available(ai_settings) is True

    def test_parsed_answer(self, ai_settings):
        client = _client('{"subject": "GQ : votre hors-série", "body": "Bonjour,\\n\\nNouveau texte"}')
        with patch("presse_leads.rewrite._get_client", return_value=client):
            result = rewrite_email(DRAFT, settings=ai_settings, use_cache=False)

        assert result == EmailDraft(subject="GQ : votre hors-série", body="Bonjour,\n\nNouveau texte")
        kwargs = client.responses.create.call_args.kwargs
        assert kwargs["model"] == ai_settings.openai_model
        assert "Je vous contacte car..." in kwargs["input"]

    def test_raw_text_answer_keeps_subject(self, ai_settings):
        with patch("presse_leads.rewrite._get_client", return_value=_client("Bonjour, texte libre")):
            result = rewrite_email(DRAFT, settings=ai_settings, use_cache=False)
        assert result.subject == DRAFT.subject
        assert result.body == "Bonjour, texte libre"

    def test_cached_answer_is_reused(self, ai_settings):
        client = _client('{"subject": "S", "body": "B"}')
        with patch("presse_leads.rewrite._get_client", return_value=client):
            first = rewrite_email(DRAFT, instructions="plus court", settings=ai_settings)
            second = rewrite_email(DRAFT, instructions="plus court", settings=ai_settings)
        assert first == second == EmailDraft(subject="S", body="B")
        assert client.responses.create.call_count == 1
