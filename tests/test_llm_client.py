from unittest.mock import patch, MagicMock

import httpx
import openai
import pytest

from nps_dashboard.errors import GenerationError
from nps_dashboard.llm_client import call_llm


def _client_returning(content):
    client = MagicMock()
    message = MagicMock()
    message.content = content
    client.chat.completions.create.return_value.choices = [MagicMock(message=message)]
    return client


class TestCallLlm:

    @patch("nps_dashboard.llm_client.get_client")
    def test_returns_parsed_json(self, mock_get_client):
        mock_get_client.return_value = _client_returning('{"positive": 1}')
        assert call_llm("system", "user") == {"positive": 1}

        kwargs = mock_get_client.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    @patch("nps_dashboard.llm_client.get_client")
    def test_plain_text_mode(self, mock_get_client):
        mock_get_client.return_value = _client_returning("  hello ")
        assert call_llm("system", "user", expect_json=False) == "hello"
        kwargs = mock_get_client.return_value.chat.completions.create.call_args.kwargs
        assert "response_format" not in kwargs

    @patch("nps_dashboard.llm_client.get_client")
    def test_invalid_json_raises(self, mock_get_client, caplog):
        mock_get_client.return_value = _client_returning("Sure! Here you go: {")
        with pytest.raises(GenerationError):
            call_llm("system", "user")
        assert "Sure! Here you go" in caplog.text

    @patch("nps_dashboard.llm_client.get_client")
    def test_json_array_is_rejected(self, mock_get_client):
        mock_get_client.return_value = _client_returning("[1, 2]")
        with pytest.raises(GenerationError):
            call_llm("system", "user")

    @patch("nps_dashboard.llm_client.get_client")
    def test_no_choices_raises(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.return_value.choices = []
        mock_get_client.return_value = client
        with pytest.raises(GenerationError, match="Empty LLM response"):
            call_llm("system", "user")

    @patch("nps_dashboard.llm_client.get_client")
    def test_missing_message_raises(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.return_value.choices = [MagicMock(message=None)]
        mock_get_client.return_value = client
        with pytest.raises(GenerationError, match="Empty LLM response"):
            call_llm("system", "user")

    @patch("nps_dashboard.llm_client.get_client")
    def test_api_error_becomes_generation_error(self, mock_get_client):
        request = httpx.Request("POST", "https://llm.example/v1/chat/completions")
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)
        mock_get_client.return_value = client

        with pytest.raises(GenerationError) as exc:
            call_llm("system", "user")
        assert isinstance(exc.value.__cause__, openai.APIConnectionError)
