from types import SimpleNamespace

import httpx
import openai
import pytest

from civic_reporter.errors import NetworkFailure, ParseFailure
from civic_reporter.llm import LLMClient, clean_json


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def client_with(completions):
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMClient(api_key="test", model="gpt-4o-mini", client=fake)


def test_clean_json_strips_fences():
    assert clean_json('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json('{"a": 1}') == '{"a": 1}'


def test_ask_json_parses_fenced_reply():
    completions = FakeCompletions('```json\n{"category": "municipal"}\n```')
    data = client_with(completions).ask_json("system", "user")

    assert data == {"category": "municipal"}
    assert completions.kwargs["response_format"] == {"type": "json_object"}
    assert completions.kwargs["messages"][0] == {"role": "system", "content": "system"}


def test_ask_returns_text():
    completions = FakeCompletions("  Hello citizen  ")
    assert client_with(completions).ask("system", "hi", max_tokens=600) == "Hello citizen"
    assert completions.kwargs["max_tokens"] == 600
    assert "response_format" not in completions.kwargs


def test_non_json_reply_is_parse_failure():
    with pytest.raises(ParseFailure):
        client_with(FakeCompletions("I think it's a pothole")).ask_json("system", "user")


def test_json_list_is_parse_failure():
    with pytest.raises(ParseFailure):
        client_with(FakeCompletions("[1, 2]")).ask_json("system", "user")


def test_empty_reply_is_parse_failure():
    with pytest.raises(ParseFailure):
        client_with(FakeCompletions("")).ask("system", "user")


def test_openai_error_is_network_failure():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    with pytest.raises(NetworkFailure):
        client_with(FakeCompletions(error=error)).ask("system", "user")


def test_missing_key_is_network_failure():
    with pytest.raises(NetworkFailure):
        LLMClient(api_key="").ask("system", "user")
