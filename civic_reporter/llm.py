from openai import OpenAI, OpenAIError
import json
import logging
import re

from . import config
from .errors import NetworkFailure, ParseFailure

logger = logging.getLogger(__name__)


def clean_json(text: str) -> str:
    """Removes markdown code blocks to isolate JSON string."""
    return re.sub(r"```(?:json)?\s?|\s?```", "", text or "").strip()


class LLMClient:
    """Thin wrapper over the OpenAI chat completions client.

    Every failure is raised as NetworkFailure or ParseFailure so callers only
    have to catch the service's own errors before falling back.
    """

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or config.OPENAI_MODEL
        self._api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self._api_key:
                raise NetworkFailure("OPENAI_API_KEY missing")
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def complete(self, messages: list, max_tokens: int = 300, temperature: float = 0.3,
                 json_mode: bool = False) -> str:
        kwargs = {"response_format": {"type": "json_object"}} if json_mode else {}
        try:
            res = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                **kwargs,
            )
        except OpenAIError as e:
            raise NetworkFailure(f"OpenAI request failed: {e}") from e

        content = res.choices[0].message.content if res.choices else None
        if not content:
            raise ParseFailure("Empty completion from model")
        return content.strip()

    def ask(self, system_prompt: str, user_content, max_tokens: int = 300,
            temperature: float = 0.7) -> str:
        return self.complete(
            [{"role": "system", "content": system_prompt}, {"role": "user", "content": user_content}],
            max_tokens=max_tokens,
            temperature=temperature,
        )

    def ask_json(self, system_prompt: str, user_content, max_tokens: int = 300,
                 temperature: float = 0.3) -> dict:
        text = self.complete(
            [{"role": "system", "content": system_prompt}, {"role": "user", "content": user_content}],
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=True,
        )
        logger.debug("Model JSON reply: %s", text)
        try:
            data = json.loads(clean_json(text))
        except json.JSONDecodeError as e:
            raise ParseFailure(f"Model reply is not JSON: {text[:200]}") from e
        if not isinstance(data, dict):
            raise ParseFailure("Model reply is not a JSON object")
        return data
