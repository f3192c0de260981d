"""
LLM provider clients.

Both vendors expose an OpenAI-style chat-completions endpoint, so one
client class covers them; the subclasses only differ in where the URL,
key and model come from.

    Primary   -> Alibaba Qwen (DashScope compatible mode)
    Secondary -> Doubao (Volcengine Ark); the "model" is an endpoint id
"""
import os
import logging
from typing import Optional

import requests

from app.services.errors import ConfigError, ProviderError

logger = logging.getLogger(__name__)

QWEN_DEFAULT_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions"
DOUBAO_DEFAULT_URL = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"
DEFAULT_TIMEOUT_SECONDS = 60


def get_timeout() -> float:
    """Per-request timeout (LLM_TIMEOUT_SECONDS)."""
    try:
        return float(os.getenv("LLM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    except ValueError:
        return float(DEFAULT_TIMEOUT_SECONDS)


class ChatCompletionClient:
    """Sends one prompt to one chat-completions endpoint and returns the reply."""

    name = "provider"

    def __init__(
        self,
        api_key: Optional[str],
        model: Optional[str],
        url: str,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout if timeout is not None else get_timeout()

    def check_config(self):
        if not self.api_key:
            raise ConfigError(f"{self.name}: API key is not configured")
        if not self.model:
            raise ConfigError(f"{self.name}: model is not configured")

    def complete(self, prompt: str) -> str:
        """
        Run a single chat completion.

        Raises:
            ConfigError: credentials missing; nothing is sent.
            ProviderError: non-2xx status, transport failure or a reply
                without ``choices[0].message.content``.
        """
        self.check_config()

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ProviderError(self.name, None, str(e)) from e

        if not response.ok:
            raise ProviderError(self.name, response.status_code, response.text)

        try:
            data = response.json()
            return data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(self.name, response.status_code, response.text) from e

    def __repr__(self):
        return f"<{self.__class__.__name__} model={self.model}>"


class QwenClient(ChatCompletionClient):
    name = "qwen"

    @classmethod
    def from_env(cls):
        return cls(
            api_key=os.getenv("QWEN_API_KEY"),
            model=os.getenv("QWEN_MODEL", "qwen-plus"),
            url=os.getenv("QWEN_API_URL", QWEN_DEFAULT_URL),
        )


class DoubaoClient(ChatCompletionClient):
    name = "doubao"

    @classmethod
    def from_env(cls):
        return cls(
            api_key=os.getenv("DOUBAO_API_KEY"),
            model=os.getenv("DOUBAO_ENDPOINT_ID"),
            url=os.getenv("DOUBAO_API_URL", DOUBAO_DEFAULT_URL),
        )

    def check_config(self):
        if not self.api_key:
            raise ConfigError("doubao: DOUBAO_API_KEY is not set")
        if not self.model:
            raise ConfigError("doubao: DOUBAO_ENDPOINT_ID is not set")
