from __future__ import annotations

from typing import Any

from openai import OpenAI, OpenAIError

from gitflow_core.errors import GenerationError
from gitflow_core.providers.base import BaseGenerator


class OpenAIGenerator(BaseGenerator):
    NAME = "OpenAI"
    MODEL = "gpt-4o"
    TEMPERATURE = 0.7

    def __init__(self, api_key: str, client: Any = None):
        self.client = client if client is not None else OpenAI(api_key=api_key)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
        except OpenAIError as e:
            raise GenerationError(f"OpenAI API error: {getattr(e, 'message', None) or e}") from e
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
