from __future__ import annotations

from typing import Any

from anthropic import Anthropic, AnthropicError
from anthropic.types import TextBlock

from gitflow_core.errors import GenerationError
from gitflow_core.providers.base import BaseGenerator


class AnthropicGenerator(BaseGenerator):
    NAME = "Anthropic"
    MODEL = "claude-sonnet-4-20250514"
    TEMPERATURE = 0.7

    def __init__(self, api_key: str, client: Any = None):
        self.client = client if client is not None else Anthropic(api_key=api_key)

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.MODEL,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
            )
        except AnthropicError as e:
            raise GenerationError(f"Anthropic API error: {getattr(e, 'message', None) or e}") from e
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip()
