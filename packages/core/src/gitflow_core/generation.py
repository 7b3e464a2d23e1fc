"""Backend selection for AI features.

Selection is a pure function of the effective configuration. A disabled,
unknown or uncredentialed provider fails here, before any client exists.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from gitflow_core.auth import AI_KEY_ENV_VARS
from gitflow_core.config import EffectiveConfiguration
from gitflow_core.errors import ConfigurationError
from gitflow_core.providers.base import BaseGenerator

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[str], BaseGenerator]


def _openai_factory(api_key: str) -> BaseGenerator:
    from gitflow_core.providers.openai import OpenAIGenerator

    return OpenAIGenerator(api_key=api_key)


def _anthropic_factory(api_key: str) -> BaseGenerator:
    from gitflow_core.providers.anthropic import AnthropicGenerator

    return AnthropicGenerator(api_key=api_key)


DEFAULT_FACTORIES: dict[str, GeneratorFactory] = {
    "openai": _openai_factory,
    "anthropic": _anthropic_factory,
}


def get_generator(
    config: EffectiveConfiguration,
    factories: Mapping[str, GeneratorFactory] | None = None,
) -> BaseGenerator:
    factories = DEFAULT_FACTORIES if factories is None else factories
    provider = config.ai_provider

    if provider == "none":
        raise ConfigurationError(
            "AI features are disabled (ai_provider is 'none'). "
            "Run `gitflow config set ai_provider openai` to enable them."
        )
    if provider not in factories:
        raise ConfigurationError(f"Unknown AI provider: {provider!r}. Choose 'openai', 'anthropic' or 'none'.")
    if not config.ai_api_key:
        env_var = AI_KEY_ENV_VARS.get(provider, "the provider's API key variable")
        raise ConfigurationError(
            f"AI API key not configured. Run `gitflow config set ai_api_key <key>` or set {env_var}."
        )

    logger.debug("Using %s generation backend.", provider)
    return factories[provider](config.ai_api_key)
