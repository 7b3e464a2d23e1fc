"""Tests for generation backend selection."""

from unittest.mock import MagicMock

import pytest

from gitflow_core.config import EffectiveConfiguration
from gitflow_core.errors import ConfigurationError
from gitflow_core.generation import get_generator
from gitflow_core.providers.anthropic import AnthropicGenerator
from gitflow_core.providers.openai import OpenAIGenerator


def _config(provider="openai", key="sk-test"):
    return EffectiveConfiguration(github_token=None, ai_provider=provider, ai_api_key=key)


def _factories():
    return {"openai": MagicMock(name="openai"), "anthropic": MagicMock(name="anthropic")}


class TestGetGenerator:
    def test_selects_first_party(self):
        factories = _factories()
        gen = get_generator(_config("openai"), factories)
        factories["openai"].assert_called_once_with("sk-test")
        assert gen is factories["openai"].return_value

    def test_selects_second_party(self):
        factories = _factories()
        get_generator(_config("anthropic", "sk-ant"), factories)
        factories["anthropic"].assert_called_once_with("sk-ant")
        factories["openai"].assert_not_called()

    def test_none_disables_without_constructing_clients(self):
        factories = _factories()
        with pytest.raises(ConfigurationError, match="disabled"):
            get_generator(_config("none"), factories)
        for factory in factories.values():
            factory.assert_not_called()

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown AI provider"):
            get_generator(_config("llama"), _factories())

    def test_missing_key_names_env_var(self):
        factories = _factories()
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            get_generator(_config("openai", None), factories)
        factories["openai"].assert_not_called()

    def test_default_factories_build_real_generators(self):
        assert isinstance(get_generator(_config("openai")), OpenAIGenerator)
        assert isinstance(get_generator(_config("anthropic")), AnthropicGenerator)
