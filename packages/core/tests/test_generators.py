"""Tests for the text-generation backends.

Shared behaviour (prompt building, per-intent post-processing) lives in
BaseGenerator and is tested once via a stub. Provider tests cover only the
SDK call and its error translation, with fake clients injected.
"""

from unittest.mock import MagicMock

import pytest
from anthropic import AnthropicError
from anthropic.types import TextBlock
from openai import OpenAIError

from gitflow_core.errors import GenerationError
from gitflow_core.providers.anthropic import AnthropicGenerator
from gitflow_core.providers.base import BaseGenerator, Intent, build_user_prompt, parse_response
from gitflow_core.providers.openai import OpenAIGenerator


class _StubGenerator(BaseGenerator):
    def __init__(self, response: str = "feat: add login"):
        self.response = response
        self.calls: list[tuple[str, str]] = []

    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        return self.response


# ---------------------------------------------------------------------------
# Shared behaviour
# ---------------------------------------------------------------------------


class TestParseResponse:
    def test_commit_keeps_first_line_only(self):
        result = parse_response("feat(auth): add login\n\nLonger body here.", Intent.COMMIT)
        assert result.content == "feat(auth): add login"
        assert result.confidence == 0.8

    def test_issue_title_strips_quotes(self):
        result = parse_response('"Login fails on Safari"\nextra', Intent.ISSUE)
        assert result.content == "Login fails on Safari"

    def test_review_extracts_bullets(self):
        raw = "Overall fine.\n- Add tests\n* Handle None\nNot a bullet"
        result = parse_response(raw, Intent.REVIEW)
        assert result.content == raw
        assert result.suggestions == ["Add tests", "Handle None"]
        assert result.confidence == 0.75

    def test_review_without_bullets_has_no_suggestions(self):
        assert parse_response("Looks good.", Intent.REVIEW).suggestions is None

    def test_pr_description_passes_through(self):
        raw = "## Summary\n\nAdds login.\n\n## Testing\n\nManual."
        result = parse_response(raw, Intent.PR)
        assert result.content == raw
        assert result.confidence == 0.85

    def test_empty_response_raises(self):
        with pytest.raises(GenerationError):
            parse_response("   \n", Intent.COMMIT)


class TestPrompts:
    def test_commit_prompt_contains_diff(self):
        assert "+added line" in build_user_prompt(Intent.COMMIT, "+added line")

    def test_pr_prompt_contains_title_and_diff(self):
        prompt = build_user_prompt(Intent.PR, "+x = 1", title="Add x")
        assert "Title: Add x" in prompt
        assert "+x = 1" in prompt


class TestBaseGenerator:
    def test_commit_message_uses_commit_prompt(self):
        gen = _StubGenerator("fix: handle empty input\nbody")
        result = gen.commit_message("diff --git a/x b/x")
        assert result.content == "fix: handle empty input"
        system, user = gen.calls[0]
        assert "commit" in system.lower()
        assert "diff --git a/x b/x" in user

    def test_one_call_per_request(self):
        gen = _StubGenerator("Some review\n- one")
        gen.review("diff")
        assert len(gen.calls) == 1

    def test_backend_error_propagates_without_retry(self):
        class _Failing(BaseGenerator):
            calls = 0

            def _call_api(self, system_prompt: str, user_prompt: str) -> str:
                _Failing.calls += 1
                raise GenerationError("rate limited")

        with pytest.raises(GenerationError, match="rate limited"):
            _Failing().issue_title("Login page crashes")
        assert _Failing.calls == 1


# ---------------------------------------------------------------------------
# Provider-specific
# ---------------------------------------------------------------------------


def _openai_response(content):
    message = MagicMock(content=content)
    return MagicMock(choices=[MagicMock(message=message)])


class TestOpenAIGenerator:
    def test_sends_system_and_user_messages(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_response("feat: add x")

        result = OpenAIGenerator(api_key="sk-test", client=client).commit_message("+x")

        assert result.content == "feat: add x"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == OpenAIGenerator.MODEL
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]

    def test_sdk_error_becomes_generation_error(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = OpenAIError("invalid api key")

        with pytest.raises(GenerationError, match="invalid api key"):
            OpenAIGenerator(api_key="sk-test", client=client).commit_message("+x")

    def test_empty_choices_raise(self):
        client = MagicMock()
        client.chat.completions.create.return_value = MagicMock(choices=[])

        with pytest.raises(GenerationError):
            OpenAIGenerator(api_key="sk-test", client=client).commit_message("+x")


class TestAnthropicGenerator:
    def test_joins_text_blocks(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(
            content=[TextBlock(type="text", text="Login fails"), TextBlock(type="text", text=" on Safari")]
        )

        result = AnthropicGenerator(api_key="sk-ant", client=client).issue_title("It crashes")

        assert result.content == "Login fails on Safari"
        kwargs = client.messages.create.call_args.kwargs
        assert "claude" in kwargs["model"]
        assert kwargs["system"]
        assert kwargs["messages"][0]["role"] == "user"

    def test_sdk_error_becomes_generation_error(self):
        client = MagicMock()
        client.messages.create.side_effect = AnthropicError("overloaded")

        with pytest.raises(GenerationError, match="overloaded"):
            AnthropicGenerator(api_key="sk-ant", client=client).review("+x")
