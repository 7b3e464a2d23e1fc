"""Base generator implementing the Template Method pattern.

All providers share the same generation algorithm:
    <intent operation>() → _system_prompt() + _user_prompt()
                         → _call_api()   ← only this differs per provider
                         → parse_response()

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

There is no retry: one failed call is one failed command.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from enum import Enum

from gitflow_core.errors import GenerationError
from gitflow_core.models import GenerationResult

logger = logging.getLogger(__name__)

_MAX_TOKENS = 500


class Intent(str, Enum):
    COMMIT = "commit"
    PR = "pr"
    REVIEW = "review"
    ISSUE = "issue"


SYSTEM_PROMPTS = {
    Intent.COMMIT: (
        "You are an expert developer writing clear, concise git commit messages following "
        "conventional commit format. Always use the format: type(scope): description. "
        "Reply with a single line of at most 72 characters."
    ),
    Intent.PR: (
        "You are an expert developer writing clear, professional pull request descriptions. "
        "Include a summary, changes made, and any testing notes."
    ),
    Intent.REVIEW: (
        "You are an expert code reviewer. Provide constructive feedback on code quality, potential bugs, "
        "improvements, and best practices. Be specific and helpful. "
        "List each actionable suggestion on its own line starting with '- '."
    ),
    Intent.ISSUE: (
        "You are an expert developer creating clear, concise GitHub issue titles. "
        "Summarize the core problem or feature request in under 60 characters."
    ),
}

CONFIDENCE = {
    Intent.COMMIT: 0.8,
    Intent.PR: 0.85,
    Intent.REVIEW: 0.75,
    Intent.ISSUE: 0.8,
}

_BULLET_RE = re.compile(r"^[-*]\s*")


def build_user_prompt(intent: Intent, text: str, title: str | None = None) -> str:
    if intent is Intent.COMMIT:
        return f"Based on this git diff, generate an appropriate commit message:\n\n{text}"
    if intent is Intent.PR:
        return (
            "Based on this pull request title and diff, generate a professional PR description:\n\n"
            f"Title: {title or ''}\n\nDiff:\n{text}"
        )
    if intent is Intent.REVIEW:
        return f"Review this code diff and provide constructive feedback:\n\n{text}"
    return f"Based on this description, generate a clear, concise GitHub issue title:\n\n{text}"


def parse_response(raw: str, intent: Intent) -> GenerationResult:
    """Apply the intent's post-processing rule to a raw model response."""
    cleaned = (raw or "").strip()
    suggestions: list[str] | None = None

    if intent is Intent.COMMIT:
        content = cleaned.split("\n", 1)[0].strip()
    elif intent is Intent.ISSUE:
        content = cleaned.split("\n", 1)[0].strip().strip("\"'").strip()
    elif intent is Intent.REVIEW:
        content = cleaned
        bullets = [
            _BULLET_RE.sub("", line.strip()).strip()
            for line in cleaned.splitlines()
            if line.strip().startswith(("-", "*"))
        ]
        suggestions = [b for b in bullets if b] or None
    else:
        content = cleaned

    if not content:
        raise GenerationError(f"The model returned an empty response for the {intent.value} request.")
    return GenerationResult(content=content, confidence=CONFIDENCE[intent], suggestions=suggestions)


class BaseGenerator(ABC):
    NAME: str = "AI"
    MAX_TOKENS: int = _MAX_TOKENS

    # ------------------------------------------------------------------ #
    # Public interface: one method per intent                              #
    # ------------------------------------------------------------------ #

    def commit_message(self, diff: str) -> GenerationResult:
        return self._generate(Intent.COMMIT, diff)

    def pr_description(self, title: str, diff: str) -> GenerationResult:
        return self._generate(Intent.PR, diff, title=title)

    def review(self, diff: str) -> GenerationResult:
        return self._generate(Intent.REVIEW, diff)

    def issue_title(self, description: str) -> GenerationResult:
        return self._generate(Intent.ISSUE, description)

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                                 #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> str:
        """Make a single API call and return the raw text response.

        Raise GenerationError on failure, with the backend's message preserved.
        """

    # ------------------------------------------------------------------ #
    # Shared implementation                                                #
    # ------------------------------------------------------------------ #

    def _generate(self, intent: Intent, text: str, title: str | None = None) -> GenerationResult:
        system = SYSTEM_PROMPTS[intent]
        user = build_user_prompt(intent, text, title)
        logger.debug("%s: %s request (%d chars of input)", self.__class__.__name__, intent.value, len(text))
        raw = self._call_api(system, user)
        return parse_response(raw, intent)
