"""Credential fallbacks used when the config file holds no secret.

Resolution order for the GitHub token (stops at first success):
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session, works after `gh auth login`)

The generation credential only falls back to the provider's own environment
variable (OPENAI_API_KEY or ANTHROPIC_API_KEY).
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping

logger = logging.getLogger(__name__)

AI_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def resolve_github_token(env: Mapping[str, str] | None = None) -> str | None:
    """Return a GitHub token or None if no fallback source is available.

    Never raises. Callers that need a token raise ConfigurationError themselves.
    """
    env = os.environ if env is None else env
    token = env.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh missing or hung: there is simply no fallback.
        pass

    return None


def resolve_ai_api_key(provider: str, env: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if env is None else env
    var = AI_KEY_ENV_VARS.get(provider)
    if var is None:
        return None
    return env.get(var) or None
