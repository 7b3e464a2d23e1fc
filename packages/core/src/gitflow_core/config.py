"""Persistent user configuration.

A flat YAML document at ~/.gitflow/config.yml. The file is read once when the
store is constructed and rewritten whole on every set/clear. There is no
locking: two processes racing on `set` lose one update (last write wins).

Effective values are merged (in order of precedence):
  1. Values persisted in the config file
  2. Credential fallbacks from the environment (GITHUB_TOKEN, gh CLI, *_API_KEY)
  3. Built-in defaults
CLI flags and interactive prompts are layered on top by the CLI.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from gitflow_core.auth import resolve_ai_api_key, resolve_github_token
from gitflow_core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".gitflow" / "config.yml"

CONFIG_KEYS = (
    "github_token",
    "default_branch",
    "ai_provider",
    "ai_api_key",
    "editor",
    "auto_open_pr",
)

DEFAULT_CONFIG: dict[str, Any] = {
    "default_branch": "main",
    "ai_provider": "openai",
    "auto_open_pr": False,
}

SECRET_KEYS = frozenset({"github_token", "ai_api_key"})

# "openai" is the first-party backend, "anthropic" the second-party one,
# "none" disables every AI feature.
AI_PROVIDERS = ("openai", "anthropic", "none")

GITHUB_TOKEN_PREFIXES = ("ghp_", "github_pat_")

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def coerce_value(raw: Any) -> Any:
    """Convert a command-line string to the type it looks like.

    "true"/"false" become booleans and numeric literals become int or float.
    Everything else (and any non-string) is returned unchanged.
    """
    if not isinstance(raw, str):
        return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    if _INT_RE.match(raw):
        return int(raw)
    if _FLOAT_RE.match(raw):
        return float(raw)
    return raw


def mask_secret(value: str) -> str:
    """Hide a secret, revealing at most its last four characters."""
    text = str(value)
    if len(text) <= 4:
        return "***"
    return "***" + text[-4:]


@dataclass(frozen=True)
class EffectiveConfiguration:
    """Read-only view of the configuration for the duration of one command."""

    github_token: str | None = None
    default_branch: str = "main"
    ai_provider: str = "openai"
    ai_api_key: str | None = None
    editor: str | None = None
    auto_open_pr: bool = False


class ConfigStore:
    """Flat key-value store backed by a YAML file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {self.path} is not valid YAML: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {self.path} must contain a mapping of keys to values.")
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(self._data, default_flow_style=False, sort_keys=False))
        logger.debug("Wrote %d key(s) to %s", len(self._data), self.path)

    def get(self, key: str) -> Any:
        """Return the stored value, the documented default, or None. Never raises."""
        if key in self._data and self._data[key] is not None:
            return self._data[key]
        return DEFAULT_CONFIG.get(key)

    def set(self, key: str, value: Any) -> Any:
        """Coerce and persist a value, overwriting silently. Returns the stored value."""
        coerced = coerce_value(value)
        self._data[key] = coerced
        self._save()
        return coerced

    def unset(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._save()

    def clear(self) -> None:
        """Drop every stored value so all keys report their defaults again."""
        self._data = {}
        self._save()

    def is_set(self, key: str) -> bool:
        return self._data.get(key) is not None

    def masked(self) -> dict[str, Any]:
        """Return the full effective configuration with secrets masked."""
        keys = list(CONFIG_KEYS) + [k for k in self._data if k not in CONFIG_KEYS]
        result: dict[str, Any] = {}
        for key in keys:
            value = self.get(key)
            if key in SECRET_KEYS and value is not None:
                value = mask_secret(value)
            result[key] = value
        return result

    def validate(self) -> list[str]:
        """Return advisory warnings. Never blocks a `set`."""
        warnings: list[str] = []

        token = self._data.get("github_token")
        if token is not None and not str(token).startswith(GITHUB_TOKEN_PREFIXES):
            warnings.append("GitHub token appears to be invalid (expected a ghp_ or github_pat_ prefix)")

        provider = self._data.get("ai_provider")
        if provider is not None and provider not in AI_PROVIDERS:
            warnings.append(f"AI provider must be one of: {', '.join(AI_PROVIDERS)}")

        for key in self._data:
            if key not in CONFIG_KEYS:
                warnings.append(f"Unknown configuration key: {key}")

        return warnings

    def effective(
        self,
        env: Mapping[str, str] | None = None,
        token_resolver: Callable[[Mapping[str, str] | None], str | None] | None = resolve_github_token,
    ) -> EffectiveConfiguration:
        """Build the effective configuration, filling secrets from the environment.

        Pass ``token_resolver=None`` to skip the GitHub token fallback, which may
        shell out to the gh CLI.
        """
        env = os.environ if env is None else env
        provider = str(self.get("ai_provider"))

        github_token = self.get("github_token")
        if github_token is None and token_resolver is not None:
            github_token = token_resolver(env)

        ai_api_key = self.get("ai_api_key")
        if ai_api_key is None:
            ai_api_key = resolve_ai_api_key(provider, env)

        editor = self.get("editor") or env.get("EDITOR") or None

        return EffectiveConfiguration(
            github_token=str(github_token) if github_token is not None else None,
            default_branch=str(self.get("default_branch")),
            ai_provider=provider,
            ai_api_key=str(ai_api_key) if ai_api_key is not None else None,
            editor=editor,
            auto_open_pr=bool(self.get("auto_open_pr")),
        )
