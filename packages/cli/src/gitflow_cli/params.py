"""Parameter merge: flags over configured defaults, prompting last."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from gitflow_cli.prompts import Prompter


def merge_params(flags: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay non-None flags on non-None defaults.

    An explicit flag always wins, even when it is falsy (False, 0, "").
    """
    merged = {k: v for k, v in defaults.items() if v is not None}
    merged.update({k: v for k, v in flags.items() if v is not None})
    return merged


def missing_params(params: Mapping[str, Any], required: Mapping[str, str]) -> list[str]:
    return [key for key in required if params.get(key) in (None, "")]


def resolve_params(
    flags: Mapping[str, Any],
    defaults: Mapping[str, Any],
    required: Mapping[str, str],
    prompter: Prompter,
) -> dict[str, Any]:
    """Merge flags and defaults, then prompt for each required key still missing.

    required maps a parameter name to its prompt text. Keys already supplied
    are never prompted for.
    """
    params = merge_params(flags, defaults)
    for key in missing_params(params, required):
        params[key] = prompter.text(required[key])
    return params
