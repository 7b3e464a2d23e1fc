"""Interactive input for commands.

Commands never call click.prompt directly; they ask the Prompter on the
AppContext, so tests can drive them with CliRunner input or a MagicMock.
"""

from __future__ import annotations

from collections.abc import Sequence

import click


def _non_blank(value: str) -> str:
    if not value.strip():
        raise click.UsageError("A value is required.")
    return value.strip()


class Prompter:
    def text(self, message: str, default: str | None = None, required: bool = True) -> str:
        if required:
            return click.prompt(message, default=default, value_proc=_non_blank)
        return click.prompt(message, default=default or "", show_default=bool(default)).strip()

    def confirm(self, message: str, default: bool = False) -> bool:
        return click.confirm(message, default=default)

    def choose(self, message: str, choices: Sequence[str], default: str | None = None) -> str:
        return click.prompt(message, type=click.Choice(list(choices)), default=default)

    def edit(self, text: str, editor: str | None = None) -> str:
        """Open text in an editor; an unsaved buffer returns the original text."""
        edited = click.edit(text, editor=editor, require_save=True)
        return text if edited is None else edited.strip()
