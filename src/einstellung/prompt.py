"""Terminal prompt surface built on rich.

``TerminalPrompter`` satisfies ``einstellung.sync.reconciler.Prompter``.
Keys for a change candidate::

    y  accept            a  accept block (same kind, until it changes)
    n  reject (default)  r  reject block
    q  quit without writing anything

Ctrl-C and end of input at a prompt abort the session.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.syntax import Syntax
from rich.text import Text

from einstellung.exceptions import SyncAborted
from einstellung.sync.models import ChangeCandidate, ChangeKind, Choice
from einstellung.sync.reporter import format_candidate

_KEYS: dict[str, Choice] = {
    "y": Choice.ACCEPT,
    "n": Choice.REJECT,
    "a": Choice.ACCEPT_BLOCK,
    "r": Choice.REJECT_BLOCK,
    "q": Choice.QUIT,
}

_HINT = "y: accept | n: reject | a: accept block | r: reject block | q: quit"

_KIND_STYLE = {
    ChangeKind.ADDITION: "green",
    ChangeKind.REMOVAL: "red",
}


class TerminalPrompter:
    """Ask reconciliation questions on the terminal.

    Args:
        console: Console to render on; a new stdout console by default.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._hint_shown = False

    def ask(
        self, candidate: ChangeCandidate, index: int, total: int
    ) -> Choice | None:
        """Show *candidate* and read one of the candidate keys."""
        if not self._hint_shown:
            self.console.print(Text(_HINT, style="bold"))
            self._hint_shown = True

        style = _KIND_STYLE[candidate.kind]
        line = Text.assemble(
            (f"[{index + 1}/{total}] ", "dim"),
            (format_candidate(candidate), f"bold {style}"),
        )
        self.console.print(line)
        if candidate.sources:
            self.console.print(
                Text(f"    from {', '.join(candidate.sources)}", style="dim")
            )

        try:
            key = Prompt.ask(
                "Apply?",
                console=self.console,
                choices=list(_KEYS),
                default="n",
                show_choices=True,
            )
        except (KeyboardInterrupt, EOFError):
            raise SyncAborted("Review interrupted") from None
        return _KEYS.get(key.strip().lower())

    def confirm(self, question: str, preview: str) -> bool:
        """Show *preview* as a diff and ask *question* (default: no)."""
        if preview:
            self.console.print(Syntax(preview, "diff", theme="ansi_dark"))
        try:
            return Confirm.ask(question, console=self.console, default=False)
        except (KeyboardInterrupt, EOFError):
            raise SyncAborted("Confirmation interrupted") from None
