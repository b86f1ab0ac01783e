"""Shared pytest fixtures for einstellung tests."""

from __future__ import annotations

import pytest

from einstellung.sync.models import ChangeCandidate, Choice


class ScriptedPrompter:
    """Prompter that replays canned answers and records every question.

    Args:
        choices: Answers for ``ask()`` in order.
        confirms: Answers for ``confirm()`` in order.
    """

    def __init__(
        self,
        choices: list[Choice | None] | None = None,
        confirms: list[bool] | None = None,
    ) -> None:
        self.choices = list(choices or [])
        self.confirms = list(confirms or [])
        self.asked: list[ChangeCandidate] = []
        self.questions: list[tuple[str, str]] = []

    def ask(
        self, candidate: ChangeCandidate, index: int, total: int
    ) -> Choice | None:
        self.asked.append(candidate)
        if not self.choices:
            raise AssertionError(f"Unexpected question for {candidate!r}")
        return self.choices.pop(0)

    def confirm(self, question: str, preview: str) -> bool:
        self.questions.append((question, preview))
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {question}")
        return self.confirms.pop(0)


@pytest.fixture
def scripted_prompter():
    """Factory fixture for ``ScriptedPrompter`` instances."""

    def _create(choices=None, confirms=None) -> ScriptedPrompter:
        return ScriptedPrompter(choices=choices, confirms=confirms)

    return _create


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep user settings and env overrides out of every test."""
    for key in (
        "EINSTELLUNG_CONFIG",
        "EINSTELLUNG_MANIFEST",
        "EINSTELLUNG_SKIP_MISSING",
        "EINSTELLUNG_DIFF_CONTEXT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
