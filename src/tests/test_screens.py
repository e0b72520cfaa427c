from __future__ import annotations

from unittest.mock import MagicMock

from textual.worker import WorkerState

from cloudnav.screens import LinkFormScreen
from cloudnav.suggestions import Suggestion


def _finished_assist(state):
    event = MagicMock()
    event.worker.name = "ai_assist"
    event.worker.result = Suggestion(description="ignored")
    event.state = state
    return event


def test_assist_result_after_dismissal_is_ignored():
    screen = LinkFormScreen([], MagicMock(enabled=True))
    screen.on_worker_state_changed(_finished_assist(WorkerState.SUCCESS))
    screen.on_worker_state_changed(_finished_assist(WorkerState.ERROR))
