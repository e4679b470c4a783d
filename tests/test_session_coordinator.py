"""
Tests for the session coordinator
Tests: opening and completing server sessions, failure handling
"""
from unittest.mock import Mock

import pytest

from src.core.api_client import APIError
from src.Modules.Pomodoro_module.pomodoro_logic import (
    PhaseCompleted,
    SessionRef,
    SessionRequest,
    TimerPhase,
)
from src.Modules.Pomodoro_module.pomodoro_models import PomodoroSession
from src.Modules.Pomodoro_module.pomodoro_session_coordinator import SessionCoordinator


@pytest.fixture
def api_client():
    client = Mock()
    client.start_session.return_value = PomodoroSession(id="s-42", duration=25, task_id="task-1")
    return client


@pytest.fixture
def coordinator(qapp, api_client, inline_executor):
    coordinator = SessionCoordinator(api_client, executor=inline_executor)
    yield coordinator
    coordinator.shutdown()


class TestBlockingCalls:
    """Test open_session / close_session"""

    def test_open_session(self, coordinator, api_client):
        ref = coordinator.open_session(25, "task-1")

        api_client.start_session.assert_called_once_with(25, "task-1")
        assert ref == SessionRef("s-42", "task-1")

    def test_open_session_failure_returns_none(self, coordinator, api_client):
        api_client.start_session.side_effect = APIError("Network error: refused")
        assert coordinator.open_session(25) is None

    def test_unexpected_error_returns_none(self, coordinator, api_client):
        api_client.start_session.side_effect = KeyError("id")
        assert coordinator.open_session(25) is None

    def test_close_session(self, coordinator, api_client):
        assert coordinator.close_session(SessionRef("s-42")) is True
        api_client.complete_session.assert_called_once_with("s-42")

    def test_close_session_failure_is_swallowed(self, coordinator, api_client):
        api_client.complete_session.side_effect = APIError("Not found", status_code=404)
        assert coordinator.close_session(SessionRef("s-42")) is False


class TestBackgroundRequests:
    """Test request_open / request_close and their signals"""

    def test_request_open_emits_result(self, coordinator):
        opened = []
        coordinator.session_opened.connect(lambda ref, epoch: opened.append((ref, epoch)))

        future = coordinator.request_open(SessionRequest(25, "task-1", epoch=3))

        assert future.result() == SessionRef("s-42", "task-1")
        assert opened == [(SessionRef("s-42", "task-1"), 3)]

    def test_request_open_failure(self, coordinator, api_client):
        api_client.start_session.side_effect = APIError("Server unavailable", status_code=503)
        opened = []
        failures = []
        coordinator.session_opened.connect(lambda ref, epoch: opened.append((ref, epoch)))
        coordinator.session_failed.connect(failures.append)

        coordinator.request_open(SessionRequest(25, epoch=1))

        assert opened == [(None, 1)]
        assert failures == ["Server unavailable"]

    def test_request_close_emits_result(self, coordinator):
        closed = []
        coordinator.session_closed.connect(lambda ref, ok: closed.append((ref, ok)))

        coordinator.request_close(SessionRef("s-42"))

        assert closed == [(SessionRef("s-42"), True)]

    def test_requests_after_shutdown_are_dropped(self, coordinator, api_client, inline_executor):
        coordinator.shutdown()

        assert coordinator.request_open(SessionRequest(25)) is None
        assert coordinator.request_close(SessionRef("s-42")) is None
        assert inline_executor.submitted == 0
        api_client.start_session.assert_not_called()

    def test_shutdown_leaves_injected_executor_alone(self, coordinator, inline_executor):
        coordinator.shutdown()
        assert inline_executor.was_shutdown is False

    def test_shutdown_stops_own_executor(self, qapp, api_client):
        coordinator = SessionCoordinator(api_client)
        coordinator.shutdown()
        assert coordinator.request_open(SessionRequest(25)) is None


class TestPhaseCompleted:
    """Test reactions to phase completion events"""

    def test_closes_finished_session(self, coordinator, api_client):
        event = PhaseCompleted(
            completed_phase=TimerPhase.WORK,
            next_phase=TimerPhase.SHORT_BREAK,
            session_count=1,
            closed_session=SessionRef("s-42"),
        )
        coordinator.on_phase_completed(event)

        api_client.complete_session.assert_called_once_with("s-42")
        api_client.start_session.assert_not_called()

    def test_break_completion_does_nothing(self, coordinator, api_client):
        event = PhaseCompleted(
            completed_phase=TimerPhase.SHORT_BREAK,
            next_phase=TimerPhase.WORK,
            session_count=1,
        )
        coordinator.on_phase_completed(event)

        api_client.complete_session.assert_not_called()
        api_client.start_session.assert_not_called()

    def test_opens_session_for_auto_started_work(self, coordinator, api_client):
        event = PhaseCompleted(
            completed_phase=TimerPhase.SHORT_BREAK,
            next_phase=TimerPhase.WORK,
            session_count=1,
            session_request=SessionRequest(25, "task-1", epoch=2),
        )
        coordinator.on_phase_completed(event)

        api_client.start_session.assert_called_once_with(25, "task-1")
