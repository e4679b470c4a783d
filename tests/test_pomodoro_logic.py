"""
Unit tests for the Pomodoro state machine
Tests: ticking, phase cycle, auto-start, settings, session requests
"""
import pytest

from src.Modules.Pomodoro_module.pomodoro_logic import (
    PomodoroTimer,
    TimerPhase,
    TimerSettings,
    TimerState,
    SessionRef,
    InvalidSettingsError,
    normalize_task_id,
)


def complete_phase(timer):
    """Skip the current phase and process the expiry"""
    timer.skip()
    return timer.process_expiry()


class TestInitialState:
    """Test a freshly created timer"""

    def test_defaults(self):
        timer = PomodoroTimer()
        state = timer.state

        assert state.phase == TimerPhase.WORK
        assert state.is_running is False
        assert state.time_left == 1500
        assert state.total_time == 1500
        assert state.active_session is None
        assert timer.session_count == 0

    def test_custom_work_duration(self):
        timer = PomodoroTimer(TimerSettings(work_duration=600))
        assert timer.state.time_left == 600
        assert timer.state.total_time == 600

    def test_state_is_a_snapshot(self):
        timer = PomodoroTimer()
        snapshot = timer.state
        snapshot.time_left = 3
        assert timer.state.time_left == 1500


class TestTicking:
    """Test countdown ticks"""

    def test_tick_decrements_while_running(self):
        timer = PomodoroTimer()
        timer.start()

        assert timer.tick() is True
        assert timer.state.time_left == 1499

    def test_tick_does_nothing_when_paused(self):
        timer = PomodoroTimer()
        assert timer.tick() is False
        assert timer.state.time_left == 1500

    def test_tick_stops_at_zero(self):
        timer = PomodoroTimer(TimerSettings(work_duration=2))
        timer.start()

        assert timer.tick() is True
        assert timer.tick() is True
        assert timer.tick() is False
        assert timer.state.time_left == 0

    def test_pause_keeps_time_left(self):
        timer = PomodoroTimer()
        timer.start()
        for _ in range(10):
            timer.tick()
        timer.pause()

        assert timer.state.is_running is False
        assert timer.state.time_left == 1490

    def test_reset_restores_phase_duration(self):
        timer = PomodoroTimer()
        timer.start()
        timer.tick()
        timer.reset()

        state = timer.state
        assert state.is_running is False
        assert state.time_left == 1500
        assert state.total_time == 1500
        assert state.phase == TimerPhase.WORK

    def test_reset_during_break(self):
        timer = PomodoroTimer()
        complete_phase(timer)
        timer.start()
        timer.tick()
        timer.reset()

        assert timer.state.phase == TimerPhase.SHORT_BREAK
        assert timer.state.time_left == 300


class TestPhaseCycle:
    """Test phase transitions"""

    def test_nothing_expires_with_time_left(self):
        timer = PomodoroTimer()
        timer.start()
        assert timer.process_expiry() is None

    def test_work_completes_into_short_break(self):
        timer = PomodoroTimer()
        timer.start()
        event = complete_phase(timer)

        assert event.completed_phase == TimerPhase.WORK
        assert event.next_phase == TimerPhase.SHORT_BREAK
        assert event.session_count == 1

        state = timer.state
        assert state.phase == TimerPhase.SHORT_BREAK
        assert state.time_left == 300
        assert state.total_time == 300
        assert state.is_running is False

    def test_expiry_is_processed_once(self):
        timer = PomodoroTimer()
        timer.skip()

        assert timer.process_expiry() is not None
        assert timer.process_expiry() is None
        assert timer.session_count == 1

    def test_full_cycle_with_long_break(self):
        timer = PomodoroTimer()
        phases = [complete_phase(timer).next_phase for _ in range(7)]

        assert phases == [
            TimerPhase.SHORT_BREAK,
            TimerPhase.WORK,
            TimerPhase.SHORT_BREAK,
            TimerPhase.WORK,
            TimerPhase.SHORT_BREAK,
            TimerPhase.WORK,
            TimerPhase.LONG_BREAK,
        ]
        assert timer.session_count == 4
        assert timer.state.time_left == 900

    def test_breaks_do_not_count(self):
        timer = PomodoroTimer()
        complete_phase(timer)
        event = complete_phase(timer)

        assert event.completed_phase == TimerPhase.SHORT_BREAK
        assert event.session_count == 1
        assert timer.session_count == 1

    def test_long_break_after_every_session(self):
        timer = PomodoroTimer(TimerSettings(sessions_until_long_break=1))
        assert complete_phase(timer).next_phase == TimerPhase.LONG_BREAK
        complete_phase(timer)
        assert complete_phase(timer).next_phase == TimerPhase.LONG_BREAK

    def test_sound_flag_carried_on_event(self):
        timer = PomodoroTimer(TimerSettings(sound_enabled=False))
        assert complete_phase(timer).sound_enabled is False


class TestAutoStart:
    """Test auto-start rules"""

    def test_break_auto_starts(self):
        timer = PomodoroTimer(TimerSettings(auto_start_breaks=True))
        timer.start()
        complete_phase(timer)
        assert timer.state.is_running is True

    def test_work_waits_without_auto_start(self):
        timer = PomodoroTimer(TimerSettings(auto_start_breaks=True))
        timer.start()
        complete_phase(timer)
        event = complete_phase(timer)

        assert event.next_phase == TimerPhase.WORK
        assert timer.state.is_running is False
        assert event.session_request is None

    def test_work_auto_starts_and_requests_session(self):
        settings = TimerSettings(auto_start_breaks=True, auto_start_pomodoros=True)
        timer = PomodoroTimer(settings)
        timer.start("task-7")
        timer.attach_session(SessionRef("s1"), timer.epoch)

        complete_phase(timer)
        event = complete_phase(timer)

        assert timer.state.is_running is True
        assert event.session_request is not None
        assert event.session_request.duration_minutes == 25
        assert event.session_request.task_id == "task-7"
        assert event.session_request.epoch == timer.epoch
        assert timer.session_pending is True

    def test_auto_start_does_not_carry_over_remaining_time(self):
        timer = PomodoroTimer(TimerSettings(auto_start_breaks=True))
        timer.start()
        timer.tick()
        complete_phase(timer)
        assert timer.state.time_left == 300


class TestSessionRequests:
    """Test when the timer asks for a server session"""

    def test_start_in_work_requests_session(self):
        timer = PomodoroTimer()
        request = timer.start("task-1")

        assert request is not None
        assert request.duration_minutes == 25
        assert request.task_id == "task-1"
        assert request.epoch == timer.epoch
        assert timer.state.is_running is True

    def test_duration_is_rounded_down_to_minutes(self):
        timer = PomodoroTimer(TimerSettings(work_duration=150))
        assert timer.start().duration_minutes == 2

    def test_no_second_request_while_pending(self):
        timer = PomodoroTimer()
        assert timer.start() is not None
        timer.pause()
        assert timer.start() is None

    def test_no_request_with_active_session(self):
        timer = PomodoroTimer()
        request = timer.start()
        timer.attach_session(SessionRef("s1"), request.epoch)
        timer.pause()

        assert timer.start() is None
        assert timer.state.active_session == SessionRef("s1")

    def test_no_request_during_break(self):
        timer = PomodoroTimer()
        complete_phase(timer)
        assert timer.start() is None
        assert timer.state.is_running is True

    def test_failed_open_allows_retry(self):
        timer = PomodoroTimer()
        request = timer.start()
        assert timer.attach_session(None, request.epoch) is None
        timer.pause()

        assert timer.session_pending is False
        assert timer.start() is not None

    def test_none_task_means_no_task(self):
        timer = PomodoroTimer()
        assert timer.start("none").task_id is None

    def test_completion_hands_out_session_to_close(self):
        timer = PomodoroTimer()
        request = timer.start()
        timer.attach_session(SessionRef("s1", "task-1"), request.epoch)

        event = complete_phase(timer)

        assert event.closed_session == SessionRef("s1", "task-1")
        assert timer.state.active_session is None

    def test_completion_without_session(self):
        timer = PomodoroTimer()
        timer.start()
        assert complete_phase(timer).closed_session is None

    def test_late_session_is_returned(self):
        timer = PomodoroTimer()
        request = timer.start()
        complete_phase(timer)

        late = timer.attach_session(SessionRef("s1"), request.epoch)

        assert late == SessionRef("s1")
        assert timer.state.active_session is None

    def test_reset_keeps_active_session(self):
        timer = PomodoroTimer()
        request = timer.start()
        timer.attach_session(SessionRef("s1"), request.epoch)
        timer.reset()

        assert timer.state.active_session == SessionRef("s1")


class TestSettings:
    """Test settings validation and updates"""

    def test_defaults(self):
        settings = TimerSettings()
        assert settings.work_duration == 1500
        assert settings.short_break_duration == 300
        assert settings.long_break_duration == 900
        assert settings.sessions_until_long_break == 4
        assert settings.sound_enabled is True

    @pytest.mark.parametrize("patch", [
        {"work_duration": 0},
        {"short_break_duration": -5},
        {"long_break_duration": 1.5},
        {"work_duration": True},
        {"sessions_until_long_break": 0},
        {"sound_enabled": "yes"},
    ])
    def test_invalid_settings_rejected(self, patch):
        with pytest.raises(InvalidSettingsError):
            TimerSettings(**patch)

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidSettingsError):
            TimerSettings().merged(focus_music=True)

    def test_update_while_paused_resizes_phase(self):
        timer = PomodoroTimer()
        timer.update_settings(work_duration=600)

        assert timer.state.time_left == 600
        assert timer.state.total_time == 600

    def test_update_while_running_keeps_phase(self):
        timer = PomodoroTimer()
        timer.start()
        timer.tick()
        timer.update_settings(work_duration=600)

        assert timer.state.time_left == 1499
        assert timer.state.total_time == 1500
        assert timer.settings.work_duration == 600

    def test_invalid_update_changes_nothing(self):
        timer = PomodoroTimer()
        with pytest.raises(InvalidSettingsError):
            timer.update_settings(work_duration=0)

        assert timer.settings.work_duration == 1500
        assert timer.state.time_left == 1500

    def test_new_durations_apply_to_next_phase(self):
        timer = PomodoroTimer()
        timer.start()
        timer.update_settings(short_break_duration=120)
        complete_phase(timer)

        assert timer.state.time_left == 120


class TestHelpers:
    """Test small helpers"""

    def test_progress(self):
        assert TimerState(time_left=750, total_time=1500).progress == pytest.approx(0.5)

    def test_progress_with_zero_total(self):
        assert TimerState(time_left=0, total_time=0).progress == 0.0

    @pytest.mark.parametrize("value, expected", [
        (None, None),
        ("", None),
        ("  ", None),
        ("none", None),
        (" abc ", "abc"),
    ])
    def test_normalize_task_id(self, value, expected):
        assert normalize_task_id(value) == expected

    def test_break_phases(self):
        assert TimerPhase.WORK.is_break is False
        assert TimerPhase.SHORT_BREAK.is_break is True
        assert TimerPhase.LONG_BREAK.value == "longBreak"
