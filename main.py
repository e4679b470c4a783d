"""
Main entry point for the Pomodoro Focus console client
"""
import sys
import signal
import argparse
from pathlib import Path
from typing import Optional, List

from PyQt6.QtCore import QCoreApplication, QSocketNotifier, QTimer
from loguru import logger

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent))

from src.core.config import config, ensure_directories
from src.core.preferences import PreferenceStore
from src.Modules.auth_module import AuthAPIClient
from src.Modules.Pomodoro_module import (
    PomodoroAPIClient,
    TimerSettings,
    InvalidSettingsError,
    build_timer_context,
)
from src.utils.time_utils import format_time

PHASE_LABELS = {
    "work": "Focus Time",
    "break": "Short Break",
    "longBreak": "Long Break",
}

COMMANDS_HELP = "[Enter] start/pause  [r] reset  [k] skip  [t] test sound  [q] quit"


def setup_logging() -> None:
    """Configure application logging"""
    # Remove default logger
    logger.remove()

    # Add console logger
    logger.add(
        sys.stderr,
        format=config.LOG_FORMAT,
        level=config.LOG_LEVEL,
        colorize=True,
    )

    # Add file logger
    log_file = config.LOGS_DIR / "pomodoro_focus.log"
    logger.add(
        log_file,
        format=config.LOG_FORMAT,
        level=config.LOG_LEVEL,
        rotation=config.LOG_ROTATION,
        retention=config.LOG_RETENTION,
        encoding="utf-8",
    )

    logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{config.APP_NAME} - Pomodoro timer")
    parser.add_argument("--task", default=None, help="Task id to link work sessions with")
    parser.add_argument("--work", type=int, default=25, help="Work duration in minutes (default: 25)")
    parser.add_argument("--short-break", type=int, default=5, help="Short break in minutes (default: 5)")
    parser.add_argument("--long-break", type=int, default=15, help="Long break in minutes (default: 15)")
    parser.add_argument("--sessions", type=int, default=4, help="Work sessions until a long break (default: 4)")
    parser.add_argument("--auto", action="store_true", help="Start breaks and work phases automatically")
    parser.add_argument("--mute", action="store_true", help="No completion sound")
    parser.add_argument("--offline", action="store_true", help="Do not mirror sessions to the server")
    args = parser.parse_args(argv)

    try:
        args.settings = TimerSettings(
            work_duration=args.work * 60,
            short_break_duration=args.short_break * 60,
            long_break_duration=args.long_break * 60,
            sessions_until_long_break=args.sessions,
            auto_start_breaks=args.auto,
            auto_start_pomodoros=args.auto,
            sound_enabled=not args.mute,
        )
    except InvalidSettingsError as e:
        parser.error(str(e))

    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point"""
    try:
        # Setup
        ensure_directories()
        setup_logging()
        args = parse_args(argv)

        # Create application
        app = QCoreApplication(sys.argv[:1])
        app.setApplicationName(config.APP_NAME)
        app.setApplicationVersion(config.APP_VERSION)
        app.setOrganizationName(config.APP_AUTHOR)

        preferences = PreferenceStore(config.PREFERENCES_FILE)

        api_client = None
        if not args.offline:
            auth_client = AuthAPIClient(config.API_BASE_URL, preferences, timeout=config.API_TIMEOUT)
            user = auth_client.check_auth()
            if user:
                logger.info(f"User already authenticated: {user.email}")
                api_client = PomodoroAPIClient(
                    config.API_BASE_URL,
                    preferences,
                    timeout=config.API_TIMEOUT,
                    session=auth_client.session,
                )
            else:
                logger.warning("No valid login found, sessions will not be saved")

        if "://" not in config.DEFAULT_SOUND and not Path(config.DEFAULT_SOUND).exists():
            logger.warning(f"Default sound not found: {config.DEFAULT_SOUND} (see README, Sounds)")

        context = build_timer_context(preferences, api_client, args.settings)

        def render(state):
            label = PHASE_LABELS.get(state.phase.value, state.phase.value)
            status = "running" if state.is_running else "paused"
            print(f"\r{label:<12} {format_time(state.time_left)}  {state.progress:>4.0%}  [{status}]  ",
                  end="", flush=True)

        def on_phase_completed(event):
            label = PHASE_LABELS.get(event.completed_phase.value, event.completed_phase.value)
            print(f"\n{label} complete! Completed sessions: {event.session_count}")

        def on_command():
            line = sys.stdin.readline()
            if line == "":
                # stdin closed
                notifier.setEnabled(False)
                return
            command = line.strip().lower()
            if command == "":
                if context.state.is_running:
                    context.pause()
                else:
                    context.start(args.task)
            elif command == "r":
                context.reset()
            elif command == "k":
                context.skip()
            elif command == "t":
                context.play_test_sound()
            elif command == "q":
                app.quit()

        context.state_changed.connect(render)
        context.phase_completed.connect(on_phase_completed)
        context.session_failed.connect(lambda message: logger.warning(f"Session not saved: {message}"))

        notifier = QSocketNotifier(sys.stdin.fileno(), QSocketNotifier.Type.Read)
        notifier.activated.connect(on_command)

        # Let Python handle Ctrl+C while the Qt loop runs
        signal.signal(signal.SIGINT, lambda *_: app.quit())
        keepalive = QTimer()
        keepalive.start(250)
        keepalive.timeout.connect(lambda: None)

        print(COMMANDS_HELP)
        with context:
            context.start(args.task)
            exit_code = app.exec()

        print()
        logger.info("Application closed")
        return exit_code

    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
