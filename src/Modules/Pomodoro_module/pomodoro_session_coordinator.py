"""
Session Coordinator - mirrors work phases to the server session log.

Opens a session record when a work phase starts and marks it complete
when the phase ends. Every call is best effort: failures are logged and
the timer never waits for the network.

Calls run on a single worker thread (so a close can never overtake the
open it belongs to). Results come back as Qt signals, which Qt delivers
on the receiver's thread.
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Tuple
from loguru import logger
from PyQt6.QtCore import QObject, pyqtSignal

from ...core.api_client import APIError
from .pomodoro_api_client import PomodoroAPIClient
from .pomodoro_logic import SessionRef, SessionRequest, PhaseCompleted


class SessionCoordinator(QObject):
    """
    Bridges the timer to the Pomodoro API.

    Signals:
        session_opened: (ref or None, epoch) result of an open request
        session_closed: (ref, success) result of a close request
        session_failed: (message) an open request failed
    """

    session_opened = pyqtSignal(object, int)
    session_closed = pyqtSignal(object, bool)
    session_failed = pyqtSignal(str)

    def __init__(
        self,
        api_client: PomodoroAPIClient,
        executor: Optional[Executor] = None,
        parent: Optional[QObject] = None,
    ):
        """
        Args:
            api_client: Pomodoro API client
            executor: Executor running the HTTP calls (one worker thread by default)
            parent: Qt parent
        """
        super().__init__(parent)
        self.api_client = api_client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="pomodoro-session")
        self._closed = False

    # ==================== BLOCKING CALLS ====================

    def _try_open(self, duration_minutes: int, task_id: Optional[str]) -> Tuple[Optional[SessionRef], Optional[str]]:
        try:
            session = self.api_client.start_session(duration_minutes, task_id)
        except APIError as e:
            logger.error(f"[POMODORO] Failed to start session: {e.message}")
            return None, e.message
        except Exception as e:
            logger.exception(f"[POMODORO] Unexpected error starting session: {e}")
            return None, str(e)

        logger.info(f"[POMODORO] Session {session.id} opened ({duration_minutes} min)")
        return session.to_ref(), None

    def open_session(self, duration_minutes: int, task_id: Optional[str] = None) -> Optional[SessionRef]:
        """
        Creates a session record on the server.

        Returns:
            SessionRef with the server id, or None when the call failed
        """
        ref, _ = self._try_open(duration_minutes, task_id)
        return ref

    def close_session(self, ref: SessionRef) -> bool:
        """
        Marks a session complete. Failures are logged, never raised.

        Returns:
            True if the server acknowledged the completion
        """
        try:
            self.api_client.complete_session(ref.id)
        except APIError as e:
            logger.error(f"[POMODORO] Failed to complete session {ref.id}: {e.message}")
            return False
        except Exception as e:
            logger.exception(f"[POMODORO] Unexpected error completing session {ref.id}: {e}")
            return False

        logger.info(f"[POMODORO] Session {ref.id} completed")
        return True

    # ==================== FIRE AND FORGET ====================

    def request_open(self, request: SessionRequest) -> Optional[Future]:
        """Opens a session in the background, result via session_opened"""
        if self._closed:
            logger.warning("[POMODORO] Coordinator closed, session not opened")
            return None
        return self._executor.submit(self._open_worker, request)

    def request_close(self, ref: SessionRef) -> Optional[Future]:
        """Completes a session in the background, result via session_closed"""
        if self._closed:
            logger.warning(f"[POMODORO] Coordinator closed, session {ref.id} left open")
            return None
        return self._executor.submit(self._close_worker, ref)

    def on_phase_completed(self, event: PhaseCompleted):
        """Completes the session of a finished work phase and opens one for an auto-started work phase"""
        if event.closed_session is not None:
            self.request_close(event.closed_session)
        if event.session_request is not None:
            self.request_open(event.session_request)

    def _open_worker(self, request: SessionRequest) -> Optional[SessionRef]:
        ref, error = self._try_open(request.duration_minutes, request.task_id)
        self.session_opened.emit(ref, request.epoch)
        if ref is None:
            self.session_failed.emit(error or "Failed to start session")
        return ref

    def _close_worker(self, ref: SessionRef) -> bool:
        ok = self.close_session(ref)
        self.session_closed.emit(ref, ok)
        return ok

    def shutdown(self):
        """Stops accepting requests; queued calls still run"""
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=False)
        logger.debug("[POMODORO] Session coordinator shut down")
