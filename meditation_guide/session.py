"""Session controller: plays a meditation script line by line through a narrator.

A session moves through

    IDLE -> RUNNING <-> PAUSED -> COMPLETED
            RUNNING/PAUSED     -> STOPPED

The advance loop runs as one asyncio task per stretch of playback. Its only
suspension points are the narrator's speak() and the silence after a line;
pause() and stop() cancel the task, so they take effect at whichever of the
two the loop is parked in. A cancelled loop never touches session state:
every state change happens either in the synchronous control methods or in
the loop between suspensions.

A line only counts as played once both its narration and its silence have
finished. Resuming after a pause mid-line restarts that line from its
beginning; resuming after a pause in the silence skips the finished line and
waits out only the silence that was left.
"""

import asyncio
import logging
from typing import Callable

from meditation_guide.constants import CLOSING_REMARK, MODE_MEDITATION, MODE_NORMAL
from meditation_guide.models import Segment, Session, SessionStatus
from meditation_guide.narrator import Narrator
from meditation_guide.scripts import ScriptStore

logger = logging.getLogger(__name__)


class NarrationError(Exception):
    """The narrator failed while a session was speaking."""

    def __init__(self, script_name: str, index: int):
        super().__init__(f"Narration failed in '{script_name}' at line {index + 1}")
        self.script_name = script_name
        self.index = index


class SessionController:
    """Owns at most one active session against a single narrator."""

    def __init__(
        self,
        narrator: Narrator,
        store: ScriptStore | None = None,
        sleep=asyncio.sleep,
        closing_remark: str = CLOSING_REMARK,
        on_segment: Callable[[int, Segment], None] | None = None,
    ):
        self._narrator = narrator
        self._store = store if store is not None else ScriptStore()
        self._sleep = sleep
        self._closing_remark = closing_remark
        self._on_segment = on_segment
        self._session: Session | None = None
        self._task: asyncio.Task | None = None
        self._done: asyncio.Future | None = None
        self._silence_started: float | None = None

    # --- Readouts ---

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status if self._session else SessionStatus.IDLE

    @property
    def cursor(self) -> int:
        return self._session.cursor if self._session else 0

    @property
    def progress(self) -> float:
        """Fraction of lines played, 0.0 to 1.0."""
        session = self._session
        if session is None:
            return 0.0
        if session.status is SessionStatus.COMPLETED:
            return 1.0
        total = len(session.script.segments)
        return session.cursor / total if total else 0.0

    @property
    def current_text(self) -> str:
        """The line being spoken, or "" when nothing is playing."""
        session = self._session
        if session is None or not session.is_active:
            return ""
        segment = session.current_segment
        return segment.text if segment else ""

    # --- Control ---

    def start(self, script_name: str) -> Session | None:
        """Stop any active session, then start script_name from its first line.

        Returns the new session, or None if the script is unknown.
        Must be called from a running event loop.
        """
        self.stop()

        script = self._store.get_script(script_name)
        if script is None:
            logger.warning("Unknown script: %s — session not started", script_name)
            return None

        session = Session(script_name=script_name, script=script, status=SessionStatus.RUNNING)
        self._session = session
        self._done = asyncio.get_running_loop().create_future()
        logger.info("Starting '%s' (%d lines)", script.title, len(script.segments))

        self._narrator.set_mode(MODE_MEDITATION)
        self._launch(session)
        return session

    def pause(self) -> None:
        session = self._session
        if session is None or session.status is not SessionStatus.RUNNING:
            logger.debug("pause() ignored in state %s", self.status.value)
            return
        session.status = SessionStatus.PAUSED
        if self._silence_started is not None:
            elapsed_ms = (asyncio.get_running_loop().time() - self._silence_started) * 1000
            session.silence_left_ms = max(0, int(session.silence_left_ms - elapsed_ms))
            self._silence_started = None
        self._narrator.pause_speaking()
        self._cancel_task()
        logger.info("Paused at line %d", session.cursor + 1)

    def resume(self) -> None:
        session = self._session
        if session is None or session.status is not SessionStatus.PAUSED:
            logger.debug("resume() ignored in state %s", self.status.value)
            return
        session.status = SessionStatus.RUNNING
        self._narrator.resume_speaking()
        logger.info("Resuming at line %d", session.cursor + 1)
        self._launch(session)

    def stop(self) -> None:
        """Tear down the current session. Safe to call repeatedly."""
        session = self._session
        if session is None:
            return
        # The closing remark still counts as narration in flight
        closing = self._task is not None and not self._task.done()
        # A completed session is already at rest and keeps its COMPLETED status
        if not session.is_active and not closing:
            return

        session.cursor = 0
        session.line_spoken = False
        session.silence_left_ms = 0
        session.status = SessionStatus.STOPPED
        self._silence_started = None
        self._cancel_task()
        self._narrator.stop_speaking()
        self._narrator.set_mode(MODE_NORMAL)
        self._finish()
        logger.info("Stopped '%s'", session.script_name)

    async def wait(self) -> Session | None:
        """Wait for the current session to complete or stop.

        Pauses do not end the wait. Raises NarrationError if the narrator
        failed.
        """
        session, done = self._session, self._done
        if session is None:
            return None
        await asyncio.shield(done)
        if session.error is not None:
            raise session.error
        return session

    # --- Internals ---

    def _launch(self, session: Session) -> None:
        self._task = asyncio.ensure_future(self._advance(session))
        self._task.add_done_callback(_log_task_failure)

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _finish(self) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(self._session)

    async def _advance(self, session: Session) -> None:
        segments = session.script.segments
        while session.status is SessionStatus.RUNNING and session.cursor < len(segments):
            index = session.cursor
            segment = segments[index]
            try:
                if not session.line_spoken:
                    if self._on_segment is not None:
                        self._on_segment(index, segment)
                    logger.debug("Line %d/%d: %s", index + 1, len(segments), segment.text)
                    await self._narrator.speak(segment.text)
                    session.line_spoken = True
                    session.silence_left_ms = segment.pause_ms
                if session.silence_left_ms > 0:
                    self._silence_started = asyncio.get_running_loop().time()
                    await self._sleep(session.silence_left_ms / 1000)
                    self._silence_started = None
            except Exception as e:
                self._abort(session, index, e)
                return
            session.cursor = index + 1
            session.line_spoken = False
            session.silence_left_ms = 0

        if session.status is SessionStatus.RUNNING:
            await self._complete(session)

    async def _complete(self, session: Session) -> None:
        session.status = SessionStatus.COMPLETED
        logger.info("Completed '%s'", session.script_name)
        try:
            await self._narrator.speak(self._closing_remark)
        except Exception as e:
            error = NarrationError(session.script_name, len(session.script.segments))
            error.__cause__ = e
            session.error = error
            logger.error("Closing remark failed: %s", e)
        finally:
            # stop() during the closing remark has already restored the narrator
            if session.status is SessionStatus.COMPLETED:
                self._narrator.set_mode(MODE_NORMAL)
                self._finish()

    def _abort(self, session: Session, index: int, cause: Exception) -> None:
        error = NarrationError(session.script_name, index)
        error.__cause__ = cause
        session.error = error
        session.status = SessionStatus.STOPPED
        logger.error("%s: %s", error, cause)
        self._narrator.set_mode(MODE_NORMAL)
        self._finish()


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Session loop crashed: %r", exc)
