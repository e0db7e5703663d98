"""Narrator capability and a speaker-backed implementation.

The session controller only ever talks to a narrator through the five
methods of the Narrator protocol. SpeakerNarrator is the concrete one used
by the CLI: each line is synthesized with edge-tts and played through
ffplay, and pause/resume freeze and thaw the player process.
"""

import asyncio
import logging
import os
import shutil
import signal
import tempfile
from typing import Protocol

from meditation_guide.constants import (
    GUIDE_VOICE,
    MEDITATION_RATE,
    MODE_MEDITATION,
    MODE_NORMAL,
    PLAYER_COMMAND,
    TTS_RATE,
)
from meditation_guide.tts import synthesize

logger = logging.getLogger(__name__)

MODE_RATES = {
    MODE_MEDITATION: MEDITATION_RATE,
    MODE_NORMAL: TTS_RATE,
}


class NarratorError(Exception):
    """The narrator could not render a line."""


class Narrator(Protocol):
    async def speak(self, text: str) -> None: ...

    def pause_speaking(self) -> None: ...

    def resume_speaking(self) -> None: ...

    def stop_speaking(self) -> None: ...

    def set_mode(self, mode: str) -> None: ...


def check_player(command: str = PLAYER_COMMAND) -> None:
    """Verify the audio player is installed."""
    if not shutil.which(command):
        raise NarratorError(f"{command} is required but not found (install ffmpeg)")


class SpeakerNarrator:
    """Speaks lines aloud through edge-tts and ffplay."""

    def __init__(self, voice: str = GUIDE_VOICE, player: str = PLAYER_COMMAND, work_dir: str | None = None):
        self.voice = voice
        self.player = player
        self.mode = MODE_NORMAL
        self._work_dir = work_dir
        self._process: asyncio.subprocess.Process | None = None
        self._paused = False

    @property
    def rate(self) -> str:
        return MODE_RATES[self.mode]

    def set_mode(self, mode: str) -> None:
        if mode not in MODE_RATES:
            raise ValueError(f"Unknown narrator mode: {mode}")
        logger.debug("Narrator mode: %s", mode)
        self.mode = mode

    async def speak(self, text: str) -> None:
        """Synthesize and play one line, returning when playback ends.

        Cancelling the call abandons the line and kills its player.
        """
        fd, path = tempfile.mkstemp(suffix=".mp3", dir=self._work_dir)
        os.close(fd)
        try:
            await synthesize(text, self.voice, path, rate=self.rate)
            process = await asyncio.create_subprocess_exec(
                self.player, "-nodisp", "-autoexit", "-loglevel", "quiet", path,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            self._process = process
            self._paused = False
            try:
                returncode = await process.wait()
            except asyncio.CancelledError:
                _kill(process)
                raise
            finally:
                if self._process is process:
                    self._process = None
            # Negative return codes mean we killed it ourselves
            if returncode > 0:
                raise NarratorError(f"{self.player} exited with status {returncode}")
        finally:
            os.remove(path)

    def pause_speaking(self) -> None:
        if self._process is None or self._paused:
            return
        self._process.send_signal(signal.SIGSTOP)
        self._paused = True

    def resume_speaking(self) -> None:
        if self._process is None or not self._paused:
            return
        self._process.send_signal(signal.SIGCONT)
        self._paused = False

    def stop_speaking(self) -> None:
        if self._process is None:
            return
        _kill(self._process)
        self._process = None
        self._paused = False


def _kill(process: asyncio.subprocess.Process) -> None:
    """SIGKILL also reaches a SIGSTOP-ed player."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
