"""Tests for the speaker-backed narrator."""

import asyncio
import os
import signal
from unittest.mock import patch, AsyncMock, MagicMock

import pytest

from meditation_guide.constants import MEDITATION_RATE, TTS_RATE
from meditation_guide.narrator import NarratorError, SpeakerNarrator, check_player


def _make_process(returncode=0):
    """A fake player process whose wait() returns once released or killed."""
    process = MagicMock()
    process.returncode = None
    gate = asyncio.Event()
    result = [returncode]

    async def wait():
        await gate.wait()
        process.returncode = result[0]
        return result[0]

    def kill():
        result[0] = -9
        gate.set()

    process.wait = wait
    process.kill = MagicMock(side_effect=kill)
    process.release = gate.set
    return process


# --- Modes ---

def test_default_mode_is_normal():
    narrator = SpeakerNarrator()
    assert narrator.mode == "normal"
    assert narrator.rate == TTS_RATE


def test_meditation_mode_slows_speech():
    narrator = SpeakerNarrator()
    narrator.set_mode("meditation")
    assert narrator.rate == MEDITATION_RATE


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        SpeakerNarrator().set_mode("karaoke")


# --- Speaking ---

def test_speak_synthesizes_then_plays(tmp_path):
    narrator = SpeakerNarrator(voice="en-US-AriaNeural", work_dir=str(tmp_path))
    narrator.set_mode("meditation")

    async def scenario():
        process = _make_process()
        process.release()
        with patch("meditation_guide.narrator.synthesize", new=AsyncMock()) as synth, \
                patch("meditation_guide.narrator.asyncio.create_subprocess_exec",
                      new=AsyncMock(return_value=process)) as spawn:
            await narrator.speak("Close your eyes gently.")
        return synth, spawn

    synth, spawn = asyncio.run(scenario())

    text, voice, path = synth.call_args.args
    assert text == "Close your eyes gently."
    assert voice == "en-US-AriaNeural"
    assert synth.call_args.kwargs["rate"] == MEDITATION_RATE
    argv = spawn.call_args.args
    assert argv[0] == "ffplay"
    assert argv[-1] == path
    assert "-autoexit" in argv
    # Temp clip cleaned up
    assert not os.path.exists(path)
    assert list(tmp_path.iterdir()) == []


def test_player_failure_raises(tmp_path):
    narrator = SpeakerNarrator(work_dir=str(tmp_path))

    async def scenario():
        process = _make_process(returncode=1)
        process.release()
        with patch("meditation_guide.narrator.synthesize", new=AsyncMock()), \
                patch("meditation_guide.narrator.asyncio.create_subprocess_exec",
                      new=AsyncMock(return_value=process)):
            await narrator.speak("Hello")

    with pytest.raises(NarratorError):
        asyncio.run(scenario())


def test_synthesis_failure_propagates(tmp_path):
    narrator = SpeakerNarrator(work_dir=str(tmp_path))

    async def scenario():
        with patch("meditation_guide.narrator.synthesize",
                   new=AsyncMock(side_effect=Exception("Network error"))):
            await narrator.speak("Hello")

    with pytest.raises(Exception, match="Network error"):
        asyncio.run(scenario())
    assert list(tmp_path.iterdir()) == []


def test_pause_and_resume_signal_player(tmp_path):
    narrator = SpeakerNarrator(work_dir=str(tmp_path))

    async def scenario():
        process = _make_process()
        with patch("meditation_guide.narrator.synthesize", new=AsyncMock()), \
                patch("meditation_guide.narrator.asyncio.create_subprocess_exec",
                      new=AsyncMock(return_value=process)):
            task = asyncio.ensure_future(narrator.speak("Inhale: I am whole."))
            for _ in range(20):
                await asyncio.sleep(0)
            narrator.pause_speaking()
            narrator.pause_speaking()  # second pause is a no-op
            narrator.resume_speaking()
            process.release()
            await task
        return process

    process = asyncio.run(scenario())
    assert [c.args[0] for c in process.send_signal.call_args_list] == [signal.SIGSTOP, signal.SIGCONT]


def test_stop_kills_player(tmp_path):
    narrator = SpeakerNarrator(work_dir=str(tmp_path))

    async def scenario():
        process = _make_process()
        with patch("meditation_guide.narrator.synthesize", new=AsyncMock()), \
                patch("meditation_guide.narrator.asyncio.create_subprocess_exec",
                      new=AsyncMock(return_value=process)):
            task = asyncio.ensure_future(narrator.speak("Exhale: I remember."))
            for _ in range(20):
                await asyncio.sleep(0)
            narrator.stop_speaking()
            await task  # killed playback ends quietly
        return process

    process = asyncio.run(scenario())
    process.kill.assert_called_once()


def test_cancelling_speak_kills_player(tmp_path):
    narrator = SpeakerNarrator(work_dir=str(tmp_path))

    async def scenario():
        process = _make_process()
        with patch("meditation_guide.narrator.synthesize", new=AsyncMock()), \
                patch("meditation_guide.narrator.asyncio.create_subprocess_exec",
                      new=AsyncMock(return_value=process)):
            task = asyncio.ensure_future(narrator.speak("Bring palms together."))
            for _ in range(20):
                await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        return process

    process = asyncio.run(scenario())
    process.kill.assert_called_once()
    assert list(tmp_path.iterdir()) == []


def test_controls_are_noops_when_idle():
    narrator = SpeakerNarrator()
    narrator.pause_speaking()
    narrator.resume_speaking()
    narrator.stop_speaking()


# --- Player check ---

def test_check_player_missing():
    with patch("meditation_guide.narrator.shutil.which", return_value=None):
        with pytest.raises(NarratorError, match="ffplay"):
            check_player()


def test_check_player_present():
    with patch("meditation_guide.narrator.shutil.which", return_value="/usr/bin/ffplay"):
        check_player()
