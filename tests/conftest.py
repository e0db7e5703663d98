"""Shared fixtures for meditation guide tests."""

import asyncio

import pytest

from meditation_guide.models import Script, Segment
from meditation_guide.scripts import ScriptStore


class FakeNarrator:
    """Records every narrator call in order.

    speak() of a line in `block_on` parks until cancelled; a line equal to
    `fail_on` raises.
    """

    def __init__(self, block_on=(), fail_on=None):
        self.events = []
        self.block_on = set(block_on)
        self.fail_on = fail_on

    async def speak(self, text):
        self.events.append(("speak", text))
        await asyncio.sleep(0)
        if text == self.fail_on:
            raise RuntimeError("synthesis failed")
        if text in self.block_on:
            await asyncio.Event().wait()

    def pause_speaking(self):
        self.events.append(("pause",))

    def resume_speaking(self):
        self.events.append(("resume",))

    def stop_speaking(self):
        self.events.append(("stop",))

    def set_mode(self, mode):
        self.events.append(("mode", mode))

    @property
    def spoken(self):
        return [e[1] for e in self.events if e[0] == "speak"]


class FakeSleep:
    """Records requested delays; parks forever while `block` is set."""

    def __init__(self, block=False):
        self.calls = []
        self.block = block
        self.cancelled = 0

    async def __call__(self, seconds):
        self.calls.append(seconds)
        if self.block:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        await asyncio.sleep(0)


async def until(predicate, limit=200):
    """Let the loop run until predicate() holds."""
    for _ in range(limit):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture
def narrator_cls():
    return FakeNarrator


@pytest.fixture
def sleep_cls():
    return FakeSleep


@pytest.fixture
def run_until():
    return until


@pytest.fixture
def store():
    """Small scripts: the A/B scenario and a three-line script."""
    return ScriptStore({
        "two": Script(title="Two", segments=(Segment("A", 1000), Segment("B", 0))),
        "three": Script(title="Three", segments=(Segment("A", 0), Segment("B", 0), Segment("C", 0))),
        "other": Script(title="Other", segments=(Segment("X", 0),)),
    })

