"""Data models for guided sessions."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Segment:
    text: str          # the spoken line
    pause_ms: int = 0  # silence after the line

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("Segment text must be non-empty")
        if self.pause_ms < 0:
            raise ValueError(f"Segment pause must be non-negative, got {self.pause_ms}")


@dataclass(frozen=True)
class Script:
    title: str
    segments: tuple[Segment, ...]
    metadata: dict = field(default_factory=dict)

    @property
    def spoken_pause_ms(self) -> int:
        """Total silence across all segments, in milliseconds."""
        return sum(s.pause_ms for s in self.segments)


class SessionStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"


@dataclass
class Session:
    """One run of the controller over one script."""

    script_name: str
    script: Script
    cursor: int = 0
    status: SessionStatus = SessionStatus.IDLE
    error: Exception | None = None
    line_spoken: bool = False   # narration at cursor has finished
    silence_left_ms: int = 0    # silence still owed after that narration

    @property
    def is_active(self) -> bool:
        return self.status in (SessionStatus.RUNNING, SessionStatus.PAUSED)

    @property
    def current_segment(self) -> Segment | None:
        if 0 <= self.cursor < len(self.script.segments):
            return self.script.segments[self.cursor]
        return None
