"""Procedural ambient drone used as a bed under rendered meditations."""

import numpy as np
from pydub import AudioSegment

from meditation_guide.constants import DRONE_LOOP_SECONDS, DRONE_BED_DB, DRONE_FADE_MS


def generate_drone(seconds: int = DRONE_LOOP_SECONDS) -> AudioSegment:
    """Generate a tanpura-like drone using numpy sine waves.

    Root, fifth and octave of C3 with a slow breathing swell
    (about six breaths a minute).
    """
    sample_rate = 44100
    t = np.linspace(0, seconds, int(sample_rate * seconds), endpoint=False)

    # C3 (130.81 Hz), G3 (196.00 Hz), C4 (261.63 Hz)
    root = np.sin(2 * np.pi * 130.81 * t) * 0.35
    fifth = np.sin(2 * np.pi * 196.00 * t) * 0.2
    octave = np.sin(2 * np.pi * 261.63 * t) * 0.1

    swell = 0.75 + 0.25 * np.sin(2 * np.pi * 0.1 * t)
    combined = (root + fifth + octave) * swell

    peak = np.max(np.abs(combined))
    if peak > 0:
        combined = combined / peak * 0.8
    samples = (combined * 32767).astype(np.int16)

    return AudioSegment(
        data=samples.tobytes(),
        sample_width=2,
        frame_rate=sample_rate,
        channels=1,
    )


def build_bed(
    drone: AudioSegment,
    duration_ms: int,
    bed_db: float = DRONE_BED_DB,
    fade_ms: int = DRONE_FADE_MS,
) -> AudioSegment:
    """Loop or trim the drone to duration_ms, lowered to bed level with fades."""
    if len(drone) == 0 or duration_ms <= 0:
        return AudioSegment.silent(duration=max(duration_ms, 0))

    result = drone
    while len(result) < duration_ms:
        result += drone
    result = result[:duration_ms] + bed_db

    fade = min(fade_ms, duration_ms // 2)
    if fade > 0:
        result = result.fade_in(fade).fade_out(fade)
    return result
