"""Tests for the drone bed."""

from pydub import AudioSegment

from meditation_guide.constants import DRONE_LOOP_SECONDS
from meditation_guide.music import build_bed, generate_drone


def test_drone_returns_audio_segment():
    assert isinstance(generate_drone(2), AudioSegment)


def test_drone_default_duration():
    """Duration ≈ DRONE_LOOP_SECONDS * 1000 ms (±100ms)."""
    result = generate_drone()
    assert abs(len(result) - DRONE_LOOP_SECONDS * 1000) < 100


def test_drone_not_silent():
    assert generate_drone(1).rms > 0


def test_bed_loops_to_length():
    drone = generate_drone(1)
    bed = build_bed(drone, 3500)
    assert len(bed) == 3500


def test_bed_trims_to_length():
    bed = build_bed(generate_drone(2), 500)
    assert len(bed) == 500


def test_bed_is_quieter_than_drone():
    drone = generate_drone(2)
    bed = build_bed(drone, 2000, fade_ms=0)
    assert bed.dBFS < drone.dBFS - 10


def test_bed_from_empty_drone_is_silent():
    bed = build_bed(AudioSegment.silent(duration=0), 1000)
    assert len(bed) == 1000
    assert bed.rms == 0
