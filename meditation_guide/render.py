"""Render a whole meditation script to a single MP3."""

import os

from pydub import AudioSegment

from meditation_guide.constants import (
    CLOSING_REMARK,
    DRONE_BED_DB,
    DRONE_FADE_MS,
    GUIDE_NAME,
    GUIDE_VOICE,
    MEDITATION_RATE,
    OUTPUT_BITRATE,
)
from meditation_guide.models import Script, Segment
from meditation_guide.music import build_bed, generate_drone
from meditation_guide.tts import generate_tts


def assemble(segments: list[Segment], audio_files: list[AudioSegment]) -> AudioSegment:
    """Concatenate clips, each followed by its segment's silence."""
    result = AudioSegment.silent(duration=0)
    for segment, audio in zip(segments, audio_files):
        result += audio
        if segment.pause_ms > 0:
            result += AudioSegment.silent(duration=segment.pause_ms)
    return result


def render_script(
    script: Script,
    output_path: str,
    voice: str = GUIDE_VOICE,
    rate: str = MEDITATION_RATE,
    drone: bool = True,
    drone_db: float = DRONE_BED_DB,
    closing_remark: str = CLOSING_REMARK,
) -> str:
    """Synthesize every line and write the finished meditation to output_path.

    Clips are cached next to the output in a <name>_lines/ directory, so an
    interrupted render resumes where it stopped. The drone bed starts one
    fade ahead of the first line and trails one fade past the last.

    Returns output_path.
    """
    segments = list(script.segments) + [Segment(text=closing_remark)]

    base = os.path.splitext(output_path)[0]
    clip_dir = f"{base}_lines"
    os.makedirs(clip_dir, exist_ok=True)

    paths = generate_tts(segments, clip_dir, voice=voice, rate=rate)
    clips = [AudioSegment.from_mp3(p) for p in paths]
    spoken = assemble(segments, clips)

    if drone:
        lead = AudioSegment.silent(duration=DRONE_FADE_MS)
        spoken = lead + spoken + lead
        bed = build_bed(generate_drone(), len(spoken), bed_db=drone_db)
        spoken = bed.overlay(spoken)

    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    tags = {"artist": GUIDE_NAME}
    if script.title:
        tags["title"] = script.title

    spoken.export(output_path, format="mp3", bitrate=OUTPUT_BITRATE, tags=tags)
    return output_path
