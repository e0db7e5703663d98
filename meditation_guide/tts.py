"""TTS generation via edge-tts with retry logic."""

import asyncio
import os

import edge_tts

from meditation_guide.constants import GUIDE_VOICE, TTS_RETRY_COUNT, TTS_RETRY_BASE_DELAY, TTS_RATE
from meditation_guide.models import Segment


async def synthesize(text: str, voice: str, output_path: str, rate: str = TTS_RATE) -> None:
    """Synthesize one clip with retry logic.

    Retries on network errors, HTTP errors, or 0-byte output files with
    exponential backoff. Rate is a relative string like "-10%".
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            communicate = edge_tts.Communicate(text, voice, rate=rate)
            await communicate.save(output_path)

            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return

            last_error = Exception(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = e

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            await asyncio.sleep(delay)

    raise last_error


def generate_single(text: str, voice: str, output_path: str, rate: str = TTS_RATE) -> None:
    """Sync wrapper around synthesize() for offline rendering."""
    asyncio.run(synthesize(text, voice, output_path, rate=rate))


def segment_filename(index: int, segment: Segment) -> str:
    """Stable filename for a segment clip: index plus a short text slug."""
    words = "".join(c if c.isalnum() else " " for c in segment.text.lower()).split()
    slug = "_".join(words[:4]) or "line"
    return f"{index:03d}_{slug}.mp3"


def generate_tts(
    segments: list[Segment],
    output_dir: str,
    voice: str = GUIDE_VOICE,
    rate: str = TTS_RATE,
) -> list[str]:
    """Generate TTS for all segments.

    Returns list of output file paths. Prints progress counter.
    """
    total = len(segments)
    paths = []

    for i, seg in enumerate(segments):
        filename = segment_filename(i, seg)
        output_path = os.path.join(output_dir, filename)

        # Skip if already exists (resumability)
        if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
            print(f"  [skip] Segment {i + 1}/{total}: {filename}")
            paths.append(output_path)
            continue

        print(f"  Generating segment {i + 1}/{total}: {filename}")
        generate_single(seg.text, voice, output_path, rate=rate)
        paths.append(output_path)

    return paths
