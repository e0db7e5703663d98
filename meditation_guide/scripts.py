"""Meditation script table and lookups."""

import json
import logging
import os

from meditation_guide.models import Script, Segment

logger = logging.getLogger(__name__)

# Raw table, same shape as a user-supplied scripts JSON file.
# Pauses are milliseconds of silence after each line.
SCRIPT_DATA = {
    "smriti_meditation": {
        "title": "Smṛti Meditation — Remembrance of Wholeness",
        "duration": "8-10 minutes",
        "segments": [
            {"text": "Welcome, beloved one.", "pause": 2000},
            {"text": "This is a meditation of Smṛti — remembrance.", "pause": 2000},
            {"text": "The remembering of your wholeness, your original light, your innate healing power.", "pause": 3000},
            {"text": "Close your eyes gently.", "pause": 2000},
            {"text": "Place one hand on your heart, and one hand on your belly.", "pause": 3000},
            {"text": "Feel the warmth of your own touch.", "pause": 2000},
            {"text": "Take a slow breath in… drawing golden light through your nose.", "pause": 4000},
            {"text": "And breathe out slowly… releasing doubt, heaviness, or fog.", "pause": 4000},
            {"text": "With each breath, silently say to yourself:", "pause": 2000},
            {"text": "Inhale: I am whole.", "pause": 3000},
            {"text": "Exhale: I remember.", "pause": 4000},
            {"text": "Now, gently bring your attention from the crown of your head… to your heart… to your belly… to your feet.", "pause": 6000},
            {"text": "At each point, whisper inside: This place remembers its wholeness.", "pause": 4000},
            {"text": "Let us chant softly together: Smritih Purnata Swabhavah.", "pause": 3000},
            {"text": "Remembrance is the nature of wholeness.", "pause": 3000},
            {"text": "See yourself as a child, radiant and free.", "pause": 4000},
            {"text": "Notice their joy, their purity, their untouchable wholeness.", "pause": 4000},
            {"text": "They walk toward you now, and gently step into your heart.", "pause": 4000},
            {"text": "Feel every cell lighting up, whispering: We never forgot. We only waited for you to remember.", "pause": 5000},
            {"text": "Bring palms together at your heart.", "pause": 2000},
            {"text": "Bow your head slightly, and whisper: Today, I live from wholeness remembered.", "pause": 4000},
            {"text": "Take one final deep breath in… and exhale into your day, carrying remembrance with you.", "pause": 4000},
        ],
        "sanskrit_pronunciation": {
            "Smṛti": "SMRI-ti (remembrance)",
            "Smritih Purnata Swabhavah": "SMRI-tih PUR-na-ta SVA-bha-vah",
        },
        "healing_intention": "Reconnecting with innate wholeness and healing power through remembrance",
        "clinical_notes": (
            "This meditation activates the parasympathetic nervous system and supports "
            "deep healing by reconnecting with our essential nature."
        ),
    },
    "guided_breathing": {
        "title": "Pranayama for Constitutional Balance",
        "duration": "5-7 minutes",
        "segments": [
            {"text": "Let's practice pranayama to balance your doshas. Sit comfortably with your spine straight.", "pause": 3000},
            {"text": "We'll begin with Nadi Shodhana, alternate nostril breathing, to harmonize Vata.", "pause": 2000},
            {"text": "Use your right thumb to close your right nostril. Inhale through your left nostril for 4 counts.", "pause": 5000},
            {"text": "Now close your left nostril with your ring finger, release your thumb, and exhale through your right nostril for 4 counts.", "pause": 5000},
            {"text": "Continue this pattern, breathing slowly and mindfully.", "pause": 3000},
        ],
    },
}


def build_script(data: dict) -> Script:
    """Build a Script from one raw table entry.

    "title" and "segments" are structural; every other key is kept as metadata.
    A segment without "pause" gets no trailing silence.
    """
    segments = tuple(
        Segment(text=s["text"], pause_ms=int(s.get("pause", 0)))
        for s in data.get("segments", [])
    )
    metadata = {k: v for k, v in data.items() if k not in ("title", "segments")}
    return Script(title=data.get("title", ""), segments=segments, metadata=metadata)


def load_scripts(path: str) -> dict[str, Script]:
    """Load a scripts JSON file.

    Returns {} if the file is missing or malformed. Malformed entries are
    skipped with a warning.
    """
    if not os.path.exists(path):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Malformed scripts file: %s — ignoring", path)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Scripts file %s is not a name → script table — ignoring", path)
        return {}
    scripts = {}
    for name, entry in raw.items():
        try:
            scripts[name] = build_script(entry)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed script %r in %s: %s — skipping", name, path, e)
    return scripts


class ScriptStore:
    """Read-only name → Script mapping."""

    def __init__(self, scripts: dict[str, Script] | None = None):
        if scripts is None:
            scripts = {name: build_script(entry) for name, entry in SCRIPT_DATA.items()}
        self._scripts = dict(scripts)

    def get_script(self, name: str) -> Script | None:
        return self._scripts.get(name)

    def list_scripts(self) -> list[str]:
        return sorted(self._scripts)

    def __contains__(self, name) -> bool:
        return name in self._scripts

    def __len__(self) -> int:
        return len(self._scripts)


_default_store = ScriptStore()


def get_script(name: str) -> Script | None:
    """Look up a built-in script. Returns None for unknown names."""
    return _default_store.get_script(name)


def list_scripts() -> list[str]:
    """Sorted names of the built-in scripts."""
    return _default_store.list_scripts()
