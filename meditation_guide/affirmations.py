"""Constitutional healing affirmations."""

AFFIRMATIONS = {
    "vata": [
        "I am grounded and stable in my being.",
        "My nervous system is calm and peaceful.",
        "I move through life with grace and ease.",
        "My body knows how to heal and restore itself.",
    ],
    "pitta": [
        "I am cool, calm, and collected.",
        "My inner fire burns with perfect balance.",
        "I digest life experiences with wisdom.",
        "My heart is open and compassionate.",
    ],
    "kapha": [
        "I am energized and motivated.",
        "My body moves with lightness and joy.",
        "I embrace change with enthusiasm.",
        "My spirit is vibrant and alive.",
    ],
}


def primary_dosha(constitution: str | None) -> str:
    """"Vata-Pitta" → "vata". Empty string for missing input."""
    if not constitution:
        return ""
    return constitution.split("-")[0].strip().lower()


def get_affirmations(constitution: str | None) -> list[str]:
    """Affirmations for the primary dosha of a constitution label.

    Unknown or missing constitutions get an empty list.
    """
    return list(AFFIRMATIONS.get(primary_dosha(constitution), []))
