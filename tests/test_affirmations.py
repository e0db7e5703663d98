"""Tests for constitutional affirmations."""

from meditation_guide.affirmations import AFFIRMATIONS, get_affirmations, primary_dosha


def test_dual_constitution_uses_primary():
    assert get_affirmations("Vata-Pitta") == AFFIRMATIONS["vata"]


def test_single_constitution():
    assert get_affirmations("Kapha") == AFFIRMATIONS["kapha"]


def test_case_insensitive():
    assert get_affirmations("PITTA-kapha") == AFFIRMATIONS["pitta"]


def test_unknown_constitution():
    assert get_affirmations("unknown") == []


def test_missing_constitution():
    assert get_affirmations(None) == []
    assert get_affirmations("") == []


def test_returns_copy():
    result = get_affirmations("Vata")
    result.append("extra")
    assert "extra" not in AFFIRMATIONS["vata"]


def test_primary_dosha():
    assert primary_dosha("Vata-Pitta-Kapha") == "vata"
    assert primary_dosha(None) == ""
