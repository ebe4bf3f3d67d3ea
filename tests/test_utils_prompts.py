import pytest

from moviechat.exceptions import ParseError
from moviechat.utils.utils_prompts import (
    RECOMMENDATION_COUNT,
    build_explanation_prompt,
    build_recommendation_prompt,
    parse_titles,
)


def test_recommendation_prompt_without_genres():
    prompt = build_recommendation_prompt("something cozy", frozenset())
    assert '"something cozy"' in prompt
    assert f"exactly {RECOMMENDATION_COUNT} movie suggestions" in prompt
    assert "JSON array" in prompt
    assert "Focus on" not in prompt
    assert "Must include" not in prompt


def test_recommendation_prompt_emphasizes_genres():
    prompt = build_recommendation_prompt("scary night", frozenset({"thriller", "horror"}))
    assert prompt.startswith("Focus on horror and thriller genres.")
    assert "- Must include horror or thriller movies" in prompt


def test_explanation_prompt_lists_titles_and_genres():
    prompt = build_explanation_prompt(
        "I want a lighthearted comedy", ["Movie A", "Movie B"], frozenset({"comedy"}))
    assert "I'm recommending these movies: Movie A, Movie B." in prompt
    assert "I focused specifically on comedy genres as requested." in prompt
    assert "based on your preferences in comedy:" in prompt
    assert "1. **[Movie Title]**" in prompt


def test_explanation_prompt_without_genres():
    prompt = build_explanation_prompt("anything", ["Heat"], frozenset())
    assert "I focused specifically" not in prompt
    assert "based on your preferences:" in prompt


def test_parse_titles_accepts_string_array_of_any_length():
    assert parse_titles('["Movie A", "Movie B"]') == ["Movie A", "Movie B"]
    assert parse_titles("[]") == []


@pytest.mark.parametrize("raw", [
    "not json",
    '{"titles": ["Movie A"]}',
    '["Movie A", 2]',
    '"Movie A"',
    '```json\n["Movie A"]\n```',
    "",
])
def test_parse_titles_rejects_anything_else(raw):
    with pytest.raises(ParseError) as exc:
        parse_titles(raw)
    assert exc.value.raw == raw
