from typing import AbstractSet, Iterable, List
from pydantic import StrictStr, TypeAdapter, ValidationError
from ..exceptions import ParseError

RECOMMENDATION_COUNT = 25

_TITLES_ADAPTER = TypeAdapter(List[StrictStr])


def _ordered(genre_filter: AbstractSet[str]) -> List[str]:
    # sets have no order; keep prompts deterministic
    return sorted(genre_filter)


def build_recommendation_prompt(
    user_text: str,
    genre_filter: AbstractSet[str],
    count: int = RECOMMENDATION_COUNT
) -> str:
    """
    Build the prompt asking for a JSON array of movie titles.

    :param user_text: The user's free-text request.
    :param genre_filter: Set of lower-cased genre identifiers, possibly empty.
    :param count: Number of suggestions to ask for.
    :return: Prompt text.
    """
    genres = _ordered(genre_filter)
    genre_focus = f"Focus on {' and '.join(genres)} genres. " if genres else ""
    genre_rule = f"- Must include {' or '.join(genres)} movies\n" if genres else ""
    return (
        f'{genre_focus}Based on this request: "{user_text}", provide a comprehensive '
        f"list of {count} movie recommendations that match the following criteria:\n"
        f"{genre_rule}"
        "- Should match the user's described preferences\n"
        "- Include a mix of both popular and lesser-known films\n"
        f"- Aim to provide exactly {count} diverse recommendations\n"
        "- Include both classic and contemporary options when applicable\n"
        "\n"
        f"Important: Please ensure you provide exactly {count} movie suggestions.\n"
        "Format your response as a JSON array with just the movie titles.\n"
        'Example: ["Movie 1", "Movie 2", "Movie 3", ...]'
    )


def build_explanation_prompt(
    user_text: str,
    titles: Iterable[str],
    genre_filter: AbstractSet[str]
) -> str:
    """
    Build the prompt asking for a numbered, per-title rationale.

    :param user_text: The user's free-text request.
    :param titles: Titles as originally suggested, before resolution and filtering.
    :param genre_filter: Set of lower-cased genre identifiers, possibly empty.
    :return: Prompt text.
    """
    genres = _ordered(genre_filter)
    focus = (
        f"I focused specifically on {' and '.join(genres)} genres as requested.\n"
        if genres else ""
    )
    scope = f" in {'/'.join(genres)}" if genres else ""
    return (
        f"I'm recommending these movies: {', '.join(titles)}.\n"
        f"{focus}"
        f'Based on the user\'s request: "{user_text}"\n'
        "\n"
        "Format your response like this:\n"
        "\n"
        f"Here are my recommendations based on your preferences{scope}:\n"
        "\n"
        "1. **[Movie Title]**\n"
        "[Explain how this movie matches their interests and genre preferences]\n"
        "\n"
        "2. **[Movie Title]**\n"
        "[Explanation]\n"
        "\n"
        "Continue for all movies. Start each number on a new line.\n"
        "Be conversational and engaging."
    )


def parse_titles(text: str) -> List[str]:
    """
    Parse a generative response that must be a JSON array of title strings.

    Nothing is repaired: surrounding prose, code fences or non-string items
    are rejected.

    :param text: Raw response text.
    :return: List of titles in the order given (may be empty).
    :raises ParseError: If the text is not a JSON array of strings.
    """
    try:
        return _TITLES_ADAPTER.validate_json(text)
    except ValidationError as e:
        raise ParseError(text, e.errors()[0].get('msg', str(e))) from e
