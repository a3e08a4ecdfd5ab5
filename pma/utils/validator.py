"""Input validation — checks that the idea is a non-empty string before any stage runs."""


def validate_input(idea: str) -> str:
    """Validate that the idea is a non-empty string.

    Returns the stripped input on success.
    Raises ValueError if input is empty or whitespace-only.
    """
    if not isinstance(idea, str) or not idea.strip():
        raise ValueError("Idea is required: enter a non-empty product idea.")
    return idea.strip()
