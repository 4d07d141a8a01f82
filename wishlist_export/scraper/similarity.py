from __future__ import annotations

MAX_LENGTH_DIFFERENCE = 3
MATCH_RATIO_THRESHOLD = 0.8


def are_strings_similar(first: str, second: str) -> bool:
    """Cheap near-duplicate test for short text fragments.

    Containment wins outright. Otherwise strings whose lengths differ by more
    than ``MAX_LENGTH_DIFFERENCE`` are rejected, and the rest are compared
    position by position against the longer length.
    """
    if first in second or second in first:
        return True

    if abs(len(first) - len(second)) > MAX_LENGTH_DIFFERENCE:
        return False

    matches = sum(1 for left, right in zip(first, second) if left == right)
    longest = max(len(first), len(second))
    return matches / longest >= MATCH_RATIO_THRESHOLD


def collapse_doubled_text(text: str) -> str:
    """Return the first half of text that was rendered twice in a row.

    Odd-length text is never split.
    """
    if len(text) % 2 != 0:
        return text
    half = len(text) // 2
    first_half = text[:half].strip()
    second_half = text[half:].strip()
    if first_half == second_half or are_strings_similar(first_half, second_half):
        return first_half
    return text
