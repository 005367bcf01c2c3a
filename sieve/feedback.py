"""
Feedback utilities.

A guess is scored against a hypothetical solution one position at a time:
    - GREEN  = same letter in the same slot
    - YELLOW = letter occurs elsewhere in the solution and has not been consumed
    - GRAY   = letter absent, or over-used relative to the solution's count

Patterns are lists of `Mark` values. For bucketing they are packed base-3 into a
single integer, first position most significant.
"""

from __future__ import annotations

from collections import Counter
from enum import IntEnum
from typing import List, Sequence

import numpy as np

from sieve.errors import MalformedFeedback


class Mark(IntEnum):
    GRAY = 0
    YELLOW = 1
    GREEN = 2


def _check_word(word: str, name: str) -> None:
    if not isinstance(word, str):
        raise TypeError(f"{name} must be a string")
    if not word.isalpha() or not word.isascii() or not word.islower():
        raise ValueError(f"{name} must be lowercase alphabetic: {word!r}")


def score_pattern(guess: str, target: str) -> List[Mark]:
    """
    Compute the feedback `guess` would receive if `target` were the answer.

    Correct Duplicate Handling (two-pass rule)
    ------------------------------------------
    1) GREENS PASS: every slot where guess[i] == target[i] is GREEN, and that
       occurrence is consumed from the target's letter counts.
    2) YELLOWS PASS: left to right, each remaining slot is YELLOW if its letter
       still has an unconsumed occurrence in the target (which it then
       consumes), otherwise GRAY.

    Examples
    --------
    'allot' vs 'total' -> [1, 1, 0, 1, 1]
    'sheen' vs 'geese' -> [1, 0, 2, 1, 0]
    """
    _check_word(guess, "guess")
    _check_word(target, "target")
    if len(guess) != len(target):
        raise ValueError("guess and target must have the same length")

    pattern: List[Mark] = [Mark.GRAY] * len(guess)
    remaining = Counter(target)

    # Pass 1: mark greens and decrement availability
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            pattern[i] = Mark.GREEN
            remaining[g] -= 1

    # Pass 2: mark yellows where counts allow (else gray)
    for i, g in enumerate(guess):
        if pattern[i] == Mark.GRAY and remaining[g] > 0:
            pattern[i] = Mark.YELLOW
            remaining[g] -= 1

    return pattern


def pattern_to_int(pattern: Sequence[int]) -> int:
    """
    Encode a pattern of trits into a single integer in [0, 3**len(pattern)).

    Encoding (base-3 positional): value = value * 3 + p for each p in order.
    Matches the codes produced by `pattern_codes`.
    """
    if not isinstance(pattern, (list, tuple)):
        raise TypeError("pattern must be a list or tuple of integers in {0,1,2}")
    value = 0
    for p in pattern:
        if not isinstance(p, int) or p not in (0, 1, 2):
            raise ValueError("pattern elements must be integers in {0,1,2}")
        value = value * 3 + int(p)
    return value


def as_marks(pattern: Sequence[object], word_length: int) -> List[Mark]:
    """
    Validate a feedback pattern for a `word_length`-letter guess.

    Accepts `Mark`s or plain ints in {0,1,2}. Raises MalformedFeedback when the
    length differs or a position is not exactly one of the three marks.
    """
    if not isinstance(pattern, (list, tuple)):
        raise MalformedFeedback("feedback must be a sequence of marks")
    if len(pattern) != word_length:
        raise MalformedFeedback(
            f"feedback has {len(pattern)} marks, expected {word_length}"
        )
    marks: List[Mark] = []
    for i, p in enumerate(pattern):
        if isinstance(p, bool) or not isinstance(p, int) or p not in (0, 1, 2):
            raise MalformedFeedback(f"position {i}: {p!r} is not gray/yellow/green")
        marks.append(Mark(p))
    return marks


# -------------------------
# Vectorised scoring
# -------------------------

def encode_words(words: Sequence[str]) -> np.ndarray:
    """
    Convert equal-length lowercase words to an (n, L) uint8 array of letter
    indices (a=0 .. z=25).
    """
    if len(words) == 0:
        return np.zeros((0, 0), dtype=np.uint8)
    length = len(words[0])
    buf = "".join(words).encode("ascii")
    if len(buf) != length * len(words):
        raise ValueError("all words must have the same length")
    return np.frombuffer(buf, dtype=np.uint8).reshape(len(words), length) - 97


def pattern_codes(guess: str, solutions: np.ndarray) -> np.ndarray:
    """
    Feedback codes for `guess` against every row of `solutions` at once.

    Args:
        guess: the guessed word
        solutions: shape (n, L) array from `encode_words`

    Returns:
        shape (n,) int64 array; entry j equals
        pattern_to_int(score_pattern(guess, solutions_word_j))
    """
    n, length = solutions.shape
    g = encode_words([guess])[0]
    if n == 0:
        return np.zeros(0, dtype=np.int64)
    if len(g) != length:
        raise ValueError("guess length does not match solutions")

    green = solutions == g
    marks = np.where(green, int(Mark.GREEN), int(Mark.GRAY)).astype(np.int8)
    # occurrences of each letter left in the solution after the greens pass
    unmatched = solutions.astype(np.int16)
    unmatched[green] = -1

    for i in range(length):
        c = g[i]
        available = (unmatched == c).sum(axis=1)
        # yellows already handed out to the same letter earlier in the guess
        consumed = ((marks[:, :i] == int(Mark.YELLOW)) & (g[:i] == c)).sum(axis=1)
        yellow = ~green[:, i] & (available > consumed)
        marks[yellow, i] = int(Mark.YELLOW)

    weights = 3 ** np.arange(length - 1, -1, -1, dtype=np.int64)
    return marks.astype(np.int64) @ weights
