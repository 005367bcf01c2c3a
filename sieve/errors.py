"""
errors.py

Exceptions raised at the boundary of the solver core.
"""

from __future__ import annotations

from typing import Iterable, List


class SieveError(Exception):
    """Base class for solver errors."""


class UnsupportedWordLength(SieveError, LookupError):
    """No dictionary entries exist for the requested word length."""

    def __init__(self, length: int, available: Iterable[int] = ()) -> None:
        self.length = length
        self.available: List[int] = sorted(available)
        if self.available:
            hint = ", ".join(str(n) for n in self.available)
            msg = f"no {length}-letter words in dictionary (available: {hint})"
        else:
            msg = f"no {length}-letter words in dictionary"
        super().__init__(msg)


class MalformedFeedback(SieveError, ValueError):
    """Feedback could not be applied; the constraint state is left untouched."""
