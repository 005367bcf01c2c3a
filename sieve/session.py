"""
session.py

One solving session: a fixed word length, the dictionary for it, and the
feedback accumulated so far.

API
---
apply_feedback(guess, pattern) -> None
    Records one guess and its per-position marks. Malformed feedback is
    rejected before anything changes.

candidates() -> list[str]
    Words still consistent with all feedback, recomputed from scratch.

suggest(limit=5) -> Suggestions
    Candidates plus the top solution and information guesses.

reset() -> None
    Forget all feedback (new game, same word length).
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

from sieve.constraints import ConstraintState
from sieve.feedback import Mark
from sieve.ranking import GuessRanker, ScoredSuggestion
from sieve.vocab import Lexicon, WordVocab

log = logging.getLogger(__name__)


class Suggestions(NamedTuple):
    candidates: List[str]
    solution: List[ScoredSuggestion]
    information: List[ScoredSuggestion]


class SolverSession:
    # Pools this small are settled faster by guessing a candidate outright.
    SMALL_POOL = 2

    def __init__(
        self,
        lexicon: Lexicon,
        word_length: int = 5,
        ranker: Optional[GuessRanker] = None,
    ) -> None:
        if not isinstance(lexicon, Lexicon):
            raise TypeError("lexicon must be a Lexicon")
        # raises UnsupportedWordLength
        self.vocab: WordVocab = lexicon.vocab(word_length)
        self.word_length = word_length
        self.ranker = ranker if ranker is not None else GuessRanker()
        self._state = ConstraintState(word_length)

    # -------------------------
    # Core session API
    # -------------------------
    def apply_feedback(self, guess: str, pattern: Sequence[int]) -> None:
        self._state.apply_feedback(guess, pattern)

    def reset(self) -> None:
        self._state.reset()

    def candidates(self) -> List[str]:
        words = self._state.filter(self.vocab)
        log.debug("%d of %d words remain", len(words), len(self.vocab))
        return words

    def suggest(self, limit: int = 5) -> Suggestions:
        """
        Rank next guesses for the current state. An empty candidate set is a
        valid outcome and yields empty suggestion lists.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")
        words = self.candidates()
        if not words:
            return Suggestions([], [], [])

        used = self._state.used
        solution = self.ranker.score_solution_guesses(words, used)
        if not used:
            information = self.ranker.opening_guesses(self.vocab)
        elif len(words) <= self.SMALL_POOL:
            information = []
        else:
            pool = self.ranker.guess_pool(self.vocab, words, used)
            information = self.ranker.score_information_guesses(
                pool,
                used,
                words,
                locks=self._state.locks(),
                known_letters=self._state.known_letters(),
            )
        return Suggestions(words, solution[:limit], information[:limit])

    # -------------------------
    # Introspection helpers
    # -------------------------
    @property
    def state(self) -> ConstraintState:
        return self._state

    @property
    def history(self) -> List[Tuple[str, List[Mark]]]:
        return list(self._state.history)

    @property
    def used_letters(self) -> FrozenSet[str]:
        return self._state.used
