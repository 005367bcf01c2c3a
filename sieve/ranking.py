"""
ranking.py

Order next-guess suggestions for the current candidate pool.

Two independent strategies:
- solution guesses: candidates scored by fresh letters and letter coverage
  among the remaining pool (which word is likely the answer and most telling)
- information guesses: any dictionary word scored by the entropy of the
  feedback partition it induces on the pool, plus a positional-frequency
  bonus, with multiplicative penalties for re-testing known letters

Output rows are sorted by descending score; ties keep input order.
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple, Union

import numpy as np

from sieve.feedback import encode_words, pattern_codes

log = logging.getLogger(__name__)

SEARCH_MODES = ("exhaustive", "pruned")

Pool = Union[Sequence[str], np.ndarray]


class Strategy(Enum):
    SOLUTION = "solution"
    INFORMATION = "information"


class ScoredSuggestion(NamedTuple):
    word: str
    score: float
    strategy: Strategy


class PartitionStats(NamedTuple):
    entropy: float         # bits; higher is better
    exp_remaining: float   # expected pool size after the feedback
    worst_case: int        # size of the largest bucket
    partitions: int        # number of distinct feedback patterns


def _as_matrix(candidates: Pool) -> np.ndarray:
    if isinstance(candidates, np.ndarray):
        return candidates
    return encode_words(list(candidates))


def pattern_histogram(guess: str, candidates: Pool) -> np.ndarray:
    """Bucket sizes of the feedback patterns `guess` produces over `candidates`."""
    codes = pattern_codes(guess, _as_matrix(candidates))
    if codes.size == 0:
        return np.zeros(0, dtype=np.int64)
    _, counts = np.unique(codes, return_counts=True)
    return counts


def _entropy(counts: np.ndarray) -> float:
    total = counts.sum()
    if total <= 0:
        return 0.0
    p = counts / total
    # adding 0.0 normalises the -0.0 a single bucket yields
    return float(-(p * np.log2(p)).sum()) + 0.0


def partition_score(guess: str, candidates: Pool) -> float:
    """
    Shannon entropy (bits) of the feedback patterns `guess` induces on `candidates`.

    0 when every candidate gives the same pattern; log2(N) when all N differ.
    """
    return _entropy(pattern_histogram(guess, candidates))


def partition_stats(guess: str, candidates: Pool) -> PartitionStats:
    counts = pattern_histogram(guess, candidates)
    total = int(counts.sum())
    if total == 0:
        return PartitionStats(0.0, 0.0, 0, 0)
    return PartitionStats(
        entropy=_entropy(counts),
        exp_remaining=float((counts * counts).sum() / total),
        worst_case=int(counts.max()),
        partitions=int(counts.size),
    )


def _ranked(rows: List[ScoredSuggestion]) -> List[ScoredSuggestion]:
    # sorted() is stable, so equal scores keep dictionary order
    return sorted(rows, key=lambda r: -r.score)


class GuessRanker:
    """
    Scores next-guess suggestions.

    Weights, penalties and the guess-pool search mode are keyword-only
    settings. With search="pruned" and a pool larger than `prune_above`,
    information guesses are only looked for among the candidates plus words
    carrying at least `min_common_unused` unused letters that appear in at
    least `common_threshold` of the candidates. That is an approximation: it
    can miss the highest-entropy guess. search="exhaustive" always evaluates
    the whole dictionary.

    `opening_table` (word -> entropy bits, e.g. from `starting_word.eval`)
    replaces the full entropy pass for the first guess of a session, so the
    opening suggestions then depend on the table rather than the dictionary.
    """

    def __init__(
        self,
        *,
        fresh_weight: float = 10.0,
        frequency_weight: float = 1.0,
        partition_weight: float = 15.0,
        positional_weight: float = 0.5,
        known_penalty: float = 0.3,
        green_penalty: float = 0.1,
        search: str = "pruned",
        prune_above: int = 100,
        common_threshold: float = 0.2,
        min_common_unused: int = 3,
        opening_table: Optional[Mapping[str, float]] = None,
    ) -> None:
        if search not in SEARCH_MODES:
            raise ValueError(f"search must be one of {SEARCH_MODES}, got {search!r}")
        if prune_above < 0:
            raise ValueError("prune_above must be >= 0")
        if not 0.0 <= common_threshold <= 1.0:
            raise ValueError("common_threshold must be within [0, 1]")
        for name, value in (("known_penalty", known_penalty), ("green_penalty", green_penalty)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]")

        self.fresh_weight = float(fresh_weight)
        self.frequency_weight = float(frequency_weight)
        self.partition_weight = float(partition_weight)
        self.positional_weight = float(positional_weight)
        self.known_penalty = float(known_penalty)
        self.green_penalty = float(green_penalty)
        self.search = search
        self.prune_above = int(prune_above)
        self.common_threshold = float(common_threshold)
        self.min_common_unused = int(min_common_unused)
        self.opening_table: Dict[str, float] = dict(opening_table or {})
        self._openings: Dict[Tuple[str, ...], List[ScoredSuggestion]] = {}

    # -------------------------
    # Solution guesses
    # -------------------------
    def score_solution_guesses(
        self, candidates: Sequence[str], used_letters: Iterable[str]
    ) -> List[ScoredSuggestion]:
        """
        score = fresh_weight * (#distinct letters not yet used)
              + frequency_weight * sum over distinct letters of the number of
                candidates containing that letter
        """
        used = set(used_letters)
        coverage: Counter = Counter()
        for w in candidates:
            coverage.update(set(w))

        rows = []
        for w in candidates:
            letters = set(w)
            fresh = len(letters - used)
            freq = sum(coverage[ch] for ch in letters)
            score = fresh * self.fresh_weight + freq * self.frequency_weight
            rows.append(ScoredSuggestion(w, float(score), Strategy.SOLUTION))
        return _ranked(rows)

    # -------------------------
    # Information guesses
    # -------------------------
    def score_information_guesses(
        self,
        guess_words: Iterable[str],
        used_letters: Iterable[str],
        candidates: Sequence[str],
        *,
        locks: Optional[Mapping[int, str]] = None,
        known_letters: Iterable[str] = (),
    ) -> List[ScoredSuggestion]:
        """
        Composite score per guess word g:

            (entropy(g) * partition_weight + positional(g) * positional_weight)
            * known_penalty ** (#slots of g holding a known letter)
            * green_penalty ** (#slots of g repeating the green at that index)

        positional(g) sums, over slots whose letter is unused, the share of
        candidates holding that letter in that slot. Words with no unused
        letter are dropped.
        """
        if len(candidates) == 0:
            return []
        used = set(used_letters)
        known = set(known_letters)
        locks = dict(locks or {})

        pool = _as_matrix(candidates)
        n, length = pool.shape
        pos_freq = np.stack(
            [np.bincount(pool[:, i], minlength=26) for i in range(length)]
        ) / n

        rows = []
        for g in guess_words:
            if len(g) != length:
                raise ValueError(f"guess {g!r} does not match the {length}-letter pool")
            if not set(g) - used - known:
                continue
            entropy = partition_score(g, pool)
            bonus = sum(pos_freq[i, ord(ch) - 97] for i, ch in enumerate(g) if ch not in used)
            score = entropy * self.partition_weight + bonus * self.positional_weight
            for i, ch in enumerate(g):
                if ch in known:
                    score *= self.known_penalty
                if locks.get(i) == ch:
                    score *= self.green_penalty
            rows.append(ScoredSuggestion(g, float(score), Strategy.INFORMATION))

        log.debug("scored %d information guesses over %d candidates", len(rows), n)
        return _ranked(rows)

    def _common_letters(self, candidates: Sequence[str], used: Iterable[str]) -> Set[str]:
        n = len(candidates)
        coverage: Counter = Counter()
        for w in candidates:
            coverage.update(set(w))
        return {ch for ch, c in coverage.items() if c >= self.common_threshold * n} - set(used)

    def guess_pool(
        self,
        dictionary: Iterable[str],
        candidates: Sequence[str],
        used_letters: Iterable[str],
    ) -> List[str]:
        """Words worth evaluating as information guesses, in dictionary order."""
        words = list(dictionary)
        if self.search == "exhaustive" or len(candidates) <= self.prune_above:
            return words

        common = self._common_letters(candidates, used_letters)
        in_pool = set(candidates)
        pool = [w for w in words if w in in_pool or len(set(w) & common) >= self.min_common_unused]
        seen = set(pool)
        pool.extend(w for w in candidates if w not in seen)
        log.debug("pruned guess pool: %d of %d words (common unused letters: %s)",
                  len(pool), len(words), "".join(sorted(common)))
        return pool

    # -------------------------
    # First guess
    # -------------------------
    def opening_guesses(self, dictionary: Iterable[str]) -> List[ScoredSuggestion]:
        """
        Suggestions before any letter has been tried: pure partition entropy
        against the whole dictionary, or the opening table when one is set.

        The result depends only on the dictionary, so it is computed once per
        word list and reused. With search="pruned" and more than `prune_above`
        words, only words carrying `min_common_unused` common letters are
        scored (all of them if none qualify).
        """
        words = list(dictionary)
        if not words:
            return []
        key = tuple(words)
        if key not in self._openings:
            self._openings[key] = self._score_openings(words)
        return list(self._openings[key])

    def _opening_pool(self, words: List[str]) -> List[str]:
        # every word is still a candidate, so only the common-letter rule prunes
        if self.search == "exhaustive" or len(words) <= self.prune_above:
            return words
        common = self._common_letters(words, ())
        pool = [w for w in words if len(set(w) & common) >= self.min_common_unused]
        return pool or words

    def _score_openings(self, words: List[str]) -> List[ScoredSuggestion]:
        if self.opening_table:
            in_dict = set(words)
            rows = [
                ScoredSuggestion(w, h * self.partition_weight, Strategy.INFORMATION)
                for w, h in self.opening_table.items()
                if w in in_dict
            ]
            if rows:
                log.debug("opening guesses from table (%d words)", len(rows))
                return _ranked(rows)
            log.debug("opening table has no %d-letter words; scoring dictionary", len(words[0]))

        targets = encode_words(words)
        guesses = self._opening_pool(words)
        log.debug("scoring %d opening guesses against %d words", len(guesses), len(words))
        rows = [
            ScoredSuggestion(w, partition_score(w, targets) * self.partition_weight, Strategy.INFORMATION)
            for w in guesses
        ]
        return _ranked(rows)
