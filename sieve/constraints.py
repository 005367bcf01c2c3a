"""
constraints.py

Keeps track of Wordle-style constraints and filters candidate words.
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Set, Tuple

from sieve.errors import MalformedFeedback
from sieve.feedback import Mark, as_marks

log = logging.getLogger(__name__)


class SlotStatus(Enum):
    UNKNOWN = "unknown"
    LOCKED = "locked"
    EXCLUDED = "excluded"


class Slot(NamedTuple):
    """
    What is known about one position.

    `locked` is the confirmed (green) letter, if any. `misplaced` holds letters
    known to be in the word but not here (yellow at this index); they are kept
    after a lock so their presence still constrains the rest of the word.
    """

    locked: Optional[str] = None
    misplaced: FrozenSet[str] = frozenset()

    @classmethod
    def make(cls, locked: Optional[str] = None, misplaced: Iterable[str] = ()) -> "Slot":
        misplaced = frozenset(misplaced)
        if locked is not None and locked in misplaced:
            raise ValueError(f"letter {locked!r} cannot be both locked and misplaced in one slot")
        return cls(locked, misplaced)

    @property
    def status(self) -> SlotStatus:
        if self.locked is not None:
            return SlotStatus.LOCKED
        if self.misplaced:
            return SlotStatus.EXCLUDED
        return SlotStatus.UNKNOWN


def filter_words(
    dictionary: Iterable[str],
    locks: Mapping[int, str],
    exclusions: Mapping[int, Iterable[str]],
    excluded: Iterable[str],
) -> List[str]:
    """
    Keep only the words consistent with the given constraints, in dictionary order.

    - locks: index -> letter that must sit at that index (green)
    - exclusions: index -> letters present in the word but not at that index (yellow)
    - excluded: letters with no occurrences beyond the confirmed ones (gray);
      duplicates are tolerated

    A gray letter that is also locked or misplaced somewhere pins the count:
    the word must hold exactly (locked slots + exclusion entries) copies of it.
    A gray letter with no confirmed copies must not appear at all.
    Contradictory constraints simply produce an empty list.
    """
    locks = dict(locks)
    exclusions = {i: frozenset(letters) for i, letters in exclusions.items() if letters}

    confirmed: Counter = Counter(locks.values())
    required: Set[str] = set()
    for letters in exclusions.values():
        confirmed.update(letters)
        required.update(letters)
    exact_counts = {ch: confirmed[ch] for ch in set(excluded)}

    candidates = []
    for w in dictionary:
        n = len(w)
        if any(not 0 <= i < n or w[i] != ch for i, ch in locks.items()):
            continue
        if any(not 0 <= i < n or w[i] in letters for i, letters in exclusions.items()):
            continue
        if any(ch not in w for ch in required):
            continue
        if any(w.count(ch) != k for ch, k in exact_counts.items()):
            continue
        candidates.append(w)
    return candidates


class ConstraintState:
    """
    Accumulated feedback for one solving session.

    Besides the per-slot view, keeps per-letter count bounds taken from each
    guess on its own: a letter marked green/yellow k times in one guess occurs
    at least k times, and exactly k times if that guess also greyed it. A grey
    also rules its letter out of that slot, even when a copy sits elsewhere.

    Feedback that contradicts an earlier lock (another green at a locked slot,
    a yellow for the locked letter, a green where the letter was reported
    misplaced) cannot come from any answer. It is recorded and the state
    becomes `inconsistent`, so `filter` yields nothing until `reset`.
    Mutated only by `apply_feedback` (all-or-nothing) and cleared by `reset`.
    """

    def __init__(self, word_length: int = 5) -> None:
        if word_length <= 0:
            raise ValueError("word_length must be positive")
        self.word_length = word_length
        self.reset()

    def reset(self) -> None:
        self.slots: Tuple[Slot, ...] = (Slot(),) * self.word_length
        self.excluded: FrozenSet[str] = frozenset()
        self.used: FrozenSet[str] = frozenset()
        self.min_counts: Dict[str, int] = {}
        self.max_counts: Dict[str, int] = {}
        self.greyed_at: Tuple[FrozenSet[str], ...] = (frozenset(),) * self.word_length
        self.inconsistent = False
        self.history: List[Tuple[str, List[Mark]]] = []

    def apply_feedback(self, guess: str, pattern: Sequence[int]) -> None:
        """
        Update constraints based on feedback pattern.
        - Green = fix the letter at that slot
        - Yellow = letter must be included but not in that slot
        - Gray = no occurrences beyond those confirmed green/yellow

        Raises MalformedFeedback without touching the state if the guess or
        pattern has the wrong shape. Contradictions are not errors.
        """
        if not isinstance(guess, str) or len(guess) != self.word_length:
            raise MalformedFeedback(f"guess must be a {self.word_length}-letter word")
        if not (guess.isalpha() and guess.isascii() and guess.islower()):
            raise MalformedFeedback("guess must be lowercase alphabetic")
        marks = as_marks(pattern, self.word_length)

        # Pass 1: slot-level constraints, on copies
        slots = list(self.slots)
        greyed_at = list(self.greyed_at)
        conflicts: List[int] = []
        gy_counts: Counter = Counter()   # green+yellow occurrences per letter
        grays: Set[str] = set()
        for i, (ch, m) in enumerate(zip(guess, marks)):
            slot = slots[i]
            if m == Mark.GREEN:
                gy_counts[ch] += 1
                if (slot.locked is not None and slot.locked != ch) or ch in slot.misplaced:
                    conflicts.append(i)
                    continue
                slots[i] = Slot.make(ch, slot.misplaced)
            elif m == Mark.YELLOW:
                gy_counts[ch] += 1
                if slot.locked == ch:
                    conflicts.append(i)
                    continue
                slots[i] = Slot.make(slot.locked, slot.misplaced | {ch})
            else:
                grays.add(ch)
                greyed_at[i] = greyed_at[i] | {ch}

        # Pass 2: per-letter bounds from this guess alone
        min_counts = dict(self.min_counts)
        max_counts = dict(self.max_counts)
        for ch in set(guess):
            k = gy_counts[ch]
            min_counts[ch] = max(min_counts.get(ch, 0), k)
            if ch in grays:
                max_counts[ch] = min(max_counts.get(ch, self.word_length), k)

        if conflicts:
            log.debug("%s %s contradicts earlier locks at %s; no word can match",
                      guess, [int(m) for m in marks], conflicts)
        self.slots = tuple(slots)
        self.greyed_at = tuple(greyed_at)
        self.inconsistent = self.inconsistent or bool(conflicts)
        self.excluded = self.excluded | grays
        self.used = self.used | set(guess)
        self.min_counts = min_counts
        self.max_counts = max_counts
        self.history.append((guess, marks))
        log.debug("applied %s %s -> locks=%s exclusions=%s excluded=%s",
                  guess, [int(m) for m in marks], self.locks(),
                  {i: "".join(sorted(s)) for i, s in self.exclusions().items()},
                  "".join(sorted(self.excluded)))

    # -------------------------
    # Views
    # -------------------------
    def locks(self) -> Dict[int, str]:
        return {i: s.locked for i, s in enumerate(self.slots) if s.locked is not None}

    def exclusions(self) -> Dict[int, FrozenSet[str]]:
        return {i: s.misplaced for i, s in enumerate(self.slots) if s.misplaced}

    def known_letters(self) -> Set[str]:
        """Letters confirmed present (green or yellow anywhere)."""
        known = set(self.locks().values())
        for letters in self.exclusions().values():
            known |= letters
        return known

    def absent_letters(self) -> Set[str]:
        """Greyed letters never confirmed green/yellow in the guess that greyed them."""
        return {ch for ch in self.excluded if self.max_counts.get(ch) == 0}

    def filter(self, dictionary: Iterable[str]) -> List[str]:
        """
        Words consistent with every feedback so far.

        Absent letters go through `filter_words` as excluded letters. Greyed
        letters that were also confirmed are checked against the per-guess
        count bounds instead, because the slot view merges occurrences across
        guesses (a yellow in one guess and a green in the next are often the
        same copy of the letter). Letters greyed at a slot may not sit there.
        """
        if self.inconsistent:
            return []
        words = filter_words(dictionary, self.locks(), self.exclusions(), self.absent_letters())
        return [w for w in words if self._counts_ok(w) and self._greys_ok(w)]

    def _greys_ok(self, word: str) -> bool:
        return not any(ch in grey for ch, grey in zip(word, self.greyed_at))

    def _counts_ok(self, word: str) -> bool:
        for ch, k in self.min_counts.items():
            if k and word.count(ch) < k:
                return False
        for ch, k in self.max_counts.items():
            if word.count(ch) > k:
                return False
        return True
