from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from sieve.errors import UnsupportedWordLength

log = logging.getLogger(__name__)


class WordVocab:
    """
    An ordered, duplicate-free dictionary of equal-length lowercase words.

    Built once and read-only afterwards; safe to share between sessions.
    """

    def __init__(self, words: List[str]) -> None:
        if not isinstance(words, (list, tuple)):
            raise TypeError("`words` must be a list of strings")
        if not words:
            raise ValueError("no words provided")
        if not all(isinstance(w, str) for w in words):
            raise TypeError("all items in `words` must be str")

        # Enforce uniqueness (first occurrence policy is handled by clean_words)
        if len(set(words)) != len(words):
            raise ValueError("duplicate words detected; input to WordVocab must be deduplicated")

        length = len(words[0])
        for w in words:
            if len(w) != length:
                raise ValueError(f"mixed word lengths: {words[0]!r} and {w!r}")
            if not (w.isalpha() and w.isascii() and w.islower()):
                raise ValueError(f"words must be lowercase a-z: {w!r}")

        self._words: Tuple[str, ...] = tuple(words)
        self._members = frozenset(self._words)
        self.word_length = length

    # ---------- Basic protocol ----------

    def __len__(self) -> int:
        """Number of words in the vocabulary."""
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._members

    def words(self) -> List[str]:
        """Return a copy of the internal word list (to avoid external mutation)."""
        return list(self._words)


def clean_words(
    raw: Iterable[object],
    *,
    lowercase: bool = True,
    dedupe: bool = True,
    alpha_only: bool = True,
) -> List[str]:
    """Normalise raw entries, dropping blanks and (optionally) non a-z words."""
    clean: List[str] = []
    seen = set()
    for val in raw:
        if not isinstance(val, str):
            val = str(val) if val is not None else ""
        w = val.strip()
        w = w.lower() if lowercase else w
        if not w:
            continue
        if alpha_only and not (w.isalpha() and w.isascii()):
            continue
        if dedupe:
            if w in seen:
                continue
            seen.add(w)
        clean.append(w)
    return clean


class Lexicon:
    """
    Dictionaries keyed by word length.

    Passed explicitly into each session so that tests and concurrent sessions
    can use independent word lists.
    """

    def __init__(self, vocabs: Mapping[int, WordVocab]) -> None:
        for length, vocab in vocabs.items():
            if not isinstance(vocab, WordVocab):
                raise TypeError("lexicon values must be WordVocab instances")
            if vocab.word_length != length:
                raise ValueError(
                    f"{length}-letter slot holds {vocab.word_length}-letter words"
                )
        self._vocabs: Dict[int, WordVocab] = dict(vocabs)

    @classmethod
    def from_words(cls, words: Iterable[str], lengths: Iterable[int] = ()) -> "Lexicon":
        """Normalise `words` and group them by length, keeping first-seen order."""
        wanted = set(lengths)
        grouped: Dict[int, List[str]] = {}
        for w in clean_words(words):
            if wanted and len(w) not in wanted:
                continue
            grouped.setdefault(len(w), []).append(w)
        for length, group in sorted(grouped.items()):
            log.debug("lexicon: %d %d-letter words", len(group), length)
        return cls({length: WordVocab(group) for length, group in grouped.items()})

    def available_lengths(self) -> List[int]:
        return sorted(self._vocabs)

    def vocab(self, length: int) -> WordVocab:
        """Return the dictionary for `length`; raise UnsupportedWordLength if none."""
        try:
            return self._vocabs[length]
        except KeyError:
            raise UnsupportedWordLength(length, self._vocabs) from None

    def __contains__(self, length: object) -> bool:
        return length in self._vocabs

    def __len__(self) -> int:
        return len(self._vocabs)
