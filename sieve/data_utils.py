from __future__ import annotations

import logging
from typing import Dict, Iterable

import pandas as pd

from sieve.vocab import Lexicon

log = logging.getLogger(__name__)


def load_lexicon(path: str, column: str = "word", lengths: Iterable[int] = ()) -> Lexicon:
    """
    Load a word list and group it into a Lexicon keyed by word length.

    CSV files must have a `column` header; any other file is read as one word
    per line. Words are lowercased, non a-z entries dropped and duplicates
    removed (first occurrence wins).
    """
    if path.endswith(".csv"):
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        if column not in df.columns:
            raise KeyError(f"column '{column}' not found in {path}")
    else:
        df = pd.read_csv(path, header=None, names=[column], dtype=str,
                         keep_default_na=False, skip_blank_lines=True)

    lexicon = Lexicon.from_words(df[column].tolist(), lengths)
    log.info("Read %d entries from %s; lengths available: %s",
             len(df), path, lexicon.available_lengths())
    return lexicon


def load_opening_table(path: str) -> Dict[str, float]:
    """
    Read an opening table written by `starting_word.eval` into word -> entropy bits,
    best first.
    """
    df = pd.read_csv(path, dtype={"guess": str}, keep_default_na=False)
    missing = {"guess", "entropy"} - set(df.columns)
    if missing:
        raise KeyError(f"{path} is missing columns: {sorted(missing)}")
    df = df.sort_values("entropy", ascending=False, kind="stable")
    table = {str(g).lower(): float(h) for g, h in zip(df["guess"], df["entropy"])}
    log.info("Loaded %d opening words from %s", len(table), path)
    return table
