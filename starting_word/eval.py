"""
starting_word/eval.py

Build an opening table: score every dictionary word of one length as a first
guess by how well it splits that same dictionary.

Metrics per guess:
- entropy: information gain in bits (higher is better)
- exp_remaining: expected remaining candidates after the first feedback
- worst_case: size of the largest bucket (lower is better)
- partitions: number of distinct feedback patterns induced

The CSV it writes can be passed to the solver with --openers.

Usage:
  python -m starting_word.eval --words words.txt --length 5 --out openers_5.csv
"""

from __future__ import annotations

import argparse
import csv
import logging
import time
from typing import Dict, List, Optional, Sequence, Union

from sieve.data_utils import load_lexicon
from sieve.feedback import encode_words
from sieve.ranking import partition_stats

log = logging.getLogger(__name__)

FIELDNAMES = ["guess", "entropy", "exp_remaining", "worst_case", "partitions"]


def evaluate_openers(
    answers: Sequence[str],
    guesses: Optional[Sequence[str]] = None,
    *,
    progress: bool = False,
) -> List[Dict[str, Union[str, float, int]]]:
    """
    Evaluate each candidate first guess against the full answer set.

    Parameters
    ----------
    answers : list[str]
        The possible targets (usually the whole dictionary for one length).
    guesses : list[str] | None
        Candidate guesses to score. If None, uses `answers`.
    progress : bool
        If True, logs a progress line every 500 guesses.

    Returns
    -------
    list[dict]
        Records keyed by FIELDNAMES, best first: entropy desc, then
        exp_remaining asc, then worst_case asc; remaining ties keep input order.
    """
    if not answers:
        raise ValueError("answers must be non-empty")
    pool = guesses if guesses is not None else answers
    targets = encode_words(list(answers))
    length = targets.shape[1]

    results: List[Dict[str, Union[str, float, int]]] = []
    for i, g in enumerate(pool):
        if len(g) != length:
            raise ValueError(f"guess {g!r} does not match the {length}-letter answers")
        stats = partition_stats(g, targets)
        results.append(
            {
                "guess": g,
                "entropy": stats.entropy,
                "exp_remaining": stats.exp_remaining,
                "worst_case": stats.worst_case,
                "partitions": stats.partitions,
            }
        )
        if progress and (i + 1) % 500 == 0:
            log.info("Scored %d/%d guesses...", i + 1, len(pool))

    results.sort(key=lambda r: (-r["entropy"], r["exp_remaining"], r["worst_case"]))
    return results


def _print_top(results: List[Dict[str, Union[str, float, int]]], k: int = 20) -> None:
    print(f"\nTop {k} opening words by entropy:")
    print(f"{'rank':>4}  {'guess':<8}  {'entropy':>8}  {'exp_rem':>8}  {'worst':>5}  {'parts':>6}")
    for idx, r in enumerate(results[:k], start=1):
        print(
            f"{idx:>4}  {r['guess']:<8}  {r['entropy']:>8.3f}  {r['exp_remaining']:>8.2f}  {int(r['worst_case']):>5}  {int(r['partitions']):>6}"
        )


def write_csv(results: List[Dict[str, Union[str, float, int]]], path: str) -> None:
    with open(path, mode="w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in results:
            writer.writerow(row)


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Score opening words by entropy")
    ap.add_argument("--words", default="words.txt", help="Word list (.csv with a word column, or one word per line)")
    ap.add_argument("--column", default="word", help="CSV column holding the words")
    ap.add_argument("--length", type=int, default=5, help="Word length to evaluate")
    ap.add_argument("--out", default=None, help="Output CSV (default: openers_<length>.csv)")
    ap.add_argument("--top", type=int, default=20, help="How many rows to print")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    answers = load_lexicon(args.words, args.column, [args.length]).vocab(args.length).words()
    out = args.out or f"openers_{args.length}.csv"

    log.info("Scoring %d guesses against %d answers...", len(answers), len(answers))
    t0 = time.perf_counter()
    results = evaluate_openers(answers, progress=True)
    log.info("Done in %.2fs", time.perf_counter() - t0)
    _print_top(results, k=args.top)
    write_csv(results, out)
    print(f"Wrote results to {out}")


if __name__ == "__main__":
    main()
