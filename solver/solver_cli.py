"""
solver/solver_cli.py

Interactive Wordle helper (human-in-the-loop):
- Pick the word length to solve (any length present in the word list).
- After each guess YOU make in the game, type the word and the feedback you saw.
- Feedback accepted as: 'gyxxg' (x or b for grey), '21002', or a list '[2, 1, 0, 0, 2]'.
- The helper prunes the candidates and shows the top solution and information guesses.

Run:
  python -m solver.solver_cli --words words.txt

Shortcuts:
  quit / q / exit  -> exit
  l                -> list every remaining word
"""
from __future__ import annotations

import argparse
import logging
import re
from typing import Callable, List, Optional, Sequence

from sieve.constraints import SlotStatus
from sieve.data_utils import load_lexicon, load_opening_table
from sieve.errors import MalformedFeedback, UnsupportedWordLength
from sieve.feedback import Mark
from sieve.ranking import GuessRanker, ScoredSuggestion, SEARCH_MODES
from sieve.session import SolverSession, Suggestions
from sieve.vocab import Lexicon

QUIT = {"q", "quit", "exit"}
FEEDBACK_CHARS = {"g": Mark.GREEN, "y": Mark.YELLOW, "x": Mark.GRAY, "b": Mark.GRAY,
                  "2": Mark.GREEN, "1": Mark.YELLOW, "0": Mark.GRAY}


class Quit(Exception):
    """The user asked to leave."""


def parse_feedback(s: str, length: int = 5) -> List[Mark]:
    """Parse feedback for a `length`-letter guess into a list of Marks.
    Accepted forms:
      - letters: g/y/x  (green/yellow/grey; b also means grey)
      - digits:  2/1/0
      - list:   [0, 1, 2, 2, 0]
    Raises MalformedFeedback on invalid input.
    """
    s = s.strip().lower()
    # List-like form: [0,1,2,2,0]
    if s.startswith("[") and s.endswith("]"):
        nums = re.findall(r"[^\s,\[\]]+", s)
        if len(nums) != length or any(n not in ("0", "1", "2") for n in nums):
            raise MalformedFeedback(f"list form must contain exactly {length} 0/1/2 values")
        return [Mark(int(x)) for x in nums]

    if len(s) != length:
        raise MalformedFeedback(f"feedback must be exactly {length} characters long")
    try:
        return [FEEDBACK_CHARS[ch] for ch in s]
    except KeyError as e:
        raise MalformedFeedback("feedback can only use g/y/x (or b) or 2/1/0") from e


SLOT_MARKS = {SlotStatus.UNKNOWN: "_", SlotStatus.EXCLUDED: "?"}


def format_state(session: SolverSession) -> List[str]:
    state = session.state
    known = " ".join(
        s.locked.upper() if s.status is SlotStatus.LOCKED else SLOT_MARKS[s.status]
        for s in state.slots
    )
    greens = ", ".join(f"{ch} at position {i + 1}" for i, ch in state.locks().items())
    yellows = ", ".join(
        f"{','.join(sorted(letters))} not at position {i + 1}"
        for i, letters in state.exclusions().items()
    )
    greys = ", ".join(sorted(state.excluded))
    return [
        f"Pattern: {known}",
        f"Green letters (correct position): {greens or 'none'}",
        f"Yellow letters (wrong position): {yellows or 'none'}",
        f"Grey letters (not in word): {greys or 'none'}",
    ]


def format_columns(words: Sequence[str], columns: int = 5, width: int = 12) -> List[str]:
    return [
        "".join(w.ljust(width) for w in words[i:i + columns]).rstrip()
        for i in range(0, len(words), columns)
    ]


def format_suggestions(title: str, rows: Sequence[ScoredSuggestion]) -> List[str]:
    lines = [title]
    for i, r in enumerate(rows, 1):
        lines.append(f"  {i}. {r.word}  (score: {r.score:.1f})")
    return lines


class SolverCLI:
    """Prompt loop around a SolverSession; `ask` and `say` are swappable for tests."""

    def __init__(
        self,
        lexicon: Lexicon,
        ranker: GuessRanker,
        *,
        top: int = 5,
        ask: Callable[[str], str] = input,
        say: Callable[[str], None] = print,
    ) -> None:
        self.lexicon = lexicon
        self.ranker = ranker
        self.top = top
        self.ask = ask
        self.say = say
        self.session: Optional[SolverSession] = None

    def _prompt(self, query: str) -> str:
        answer = self.ask(query).strip()
        if answer.lower() in QUIT:
            raise Quit()
        return answer

    def choose_length(self, length: Optional[int] = None) -> SolverSession:
        lengths = self.lexicon.available_lengths()
        self.say(f"\nAvailable word lengths: {', '.join(str(n) for n in lengths)}")
        while True:
            if length is None:
                raw = self._prompt("Enter the length of words to solve (e.g., 4 or 5): ")
                try:
                    length = int(raw)
                except ValueError:
                    self.say(f"Invalid length. Please choose from: {', '.join(str(n) for n in lengths)}")
                    continue
            try:
                session = SolverSession(self.lexicon, length, self.ranker)
            except UnsupportedWordLength as e:
                self.say(f"Invalid length: {e}")
                length = None
                continue
            self.say(f"\nInitialized solver for {length}-letter words")
            return session

    def show(self, session: SolverSession) -> Suggestions:
        self.say("\nCurrent state:")
        for line in format_state(session):
            self.say(line)

        result = session.suggest(self.top)
        self.say(f"\nPossible words remaining: {len(result.candidates)}")
        if 0 < len(result.candidates) <= 10:
            self.say(f"All possible words: {', '.join(result.candidates)}")
        if result.solution:
            for line in format_suggestions("\nTop suggested guesses:", result.solution):
                self.say(line)
        if result.information:
            for line in format_suggestions("\nBest information guesses:", result.information):
                self.say(line)
        return result

    def play(self, session: SolverSession) -> None:
        """Run one game until it is solved, emptied, or the user quits."""
        while True:
            result = self.show(session)
            if not result.candidates:
                self.say("\nNo words match the current criteria. Please check your inputs.")
                return
            if len(result.candidates) == 1:
                self.say(f"\nCongratulations! The word must be: {result.candidates[0]}")
                return

            guess = self._prompt('\nEnter your guess (or "q" to quit, "l" to list all remaining words): ').lower()
            if guess == "l":
                self.say("\nAll remaining possible words:")
                for line in format_columns(result.candidates):
                    self.say(line)
                continue
            if len(guess) != session.word_length or not (guess.isalpha() and guess.isascii()):
                self.say(f"\nError: Please enter a {session.word_length}-letter word")
                continue

            while True:
                fb = self._prompt(f'Enter feedback for "{guess.upper()}" (g/y/x, 2/1/0 or [..]): ')
                try:
                    session.apply_feedback(guess, parse_feedback(fb, session.word_length))
                    break
                except MalformedFeedback as e:
                    self.say(f"\nError: {e}")

            if all(m == Mark.GREEN for m in session.history[-1][1]):
                self.say("Solved!")
                return

    def run(self, length: Optional[int] = None) -> None:
        self.say("\nWelcome to Wordle Solver!")
        try:
            while True:
                if self.session is None:
                    self.session = self.choose_length(length)
                self.play(self.session)
                again = self._prompt("\nWould you like to start a new game? (y/n): ").lower()
                if again != "y":
                    break
                self.session.reset()
                # ask for the word length again for the new game
                self.session = None
                length = None
        except Quit:
            pass
        self.say("\nThanks for using Wordle Solver!")


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Interactive Wordle solver (manual feedback)")
    ap.add_argument("--words", default="words.txt", help="Word list (.csv with a word column, or one word per line)")
    ap.add_argument("--column", default="word", help="CSV column holding the words")
    ap.add_argument("--length", type=int, default=None, help="Word length (asked interactively if omitted)")
    ap.add_argument("--top", type=int, default=5, help="Suggestions to show per strategy")
    ap.add_argument("--search", choices=SEARCH_MODES, default="pruned",
                    help="Information-guess search: pruned is faster but may miss the best guess")
    ap.add_argument("--openers", default=None, help="Opening table CSV from starting_word.eval")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    lexicon = load_lexicon(args.words, args.column)
    table = load_opening_table(args.openers) if args.openers else None
    ranker = GuessRanker(search=args.search, opening_table=table)
    SolverCLI(lexicon, ranker, top=args.top).run(args.length)


if __name__ == "__main__":
    main()
