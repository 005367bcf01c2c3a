from sieve.constraints import ConstraintState, filter_words
from sieve.feedback import score_pattern

WORDS = ["total", "stoal", "allot", "tally", "alloy", "atoll", "bleed", "blend",
         "sheet", "shelf", "speed", "crane", "trace", "eagle"]


def test_pruning_after_allot_pattern():
    # Small controlled pool so the test doesn't depend on a word list file
    words = ["total", "stoal", "allot", "tally", "alloy", "atoll"]
    state = ConstraintState()
    state.apply_feedback("allot", score_pattern("allot", "total"))  # [1,1,0,1,1]

    remaining = state.filter(words)

    # "total" and "stoal" are consistent; others are not.
    assert remaining == ["total", "stoal"]


def test_pruning_is_monotonic_with_more_feedback():
    words = ["total", "stoal", "bleed", "blend"]
    state = ConstraintState()
    state.apply_feedback("allot", score_pattern("allot", "total"))
    rem1 = set(state.filter(words))
    state.apply_feedback("stoal", score_pattern("stoal", "total"))
    rem2 = set(state.filter(words))
    # Candidate set should not grow as we add constraints
    assert rem2.issubset(rem1)
    # a yellow 'l' then a green 'l' are the same copy; the answer survives
    assert "total" in rem2


def test_multiplicity_reconciliation():
    remaining = filter_words(["sheet", "shelf", "speed"], {0: "s"}, {4: ["e"]}, ["e"])
    assert remaining == ["shelf"]


def test_excluded_letter_without_confirmation_is_absent():
    assert filter_words(["crane", "trace", "eagle"], {}, {}, ["e"]) == []
    assert filter_words(["crane", "tulip"], {}, {}, ["e"]) == ["tulip"]


def test_locked_and_excluded_letter_means_exact_count():
    # 'e' locked once and greyed elsewhere: exactly one 'e'
    assert filter_words(["sheet", "shelf", "sheen"], {2: "e"}, {}, ["e"]) == ["shelf"]


def test_misplaced_letters_must_appear_elsewhere():
    assert filter_words(["crane", "trace", "eagle"], {}, {1: {"a"}}, []) == ["crane", "trace"]
    assert filter_words(["crane", "trace", "eagle"], {}, {2: {"a"}}, []) == ["eagle"]


def test_duplicate_excluded_letters_are_tolerated():
    assert filter_words(WORDS, {}, {}, ["s", "s", "t", "t"]) == filter_words(WORDS, {}, {}, ["s", "t"])


def test_filter_is_idempotent():
    args = ({4: "l"}, {0: {"t"}}, ["y"])
    once = filter_words(WORDS, *args)
    assert filter_words(once, *args) == once


def test_adding_constraints_never_grows_the_set():
    base = filter_words(WORDS, {}, {}, [])
    locked = filter_words(WORDS, {0: "s"}, {}, [])
    excluded_pos = filter_words(WORDS, {0: "s"}, {3: {"e"}}, [])
    greyed = filter_words(WORDS, {0: "s"}, {3: {"e"}}, ["t"])
    assert set(greyed) <= set(excluded_pos) <= set(locked) <= set(base)
    assert base == WORDS


def test_contradictions_give_an_empty_set():
    assert filter_words(WORDS, {0: "z"}, {}, ["z"]) == []
    assert filter_words(WORDS, {0: "a"}, {0: {"a"}}, []) == []


def test_out_of_range_index_matches_nothing():
    assert filter_words(WORDS, {7: "a"}, {}, []) == []
    assert filter_words(WORDS, {}, {-1: {"a"}}, []) == []
